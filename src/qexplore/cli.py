"""
q-explore CLI entrypoint.

Intended for quick local runs without the HTTP API. All generation logic lives in
`qexplore.coord.flower.generate`; this module only parses arguments and prints.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from qexplore.config.settings import get_settings
from qexplore.coord.flower import generate, geo_from_settings
from qexplore.core.errors import QExploreError
from qexplore.core.logging import configure_logging
from qexplore.domain.models import ANOMALY_ORDER, AnomalyType, Coordinates, GenerationMode, GenerationResponse
from qexplore.rng import available_sources, get_source


def _print_summary(response: GenerationResponse, display_type: AnomalyType) -> None:
    req = response.request
    print(f"Generated at: {response.metadata.timestamp}")
    print(f"Center: ({req.lat:.6f}, {req.lng:.6f})  radius={req.radius:g}m  mode={req.mode.value}  source={req.backend}")

    winner = response.winners.get(display_type)
    if winner is None:
        print(f"{display_type.value}: no result")
        return

    point = winner.result
    line = f"{display_type.value}: ({point.coords.lat:.6f}, {point.coords.lng:.6f}) circle={winner.circle_id}"
    if point.z_score is not None:
        line += f" z={point.z_score:.3f}"
    if point.is_attractor is not None:
        line += " (attractor)" if point.is_attractor else " (void)"
    print(line)


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the `generate` subcommand."""
    settings = get_settings()
    defaults = settings.generation

    try:
        display_type = AnomalyType.parse(args.type or defaults.anomaly_type)
        source = get_source(args.backend or defaults.backend, settings=settings, seed=args.seed)
        response = generate(
            Coordinates(lat=float(args.lat), lng=float(args.lng)),
            float(args.radius if args.radius is not None else defaults.radius),
            int(args.points if args.points is not None else defaults.points),
            int(args.grid_resolution if args.grid_resolution is not None else defaults.grid_resolution),
            bool(args.include_points),
            args.mode or defaults.mode,
            source,
            geo=geo_from_settings(settings),
        )
    except (QExploreError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(response.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    _print_summary(response, display_type)
    return 0


def _cmd_types(_: argparse.Namespace) -> int:
    print("Available anomaly types:")
    for anomaly_type in ANOMALY_ORDER:
        print(f"  {anomaly_type.value:<11} - {anomaly_type.description}")
    return 0


def _cmd_backends(_: argparse.Namespace) -> int:
    print("Available random sources:")
    for info in available_sources():
        print(f"  {info.name:<11} - {info.description}")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "qexplore.api.app:app",
        host=args.host or settings.server.host,
        port=int(args.port or settings.server.port),
        log_config=None,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the q-explore CLI."""
    parser = argparse.ArgumentParser(prog="q-explore")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Pick notable random locations around a center point.")
    gen.add_argument("--lat", required=True, type=float)
    gen.add_argument("--lng", required=True, type=float)
    gen.add_argument("--radius", "-r", type=float, default=None, help="Search radius in meters")
    gen.add_argument("--points", "-p", type=int, default=None, help="Points sampled per circle")
    gen.add_argument("--grid-resolution", dest="grid_resolution", type=int, default=None)
    gen.add_argument(
        "--mode",
        "-m",
        type=str,
        default=None,
        choices=[m.value for m in GenerationMode],
    )
    gen.add_argument("--backend", "-b", type=str, default=None, help="Random source name (see `backends`)")
    gen.add_argument("--seed", type=int, default=None, help="Seed the pseudo source for reproducible output")
    gen.add_argument("--type", "-t", type=str, default=None, help="Anomaly type to display (see `types`)")
    gen.add_argument("--include-points", action="store_true", help="Keep every sampled point in the output")
    gen.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    gen.set_defaults(func=_cmd_generate)

    types = sub.add_parser("types", help="List anomaly types.")
    types.set_defaults(func=_cmd_types)

    backends = sub.add_parser("backends", help="List random sources.")
    backends.set_defaults(func=_cmd_backends)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m qexplore.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
