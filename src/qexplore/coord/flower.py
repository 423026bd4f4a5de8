"""
Generation entrypoint: standard (one circle) and flower power (seven circles).

Flower layout: a center circle plus six petals at bearings 0, 60, ..., 300 degrees,
every circle with half the requested radius and each petal offset by that sub-radius.

Circles are analyzed one after another in label order and each draws its own
`2 * point_count` uniforms in a single call, so a seeded source reproduces the
whole response. Winner selection runs only after every circle is done.
"""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime, timezone

from qexplore import __version__
from qexplore.config.settings import Settings, get_settings
from qexplore.coord.anomaly import analyze_circle, find_all_winners
from qexplore.coord.sampler import check_radius
from qexplore.core.errors import InvalidParameterError, UnsupportedModeError
from qexplore.core.geo import DEFAULT_GEO, GeoConstants, offset_coordinates
from qexplore.domain.models import (
    AnomalyType,
    CircleResult,
    Coordinates,
    GenerationMetadata,
    GenerationMode,
    GenerationRequest,
    GenerationResponse,
    WinnerResult,
)
from qexplore.rng.base import RandomSource

logger = logging.getLogger(__name__)

FLOWER_POWER_MIN_RADIUS = 3000.0
PETAL_COUNT = 6


def calculate_petal_centers(
    center: Coordinates, offset_m: float, geo: GeoConstants = DEFAULT_GEO
) -> list[Coordinates]:
    """Centers of the six petals, hexagonally spaced `offset_m` from `center`."""
    petals = []
    for i in range(PETAL_COUNT):
        bearing = i * math.pi / 3
        petals.append(offset_coordinates(center, offset_m * math.cos(bearing), offset_m * math.sin(bearing), geo))
    return petals


def _resolve_mode(mode: GenerationMode | str) -> GenerationMode:
    if isinstance(mode, GenerationMode):
        return mode
    try:
        return GenerationMode.parse(str(mode))
    except ValueError as e:
        raise UnsupportedModeError(str(e)) from e


def validate_request(
    center: Coordinates,
    radius: float,
    point_count: int,
    grid_resolution: int,
    mode: GenerationMode | str,
    geo: GeoConstants = DEFAULT_GEO,
) -> GenerationMode:
    """Check every input before any random value is drawn; returns the parsed mode."""
    center.validate_range()
    check_radius(radius, geo)
    if int(point_count) < 0:
        raise InvalidParameterError(f"Point count must be >= 0, got {point_count}")
    if int(grid_resolution) < 1:
        raise InvalidParameterError(f"Grid resolution must be >= 1, got {grid_resolution}")

    resolved = _resolve_mode(mode)
    if resolved is GenerationMode.FLOWER_POWER and radius < FLOWER_POWER_MIN_RADIUS:
        raise UnsupportedModeError(
            f"Flower power mode requires a radius of at least {FLOWER_POWER_MIN_RADIUS:.0f} m, got {radius:g} m"
        )
    return resolved


def generate_circles(
    center: Coordinates,
    radius: float,
    point_count: int,
    grid_resolution: int,
    include_points: bool,
    mode: GenerationMode | str,
    source: RandomSource,
    geo: GeoConstants = DEFAULT_GEO,
) -> tuple[list[CircleResult], dict[AnomalyType, WinnerResult]]:
    """Run the circle analyses for `mode` and pick the cross-circle winners."""
    resolved = validate_request(center, radius, point_count, grid_resolution, mode, geo)
    point_count = int(point_count)
    grid_resolution = int(grid_resolution)

    if resolved is GenerationMode.STANDARD:
        layout = [("center", center)]
        circle_radius = float(radius)
    else:
        circle_radius = float(radius) / 2.0
        petals = calculate_petal_centers(center, circle_radius, geo)
        layout = [("center", center), *[(f"petal_{i}", p) for i, p in enumerate(petals)]]

    circles = [
        analyze_circle(cid, ccenter, circle_radius, point_count, grid_resolution, include_points, source, geo)
        for cid, ccenter in layout
    ]
    return circles, find_all_winners(circles)


def generate(
    center: Coordinates,
    radius: float,
    point_count: int,
    grid_resolution: int,
    include_points: bool,
    mode: GenerationMode | str,
    source: RandomSource,
    *,
    backend_name: str | None = None,
    geo: GeoConstants = DEFAULT_GEO,
) -> GenerationResponse:
    """Generate a full response snapshot. Errors (validation or random source) propagate."""
    resolved = _resolve_mode(mode)
    logger.info(
        "Generating %s at (%.6f, %.6f) radius=%gm points=%s source=%s",
        resolved.value,
        center.lat,
        center.lng,
        radius,
        point_count,
        backend_name or source.name,
    )
    circles, winners = generate_circles(
        center, radius, point_count, grid_resolution, include_points, resolved, source, geo
    )

    return GenerationResponse(
        id=str(uuid.uuid4()),
        request=GenerationRequest(
            lat=center.lat,
            lng=center.lng,
            radius=float(radius),
            points=int(point_count),
            grid_resolution=int(grid_resolution),
            backend=backend_name or source.name,
            mode=resolved,
            include_points=include_points,
        ),
        circles=circles,
        winners=winners,
        metadata=GenerationMetadata(
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=__version__,
        ),
    )


def geo_from_settings(settings: Settings) -> GeoConstants:
    if settings.geo.earth_radius_m == DEFAULT_GEO.earth_radius_m:
        return DEFAULT_GEO
    return GeoConstants(earth_radius_m=settings.geo.earth_radius_m)


def generate_with_defaults(
    center: Coordinates,
    radius: float,
    mode: GenerationMode | str,
    source: RandomSource,
    settings: Settings | None = None,
) -> GenerationResponse:
    """`generate` with point count, grid resolution and Earth model taken from settings."""
    settings = settings or get_settings()
    return generate(
        center,
        radius,
        settings.generation.points,
        settings.generation.grid_resolution,
        False,
        mode,
        source,
        geo=geo_from_settings(settings),
    )
