"""
Random source backends.

Adding a backend: implement `RandomSource` in its own module and register it in
`_REGISTRY` below.
"""

from __future__ import annotations

import logging

from qexplore.config.settings import Settings
from qexplore.core.errors import InvalidParameterError
from qexplore.rng.anu import AnuSource
from qexplore.rng.base import RandomSource, SourceInfo
from qexplore.rng.pseudo import PseudoSource, SeededPseudoSource

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type[RandomSource]] = {
    PseudoSource.name: PseudoSource,
    AnuSource.name: AnuSource,
}

__all__ = [
    "AnuSource",
    "PseudoSource",
    "RandomSource",
    "SeededPseudoSource",
    "SourceInfo",
    "available_sources",
    "get_source",
]


def get_source(name: str, *, settings: Settings | None = None, seed: int | None = None) -> RandomSource:
    """Build a random source by name.

    Unknown names fall back to the pseudo source. A `seed` is only meaningful for
    the pseudo source and selects its reproducible variant.
    """
    key = (name or "").strip().lower()
    if key not in _REGISTRY:
        logger.warning("Unknown random source '%s'; falling back to '%s'.", name, PseudoSource.name)
        key = PseudoSource.name

    if key == PseudoSource.name:
        return SeededPseudoSource(seed) if seed is not None else PseudoSource()

    if seed is not None:
        raise InvalidParameterError(f"Random source '{key}' cannot be seeded")
    return AnuSource(settings)


def available_sources() -> list[SourceInfo]:
    return [SourceInfo(name=cls.name, description=cls.description) for cls in _REGISTRY.values()]
