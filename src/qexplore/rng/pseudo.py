"""
Pseudo-random sources.

Not quantum random; fast, and deterministic when seeded, which makes them the
default for development and the only option for reproducible tests.
"""

from __future__ import annotations

import random

from qexplore.rng.base import RandomSource


class PseudoSource(RandomSource):
    name = "pseudo"
    description = "Pseudo-random number generator (for testing)"

    def __init__(self) -> None:
        self._rng = random.Random()

    def bytes(self, n: int) -> bytes:
        return self._rng.randbytes(max(0, n))

    def floats(self, n: int) -> list[float]:
        rnd = self._rng.random
        return [rnd() for _ in range(max(0, n))]


class SeededPseudoSource(PseudoSource):
    """Same sequence of values for the same seed."""

    name = "pseudo-seeded"
    description = "Seeded pseudo-random number generator (for reproducible testing)"

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._rng = random.Random(self.seed)
