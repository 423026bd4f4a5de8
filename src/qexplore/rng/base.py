"""
Random source interface.

Every backend (pseudo-random, quantum over HTTP, ...) implements `bytes`; `floats`
has a default built on top of it that backends may override for efficiency.
The sampling core only ever calls `floats(n)` once per circle.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

_U32_SCALE = 4_294_967_296.0  # 2**32


@dataclass(frozen=True)
class SourceInfo:
    """Name + description of a registered random source."""

    name: str
    description: str


class RandomSource(ABC):
    name: str = "abstract"
    description: str = ""

    @abstractmethod
    def bytes(self, n: int) -> bytes:
        """Return `n` random bytes.

        Raises:
            RandomSourceError: If the underlying source is unavailable.
        """

    def floats(self, n: int) -> list[float]:
        """Return `n` independent values uniformly distributed in [0, 1).

        Default: one `bytes(4 * n)` call, each big-endian u32 divided by 2**32.
        """
        if n <= 0:
            return []
        raw = self.bytes(n * 4)
        return [int.from_bytes(raw[i : i + 4], "big") / _U32_SCALE for i in range(0, n * 4, 4)]

    def info(self) -> SourceInfo:
        return SourceInfo(name=self.name, description=self.description)
