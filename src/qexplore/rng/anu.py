"""
ANU Quantum Random Number Generator source.

Uses the Australian National University QRNG JSON API:
https://qrng.anu.edu.au/contact/api-documentation/

This module is responsible only for fetching uint8 blocks and turning them into
bytes/floats. It does not retry: any failure surfaces as `RandomSourceError`,
and the caller decides what to do with the aborted generation.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from qexplore.config.settings import Settings, get_settings
from qexplore.core.errors import RandomSourceError
from qexplore.core.http import get_json
from qexplore.rng.base import RandomSource

logger = logging.getLogger(__name__)

_U53_SCALE = 9_007_199_254_740_992.0  # 2**53


class AnuSource(RandomSource):
    name = "anu"
    description = "Australian National University Quantum Random Number Generator"

    def __init__(self, settings: Settings | None = None, *, api_key: str | None = None):
        self._settings = settings or get_settings()
        self._api_key = api_key if api_key is not None else self._settings.anu.api_key

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def _fetch_block(self, length: int) -> list[int]:
        """Fetch one block of at most `max_block_size` uint8 values."""
        params: dict[str, Any] = {"length": length, "type": "uint8"}
        if self._api_key:
            params["api_key"] = self._api_key

        try:
            payload = get_json(
                self._settings.anu.base_url,
                params=params,
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except httpx.HTTPStatusError as e:
            raise RandomSourceError(f"ANU API returned status: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RandomSourceError(f"ANU API request failed: {e}") from e
        except ValueError as e:
            raise RandomSourceError(f"Failed to parse ANU response: {e}") from e

        if not isinstance(payload, dict) or not payload.get("success"):
            raise RandomSourceError("ANU API returned failure status")
        data = payload.get("data")
        if not isinstance(data, list) or len(data) != length:
            raise RandomSourceError("ANU API returned no data or a short block")
        if not all(isinstance(v, int) and 0 <= v <= 255 for v in data):
            raise RandomSourceError("ANU API returned values outside uint8 range")
        return data

    def bytes(self, n: int) -> bytes:
        if n <= 0:
            return b""

        block = int(self._settings.anu.max_block_size)
        out = bytearray()
        remaining = n
        while remaining > 0:
            size = min(remaining, block)
            logger.debug("Fetching %d bytes from ANU QRNG", size)
            out.extend(self._fetch_block(size))
            remaining -= size
        return bytes(out)

    def floats(self, n: int) -> list[float]:
        if n <= 0:
            return []
        # 8 bytes per value; keep the top 53 bits so the result is strictly below 1.0.
        raw = self.bytes(n * 8)
        return [(int.from_bytes(raw[i : i + 8], "little") >> 11) / _U53_SCALE for i in range(0, n * 8, 8)]
