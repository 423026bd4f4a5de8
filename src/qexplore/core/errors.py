"""
Error types.

Validation failures derive from `ValueError` so API/CLI layers can treat them as bad input;
random-source failures derive from `RuntimeError` because the request itself was fine.
"""

from __future__ import annotations


class QExploreError(Exception):
    """Base class for all q-explore errors."""


class GenerationError(QExploreError, ValueError):
    """A generation request was rejected before any random draw."""

    code = "GENERATION_ERROR"


class InvalidCoordinatesError(GenerationError):
    code = "INVALID_COORDINATES"


class InvalidRadiusError(GenerationError):
    code = "INVALID_RADIUS"


class UnsupportedModeError(GenerationError):
    code = "UNSUPPORTED_MODE"


class InvalidParameterError(GenerationError):
    code = "INVALID_PARAMETER"


class RandomSourceError(QExploreError, RuntimeError):
    """The random source could not deliver the requested values."""

    code = "RANDOM_SOURCE_ERROR"
