"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- generation inputs (`Coordinates`, `GenerationMode`, `GenerationRequest`)
- per-circle analysis output (`Point`, `CircleResult`)
- the final snapshot handed to the CLI/API (`GenerationResponse`)

Result models are frozen: they are created once per generation and never mutated.
`model_dump(mode="json")` turns any of them into plain nested dicts/lists.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from qexplore.core.errors import InvalidCoordinatesError


class Coordinates(BaseModel):
    """A latitude/longitude pair in decimal degrees.

    Construction does not enforce ranges; call `validate_range()` before using
    caller-supplied coordinates.
    """

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    def validate_range(self) -> "Coordinates":
        if not -90.0 <= self.lat <= 90.0:
            raise InvalidCoordinatesError(f"Latitude {self.lat} is out of range [-90, 90]")
        if not -180.0 <= self.lng <= 180.0:
            raise InvalidCoordinatesError(f"Longitude {self.lng} is out of range [-180, 180]")
        return self


class AnomalyType(str, Enum):
    BLIND_SPOT = "blind_spot"
    ATTRACTOR = "attractor"
    VOID = "void"
    POWER = "power"

    @classmethod
    def parse(cls, value: str) -> "AnomalyType":
        key = value.strip().lower().replace("-", "_")
        if key == "blindspot":
            key = "blind_spot"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown anomaly type: {value}") from None

    @property
    def description(self) -> str:
        return _ANOMALY_DESCRIPTIONS[self]


_ANOMALY_DESCRIPTIONS = {
    AnomalyType.BLIND_SPOT: "Random point with no analysis",
    AnomalyType.ATTRACTOR: "Densest cluster of points",
    AnomalyType.VOID: "Emptiest region",
    AnomalyType.POWER: "Most statistically anomalous",
}

# Fixed traversal order; winner tie-breaking depends on it.
ANOMALY_ORDER: tuple[AnomalyType, ...] = (
    AnomalyType.BLIND_SPOT,
    AnomalyType.ATTRACTOR,
    AnomalyType.VOID,
    AnomalyType.POWER,
)


class GenerationMode(str, Enum):
    STANDARD = "standard"
    FLOWER_POWER = "flower_power"

    @classmethod
    def parse(cls, value: str) -> "GenerationMode":
        key = value.strip().lower().replace("-", "_")
        if key == "flowerpower":
            key = "flower_power"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown generation mode: {value}") from None


class Point(BaseModel):
    """One anomaly result: a location plus optional statistics."""

    model_config = ConfigDict(frozen=True)

    coords: Coordinates
    z_score: float | None = None
    is_attractor: bool | None = None

    @classmethod
    def with_z_score(cls, coords: Coordinates, z_score: float) -> "Point":
        return cls(coords=coords, z_score=z_score)

    @classmethod
    def power(cls, coords: Coordinates, z_score: float, is_attractor: bool) -> "Point":
        return cls(coords=coords, z_score=z_score, is_attractor=is_attractor)


class CircleResult(BaseModel):
    """Anomalies found inside one circle ("center", "petal_0", ...)."""

    model_config = ConfigDict(frozen=True)

    id: str
    center: Coordinates
    radius: float
    anomalies: dict[AnomalyType, Point] = Field(default_factory=dict)
    points: list[Coordinates] | None = None


class WinnerResult(BaseModel):
    """The globally best result for one anomaly type and the circle that produced it."""

    model_config = ConfigDict(frozen=True)

    circle_id: str
    result: Point


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    radius: float
    points: int
    grid_resolution: int
    backend: str
    mode: GenerationMode
    include_points: bool = False


class GenerationMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str
    version: str


class GenerationResponse(BaseModel):
    """Full output of one `generate` call (1 circle for standard, 7 for flower power)."""

    model_config = ConfigDict(frozen=True)

    id: str
    request: GenerationRequest
    circles: list[CircleResult]
    winners: dict[AnomalyType, WinnerResult] = Field(default_factory=dict)
    metadata: GenerationMetadata
