"""
Anomaly detection for one circle, and winner selection across circles.

Anomaly types:
- blind_spot: the first sampled point, no analysis;
- attractor: cell with the highest z-score (densest);
- void: cell with the lowest z-score (emptiest);
- power: cell with the highest |z|, flagged as attractor or void.

Ties always go to whatever was seen first (row-major within a grid, input order
across circles): a candidate replaces the current best only if strictly better.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from qexplore.coord.density import (
    DEFAULT_GRID_RESOLUTION,
    DensityGrid,
    find_densest_cell,
    find_emptiest_cell,
    find_most_anomalous_cell,
)
from qexplore.coord.sampler import generate_points_in_circle
from qexplore.core.geo import DEFAULT_GEO, GeoConstants
from qexplore.domain.models import ANOMALY_ORDER, AnomalyType, CircleResult, Coordinates, Point, WinnerResult
from qexplore.rng.base import RandomSource

logger = logging.getLogger(__name__)

DEFAULT_POINT_COUNT = 10_000


def find_all_anomalies(
    center: Coordinates,
    radius: float,
    points: Sequence[Coordinates],
    grid_resolution: int = DEFAULT_GRID_RESOLUTION,
    geo: GeoConstants = DEFAULT_GEO,
) -> dict[AnomalyType, Point]:
    """Extract every anomaly type that the data supports; missing types are simply absent."""
    found: dict[AnomalyType, Point] = {}
    if points:
        found[AnomalyType.BLIND_SPOT] = Point(coords=points[0])

    grid = DensityGrid(center, radius, grid_resolution, geo)
    grid.add_points(points)
    scores = grid.calculate_z_scores()

    densest = find_densest_cell(grid, scores)
    if densest is not None:
        found[AnomalyType.ATTRACTOR] = Point.with_z_score(densest.coords, densest.z_score)

    emptiest = find_emptiest_cell(grid, scores)
    if emptiest is not None:
        found[AnomalyType.VOID] = Point.with_z_score(emptiest.coords, emptiest.z_score)

    anomalous = find_most_anomalous_cell(grid, scores)
    if anomalous is not None:
        cell, is_attractor = anomalous
        found[AnomalyType.POWER] = Point.power(cell.coords, cell.z_score, is_attractor)

    return found


def analyze_circle(
    circle_id: str,
    center: Coordinates,
    radius: float,
    point_count: int,
    grid_resolution: int,
    include_points: bool,
    source: RandomSource,
    geo: GeoConstants = DEFAULT_GEO,
) -> CircleResult:
    """Sample one circle, analyze its density, and package the result.

    Raw points are kept only when `include_points` is set.
    """
    points = generate_points_in_circle(center, radius, point_count, source, geo)
    anomalies = find_all_anomalies(center, radius, points, grid_resolution, geo)
    logger.debug(
        "Analyzed circle %s at (%.6f, %.6f) r=%.0fm: %d points, %d anomaly types",
        circle_id,
        center.lat,
        center.lng,
        radius,
        len(points),
        len(anomalies),
    )
    return CircleResult(
        id=circle_id,
        center=center,
        radius=radius,
        anomalies=anomalies,
        points=points if include_points else None,
    )


def _z(point: Point, missing: float) -> float:
    return point.z_score if point.z_score is not None else missing


# (candidate, current best) -> candidate strictly better?
_BEATS: dict[AnomalyType, Callable[[Point, Point], bool]] = {
    AnomalyType.BLIND_SPOT: lambda cand, best: False,
    AnomalyType.ATTRACTOR: lambda cand, best: _z(cand, float("-inf")) > _z(best, float("-inf")),
    AnomalyType.VOID: lambda cand, best: _z(cand, float("inf")) < _z(best, float("inf")),
    AnomalyType.POWER: lambda cand, best: abs(_z(cand, 0.0)) > abs(_z(best, 0.0)),
}


def find_winner(circles: Sequence[CircleResult], anomaly_type: AnomalyType) -> WinnerResult | None:
    """Best result for one anomaly type across circles (earlier circles win ties)."""
    beats = _BEATS[anomaly_type]
    best: WinnerResult | None = None
    for circle in circles:
        point = circle.anomalies.get(anomaly_type)
        if point is None:
            continue
        if best is None or beats(point, best.result):
            best = WinnerResult(circle_id=circle.id, result=point)
    return best


def find_all_winners(circles: Sequence[CircleResult]) -> dict[AnomalyType, WinnerResult]:
    winners: dict[AnomalyType, WinnerResult] = {}
    for anomaly_type in ANOMALY_ORDER:
        winner = find_winner(circles, anomaly_type)
        if winner is not None:
            winners[anomaly_type] = winner
    return winners
