"""
Grid-based density analysis.

A square `resolution x resolution` grid covers the circle's bounding box. Cells whose
centers fall outside the inscribed circle are masked out once, at construction, from
pure geometry. Points are binned through a local planar projection (meters per degree),
then each in-circle cell gets a z-score against a Poisson null model:

    expected = total / cells_in_circle
    z        = (observed - expected) / sqrt(expected)
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from qexplore.core.geo import DEFAULT_GEO, GeoConstants, meters_per_degree_lng, offset_coordinates, wrap_longitude_delta
from qexplore.domain.models import Coordinates

DEFAULT_GRID_RESOLUTION = 50

ZScores = list[list[float | None]]


class DensityGrid:
    """Point counts per cell for one circle. Owned by a single analysis run."""

    def __init__(
        self,
        center: Coordinates,
        radius: float,
        resolution: int = DEFAULT_GRID_RESOLUTION,
        geo: GeoConstants = DEFAULT_GEO,
    ):
        if int(resolution) < 1:
            raise ValueError("resolution must be >= 1")
        self.center = center
        self.radius = float(radius)
        self.resolution = int(resolution)
        self.cell_size = (2.0 * self.radius) / self.resolution
        self._geo = geo
        self._mpd_lat = geo.meters_per_degree_lat
        self._mpd_lng = meters_per_degree_lng(center.lat, geo)

        n = self.resolution
        half = n / 2.0
        self.in_circle: list[list[bool]] = [
            [(col + 0.5 - half) ** 2 + (row + 0.5 - half) ** 2 <= half * half for col in range(n)]
            for row in range(n)
        ]
        self.cells: list[list[int]] = [[0] * n for _ in range(n)]
        self.total_points = 0

    def _cell_index(self, point: Coordinates) -> tuple[int, int] | None:
        dy_m = (point.lat - self.center.lat) * self._mpd_lat
        dx_m = wrap_longitude_delta(point.lng - self.center.lng) * self._mpd_lng
        row = math.floor((dy_m + self.radius) / self.cell_size)
        col = math.floor((dx_m + self.radius) / self.cell_size)
        if 0 <= row < self.resolution and 0 <= col < self.resolution:
            return row, col
        return None

    def add_points(self, points: Iterable[Coordinates]) -> None:
        """Bin points into cells; points outside the grid or the circle mask are dropped."""
        for point in points:
            idx = self._cell_index(point)
            if idx is None:
                continue
            row, col = idx
            if self.in_circle[row][col]:
                self.cells[row][col] += 1
                self.total_points += 1

    def cells_in_circle(self) -> int:
        return sum(sum(1 for v in row if v) for row in self.in_circle)

    def calculate_z_scores(self) -> ZScores:
        """Per-cell z-scores; None for masked cells, or everywhere when there is no data."""
        n = self.resolution
        in_circle = self.cells_in_circle()
        if in_circle == 0 or self.total_points == 0:
            return [[None] * n for _ in range(n)]

        expected = self.total_points / in_circle
        std_dev = math.sqrt(expected)
        return [
            [
                (self.cells[row][col] - expected) / std_dev if self.in_circle[row][col] else None
                for col in range(n)
            ]
            for row in range(n)
        ]

    def cell_to_coords(self, row: int, col: int) -> Coordinates:
        """Center of a cell, using the inverse of the binning projection."""
        north_m = (row + 0.5) * self.cell_size - self.radius
        east_m = (col + 0.5) * self.cell_size - self.radius
        return offset_coordinates(self.center, north_m, east_m, self._geo)


@dataclass(frozen=True)
class CellResult:
    """One grid cell picked by an extraction."""

    row: int
    col: int
    count: int
    z_score: float
    coords: Coordinates


def _best_cell(
    grid: DensityGrid,
    scores: ZScores | None,
    better: Callable[[float, float], bool],
) -> CellResult | None:
    # Row-major scan; a later cell replaces the best only when strictly better.
    scores = scores if scores is not None else grid.calculate_z_scores()
    best: tuple[int, int, float] | None = None
    for row, row_scores in enumerate(scores):
        for col, z in enumerate(row_scores):
            if z is None:
                continue
            if best is None or better(z, best[2]):
                best = (row, col, z)

    if best is None:
        return None
    row, col, z = best
    return CellResult(row=row, col=col, count=grid.cells[row][col], z_score=z, coords=grid.cell_to_coords(row, col))


def find_densest_cell(grid: DensityGrid, scores: ZScores | None = None) -> CellResult | None:
    return _best_cell(grid, scores, lambda z, cur: z > cur)


def find_emptiest_cell(grid: DensityGrid, scores: ZScores | None = None) -> CellResult | None:
    return _best_cell(grid, scores, lambda z, cur: z < cur)


def find_most_anomalous_cell(
    grid: DensityGrid, scores: ZScores | None = None
) -> tuple[CellResult, bool] | None:
    """Cell with the largest |z|, plus whether it is an attractor (z > 0)."""
    cell = _best_cell(grid, scores, lambda z, cur: abs(z) > abs(cur))
    if cell is None:
        return None
    return cell, cell.z_score > 0
