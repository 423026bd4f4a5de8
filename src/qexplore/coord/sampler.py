"""
Uniform point sampling inside a geodesic circle (spherical cap).

Each point consumes two uniforms `u1, u2`:
- `z = 1 - u1 * (1 - cos(theta))` is linear in `u1`, so *area* (not angle) is uniform;
- `phi = 2 * pi * u2` is the azimuth around the cap axis.

The cap is built around the north pole of a unit sphere and then rotated onto the
real center (co-latitude about the y axis, longitude about the polar axis). No step
divides by cos(lat), so poles and the antimeridian need no special cases.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from qexplore.core.errors import InvalidRadiusError
from qexplore.core.geo import DEFAULT_GEO, GeoConstants
from qexplore.domain.models import Coordinates
from qexplore.rng.base import RandomSource


def check_radius(radius_m: float, geo: GeoConstants = DEFAULT_GEO) -> float:
    """Reject radii that are not a proper spherical cap."""
    radius = float(radius_m)
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidRadiusError(f"Radius must be a positive number of meters, got {radius_m}")
    if radius > geo.max_radius_m:
        raise InvalidRadiusError(
            f"Radius {radius:.0f} m exceeds half the Earth's circumference ({geo.max_radius_m:.0f} m)"
        )
    return radius


class _CapRotation:
    """Precomputed trig for mapping cap-at-north-pole points onto `center`."""

    __slots__ = ("one_minus_cos_theta", "sin_colat", "cos_colat", "sin_lng", "cos_lng")

    def __init__(self, center: Coordinates, radius_m: float, geo: GeoConstants):
        theta = radius_m / geo.earth_radius_m
        colat = math.pi / 2 - math.radians(center.lat)
        lng = math.radians(center.lng)
        # 2*sin^2(theta/2) == 1 - cos(theta) without cancellation for small caps.
        self.one_minus_cos_theta = 2.0 * math.sin(theta / 2.0) ** 2
        self.sin_colat = math.sin(colat)
        self.cos_colat = math.cos(colat)
        self.sin_lng = math.sin(lng)
        self.cos_lng = math.cos(lng)

    def point(self, u1: float, u2: float) -> Coordinates:
        h = u1 * self.one_minus_cos_theta
        z = 1.0 - h
        r = math.sqrt(max(0.0, h * (2.0 - h)))
        phi = 2.0 * math.pi * u2
        x = r * math.cos(phi)
        y = r * math.sin(phi)

        # Tilt the pole down to the center's latitude.
        x1 = x * self.cos_colat + z * self.sin_colat
        z1 = -x * self.sin_colat + z * self.cos_colat
        # Spin to the center's longitude.
        x2 = x1 * self.cos_lng - y * self.sin_lng
        y2 = x1 * self.sin_lng + y * self.cos_lng

        # atan2 form of asin(z1); stays accurate next to the poles.
        lat = math.degrees(math.atan2(z1, math.hypot(x2, y2)))
        lng = math.degrees(math.atan2(y2, x2))
        return Coordinates(lat=lat, lng=lng)


def points_from_uniforms(
    center: Coordinates,
    radius_m: float,
    uniforms: Sequence[float],
    geo: GeoConstants = DEFAULT_GEO,
) -> list[Coordinates]:
    """Map consecutive `(u1, u2)` pairs to points in the cap. A trailing odd value is ignored."""
    rotation = _CapRotation(center, radius_m, geo)
    return [rotation.point(uniforms[i], uniforms[i + 1]) for i in range(0, len(uniforms) - 1, 2)]


def generate_point_in_circle(
    center: Coordinates,
    radius_m: float,
    source: RandomSource,
    geo: GeoConstants = DEFAULT_GEO,
) -> Coordinates:
    """Draw a single uniformly distributed point within `radius_m` of `center`."""
    radius = check_radius(radius_m, geo)
    return points_from_uniforms(center, radius, source.floats(2), geo)[0]


def generate_points_in_circle(
    center: Coordinates,
    radius_m: float,
    count: int,
    source: RandomSource,
    geo: GeoConstants = DEFAULT_GEO,
) -> list[Coordinates]:
    """Draw `count` points; all `2 * count` uniforms come from one `floats` call."""
    radius = check_radius(radius_m, geo)
    if count <= 0:
        return []
    return points_from_uniforms(center, radius, source.floats(2 * count), geo)
