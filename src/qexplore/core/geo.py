from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, pi, radians, sin, sqrt

from qexplore.domain.models import Coordinates

"""
Geospatial helpers.

A tiny geometry layer shared by the sampler, the density grid and the flower layout.
Constants are carried in `GeoConstants` instead of module globals so tests can swap them.
"""

# Below this |cos(lat)| a planar east/west offset has no defined longitude.
_POLE_EPSILON = 1e-12


@dataclass(frozen=True)
class GeoConstants:
    """Earth model used by every geometric calculation."""

    earth_radius_m: float = 6_371_000.0
    meters_per_degree_lat_override: float | None = None

    @property
    def meters_per_degree_lat(self) -> float:
        if self.meters_per_degree_lat_override is not None:
            return float(self.meters_per_degree_lat_override)
        return self.earth_radius_m * pi / 180.0

    @property
    def max_radius_m(self) -> float:
        """Largest geodesic radius that is still a spherical cap (half the circumference)."""
        return pi * self.earth_radius_m


DEFAULT_GEO = GeoConstants()


def haversine_distance(p1: Coordinates, p2: Coordinates, geo: GeoConstants = DEFAULT_GEO) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(p1.lat)
    lat2 = radians(p2.lat)
    dlat = radians(p2.lat - p1.lat)
    dlng = radians(p2.lng - p1.lng)

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    a = min(1.0, max(0.0, a))
    return geo.earth_radius_m * 2 * atan2(sqrt(a), sqrt(1 - a))


def is_in_circle(
    point: Coordinates, center: Coordinates, radius_m: float, geo: GeoConstants = DEFAULT_GEO
) -> bool:
    return haversine_distance(point, center, geo) <= radius_m


def meters_per_degree_lng(lat: float, geo: GeoConstants = DEFAULT_GEO) -> float:
    """Latitude-corrected meters per degree of longitude (0 at the poles)."""
    return geo.meters_per_degree_lat * cos(radians(lat))


def wrap_longitude(lng: float) -> float:
    """Bring a longitude into [-180, 180]; in-range values are returned unchanged."""
    if -180.0 <= lng <= 180.0:
        return lng
    return ((lng + 180.0) % 360.0) - 180.0


def wrap_longitude_delta(dlng: float) -> float:
    """Shortest signed longitude difference in [-180, 180)."""
    return ((dlng + 180.0) % 360.0) - 180.0


def offset_coordinates(
    center: Coordinates, north_m: float, east_m: float, geo: GeoConstants = DEFAULT_GEO
) -> Coordinates:
    """Shift `center` by planar meter offsets using meters-per-degree conversion.

    The result is folded back into valid ranges: latitude past a pole is reflected
    (and the longitude flipped by 180 degrees), longitude is wrapped.
    """
    lat = center.lat + north_m / geo.meters_per_degree_lat
    mpd_lng = meters_per_degree_lng(center.lat, geo)
    lng = center.lng + (east_m / mpd_lng if abs(mpd_lng) > _POLE_EPSILON * geo.meters_per_degree_lat else 0.0)

    if lat > 90.0:
        lat = 180.0 - lat
        lng += 180.0
    elif lat < -90.0:
        lat = -180.0 - lat
        lng += 180.0
    return Coordinates(lat=lat, lng=wrap_longitude(lng))
