import math

import pytest

from qexplore.core.errors import InvalidCoordinatesError
from qexplore.core.geo import (
    DEFAULT_GEO,
    GeoConstants,
    haversine_distance,
    is_in_circle,
    offset_coordinates,
    wrap_longitude,
    wrap_longitude_delta,
)
from qexplore.domain.models import Coordinates


def test_haversine_one_degree_of_latitude():
    nyc = Coordinates(lat=40.7128, lng=-74.0060)
    north = Coordinates(lat=41.7128, lng=-74.0060)
    assert haversine_distance(nyc, north) == pytest.approx(DEFAULT_GEO.meters_per_degree_lat, rel=1e-9)
    assert abs(haversine_distance(nyc, north) - 111_000.0) < 1000.0


def test_haversine_across_the_antimeridian_is_short():
    a = Coordinates(lat=0.0, lng=179.999)
    b = Coordinates(lat=0.0, lng=-179.999)
    assert haversine_distance(a, b) == pytest.approx(0.002 * DEFAULT_GEO.meters_per_degree_lat, rel=1e-6)


def test_is_in_circle():
    center = Coordinates(lat=40.7128, lng=-74.0060)
    assert is_in_circle(center, center, 1000.0)
    assert is_in_circle(Coordinates(lat=40.7128 + 0.004, lng=-74.0060), center, 1000.0)
    assert not is_in_circle(Coordinates(lat=40.7128 + 0.02, lng=-74.0060), center, 1000.0)


def test_meters_per_degree_is_derived_from_earth_radius():
    assert DEFAULT_GEO.meters_per_degree_lat == pytest.approx(6_371_000.0 * math.pi / 180.0)
    assert GeoConstants(meters_per_degree_lat_override=111_320.0).meters_per_degree_lat == 111_320.0


def test_wrap_longitude():
    assert wrap_longitude(180.0) == 180.0
    assert wrap_longitude(-180.0) == -180.0
    assert wrap_longitude(190.0) == pytest.approx(-170.0)
    assert wrap_longitude(-540.5) == pytest.approx(179.5)
    assert wrap_longitude_delta(359.0) == pytest.approx(-1.0)
    assert wrap_longitude_delta(-359.0) == pytest.approx(1.0)


def test_offset_coordinates_round_trip_distance():
    center = Coordinates(lat=40.7128, lng=-74.0060)
    east = offset_coordinates(center, 0.0, 1000.0)
    north = offset_coordinates(center, 1000.0, 0.0)
    assert haversine_distance(center, east) == pytest.approx(1000.0, rel=1e-3)
    assert haversine_distance(center, north) == pytest.approx(1000.0, rel=1e-9)


def test_offset_coordinates_stays_valid_past_pole_and_antimeridian():
    over_pole = offset_coordinates(Coordinates(lat=89.999, lng=10.0), 1000.0, 0.0)
    assert over_pole.lat <= 90.0
    assert over_pole.lng == pytest.approx(-170.0)

    at_pole = offset_coordinates(Coordinates(lat=-90.0, lng=0.0), 0.0, 5000.0)
    assert at_pole == Coordinates(lat=-90.0, lng=0.0)

    past_dateline = offset_coordinates(Coordinates(lat=0.0, lng=179.999), 0.0, 1000.0)
    assert -180.0 <= past_dateline.lng < -179.99


@pytest.mark.parametrize(
    "lat,lng,fragment",
    [(90.5, 0.0, "Latitude"), (-91.0, 0.0, "Latitude"), (0.0, 180.01, "Longitude"), (0.0, -200.0, "Longitude")],
)
def test_validate_range_rejects_out_of_range(lat, lng, fragment):
    # Construction itself never rejects; validation is an explicit step.
    coords = Coordinates(lat=lat, lng=lng)
    with pytest.raises(InvalidCoordinatesError, match=fragment):
        coords.validate_range()


def test_validate_range_accepts_boundaries():
    for lat, lng in [(90.0, 180.0), (-90.0, -180.0), (0.0, 0.0)]:
        c = Coordinates(lat=lat, lng=lng)
        assert c.validate_range() is c
