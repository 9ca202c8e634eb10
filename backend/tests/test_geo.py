import math

import pytest

from tracker.gps.geo import distance_meters, path_length_meters
from helpers import offset, rectangle_route


def test_identical_points_are_zero():
    for lat, lon in [(0.0, 0.0), (47.37, 8.54), (-33.9, 151.2), (89.9, -179.9)]:
        assert distance_meters(lat, lon, lat, lon) == 0.0


def test_distance_is_symmetric():
    pairs = [((47.0, 8.0), (47.01, 8.02)), ((-10.0, 170.0), (10.0, -170.0)), ((0.0, 0.0), (0.0, 1.0))]
    for (a_lat, a_lon), (b_lat, b_lon) in pairs:
        assert distance_meters(a_lat, a_lon, b_lat, b_lon) == pytest.approx(
            distance_meters(b_lat, b_lon, a_lat, a_lon)
        )


def test_one_degree_of_longitude_on_equator():
    # 6371 km * pi / 180
    assert distance_meters(0.0, 0.0, 0.0, 1.0) == pytest.approx(111194.93, rel=1e-6)


def test_known_offset_is_recovered():
    lat, lon = offset(47.0, 8.0, 300.0, 400.0)
    assert distance_meters(47.0, 8.0, lat, lon) == pytest.approx(500.0, rel=1e-3)


def test_nan_propagates():
    assert math.isnan(distance_meters(float("nan"), 0.0, 0.0, 0.0))


def test_path_length_of_rectangle():
    assert path_length_meters(rectangle_route()) == pytest.approx(1000.0, rel=0.01)
    assert path_length_meters([]) == 0.0
