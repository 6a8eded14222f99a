from __future__ import annotations

import math

import pytest

from isswatch.distance import distance_km, haversine_km
from isswatch.models.geo import GeoCoordinate

_POINTS = [
    GeoCoordinate(latitude=0.0, longitude=0.0),
    GeoCoordinate(latitude=40.0, longitude=-74.0),
    GeoCoordinate(latitude=51.5, longitude=-0.12),
    GeoCoordinate(latitude=-33.87, longitude=151.21),
    GeoCoordinate(latitude=89.9, longitude=179.9),
    GeoCoordinate(latitude=-90.0, longitude=-180.0),
]


@pytest.mark.parametrize("a", _POINTS)
@pytest.mark.parametrize("b", _POINTS)
def test_distance_is_symmetric(a: GeoCoordinate, b: GeoCoordinate) -> None:
    assert distance_km(a, b) == pytest.approx(distance_km(b, a))
    assert distance_km(a, b) >= 0


@pytest.mark.parametrize("point", _POINTS)
def test_distance_to_self_is_zero(point: GeoCoordinate) -> None:
    assert distance_km(point, point) == pytest.approx(0.0, abs=1e-9)


def test_one_degree_offset_near_new_york() -> None:
    observer = GeoCoordinate(latitude=40.0, longitude=-74.0)
    iss = GeoCoordinate(latitude=41.0, longitude=-73.0)
    assert distance_km(observer, iss) == pytest.approx(139.7, abs=1.0)


def test_quarter_meridian() -> None:
    equator = GeoCoordinate(latitude=0.0, longitude=0.0)
    pole = GeoCoordinate(latitude=90.0, longitude=0.0)
    assert distance_km(equator, pole) == pytest.approx(math.pi * 6371.0 / 2)


def test_antipodal_points_do_not_overflow() -> None:
    assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * 6371.0)


def test_nan_propagates() -> None:
    assert math.isnan(haversine_km(float("nan"), 0.0, 0.0, 0.0))
