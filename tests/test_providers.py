from __future__ import annotations

from typing import Any

import pytest

from isswatch._api.providers import (
    DEFAULT_PROVIDERS,
    parse_freeipapi,
    parse_ipapi,
    parse_ipinfo,
    parse_ipwhois,
)
from isswatch._api.tracker import parse_position
from isswatch.exceptions import InvalidPayload
from isswatch.models.geo import GeoCoordinate


def test_default_provider_order() -> None:
    assert [p.name for p in DEFAULT_PROVIDERS] == ["ipwho.is", "ipapi.co", "ipinfo.io", "freeipapi.com"]


def test_ipwhois() -> None:
    payload = {"ip": "203.0.113.7", "success": True, "latitude": 52.37, "longitude": 4.89}
    assert parse_ipwhois(payload) == GeoCoordinate(latitude=52.37, longitude=4.89)


def test_ipwhois_unsuccessful() -> None:
    with pytest.raises(InvalidPayload, match="Reserved range"):
        parse_ipwhois({"success": False, "message": "Reserved range"})


def test_ipapi() -> None:
    assert parse_ipapi({"latitude": "48.85", "longitude": "2.35"}) == GeoCoordinate(latitude=48.85, longitude=2.35)


def test_ipapi_error_field() -> None:
    with pytest.raises(InvalidPayload, match="RateLimited"):
        parse_ipapi({"error": True, "reason": "RateLimited"})


def test_ipinfo_loc_string() -> None:
    assert parse_ipinfo({"loc": "40.7128,-74.0060"}) == GeoCoordinate(latitude=40.7128, longitude=-74.006)


@pytest.mark.parametrize("loc", [None, "", "40.7", "a,b", "1,2,3", "95.0,10.0"])
def test_ipinfo_bad_loc(loc: Any) -> None:
    with pytest.raises(InvalidPayload):
        parse_ipinfo({"loc": loc})


def test_freeipapi() -> None:
    assert parse_freeipapi({"latitude": -33.87, "longitude": 151.21}) == GeoCoordinate(
        latitude=-33.87, longitude=151.21
    )


@pytest.mark.parametrize(
    "payload",
    [
        [],
        "nope",
        {"latitude": 1.0},
        {"latitude": None, "longitude": 1.0},
        {"latitude": "NaN", "longitude": 1.0},
        {"latitude": True, "longitude": 1.0},
        {"latitude": 10.0, "longitude": 181.0},
    ],
)
def test_freeipapi_rejects_incomplete_payloads(payload: Any) -> None:
    with pytest.raises(InvalidPayload):
        parse_freeipapi(payload)


def test_parse_position_keeps_extras() -> None:
    position = parse_position(
        {
            "name": "iss",
            "id": 25544,
            "latitude": 50.11,
            "longitude": -3.2,
            "altitude": 420.5,
            "velocity": 27600.1,
            "visibility": "daylight",
            "timestamp": 1700000000,
        }
    )
    assert position.coordinate() == GeoCoordinate(latitude=50.11, longitude=-3.2)
    assert position.altitude == 420.5
    assert position.visibility == "daylight"
    assert position.timestamp == 1700000000


def test_parse_position_optional_fields_degrade() -> None:
    position = parse_position({"latitude": 1, "longitude": 2, "altitude": "--", "velocity": None})
    assert position.altitude is None
    assert position.velocity is None


@pytest.mark.parametrize("payload", [None, {"longitude": 2}, {"latitude": "x", "longitude": 2}])
def test_parse_position_invalid(payload: Any) -> None:
    with pytest.raises(InvalidPayload):
        parse_position(payload)
