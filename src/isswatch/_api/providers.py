"""IP geolocation providers.

Each provider is a URL plus a parser from its JSON shape to a
:class:`GeoCoordinate`. Parsers raise :class:`InvalidPayload` on any
schema deviation or explicit error field. New providers are added by
extending :data:`DEFAULT_PROVIDERS`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from isswatch.exceptions import InvalidPayload
from isswatch.models.geo import GeoCoordinate

PayloadParser = Callable[[Any], GeoCoordinate]


@dataclass(frozen=True, slots=True)
class LocationProvider:
    name: str
    url: str
    parse: PayloadParser


def _require_mapping(payload: Any, provider: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidPayload(f"{provider}: expected JSON object, got {type(payload).__name__}")
    return payload


def _coordinate(latitude: Any, longitude: Any, provider: str) -> GeoCoordinate:
    if latitude is None or longitude is None:
        raise InvalidPayload(f"{provider}: missing latitude/longitude")
    try:
        return GeoCoordinate(latitude=latitude, longitude=longitude)
    except (ValidationError, ValueError) as exc:
        raise InvalidPayload(f"{provider}: invalid coordinate ({latitude!r}, {longitude!r})") from exc


def parse_ipwhois(payload: Any) -> GeoCoordinate:
    """``https://ipwho.is/`` -- ``{"success": true, "latitude": .., "longitude": ..}``."""
    data = _require_mapping(payload, "ipwho.is")
    if data.get("success") is not True:
        raise InvalidPayload(f"ipwho.is: {data.get('message') or 'lookup failed'}")
    return _coordinate(data.get("latitude"), data.get("longitude"), "ipwho.is")


def parse_ipapi(payload: Any) -> GeoCoordinate:
    """``https://ipapi.co/json/`` -- reports failures as ``{"error": true, "reason": ..}``."""
    data = _require_mapping(payload, "ipapi.co")
    if data.get("error"):
        raise InvalidPayload(f"ipapi.co: {data.get('reason') or 'ipapi error'}")
    return _coordinate(data.get("latitude"), data.get("longitude"), "ipapi.co")


def parse_ipinfo(payload: Any) -> GeoCoordinate:
    """``https://ipinfo.io/json`` -- coordinates packed as ``"loc": "lat,lon"``."""
    data = _require_mapping(payload, "ipinfo.io")
    loc = data.get("loc")
    if not isinstance(loc, str) or not loc:
        raise InvalidPayload("ipinfo.io: missing loc")
    parts = loc.split(",")
    if len(parts) != 2:
        raise InvalidPayload(f"ipinfo.io: malformed loc {loc!r}")
    return _coordinate(parts[0], parts[1], "ipinfo.io")


def parse_freeipapi(payload: Any) -> GeoCoordinate:
    """``https://freeipapi.com/api/json`` -- plain ``latitude``/``longitude``."""
    data = _require_mapping(payload, "freeipapi.com")
    return _coordinate(data.get("latitude"), data.get("longitude"), "freeipapi.com")


DEFAULT_PROVIDERS: tuple[LocationProvider, ...] = (
    LocationProvider("ipwho.is", "https://ipwho.is/", parse_ipwhois),
    LocationProvider("ipapi.co", "https://ipapi.co/json/", parse_ipapi),
    LocationProvider("ipinfo.io", "https://ipinfo.io/json", parse_ipinfo),
    LocationProvider("freeipapi.com", "https://freeipapi.com/api/json", parse_freeipapi),
)
