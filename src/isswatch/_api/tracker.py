"""Tracking source payload parsing.

The upstream (``api.wheretheiss.at``) answers with::

    {"name": "iss", "id": 25544, "latitude": 50.1, "longitude": -3.2,
     "altitude": 420.5, "velocity": 27600.1, "visibility": "daylight",
     "timestamp": 1700000000, ...}
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from isswatch.exceptions import InvalidPayload
from isswatch.models.geo import TrackedPosition


def parse_position(payload: Any) -> TrackedPosition:
    """Parse a tracking response into a :class:`TrackedPosition`.

    Raises :class:`InvalidPayload` when latitude or longitude is missing,
    non-numeric or out of range. Optional fields degrade to ``None``.
    """
    if not isinstance(payload, dict):
        raise InvalidPayload(f"expected JSON object, got {type(payload).__name__}")
    if payload.get("latitude") is None or payload.get("longitude") is None:
        raise InvalidPayload(f"missing latitude/longitude in keys={sorted(payload)}")
    try:
        return TrackedPosition(
            latitude=payload["latitude"],
            longitude=payload["longitude"],
            altitude=payload.get("altitude"),
            velocity=payload.get("velocity"),
            visibility=payload.get("visibility"),
            timestamp=payload.get("timestamp"),
        )
    except (ValidationError, ValueError) as exc:
        raise InvalidPayload(f"invalid coordinate in tracking payload: {exc}") from exc
