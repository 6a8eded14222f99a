"""Geographic coordinate models."""

from __future__ import annotations

import math
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from isswatch.models._base import WatchBaseModel


def _coerce_degrees(value: Any) -> Any:
    """Accept numeric strings (``"40.71"``) and reject NaN/inf and booleans."""
    if isinstance(value, bool):
        raise ValueError("coordinate must be numeric, got bool")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("coordinate must not be empty")
        value = float(text)
    if isinstance(value, (int, float)) and not math.isfinite(value):
        raise ValueError("coordinate must be finite")
    return value


def _finite_or_none(value: Any) -> float | None:
    """Optional upstream numbers: absent, non-numeric and NaN/inf all become None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


class GeoCoordinate(WatchBaseModel):
    """A point on the Earth's surface in decimal degrees.

    Parameters
    ----------
    latitude : float
        Latitude in degrees, ``-90 <= latitude <= 90``.
    longitude : float
        Longitude in degrees, ``-180 <= longitude <= 180``.
    """

    latitude: float = Field(ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(
        ge=-180.0,
        le=180.0,
        validation_alias=AliasChoices("longitude", "lon", "lng"),
    )

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        return _coerce_degrees(value)

    def format(self) -> str:
        """Render as ``"40.00°N, 74.00°W"``."""
        lat_dir = "N" if self.latitude >= 0 else "S"
        lon_dir = "E" if self.longitude >= 0 else "W"
        return f"{abs(self.latitude):.2f}°{lat_dir}, {abs(self.longitude):.2f}°{lon_dir}"


class TrackedPosition(GeoCoordinate):
    """Sub-satellite point reported by the tracking source.

    Parameters
    ----------
    altitude : float or None
        Orbital altitude in km.
    velocity : float or None
        Ground speed in km/h.
    visibility : str or None
        ``"daylight"`` or ``"eclipsed"``.
    timestamp : int or None
        Epoch seconds of the fix, as reported upstream.
    """

    altitude: float | None = None
    velocity: float | None = None
    visibility: str | None = None
    timestamp: int | None = None

    @field_validator("altitude", "velocity", mode="before")
    @classmethod
    def _optional_float(cls, value: Any) -> float | None:
        return _finite_or_none(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _optional_epoch(cls, value: Any) -> int | None:
        seconds = _finite_or_none(value)
        return None if seconds is None else int(seconds)

    @field_validator("visibility", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def coordinate(self) -> GeoCoordinate:
        return GeoCoordinate(latitude=self.latitude, longitude=self.longitude)
