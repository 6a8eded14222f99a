"""Great-circle distance."""

from __future__ import annotations

import math

from isswatch._constants import EARTH_RADIUS_KM
from isswatch.models.geo import GeoCoordinate


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float, *, radius: float = EARTH_RADIUS_KM) -> float:
    """Haversine distance in km between two points given in degrees.

    NaN inputs propagate to a NaN result.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a a hair above 1 for antipodal points.
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius * c


def distance_km(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Surface distance between two coordinates on a 6371 km sphere."""
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)
