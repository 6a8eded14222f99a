"""Value models for isswatch."""

from isswatch.models.geo import GeoCoordinate, TrackedPosition
from isswatch.models.state import (
    AlertDecision,
    ConnectionStatus,
    EngineSnapshot,
    PositionReading,
    ProximityState,
)

__all__ = [
    "AlertDecision",
    "ConnectionStatus",
    "EngineSnapshot",
    "GeoCoordinate",
    "PositionReading",
    "ProximityState",
    "TrackedPosition",
]
