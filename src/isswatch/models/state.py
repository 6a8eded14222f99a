"""Proximity state, connection status and per-tick output models."""

from __future__ import annotations

from enum import IntEnum, StrEnum

from isswatch.models._base import WatchBaseModel
from isswatch.models.geo import GeoCoordinate


class ProximityState(IntEnum):
    """Discrete distance band, ordered by alert-worthiness.

    ``UNAVAILABLE`` means no distance could be computed this tick.
    """

    UNAVAILABLE = -1
    NOT_VISIBLE = 0
    VISIBLE = 1
    CLOSE = 2
    OVERHEAD = 3

    @property
    def is_alert_worthy(self) -> bool:
        return self >= ProximityState.CLOSE


class ConnectionStatus(StrEnum):
    FRESH = "fresh"
    STALE = "stale"
    DISCONNECTED = "disconnected"


class PositionReading(WatchBaseModel):
    """Result of one position fetch.

    ``coordinate`` is ``None`` exactly when ``status`` is
    :attr:`ConnectionStatus.DISCONNECTED`.
    """

    coordinate: GeoCoordinate | None = None
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED


class AlertDecision(WatchBaseModel):
    should_alert: bool
    distance_km: float


class EngineSnapshot(WatchBaseModel):
    """Output of one engine tick.

    Parameters
    ----------
    observer : GeoCoordinate or None
        Observer location, ``None`` when every provider failed.
    object : GeoCoordinate or None
        Tracked object position, ``None`` when disconnected.
    distance_km : float or None
        Great-circle distance, ``None`` when either side is unknown.
    state : ProximityState
        Classification of ``distance_km``.
    connection : ConnectionStatus
        Freshness of ``object``.
    alert : AlertDecision or None
        Debouncer outcome, ``None`` when no distance was computed.
    """

    observer: GeoCoordinate | None = None
    object: GeoCoordinate | None = None
    distance_km: float | None = None
    state: ProximityState = ProximityState.UNAVAILABLE
    connection: ConnectionStatus = ConnectionStatus.DISCONNECTED
    alert: AlertDecision | None = None

    def describe(self) -> str:
        """One-line human readable status."""
        if self.distance_km is None:
            if self.connection is ConnectionStatus.DISCONNECTED:
                return "No signal: unable to connect to ISS tracking service"
            return "Location unavailable: enable location to calculate distance"
        text = f"{round(self.distance_km):,} km ({self.state.name.lower().replace('_', ' ')})"
        if self.connection is ConnectionStatus.STALE:
            text += " (using cache)"
        return text
