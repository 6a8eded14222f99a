"""Distance to proximity band classification."""

from __future__ import annotations

from dataclasses import dataclass

from isswatch.config import WatchConfig
from isswatch.exceptions import IssWatchConfigError
from isswatch.models.state import ProximityState


@dataclass(frozen=True, slots=True)
class Thresholds:
    """Band boundaries in km, inclusive.

    ``overhead_km < close_km < visible_km`` is enforced on construction.
    """

    overhead_km: float = 50.0
    close_km: float = 800.0
    visible_km: float = 2300.0

    def __post_init__(self) -> None:
        if not self.overhead_km < self.close_km < self.visible_km:
            raise IssWatchConfigError(
                f"thresholds must satisfy overhead < close < visible, got "
                f"{self.overhead_km}/{self.close_km}/{self.visible_km}"
            )

    @classmethod
    def from_config(cls, config: WatchConfig) -> Thresholds:
        return cls(
            overhead_km=config.overhead_threshold_km,
            close_km=config.close_threshold_km,
            visible_km=config.visible_threshold_km,
        )


DEFAULT_THRESHOLDS = Thresholds()


def classify(distance_km: float | None, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> ProximityState:
    """Map a distance to a :class:`ProximityState`, tightest band first."""
    if distance_km is None:
        return ProximityState.UNAVAILABLE
    if distance_km <= thresholds.overhead_km:
        return ProximityState.OVERHEAD
    if distance_km <= thresholds.close_km:
        return ProximityState.CLOSE
    if distance_km <= thresholds.visible_km:
        return ProximityState.VISIBLE
    return ProximityState.NOT_VISIBLE
