"""Alert edge detection and cooldown.

An alert fires only when the current state is alert-worthy, the edge
policy accepts the transition from the previous state, and the cooldown
since the last alert has elapsed (boundary inclusive).
"""

from __future__ import annotations

import logging

from isswatch.config import EdgePolicy
from isswatch.models.state import ProximityState

_logger = logging.getLogger(__name__)


class AlertDebouncer:
    """Tracks ``last_state`` and ``last_alert_at`` across ticks."""

    def __init__(
        self,
        *,
        cooldown: float | None = None,
        edge_policy: EdgePolicy = EdgePolicy.STRICT,
        last_state: ProximityState = ProximityState.UNAVAILABLE,
        last_alert_at: float | None = None,
    ) -> None:
        self._cooldown = cooldown
        self._edge_policy = edge_policy
        self._last_state = last_state
        self._last_alert_at = last_alert_at

    @property
    def last_state(self) -> ProximityState:
        return self._last_state

    @property
    def last_alert_at(self) -> float | None:
        return self._last_alert_at

    def restore(self, last_alert_at: float | None) -> None:
        """Seed the last alert time, e.g. from a persisted value."""
        if last_alert_at is None:
            return
        if self._last_alert_at is None or last_alert_at > self._last_alert_at:
            self._last_alert_at = last_alert_at

    def _is_edge(self, state: ProximityState) -> bool:
        if self._edge_policy is EdgePolicy.LEVEL:
            return True
        if self._edge_policy is EdgePolicy.BAND:
            return state != self._last_state
        return not self._last_state.is_alert_worthy

    def _cooled_down(self, now: float) -> bool:
        if self._cooldown is None or self._last_alert_at is None:
            return True
        return now - self._last_alert_at >= self._cooldown

    def should_alert(self, state: ProximityState, now: float) -> bool:
        """Decide whether *state* at *now* fires an alert and record the tick."""
        if state is ProximityState.UNAVAILABLE:
            # A dropout keeps the previous state so it cannot re-arm the edge.
            return False

        fire = state.is_alert_worthy and self._is_edge(state) and self._cooled_down(now)
        if fire:
            self._last_alert_at = now
            _logger.debug("Alert edge: %s -> %s", self._last_state.name, state.name)
        self._last_state = state
        return fire
