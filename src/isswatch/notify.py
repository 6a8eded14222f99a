"""Notification sink interface and the default logging sink."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from typing import Protocol

from isswatch._constants import ALERT_PRIORITY, ALERT_TITLE

_logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class NotificationHandle:
    """A displayed notification that can be dismissed, manually or on a timer."""

    def __init__(self, notification_id: str, on_dismiss: Callable[[str], None] | None = None) -> None:
        self.notification_id = notification_id
        self._on_dismiss = on_dismiss
        self._timer: asyncio.TimerHandle | None = None
        self._dismissed = False

    @property
    def dismissed(self) -> bool:
        return self._dismissed

    def dismiss(self) -> None:
        if self._dismissed:
            return
        self._dismissed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._on_dismiss is not None:
            self._on_dismiss(self.notification_id)

    def expire_after(self, seconds: float) -> None:
        """Schedule :meth:`dismiss` on the running loop."""
        if self._dismissed:
            return
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(seconds, self.dismiss)


class Notifier(Protocol):
    async def notify(self, title: str, message: str, priority: int) -> NotificationHandle:
        ...


class LogNotifier:
    """Emit alerts through :mod:`logging`."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    async def notify(self, title: str, message: str, priority: int) -> NotificationHandle:
        notification_id = f"isswatch-{next(_ids)}"
        self._logger.warning("[%s] %s: %s", notification_id, title, message)
        return NotificationHandle(
            notification_id,
            on_dismiss=lambda nid: self._logger.debug("Notification %s dismissed", nid),
        )


def build_alert(distance_km: float) -> tuple[str, str, int]:
    """Return ``(title, message, priority)`` for an alert at *distance_km*."""
    message = f"Look up! The Space Station is passing by. Distance: {round(distance_km)} km"
    return ALERT_TITLE, message, ALERT_PRIORITY
