"""Engine configuration for isswatch."""

from __future__ import annotations

import dataclasses
import os
from enum import StrEnum
from typing import Any

from isswatch._constants import LAST_ALERT_KEY, OBSERVER_CACHE_KEY, POSITION_CACHE_KEY, POSITION_URL
from isswatch.exceptions import IssWatchConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_optional_float(value: str) -> float | None:
    normalized = value.strip().lower()
    if normalized in {"", "none", "off", "0"}:
        return None
    try:
        return float(normalized)
    except ValueError as exc:
        raise IssWatchConfigError(f"ISSWATCH_ALERT_COOLDOWN must be a number or \"off\", got {value!r}") from exc


class EdgePolicy(StrEnum):
    """When a transition into the alert band counts as an alert edge.

    ``LEVEL``
        No edge detection: every alert-worthy tick qualifies (the
        cooldown alone limits repeats).
    ``BAND``
        Any change into an alert-worthy state, including
        ``CLOSE`` -> ``OVERHEAD``.
    ``STRICT``
        Only a change from a non-alert-worthy state.
    """

    LEVEL = "level"
    BAND = "band"
    STRICT = "strict"


@dataclasses.dataclass(frozen=True)
class WatchConfig:
    """Engine configuration.

    All durations are in seconds, all distances in kilometres.

    Parameters
    ----------
    overhead_threshold_km : float
        Distance at or below which the object is directly overhead.
    close_threshold_km : float
        Distance at or below which the pass is close (high in the sky).
        This is the alert band boundary.
    visible_threshold_km : float
        Distance at or below which the object is above the horizon.
    observer_ttl : float
        Cache lifetime of the resolved observer location.
    position_ttl : float
        Cache lifetime of the object position. Acts as a client-side
        rate limiter against the tracking API.
    position_stale_ttl : float
        Maximum age of a cached position used when a fetch fails.
    provider_timeout : float
        Per-request timeout for each location provider.
    position_timeout : float
        Request timeout for the tracking source.
    alert_cooldown : float or None
        Minimum interval between two alerts. ``None`` disables the
        time cooldown.
    edge_policy : EdgePolicy
        Edge detection applied before the cooldown.
    persist_alert_time : bool
        Store the last alert time so the cooldown survives restarts.
    poll_interval : float
        Interval used by :meth:`ProximityEngine.run`.
    notification_display : float
        Seconds before a notification is dismissed automatically.
    position_url : str
        Tracking source endpoint.
    observer_cache_key : str
        Store key for the observer location.
    position_cache_key : str
        Store key for the object position.
    last_alert_key : str
        Store key for the persisted last alert time.
    """

    overhead_threshold_km: float = 50.0
    close_threshold_km: float = 800.0
    visible_threshold_km: float = 2300.0
    observer_ttl: float = 3600.0
    position_ttl: float = 2.0
    position_stale_ttl: float = 60.0
    provider_timeout: float = 3.0
    position_timeout: float = 5.0
    alert_cooldown: float | None = None
    edge_policy: EdgePolicy = EdgePolicy.STRICT
    persist_alert_time: bool = False
    poll_interval: float = 5.0
    notification_display: float = 25.0
    position_url: str = POSITION_URL
    observer_cache_key: str = OBSERVER_CACHE_KEY
    position_cache_key: str = POSITION_CACHE_KEY
    last_alert_key: str = LAST_ALERT_KEY

    def __post_init__(self) -> None:
        if not self.overhead_threshold_km < self.close_threshold_km < self.visible_threshold_km:
            raise IssWatchConfigError(
                "thresholds must satisfy overhead < close < visible, got "
                f"{self.overhead_threshold_km}/{self.close_threshold_km}/{self.visible_threshold_km}"
            )
        for name in ("observer_ttl", "position_ttl", "position_stale_ttl", "provider_timeout", "position_timeout"):
            if getattr(self, name) <= 0:
                raise IssWatchConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.position_stale_ttl < self.position_ttl:
            raise IssWatchConfigError("position_stale_ttl must not be shorter than position_ttl")
        if self.alert_cooldown is not None and self.alert_cooldown < 0:
            raise IssWatchConfigError(f"alert_cooldown must be >= 0, got {self.alert_cooldown}")
        if not isinstance(self.edge_policy, EdgePolicy):
            try:
                policy = EdgePolicy(str(self.edge_policy).lower())
            except ValueError as exc:
                raise IssWatchConfigError(f"unknown edge policy {self.edge_policy!r}") from exc
            object.__setattr__(self, "edge_policy", policy)

    @classmethod
    def foreground(cls, **overrides: Any) -> WatchConfig:
        """Interactive display profile.

        Polls every few seconds, alerts on entering the close band and
        never applies a time cooldown.
        """
        values: dict[str, Any] = {
            "position_ttl": 2.0,
            "position_stale_ttl": 60.0,
            "alert_cooldown": None,
            "edge_policy": EdgePolicy.STRICT,
            "persist_alert_time": False,
            "poll_interval": 5.0,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def background(cls, **overrides: Any) -> WatchConfig:
        """Periodic background check profile.

        Runs every five minutes, alerts whenever the object is inside the
        close band and relies on a one hour cooldown that is persisted in
        the store.
        """
        values: dict[str, Any] = {
            "position_ttl": 15.0,
            "position_stale_ttl": 60.0,
            "alert_cooldown": 3600.0,
            "edge_policy": EdgePolicy.LEVEL,
            "persist_alert_time": True,
            "poll_interval": 300.0,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_env(cls, profile: str | None = None, **overrides: Any) -> WatchConfig:
        """Create configuration from environment variables.

        ``ISSWATCH_PROFILE`` (or *profile*) selects ``foreground`` or
        ``background`` defaults; ``ISSWATCH_*`` variables override single
        fields. Explicit keyword arguments override environment values.

        Parameters
        ----------
        profile : str or None
            Profile name, takes precedence over ``ISSWATCH_PROFILE``.
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        WatchConfig
            Populated configuration.
        """
        env = os.environ

        profile_name = (profile or env.get("ISSWATCH_PROFILE") or "foreground").strip().lower()
        if profile_name not in {"foreground", "background"}:
            raise IssWatchConfigError(f"unknown profile {profile_name!r}")

        _ENV_FLOAT_MAP = {
            "ISSWATCH_OVERHEAD_KM": "overhead_threshold_km",
            "ISSWATCH_CLOSE_KM": "close_threshold_km",
            "ISSWATCH_VISIBLE_KM": "visible_threshold_km",
            "ISSWATCH_OBSERVER_TTL": "observer_ttl",
            "ISSWATCH_POSITION_TTL": "position_ttl",
            "ISSWATCH_POSITION_STALE_TTL": "position_stale_ttl",
            "ISSWATCH_PROVIDER_TIMEOUT": "provider_timeout",
            "ISSWATCH_POSITION_TIMEOUT": "position_timeout",
            "ISSWATCH_POLL_INTERVAL": "poll_interval",
            "ISSWATCH_NOTIFICATION_DISPLAY": "notification_display",
        }
        _ENV_STR_MAP = {
            "ISSWATCH_POSITION_URL": "position_url",
            "ISSWATCH_EDGE_POLICY": "edge_policy",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = float(val)
                except ValueError as exc:
                    raise IssWatchConfigError(f"{env_key} must be a number, got {val!r}") from exc
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val.strip()

        # cooldown accepts "none"/"off" to disable
        cooldown_env = env.get("ISSWATCH_ALERT_COOLDOWN")
        if cooldown_env is not None and "alert_cooldown" not in overrides:
            config_kwargs["alert_cooldown"] = _env_optional_float(cooldown_env)

        persist_env = env.get("ISSWATCH_PERSIST_ALERT_TIME")
        if persist_env is not None and "persist_alert_time" not in overrides:
            config_kwargs["persist_alert_time"] = _env_bool(persist_env, False)

        if "edge_policy" in config_kwargs:
            try:
                config_kwargs["edge_policy"] = EdgePolicy(config_kwargs["edge_policy"].lower())
            except ValueError as exc:
                raise IssWatchConfigError(f"unknown edge policy {config_kwargs['edge_policy']!r}") from exc

        config_kwargs.update(overrides)

        factory = cls.background if profile_name == "background" else cls.foreground
        return factory(**config_kwargs)
