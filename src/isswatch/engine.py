"""High-level async proximity engine."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

import aiohttp

from isswatch._api.providers import DEFAULT_PROVIDERS, LocationProvider
from isswatch._cache import Clock, KeyValueStore, MemoryStore, TtlCache
from isswatch._transport import HttpTransport, Transport
from isswatch.classifier import Thresholds, classify
from isswatch.config import WatchConfig
from isswatch.debounce import AlertDebouncer
from isswatch.distance import distance_km
from isswatch.exceptions import AllProvidersFailure, IssWatchError
from isswatch.location import LocationResolver
from isswatch.models.geo import GeoCoordinate
from isswatch.models.state import AlertDecision, ConnectionStatus, EngineSnapshot, PositionReading, ProximityState
from isswatch.notify import LogNotifier, Notifier, build_alert
from isswatch.tracker import PositionFetcher

_logger = logging.getLogger(__name__)


class ProximityEngine:
    """Poll-driven proximity evaluation for a tracked object.

    Usage::

        async with ProximityEngine(WatchConfig.foreground()) as engine:
            snapshot = await engine.tick()

    Each :meth:`tick` resolves the observer and fetches the object
    position concurrently, computes the distance, classifies it and asks
    the debouncer whether to notify. Ticks never raise; failures surface
    as ``UNAVAILABLE``/``DISCONNECTED`` in the snapshot.
    """

    def __init__(
        self,
        config: WatchConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        store: KeyValueStore | None = None,
        notifier: Notifier | None = None,
        providers: Sequence[LocationProvider] = DEFAULT_PROVIDERS,
        clock: Clock = time.time,
        on_snapshot: Callable[[EngineSnapshot], None] | None = None,
    ) -> None:
        self._config = config or WatchConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._store: KeyValueStore = store if store is not None else MemoryStore()
        self._notifier: Notifier = notifier or LogNotifier()
        self._providers = tuple(providers)
        self._clock = clock
        self._on_snapshot = on_snapshot
        self._cache = TtlCache(self._store, clock=clock)
        self._thresholds = Thresholds.from_config(self._config)
        self._debouncer = AlertDebouncer(
            cooldown=self._config.alert_cooldown,
            edge_policy=self._config.edge_policy,
        )
        self._resolver: LocationResolver | None = None
        self._fetcher: PositionFetcher | None = None
        self._tick_in_flight = False
        self._alert_time_loaded = not self._config.persist_alert_time
        self._last_snapshot: EngineSnapshot | None = None
        if transport is not None:
            self._bind(transport)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ProximityEngine:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._bind(HttpTransport(self._http_session))
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None
            self._resolver = None
            self._fetcher = None

    def _bind(self, transport: Transport) -> None:
        self._transport = transport
        self._resolver = LocationResolver(self._config, self._cache, transport, self._providers)
        self._fetcher = PositionFetcher(self._config, self._cache, transport)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> WatchConfig:
        return self._config

    @property
    def debouncer(self) -> AlertDebouncer:
        return self._debouncer

    @property
    def last_snapshot(self) -> EngineSnapshot | None:
        return self._last_snapshot

    @property
    def tick_in_flight(self) -> bool:
        return self._tick_in_flight

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_components(self) -> tuple[LocationResolver, PositionFetcher]:
        if self._resolver is None or self._fetcher is None:
            raise IssWatchError("Engine not initialized. Use 'async with ProximityEngine(...) as engine:'")
        return self._resolver, self._fetcher

    async def _resolve_observer(self, resolver: LocationResolver) -> GeoCoordinate | None:
        try:
            return await resolver.resolve()
        except AllProvidersFailure:
            return None

    async def _load_alert_time(self) -> None:
        if self._alert_time_loaded:
            return
        self._alert_time_loaded = True
        key = self._config.last_alert_key
        try:
            stored = await self._store.get([key])
        except Exception:
            _logger.warning("Could not load last alert time", exc_info=True)
            return
        value = stored.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            self._debouncer.restore(float(value))

    async def _save_alert_time(self, when: float) -> None:
        if not self._config.persist_alert_time:
            return
        try:
            await self._store.set({self._config.last_alert_key: when})
        except Exception:
            _logger.warning("Could not persist last alert time", exc_info=True)

    async def _send_alert(self, distance: float) -> None:
        """Fire-and-forget notification; sink failures are logged, not retried."""
        title, message, priority = build_alert(distance)
        try:
            handle = await self._notifier.notify(title, message, priority)
            handle.expire_after(self._config.notification_display)
        except Exception:
            _logger.exception("Notification failed")

    def _emit(self, snapshot: EngineSnapshot) -> None:
        self._last_snapshot = snapshot
        if self._on_snapshot is None:
            return
        try:
            self._on_snapshot(snapshot)
        except Exception:
            _logger.exception("Snapshot callback failed")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    async def _evaluate(self, resolver: LocationResolver, fetcher: PositionFetcher) -> EngineSnapshot:
        await self._load_alert_time()

        observer_result, reading_result = await asyncio.gather(
            self._resolve_observer(resolver),
            fetcher.fetch(),
            return_exceptions=True,
        )
        observer: GeoCoordinate | None
        if isinstance(observer_result, BaseException):
            _logger.error("Observer resolution failed", exc_info=observer_result)
            observer = None
        else:
            observer = observer_result
        if isinstance(reading_result, BaseException):
            _logger.error("Position fetch failed", exc_info=reading_result)
            reading = PositionReading(coordinate=None, status=ConnectionStatus.DISCONNECTED)
        else:
            reading = reading_result

        if observer is None or reading.coordinate is None:
            return EngineSnapshot(
                observer=observer,
                object=reading.coordinate,
                distance_km=None,
                state=ProximityState.UNAVAILABLE,
                connection=reading.status,
            )

        distance = distance_km(observer, reading.coordinate)
        state = classify(distance, self._thresholds)
        now = self._clock()
        fire = self._debouncer.should_alert(state, now)
        if fire:
            _logger.info("Alert: %s at %.0f km (%s)", state.name, distance, reading.status.value)
            await self._save_alert_time(now)
            await self._send_alert(distance)

        return EngineSnapshot(
            observer=observer,
            object=reading.coordinate,
            distance_km=distance,
            state=state,
            connection=reading.status,
            alert=AlertDecision(should_alert=fire, distance_km=distance),
        )

    async def tick(self) -> EngineSnapshot | None:
        """Run one evaluation.

        Returns ``None`` without doing any work when a previous tick is
        still in flight; otherwise always returns a snapshot.
        """
        if self._tick_in_flight:
            _logger.debug("Tick skipped: previous tick still in flight")
            return None
        resolver, fetcher = self._require_components()
        self._tick_in_flight = True
        try:
            try:
                snapshot = await self._evaluate(resolver, fetcher)
            except Exception:
                _logger.exception("Proximity tick failed")
                snapshot = EngineSnapshot(
                    state=ProximityState.UNAVAILABLE,
                    connection=ConnectionStatus.DISCONNECTED,
                )
            self._emit(snapshot)
            return snapshot
        finally:
            self._tick_in_flight = False

    async def run(self, interval: float | None = None, *, iterations: int | None = None) -> None:
        """Call :meth:`tick` every *interval* seconds.

        Runs forever unless *iterations* is given. The delay is measured
        from the end of one tick to the start of the next.
        """
        period = self._config.poll_interval if interval is None else interval
        count = 0
        while iterations is None or count < iterations:
            await self.tick()
            count += 1
            if iterations is not None and count >= iterations:
                break
            await asyncio.sleep(period)
