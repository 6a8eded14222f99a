"""Observer location resolution.

Consults the cache first (long TTL, the observer is assumed near-stationary),
then walks an ordered list of independent IP geolocation providers until one
returns a valid coordinate.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from isswatch._api.providers import DEFAULT_PROVIDERS, LocationProvider
from isswatch._cache import TtlCache
from isswatch._redact import redact_for_log
from isswatch._transport import Transport
from isswatch.config import WatchConfig
from isswatch.exceptions import AllProvidersFailure, InvalidPayload, ProviderFailure, TransportFailure
from isswatch.models.geo import GeoCoordinate

_logger = logging.getLogger(__name__)


class LocationResolver:
    """Resolve the observer's coordinates with provider fallback."""

    def __init__(
        self,
        config: WatchConfig,
        cache: TtlCache,
        transport: Transport,
        providers: Sequence[LocationProvider] = DEFAULT_PROVIDERS,
    ) -> None:
        self._config = config
        self._cache = cache
        self._transport = transport
        self._providers = tuple(providers)

    @property
    def providers(self) -> tuple[LocationProvider, ...]:
        return self._providers

    async def _cached(self) -> GeoCoordinate | None:
        raw = await self._cache.read(self._config.observer_cache_key, self._config.observer_ttl)
        if raw is None:
            return None
        try:
            return GeoCoordinate.model_validate(raw)
        except ValueError:
            _logger.debug("Discarding unusable cached observer location: %s", raw)
            return None

    async def _query(self, provider: LocationProvider) -> GeoCoordinate:
        try:
            payload = await self._transport.get_json(provider.url, timeout=self._config.provider_timeout)
        except TransportFailure as exc:
            raise ProviderFailure(f"{provider.name}: {exc}", provider=provider.name) from exc
        _logger.debug("%s responded: %s", provider.name, redact_for_log(payload))
        try:
            return provider.parse(payload)
        except InvalidPayload as exc:
            raise ProviderFailure(str(exc), provider=provider.name) from exc

    async def resolve(self) -> GeoCoordinate:
        """Return the observer location.

        Raises
        ------
        AllProvidersFailure
            If the cache is empty or expired and every provider failed.
            Nothing is cached in that case.
        """
        cached = await self._cached()
        if cached is not None:
            return cached

        failures: list[ProviderFailure] = []
        for provider in self._providers:
            try:
                coordinate = await self._query(provider)
            except ProviderFailure as exc:
                _logger.warning("Location provider %s failed, trying next: %s", provider.name, exc)
                failures.append(exc)
                continue
            _logger.debug("Observer located by %s: %s", provider.name, coordinate.format())
            await self._cache.write(self._config.observer_cache_key, coordinate.model_dump())
            return coordinate

        _logger.error("All %d location providers failed", len(self._providers))
        raise AllProvidersFailure("All location providers failed", failures=failures)
