"""Tracked object position with a two-tier TTL.

The short ``position_ttl`` is a client-side rate limit against the tracking
API; the longer ``position_stale_ttl`` bounds how old a position may be when
it is served after a failed fetch.
"""

from __future__ import annotations

import logging

from isswatch._api.tracker import parse_position
from isswatch._cache import TtlCache
from isswatch._transport import Transport
from isswatch.config import WatchConfig
from isswatch.exceptions import InvalidPayload, RateLimited, TransportFailure
from isswatch.models.geo import GeoCoordinate
from isswatch.models.state import ConnectionStatus, PositionReading

_logger = logging.getLogger(__name__)


class PositionFetcher:
    """Fetch the object's sub-satellite point, falling back to stale cache."""

    def __init__(self, config: WatchConfig, cache: TtlCache, transport: Transport) -> None:
        self._config = config
        self._cache = cache
        self._transport = transport

    async def _read(self, ttl: float) -> GeoCoordinate | None:
        raw = await self._cache.read(self._config.position_cache_key, ttl)
        if raw is None:
            return None
        try:
            return GeoCoordinate.model_validate(raw)
        except ValueError:
            _logger.debug("Discarding unusable cached position: %s", raw)
            return None

    async def fetch(self) -> PositionReading:
        """Return the current position tagged with its freshness.

        Never raises: rate limiting, transport and parse failures fall back
        to a stale read, and to ``DISCONNECTED`` when nothing usable is cached.
        """
        cached = await self._read(self._config.position_ttl)
        if cached is not None:
            return PositionReading(coordinate=cached, status=ConnectionStatus.FRESH)

        try:
            payload = await self._transport.get_json(
                self._config.position_url,
                timeout=self._config.position_timeout,
            )
            position = parse_position(payload)
        except RateLimited:
            _logger.warning("Tracking source rate limited, using cached position")
        except (TransportFailure, InvalidPayload) as exc:
            _logger.warning("Position update failed: %s", exc)
        else:
            coordinate = position.coordinate()
            await self._cache.write(self._config.position_cache_key, coordinate.model_dump())
            return PositionReading(coordinate=coordinate, status=ConnectionStatus.FRESH)

        stale = await self._read(self._config.position_stale_ttl)
        if stale is not None:
            return PositionReading(coordinate=stale, status=ConnectionStatus.STALE)
        return PositionReading(coordinate=None, status=ConnectionStatus.DISCONNECTED)
