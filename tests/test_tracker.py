from __future__ import annotations

import pytest

from isswatch._cache import TtlCache
from isswatch.config import WatchConfig
from isswatch.exceptions import RateLimited, TransportFailure
from isswatch.models.geo import GeoCoordinate
from isswatch.models.state import ConnectionStatus
from isswatch.tracker import PositionFetcher

from conftest import ISS_URL, FakeClock, FakeTransport

_KEY = "iss_pos_cache_minimal"


def _fetcher(cache: TtlCache, transport: FakeTransport) -> PositionFetcher:
    return PositionFetcher(WatchConfig(position_ttl=2.0, position_stale_ttl=60.0), cache, transport)


@pytest.mark.asyncio
async def test_successful_fetch_is_fresh_and_cached(cache: TtlCache, transport: FakeTransport) -> None:
    transport.add(ISS_URL, {"latitude": 10.5, "longitude": -20.25, "altitude": 418.0})

    reading = await _fetcher(cache, transport).fetch()

    assert reading.status is ConnectionStatus.FRESH
    assert reading.coordinate == GeoCoordinate(latitude=10.5, longitude=-20.25)
    assert await cache.read(_KEY, 2.0) == {"latitude": 10.5, "longitude": -20.25}


@pytest.mark.asyncio
async def test_rate_limit_window_serves_cache(cache: TtlCache, transport: FakeTransport, clock: FakeClock) -> None:
    transport.add(ISS_URL, {"latitude": 1.0, "longitude": 1.0}, {"latitude": 2.0, "longitude": 2.0})
    fetcher = _fetcher(cache, transport)

    await fetcher.fetch()
    clock.advance(1.5)
    reading = await fetcher.fetch()

    assert reading.status is ConnectionStatus.FRESH
    assert reading.coordinate == GeoCoordinate(latitude=1.0, longitude=1.0)
    assert len(transport.calls) == 1

    clock.advance(0.5)
    assert (await fetcher.fetch()).coordinate == GeoCoordinate(latitude=2.0, longitude=2.0)
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_429_falls_back_to_stale_entry(cache: TtlCache, transport: FakeTransport, clock: FakeClock) -> None:
    await cache.write(_KEY, {"latitude": 5.0, "longitude": 6.0})
    clock.advance(30.0)
    transport.add(ISS_URL, RateLimited("HTTP 429", status_code=429, url=ISS_URL))

    reading = await _fetcher(cache, transport).fetch()

    assert reading.status is ConnectionStatus.STALE
    assert reading.coordinate == GeoCoordinate(latitude=5.0, longitude=6.0)


@pytest.mark.asyncio
async def test_malformed_response_falls_back_to_stale(
    cache: TtlCache, transport: FakeTransport, clock: FakeClock
) -> None:
    await cache.write(_KEY, {"latitude": 5.0, "longitude": 6.0})
    clock.advance(10.0)
    transport.add(ISS_URL, {"message": "maintenance"})

    reading = await _fetcher(cache, transport).fetch()

    assert reading.status is ConnectionStatus.STALE


@pytest.mark.asyncio
async def test_too_old_entry_means_disconnected(cache: TtlCache, transport: FakeTransport, clock: FakeClock) -> None:
    await cache.write(_KEY, {"latitude": 5.0, "longitude": 6.0})
    clock.advance(61.0)
    transport.add(ISS_URL, TransportFailure("timed out", url=ISS_URL))

    reading = await _fetcher(cache, transport).fetch()

    assert reading.status is ConnectionStatus.DISCONNECTED
    assert reading.coordinate is None


@pytest.mark.asyncio
async def test_failure_without_cache_is_disconnected(cache: TtlCache, transport: FakeTransport) -> None:
    reading = await _fetcher(cache, transport).fetch()
    assert reading.status is ConnectionStatus.DISCONNECTED
    assert transport.urls() == [ISS_URL]
