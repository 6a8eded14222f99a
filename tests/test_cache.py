from __future__ import annotations

import json
from pathlib import Path

import pytest

from isswatch._cache import CacheEntry, JsonFileStore, MemoryStore, TtlCache
from isswatch.exceptions import StoreUnavailable

from conftest import BrokenStore, FakeClock


@pytest.mark.asyncio
async def test_write_then_read_returns_value(cache: TtlCache) -> None:
    await cache.write("k", {"latitude": 1.0, "longitude": 2.0})
    assert await cache.read("k", 5.0) == {"latitude": 1.0, "longitude": 2.0}


@pytest.mark.asyncio
async def test_missing_key_reads_as_none(cache: TtlCache) -> None:
    assert await cache.read("missing", 60.0) is None
    assert await cache.read_stale("missing", 60.0) is None


@pytest.mark.asyncio
async def test_expired_entry_still_available_to_stale_read(cache: TtlCache, clock: FakeClock) -> None:
    await cache.write("pos", [1, 2])
    clock.advance(30.0)
    assert await cache.read("pos", 2.0) is None
    assert await cache.read_stale("pos", 60.0) == [1, 2]
    clock.advance(30.0)
    # age == ttl counts as expired
    assert await cache.read_stale("pos", 60.0) is None


@pytest.mark.asyncio
async def test_entry_is_persisted_with_timestamp(store: MemoryStore, cache: TtlCache, clock: FakeClock) -> None:
    await cache.write("k", "v")
    raw = (await store.get(["k"]))["k"]
    assert raw == {"payload": "v", "timestamp": clock.now}


@pytest.mark.asyncio
async def test_written_at_never_decreases(store: MemoryStore, cache: TtlCache, clock: FakeClock) -> None:
    await cache.write("k", 1)
    clock.advance(-10.0)
    await cache.write("k", 2)
    entry = CacheEntry.model_validate((await store.get(["k"]))["k"])
    assert entry.written_at == clock.now + 10.0
    assert entry.value == 2


@pytest.mark.asyncio
async def test_malformed_entry_is_a_miss(clock: FakeClock) -> None:
    store = MemoryStore({"k": {"unexpected": True}, "j": "plain string"})
    cache = TtlCache(store, clock=clock)
    assert await cache.read("k", 60.0) is None
    assert await cache.read("j", 60.0) is None


@pytest.mark.asyncio
async def test_store_failures_degrade_to_miss(clock: FakeClock) -> None:
    cache = TtlCache(BrokenStore(), clock=clock)
    await cache.write("k", 1)
    assert await cache.read("k", 60.0) is None


@pytest.mark.asyncio
async def test_memory_store_isolates_values() -> None:
    store = MemoryStore()
    value = {"a": [1]}
    await store.set({"k": value})
    value["a"].append(2)
    assert await store.get(["k", "other"]) == {"k": {"a": [1]}}


@pytest.mark.asyncio
async def test_json_file_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "cache.json"
    store = JsonFileStore(path)
    assert await store.get(["k"]) == {}
    await store.set({"k": {"payload": 1, "timestamp": 2.0}})
    await store.set({"j": 3})
    assert await store.get(["k", "j"]) == {"k": {"payload": 1, "timestamp": 2.0}, "j": 3}
    assert json.loads(path.read_text(encoding="utf-8"))["j"] == 3


@pytest.mark.asyncio
async def test_json_file_store_corruption(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)
    with pytest.raises(StoreUnavailable):
        await store.get(["k"])
    # A write replaces the corrupted file.
    await store.set({"k": 1})
    assert await store.get(["k"]) == {"k": 1}
