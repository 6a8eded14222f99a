"""Timestamped cache on top of an injected key-value store.

Entries are persisted as ``{"payload": <value>, "timestamp": <epoch seconds>}``
so the store itself stays a dumb mapping. Age is computed on read and
compared against a caller-supplied TTL; "never written" and "expired" are
indistinguishable to callers.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from isswatch.exceptions import StoreUnavailable

_logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class KeyValueStore(Protocol):
    """Structural persistent store interface.

    Implementations raise :class:`StoreUnavailable` (or anything else) on
    failure; :class:`TtlCache` degrades such errors to a miss.
    """

    async def get(self, keys: list[str]) -> dict[str, Any]:
        ...

    async def set(self, items: Mapping[str, Any]) -> None:
        ...


class MemoryStore:
    """In-process store. Values are copied through JSON to mimic persistence."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        if initial:
            for key, value in initial.items():
                self._data[key] = json.dumps(value)

    async def get(self, keys: list[str]) -> dict[str, Any]:
        return {key: json.loads(self._data[key]) for key in keys if key in self._data}

    async def set(self, items: Mapping[str, Any]) -> None:
        for key, value in items.items():
            self._data[key] = json.dumps(value)


class JsonFileStore:
    """Store backed by a single JSON object on disk.

    A missing file reads as empty; an unreadable or corrupted file raises
    :class:`StoreUnavailable`. Writes replace the file atomically. File I/O
    runs in a worker thread.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StoreUnavailable(f"Cannot read {self._path}: {exc}") from exc
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreUnavailable(f"Corrupted store file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreUnavailable(f"Store file {self._path} does not hold a JSON object")
        return data

    def _dump(self, data: dict[str, Any]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, separators=(",", ":")), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as exc:
            raise StoreUnavailable(f"Cannot write {self._path}: {exc}") from exc

    async def get(self, keys: list[str]) -> dict[str, Any]:
        data = await asyncio.to_thread(self._load)
        return {key: data[key] for key in keys if key in data}

    async def set(self, items: Mapping[str, Any]) -> None:
        async with self._lock:

            def _update() -> None:
                try:
                    data = self._load()
                except StoreUnavailable:
                    # Overwrite a corrupted file rather than failing forever.
                    data = {}
                data.update(items)
                self._dump(data)

            await asyncio.to_thread(_update)


class CacheEntry(BaseModel):
    """A cached value and the time it was written (epoch seconds)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: Any = Field(alias="payload")
    written_at: float = Field(alias="timestamp")

    def age(self, now: float) -> float:
        return now - self.written_at

    def to_store(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TtlCache:
    """Fresh and stale-tolerant reads over a :class:`KeyValueStore`."""

    def __init__(self, store: KeyValueStore, *, clock: Clock = time.time) -> None:
        self._store = store
        self._clock = clock
        self._last_written: dict[str, float] = {}

    async def _entry(self, key: str) -> CacheEntry | None:
        try:
            result = await self._store.get([key])
        except Exception:
            _logger.warning("Store read failed for %s, treating as miss", key, exc_info=True)
            return None
        raw = result.get(key) if isinstance(result, Mapping) else None
        if raw is None:
            return None
        try:
            return CacheEntry.model_validate(raw)
        except ValidationError:
            _logger.debug("Ignoring malformed cache entry for %s", key)
            return None

    async def _read_within(self, key: str, ttl: float) -> Any | None:
        entry = await self._entry(key)
        if entry is None:
            _logger.debug("Cache miss for %s", key)
            return None
        age = entry.age(self._clock())
        if age >= ttl:
            _logger.debug("Cache entry for %s expired (age=%.1fs ttl=%.1fs)", key, age, ttl)
            return None
        _logger.debug("Cache hit for %s (age=%.1fs)", key, age)
        return entry.value

    async def read(self, key: str, ttl: float) -> Any | None:
        """Return the cached value for *key* if younger than *ttl* seconds."""
        return await self._read_within(key, ttl)

    async def read_stale(self, key: str, stale_ttl: float) -> Any | None:
        """Fallback read with the looser *stale_ttl* bound."""
        return await self._read_within(key, stale_ttl)

    async def write(self, key: str, value: Any) -> None:
        """Store *value* under *key* stamped with the current time."""
        written_at = max(self._clock(), self._last_written.get(key, float("-inf")))
        entry = CacheEntry(value=value, written_at=written_at)
        try:
            await self._store.set({key: entry.to_store()})
        except Exception:
            _logger.warning("Store write failed for %s", key, exc_info=True)
            return
        self._last_written[key] = written_at
