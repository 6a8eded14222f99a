from __future__ import annotations

# pylint: disable=redefined-outer-name

from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from isswatch._cache import MemoryStore, TtlCache
from isswatch.exceptions import StoreUnavailable, TransportFailure

ISS_URL = "https://api.wheretheiss.at/v1/satellites/25544"


@dataclass
class FakeClock:
    now: float = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeTransport:
    """Queue of canned responses (or exceptions) per URL."""

    responses: dict[str, list[Any]] = field(default_factory=lambda: defaultdict(list))
    calls: list[tuple[str, float]] = field(default_factory=list)

    def add(self, url: str, *items: Any) -> None:
        self.responses[url].extend(items)

    async def get_json(self, url: str, *, timeout: float) -> Any:
        self.calls.append((url, timeout))
        queue = self.responses.get(url)
        if not queue:
            raise TransportFailure(f"no route to {url}", url=url)
        item = queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


class BrokenStore:
    async def get(self, keys: list[str]) -> dict[str, Any]:
        raise StoreUnavailable("store offline")

    async def set(self, items: Mapping[str, Any]) -> None:
        raise StoreUnavailable("store offline")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(store: MemoryStore, clock: FakeClock) -> TtlCache:
    return TtlCache(store, clock=clock)
