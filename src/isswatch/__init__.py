"""isswatch - Async proximity watcher for the International Space Station."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("isswatch")
except PackageNotFoundError:
    __version__ = "0+local"
from isswatch._cache import JsonFileStore, KeyValueStore, MemoryStore, TtlCache
from isswatch.classifier import Thresholds, classify
from isswatch.config import EdgePolicy, WatchConfig
from isswatch.debounce import AlertDebouncer
from isswatch.distance import distance_km
from isswatch.engine import ProximityEngine
from isswatch.exceptions import (
    AllProvidersFailure,
    InvalidPayload,
    IssWatchConfigError,
    IssWatchError,
    ProviderFailure,
    RateLimited,
    StoreUnavailable,
    TransportFailure,
)
from isswatch.location import LocationResolver
from isswatch.models import (
    AlertDecision,
    ConnectionStatus,
    EngineSnapshot,
    GeoCoordinate,
    PositionReading,
    ProximityState,
    TrackedPosition,
)
from isswatch.notify import LogNotifier, NotificationHandle, Notifier
from isswatch.tracker import PositionFetcher

__all__ = [
    "__version__",
    "AlertDebouncer",
    "AlertDecision",
    "AllProvidersFailure",
    "ConnectionStatus",
    "EdgePolicy",
    "EngineSnapshot",
    "GeoCoordinate",
    "InvalidPayload",
    "IssWatchConfigError",
    "IssWatchError",
    "JsonFileStore",
    "KeyValueStore",
    "LocationResolver",
    "LogNotifier",
    "MemoryStore",
    "NotificationHandle",
    "Notifier",
    "PositionFetcher",
    "PositionReading",
    "ProviderFailure",
    "ProximityEngine",
    "ProximityState",
    "RateLimited",
    "StoreUnavailable",
    "Thresholds",
    "TrackedPosition",
    "TransportFailure",
    "TtlCache",
    "WatchConfig",
    "classify",
    "distance_km",
]
