"""Custom exception hierarchy for isswatch."""

from __future__ import annotations


class IssWatchError(Exception):
    """Base exception for all isswatch errors."""


class IssWatchConfigError(IssWatchError):
    """Invalid configuration (threshold order, non-positive TTLs)."""


class TransportFailure(IssWatchError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class RateLimited(TransportFailure):
    """Upstream signalled throttling (HTTP 429).

    The position fetcher answers this with a stale-cache read instead
    of retrying.
    """


class InvalidPayload(IssWatchError):
    """Response decoded but does not carry a usable coordinate."""


class ProviderFailure(IssWatchError):
    """A single location provider failed; the next one is tried."""

    def __init__(self, message: str, *, provider: str = "") -> None:
        self.provider = provider
        super().__init__(message)


class AllProvidersFailure(IssWatchError):
    """Every location provider failed; observer location is unknown."""

    def __init__(self, message: str, *, failures: list[ProviderFailure] | None = None) -> None:
        self.failures = failures or []
        super().__init__(message)


class StoreUnavailable(IssWatchError):
    """Persistence layer error.

    Raised by store implementations; :class:`~isswatch._cache.TtlCache`
    treats it as a cache miss.
    """
