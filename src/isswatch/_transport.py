"""HTTP JSON transport with bounded timeouts."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from isswatch._constants import USER_AGENT
from isswatch.exceptions import RateLimited, TransportFailure

_logger = logging.getLogger(__name__)


def _preview(body: bytes) -> str:
    return body[:200].decode("utf-8", errors="replace")


class Transport(Protocol):
    """Structural transport interface used by the resolver and fetcher.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str, *, timeout: float) -> Any:
        ...


class HttpTransport:
    """GET JSON documents through a shared :class:`aiohttp.ClientSession`."""

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def get_json(self, url: str, *, timeout: float) -> Any:
        """Fetch *url* and decode its JSON body.

        Raises
        ------
        RateLimited
            On HTTP 429.
        TransportFailure
            On network errors, timeouts, other non-2xx statuses and
            undecodable bodies.
        """
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                body = await resp.read()
                if resp.status == 429:
                    raise RateLimited(
                        f"HTTP 429 from {url}",
                        status_code=resp.status,
                        url=url,
                    )
                if not 200 <= resp.status < 300:
                    raise TransportFailure(
                        f"HTTP {resp.status} from {url}: {_preview(body)}",
                        status_code=resp.status,
                        url=url,
                    )
        except TransportFailure:
            raise
        except TimeoutError as exc:
            raise TransportFailure(f"Request to {url} timed out after {timeout}s", url=url) from exc
        except aiohttp.ClientError as exc:
            raise TransportFailure(f"Request to {url} failed: {exc}", url=url) from exc

        # json.loads detects UTF-8/16/32; bad bytes raise UnicodeDecodeError.
        try:
            return json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise TransportFailure(
                f"Undecodable JSON body from {url}: {_preview(body)}",
                status_code=resp.status,
                url=url,
            ) from exc
