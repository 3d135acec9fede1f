"""HTTP text transport with fixed connect/read timeouts."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import aiohttp

from solvedtrack._constants import CONNECT_TIMEOUT, ERROR_BODY_LIMIT, READ_TIMEOUT, USER_AGENT
from solvedtrack.exceptions import FetchError

_logger = logging.getLogger(__name__)


def truncate_body(text: str, limit: int = ERROR_BODY_LIMIT) -> str:
    """Return at most *limit* characters of *text*, marking truncation with ``...``."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class TextFetcher(Protocol):
    """Structural fetch interface used by the ingestion loop.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTextFetcher`) concrete.
    """

    async def fetch(self, url: str) -> str:
        ...


class HttpTextFetcher:
    """GET a URL and return its body as text.

    No retries happen here; retry policy belongs to the caller.
    """

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        connect_timeout: float = CONNECT_TIMEOUT,
        read_timeout: float = READ_TIMEOUT,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(
            total=None,
            sock_connect=connect_timeout,
            sock_read=read_timeout,
        )

    async def fetch(self, url: str) -> str:
        headers = {"user-agent": USER_AGENT, "accept": "application/json, text/plain, */*"}

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text(errors="replace")
                if resp.status != 200:
                    message = f"Failed HTTP {resp.status} fetching {url}"
                    snippet = truncate_body(text)
                    if snippet:
                        message += f" - response body: {snippet}"
                    raise FetchError(message, url=url, status_code=resp.status, body=snippet)
        except FetchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            cause = str(exc) or type(exc).__name__
            raise FetchError(f"Error fetching URL {url}: {cause}", url=url) from exc

        return text
