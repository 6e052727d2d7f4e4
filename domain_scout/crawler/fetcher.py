# domain_scout/crawler/fetcher.py
"""
Fetcher module: a thin aiohttp session wrapper shared by the crawl engine
and every seed collector.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from domain_scout.crawler.models import FetchResponse
from domain_scout.errors import FetchTimeout, InvalidURL, NetworkFailure, ParseFailure

__all__ = ("NetworkClient", "DEFAULT_USER_AGENT")

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

_Params = Union[Mapping[str, Any], Sequence[Tuple[str, str]], None]

_DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class NetworkClient:
    """Handles HTTP GETs with a browser-like identity and a per-call timeout.

    Use as ``async with NetworkClient(...) as client``. Redirects are followed;
    :attr:`FetchResponse.url` holds the final address. Transport problems are
    raised as :class:`NetworkFailure` / :class:`FetchTimeout` so callers can
    record them per page.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15.0,
        limit: int = 100,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self.limit = limit
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> NetworkClient:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers={"User-Agent": self.user_agent, **_DEFAULT_HEADERS},
            connector=TCPConnector(limit=self.limit),
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def get(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        params: _Params = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> FetchResponse:
        """GET *url* and return the decoded body; non-2xx is returned, not raised."""
        if not self.session:
            raise RuntimeError("Session not initialized")
        client_timeout = ClientTimeout(total=timeout or self.timeout)
        try:
            async with self.session.get(
                url, params=params, headers=headers, timeout=client_timeout, allow_redirects=True
            ) as resp:
                text = await resp.text(errors="replace")
                return FetchResponse(
                    url=str(resp.url),
                    status=resp.status,
                    content_type=resp.headers.get("Content-Type", ""),
                    text=text,
                    headers=dict(resp.headers),
                )
        except asyncio.TimeoutError as exc:
            raise FetchTimeout(url) from exc
        except ValueError as exc:
            # yarl rejects hosts and ports it cannot parse
            raise InvalidURL(url) from exc
        except ClientError as exc:
            raise NetworkFailure(url, exc) from exc

    async def get_json(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        params: _Params = None,
    ) -> Optional[Any]:
        """GET *url* and decode JSON.

        ``None`` for a non-2xx status; a 2xx body that is not JSON raises
        :class:`ParseFailure`.
        """
        resp = await self.get(url, timeout=timeout, params=params, headers={"Accept": "application/json"})
        if not resp.ok:
            logger.debug("HTTP %s for %s", resp.status, url)
            return None
        try:
            return json.loads(resp.text)
        except ValueError as exc:
            raise ParseFailure(url, str(exc)) from exc
