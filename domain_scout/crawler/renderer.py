# domain_scout/crawler/renderer.py
"""
Headless-browser rendering pool used when plain HTML carries too few links.

Rendering is best effort: any browser failure or timeout yields ``None`` and
the crawl keeps the plain-HTML result.
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any, Deque, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from domain_scout.crawler.fetcher import DEFAULT_USER_AGENT

__all__ = ("BrowserRenderPool",)

logger = logging.getLogger(__name__)


class BrowserRenderPool:
    """Fixed set of browser pages handed out one caller at a time.

    Waiters queue in FIFO order; a released page goes straight to the oldest
    waiter instead of back to the free list.
    """

    def __init__(
        self,
        size: int = 3,
        timeout: float = 10.0,
        settle_delay: float = 1.5,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        if size < 1:
            raise ValueError("size must be >= 1")
        self.size = size
        self.timeout = timeout
        self.settle_delay = settle_delay
        self.user_agent = user_agent
        self._free: List[Any] = []
        self._waiters: Deque[asyncio.Future] = deque()
        self._started = False
        self._broken = False
        self._start_lock = asyncio.Lock()
        self._playwright: Any = None
        self._browser: Any = None

    async def _launch(self) -> List[Any]:
        """Start Chromium and open ``size`` pages sharing one context."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=True)
        context = await self._browser.new_context(user_agent=self.user_agent)
        return [await context.new_page() for _ in range(self.size)]

    async def start(self) -> None:
        if self._started:
            return
        async with self._start_lock:
            if self._started:
                return
            self._free = list(await self._launch())
            self._started = True
            logger.debug("Render pool started with %d pages", len(self._free))

    async def acquire(self) -> Any:
        await self.start()
        if self._free:
            return self._free.pop()
        fut: asyncio.Future = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        try:
            return await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                # handed over right before cancellation; pass it on
                self.release(fut.result())
            elif fut in self._waiters:
                self._waiters.remove(fut)
            raise

    def release(self, page: Any) -> None:
        while self._waiters:
            fut = self._waiters.popleft()
            if not fut.done():
                fut.set_result(page)
                return
        self._free.append(page)

    async def render(self, url: str, timeout: Optional[float] = None) -> Optional[str]:
        """Load *url*, let deferred scripts run, return the live DOM markup."""
        if self._broken:
            return None
        limit = timeout if timeout is not None else self.timeout
        try:
            page = await self.acquire()
        except PlaywrightError as exc:
            self._broken = True
            logger.warning("Browser unavailable, rendering disabled: %s", exc)
            return None
        try:
            await page.goto(url, wait_until="load", timeout=int(limit * 1000))
            if self.settle_delay:
                await asyncio.sleep(self.settle_delay)
            return await page.content()
        except (PlaywrightError, asyncio.TimeoutError) as exc:
            logger.debug("Render failed for %s: %s", url, exc)
            return None
        finally:
            self.release(page)

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self._free.clear()
        self._started = False
