# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Dict, Iterable, List, Optional

import pytest
from aiohttp import web

from domain_scout.config import ScanConfiguration
from domain_scout.events import ScanEvent

#: Padding that pushes page bodies past the start of the dedup fingerprint window.
NAV_PADDING = "<div class='nav'>" + "menu " * 420 + "</div>"


def padded_page(body: str, title: str = "page") -> str:
    """HTML document whose unique *body* lands inside the fingerprinted byte range."""
    return f"<html><head><title>{title}</title></head><body>{NAV_PADDING}{body}</body></html>"


def html_response(body: str, title: str = "page") -> web.Response:
    return web.Response(text=padded_page(body, title), content_type="text/html")


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def make_config():
    """
    Factory for a fast ScanConfiguration: no seeding, no delay.
    """

    def _make(*seeds: str, **overrides) -> ScanConfiguration:
        params = dict(
            seed_urls=list(seeds),
            max_pages=50,
            max_depth=5,
            crawl_workers=4,
            check_workers=2,
            delay=0,
            use_sitemaps=False,
            request_timeout=5.0,
            user_agent="TestAgent/1.0",
        )
        params.update(overrides)
        return ScanConfiguration(**params)

    return _make


@pytest.fixture()
def events() -> List[ScanEvent]:
    return []


@pytest.fixture()
def sink(events):
    return events.append


class FakeResolver:
    """DNS stand-in: names in *registered* resolve."""

    def __init__(self, registered: Iterable[str] = ()) -> None:
        self.registered = set(registered)
        self.calls: List[str] = []

    async def resolves(self, domain: str) -> bool:
        self.calls.append(domain)
        return domain in self.registered


class FakeWhois:
    """WHOIS stand-in with scripted answers and a concurrency probe."""

    def __init__(self, available: Iterable[str] = (), delay: float = 0.0) -> None:
        self.available = set(available)
        self.delay = delay
        self.calls: List[str] = []
        self.active: Dict[str, int] = {}
        self.peak: Dict[str, int] = {}
        self.running = 0
        self.overall_peak = 0

    async def is_available(self, domain: str) -> bool:
        self.calls.append(domain)
        tld = domain.rsplit(".", 1)[-1]
        self.active[tld] = self.active.get(tld, 0) + 1
        self.peak[tld] = max(self.peak.get(tld, 0), self.active[tld])
        self.running += 1
        self.overall_peak = max(self.overall_peak, self.running)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return domain in self.available
        finally:
            self.active[tld] -= 1
            self.running -= 1


class FakeCheckEngine:
    """Domain check engine stand-in: *available* domains are free, the rest registered."""

    def __init__(self, available: Iterable[str] = (), delay: float = 0.0) -> None:
        self.available = set(available)
        self.delay = delay
        self.checked: List[str] = []

    async def check_domain(self, domain: str, retries: int = 3) -> bool:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.checked.append(domain)
        return domain in self.available


class FakePage:
    """Playwright page stand-in used by the render pool tests."""

    def __init__(self, html: str = "<html></html>", error: Optional[BaseException] = None) -> None:
        self.html = html
        self.error = error
        self.visited: List[str] = []

    async def goto(self, url: str, wait_until: str = "load", timeout: int = 0) -> None:
        self.visited.append(url)
        if self.error is not None:
            raise self.error

    async def content(self) -> str:
        return self.html
