# File: tests/test_renderer.py
from __future__ import annotations

import asyncio
from typing import List

import pytest
from playwright.async_api import Error as PlaywrightError

from conftest import FakePage
from domain_scout.crawler.renderer import BrowserRenderPool


class FakePool(BrowserRenderPool):
    """Render pool over prepared pages; no browser is started."""

    def __init__(self, pages: List[FakePage], **kwargs) -> None:
        super().__init__(size=len(pages), settle_delay=0, **kwargs)
        self.pages = pages
        self.launches = 0

    async def _launch(self):
        self.launches += 1
        return list(self.pages)


class BrokenPool(BrowserRenderPool):
    async def _launch(self):
        raise PlaywrightError("Executable doesn't exist")


@pytest.mark.asyncio()
async def test_render_returns_markup():
    page = FakePage("<html><a href='https://lost-site.com'>x</a></html>")
    pool = FakePool([page])
    html = await pool.render("https://example.com/spa")
    assert "lost-site.com" in html
    assert page.visited == ["https://example.com/spa"]
    assert pool.launches == 1


@pytest.mark.asyncio()
async def test_render_failure_returns_none_and_releases():
    page = FakePage(error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
    pool = FakePool([page])
    assert await pool.render("https://example.com/a") is None
    # the only page went back to the pool
    assert await asyncio.wait_for(pool.acquire(), timeout=1) is page


@pytest.mark.asyncio()
async def test_render_timeout_returns_none():
    page = FakePage(error=asyncio.TimeoutError())
    pool = FakePool([page])
    assert await pool.render("https://example.com/slow", timeout=0.1) is None


@pytest.mark.asyncio()
async def test_released_page_goes_to_oldest_waiter():
    page = FakePage()
    pool = FakePool([page])
    held = await pool.acquire()
    order = []

    async def waiter(name: str):
        got = await pool.acquire()
        order.append(name)
        pool.release(got)

    tasks = [asyncio.create_task(waiter(n)) for n in ("first", "second", "third")]
    await asyncio.sleep(0)
    assert order == []
    pool.release(held)
    await asyncio.gather(*tasks)
    assert order == ["first", "second", "third"]


@pytest.mark.asyncio()
async def test_cancelled_waiter_does_not_swallow_page():
    page = FakePage()
    pool = FakePool([page])
    held = await pool.acquire()

    doomed = asyncio.create_task(pool.acquire())
    await asyncio.sleep(0)
    doomed.cancel()
    with pytest.raises(asyncio.CancelledError):
        await doomed

    pool.release(held)
    assert await asyncio.wait_for(pool.acquire(), timeout=1) is page


@pytest.mark.asyncio()
async def test_launch_failure_disables_rendering():
    pool = BrokenPool(size=1)
    assert await pool.render("https://example.com/") is None
    assert await pool.render("https://example.com/other") is None


@pytest.mark.asyncio()
async def test_start_is_idempotent():
    pool = FakePool([FakePage(), FakePage()])
    await asyncio.gather(pool.start(), pool.start())
    assert pool.launches == 1
    await pool.close()


def test_pool_size_validation():
    with pytest.raises(ValueError):
        BrowserRenderPool(size=0)
