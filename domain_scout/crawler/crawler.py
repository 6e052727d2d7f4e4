# domain_scout/crawler/crawler.py
"""
Crawl engine: one run per seed site.

Only :meth:`CrawlEngine.crawl` mutates the frontier, the visited set and the
domain map. Worker tasks fetch and analyse a page and hand a
:class:`PageResult` back; the owner integrates results one at a time as they
complete.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional, Set
from urllib.parse import urlsplit

from domain_scout.config import JSRenderMode, ScanConfiguration
from domain_scout.crawler.dedup import ContentDeduplicator
from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.crawler.link_extractor import extract_links
from domain_scout.crawler.models import CrawlQueueItem, CrawlResult, FetchResponse, PageResult
from domain_scout.crawler.priority import CrawlQueue, pagination_priority, url_priority
from domain_scout.crawler.renderer import BrowserRenderPool
from domain_scout.crawler.robots import fetch_sitemap_urls
from domain_scout.domains.suffix import DomainExtractor, default_extractor
from domain_scout.errors import CrawlError, FetchTimeout, HTTPStatusError, InvalidURL, NonHTMLContent
from domain_scout.events import (
    DomainDiscovered,
    EventSink,
    PageCrawled,
    PageFailed,
    PhaseChanged,
    Progress,
    ScanPhase,
    StatusMessage,
    emit,
)
from domain_scout.seeders import commoncrawl, rss, sitemap, wayback, wordpress
from domain_scout.utils import ensure_scheme, host_of, is_same_site, normalize_url

__all__ = ("CrawlEngine", "Frontier")

logger = logging.getLogger(__name__)

DomainCallback = Callable[[str, str], None]

#: Enqueued-set ceiling as a multiple of the page budget.
ENQUEUE_FACTOR = 5

SEED_DEPTH = 0
SITE_SOURCE_DEPTH = 1
ARCHIVE_DEPTH = 2


@dataclass
class Frontier:
    """Priority queue plus the visited/enqueued bookkeeping of one crawl."""

    max_enqueued: int
    queue: CrawlQueue = field(default_factory=CrawlQueue)
    visited: Set[str] = field(default_factory=set)
    enqueued: Set[str] = field(default_factory=set)

    def add(self, url: str, depth: int, priority: Optional[int] = None) -> bool:
        if url in self.visited or url in self.enqueued or len(self.enqueued) >= self.max_enqueued:
            return False
        self.queue.push(url, depth, url_priority(url, depth) if priority is None else priority)
        self.enqueued.add(url)
        return True


@dataclass
class _Site:
    base_url: str
    host: str
    reg_domain: str


class CrawlEngine:
    """Priority-ordered, bounded-concurrency crawl of a single site."""

    def __init__(
        self,
        config: ScanConfiguration,
        client: NetworkClient,
        *,
        extractor: Optional[DomainExtractor] = None,
        renderer: Optional[BrowserRenderPool] = None,
        sink: Optional[EventSink] = None,
        cancel_event: Optional[asyncio.Event] = None,
        on_domain: Optional[DomainCallback] = None,
        dedup: Optional[ContentDeduplicator] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.extractor = extractor or default_extractor()
        self.renderer = renderer
        self.sink = sink
        self.cancel_event = cancel_event or asyncio.Event()
        self.on_domain = on_domain
        self.dedup = dedup or ContentDeduplicator()
        self._js_sampled = 0

    # ------------------------------------------------------------------ #
    # public API                                                         #
    # ------------------------------------------------------------------ #

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    @property
    def js_enabled(self) -> bool:
        return self.config.js_rendering and self.renderer is not None

    async def crawl(self, start_url: str) -> CrawlResult:
        result = CrawlResult()
        raw = ensure_scheme(start_url)
        start = normalize_url(raw)
        host = host_of(start) if start else None
        if start is None or host is None:
            result.errors.append(InvalidURL(start_url))
            emit(self.sink, PageFailed(start_url, str(result.errors[-1])))
            return result

        frontier = Frontier(max_enqueued=self.config.max_pages * ENQUEUE_FACTOR, visited=result.visited)
        frontier.add(start, SEED_DEPTH)
        self._js_sampled = 0

        emit(self.sink, PhaseChanged(ScanPhase.SEEDING))
        site = await self._resolve_site(raw, start, frontier)
        logger.info("Crawling %s (site domain %s)", site.base_url, site.reg_domain)
        if self.js_enabled:
            emit(self.sink, StatusMessage(f"JavaScript rendering enabled ({self.config.js_render_mode.value} mode)"))

        await self._seed(site, frontier)
        if self.cancelled:
            return result

        emit(self.sink, PhaseChanged(ScanPhase.CRAWLING))
        emit(self.sink, StatusMessage(f"Crawling {len(frontier.queue)} queued URLs..."))
        await self._run_workers(site, frontier, result)
        logger.info(
            "Finished %s: %d pages, %d external domains, %d errors",
            site.base_url,
            len(result.visited),
            len(result.domain_sources),
            len(result.errors),
        )
        return result

    # ------------------------------------------------------------------ #
    # seeding                                                            #
    # ------------------------------------------------------------------ #

    async def _resolve_site(self, raw: str, start: str, frontier: Frontier) -> _Site:
        parts = urlsplit(start)
        host = parts.hostname or ""
        site = _Site(
            base_url=f"{parts.scheme}://{parts.netloc}",
            host=host,
            reg_domain=self.extractor.registrable_domain(host) or host,
        )
        if self.cancelled:
            return site
        try:
            resp = await self.client.get(raw, timeout=self.config.request_timeout)
        except CrawlError as exc:
            logger.debug("Initial fetch of %s failed: %s", raw, exc)
            return site

        final = urlsplit(resp.url)
        final_host = (final.hostname or "").lower()
        if final_host and final_host != host:
            site = _Site(
                base_url=f"{final.scheme}://{final.netloc}",
                host=final_host,
                reg_domain=self.extractor.registrable_domain(final_host) or final_host,
            )
            norm = normalize_url(resp.url)
            if norm:
                frontier.add(norm, SEED_DEPTH)
            emit(self.sink, StatusMessage(f"Redirected to {site.base_url}"))
        return site

    async def _collect(self, label: str, pending: Awaitable[Set[str]]) -> Set[str]:
        try:
            return await pending
        except Exception as exc:
            logger.warning("%s seeding failed: %s", label, exc)
            return set()

    def _add_seeds(self, frontier: Frontier, urls: Set[str], depth: int, site: Optional[_Site] = None) -> int:
        added = 0
        for url in sorted(urls):
            if site is not None:
                host = host_of(url)
                if not host or not is_same_site(host, site.reg_domain):
                    continue
            if frontier.add(url, depth):
                added += 1
        return added

    async def _seed(self, site: _Site, frontier: Frontier) -> None:
        if self.config.use_sitemaps and not self.cancelled:
            emit(self.sink, StatusMessage("Fetching sitemaps..."))
            robots_maps = await self._collect("robots.txt", fetch_sitemap_urls(self.client, site.base_url))
            urls = await self._collect("Sitemap", sitemap.fetch_urls(self.client, site.base_url, robots_maps))
            self._add_seeds(frontier, urls, SITE_SOURCE_DEPTH)
            emit(self.sink, StatusMessage(f"Seeded {len(urls)} sitemap URLs"))

            if not self.cancelled:
                emit(self.sink, StatusMessage("Fetching RSS feeds..."))
                urls = await self._collect("RSS", rss.fetch_urls(self.client, site.base_url))
                self._add_seeds(frontier, urls, SITE_SOURCE_DEPTH)

            if not self.cancelled:
                emit(self.sink, StatusMessage("Detecting WordPress..."))
                urls = await self._collect("WordPress", wordpress.fetch_urls(self.client, site.base_url))
                if urls:
                    added = self._add_seeds(frontier, urls, SITE_SOURCE_DEPTH, site)
                    emit(self.sink, StatusMessage(f"WordPress detected, seeded {added} URLs from WP API"))

        if self.config.use_archives and not self.cancelled:
            emit(self.sink, StatusMessage("Fetching Wayback Machine URLs..."))
            urls = await self._collect("Wayback", wayback.fetch_urls(self.client, site.reg_domain))
            added = self._add_seeds(frontier, urls, ARCHIVE_DEPTH, site)
            emit(self.sink, StatusMessage(f"Seeded {added} Wayback URLs"))

            if not self.cancelled:
                emit(self.sink, StatusMessage("Fetching Common Crawl URLs..."))
                urls = await self._collect("Common Crawl", commoncrawl.fetch_urls(self.client, site.reg_domain))
                added = self._add_seeds(frontier, urls, ARCHIVE_DEPTH, site)
                emit(self.sink, StatusMessage(f"Seeded {added} Common Crawl URLs"))

    # ------------------------------------------------------------------ #
    # crawl loop                                                         #
    # ------------------------------------------------------------------ #

    def _wants_render(self) -> bool:
        if not self.js_enabled:
            return False
        mode = self.config.js_render_mode
        if mode is JSRenderMode.ALL_PAGES:
            return True
        if mode is JSRenderMode.SAMPLE and self._js_sampled < self.config.js_sample_size:
            self._js_sampled += 1
            return True
        return False

    async def _run_workers(self, site: _Site, frontier: Frontier, result: CrawlResult) -> None:
        pending: Set[asyncio.Task] = set()
        cancel_wait = asyncio.ensure_future(self.cancel_event.wait())
        workers = self.config.crawl_workers
        max_pages = self.config.max_pages
        try:
            while True:
                while (
                    len(pending) < workers
                    and frontier.queue
                    and len(frontier.visited) + len(pending) < max_pages
                    and not self.cancelled
                ):
                    item = frontier.queue.pop()
                    if item is None or item.url in frontier.visited:
                        continue
                    use_js = self._wants_render()
                    pending.add(asyncio.create_task(self._process_page(item, site, use_js)))

                if not pending or self.cancelled:
                    break
                done, _ = await asyncio.wait(pending | {cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    if task is cancel_wait:
                        continue
                    pending.discard(task)
                    self._integrate(task.result(), frontier, result)
        finally:
            cancel_wait.cancel()
            for task in pending:
                task.cancel()
            await asyncio.gather(cancel_wait, *pending, return_exceptions=True)
            if pending:
                logger.info("Abandoned %d in-flight pages", len(pending))

    def _integrate(self, page: PageResult, frontier: Frontier, result: CrawlResult) -> None:
        item = page.item
        frontier.visited.add(item.url)

        if page.error is not None:
            result.errors.append(page.error)
            logger.debug("Page failed: %s", page.error)
            emit(self.sink, PageFailed(item.url, str(page.error)))
        else:
            emit(self.sink, PageCrawled(item.url, page.link_count))

        # rel=next/prev urls are also crawl links; queue them first so they keep the page's depth
        max_depth = self.config.max_depth
        for link, depth in page.pagination_links:
            if depth <= max_depth:
                frontier.add(link, depth, pagination_priority(depth))
        for link, depth in page.internal_links:
            if depth <= max_depth:
                frontier.add(link, depth)

        for domain, source in page.external_domains:
            sources = result.domain_sources.get(domain)
            if sources is None:
                result.domain_sources[domain] = {source}
                emit(self.sink, DomainDiscovered(domain, source))
                if self.on_domain is not None:
                    self.on_domain(domain, source)
            else:
                sources.add(source)

        emit(self.sink, Progress(len(frontier.visited), self.config.max_pages, len(result.domain_sources), item.depth))

    # ------------------------------------------------------------------ #
    # per-page work (runs in worker tasks, touches no shared state)      #
    # ------------------------------------------------------------------ #

    async def _render(self, url: str) -> Optional[str]:
        if self.renderer is None:
            return None
        return await self.renderer.render(url, self.config.render_timeout)

    async def _fetch_html(self, url: str) -> FetchResponse:
        resp = await self.client.get(url, timeout=self.config.request_timeout)
        if not resp.ok:
            raise HTTPStatusError(url, resp.status)
        if not resp.is_html:
            raise NonHTMLContent(url, resp.content_type)
        return resp

    async def _process_page(self, item: CrawlQueueItem, site: _Site, use_js: bool) -> PageResult:
        if self.config.delay > 0:
            await asyncio.sleep(self.config.delay)

        base_url = item.url
        if use_js:
            html = await self._render(item.url)
            if html is None:
                return PageResult.failed(item, FetchTimeout(item.url))
        else:
            try:
                resp = await self._fetch_html(item.url)
            except CrawlError as exc:
                return PageResult.failed(item, exc)
            html, base_url = resp.text, resp.url

        if self.dedup.is_duplicate(html):
            return PageResult(item=item, duplicate=True)

        page = self._analyse(item, html, site, base_url)
        if (
            not use_js
            and self.js_enabled
            and self.config.js_render_mode is JSRenderMode.FALLBACK
            and page.link_count < self.config.js_fallback_threshold
        ):
            rendered = await self._render(item.url)
            if rendered:
                alt = self._analyse(item, rendered, site, item.url)
                if alt.link_count > page.link_count:
                    page = alt
        return page

    def _analyse(self, item: CrawlQueueItem, html: str, site: _Site, base_url: str) -> PageResult:
        links = extract_links(html, base_url)
        page = PageResult(item=item)

        for url in links.crawl_urls:
            host = host_of(url)
            if host and is_same_site(host, site.reg_domain):
                norm = normalize_url(url)
                if norm:
                    page.internal_links.append((norm, item.depth + 1))

        for url in links.pagination_urls:
            host = host_of(url)
            if host and is_same_site(host, site.reg_domain):
                norm = normalize_url(url)
                if norm:
                    page.pagination_links.append((norm, item.depth))

        seen: Dict[str, None] = {}
        for url in links.anchor_urls:
            host = host_of(url)
            if not host or is_same_site(host, site.reg_domain):
                continue
            domain = self.extractor.registrable_domain(host)
            if domain and domain not in seen:
                seen[domain] = None
                page.external_domains.append((domain, item.url))
        return page
