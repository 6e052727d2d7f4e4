# File: domain_scout/engine.py
"""domain_scout.engine: Orchestration layer для запуска сканирования.

Обход сайтов и проверка доменов идут одновременно: каждый новый внешний
домен сразу уходит в канал, который читают воркеры проверки. После
последнего стартового сайта канал закрывается, воркеры дочитывают остаток.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Dict, List, Optional, Set

from domain_scout.aggregator import CheckOutcome, ScanReport, build_results, merge_sources
from domain_scout.config import ScanConfiguration
from domain_scout.crawler.crawler import CrawlEngine
from domain_scout.crawler.dedup import ContentDeduplicator
from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.crawler.renderer import BrowserRenderPool
from domain_scout.domains.checker import DomainCheckEngine
from domain_scout.domains.dns_resolver import DnsResolver
from domain_scout.domains.exclusions import should_exclude
from domain_scout.domains.suffix import DomainExtractor
from domain_scout.domains.whois_client import WhoisClient
from domain_scout.events import DomainChecked, EventSink, PhaseChanged, ScanPhase, StatusMessage, emit

__all__ = ["ChannelClosed", "DomainChannel", "ScanPipeline", "start_scan"]

logger = logging.getLogger(__name__)

_CLOSED = object()


class ChannelClosed(RuntimeError):
    """Отправка в уже закрытый канал."""


class DomainChannel:
    """Неограниченная очередь доменов с явным закрытием.

    После :meth:`close` получатели дочитывают оставшиеся элементы, затем
    :meth:`receive` возвращает ``None`` каждому из них.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, domain: str) -> None:
        if self._closed:
            raise ChannelClosed(domain)
        self._queue.put_nowait(domain)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    async def receive(self) -> Optional[str]:
        item = await self._queue.get()
        if item is _CLOSED:
            # маркер возвращается для остальных получателей
            self._queue.put_nowait(_CLOSED)
            return None
        return item

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        while True:
            item = await self.receive()
            if item is None:
                return
            yield item


class ScanPipeline:
    """Один запуск сканирования: обход всех стартовых сайтов и проверка доменов."""

    def __init__(
        self,
        config: ScanConfiguration,
        *,
        sink: Optional[EventSink] = None,
        check_engine: Optional[DomainCheckEngine] = None,
        extractor: Optional[DomainExtractor] = None,
        renderer: Optional[BrowserRenderPool] = None,
    ) -> None:
        self.config = config
        self.sink = sink
        self.check_engine = check_engine or DomainCheckEngine(
            DnsResolver(timeout=config.dns_timeout),
            WhoisClient(timeout=config.whois_timeout),
            per_tld_limit=config.tld_whois_limit,
        )
        self.extractor = extractor
        self.renderer = renderer
        self.cancel_event = asyncio.Event()
        self.dedup = ContentDeduplicator()

    def cancel(self) -> None:
        """Кооперативная отмена: новая работа не начинается, собранное сохраняется."""
        if not self.cancel_event.is_set():
            logger.info("Scan cancellation requested")
            self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    async def _checker(self, channel: DomainChannel, outcomes: Dict[str, CheckOutcome]) -> None:
        async for domain in channel:
            if self.cancelled:
                return
            try:
                available = await self.check_engine.check_domain(domain, self.config.retries)
            except Exception:
                logger.exception("Check of %s failed, treating as registered", domain)
                available = False
            outcomes[domain] = CheckOutcome(domain, available)
            emit(self.sink, DomainChecked(domain, available))

    async def _drain(self, checkers: List[asyncio.Task]) -> None:
        cancel_wait = asyncio.ensure_future(self.cancel_event.wait())
        try:
            remaining = set(checkers)
            while remaining and not self.cancelled:
                done, _ = await asyncio.wait(remaining | {cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
                remaining -= done
        finally:
            cancel_wait.cancel()
            await asyncio.gather(cancel_wait, return_exceptions=True)

    async def run(self) -> ScanReport:
        config = self.config
        channel = DomainChannel()
        outcomes: Dict[str, CheckOutcome] = {}
        queued: Set[str] = set()
        domain_sources: Dict[str, Set[str]] = {}
        pages_visited = 0

        def on_domain(domain: str, source_url: str) -> None:
            if domain in queued or should_exclude(domain, config.excluded_domains):
                return
            queued.add(domain)
            channel.send(domain)

        renderer = self.renderer
        owns_renderer = False
        if config.js_rendering and renderer is None:
            renderer = BrowserRenderPool(
                size=config.render_pool_size,
                timeout=config.render_timeout,
                user_agent=config.user_agent,
            )
            owns_renderer = True

        logger.info("Starting scan of %d seed(s)", len(config.seed_urls))
        checkers = [asyncio.create_task(self._checker(channel, outcomes)) for _ in range(config.check_workers)]
        try:
            async with NetworkClient(user_agent=config.user_agent, timeout=config.request_timeout) as client:
                for seed in config.seed_urls:
                    if self.cancelled:
                        break
                    emit(self.sink, StatusMessage(f"Starting {seed}"))
                    engine = CrawlEngine(
                        config,
                        client,
                        extractor=self.extractor,
                        renderer=renderer,
                        sink=self.sink,
                        cancel_event=self.cancel_event,
                        on_domain=on_domain,
                        dedup=self.dedup,
                    )
                    result = await engine.crawl(seed)
                    pages_visited += len(result.visited)
                    merge_sources(domain_sources, result.domain_sources)

            channel.close()
            if not self.cancelled:
                emit(self.sink, PhaseChanged(ScanPhase.CHECKING))
                logger.info("Crawl finished, checking %d remaining domain(s)", len(queued) - len(outcomes))
                await self._drain(checkers)
        finally:
            channel.close()
            for task in checkers:
                task.cancel()
            await asyncio.gather(*checkers, return_exceptions=True)
            if owns_renderer and renderer is not None:
                await renderer.close()

        available = [o.domain for o in outcomes.values() if o.available]
        report = ScanReport(
            results=build_results(domain_sources, available),
            pages_visited=pages_visited,
            domains_discovered=len(domain_sources),
            domains_checked=len(outcomes),
            cancelled=self.cancelled,
        )
        phase = ScanPhase.CANCELLED if report.cancelled else ScanPhase.DONE
        emit(self.sink, PhaseChanged(phase))
        logger.info(
            "Scan %s: %d pages, %d domains found, %d checked, %d available",
            phase.value,
            report.pages_visited,
            report.domains_discovered,
            report.domains_checked,
            len(report.results),
        )
        return report


async def start_scan(
    config: ScanConfiguration,
    sink: Optional[EventSink] = None,
    scan_timeout: Optional[float] = None,
    **kwargs,
) -> ScanReport:
    """Запускает ScanPipeline; по истечении scan_timeout скан отменяется и отдаёт частичный отчёт."""
    pipeline = ScanPipeline(config, sink=sink, **kwargs)
    handle = None
    if scan_timeout:
        handle = asyncio.get_running_loop().call_later(scan_timeout, pipeline.cancel)
    try:
        return await pipeline.run()
    finally:
        if handle is not None:
            handle.cancel()
