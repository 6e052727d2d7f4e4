# domain_scout/crawler/models.py
"""
Data models for the DomainScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from domain_scout.errors import CrawlError


@dataclass(frozen=True, slots=True, order=True)
class CrawlQueueItem:
    """Scheduled URL; ordering is (priority, sequence) so equal priorities stay FIFO."""

    priority: int
    sequence: int
    url: str = field(compare=False)
    depth: int = field(compare=False)


@dataclass(slots=True)
class FetchResponse:
    """Body and metadata of one HTTP GET, after redirects."""

    url: str
    status: int
    content_type: str
    text: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()


@dataclass(slots=True)
class ExtractedLinks:
    """Links found in one document, split by how the crawl uses them."""

    crawl_urls: List[str] = field(default_factory=list)
    anchor_urls: List[str] = field(default_factory=list)
    pagination_urls: List[str] = field(default_factory=list)
    iframe_urls: List[str] = field(default_factory=list)


@dataclass(slots=True)
class PageResult:
    """Outcome of processing one dequeued item, computed off the owner coroutine."""

    item: CrawlQueueItem
    internal_links: List[Tuple[str, int]] = field(default_factory=list)
    pagination_links: List[Tuple[str, int]] = field(default_factory=list)
    external_domains: List[Tuple[str, str]] = field(default_factory=list)
    error: Optional[CrawlError] = None
    duplicate: bool = False

    @property
    def link_count(self) -> int:
        return len(self.internal_links) + len(self.external_domains)

    @classmethod
    def failed(cls, item: CrawlQueueItem, error: CrawlError) -> PageResult:
        return cls(item=item, error=error)


@dataclass(slots=True)
class CrawlResult:
    """Everything one crawl run leaves behind."""

    visited: Set[str] = field(default_factory=set)
    domain_sources: Dict[str, Set[str]] = field(default_factory=dict)
    errors: List[CrawlError] = field(default_factory=list)
