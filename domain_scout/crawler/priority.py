# domain_scout/crawler/priority.py
"""
URL scheduling: priority scoring and the min-heap crawl queue.

Lower numbers are crawled first. Content pages (threads, posts, articles)
carry outbound links far more often than navigation pages, so they jump the
queue.
"""
from __future__ import annotations

import heapq
import re
from typing import List, Optional
from urllib.parse import urlsplit

from domain_scout.crawler.models import CrawlQueueItem

__all__ = ("url_priority", "pagination_priority", "CrawlQueue")

_CONTENT_RE = re.compile(
    r"/(?:thread|topic|post|article|blog|entry|discussion|comment|review"
    r"|viewtopic|showthread|showpost|viewthread|p/|t/)",
    re.IGNORECASE,
)
_INDEX_RE = re.compile(
    r"/(?:forum|category|categories|tag|tags|page|index|archive|members|users"
    r"|online|login|register|account|search|wiki|feeds|whats-new|latest-activity|media|help)",
    re.IGNORECASE,
)


def url_priority(url: str, depth: int) -> int:
    """Score *url* found at *depth*: content = depth, navigation = 100 + depth, else 50 + depth."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return 50 + depth
    if _CONTENT_RE.search(path):
        return depth
    if _INDEX_RE.search(path):
        return 100 + depth
    return 50 + depth


def pagination_priority(depth: int) -> int:
    """Pagination leads straight to more content pages: one tier more urgent."""
    return max(0, depth - 1)


class CrawlQueue:
    """Binary min-heap ordered by (priority, insertion sequence)."""

    def __init__(self) -> None:
        self._heap: List[CrawlQueueItem] = []
        self._counter = 0

    def push(self, url: str, depth: int, priority: int) -> CrawlQueueItem:
        self._counter += 1
        item = CrawlQueueItem(priority=priority, sequence=self._counter, url=url, depth=depth)
        heapq.heappush(self._heap, item)
        return item

    def pop(self) -> Optional[CrawlQueueItem]:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
