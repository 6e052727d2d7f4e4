# File: domain_scout/seeders/rss.py
"""domain_scout.seeders.rss: Сбор URL записей из RSS/Atom лент сайта."""

from __future__ import annotations

import logging
import re
from typing import List, Set
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.parser.feed_parser import parse_feed_links
from domain_scout.seeders import fetch_ok
from domain_scout.utils import host_of, is_same_site, normalize_url

__all__ = ("FEED_PATHS", "discover_feeds", "fetch_urls")

logger = logging.getLogger(__name__)

FEED_PATHS = ("/feed", "/rss", "/feed/rss", "/rss.xml", "/atom.xml", "/feed.xml", "/feeds")
_FEED_TYPES = ("rss", "atom", "xml")
_DISCOVERY_PASSES = 2


def discover_feeds(html: str, page_url: str) -> List[str]:
    """Ссылки ``<link rel="alternate">`` с типом rss/atom/xml."""
    soup = BeautifulSoup(html, "html.parser")
    feeds: List[str] = []
    for link in soup.find_all("link", href=True):
        if not isinstance(link, Tag):
            continue
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if "alternate" not in [r.lower() for r in rel]:
            continue
        ctype = str(link.get("type") or "").lower()
        if any(t in ctype for t in _FEED_TYPES):
            feeds.append(urljoin(page_url, str(link["href"]).strip()))
    return feeds


async def fetch_urls(client: NetworkClient, base_url: str) -> Set[str]:
    """Находит ленты сайта и возвращает нормализованные ссылки их записей."""
    parts = urlsplit(base_url)
    base_host = (parts.hostname or "").lower()
    origin = f"{parts.scheme or 'https'}://{parts.netloc}"

    feed_urls: Set[str] = {origin + path for path in FEED_PATHS}
    home = await fetch_ok(client, base_url)
    if home is not None:
        feed_urls.update(discover_feeds(home.text, home.url))

    listing_re = re.compile(r"""href=["'](%s/feeds/[^"']+)["']""" % re.escape(origin))
    discovered: Set[str] = set()
    parsed: Set[str] = set()
    # страница-список лент может добавить новые ленты, поэтому два прохода
    for _ in range(_DISCOVERY_PASSES):
        for feed_url in sorted(feed_urls - parsed):
            parsed.add(feed_url)
            resp = await fetch_ok(client, feed_url)
            if resp is None:
                continue
            if "text/html" in resp.content_type.lower():
                feed_urls.update(m.group(1) for m in listing_re.finditer(resp.text))
                continue
            for link in parse_feed_links(resp.text):
                host = host_of(link)
                if not host or not is_same_site(host, base_host):
                    continue
                norm = normalize_url(link)
                if norm:
                    discovered.add(norm)

    logger.debug("Feeds of %s: %d URLs from %d candidates", origin, len(discovered), len(parsed))
    return discovered
