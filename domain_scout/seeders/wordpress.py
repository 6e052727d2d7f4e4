# File: domain_scout/seeders/wordpress.py
"""domain_scout.seeders.wordpress: Сбор URL через WordPress REST API и wp-sitemap."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Iterable, Set
from urllib.parse import urlsplit

from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.parser.sitemap_parser import parse_sitemap
from domain_scout.seeders import fetch_ok
from domain_scout.utils import host_of, is_same_site, normalize_url

__all__ = ("is_wordpress", "fetch_urls")

logger = logging.getLogger(__name__)

_WP_MARKERS = ("wp-content/", "wp-includes/", "/wp-json/", "wordpress")
_MAX_POST_PAGES = 5
_PER_PAGE = 100
_DETECT_TIMEOUT = 8.0
_API_TIMEOUT = 10.0


async def is_wordpress(client: NetworkClient, origin: str) -> bool:
    """Сайт на WordPress: отвечает ``/wp-json/`` либо главная содержит характерные пути."""
    if await fetch_ok(client, f"{origin}/wp-json/", timeout=_DETECT_TIMEOUT) is not None:
        return True
    home = await fetch_ok(client, origin, timeout=_DETECT_TIMEOUT)
    if home is None:
        return False
    lower = home.text.lower()
    return any(marker in lower for marker in _WP_MARKERS)


def _links_from(items: Any) -> Set[str]:
    urls: Set[str] = set()
    if not isinstance(items, list):
        return urls
    for item in items:
        link = item.get("link") if isinstance(item, dict) else None
        if isinstance(link, str):
            norm = normalize_url(link)
            if norm:
                urls.add(norm)
    return urls


async def _get_items(client: NetworkClient, url: str, params: dict):
    resp = await fetch_ok(client, url, timeout=_API_TIMEOUT, params=params)
    if resp is None:
        return None, None
    try:
        return json.loads(resp.text), resp
    except ValueError:
        return None, resp


async def _posts_and_pages(client: NetworkClient, origin: str) -> Set[str]:
    urls: Set[str] = set()
    for page in range(1, _MAX_POST_PAGES + 1):
        items, resp = await _get_items(
            client,
            f"{origin}/wp-json/wp/v2/posts",
            {"per_page": _PER_PAGE, "page": page, "_fields": "link"},
        )
        if not items or resp is None:
            break
        urls |= _links_from(items)
        total = resp.headers.get("X-WP-TotalPages")
        if total is not None and total.isdigit() and page >= int(total):
            break

    items, _ = await _get_items(client, f"{origin}/wp-json/wp/v2/pages", {"per_page": _PER_PAGE, "_fields": "link"})
    urls |= _links_from(items)
    return urls


async def _taxonomy(client: NetworkClient, origin: str, kind: str) -> Set[str]:
    items, _ = await _get_items(client, f"{origin}/wp-json/wp/v2/{kind}", {"per_page": _PER_PAGE, "_fields": "link"})
    return _links_from(items)


def _same_host(locs: Iterable[str], host: str) -> Set[str]:
    urls: Set[str] = set()
    for loc in locs:
        h = host_of(loc)
        if h and is_same_site(h, host):
            norm = normalize_url(loc)
            if norm:
                urls.add(norm)
    return urls


async def _wp_sitemap(client: NetworkClient, origin: str, host: str) -> Set[str]:
    resp = await fetch_ok(client, f"{origin}/wp-sitemap.xml", timeout=_API_TIMEOUT)
    if resp is None:
        return set()
    entries = parse_sitemap(resp.text)
    urls = _same_host(entries.url_locs, host)
    # встроенный sitemap WordPress имеет ровно один уровень вложенности
    for loc in entries.sitemap_locs:
        sub = await fetch_ok(client, loc, timeout=_API_TIMEOUT)
        if sub is not None:
            urls |= _same_host(parse_sitemap(sub.text).url_locs, host)
    return urls


async def fetch_urls(client: NetworkClient, base_url: str) -> Set[str]:
    """Для WordPress-сайта собирает записи, страницы, рубрики, метки и wp-sitemap."""
    parts = urlsplit(base_url)
    host = (parts.hostname or "").lower()
    origin = f"{parts.scheme or 'https'}://{parts.netloc}"

    if not await is_wordpress(client, origin):
        return set()
    logger.debug("WordPress detected at %s", origin)

    results = await asyncio.gather(
        _posts_and_pages(client, origin),
        _wp_sitemap(client, origin, host),
        _taxonomy(client, origin, "categories"),
        _taxonomy(client, origin, "tags"),
    )
    discovered: Set[str] = set()
    for urls in results:
        discovered |= urls
    return discovered
