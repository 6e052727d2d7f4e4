# File: domain_scout/seeders/sitemap.py
"""domain_scout.seeders.sitemap: Сбор URL из sitemap.xml и sitemap-индексов."""

from __future__ import annotations

import logging
from typing import Iterable, Set
from urllib.parse import urlsplit

from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.parser.sitemap_parser import parse_sitemap
from domain_scout.seeders import fetch_ok
from domain_scout.utils import host_of, is_same_site, normalize_url

__all__ = ("SITEMAP_PATHS", "fetch_urls")

logger = logging.getLogger(__name__)

SITEMAP_PATHS = ("/sitemap.xml", "/sitemap_index.xml", "/sitemap-index.xml")


async def fetch_urls(
    client: NetworkClient,
    base_url: str,
    extra_sitemaps: Iterable[str] = (),
) -> Set[str]:
    """Обходит стандартные sitemap сайта и дополнительные (из robots.txt).

    Индексы раскрываются рекурсивно, каждый sitemap загружается не более
    одного раза. Возвращаются нормализованные адреса страниц того же хоста
    или его поддоменов.
    """
    parts = urlsplit(base_url)
    base_host = (parts.hostname or "").lower()
    origin = f"{parts.scheme or 'https'}://{parts.netloc}"

    pending = [origin + path for path in SITEMAP_PATHS]
    pending.extend(extra_sitemaps)

    discovered: Set[str] = set()
    visited: Set[str] = set()
    for sitemap_url in pending:
        await _walk(client, sitemap_url, base_host, discovered, visited)

    logger.debug("Sitemaps of %s: %d URLs from %d files", origin, len(discovered), len(visited))
    return discovered


async def _walk(
    client: NetworkClient,
    sitemap_url: str,
    base_host: str,
    discovered: Set[str],
    visited: Set[str],
) -> None:
    if sitemap_url in visited:
        return
    visited.add(sitemap_url)

    resp = await fetch_ok(client, sitemap_url)
    if resp is None:
        return
    entries = parse_sitemap(resp.text)

    for child in entries.sitemap_locs:
        await _walk(client, child, base_host, discovered, visited)

    for loc in entries.url_locs:
        host = host_of(loc)
        if not host or not is_same_site(host, base_host):
            continue
        norm = normalize_url(loc)
        if norm:
            discovered.add(norm)
