# domain_scout/crawler/robots.py
"""
robots.txt handling: only ``Sitemap:`` directives matter for seeding.
"""
from __future__ import annotations

import logging
from typing import List, Set
from urllib.parse import urljoin

from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.utils import is_http_url

__all__ = ("parse_sitemap_directives", "fetch_sitemap_urls")

logger = logging.getLogger(__name__)


def parse_sitemap_directives(text: str, base_url: str) -> List[str]:
    """Return the ``Sitemap:`` URLs of a robots.txt body, in file order."""
    found: List[str] = []
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        key, _, val = line.partition(":")
        if key.strip().lower() != "sitemap":
            continue
        url = urljoin(base_url, val.strip())
        if is_http_url(url) and url not in found:
            found.append(url)
    return found


async def fetch_sitemap_urls(client: NetworkClient, base_url: str) -> Set[str]:
    """Load ``<base>/robots.txt`` and collect its sitemap locations."""
    robots_url = urljoin(base_url, "/robots.txt")
    resp = await client.get(robots_url)
    if not resp.ok:
        logger.debug("robots.txt %s -> HTTP %s", robots_url, resp.status)
        return set()
    return set(parse_sitemap_directives(resp.text, base_url))
