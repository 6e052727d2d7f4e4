# File: domain_scout/seeders/wayback.py
"""domain_scout.seeders.wayback: Архивные URL домена из CDX-индекса Wayback Machine."""

from __future__ import annotations

import logging
from typing import Set

from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.errors import CrawlError
from domain_scout.utils import normalize_url

__all__ = ("CDX_ENDPOINT", "fetch_urls")

logger = logging.getLogger(__name__)

CDX_ENDPOINT = "https://web.archive.org/cdx/search/cdx"


async def fetch_urls(
    client: NetworkClient,
    domain: str,
    *,
    endpoint: str = CDX_ENDPOINT,
    limit: int = 10_000,
    timeout: float = 30.0,
) -> Set[str]:
    """Запрашивает снимки HTML-страниц домена со статусом 200.

    Ответ CDX в формате JSON: первая строка заголовок, далее строки вида
    ``[original, statuscode, mimetype]``.
    """
    params = [
        ("url", domain),
        ("matchType", "domain"),
        ("output", "json"),
        ("fl", "original,statuscode,mimetype"),
        ("filter", "statuscode:200"),
        ("filter", "mimetype:text/html"),
        ("collapse", "urlkey"),
        ("limit", str(limit)),
    ]
    try:
        rows = await client.get_json(endpoint, params=params, timeout=timeout)
    except CrawlError as exc:
        logger.debug("Wayback CDX unavailable: %s", exc)
        return set()
    if not isinstance(rows, list) or len(rows) < 2:
        return set()

    urls: Set[str] = set()
    for row in rows[1:]:
        if not isinstance(row, list) or not row or not isinstance(row[0], str):
            continue
        norm = normalize_url(row[0])
        if norm:
            urls.add(norm)
    logger.debug("Wayback CDX for %s: %d URLs", domain, len(urls))
    return urls
