# File: domain_scout/seeders/commoncrawl.py
"""domain_scout.seeders.commoncrawl: URL домена из двух последних индексов Common Crawl."""

from __future__ import annotations

import json
import logging
from typing import Set

from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.errors import CrawlError
from domain_scout.seeders import fetch_ok
from domain_scout.utils import normalize_url

__all__ = ("COLLINFO_ENDPOINT", "INDEX_BASE", "fetch_urls")

logger = logging.getLogger(__name__)

COLLINFO_ENDPOINT = "https://index.commoncrawl.org/collinfo.json"
INDEX_BASE = "https://index.commoncrawl.org"
_RECENT_COLLECTIONS = 2


async def fetch_urls(
    client: NetworkClient,
    domain: str,
    *,
    collinfo_url: str = COLLINFO_ENDPOINT,
    limit: int = 5000,
    timeout: float = 30.0,
) -> Set[str]:
    """Опрашивает CDX API свежих коллекций; ответ — NDJSON, по записи на строку."""
    try:
        collections = await client.get_json(collinfo_url, timeout=15.0)
    except CrawlError as exc:
        logger.debug("Common Crawl index list unavailable: %s", exc)
        return set()
    if not isinstance(collections, list):
        return set()

    urls: Set[str] = set()
    for coll in collections[:_RECENT_COLLECTIONS]:
        if not isinstance(coll, dict):
            continue
        api = coll.get("cdx-api")
        if not api and coll.get("id"):
            api = f"{INDEX_BASE}/{coll['id']}-index"
        if not api:
            continue

        resp = await fetch_ok(
            client,
            api,
            timeout=timeout,
            params={"url": f"*.{domain}", "output": "json", "limit": str(limit)},
        )
        if resp is None:
            continue
        for line in resp.text.splitlines():
            try:
                record = json.loads(line)
            except ValueError:
                continue
            url = record.get("url") if isinstance(record, dict) else None
            if isinstance(url, str):
                norm = normalize_url(url)
                if norm:
                    urls.add(norm)

    logger.debug("Common Crawl for %s: %d URLs", domain, len(urls))
    return urls
