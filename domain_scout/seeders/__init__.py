# File: domain_scout/seeders/__init__.py
"""domain_scout.seeders: Источники начальных URL для обхода.

Каждый сборщик работает по принципу best-effort: сбой отдельного запроса
пропускается, а сбой сборщика целиком перехватывает движок обхода.
"""

from __future__ import annotations

import logging
from typing import Optional

from domain_scout.crawler.fetcher import NetworkClient
from domain_scout.crawler.models import FetchResponse
from domain_scout.errors import CrawlError

__all__ = ("fetch_ok",)

logger = logging.getLogger(__name__)


async def fetch_ok(client: NetworkClient, url: str, timeout: float = 15.0, **kwargs) -> Optional[FetchResponse]:
    """Загружает URL; возвращает ответ только при статусе 2xx, иначе ``None``."""
    try:
        resp = await client.get(url, timeout=timeout, **kwargs)
    except CrawlError as exc:
        logger.debug("Seed fetch failed: %s", exc)
        return None
    if not resp.ok:
        logger.debug("Seed fetch %s -> HTTP %s", url, resp.status)
        return None
    return resp
