# File: domain_scout/utils.py
"""domain_scout.utils: Утилиты для канонизации URL и работы с хостами."""

from __future__ import annotations

from typing import Collection, List, Optional, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from domain_scout.logger import logger

__all__: Sequence[str] = (
    "CONTENT_QUERY_PARAMS",
    "normalize_url",
    "ensure_scheme",
    "host_of",
    "is_http_url",
    "is_same_site",
    "remove_duplicates",
)

#: Параметры запроса, которые определяют содержимое страницы.
CONTENT_QUERY_PARAMS = frozenset(
    {
        "id", "p", "page", "topic", "thread", "post", "article", "view",
        "pid", "tid", "sid", "fid", "showtopic", "showpost", "t", "f",
    }
)


def normalize_url(url: str) -> Optional[str]:
    """Канонизирует URL для дедупликации и постановки в очередь.

    Схема и хост приводятся к нижнему регистру, фрагмент удаляется, хвостовые
    слеши пути срезаются (кроме корня ``/``), из запроса остаются только
    параметры из :data:`CONTENT_QUERY_PARAMS`, отсортированные по имени.
    Для синтаксически некорректного URL возвращает ``None``.
    """
    raw = url.strip()
    if not raw or any(ch.isspace() for ch in raw):
        return None
    try:
        parts = urlsplit(raw)
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc or parts.hostname is None:
        return None

    userinfo, at, hostport = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{hostport.lower()}"

    path = parts.path
    while len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    if not path:
        path = "/"

    kept = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k.lower() in CONTENT_QUERY_PARAMS]
    kept.sort(key=lambda kv: kv[0])
    query = urlencode(kept) if kept else ""

    return urlunsplit((parts.scheme.lower(), netloc, path, query, ""))


def ensure_scheme(url: str, default: str = "https") -> str:
    """Добавляет схему к адресу вида ``example.com``."""
    url = url.strip()
    if url and "://" not in url:
        url = f"{default}://{url}"
    return url


def host_of(url: str) -> Optional[str]:
    """Возвращает хост URL в нижнем регистре (без порта) или ``None``."""
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def is_http_url(url: str) -> bool:
    """Проверяет, что URL использует http(s) и содержит хост."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def is_same_site(host: str, site_domain: str) -> bool:
    """Хост совпадает с доменом сайта или является его поддоменом."""
    return host == site_domain or host.endswith("." + site_domain)


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
