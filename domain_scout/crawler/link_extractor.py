# domain_scout/crawler/link_extractor.py
"""
Link extraction for DomainScout.

Besides ordinary anchors, outbound links hide in ``data-*`` attributes,
inline scripts (often JSON with escaped slashes) and HTML comments, so all
of those are scanned too.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Comment, Tag

from domain_scout.crawler.models import ExtractedLinks
from domain_scout.utils import is_http_url, remove_duplicates

__all__ = ("extract_links",)

logger = logging.getLogger(__name__)

_SKIP_PREFIXES = ("#", "mailto:", "tel:", "javascript:", "data:")
_DATA_ATTRS = ("data-href", "data-url", "data-src", "data-link", "data-page", "data-target")
_ASSET_EXTENSIONS = (
    ".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico",
    ".css", ".woff", ".woff2", ".ttf", ".eot",
    ".mp4", ".mp3", ".webm", ".ogg",
)
_EMBEDDED_URL_RE = re.compile(r"""https?://[^\s"'<>\\)}\]]+""")
_MIN_SCRIPT_LEN = 20


def _attr(tag: Tag, name: str) -> Optional[str]:
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _resolve(base_url: str, raw: str) -> Optional[str]:
    if raw.lower().startswith(_SKIP_PREFIXES):
        return None
    try:
        absolute = urljoin(base_url, raw)
    except ValueError:
        return None
    return absolute if is_http_url(absolute) else None


def _site_root(base_url: str) -> str:
    parts = urlsplit(base_url)
    return f"{parts.scheme}://{parts.netloc}"


def _is_asset(url: str) -> bool:
    try:
        path = urlsplit(url).path.lower()
    except ValueError:
        return True
    return path.endswith(_ASSET_EXTENSIONS)


def _embedded_urls(text: str, strip_chars: str, skip_assets: bool) -> Iterable[str]:
    for match in _EMBEDDED_URL_RE.finditer(text):
        url = match.group(0).rstrip(strip_chars)
        if not is_http_url(url):
            continue
        if skip_assets and _is_asset(url):
            continue
        yield url


def extract_links(html: str, page_url: str) -> ExtractedLinks:
    """
    Collect every http(s) link reachable from *html*.

    ``crawl_urls`` are candidates for the frontier, ``anchor_urls`` are the
    ones that count as outbound references, ``pagination_urls`` come from
    ``rel=next|prev`` and ``iframe_urls`` from ``<iframe src>``. All lists
    are deduplicated in document order. Unparseable input yields empty lists.
    """
    if not html:
        return ExtractedLinks()
    try:
        soup = BeautifulSoup(html, "html.parser")
    except (ParserRejectedMarkup, ValueError) as exc:
        logger.debug("Cannot parse %s: %s", page_url, exc)
        return ExtractedLinks()

    base_url = page_url
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag):
        href = _attr(base_tag, "href")
        if href:
            resolved = _resolve(page_url, href)
            if resolved:
                base_url = resolved

    crawl: List[str] = []
    anchors: List[str] = []
    pagination: List[str] = []
    iframes: List[str] = []

    for tag in soup.find_all(["a", "link"], href=True):
        if not isinstance(tag, Tag):
            continue
        href = _attr(tag, "href")
        url = _resolve(base_url, href) if href else None
        if url is None:
            continue
        rel = tag.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if any(r.lower() in ("next", "prev") for r in rel):
            pagination.append(url)
        crawl.append(url)
        if tag.name == "a":
            anchors.append(url)

    for tag in soup.find_all("iframe", src=True):
        if not isinstance(tag, Tag):
            continue
        src = _attr(tag, "src")
        url = _resolve(base_url, src) if src else None
        if url:
            iframes.append(url)
            crawl.append(url)

    root = _site_root(base_url)
    for attr in _DATA_ATTRS:
        for tag in soup.find_all(attrs={attr: True}):
            if not isinstance(tag, Tag):
                continue
            value = _attr(tag, attr)
            if not value:
                continue
            if value.startswith("/"):
                url: Optional[str] = root + value
            elif is_http_url(value):
                url = value
            else:
                url = None
            if url:
                crawl.append(url)
                anchors.append(url)

    for script in soup.find_all("script"):
        text = script.string if isinstance(script, Tag) else None
        if not text or len(text) < _MIN_SCRIPT_LEN:
            continue
        for url in _embedded_urls(text.replace("\\/", "/"), ",;:.'\")", skip_assets=True):
            crawl.append(url)
            anchors.append(url)

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        for url in _embedded_urls(str(comment), ",;:.", skip_assets=False):
            crawl.append(url)

    return ExtractedLinks(
        crawl_urls=remove_duplicates(crawl),
        anchor_urls=remove_duplicates(anchors),
        pagination_urls=remove_duplicates(pagination),
        iframe_urls=remove_duplicates(iframes),
    )
