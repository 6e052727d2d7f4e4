# File: domain_scout/parser/sitemap_parser.py
"""domain_scout.parser.sitemap_parser: Модуль для парсинга sitemap.xml и sitemap-индексов."""

from __future__ import annotations

from typing import List, NamedTuple

from lxml import etree


class SitemapEntries(NamedTuple):
    """Содержимое одного sitemap: вложенные sitemap и адреса страниц."""

    sitemap_locs: List[str]
    url_locs: List[str]


def _local(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname.lower()


def parse_sitemap(xml_content: str) -> SitemapEntries:
    """Разбирает XML sitemap и разделяет теги <loc> по родителю.

    ``<sitemap><loc>`` попадают в ``sitemap_locs`` (sitemap-индекс),
    ``<url><loc>`` в ``url_locs``. Пространство имён не учитывается,
    битый XML разбирается в режиме recover; пустой документ даёт пустой результат.

    Пример:
    ```python
    from domain_scout.parser.sitemap_parser import parse_sitemap

    with open('sitemap.xml', encoding='utf-8') as f:
        entries = parse_sitemap(f.read())
    print(entries.url_locs)
    ```
    """
    sitemaps: List[str] = []
    urls: List[str] = []
    if not xml_content.strip():
        return SitemapEntries(sitemaps, urls)

    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False)
    try:
        root = etree.fromstring(xml_content.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError:
        root = None
    if root is None:
        return SitemapEntries(sitemaps, urls)

    for loc in root.iterfind(".//{*}loc"):
        text = (loc.text or "").strip()
        if not text:
            continue
        parent = _local(loc.getparent().tag) if loc.getparent() is not None else ""
        if parent == "sitemap":
            sitemaps.append(text)
        elif parent == "url":
            urls.append(text)
    return SitemapEntries(sitemaps, urls)
