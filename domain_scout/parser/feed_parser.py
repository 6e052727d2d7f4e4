# File: domain_scout/parser/feed_parser.py
"""domain_scout.parser.feed_parser: Извлечение ссылок на записи из RSS и Atom."""

from __future__ import annotations

from typing import List

from lxml import etree


def _local(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname.lower()


def parse_feed_links(xml_content: str) -> List[str]:
    """Возвращает ссылки записей ленты в порядке документа.

    RSS: текст ``<item><link>``. Atom: атрибут ``href`` у ``<entry><link>``.
    Пространства имён игнорируются.
    """
    links: List[str] = []
    if not xml_content.strip():
        return links

    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False)
    try:
        root = etree.fromstring(xml_content.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError:
        root = None
    if root is None:
        return links

    for el in root.iter():
        if _local(el.tag) != "link":
            continue
        parent = el.getparent()
        owner = _local(parent.tag) if parent is not None else ""
        if owner == "item":
            value = (el.text or "").strip()
        elif owner == "entry":
            value = (el.get("href") or "").strip()
        else:
            continue
        if value:
            links.append(value)
    return links
