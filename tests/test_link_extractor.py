# File: tests/test_link_extractor.py
from domain_scout.crawler.link_extractor import extract_links

PAGE = "https://forum.example.com/threads/42"


def test_base_href_overrides_page_url():
    html = """
    <html><head><base href="https://cdn.example.com/site/"></head>
    <body><a href="page1.html">one</a><a href="/absolute-path">two</a></body></html>
    """
    links = extract_links(html, "https://www.example.com/original/page")
    assert links.crawl_urls == ["https://cdn.example.com/site/page1.html", "https://cdn.example.com/absolute-path"]
    assert links.anchor_urls == links.crawl_urls


def test_relative_links_resolve_against_page():
    html = '<a href="../other">x</a><a href="reply">y</a><a href="https://lost-site.com/x">z</a>'
    links = extract_links(html, PAGE)
    assert links.crawl_urls == [
        "https://forum.example.com/other",
        "https://forum.example.com/threads/reply",
        "https://lost-site.com/x",
    ]


def test_escaped_slashes_in_script():
    html = """<script>window.__DATA__ = {"url":"https:\\/\\/example.com\\/blog\\/post-1"};</script>"""
    links = extract_links(html, PAGE)
    assert "https://example.com/blog/post-1" in links.crawl_urls
    assert "https://example.com/blog/post-1" in links.anchor_urls


def test_script_assets_and_short_scripts_are_skipped():
    html = """
    <script>var logo = "https://static.example.net/img/logo.png"; var s = "https://lost-blog.org/post";</script>
    <script>x("https://a.b")</script>
    """
    links = extract_links(html, PAGE)
    assert "https://lost-blog.org/post" in links.crawl_urls
    assert "https://static.example.net/img/logo.png" not in links.crawl_urls
    assert "https://a.b" not in links.crawl_urls


def test_comment_urls_are_crawl_only():
    html = "<p>text</p><!-- old link: https://old-partner.com/page. -->"
    links = extract_links(html, PAGE)
    assert links.crawl_urls == ["https://old-partner.com/page"]
    assert links.anchor_urls == []


def test_data_attributes():
    html = """
    <div data-href="/topic/9">a</div>
    <span data-url="https://lost-shop.com/item">b</span>
    <button data-target="#modal">c</button>
    """
    links = extract_links(html, PAGE)
    assert links.crawl_urls == ["https://forum.example.com/topic/9", "https://lost-shop.com/item"]
    assert links.anchor_urls == links.crawl_urls


def test_pagination_rel_links():
    html = """
    <head><link rel="next" href="/threads/42?page=3"><link rel="prev" href="/threads/42?page=1"></head>
    <a rel="next" href="?page=3">next</a>
    <link rel="stylesheet" href="/style.css">
    """
    links = extract_links(html, PAGE)
    assert links.pagination_urls == [
        "https://forum.example.com/threads/42?page=3",
        "https://forum.example.com/threads/42?page=1",
    ]
    assert "https://forum.example.com/style.css" in links.crawl_urls
    assert "https://forum.example.com/style.css" not in links.anchor_urls


def test_iframes():
    html = '<iframe src="https://embed.lost-video.com/v/1"></iframe>'
    links = extract_links(html, PAGE)
    assert links.iframe_urls == ["https://embed.lost-video.com/v/1"]
    assert links.crawl_urls == ["https://embed.lost-video.com/v/1"]
    assert links.anchor_urls == []


def test_skip_prefixes_are_discarded():
    html = """
    <a href="#top">top</a>
    <a href="mailto:admin@example.com">mail</a>
    <a href="tel:+123">call</a>
    <a href="javascript:void(0)">js</a>
    <a href="data:text/plain,hi">data</a>
    <a href="ftp://files.example.com/x">ftp</a>
    """
    links = extract_links(html, PAGE)
    assert links.crawl_urls == []
    assert links.anchor_urls == []


def test_duplicates_are_removed_in_order():
    html = '<a href="/a">1</a><a href="/b">2</a><a href="/a">3</a>'
    links = extract_links(html, PAGE)
    assert links.crawl_urls == ["https://forum.example.com/a", "https://forum.example.com/b"]


def test_empty_and_garbage_input():
    assert extract_links("", PAGE).crawl_urls == []
    links = extract_links("<<<>>> not really <html", PAGE)
    assert links.crawl_urls == []
    assert links.pagination_urls == []
    assert links.iframe_urls == []
