# File: tests/test_urls.py
import pytest

from domain_scout.utils import ensure_scheme, host_of, is_http_url, is_same_site, normalize_url, remove_duplicates


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("HTTPS://Example.COM/Path/", "https://example.com/Path"),
        ("https://example.com", "https://example.com/"),
        ("https://example.com/", "https://example.com/"),
        ("https://example.com/a//", "https://example.com/a"),
        ("https://example.com/page#comments", "https://example.com/page"),
        ("https://example.com/t?utm_source=x&id=5", "https://example.com/t?id=5"),
        ("https://example.com/t?utm_source=x&ref=y", "https://example.com/t"),
        ("https://forum.example.com/v?t=2&f=1&sid=9", "https://forum.example.com/v?f=1&sid=9&t=2"),
        ("http://example.com:8080/a/", "http://example.com:8080/a"),
        ("https://example.com/search?utm_source=google&page=2&ref=abc", "https://example.com/search?page=2"),
        ("https://example.com/page?thread=1&id=5", "https://example.com/page?id=5&thread=1"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "https://Example.com/a/b/?page=2&utm=1#x",
        "http://example.com",
        "https://example.com/?id=&p=3",
        "https://sub.example.co.uk/forum/showthread.php?t=7&s=abc",
    ],
)
def test_normalize_is_idempotent(raw):
    once = normalize_url(raw)
    assert once is not None
    assert normalize_url(once) == once


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "not a url", "/relative/path", "https://", "http://exa mple.com/", "http://example.com:99999999/"],
)
def test_normalize_rejects_invalid(raw):
    assert normalize_url(raw) is None


def test_ensure_scheme():
    assert ensure_scheme("example.com") == "https://example.com"
    assert ensure_scheme(" http://example.com ") == "http://example.com"
    assert ensure_scheme("example.com", default="http") == "http://example.com"


def test_host_helpers():
    assert host_of("https://WWW.Example.com:443/x") == "www.example.com"
    assert host_of("not a url") is None
    assert is_http_url("https://example.com/a")
    assert not is_http_url("ftp://example.com/a")
    assert not is_http_url("mailto:someone@example.com")


def test_is_same_site():
    assert is_same_site("example.com", "example.com")
    assert is_same_site("forum.example.com", "example.com")
    assert not is_same_site("badexample.com", "example.com")
    assert not is_same_site("example.com.evil.net", "example.com")


def test_remove_duplicates_keeps_order():
    assert remove_duplicates(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
