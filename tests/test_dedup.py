# File: tests/test_dedup.py
import pytest

from domain_scout.crawler.dedup import ContentDeduplicator, fingerprint

PREFIX = "a" * 2048


def test_same_content_is_duplicate():
    dedup = ContentDeduplicator()
    page = PREFIX + "unique body of the first page"
    assert dedup.is_duplicate(page) is False
    assert dedup.is_duplicate(page) is True
    assert len(dedup) == 1


def test_different_window_content_is_not_duplicate():
    dedup = ContentDeduplicator()
    assert dedup.is_duplicate(PREFIX + "first") is False
    assert dedup.is_duplicate(PREFIX + "second") is False


def test_shared_header_is_ignored():
    # differences before byte 2048 fall outside the fingerprint window
    body = "same thread body" * 10
    assert fingerprint("x" * 2048 + body) == fingerprint("y" * 2048 + body)


def test_bytes_and_str_fingerprint_alike():
    page = PREFIX + "body"
    assert fingerprint(page) == fingerprint(page.encode("utf-8"))


def test_capacity_evicts_oldest():
    dedup = ContentDeduplicator(max_entries=2)
    a, b, c = (PREFIX + s for s in ("page-a", "page-b", "page-c"))
    dedup.is_duplicate(a)
    dedup.is_duplicate(b)
    dedup.is_duplicate(c)
    assert len(dedup) == 2
    # "a" was evicted, so it is new again; "c" is still remembered
    assert dedup.is_duplicate(c) is True
    assert dedup.is_duplicate(a) is False


def test_reset_clears_state():
    dedup = ContentDeduplicator()
    page = PREFIX + "body"
    dedup.is_duplicate(page)
    dedup.reset()
    assert len(dedup) == 0
    assert dedup.is_duplicate(page) is False


def test_invalid_capacity():
    with pytest.raises(ValueError):
        ContentDeduplicator(max_entries=0)
