# File: tests/test_priority.py
import random

import pytest

from domain_scout.crawler.priority import CrawlQueue, pagination_priority, url_priority


@pytest.mark.parametrize(
    "url,depth,expected",
    [
        ("https://forum.example.com/threads/some-topic.123", 2, 2),
        ("https://example.com/showthread.php?t=5", 1, 1),
        ("https://example.com/blog/my-post", 3, 3),
        ("https://example.com/forum/general", 1, 101),
        ("https://example.com/tag/python", 0, 100),
        ("https://example.com/members/alice", 2, 102),
        ("https://example.com/about-us", 1, 51),
        ("https://example.com/", 0, 50),
        ("https://forum.com/thread/12345", 1, 1),
        ("https://forum.com/category/general", 1, 101),
        ("https://forum.com/misc", 2, 52),
    ],
)
def test_url_priority(url, depth, expected):
    assert url_priority(url, depth) == expected


def test_content_beats_navigation_at_same_depth():
    assert url_priority("https://example.com/article/1", 4) < url_priority("https://example.com/contact", 4)
    assert url_priority("https://example.com/contact", 4) < url_priority("https://example.com/search", 4)


def test_pagination_priority():
    assert pagination_priority(3) == 2
    assert pagination_priority(0) == 0


def test_queue_pops_lowest_priority_first():
    queue = CrawlQueue()
    queue.push("https://example.com/c", 1, 100)
    queue.push("https://example.com/a", 1, 1)
    queue.push("https://example.com/b", 1, 50)

    assert [queue.pop().url for _ in range(3)] == [
        "https://example.com/a",
        "https://example.com/b",
        "https://example.com/c",
    ]
    assert queue.pop() is None
    assert not queue


def test_queue_equal_priorities_are_fifo():
    queue = CrawlQueue()
    for i in range(20):
        queue.push(f"https://example.com/{i}", 0, 7)
    assert [queue.pop().url for _ in range(20)] == [f"https://example.com/{i}" for i in range(20)]


def test_queue_random_sequence_is_non_decreasing():
    rng = random.Random(1234)
    queue = CrawlQueue()
    for i in range(1500):
        queue.push(f"https://example.com/{i}", rng.randint(0, 5), rng.randint(0, 120))
    assert len(queue) == 1500

    popped = []
    while queue:
        popped.append(queue.pop())
    keys = [(item.priority, item.sequence) for item in popped]
    assert keys == sorted(keys)
    assert len({item.sequence for item in popped}) == 1500
