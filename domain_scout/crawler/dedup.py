# domain_scout/crawler/dedup.py
"""
Near-duplicate page detection by content fingerprint.
"""
from __future__ import annotations

import hashlib
from collections import deque
from typing import Deque, Set, Union

__all__ = ("ContentDeduplicator", "fingerprint")

#: Byte window hashed per page; the leading bytes are usually shared header/nav markup.
WINDOW_START = 2048
WINDOW_END = 6144


def fingerprint(content: Union[str, bytes]) -> str:
    """Fast hash of bytes ``[2048, 6144)`` of *content*, clipped to its length."""
    data = content.encode("utf-8") if isinstance(content, str) else content
    return hashlib.blake2b(data[WINDOW_START:WINDOW_END], digest_size=8).hexdigest()


class ContentDeduplicator:
    """Bounded FIFO cache of page fingerprints.

    Only the event loop thread calls into it and no method suspends, so every
    call completes before any other coroutine can observe the cache.
    """

    def __init__(self, max_entries: int = 10_000) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self._order: Deque[str] = deque()
        self._seen: Set[str] = set()

    def is_duplicate(self, content: Union[str, bytes]) -> bool:
        """Return True for an already seen fingerprint, otherwise remember it."""
        digest = fingerprint(content)
        if digest in self._seen:
            return True
        if len(self._order) >= self.max_entries:
            self._seen.discard(self._order.popleft())
        self._order.append(digest)
        self._seen.add(digest)
        return False

    def reset(self) -> None:
        self._order.clear()
        self._seen.clear()

    def __len__(self) -> int:
        return len(self._order)
