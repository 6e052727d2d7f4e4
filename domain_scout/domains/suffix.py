# File: domain_scout/domains/suffix.py
"""
Registrable-domain extraction backed by the Public Suffix List.

The list is parsed once, lazily, into a trie keyed by reversed DNS labels
(``com`` → ``example`` …). ``registrable_domain`` walks a hostname from the
right, remembers the longest suffix at which a rule ends, and returns that
suffix plus one more label.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from typing import Dict, Iterable, Optional

from domain_scout.domains.exclusions import SUSPECT_DOMAIN_LABELS

__all__ = ("DomainExtractor", "default_extractor")

logger = logging.getLogger(__name__)

_PSL_RESOURCE = "data/public_suffix_list.dat"


class _TrieNode:
    __slots__ = ("children", "is_rule", "is_exception")

    def __init__(self) -> None:
        self.children: Dict[str, _TrieNode] = {}
        self.is_rule = False
        self.is_exception = False


def _to_ascii(label: str) -> Optional[str]:
    if label.isascii():
        return label
    try:
        return label.encode("idna").decode("ascii")
    except UnicodeError:
        return None


class DomainExtractor:
    """Public-suffix trie with lazy loading.

    Parameters
    ----------
    rules
        Explicit rule lines in PSL syntax. ``None`` → the bundled list,
        read on first use.
    """

    def __init__(self, rules: Optional[Iterable[str]] = None) -> None:
        self._root = _TrieNode()
        self._rules = rules
        self._loaded = False

    # -- loading ----------------------------------------------------------

    def load_if_needed(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if self._rules is None:
            text = resources.files("domain_scout").joinpath(_PSL_RESOURCE).read_text(encoding="utf-8")
            lines: Iterable[str] = text.splitlines()
        else:
            lines = self._rules
        count = 0
        for line in lines:
            rule = line.strip().split(None, 1)[0] if line.strip() else ""
            if not rule or rule.startswith("//"):
                continue
            self._insert(rule)
            count += 1
        logger.debug("Loaded %d public suffix rules", count)

    def _insert(self, rule: str) -> None:
        exception = rule.startswith("!")
        if exception:
            rule = rule[1:]
        labels = rule.lower().split(".")
        ascii_labels = [_to_ascii(label) for label in labels]
        variants = [labels]
        if ascii_labels != labels and None not in ascii_labels:
            variants.append(ascii_labels)  # type: ignore[arg-type]
        for variant in variants:
            node = self._root
            for label in reversed(variant):
                node = node.children.setdefault(label, _TrieNode())
            if exception:
                node.is_exception = True
            else:
                node.is_rule = True

    # -- lookup -----------------------------------------------------------

    def public_suffix_length(self, labels: list[str]) -> int:
        """Number of trailing labels of *labels* that form the public suffix."""
        self.load_if_needed()
        node = self._root
        suffix_len = 0
        for i, label in enumerate(reversed(labels)):
            child = node.children.get(label)
            if child is not None and child.is_exception:
                suffix_len = i
                break
            if child is None:
                child = node.children.get("*")
                if child is None:
                    break
            if child.is_rule:
                suffix_len = i + 1
            node = child
        return suffix_len or 1

    def registrable_domain(self, host: str) -> Optional[str]:
        """``blog.example.co.uk`` → ``example.co.uk``; ``None`` when not registrable."""
        host = host.strip().strip(".").lower()
        if not host or ":" in host:
            return None
        labels = host.split(".")
        if len(labels) < 2 or any(not label for label in labels):
            return None

        reg_len = self.public_suffix_length(labels) + 1
        if len(labels) < reg_len:
            return None

        domain_labels = labels[-reg_len:]
        leading = domain_labels[0]
        if len(leading) <= 2 or leading in SUSPECT_DOMAIN_LABELS:
            return None
        return ".".join(domain_labels)


@lru_cache(maxsize=1)
def default_extractor() -> DomainExtractor:
    """Process-wide extractor over the bundled list."""
    return DomainExtractor()
