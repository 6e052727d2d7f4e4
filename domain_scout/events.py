# File: domain_scout/events.py
"""domain_scout.events: Typed notifications for whatever presents a scan.

The core never assumes anything about the consumer: a sink is any callable
taking one event. Delivery is fire-and-forget; a failing sink is logged and
the scan carries on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

__all__ = (
    "ScanPhase",
    "PhaseChanged",
    "StatusMessage",
    "Progress",
    "PageCrawled",
    "PageFailed",
    "DomainDiscovered",
    "DomainChecked",
    "ScanEvent",
    "EventSink",
    "emit",
)

logger = logging.getLogger(__name__)


class ScanPhase(str, Enum):
    SEEDING = "seeding"
    CRAWLING = "crawling"
    CHECKING = "checking"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class PhaseChanged:
    phase: ScanPhase


@dataclass(frozen=True, slots=True)
class StatusMessage:
    text: str


@dataclass(frozen=True, slots=True)
class Progress:
    visited: int
    max_pages: int
    domain_count: int
    depth: int


@dataclass(frozen=True, slots=True)
class PageCrawled:
    url: str
    link_count: int


@dataclass(frozen=True, slots=True)
class PageFailed:
    url: str
    error: str


@dataclass(frozen=True, slots=True)
class DomainDiscovered:
    domain: str
    source_url: str


@dataclass(frozen=True, slots=True)
class DomainChecked:
    domain: str
    available: bool


ScanEvent = Union[
    PhaseChanged, StatusMessage, Progress, PageCrawled, PageFailed, DomainDiscovered, DomainChecked
]
EventSink = Callable[[ScanEvent], None]


def emit(sink: Optional[EventSink], event: ScanEvent) -> None:
    """Deliver *event* to *sink* without letting the sink break the scan."""
    if sink is None:
        return
    try:
        sink(event)
    except Exception:
        logger.exception("Event sink failed on %r", event)
