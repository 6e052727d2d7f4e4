# File: domain_scout/aggregator.py
"""domain_scout.aggregator: Модуль агрегатора результатов сканирования."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Set


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """Вердикт проверки одного домена; живёт только в пределах сессии."""

    domain: str
    available: bool


@dataclass(frozen=True, slots=True)
class DomainResult:
    """Подтверждённо свободный домен и страницы, которые на него ссылаются."""

    domain: str
    source_link_count: int
    source_urls: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def sort_results(results: Iterable[DomainResult]) -> List[DomainResult]:
    """Больше ссылающихся страниц выше; при равенстве по алфавиту."""
    return sorted(results, key=lambda r: (-r.source_link_count, r.domain))


def build_results(domain_sources: Mapping[str, Set[str]], available: Iterable[str]) -> List[DomainResult]:
    """Собирает упорядоченный список результатов для свободных доменов."""
    results = []
    for domain in set(available):
        sources = sorted(domain_sources.get(domain, ()))
        results.append(DomainResult(domain=domain, source_link_count=len(sources), source_urls=sources))
    return sort_results(results)


def merge_sources(target: Dict[str, Set[str]], other: Mapping[str, Set[str]]) -> None:
    """Объединяет карты «домен → страницы-источники» нескольких стартовых сайтов."""
    for domain, sources in other.items():
        target.setdefault(domain, set()).update(sources)


@dataclass(slots=True)
class ScanReport:
    """Итог сканирования: свободные домены и счётчики работы."""

    results: List[DomainResult] = field(default_factory=list)
    pages_visited: int = 0
    domains_discovered: int = 0
    domains_checked: int = 0
    cancelled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "pages_visited": self.pages_visited,
            "domains_discovered": self.domains_discovered,
            "domains_checked": self.domains_checked,
            "cancelled": self.cancelled,
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление ScanReport."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)
