# File: domain_scout/domains/checker.py
"""domain_scout.domains.checker: Проверка доступности домена (DNS, затем WHOIS).

Порядок проверки:

1. DNS: имя разрешается → домен занят, WHOIS не запрашивается.
2. Разрешение на WHOIS для TLD домена: не больше ``per_tld_limit``
   одновременных запросов к одному реестру, остальные ждут в очереди FIFO.
3. WHOIS до ``retries`` попыток с паузой ``backoff ** attempt`` между ними;
   ответ «свободен» прекращает попытки.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional, Protocol

from domain_scout.domains.dns_resolver import DnsResolver
from domain_scout.domains.whois_client import WhoisClient

__all__ = ("TldPermits", "DomainCheckEngine")

logger = logging.getLogger(__name__)


class _Resolver(Protocol):
    async def resolves(self, domain: str) -> bool: ...


class _Whois(Protocol):
    async def is_available(self, domain: str) -> bool: ...


def tld_of(domain: str) -> str:
    return domain.rstrip(".").rsplit(".", 1)[-1].lower()


class TldPermits:
    """Семафор на каждый TLD; ожидающие задачи приостанавливаются, а не опрашивают."""

    def __init__(self, limit: int = 2) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.limit = limit
        self._semaphores: Dict[str, asyncio.Semaphore] = {}
        self._active: Dict[str, int] = {}

    def _semaphore(self, tld: str) -> asyncio.Semaphore:
        sem = self._semaphores.get(tld)
        if sem is None:
            sem = asyncio.Semaphore(self.limit)
            self._semaphores[tld] = sem
        return sem

    @asynccontextmanager
    async def permit(self, tld: str) -> AsyncIterator[None]:
        async with self._semaphore(tld):
            self._active[tld] = self._active.get(tld, 0) + 1
            try:
                yield
            finally:
                self._active[tld] -= 1

    def in_use(self, tld: str) -> int:
        return self._active.get(tld, 0)


class DomainCheckEngine:
    """DNS-first / WHOIS-fallback; при любой неопределённости домен считается занятым."""

    def __init__(
        self,
        resolver: Optional[_Resolver] = None,
        whois: Optional[_Whois] = None,
        per_tld_limit: int = 2,
        backoff: float = 2.0,
    ) -> None:
        self.resolver = resolver or DnsResolver()
        self.whois = whois or WhoisClient()
        self.permits = TldPermits(per_tld_limit)
        self.backoff = backoff

    async def check_domain(self, domain: str, retries: int = 3) -> bool:
        """True, если домен подтверждённо свободен."""
        if await self.resolver.resolves(domain):
            logger.debug("%s resolves, registered", domain)
            return False

        async with self.permits.permit(tld_of(domain)):
            return await self._whois_check(domain, max(1, retries))

    async def _whois_check(self, domain: str, retries: int) -> bool:
        for attempt in range(1, retries + 1):
            if await self.whois.is_available(domain):
                logger.debug("%s available (attempt %d)", domain, attempt)
                return True
            if attempt < retries:
                await asyncio.sleep(self.backoff ** attempt if self.backoff else 0)
        return False
