# File: domain_scout/domains/dns_resolver.py
"""domain_scout.domains.dns_resolver: Быстрая проверка существования домена через DNS."""

from __future__ import annotations

import logging
from typing import Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

__all__ = ("DnsResolver",)

logger = logging.getLogger(__name__)


class DnsResolver:
    """Прямой запрос A-записи с ограничением по времени.

    Ответ с адресом или ``NoAnswer`` (имя есть, но без A-записи) означает, что
    домен зарегистрирован. ``NXDOMAIN``, таймаут и прочие ошибки DNS дают
    ``False``, после чего решение принимает WHOIS.
    """

    def __init__(self, timeout: float = 5.0, resolver: Optional[dns.asyncresolver.Resolver] = None) -> None:
        self.timeout = timeout
        self._resolver = resolver

    def _get_resolver(self) -> dns.asyncresolver.Resolver:
        if self._resolver is None:
            resolver = dns.asyncresolver.Resolver()
            resolver.timeout = min(self.timeout, 3.0)
            resolver.lifetime = self.timeout
            self._resolver = resolver
        return self._resolver

    async def resolves(self, domain: str) -> bool:
        try:
            answer = await self._get_resolver().resolve(domain, "A", lifetime=self.timeout)
        except dns.resolver.NoAnswer:
            return True
        except dns.resolver.NXDOMAIN:
            logger.debug("NXDOMAIN: %s", domain)
            return False
        except dns.exception.DNSException as exc:
            logger.debug("DNS lookup failed for %s: %s", domain, exc)
            return False
        return len(answer) > 0
