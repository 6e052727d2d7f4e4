# File: domain_scout/domains/whois_client.py
"""domain_scout.domains.whois_client: WHOIS-запросы по TCP (порт 43).

Ответы реестров не стандартизированы, поэтому вывод «свободен» делается по
подстрокам из :data:`NOT_FOUND_PATTERNS`. Ложные «занят» возможны и считаются
допустимой неточностью; любая транспортная ошибка тоже означает «занят».
"""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Optional

__all__ = (
    "WHOIS_SERVERS",
    "IANA_SERVER",
    "NOT_FOUND_PATTERNS",
    "looks_unregistered",
    "find_referral",
    "WhoisClient",
)

logger = logging.getLogger(__name__)

IANA_SERVER = "whois.iana.org"

WHOIS_SERVERS: Mapping[str, str] = {
    "com": "whois.verisign-grs.com",
    "net": "whois.verisign-grs.com",
    "org": "whois.pir.org",
    "info": "whois.afilias.net",
    "biz": "whois.biz",
    "us": "whois.nic.us",
    "co": "whois.nic.co",
    "io": "whois.nic.io",
    "me": "whois.nic.me",
    "tv": "whois.nic.tv",
    "cc": "whois.nic.cc",
    "mobi": "whois.dotmobiregistry.net",
    "name": "whois.nic.name",
    "pro": "whois.registrypro.pro",
    "tel": "whois.nic.tel",
    "asia": "whois.nic.asia",
    "cat": "whois.nic.cat",
    "jobs": "whois.nic.jobs",
    "travel": "whois.nic.travel",
    "coop": "whois.nic.coop",
    "museum": "whois.nic.museum",
    "aero": "whois.aero",
    "uk": "whois.nic.uk",
    "de": "whois.denic.de",
    "fr": "whois.nic.fr",
    "nl": "whois.sidn.nl",
    "au": "whois.auda.org.au",
    "ca": "whois.cira.ca",
    "eu": "whois.eu",
    "be": "whois.dns.be",
    "at": "whois.nic.at",
    "ch": "whois.nic.ch",
    "it": "whois.nic.it",
    "es": "whois.nic.es",
    "se": "whois.iis.se",
    "no": "whois.norid.no",
    "fi": "whois.fi",
    "dk": "whois.dk-hostmaster.dk",
    "pl": "whois.dns.pl",
    "cz": "whois.nic.cz",
    "ru": "whois.tcinet.ru",
    "jp": "whois.jprs.jp",
    "kr": "whois.kr",
    "cn": "whois.cnnic.cn",
    "br": "whois.registro.br",
    "mx": "whois.mx",
    "ar": "whois.nic.ar",
    "cl": "whois.nic.cl",
    "nz": "whois.srs.net.nz",
    "za": "whois.registry.net.za",
    "in": "whois.registry.in",
    "xyz": "whois.nic.xyz",
    "online": "whois.nic.online",
    "site": "whois.nic.site",
    "app": "whois.nic.google",
    "dev": "whois.nic.google",
}

NOT_FOUND_PATTERNS = (
    "no match",
    "not found",
    "no entries",
    "no data found",
    "nothing found",
    "no information",
    "status: free",
    "status: available",
    "domain not found",
    "no match for",
    "this domain is not registered",
    "% no matching objects",
    "object does not exist",
)


def looks_unregistered(response: str) -> bool:
    lower = response.lower()
    return any(pattern in lower for pattern in NOT_FOUND_PATTERNS)


def find_referral(response: str) -> Optional[str]:
    """Первая строка ``refer:`` ответа IANA, если она есть."""
    for line in response.lower().splitlines():
        line = line.strip()
        if line.startswith("refer:"):
            server = line[len("refer:"):].strip()
            return server or None
    return None


class WhoisClient:
    """Клиент WHOIS со статической таблицей серверов по TLD."""

    def __init__(
        self,
        servers: Optional[Mapping[str, str]] = None,
        default_server: str = IANA_SERVER,
        port: int = 43,
        timeout: float = 10.0,
    ) -> None:
        self.servers = dict(WHOIS_SERVERS if servers is None else servers)
        self.default_server = default_server
        self.port = port
        self.timeout = timeout

    def server_for(self, domain: str) -> str:
        tld = domain.rstrip(".").rsplit(".", 1)[-1].lower()
        return self.servers.get(tld, self.default_server)

    async def query(self, domain: str, server: str) -> Optional[str]:
        """Отправляет ``"<domain>\\r\\n"`` и читает ответ до закрытия соединения.

        ``None`` при любой сетевой ошибке или таймауте.
        """
        writer = None
        try:
            async with asyncio.timeout(self.timeout):
                reader, writer = await asyncio.open_connection(server, self.port)
                writer.write(f"{domain}\r\n".encode("utf-8"))
                await writer.drain()
                data = await reader.read()
        except (OSError, UnicodeError, asyncio.TimeoutError) as exc:
            logger.debug("WHOIS %s @ %s failed: %r", domain, server, exc)
            return None
        finally:
            if writer is not None:
                writer.close()
        return data.decode("utf-8", errors="replace")

    async def is_available(self, domain: str) -> bool:
        """True, только если сервер реестра явно ответил «не найдено»."""
        server = self.server_for(domain)
        response = await self.query(domain, server)
        if response is None:
            return False
        if looks_unregistered(response):
            return True

        if server == self.default_server:
            referral = find_referral(response)
            if referral:
                second = await self.query(domain, referral)
                if second is not None and looks_unregistered(second):
                    return True
        return False
