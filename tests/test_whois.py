# File: tests/test_whois.py
"""WHOIS client against a local line-protocol server."""
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Dict, List

import pytest
import pytest_asyncio

from domain_scout.domains.whois_client import WhoisClient, find_referral, looks_unregistered

REGISTERED = "Domain Name: TAKEN-EXAMPLE.COM\r\nRegistrar: Example Registrar, Inc.\r\nCreation Date: 2001-01-01\r\n"
NOT_FOUND = 'No match for "LOST-EXAMPLE.COM".\r\n>>> Last update of whois database <<<\r\n'


class WhoisServer:
    """Answers each query from *answers*; domains missing from it get REGISTERED."""

    def __init__(self, answers: Dict[str, List[str]]) -> None:
        self.answers = answers
        self.queries: List[str] = []

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        line = await reader.readline()
        domain = line.decode().strip()
        self.queries.append(domain)
        queue = self.answers.get(domain)
        text = queue.pop(0) if queue else REGISTERED
        writer.write(text.encode())
        await writer.drain()
        writer.close()


async def _serve(handler, port: int) -> AsyncIterator[None]:
    server = await asyncio.start_server(handler, "127.0.0.1", port)
    try:
        yield None
    finally:
        server.close()
        await server.wait_closed()


@pytest_asyncio.fixture
async def whois_server(unused_tcp_port: int) -> AsyncIterator[tuple]:
    srv = WhoisServer(
        {
            "lost-example.com": [NOT_FOUND],
            "referred-example.org": ["refer:        127.0.0.1\r\nwhois:        127.0.0.1\r\n", NOT_FOUND],
        }
    )
    async for _ in _serve(srv.handle, unused_tcp_port):
        yield srv, unused_tcp_port


def test_looks_unregistered():
    assert looks_unregistered(NOT_FOUND)
    assert looks_unregistered("Status: AVAILABLE")
    assert looks_unregistered("%% NOT FOUND")
    assert not looks_unregistered(REGISTERED)


def test_find_referral():
    assert find_referral("% IANA WHOIS server\nrefer:        whois.nic.io\n") == "whois.nic.io"
    assert find_referral("domain: IO\n") is None


def test_server_table():
    client = WhoisClient()
    assert client.server_for("example.com") == "whois.verisign-grs.com"
    assert client.server_for("Example.DE.") == "whois.denic.de"
    assert client.server_for("example.unlisted-tld") == "whois.iana.org"


@pytest.mark.asyncio()
async def test_not_found_means_available(whois_server):
    srv, port = whois_server
    client = WhoisClient(servers={"com": "127.0.0.1"}, port=port, timeout=2.0)
    assert await client.is_available("lost-example.com") is True
    assert srv.queries == ["lost-example.com"]


@pytest.mark.asyncio()
async def test_registered_record(whois_server):
    srv, port = whois_server
    client = WhoisClient(servers={"com": "127.0.0.1"}, port=port, timeout=2.0)
    assert await client.is_available("taken-example.com") is False


@pytest.mark.asyncio()
async def test_default_server_referral(whois_server):
    srv, port = whois_server
    client = WhoisClient(servers={}, default_server="127.0.0.1", port=port, timeout=2.0)
    assert await client.is_available("referred-example.org") is True
    assert srv.queries == ["referred-example.org", "referred-example.org"]


@pytest.mark.asyncio()
async def test_connection_refused_means_registered(unused_tcp_port):
    client = WhoisClient(servers={"com": "127.0.0.1"}, port=unused_tcp_port, timeout=2.0)
    assert await client.query("lost-example.com", "127.0.0.1") is None
    assert await client.is_available("lost-example.com") is False


@pytest.mark.asyncio()
async def test_silent_server_times_out(unused_tcp_port):
    async def hang(reader, writer):
        await asyncio.sleep(1)
        writer.close()

    async for _ in _serve(hang, unused_tcp_port):
        client = WhoisClient(servers={"com": "127.0.0.1"}, port=unused_tcp_port, timeout=0.2)
        assert await client.is_available("lost-example.com") is False
