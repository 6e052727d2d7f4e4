# File: domain_scout/errors.py
"""domain_scout.errors: Типизированные ошибки обхода страниц.

Ошибки уровня страницы никогда не прерывают обход: движок записывает их в
результат и публикует событие ``PageFailed``.
"""

from __future__ import annotations

__all__ = (
    "CrawlError",
    "NetworkFailure",
    "NonHTMLContent",
    "HTTPStatusError",
    "ParseFailure",
    "FetchTimeout",
    "InvalidURL",
)


class CrawlError(Exception):
    """Базовый класс ошибок обхода; хранит URL страницы."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class NetworkFailure(CrawlError):
    def __init__(self, url: str, underlying: BaseException) -> None:
        super().__init__(url, f"Network failure for {url}: {underlying}")
        self.underlying = underlying


class NonHTMLContent(CrawlError):
    def __init__(self, url: str, content_type: str) -> None:
        super().__init__(url, f"Non-HTML content at {url}: {content_type or 'unknown'}")
        self.content_type = content_type


class HTTPStatusError(CrawlError):
    def __init__(self, url: str, status: int) -> None:
        super().__init__(url, f"HTTP {status} for {url}")
        self.status = status


class ParseFailure(CrawlError):
    def __init__(self, url: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(url, f"Parse failure for {url}{detail}")
        self.reason = reason


class FetchTimeout(CrawlError):
    def __init__(self, url: str) -> None:
        super().__init__(url, f"Timeout for {url}")


class InvalidURL(CrawlError):
    def __init__(self, url: str) -> None:
        super().__init__(url, f"Invalid URL: {url}")
