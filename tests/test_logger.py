# File: tests/test_logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from domain_scout.logger import configure, init_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    init_logging()


def test_file_handler_and_parent_dirs(tmp_path):
    log_file = tmp_path / "logs" / "scan.log"
    lg = configure(level="debug", log_file=log_file)

    assert lg.level == logging.DEBUG
    assert not lg.propagate
    assert [type(h) for h in lg.handlers] == [logging.StreamHandler, RotatingFileHandler]

    logging.getLogger("domain_scout.crawler.crawler").debug("fetched %s", "https://example.com/")
    for handler in lg.handlers:
        handler.flush()
    assert "fetched https://example.com/" in log_file.read_text(encoding="utf-8")


def test_console_handler_writes_to_stderr():
    lg = configure(level="INFO")
    (handler,) = lg.handlers
    assert handler.stream is sys.stderr


def test_replace_vs_append():
    configure(level="INFO")
    lg = configure(level="INFO", replace_handlers=False)
    assert len(lg.handlers) == 2
    assert len(configure(level="INFO").handlers) == 1


def test_third_party_loggers_follow_debug():
    configure(level="WARNING")
    assert logging.getLogger("aiohttp.client").level == logging.WARNING
    configure(level=logging.DEBUG)
    assert logging.getLogger("aiohttp.client").level == logging.DEBUG


def test_unknown_level():
    with pytest.raises(ValueError):
        configure(level="chatty")
