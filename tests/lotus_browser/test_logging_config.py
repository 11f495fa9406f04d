import logging

import pytest
from pythonjsonlogger import jsonlogger

from lotus_browser.logging_config import LOG_FORMAT_ENV, configure_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_is_the_default(root_logger, monkeypatch):
    monkeypatch.delenv(LOG_FORMAT_ENV, raising=False)

    configure_logging()

    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0].formatter, jsonlogger.JsonFormatter)


def test_plain_format_from_env(root_logger, monkeypatch):
    monkeypatch.setenv(LOG_FORMAT_ENV, "PLAIN")

    configure_logging(level=logging.DEBUG)

    formatter = root_logger.handlers[0].formatter
    assert not isinstance(formatter, jsonlogger.JsonFormatter)
    assert root_logger.level == logging.DEBUG


def test_force_format_wins_and_replaces_handlers(root_logger, monkeypatch):
    monkeypatch.setenv(LOG_FORMAT_ENV, "plain")

    configure_logging(force_format="json")
    configure_logging(force_format="json")

    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0].formatter, jsonlogger.JsonFormatter)
