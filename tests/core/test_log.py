"""Unit tests for /src/core/log.py"""

import json
import logging

import pytest

from src.core.config import LoggingSettings
from src.core.log import ROOT_LOGGER_NAME, TEXT_FORMAT, JSONFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers = handlers


def test_configure_text_logging() -> None:
    logger = configure_logging(LoggingSettings(level="debug"))
    assert logger.name == ROOT_LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.handlers[0].formatter._fmt == TEXT_FORMAT


def test_configure_twice_keeps_a_single_handler() -> None:
    configure_logging()
    logger = configure_logging(LoggingSettings(format="json"))
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)
    assert logger.level == logging.INFO


def test_json_formatter() -> None:
    record = logging.LogRecord(
        "src.engine.game", logging.WARNING, __file__, 1, "Played %s", ("e2e4",), None
    )
    payload = json.loads(JSONFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "src.engine.game"
    assert payload["message"] == "Played e2e4"
    assert "exception" not in payload


def test_module_loggers_propagate_to_the_application_logger(caplog: pytest.LogCaptureFixture) -> None:
    configure_logging(LoggingSettings(level="debug"))
    with caplog.at_level(logging.DEBUG, logger=ROOT_LOGGER_NAME):
        logging.getLogger("src.engine.game").debug("hello")
    assert "hello" in caplog.text
