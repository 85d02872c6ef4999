"""Logging setup. Modules just do `logger = logging.getLogger(__name__)`, this configures where the records end up."""

import json
import logging
import sys
from typing import Optional

from src.core.config import LoggingSettings

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER_NAME = "src"


class JSONFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Attach a single stream handler to the application's top level logger.
    Calling it again replaces the handler (e.g. after the settings changed).
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(settings.level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        JSONFormatter() if settings.format == "json" else logging.Formatter(TEXT_FORMAT)
    )
    for old_handler in list(logger.handlers):
        logger.removeHandler(old_handler)
    logger.addHandler(handler)
    return logger
