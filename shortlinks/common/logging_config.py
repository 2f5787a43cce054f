"""Logging configuration for the short link service.

Everything logs under the ``shortlinks`` namespace (``shortlinks.web`` for
the HTTP layer), so one call to ``setup_logging`` configures the whole
service.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

LOGGER_NAME = "shortlinks"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``shortlinks`` logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Also append to this file when given
        json_format: Emit JSON lines instead of plain text

    Returns:
        The configured ``shortlinks`` logger
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    formatter = JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for handler in _handlers(log_file):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
