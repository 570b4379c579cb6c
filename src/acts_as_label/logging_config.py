"""
Logging configuration for acts_as_label.

The library itself only creates module loggers. Applications (and the
command line entry point) call configure_logging() once at startup to
attach a handler using the level and format from LabelConfig.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from .config import LabelConfig

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}

_TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter for logging records."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def get_log_level() -> int:
    """
    Get the configured log level.

    Unknown level names fall back to INFO.

    Returns:
        Logging level constant
    """
    level_name = str(LabelConfig.get("logging.level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def get_log_format() -> str:
    """Get the configured log format, 'text' or 'json'."""
    format_name = str(LabelConfig.get("logging.format", "text")).lower()
    return format_name if format_name in ("text", "json") else "text"


def configure_logging(level: int | None = None, format_type: str | None = None) -> None:
    """
    Configure the ``acts_as_label`` logger hierarchy.

    Calling this again replaces the handler installed by a previous call.

    Args:
        level: Log level; read from configuration when None
        format_type: 'text' or 'json'; read from configuration when None
    """
    if level is None:
        level = get_log_level()
    if format_type is None:
        format_type = get_log_format()

    logger = logging.getLogger("acts_as_label")

    # Remove any existing handlers to avoid duplicate logs when re-configuring
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    if format_type == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level)
