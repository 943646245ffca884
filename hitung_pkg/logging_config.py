"""Logging setup for Hitung.

Every module logs under the ``hitung`` logger tree via get_logger(). The CLI
attaches handlers once per run with setup_logging(); library users who never
call it get the standard library default (nothing below WARNING is shown).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

ROOT_LOGGER = "hitung"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
        timespec="milliseconds"
    )


class StructuredFormatter(logging.Formatter):
    """One line per record: ``<utc time> [LEVEL] logger: message``."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{_timestamp(record)} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


_FORMATTERS = {"text": StructuredFormatter, "json": JsonFormatter}
LOG_FORMATS = tuple(_FORMATTERS)


def reset_logging() -> logging.Logger:
    """Detach and close every handler on the package logger."""
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    return root


def setup_logging(
    level: str = "INFO", log_file: Optional[str] = None, log_format: str = "text"
) -> logging.Logger:
    """Route package logs to stderr, and to `log_file` when given.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: One of LEVELS (case-insensitive)
        log_file: Optional path; records are appended
        log_format: "text" or "json"

    Raises:
        ValueError: On an unknown level or format
    """
    level_name = level.upper()
    if level_name not in LEVELS:
        raise ValueError(f"Unknown log level: {level!r}")
    try:
        formatter_cls = _FORMATTERS[log_format]
    except KeyError:
        raise ValueError(f"Unknown log format: {log_format!r}") from None

    root = reset_logging()
    root.setLevel(level_name)

    handlers: list = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter_cls())
        root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return the ``hitung.<name>`` child logger."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
