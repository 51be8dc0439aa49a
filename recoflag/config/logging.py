"""
Logging setup for recoflag.

Every module logs through ``get_logger(__name__)``. Output goes to stdout,
either as readable console lines or as one JSON object per line, chosen by
``RECOFLAG_LOG_FORMAT``.

The Flagship adapter tags its lines with ``extra={"tag": ..., "payload": ...}``.
Both formatters show the tag as a ``[tag]`` prefix, the same way the page's
log viewer does, and the payload as compact JSON.

Usage:
    from recoflag.config.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Fetched 3 flags", extra={"tag": "fetchFlags"})
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("RECOFLAG_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("RECOFLAG_LOG_FORMAT", "console")  # "console" or "json"

# Attributes every LogRecord carries; anything else came in through extra=.
STANDARD_LOG_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "asctime",
        "taskName",
    }
)


def record_extras(record: logging.LogRecord) -> dict:
    """Return the ``extra=`` fields attached to a record."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in STANDARD_LOG_ATTRS and not key.startswith("_")
    }


def tagged_message(record: logging.LogRecord, extras: dict) -> str:
    """The record's message, prefixed with ``[tag]`` when one was given."""
    message = record.getMessage()
    tag = extras.get("tag")
    return f"[{tag}] {message}" if tag else message


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL [tag] message key=value`` lines, colored on a TTY."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        extras = record_extras(record)
        level = f"{record.levelname:<8}"
        if hasattr(sys.stdout, "isatty") and sys.stdout.isatty():
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.COLORS['RESET']}"

        parts = [self.formatTime(record, "%H:%M:%S"), level, tagged_message(record, extras)]
        payload = extras.pop("payload", None)
        extras.pop("tag", None)
        parts.extend(f"{key}={value}" for key, value in extras.items())
        if payload is not None:
            parts.append(json.dumps(payload, default=str, separators=(",", ":")))

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """One JSON object per record, extras merged in at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        extras = record_extras(record)
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": tagged_message(record, extras),
        }
        entry.update(extras)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_configured = False


def configure_logging() -> None:
    """Install the stdout handler on the root logger once per process."""
    global _configured
    if _configured:
        return

    level = getattr(logging, LOG_LEVEL, logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if LOG_FORMAT == "json" else ConsoleFormatter())
    root.addHandler(handler)

    # Request lines from the HTTP clients would drown out the tagged lines
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, configuring output on first use."""
    configure_logging()
    return logging.getLogger(name)


__all__ = [
    "get_logger",
    "configure_logging",
    "record_extras",
    "tagged_message",
    "ConsoleFormatter",
    "JSONFormatter",
    "LOG_LEVEL",
    "LOG_FORMAT",
]
