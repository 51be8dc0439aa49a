"""
In-memory capture of flag-client log lines for the page's log viewer.

The sink is a ``logging.Handler`` attached to the Flagship adapter logger.
Entries live in a bounded deque (oldest evicted first) guarded by the
handler lock, so concurrent requests can log and read safely.
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime

from recoflag.config import LOG_SINK_SIZE
from recoflag.config.logging import record_extras, tagged_message
from recoflag.core.models import LogEntry


class LogSink(logging.Handler):
    """Bounded, thread-safe buffer of LogEntry items."""

    def __init__(self, max_entries: int = LOG_SINK_SIZE, level: int = logging.DEBUG):
        super().__init__(level)
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)
        self._saved_levels: dict[str, int] = {}

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._entries.append(self.to_entry(record))
        except Exception:
            self.handleError(record)

    @staticmethod
    def to_entry(record: logging.LogRecord) -> LogEntry:
        extras = record_extras(record)
        return LogEntry(
            timestamp=datetime.fromtimestamp(record.created).strftime("%H:%M:%S"),
            level=record.levelname,
            message=tagged_message(record, extras),
            data=extras.get("payload"),
        )

    def entries(self) -> list[LogEntry]:
        """Snapshot of captured entries, oldest first."""
        with self.lock:
            return list(self._entries)

    def clear(self) -> None:
        with self.lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self.lock:
            return len(self._entries)

    def attach(self, logger: logging.Logger) -> None:
        """Capture every record ``logger`` emits, down to DEBUG."""
        if self not in logger.handlers:
            self._saved_levels.setdefault(logger.name, logger.level)
            logger.addHandler(self)
        logger.setLevel(logging.DEBUG)

    def detach(self, logger: logging.Logger) -> None:
        """Stop capturing and put back the level ``attach`` replaced."""
        logger.removeHandler(self)
        if logger.name in self._saved_levels:
            logger.setLevel(self._saved_levels.pop(logger.name))
