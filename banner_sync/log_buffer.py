"""In-memory circular buffer log handler for the admin activity log."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from dataclasses import dataclass, asdict

# Loggers whose records show up in the activity log.
SYNC_LOGGERS = (
    "banner_sync.main",
    "banner_sync.scheduler",
    "banner_sync.ingestion.base",
    "banner_sync.ingestion.unified",
    "banner_sync.ingestion.reconcile",
    "banner_sync.ingestion.espn_client",
    "banner_sync.ingestion.ncaa_client",
    "banner_sync.storage.firestore_store",
    "banner_sync.storage.sql_store",
)


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    logger: str
    message: str


class BufferHandler(logging.Handler):
    """Stores the last *maxlen* log records in a deque."""

    def __init__(self, maxlen: int = 200) -> None:
        super().__init__()
        self._buffer: deque[LogEntry] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = LogEntry(
                timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc)
                .strftime("%Y-%m-%d %H:%M:%S UTC"),
                level=record.levelname,
                logger=record.name,
                message=self.format(record),
            )
            self._buffer.append(entry)
        except Exception:
            self.handleError(record)

    def entries(self, limit: int = 100) -> list[dict]:
        """Return the most recent *limit* entries (newest first)."""
        items = list(self._buffer)[-limit:] if limit > 0 else []
        items.reverse()
        return [asdict(e) for e in items]


def install_buffer_handler(maxlen: int = 200) -> BufferHandler:
    """Create a buffer handler and attach it to the sync loggers."""
    handler = BufferHandler(maxlen=maxlen)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(logging.INFO)

    for name in SYNC_LOGGERS:
        lg = logging.getLogger(name)
        lg.addHandler(handler)
        if lg.level == logging.NOTSET or lg.level > logging.INFO:
            lg.setLevel(logging.INFO)

    return handler


def remove_buffer_handler(handler: BufferHandler) -> None:
    for name in SYNC_LOGGERS:
        logging.getLogger(name).removeHandler(handler)
