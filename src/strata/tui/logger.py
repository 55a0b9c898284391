"""Process-wide buffer of log records, shown by ``DebugView``.

Call :func:`init` once at startup.  It attaches a :class:`BufferHandler` to
the root logger; records then accumulate in a bounded deque (oldest dropped
first) until read with :func:`records` or emptied with :func:`drain`.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone

__all__ = ["Record", "BufferHandler", "init", "shutdown", "records", "drain", "DEFAULT_CAPACITY"]

DEFAULT_CAPACITY = 1000


@dataclass(frozen=True)
class Record:
    """A formatted log record."""

    level: int
    level_name: str
    time: datetime
    name: str
    message: str


class BufferHandler(logging.Handler):
    """Logging handler appending records to a bounded, lock-protected deque."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._records: deque[Record] = deque(maxlen=capacity)
        self._records_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        entry = Record(
            level=record.levelno,
            level_name=record.levelname,
            time=datetime.fromtimestamp(record.created, tz=timezone.utc),
            name=record.name,
            message=message,
        )
        with self._records_lock:
            self._records.append(entry)

    def snapshot(self) -> list[Record]:
        with self._records_lock:
            return list(self._records)

    def drain(self) -> list[Record]:
        with self._records_lock:
            taken = list(self._records)
            self._records.clear()
        return taken


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------

_handler: BufferHandler | None = None
_handler_lock = threading.Lock()


def init(level: int = logging.DEBUG, capacity: int = DEFAULT_CAPACITY) -> BufferHandler:
    """Install the buffer on the root logger and return its handler.

    Calling it again replaces the previous buffer.
    """
    global _handler
    with _handler_lock:
        root = logging.getLogger()
        if _handler is not None:
            root.removeHandler(_handler)
        _handler = BufferHandler(capacity=capacity)
        _handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(_handler)
        root.setLevel(level)
        return _handler


def shutdown() -> None:
    """Detach the buffer from the root logger, dropping its records."""
    global _handler
    with _handler_lock:
        if _handler is not None:
            logging.getLogger().removeHandler(_handler)
            _handler = None


def records() -> list[Record]:
    """Snapshot of the buffered records, oldest first.  Empty before :func:`init`."""
    handler = _handler
    return handler.snapshot() if handler is not None else []


def drain() -> list[Record]:
    """Remove and return every buffered record."""
    handler = _handler
    return handler.drain() if handler is not None else []
