"""Timestamp providers for coordination messages."""

from abc import ABC, abstractmethod
from datetime import datetime

from tandem.config import TIMESTAMP_FORMAT, TIMESTAMP_LENGTH


class Clock(ABC):
    """Supplies the sortable ``YYYYMMDDHHmm`` timestamp stamped on messages."""

    @abstractmethod
    def now(self) -> str: ...


class SystemClock(Clock):
    """Local wall-clock time at minute resolution."""

    def now(self) -> str:
        return datetime.now().strftime(TIMESTAMP_FORMAT)


class FixedClock(Clock):
    """Always returns the same timestamp. Used by tests and replays."""

    def __init__(self, timestamp: str):
        if len(timestamp) != TIMESTAMP_LENGTH or not timestamp.isdigit():
            raise ValueError(f"Timestamp must be {TIMESTAMP_LENGTH} digits: {timestamp!r}")
        self.timestamp = timestamp

    def now(self) -> str:
        return self.timestamp


def format_timestamp(timestamp: str) -> str:
    """Render ``YYYYMMDDHHmm`` as ``YYYY-MM-DD HH:mm`` for display."""
    if len(timestamp) != TIMESTAMP_LENGTH or not timestamp.isdigit():
        return timestamp
    return (
        f"{timestamp[0:4]}-{timestamp[4:6]}-{timestamp[6:8]} "
        f"{timestamp[8:10]}:{timestamp[10:12]}"
    )
