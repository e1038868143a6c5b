"""
Clock abstraction.

The coordinator never reads the wall clock directly; it asks an injected clock.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a timestamp to an aware UTC datetime.

    Naive values (SQLite, BSON) are interpreted as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_stored_time(value: Optional[datetime]) -> Optional[datetime]:
    """
    Aware UTC truncated to milliseconds, the precision every store keeps.
    """
    value = ensure_utc(value)
    if value is None:
        return None
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Manually driven clock for tests and simulations.
    """

    def __init__(self, start: datetime):
        self._now = ensure_utc(start)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, value: datetime) -> None:
        with self._lock:
            self._now = ensure_utc(value)

    def advance(self, days: float = 0, **kwargs) -> datetime:
        """Move the clock forward and return the new instant."""
        with self._lock:
            self._now = self._now + timedelta(days=days, **kwargs)
            return self._now
