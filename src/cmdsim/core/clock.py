"""Time sources.

Lifecycle computations are pure functions of (creation time, now), so every
component that needs "now" takes a clock instead of reading the wall clock.
"""

import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Supplies the current instant in epoch milliseconds."""

    def now_ms(self) -> int:
        ...


class SystemClock:
    """Wall-clock time."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock:
    """A clock that only moves when told to."""

    def __init__(self, start_ms: int = 0):
        self._now_ms = start_ms

    def now_ms(self) -> int:
        return self._now_ms

    def advance(self, ms: int) -> int:
        """Move the clock forward and return the new instant."""
        if ms < 0:
            raise ValueError("Clock cannot move backwards")
        self._now_ms += ms
        return self._now_ms

    def set(self, ms: int) -> None:
        """Jump to an absolute instant."""
        self._now_ms = ms


def ms_to_datetime(ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def datetime_to_ms(value: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive values are UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return round(value.timestamp() * 1000)
