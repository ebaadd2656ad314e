"""
Core Module - Engine Clock.

============================================================
RESPONSIBILITY
============================================================
Source of snapshot timestamps and cycle durations.

The orchestrator takes every timestamp from an injected clock,
so history ordering can be tested with a clock that only moves
when told to. All datetimes are UTC.

============================================================
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional
import time


class ClockProtocol(ABC):
    """Time source used by the refresh orchestrator."""

    @abstractmethod
    def now(self) -> datetime:
        """Aware UTC datetime used as a snapshot timestamp."""

    @abstractmethod
    def timestamp(self) -> float:
        """Seconds since the epoch, used to time a cycle."""


class SystemClock(ClockProtocol):
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def timestamp(self) -> float:
        return time.time()


class MockClock(ClockProtocol):
    """
    Frozen clock for tests.

    Time stands still until advance() is called, so consecutive
    snapshots get the timestamps the test chooses.
    """

    def __init__(self, initial_time: Optional[datetime] = None):
        start = initial_time or datetime.now(timezone.utc)
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._time = start

    def now(self) -> datetime:
        return self._time

    def timestamp(self) -> float:
        return self._time.timestamp()

    def advance(self, seconds: float = 0, **kwargs) -> None:
        """Move time forward; kwargs go to timedelta (minutes, hours, ...)."""
        self._time = self._time + timedelta(seconds=seconds, **kwargs)


class ClockFactory:
    """Lazily created process-wide default clock."""

    _instance: Optional[ClockProtocol] = None

    @classmethod
    def get_clock(cls) -> ClockProtocol:
        if cls._instance is None:
            cls._instance = SystemClock()
        return cls._instance


__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
]
