"""
Orchestrator - Snapshot History.

============================================================
RESPONSIBILITY
============================================================
Keeps the most recent snapshots for trend display.

- Bounded: oldest entries are evicted first
- Single writer (the refresh orchestrator)
- Readers always receive immutable copies

============================================================
"""

from datetime import datetime
from typing import List, Optional, Tuple

from core.constants import HISTORY_CAPACITY
from orchestrator.models import Snapshot


class SnapshotHistory:
    """
    Bounded, append-only history of snapshots.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        """
        Initialize history.

        Args:
            capacity: Maximum snapshots to keep
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._snapshots: List[Snapshot] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, snapshot: Snapshot) -> None:
        """Add a snapshot, evicting the oldest beyond capacity."""
        self._snapshots.append(snapshot)
        if len(self._snapshots) > self._capacity:
            self._snapshots = self._snapshots[-self._capacity:]

    def current(self) -> Optional[Snapshot]:
        """Get the most recent snapshot."""
        return self._snapshots[-1] if self._snapshots else None

    def snapshots(self) -> Tuple[Snapshot, ...]:
        """Snapshots in insertion order, oldest first."""
        return tuple(self._snapshots)

    def trend(self) -> List[Tuple[datetime, int]]:
        """(timestamp, score) points, oldest first."""
        return [(s.timestamp, s.score) for s in self._snapshots]

    def __len__(self) -> int:
        return len(self._snapshots)
