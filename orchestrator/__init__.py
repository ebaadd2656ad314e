"""
Orchestrator Package - Refresh Coordination Layer.

============================================================
PACKAGE OVERVIEW
============================================================
This package owns the refresh cycle of the ecosystem engine.
It is the only writer of the current snapshot and the history.

============================================================
ARCHITECTURE
============================================================

    +-----------------------------------------------------+
    |                 RefreshOrchestrator                 |
    |-----------------------------------------------------|
    |  IngestionService |  Five collectors, one fan-out   |
    |  CompositeScorer  |  Sub-scores and composite       |
    |  SnapshotHistory  |  Last 10 snapshots              |
    |  CLI              |  Command-line interface         |
    +-----------------------------------------------------+

============================================================
TRIGGERS
============================================================
- interval : every REFRESH_INTERVAL_SECONDS (default 300)
- manual   : trigger_manual_refresh() / POST /refresh

Triggers arriving while a cycle is in flight are coalesced.

============================================================
"""

from .models import EngineConfig, OrchestratorState, Snapshot
from .history import SnapshotHistory
from .refresh import RefreshOrchestrator


__all__ = [
    "EngineConfig",
    "OrchestratorState",
    "Snapshot",
    "SnapshotHistory",
    "RefreshOrchestrator",
]
