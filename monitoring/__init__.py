"""
Monitoring Package.

============================================================
PURPOSE
============================================================
HTTP transport for the ecosystem snapshot.

PRINCIPLES:
1. READ-MOSTLY - Only the manual refresh trigger writes
2. OBSERVATIONAL - Mirrors the orchestrator, never scores
3. PENDING, NOT GUESSED - No snapshot before the first cycle

============================================================
"""

from .api import (
    EcosystemAPI,
    SnapshotEncoder,
    create_api_app,
    json_response,
    start_api_server,
)


__all__ = [
    "EcosystemAPI",
    "SnapshotEncoder",
    "create_api_app",
    "json_response",
    "start_api_server",
]
