"""
Ecosystem API Endpoints.

============================================================
PURPOSE
============================================================
Thin HTTP transport over the refresh orchestrator.

PRINCIPLES:
- Read-mostly: the only write is the manual refresh trigger
- Handlers never run a cycle inline
- Responses are plain JSON

============================================================
ENDPOINTS
============================================================
GET  /health   - Liveness and orchestrator status
GET  /summary  - Current snapshot (503 before the first cycle)
GET  /history  - Trend points, oldest first
POST /refresh  - Schedule a cycle (202)

============================================================
"""

import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from aiohttp import web

from core.constants import SYSTEM_NAME, SYSTEM_VERSION
from orchestrator.refresh import RefreshOrchestrator


logger = logging.getLogger(__name__)


# ============================================================
# JSON ENCODER
# ============================================================

class SnapshotEncoder(json.JSONEncoder):
    """JSON encoder for snapshot data."""

    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if is_dataclass(obj):
            return asdict(obj)
        return super().default(obj)


def json_response(data: Any, status: int = 200) -> web.Response:
    """Create JSON response."""
    return web.Response(
        text=json.dumps(data, cls=SnapshotEncoder, indent=2),
        status=status,
        content_type="application/json",
    )


# ============================================================
# API HANDLERS
# ============================================================

class EcosystemAPI:
    """
    HTTP API for the ecosystem snapshot.
    """

    def __init__(self, orchestrator: RefreshOrchestrator):
        """Initialize API."""
        self._orchestrator = orchestrator

    async def health(self, request: web.Request) -> web.Response:
        """
        GET /health

        Liveness check with orchestrator status.
        """
        return json_response({
            "status": "healthy",
            "service": SYSTEM_NAME,
            "version": SYSTEM_VERSION,
            "timestamp": datetime.now(timezone.utc),
            "orchestrator": self._orchestrator.get_status(),
        })

    async def get_summary(self, request: web.Request) -> web.Response:
        """
        GET /summary

        Current snapshot, or pending before the first cycle.
        """
        snapshot = self._orchestrator.get_current_snapshot()
        if snapshot is None:
            return json_response({"status": "pending"}, status=503)

        return json_response({
            "status": "ok",
            "data": snapshot,
        })

    async def get_history(self, request: web.Request) -> web.Response:
        """
        GET /history

        Score trend, oldest first.
        """
        return json_response({
            "status": "ok",
            "capacity": self._orchestrator.history_capacity,
            "data": [snapshot.trend_point() for snapshot in self._orchestrator.get_history()],
        })

    async def refresh(self, request: web.Request) -> web.Response:
        """
        POST /refresh

        Schedule a cycle without waiting for it.
        """
        scheduled = self._orchestrator.trigger_manual_refresh()
        logger.info(f"Manual refresh requested via API | scheduled={scheduled}")
        return json_response({"scheduled": scheduled}, status=202)


# ============================================================
# ROUTER SETUP
# ============================================================

def create_api_app(orchestrator: RefreshOrchestrator) -> web.Application:
    """
    Create the aiohttp application.

    Args:
        orchestrator: Running refresh orchestrator

    Returns:
        aiohttp Application
    """
    app = web.Application()
    api = EcosystemAPI(orchestrator)

    app.router.add_get("/health", api.health)
    app.router.add_get("/summary", api.get_summary)
    app.router.add_get("/history", api.get_history)
    app.router.add_post("/refresh", api.refresh)

    return app


async def start_api_server(
    orchestrator: RefreshOrchestrator,
    host: str,
    port: int,
) -> web.AppRunner:
    """Start serving the API; the caller owns runner.cleanup()."""
    runner = web.AppRunner(create_api_app(orchestrator))
    await runner.setup()

    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"API server started at http://{host}:{port}")
    return runner
