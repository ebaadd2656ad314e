#!/usr/bin/env python3
"""
Ecosystem Intelligence Engine - Main Application Entry Point.

============================================================
SINGLE ENTRYPOINT
============================================================
This is the executable entry point for the engine.

- Loads .env and environment configuration
- Runs the refresh loop and serves the HTTP API
- Can be started, stopped, and restarted safely

============================================================
USAGE
============================================================
Direct execution:
    python app.py
    python app.py --once
    python app.py --interval 60 --port 8080

With PM2:
    pm2 start app.py --interpreter python --name ecosystem-intel

Environment-based configuration:
    REFRESH_INTERVAL_SECONDS=60 NEWS_API_KEY=... python app.py

============================================================
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.absolute()
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from orchestrator.cli import main


# ============================================================
# ENTRY POINT
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
