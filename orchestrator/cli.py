"""
Orchestrator - CLI.

============================================================
RESPONSIBILITY
============================================================
Command-line interface for the ecosystem engine.

- Provides argparse-based CLI
- Loads configuration from .env, environment and CLI
- Sets up logging once per process
- Runs one cycle, or the refresh loop with the HTTP API

============================================================
USAGE
============================================================
python -m orchestrator.cli
python -m orchestrator.cli --once
python -m orchestrator.cli --interval 60 --port 8080
python -m orchestrator.cli --no-api --log-format json

============================================================
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from core.constants import SYSTEM_NAME, SYSTEM_VERSION
from core.exceptions import ConfigurationError
from monitoring.api import SnapshotEncoder, start_api_server
from .models import EngineConfig
from .refresh import RefreshOrchestrator


# ============================================================
# LOGGING SETUP
# ============================================================

def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
) -> logging.Logger:
    """
    Set up process-wide logging.

    Args:
        level: Log level
        log_format: Output format (json or text)

    Returns:
        Configured logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps({
                "timestamp": "%(asctime)s",
                "level": "%(levelname)s",
                "logger": "%(name)s",
                "message": "%(message)s",
            })
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    return logging.getLogger("orchestrator")


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog=SYSTEM_NAME,
        description="Ecosystem intelligence aggregation and scoring engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                        # Refresh loop + HTTP API
  %(prog)s --once                 # One cycle, print snapshot JSON
  %(prog)s --interval 60 --no-api # Refresh loop only
        """
    )

    # --------------------------------------------------------
    # Execution Options
    # --------------------------------------------------------
    execution_group = parser.add_argument_group("Execution Options")

    execution_group.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle, print the snapshot as JSON and exit",
    )

    execution_group.add_argument(
        "--interval",
        type=float,
        metavar="SECONDS",
        help="Refresh interval in seconds (default: REFRESH_INTERVAL_SECONDS or 300)",
    )

    # --------------------------------------------------------
    # API Options
    # --------------------------------------------------------
    api_group = parser.add_argument_group("API Options")

    api_group.add_argument(
        "--host",
        type=str,
        help="API bind host (default: API_HOST or 0.0.0.0)",
    )

    api_group.add_argument(
        "--port",
        type=int,
        help="API port (default: API_PORT or 5000)",
    )

    api_group.add_argument(
        "--no-api",
        action="store_true",
        help="Do not start the HTTP API",
    )

    # --------------------------------------------------------
    # Logging Options
    # --------------------------------------------------------
    logging_group = parser.add_argument_group("Logging Options")

    logging_group.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: LOG_LEVEL or INFO)",
    )

    logging_group.add_argument(
        "--log-format",
        type=str,
        choices=["json", "text"],
        help="Logging format (default: LOG_FORMAT or text)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {SYSTEM_VERSION}",
    )

    return parser


# ============================================================
# CLI CONFIGURATION BUILDER
# ============================================================

def build_config(args: argparse.Namespace) -> EngineConfig:
    """
    Build engine configuration: environment first, CLI overrides.

    Args:
        args: Parsed arguments

    Returns:
        EngineConfig instance
    """
    config = EngineConfig.from_env()

    if args.interval is not None:
        config.refresh_interval_seconds = args.interval
    if args.host:
        config.api_host = args.host
    if args.port is not None:
        config.api_port = args.port
    if args.log_level:
        config.log_level = args.log_level
    if args.log_format:
        config.log_format = args.log_format

    return config


# ============================================================
# MAIN ENTRY POINT
# ============================================================

async def run_once(config: EngineConfig) -> int:
    """Run one cycle and print the snapshot."""
    orchestrator = RefreshOrchestrator.from_config(config)
    snapshot = await orchestrator.run_cycle()
    if snapshot is None:
        return 1

    print(json.dumps(snapshot, cls=SnapshotEncoder, indent=2))
    return 0


async def run_service(config: EngineConfig, with_api: bool = True) -> int:
    """Run the refresh loop, and the API unless disabled, until cancelled."""
    logger = logging.getLogger("orchestrator")
    orchestrator = RefreshOrchestrator.from_config(config)
    runner = None

    try:
        if with_api:
            runner = await start_api_server(orchestrator, config.api_host, config.api_port)
        await orchestrator.start()

        logger.info("Engine running (press Ctrl+C to stop)...")
        await asyncio.Event().wait()
        return 0
    finally:
        await orchestrator.stop()
        if runner is not None:
            await runner.cleanup()


async def async_main(args: argparse.Namespace, config: EngineConfig) -> int:
    """
    Async main entry point.

    Args:
        args: Parsed arguments
        config: Validated engine configuration

    Returns:
        Exit code
    """
    if args.once:
        return await run_once(config)
    return await run_service(config, with_api=not args.no_api)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        config.ensure_valid()
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    logger = setup_logging(config.log_level, config.log_format)
    logger.info(f"{SYSTEM_NAME} {SYSTEM_VERSION} starting")

    try:
        return asyncio.run(async_main(args, config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


# ============================================================
# MODULE EXECUTION
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
