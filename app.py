#!/usr/bin/env python3
"""
Gas Fee Ingestion - Main Application Entry Point.

============================================================
SINGLE ENTRYPOINT
============================================================
This is the ONE executable entry point for the ingestion service.

- Compatible with PM2 process management
- Can be started, stopped, and restarted safely
- Handles SIGINT/SIGTERM gracefully (current cycle finishes)
- Refuses to start on missing configuration (exit code 2)

============================================================
USAGE
============================================================
Direct execution:
    python app.py

One cycle, then exit:
    python app.py --single-cycle

Create the gas_prices table and exit:
    python app.py --init-db

With PM2:
    pm2 start app.py --interpreter python --name gas-ingestion

============================================================
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from typing import List, Optional

from database.engine import (
    PersistenceError,
    create_database_engine,
    initialize_database,
)
from fee_adapters.exceptions import ConfigurationError
from gas_ingestion.config import IngestionConfig, load_config
from gas_ingestion.ingestion_service import GasIngestionService
from gas_ingestion.logging_setup import setup_logging
from gas_ingestion.scheduler import IngestionScheduler
from gas_ingestion.types import CycleResult


EXIT_OK = 0
EXIT_CYCLE_FAILED = 1
EXIT_CONFIG_ERROR = 2


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gas-fee-ingestion",
        description="Periodic multi-chain gas fee ingestion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  DATABASE_URL                  Database connection URL (required)
  INFURA_API_KEY                Required for INFURA-routed networks
  ALCHEMY_API_KEY               Required for ALCHEMY-routed networks
  GAS_POLL_INTERVAL_SECONDS     Wait between cycles (default: 60)
  GAS_REQUEST_TIMEOUT_SECONDS   Per-request timeout (default: 10)

Examples:
  %(prog)s                              # Run forever
  %(prog)s --single-cycle               # One cycle, then exit
  %(prog)s --tick-interval 30           # Override the poll interval
        """
    )

    parser.add_argument(
        "--single-cycle",
        action="store_true",
        help="Run a single ingestion cycle and exit",
    )
    parser.add_argument(
        "--tick-interval",
        type=float,
        default=None,
        help="Seconds between cycles (overrides GAS_POLL_INTERVAL_SECONDS)",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create the gas_prices table and exit",
    )

    logging_group = parser.add_argument_group("Logging Options")
    logging_group.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level (overrides LOG_LEVEL)",
    )
    logging_group.add_argument(
        "--log-format",
        type=str,
        choices=["text", "json"],
        default=None,
        help="Log format (overrides LOG_FORMAT)",
    )

    return parser


def validate_args(args: argparse.Namespace) -> List[str]:
    """Validate CLI arguments. Returns a list of error messages."""
    errors = []
    if args.tick_interval is not None and args.tick_interval <= 0:
        errors.append("--tick-interval must be positive")
    if args.single_cycle and args.init_db:
        errors.append("--single-cycle and --init-db are mutually exclusive")
    return errors


def apply_overrides(config: IngestionConfig, args: argparse.Namespace) -> IngestionConfig:
    """Apply CLI overrides on top of the environment configuration."""
    if args.tick_interval is not None:
        config.poll_interval_seconds = args.tick_interval
    if args.log_level:
        config.log_level = args.log_level
    if args.log_format:
        config.log_format = args.log_format
    return config


# ============================================================
# SIGNAL HANDLING
# ============================================================

def install_signal_handlers(scheduler: IngestionScheduler) -> None:
    """Route SIGINT/SIGTERM to a graceful scheduler stop."""
    logger = logging.getLogger(__name__)

    def _request_stop(sig: signal.Signals) -> None:
        logger.info(f"Received signal {sig.name}")
        scheduler.stop()

    if sys.platform == "win32":
        # No loop.add_signal_handler on Windows
        signal.signal(signal.SIGINT, lambda signum, frame: _request_stop(signal.Signals(signum)))
        return

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_stop, sig)


def format_cycle_summary(result: CycleResult) -> str:
    """Render a finished cycle (readings and failures) as indented JSON."""
    return json.dumps(result.to_dict(), indent=2)


# ============================================================
# MAIN FUNCTION
# ============================================================

async def run_application(config: IngestionConfig, args: argparse.Namespace) -> int:
    """
    Run the ingestion service.

    Args:
        config: Validated configuration
        args: Parsed CLI arguments

    Returns:
        Exit code
    """
    logger = logging.getLogger(__name__)

    if args.init_db:
        engine = create_database_engine(config.database_url)
        try:
            await asyncio.to_thread(initialize_database, engine, True)
        finally:
            engine.dispose()
        logger.info("Database initialized")
        return EXIT_OK

    try:
        service = GasIngestionService(config)
    except ConfigurationError as e:
        logger.critical(f"Startup aborted: {e}")
        return EXIT_CONFIG_ERROR

    try:
        await service.start()
    except ConfigurationError as e:
        logger.critical(f"Startup aborted: {e}")
        return EXIT_CONFIG_ERROR

    scheduler = IngestionScheduler(service, config.poll_interval_seconds)

    try:
        if args.single_cycle:
            logger.info("Running single cycle...")
            result = await scheduler.run_single_cycle()
            if result is None:
                return EXIT_CYCLE_FAILED

            print(format_cycle_summary(result))
            return EXIT_OK if result.success else EXIT_CYCLE_FAILED

        install_signal_handlers(scheduler)
        logger.info("Starting main loop (press Ctrl+C to stop)...")
        await scheduler.run_forever()
        return EXIT_OK

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return EXIT_CYCLE_FAILED
    finally:
        await service.stop()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    errors = validate_args(args)
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return EXIT_CYCLE_FAILED

    # Logging is needed before config so config errors are visible
    setup_logging(level=args.log_level or "INFO", log_format=args.log_format or "text")
    logger = logging.getLogger(__name__)

    try:
        config = apply_overrides(load_config(), args)
    except ConfigurationError as e:
        logger.critical(f"Startup aborted: {e}")
        return EXIT_CONFIG_ERROR

    setup_logging(level=config.log_level, log_format=config.log_format)

    try:
        return asyncio.run(run_application(config, args))
    except PersistenceError as e:
        logger.critical(f"Database unavailable: {e}")
        return EXIT_CYCLE_FAILED
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


# ============================================================
# ENTRY POINT
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
