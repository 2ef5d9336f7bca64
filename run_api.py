#!/usr/bin/env python
"""
Gas Price API Server Runner.

Usage:
    python run_api.py

Or with PM2:
    pm2 start run_api.py --interpreter python --name gas-api
"""

import logging
import os
import sys

import uvicorn

from gas_ingestion.logging_setup import setup_logging


def main():
    """Run the gas price API server."""
    logger = setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "text").lower(),
    )

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", os.getenv("PORT", "8000")))
    reload = os.getenv("ENVIRONMENT", "production") == "development"

    logger.info(f"Starting Gas Price API on {host}:{port}")

    try:
        uvicorn.run(
            "api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=logging.getLevelName(logging.getLogger().level).lower(),
            access_log=True,
        )
    except Exception as e:
        logger.error(f"Failed to start API server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
