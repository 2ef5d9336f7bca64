"""
Gas Ingestion - Ingestion Service.

============================================================
RESPONSIBILITY
============================================================
Wires collection and persistence into one cycle.

- Startup validation: credentials and database (fail fast)
- run_collection_cycle(): orchestrate, then upsert the batch
- Health/status summary for monitoring

============================================================
STARTUP
============================================================
start() MUST succeed before the first cycle. A missing
provider credential raises ConfigurationError here, so no
partial ingestion is ever attempted.

============================================================
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from database.engine import (
    create_database_engine,
    get_session_factory,
    initialize_database,
)
from database.repository import upsert_readings
from fee_adapters.endpoints import validate_credentials
from fee_adapters.networks import NetworkRegistry
from fee_adapters.registry import AdapterRegistry

from gas_ingestion.config import IngestionConfig
from gas_ingestion.orchestrator import FeeCollectionOrchestrator
from gas_ingestion.types import CycleResult


class GasIngestionService:
    """
    Gas price ingestion: collect all networks, persist one batch.

    ============================================================
    INTERFACE
    ============================================================
    - start(): Validate configuration and database
    - stop(): Release database resources
    - run_collection_cycle(): One fetch-all-then-persist cycle
    - get_health_status(): Report health
    ============================================================
    """

    def __init__(
        self,
        config: IngestionConfig,
        orchestrator: Optional[FeeCollectionOrchestrator] = None,
        engine: Optional[Engine] = None,
        session_factory: Optional[sessionmaker] = None,
    ) -> None:
        self._config = config
        self._logger = logging.getLogger("gas_ingestion.service")

        self._networks = NetworkRegistry(config.networks)
        self._orchestrator = orchestrator or FeeCollectionOrchestrator(
            networks=self._networks,
            adapters=AdapterRegistry.default(timeout=config.request_timeout_seconds),
            credentials=config.credentials,
            network_timeout_seconds=config.network_timeout_seconds,
        )

        self._engine = engine
        self._session_factory = session_factory

        # State
        self._running = False
        self._last_result: Optional[CycleResult] = None
        self._total_cycles = 0
        self._total_records = 0

        self._logger.info(
            f"GasIngestionService initialized | networks={len(self._networks)} | "
            f"interval={config.poll_interval_seconds}s | "
            f"timeout={config.request_timeout_seconds}s"
        )

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def session_factory(self) -> Optional[sessionmaker]:
        return self._session_factory

    # --------------------------------------------------------
    # LIFECYCLE
    # --------------------------------------------------------

    async def start(self, create_tables: bool = True) -> None:
        """
        Start the service.

        1. Validates provider credentials for every registered network
        2. Connects to the database and ensures the schema exists

        Raises:
            ConfigurationError: If a required credential is missing
            PersistenceError: If the database is unreachable
        """
        self._logger.info("Starting GasIngestionService...")

        validate_credentials(self._networks, self._config.credentials)
        self._logger.info(
            f"Configuration validated | credentials={self._config.credentials!r}"
        )

        if self._session_factory is None:
            if self._engine is None:
                self._engine = create_database_engine(self._config.database_url)
            self._session_factory = get_session_factory(self._engine)

        if self._engine is not None:
            await asyncio.to_thread(initialize_database, self._engine, create_tables)

        self._running = True
        self._logger.info("GasIngestionService started")

    async def stop(self) -> None:
        """Stop the service."""
        self._logger.info("Stopping GasIngestionService...")
        self._running = False
        if self._engine is not None:
            self._engine.dispose()
        self._logger.info("GasIngestionService stopped")

    # --------------------------------------------------------
    # COLLECTION CYCLE
    # --------------------------------------------------------

    async def run_collection_cycle(self) -> CycleResult:
        """
        Run one complete cycle: collect every network, then persist.

        Network failures are contained in the result. A persistence
        failure propagates to the caller (the scheduler loop).

        Raises:
            PersistenceError: If the batch upsert fails
            RuntimeError: If start() has not been called
        """
        if self._session_factory is None:
            raise RuntimeError("GasIngestionService.start() must be called first")

        start_time = time.monotonic()
        result = await self._orchestrator.run_cycle()

        self._logger.debug(f"Persisting cycle {result.cycle_id}: {len(result.readings)} readings")
        try:
            if result.readings:
                result.stored = await asyncio.to_thread(
                    upsert_readings, self._session_factory, result.readings
                )
                self._logger.info(
                    f"Successfully stored {result.stored} gas price records"
                )
            else:
                self._logger.warning("No valid data to store")
        finally:
            result.completed_at = datetime.now(timezone.utc)
            result.duration_seconds = time.monotonic() - start_time

            self._last_result = result
            self._total_cycles += 1
            self._total_records += result.stored

            failed = ", ".join(f.network_name for f in result.failures) or "none"
            self._logger.info(
                f"=== INGESTION CYCLE {result.cycle_id} COMPLETED ===\n"
                f"  Duration: {result.duration_seconds:.2f}s\n"
                f"  Networks: {result.network_count}\n"
                f"  Stored: {result.stored}\n"
                f"  Failed: {failed}"
            )

        return result

    # --------------------------------------------------------
    # HEALTH
    # --------------------------------------------------------

    def get_health_status(self) -> dict[str, Any]:
        """Get health status for monitoring."""
        last = self._last_result
        return {
            "status": "healthy" if self._running else "stopped",
            "module": "GasIngestionService",
            "networks": len(self._networks),
            "total_cycles": self._total_cycles,
            "total_records": self._total_records,
            "last_cycle": {
                "cycle_id": last.cycle_id if last else None,
                "succeeded": len(last.readings) if last else 0,
                "failed": [f.network_name for f in last.failures] if last else [],
                "stored": last.stored if last else 0,
                "completed_at": last.completed_at.isoformat() if last and last.completed_at else None,
            },
        }
