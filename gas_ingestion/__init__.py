"""
Gas Ingestion Package.

Runs the periodic gas fee collection pipeline:
configuration -> orchestrated fetch -> batch upsert -> wait -> repeat.
"""

from gas_ingestion.config import IngestionConfig, load_config
from gas_ingestion.ingestion_service import GasIngestionService
from gas_ingestion.logging_setup import setup_logging
from gas_ingestion.orchestrator import FeeCollectionOrchestrator
from gas_ingestion.scheduler import IngestionScheduler, SchedulerState
from gas_ingestion.types import CycleResult, NetworkFailure


__all__ = [
    "IngestionConfig",
    "load_config",
    "GasIngestionService",
    "setup_logging",
    "FeeCollectionOrchestrator",
    "IngestionScheduler",
    "SchedulerState",
    "CycleResult",
    "NetworkFailure",
]
