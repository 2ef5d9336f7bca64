"""
Database Package Initialization.

============================================================
GAS PRICE PERSISTENCE LAYER
============================================================

All writes go to the gas_prices table through one idempotent
upsert per ingestion cycle.

REQUIRED:
- Every write is logged with its row count
- Every failure raises PersistenceError
- All transactions are explicit with commit/rollback

============================================================
"""

# Core engine and session management
from .engine import (
    # Declarative base
    Base,
    REQUIRED_TABLES,

    # Engine creation
    create_database_engine,
    get_session_factory,

    # Session management
    transaction_scope,

    # Database initialization
    create_all_tables,
    initialize_database,
    verify_database_connection,
    verify_required_tables,

    # Exceptions
    PersistenceError,
    DatabaseConnectionError,
    DatabaseInitializationError,
)

# ORM Models
from .models import GasPrice

# Repository
from .repository import fetch_latest_readings, upsert_readings


__all__ = [
    "Base",
    "REQUIRED_TABLES",
    "create_database_engine",
    "get_session_factory",
    "transaction_scope",
    "create_all_tables",
    "initialize_database",
    "verify_database_connection",
    "verify_required_tables",
    "PersistenceError",
    "DatabaseConnectionError",
    "DatabaseInitializationError",
    "GasPrice",
    "fetch_latest_readings",
    "upsert_readings",
]
