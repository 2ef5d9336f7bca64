"""
Gas Price Repository - Idempotent batch upsert and latest-per-chain read.

The upsert is the only writer of gas_prices. Re-submitting a
(chain_id, timestamp) pair overwrites the three price columns in place.
"""

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from fee_adapters.models import NormalizedReading

from .engine import PersistenceError, transaction_scope
from .models import GasPrice


logger = logging.getLogger(__name__)


_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _insert_for(dialect_name: str):
    try:
        return _DIALECT_INSERTS[dialect_name]
    except KeyError:
        raise PersistenceError(
            f"Upsert not supported for database dialect '{dialect_name}'"
        ) from None


def upsert_readings(
    session_factory: sessionmaker,
    readings: Sequence[NormalizedReading],
) -> int:
    """
    Persist one cycle's readings as a single idempotent batch.

    Uses INSERT ... ON CONFLICT (chain_id, timestamp) DO UPDATE so the same
    cycle can be delivered twice without duplicating rows.

    Args:
        session_factory: Factory for database sessions
        readings: Normalized readings of one cycle (may be empty)

    Returns:
        Number of rows written

    Raises:
        PersistenceError: On any database failure
    """
    if not readings:
        logger.debug("No readings to persist")
        return 0

    values_list = [
        {
            "timestamp": reading.observed_at,
            "chain_id": reading.chain_id,
            "price_slow": reading.fee_slow,
            "price_average": reading.fee_average,
            "price_fast": reading.fee_fast,
        }
        for reading in readings
    ]

    with transaction_scope(session_factory) as session:
        insert = _insert_for(session.get_bind().dialect.name)
        stmt = insert(GasPrice).values(values_list)
        stmt = stmt.on_conflict_do_update(
            index_elements=[GasPrice.chain_id, GasPrice.timestamp],
            set_={
                "price_slow": stmt.excluded.price_slow,
                "price_average": stmt.excluded.price_average,
                "price_fast": stmt.excluded.price_fast,
            },
        )
        session.execute(stmt)

    logger.info(f"Persisted {len(values_list)} gas price records")
    return len(values_list)


def fetch_latest_readings(session_factory: sessionmaker) -> list[GasPrice]:
    """
    Most recent row for every chain id present in the store.

    Returns:
        One GasPrice per chain, ordered by chain_id

    Raises:
        PersistenceError: On any database failure
    """
    latest = (
        select(
            GasPrice.chain_id.label("chain_id"),
            func.max(GasPrice.timestamp).label("latest"),
        )
        .group_by(GasPrice.chain_id)
        .subquery()
    )
    stmt = (
        select(GasPrice)
        .join(
            latest,
            (GasPrice.chain_id == latest.c.chain_id)
            & (GasPrice.timestamp == latest.c.latest),
        )
        .order_by(GasPrice.chain_id)
    )

    session = session_factory()
    try:
        return list(session.scalars(stmt).all())
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch latest gas prices: {e}")
        raise PersistenceError(f"Read failed: {e}") from e
    finally:
        session.close()
