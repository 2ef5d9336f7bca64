"""
Database ORM Models.

============================================================
GAS PRICE SCHEMA
============================================================

One row per (chain, cycle). The composite primary key is the
upsert conflict target.

============================================================
"""

from sqlalchemy import BigInteger, Column, DateTime, Float, Index, Integer

from .engine import Base


class GasPrice(Base):
    """
    Normalized fee tiers for one network in one ingestion cycle.

    Source: gas_ingestion.orchestrator
    Update Frequency: Per ingestion cycle
    Retention: Not managed by ingestion (rows are never deleted)
    """
    __tablename__ = "gas_prices"

    # Cycle start, UTC
    timestamp = Column(DateTime(timezone=True), primary_key=True, nullable=False)
    chain_id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, nullable=False)

    # Gwei-equivalent
    price_slow = Column(Float, nullable=False)
    price_average = Column(Float, nullable=False)
    price_fast = Column(Float, nullable=False)

    __table_args__ = (
        Index("idx_gas_prices_chain_time", "chain_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<GasPrice(chain_id={self.chain_id}, timestamp={self.timestamp})>"
