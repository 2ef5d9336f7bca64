"""
Pydantic schemas for Gas Price API responses.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class GasPriceResponse(BaseModel):
    """Latest fee tiers for one network (gwei-equivalent)."""

    model_config = ConfigDict(from_attributes=True)

    chain_id: int
    timestamp: datetime
    price_slow: float
    price_average: float
    price_fast: float


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
    uptime_seconds: float = 0
