"""
Gas Ingestion - Cycle result types.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from fee_adapters.models import NormalizedReading


@dataclass(frozen=True)
class NetworkFailure:
    """A network excluded from a cycle, and why."""

    chain_id: int
    network_name: str
    error_type: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "chain_id": self.chain_id,
            "network_name": self.network_name,
            "error_type": self.error_type,
            "message": self.message,
        }


@dataclass
class CycleResult:
    """Result of a single ingestion cycle."""

    cycle_id: str
    observed_at: datetime
    readings: list[NormalizedReading] = field(default_factory=list)
    failures: list[NetworkFailure] = field(default_factory=list)

    # Filled in once persistence has run
    stored: int = 0
    completed_at: Optional[datetime] = None
    duration_seconds: float = 0.0

    @property
    def network_count(self) -> int:
        return len(self.readings) + len(self.failures)

    @property
    def success(self) -> bool:
        """True when at least one network produced a reading."""
        return len(self.readings) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "cycle_id": self.cycle_id,
            "observed_at": self.observed_at.isoformat(),
            "readings": [reading.to_dict() for reading in self.readings],
            "failures": [failure.to_dict() for failure in self.failures],
            "stored": self.stored,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }
