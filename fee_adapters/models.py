"""
Fee Data Models - Network descriptors, raw observations and normalized readings.

Raw observations live for one cycle only. Normalized readings are what the
persistence layer stores.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Union


class ProtocolFamily(Enum):
    """Wire-protocol shape a network's fee data is fetched with."""
    EVM = "evm"
    SOLANA = "solana"
    BITCOIN = "bitcoin"


class EndpointRule(Enum):
    """How a network's upstream URL is derived."""
    INFURA = "infura"
    ALCHEMY = "alchemy"
    CUSTOM = "custom"


@dataclass(frozen=True)
class NetworkDescriptor:
    """
    Static description of one tracked network.

    `locator` is the provider subdomain for INFURA/ALCHEMY and the full URL
    for CUSTOM.
    """
    chain_id: int
    name: str
    family: ProtocolFamily
    endpoint_rule: EndpointRule
    locator: str
    symbol: str


# ─────────────────────────────────────────────────────────────
# Raw observations (one variant per protocol family)
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EvmGasPrice:
    """Result of eth_gasPrice, in wei."""
    price_wei: int


@dataclass(frozen=True)
class SolanaPrioritizationFees:
    """Recent prioritization fee samples, in micro-lamports per compute unit."""
    samples: tuple[int, ...]

    @property
    def mean(self) -> float:
        if not self.samples:
            return 0.0
        return sum(self.samples) / len(self.samples)


@dataclass(frozen=True)
class BitcoinRecommendedFees:
    """Recommended fee levels in sat/vB."""
    fastest_fee: float
    half_hour_fee: float
    hour_fee: float


RawFeeObservation = Union[EvmGasPrice, SolanaPrioritizationFees, BitcoinRecommendedFees]


@dataclass(frozen=True)
class NormalizedReading:
    """
    Fee tiers for one network in one cycle, in the shared display unit.

    `observed_at` is the cycle start, shared by every network of the cycle.
    """
    chain_id: int
    observed_at: datetime
    fee_slow: float
    fee_average: float
    fee_fast: float

    @property
    def is_ordered(self) -> bool:
        """True when slow <= average <= fast."""
        return self.fee_slow <= self.fee_average <= self.fee_fast

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "chain_id": self.chain_id,
            "observed_at": self.observed_at.isoformat(),
            "fee_slow": self.fee_slow,
            "fee_average": self.fee_average,
            "fee_fast": self.fee_fast,
        }
