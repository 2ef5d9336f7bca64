"""
Fee Normalizer - Raw observations to {slow, average, fast} in gwei-equivalent.

EVM and Solana derive all three tiers from one base value with a fixed
spread. Bitcoin reports three independent levels, so its tiers are only
scaled, never re-ordered.
"""

from datetime import datetime

from fee_adapters.exceptions import NormalizationError
from fee_adapters.models import (
    BitcoinRecommendedFees,
    EvmGasPrice,
    NormalizedReading,
    RawFeeObservation,
    SolanaPrioritizationFees,
)


WEI_PER_GWEI = 1e9

# micro-lamports per compute unit -> display unit
SOLANA_FEE_DIVISOR = 1000.0

# 1 sat/vB ~ 0.1 gwei for display purposes
SATS_PER_VBYTE_SCALE = 0.1

SLOW_MULTIPLIER = 0.8
FAST_MULTIPLIER = 1.2


def _spread(chain_id: int, observed_at: datetime, base: float) -> NormalizedReading:
    return NormalizedReading(
        chain_id=chain_id,
        observed_at=observed_at,
        fee_slow=base * SLOW_MULTIPLIER,
        fee_average=base,
        fee_fast=base * FAST_MULTIPLIER,
    )


def normalize_evm(raw: EvmGasPrice, chain_id: int, observed_at: datetime) -> NormalizedReading:
    return _spread(chain_id, observed_at, raw.price_wei / WEI_PER_GWEI)


def normalize_solana(
    raw: SolanaPrioritizationFees,
    chain_id: int,
    observed_at: datetime,
) -> NormalizedReading:
    return _spread(chain_id, observed_at, raw.mean / SOLANA_FEE_DIVISOR)


def normalize_bitcoin(
    raw: BitcoinRecommendedFees,
    chain_id: int,
    observed_at: datetime,
) -> NormalizedReading:
    return NormalizedReading(
        chain_id=chain_id,
        observed_at=observed_at,
        fee_slow=raw.hour_fee * SATS_PER_VBYTE_SCALE,
        fee_average=raw.half_hour_fee * SATS_PER_VBYTE_SCALE,
        fee_fast=raw.fastest_fee * SATS_PER_VBYTE_SCALE,
    )


def normalize(
    raw: RawFeeObservation,
    chain_id: int,
    observed_at: datetime,
) -> NormalizedReading:
    """
    Normalize one raw observation.

    Raises:
        NormalizationError: For an observation type outside the known families
    """
    if isinstance(raw, EvmGasPrice):
        return normalize_evm(raw, chain_id, observed_at)
    if isinstance(raw, SolanaPrioritizationFees):
        return normalize_solana(raw, chain_id, observed_at)
    if isinstance(raw, BitcoinRecommendedFees):
        return normalize_bitcoin(raw, chain_id, observed_at)

    raise NormalizationError(
        f"Unsupported raw observation type: {type(raw).__name__}",
        raw_data=raw,
    )
