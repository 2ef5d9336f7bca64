"""
Providers package - Per-family fee adapter implementations.
"""

from fee_adapters.providers.bitcoin import BitcoinFeeAdapter
from fee_adapters.providers.evm import EvmFeeAdapter
from fee_adapters.providers.solana import SolanaFeeAdapter


__all__ = [
    "BitcoinFeeAdapter",
    "EvmFeeAdapter",
    "SolanaFeeAdapter",
]
