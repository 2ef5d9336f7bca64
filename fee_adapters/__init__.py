"""
Fee Adapters Package - Per-network gas fee fetching and normalization.

Features:
- One adapter per protocol family (EVM, Solana, Bitcoin)
- Endpoint resolution from an explicit credentials value
- Normalization into {slow, average, fast} gwei-equivalent tiers
- Stateless adapters, safe to run concurrently

Quick Start:
    from fee_adapters import (
        AdapterRegistry,
        ProviderCredentials,
        get_default_registry,
        normalize,
        resolve_endpoint,
    )

    async def sample(observed_at):
        adapters = AdapterRegistry.default(timeout=10.0)
        credentials = ProviderCredentials(infura_api_key="...", alchemy_api_key="...")

        for network in get_default_registry():
            url = resolve_endpoint(network, credentials)
            raw = await adapters.get_adapter(network.family).fetch(network, url)
            print(normalize(raw, network.chain_id, observed_at))
"""

from fee_adapters.base import BaseFeeAdapter
from fee_adapters.endpoints import (
    ProviderCredentials,
    resolve_endpoint,
    validate_credentials,
)
from fee_adapters.exceptions import (
    ConfigurationError,
    GasIngestionError,
    NormalizationError,
    ResolutionError,
    UpstreamError,
)
from fee_adapters.models import (
    BitcoinRecommendedFees,
    EndpointRule,
    EvmGasPrice,
    NetworkDescriptor,
    NormalizedReading,
    ProtocolFamily,
    RawFeeObservation,
    SolanaPrioritizationFees,
)
from fee_adapters.networks import (
    DEFAULT_NETWORKS,
    NetworkRegistry,
    get_default_registry,
)
from fee_adapters.normalizer import normalize
from fee_adapters.providers import BitcoinFeeAdapter, EvmFeeAdapter, SolanaFeeAdapter
from fee_adapters.registry import AdapterRegistry


__version__ = "1.0.0"

__all__ = [
    # Base
    "BaseFeeAdapter",

    # Models
    "NetworkDescriptor",
    "NormalizedReading",
    "ProtocolFamily",
    "EndpointRule",
    "RawFeeObservation",
    "EvmGasPrice",
    "SolanaPrioritizationFees",
    "BitcoinRecommendedFees",

    # Exceptions
    "GasIngestionError",
    "ConfigurationError",
    "ResolutionError",
    "UpstreamError",
    "NormalizationError",

    # Networks & endpoints
    "DEFAULT_NETWORKS",
    "NetworkRegistry",
    "get_default_registry",
    "ProviderCredentials",
    "resolve_endpoint",
    "validate_credentials",

    # Normalization
    "normalize",

    # Providers
    "EvmFeeAdapter",
    "SolanaFeeAdapter",
    "BitcoinFeeAdapter",

    # Registry
    "AdapterRegistry",
]
