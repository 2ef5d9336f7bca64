"""
Network Registry - Ordered table of tracked networks.

Pure data. The only behavior is ordered iteration and rejecting a
duplicate chain id (a configuration error).
"""

import logging
from typing import Iterable, Iterator

from fee_adapters.exceptions import ConfigurationError
from fee_adapters.models import EndpointRule, NetworkDescriptor, ProtocolFamily


logger = logging.getLogger(__name__)


MEMPOOL_RECOMMENDED_FEES_URL = "https://mempool.space/api/v1/fees/recommended"

DEFAULT_NETWORKS: tuple[NetworkDescriptor, ...] = (
    NetworkDescriptor(1, "Ethereum", ProtocolFamily.EVM, EndpointRule.INFURA, "mainnet", "ETH"),
    NetworkDescriptor(56, "BNB Smart Chain", ProtocolFamily.EVM, EndpointRule.INFURA, "bsc-mainnet", "BNB"),
    NetworkDescriptor(137, "Polygon", ProtocolFamily.EVM, EndpointRule.INFURA, "polygon-mainnet", "MATIC"),
    NetworkDescriptor(42161, "Arbitrum", ProtocolFamily.EVM, EndpointRule.INFURA, "arbitrum-mainnet", "ETH"),
    NetworkDescriptor(10, "Optimism", ProtocolFamily.EVM, EndpointRule.INFURA, "optimism-mainnet", "ETH"),
    NetworkDescriptor(43114, "Avalanche", ProtocolFamily.EVM, EndpointRule.INFURA, "avalanche-mainnet", "AVAX"),
    NetworkDescriptor(101, "Solana", ProtocolFamily.SOLANA, EndpointRule.ALCHEMY, "solana-mainnet", "SOL"),
    NetworkDescriptor(0, "Bitcoin", ProtocolFamily.BITCOIN, EndpointRule.CUSTOM, MEMPOOL_RECOMMENDED_FEES_URL, "BTC"),
)


class NetworkRegistry:
    """
    Ordered, immutable-after-startup list of network descriptors.

    Usage:
        registry = NetworkRegistry(DEFAULT_NETWORKS)
        for network in registry:
            ...
    """

    def __init__(self, networks: Iterable[NetworkDescriptor] = ()) -> None:
        self._networks: dict[int, NetworkDescriptor] = {}
        for network in networks:
            self.register(network)

    def register(self, network: NetworkDescriptor) -> None:
        """Append a network. Chain ids must be unique."""
        if network.chain_id in self._networks:
            raise ConfigurationError(
                f"Duplicate chain_id {network.chain_id} "
                f"({self._networks[network.chain_id].name} / {network.name})",
                config_key="networks",
            )
        self._networks[network.chain_id] = network
        logger.debug(f"Registered network '{network.name}' (chain_id={network.chain_id})")

    def list_networks(self) -> list[NetworkDescriptor]:
        """All networks in registration order."""
        return list(self._networks.values())

    def __iter__(self) -> Iterator[NetworkDescriptor]:
        return iter(self.list_networks())

    def __len__(self) -> int:
        return len(self._networks)

    def __repr__(self) -> str:
        return f"<NetworkRegistry(networks={len(self)})>"


def get_default_registry() -> NetworkRegistry:
    """Registry with the default tracked networks."""
    return NetworkRegistry(DEFAULT_NETWORKS)
