"""
EVM Fee Adapter - eth_gasPrice over JSON-RPC.

Works against any EVM-compatible node endpoint (Infura, Alchemy, self-hosted).
"""

import logging
from typing import Any

import aiohttp

from fee_adapters.base import BaseFeeAdapter
from fee_adapters.exceptions import UpstreamError
from fee_adapters.models import EvmGasPrice, NetworkDescriptor, ProtocolFamily


logger = logging.getLogger(__name__)


class EvmFeeAdapter(BaseFeeAdapter):
    """Fetches the node's current gas price in wei."""

    RPC_METHOD = "eth_gasPrice"

    @property
    def family(self) -> ProtocolFamily:
        return ProtocolFamily.EVM

    async def fetch_raw(
        self,
        network: NetworkDescriptor,
        url: str,
        session: aiohttp.ClientSession,
    ) -> EvmGasPrice:
        result = await self._rpc_call(session, url, self.RPC_METHOD, [])
        return EvmGasPrice(price_wei=parse_hex_quantity(result, network.name))


def parse_hex_quantity(value: Any, chain: str) -> int:
    """Parse a JSON-RPC hex quantity such as "0x3b9aca00"."""
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise UpstreamError(
            f"eth_gasPrice result is not a hex quantity: {value!r}",
            chain=chain,
        )
    try:
        return int(value, 16)
    except ValueError as e:
        raise UpstreamError(
            f"eth_gasPrice result is not a hex quantity: {value!r}",
            chain=chain,
            original_error=e,
        ) from e
