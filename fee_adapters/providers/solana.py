"""
Solana Fee Adapter - getRecentPrioritizationFees over JSON-RPC.

Samples are the per-slot prioritization fees reported for a reference
account. No samples means nobody paid a priority fee: a zero-fee
observation, not an error.
"""

import logging
import math
from typing import Any

import aiohttp

from fee_adapters.base import BaseFeeAdapter
from fee_adapters.exceptions import UpstreamError
from fee_adapters.models import NetworkDescriptor, ProtocolFamily, SolanaPrioritizationFees


logger = logging.getLogger(__name__)


class SolanaFeeAdapter(BaseFeeAdapter):
    """Fetches recent prioritization fee samples."""

    RPC_METHOD = "getRecentPrioritizationFees"

    # System Program
    REFERENCE_ACCOUNT = "11111111111111111111111111111111"

    async def fetch_raw(
        self,
        network: NetworkDescriptor,
        url: str,
        session: aiohttp.ClientSession,
    ) -> SolanaPrioritizationFees:
        result = await self._rpc_call(
            session,
            url,
            self.RPC_METHOD,
            [[self.REFERENCE_ACCOUNT]],
        )
        return SolanaPrioritizationFees(samples=parse_fee_samples(result, network.name))

    @property
    def family(self) -> ProtocolFamily:
        return ProtocolFamily.SOLANA


def parse_fee_samples(result: Any, chain: str) -> tuple[int, ...]:
    """Extract `prioritizationFee` from each entry of the RPC result."""
    if not isinstance(result, list):
        raise UpstreamError(
            f"getRecentPrioritizationFees result is not a list: {type(result).__name__}",
            chain=chain,
        )

    samples = []
    for entry in result:
        fee = entry.get("prioritizationFee") if isinstance(entry, dict) else None
        if isinstance(fee, bool) or not isinstance(fee, (int, float)):
            raise UpstreamError(
                f"Malformed prioritization fee sample: {entry!r}",
                chain=chain,
            )
        if not math.isfinite(fee) or fee < 0:
            raise UpstreamError(
                f"Prioritization fee sample out of range: {entry!r}",
                chain=chain,
            )
        samples.append(fee)

    if not samples:
        logger.debug(f"[solana] {chain}: no prioritization fee samples, treating as zero")
    return tuple(samples)
