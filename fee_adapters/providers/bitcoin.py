"""
Bitcoin Fee Adapter - mempool.space recommended fees.

GET /api/v1/fees/recommended returns:
    {"fastestFee": 20, "halfHourFee": 15, "hourFee": 10, "economyFee": 5, "minimumFee": 1}

Only the first three levels are used. No credential is needed.
"""

import logging
import math
from typing import Any

import aiohttp

from fee_adapters.base import BaseFeeAdapter
from fee_adapters.exceptions import UpstreamError
from fee_adapters.models import BitcoinRecommendedFees, NetworkDescriptor, ProtocolFamily


logger = logging.getLogger(__name__)


REQUIRED_FIELDS = ("fastestFee", "halfHourFee", "hourFee")


class BitcoinFeeAdapter(BaseFeeAdapter):
    """Fetches the recommended sat/vB fee levels."""

    @property
    def family(self) -> ProtocolFamily:
        return ProtocolFamily.BITCOIN

    async def fetch_raw(
        self,
        network: NetworkDescriptor,
        url: str,
        session: aiohttp.ClientSession,
    ) -> BitcoinRecommendedFees:
        payload = await self._make_request(session, "GET", url)
        return parse_recommended_fees(payload, network.name)


def parse_recommended_fees(payload: Any, chain: str) -> BitcoinRecommendedFees:
    """Validate and extract the three fee levels."""
    if not isinstance(payload, dict):
        raise UpstreamError(
            f"Unexpected fee recommendation payload: {type(payload).__name__}",
            chain=chain,
        )

    missing = [name for name in REQUIRED_FIELDS if name not in payload]
    if missing:
        raise UpstreamError(
            f"Fee recommendation missing fields: {', '.join(missing)}",
            chain=chain,
            response_body=str(payload)[:500],
        )

    values = {}
    for name in REQUIRED_FIELDS:
        value = payload[name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise UpstreamError(
                f"Fee recommendation field {name} is not numeric: {value!r}",
                chain=chain,
            )
        if not math.isfinite(value) or value < 0:
            raise UpstreamError(
                f"Fee recommendation field {name} is out of range: {value!r}",
                chain=chain,
            )
        values[name] = value

    return BitcoinRecommendedFees(
        fastest_fee=values["fastestFee"],
        half_hour_fee=values["halfHourFee"],
        hour_fee=values["hourFee"],
    )
