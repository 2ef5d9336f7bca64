"""
Base Fee Adapter - Abstract interface for per-family fee fetchers.

All adapters MUST:
- Issue at most a bounded number of requests per fetch
- Bound every request with a timeout
- Raise UpstreamError for any transport or payload problem
- Keep no mutable state between calls (safe to run concurrently)
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import aiohttp

from fee_adapters.exceptions import UpstreamError
from fee_adapters.models import NetworkDescriptor, ProtocolFamily, RawFeeObservation


logger = logging.getLogger(__name__)


class BaseFeeAdapter(ABC):
    """
    Abstract base class for protocol-family fee adapters.

    Each adapter must:
    1. Declare its protocol family
    2. Implement fetch_raw() - request and parse one raw observation

    The HTTP session is owned by the caller (one per ingestion cycle). When
    no session is passed a short-lived one is opened for the call.
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    @property
    @abstractmethod
    def family(self) -> ProtocolFamily:
        """Protocol family served by this adapter."""
        pass

    @property
    def name(self) -> str:
        return self.family.value

    @property
    def timeout(self) -> float:
        return self._timeout

    @abstractmethod
    async def fetch_raw(
        self,
        network: NetworkDescriptor,
        url: str,
        session: aiohttp.ClientSession,
    ) -> RawFeeObservation:
        """
        Fetch and parse one raw fee observation.

        Raises:
            UpstreamError: On timeout, non-2xx status or malformed payload
        """
        pass

    async def fetch(
        self,
        network: NetworkDescriptor,
        url: str,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> RawFeeObservation:
        """
        Fetch a raw fee observation for a network (main entry point).

        Args:
            network: Network to query
            url: Resolved upstream URL
            session: Shared HTTP session for the current cycle

        Returns:
            Family-specific raw observation
        """
        start_time = time.monotonic()
        try:
            if session is None:
                async with self._create_session() as owned:
                    observation = await self.fetch_raw(network, url, owned)
            else:
                observation = await self.fetch_raw(network, url, session)
        except UpstreamError as e:
            if e.chain is None:
                e.chain = network.name
            raise
        except asyncio.TimeoutError as e:
            raise UpstreamError(
                f"Request timed out after {self._timeout}s",
                chain=network.name,
                original_error=e,
            ) from e

        latency_ms = (time.monotonic() - start_time) * 1000
        logger.debug(f"[{self.name}] {network.name} fetched in {latency_ms:.0f}ms")
        return observation

    # ─────────────────────────────────────────────────────────────
    # HTTP Helpers
    # ─────────────────────────────────────────────────────────────

    def _create_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self._timeout),
            headers=self._get_default_headers(),
        )

    def _get_default_headers(self) -> dict[str, str]:
        """Get default HTTP headers."""
        return {
            "Accept": "application/json",
            "User-Agent": "GasFeeIngestion/1.0",
        }

    async def _make_request(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        json_body: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request and decode the JSON body."""
        try:
            async with session.request(
                method,
                url,
                json=json_body,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as response:
                if response.status >= 300:
                    body = await response.text()
                    raise UpstreamError(
                        f"HTTP {response.status}",
                        status_code=response.status,
                        response_body=body[:500],
                        request_url=_redact(url),
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise UpstreamError(
                        "Response body is not valid JSON",
                        status_code=response.status,
                        request_url=_redact(url),
                        original_error=e,
                    ) from e

        except aiohttp.ClientError as e:
            raise UpstreamError(
                f"Connection error: {e}",
                request_url=_redact(url),
                original_error=e,
            ) from e

    async def _rpc_call(
        self,
        session: aiohttp.ClientSession,
        url: str,
        method: str,
        params: list[Any],
    ) -> Any:
        """Issue a JSON-RPC 2.0 call and return its `result` member."""
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }
        parsed = await self._make_request(session, "POST", url, json_body=payload)

        if not isinstance(parsed, dict):
            raise UpstreamError(
                f"{method}: unexpected response payload",
                request_url=_redact(url),
            )
        if parsed.get("error"):
            raise UpstreamError(
                f"{method}: RPC error: {parsed['error']}",
                request_url=_redact(url),
            )
        if "result" not in parsed:
            raise UpstreamError(
                f"{method}: RPC response missing result",
                request_url=_redact(url),
            )
        return parsed["result"]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(family={self.family.value}, timeout={self._timeout})>"


def _redact(url: str) -> str:
    """Drop the trailing path segment of keyed provider URLs."""
    if ".infura.io/v3/" in url or ".g.alchemy.com/v2/" in url:
        return url.rsplit("/", 1)[0] + "/***"
    return url
