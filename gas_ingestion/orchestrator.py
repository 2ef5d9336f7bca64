"""
Gas Ingestion - Fee Collection Orchestrator.

============================================================
RESPONSIBILITY
============================================================
Runs one collection cycle across every registered network.

- One task per network, all started together, joined together
- Each task returns either a reading or a NetworkFailure
- No error from one network reaches its siblings or the cycle
- Every task is bounded by a hard wall-clock timeout

============================================================
"""

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Callable, Optional, Union
from uuid import uuid4

import aiohttp

from fee_adapters.endpoints import ProviderCredentials, resolve_endpoint
from fee_adapters.exceptions import GasIngestionError, NormalizationError
from fee_adapters.models import NetworkDescriptor, NormalizedReading
from fee_adapters.networks import NetworkRegistry
from fee_adapters.normalizer import normalize
from fee_adapters.registry import AdapterRegistry

from gas_ingestion.types import CycleResult, NetworkFailure


logger = logging.getLogger(__name__)


NetworkOutcome = Union[NormalizedReading, NetworkFailure]


class FeeCollectionOrchestrator:
    """
    Fans one cycle out over all networks and folds the outcomes.

    Usage:
        orchestrator = FeeCollectionOrchestrator(networks, adapters, credentials)
        result = await orchestrator.run_cycle()
        result.readings   # successful networks
        result.failures   # excluded networks
    """

    def __init__(
        self,
        networks: NetworkRegistry,
        adapters: AdapterRegistry,
        credentials: ProviderCredentials,
        network_timeout_seconds: Optional[float] = None,
        http_session_factory: Optional[Callable[[], aiohttp.ClientSession]] = None,
    ) -> None:
        self._networks = networks
        self._adapters = adapters
        self._credentials = credentials
        self._network_timeout = (
            network_timeout_seconds
            if network_timeout_seconds is not None
            else adapters.max_timeout + 2.0
        )
        self._http_session_factory = http_session_factory or self._default_http_session

    @staticmethod
    def _default_http_session() -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            headers={"Accept": "application/json", "User-Agent": "GasFeeIngestion/1.0"},
        )

    async def run_cycle(self, observed_at: Optional[datetime] = None) -> CycleResult:
        """
        Collect one normalized reading per network.

        Args:
            observed_at: Cycle timestamp shared by every reading (default: now, UTC)

        Returns:
            CycleResult with readings and failures; never raises for a
            network-level problem
        """
        result = CycleResult(
            cycle_id=uuid4().hex[:12],
            observed_at=observed_at or datetime.now(timezone.utc),
        )
        networks = self._networks.list_networks()

        logger.info(
            f"Collecting gas prices for {len(networks)} networks "
            f"(cycle={result.cycle_id}, observed_at={result.observed_at.isoformat()})"
        )

        if networks:
            async with self._http_session_factory() as session:
                outcomes = await asyncio.gather(*(
                    self._collect_network(network, result.observed_at, session)
                    for network in networks
                ))
        else:
            outcomes = []

        for outcome in outcomes:
            if isinstance(outcome, NormalizedReading):
                result.readings.append(outcome)
            else:
                result.failures.append(outcome)

        logger.info(
            f"Cycle {result.cycle_id}: {len(result.readings)}/{len(networks)} networks succeeded"
        )
        return result

    async def _collect_network(
        self,
        network: NetworkDescriptor,
        observed_at: datetime,
        session: aiohttp.ClientSession,
    ) -> NetworkOutcome:
        """Resolve, fetch and normalize one network. Never raises."""
        try:
            return await asyncio.wait_for(
                self._fetch_and_normalize(network, observed_at, session),
                timeout=self._network_timeout,
            )
        except asyncio.TimeoutError:
            return self._failure(
                network,
                "TimeoutError",
                f"No result within {self._network_timeout:.1f}s",
            )
        except GasIngestionError as e:
            logger.debug(f"[{network.name}] Error detail: {e.to_dict()}")
            return self._failure(network, e.__class__.__name__, e.message)
        except Exception as e:
            logger.exception(f"[{network.name}] Unexpected error while collecting")
            return self._failure(network, e.__class__.__name__, str(e))

    async def _fetch_and_normalize(
        self,
        network: NetworkDescriptor,
        observed_at: datetime,
        session: aiohttp.ClientSession,
    ) -> NormalizedReading:
        url = resolve_endpoint(network, self._credentials)
        adapter = self._adapters.get_adapter(network.family)
        raw = await adapter.fetch(network, url, session)
        reading = normalize(raw, network.chain_id, observed_at)

        tiers = (reading.fee_slow, reading.fee_average, reading.fee_fast)
        if not all(math.isfinite(tier) for tier in tiers):
            raise NormalizationError(
                f"Non-finite fee tiers: {tiers}",
                chain=network.name,
                raw_data=raw,
            )

        if not reading.is_ordered:
            logger.warning(
                f"[{network.name}] Fee tiers out of order: "
                f"slow={reading.fee_slow} average={reading.fee_average} fast={reading.fee_fast}"
            )
        logger.debug(
            f"[{network.name}] slow={reading.fee_slow:.4f} "
            f"average={reading.fee_average:.4f} fast={reading.fee_fast:.4f}"
        )
        return reading

    @staticmethod
    def _failure(network: NetworkDescriptor, error_type: str, message: str) -> NetworkFailure:
        logger.warning(f"Failed to fetch data for {network.name}: {error_type}: {message}")
        return NetworkFailure(
            chain_id=network.chain_id,
            network_name=network.name,
            error_type=error_type,
            message=message,
        )
