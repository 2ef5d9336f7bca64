"""
Fee Adapter Registry - Closed dispatch from protocol family to adapter.

Every ProtocolFamily must have exactly one adapter. A registry missing a
family is rejected when built, not when a cycle hits that family.
"""

import logging
from typing import Iterable, Optional

from fee_adapters.base import BaseFeeAdapter
from fee_adapters.models import ProtocolFamily
from fee_adapters.providers import BitcoinFeeAdapter, EvmFeeAdapter, SolanaFeeAdapter


logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Maps each protocol family to its adapter.

    Usage:
        registry = AdapterRegistry.default(timeout=10.0)
        adapter = registry.get_adapter(ProtocolFamily.EVM)
    """

    def __init__(self, adapters: Iterable[BaseFeeAdapter]) -> None:
        self._adapters: dict[ProtocolFamily, BaseFeeAdapter] = {}
        for adapter in adapters:
            if adapter.family in self._adapters:
                logger.warning(f"Adapter for '{adapter.family.value}' already registered, replacing")
            self._adapters[adapter.family] = adapter

        missing = [family.value for family in ProtocolFamily if family not in self._adapters]
        if missing:
            raise ValueError(f"No adapter registered for families: {', '.join(missing)}")

    @classmethod
    def default(cls, timeout: Optional[float] = None) -> "AdapterRegistry":
        """Registry with the built-in EVM, Solana and Bitcoin adapters."""
        timeout = timeout if timeout is not None else BaseFeeAdapter.DEFAULT_TIMEOUT
        return cls([
            EvmFeeAdapter(timeout=timeout),
            SolanaFeeAdapter(timeout=timeout),
            BitcoinFeeAdapter(timeout=timeout),
        ])

    def get_adapter(self, family: ProtocolFamily) -> BaseFeeAdapter:
        """Get the adapter for a family."""
        return self._adapters[family]

    def list_families(self) -> list[ProtocolFamily]:
        return list(self._adapters)

    @property
    def max_timeout(self) -> float:
        """Largest request timeout among adapters."""
        return max(adapter.timeout for adapter in self._adapters.values())

    def __repr__(self) -> str:
        return f"<AdapterRegistry(families={[f.value for f in self._adapters]})>"
