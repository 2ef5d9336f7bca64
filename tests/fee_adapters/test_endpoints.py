"""
Endpoint Resolution and Network Registry Tests.
"""

import pytest

from fee_adapters import (
    ConfigurationError,
    DEFAULT_NETWORKS,
    EndpointRule,
    NetworkDescriptor,
    NetworkRegistry,
    ProtocolFamily,
    ProviderCredentials,
    ResolutionError,
    get_default_registry,
    resolve_endpoint,
    validate_credentials,
)
from fee_adapters.networks import MEMPOOL_RECOMMENDED_FEES_URL


CREDENTIALS = ProviderCredentials(infura_api_key="infura-key", alchemy_api_key="alchemy-key")


def network(chain_id=1, rule=EndpointRule.INFURA, locator="mainnet", family=ProtocolFamily.EVM):
    return NetworkDescriptor(chain_id, f"net-{chain_id}", family, rule, locator, "TKN")


# ============================================================
# ENDPOINT RESOLUTION TESTS
# ============================================================

class TestResolveEndpoint:
    """Tests for resolve_endpoint."""

    def test_infura(self):
        assert resolve_endpoint(network(), CREDENTIALS) == "https://mainnet.infura.io/v3/infura-key"

    def test_alchemy(self):
        solana = network(101, EndpointRule.ALCHEMY, "solana-mainnet", ProtocolFamily.SOLANA)

        assert (
            resolve_endpoint(solana, CREDENTIALS)
            == "https://solana-mainnet.g.alchemy.com/v2/alchemy-key"
        )

    def test_custom_returns_locator_without_credentials(self):
        bitcoin = network(0, EndpointRule.CUSTOM, MEMPOOL_RECOMMENDED_FEES_URL, ProtocolFamily.BITCOIN)

        assert resolve_endpoint(bitcoin, ProviderCredentials()) == MEMPOOL_RECOMMENDED_FEES_URL

    def test_missing_key_raises(self):
        with pytest.raises(ResolutionError, match="INFURA_API_KEY") as exc_info:
            resolve_endpoint(network(), ProviderCredentials(alchemy_api_key="alchemy-key"))

        assert exc_info.value.endpoint_rule == "infura"
        assert exc_info.value.chain == "net-1"

    def test_empty_key_treated_as_missing(self):
        with pytest.raises(ResolutionError):
            resolve_endpoint(network(), ProviderCredentials(infura_api_key=""))

    def test_empty_custom_locator_raises(self):
        with pytest.raises(ResolutionError, match="empty locator"):
            resolve_endpoint(network(0, EndpointRule.CUSTOM, ""), CREDENTIALS)

    def test_credentials_repr_hides_keys(self):
        assert "infura-key" not in repr(CREDENTIALS)
        assert "infura=set" in repr(CREDENTIALS)


class TestValidateCredentials:
    """Startup credential check."""

    def test_all_present(self):
        validate_credentials(DEFAULT_NETWORKS, CREDENTIALS)

    def test_reports_every_missing_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_credentials(DEFAULT_NETWORKS, ProviderCredentials())

        error = exc_info.value
        assert error.missing_keys == ["ALCHEMY_API_KEY", "INFURA_API_KEY"]
        assert "Ethereum" in error.message
        assert "Solana" in error.message

    def test_custom_only_needs_nothing(self):
        bitcoin = network(0, EndpointRule.CUSTOM, MEMPOOL_RECOMMENDED_FEES_URL, ProtocolFamily.BITCOIN)

        validate_credentials([bitcoin], ProviderCredentials())


# ============================================================
# NETWORK REGISTRY TESTS
# ============================================================

class TestNetworkRegistry:
    """Tests for NetworkRegistry."""

    def test_default_networks(self):
        registry = get_default_registry()

        assert len(registry) == 8
        assert [n.chain_id for n in registry] == [1, 56, 137, 42161, 10, 43114, 101, 0]
        by_chain = {n.chain_id: n for n in registry}
        assert by_chain[0].endpoint_rule is EndpointRule.CUSTOM
        assert by_chain[0].locator == MEMPOOL_RECOMMENDED_FEES_URL
        assert by_chain[101].family is ProtocolFamily.SOLANA
        assert by_chain[101].endpoint_rule is EndpointRule.ALCHEMY

    def test_duplicate_chain_id_rejected(self):
        registry = NetworkRegistry([network(1)])

        with pytest.raises(ConfigurationError, match="Duplicate chain_id 1") as exc_info:
            registry.register(network(1, locator="other"))

        assert exc_info.value.config_key == "networks"
        assert len(registry) == 1
