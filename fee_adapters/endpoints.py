"""
Endpoint Resolution - Map a network descriptor to its upstream URL.

Credentials arrive as an explicit ProviderCredentials value built once at
startup. Nothing in here reads the environment.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from fee_adapters.exceptions import ConfigurationError, ResolutionError
from fee_adapters.models import EndpointRule, NetworkDescriptor


INFURA_URL_TEMPLATE = "https://{locator}.infura.io/v3/{api_key}"
ALCHEMY_URL_TEMPLATE = "https://{locator}.g.alchemy.com/v2/{api_key}"

# Rule -> environment variable holding its credential
CREDENTIAL_ENV_VARS = {
    EndpointRule.INFURA: "INFURA_API_KEY",
    EndpointRule.ALCHEMY: "ALCHEMY_API_KEY",
}


@dataclass(frozen=True)
class ProviderCredentials:
    """API keys for providers that need one."""
    infura_api_key: Optional[str] = None
    alchemy_api_key: Optional[str] = None

    def key_for(self, rule: EndpointRule) -> Optional[str]:
        if rule is EndpointRule.INFURA:
            return self.infura_api_key or None
        if rule is EndpointRule.ALCHEMY:
            return self.alchemy_api_key or None
        return None

    def __repr__(self) -> str:
        # Keys never reach logs
        return (
            f"ProviderCredentials(infura={'set' if self.infura_api_key else 'unset'}, "
            f"alchemy={'set' if self.alchemy_api_key else 'unset'})"
        )


def resolve_endpoint(
    network: NetworkDescriptor,
    credentials: ProviderCredentials,
) -> str:
    """
    Resolve the upstream URL for a network.

    Raises:
        ResolutionError: If no URL can be derived
    """
    rule = network.endpoint_rule

    if rule is EndpointRule.CUSTOM:
        if not network.locator:
            raise ResolutionError(
                "CUSTOM endpoint has an empty locator",
                chain=network.name,
                endpoint_rule=rule.value,
            )
        return network.locator

    if rule is EndpointRule.INFURA:
        template = INFURA_URL_TEMPLATE
    elif rule is EndpointRule.ALCHEMY:
        template = ALCHEMY_URL_TEMPLATE
    else:
        raise ResolutionError(
            f"Unknown endpoint rule: {rule!r}",
            chain=network.name,
        )

    api_key = credentials.key_for(rule)
    if not api_key:
        raise ResolutionError(
            f"{CREDENTIAL_ENV_VARS[rule]} required for {network.name}",
            chain=network.name,
            endpoint_rule=rule.value,
        )
    if not network.locator:
        raise ResolutionError(
            f"{rule.value} endpoint has an empty locator",
            chain=network.name,
            endpoint_rule=rule.value,
        )

    return template.format(locator=network.locator, api_key=api_key)


def validate_credentials(
    networks: Iterable[NetworkDescriptor],
    credentials: ProviderCredentials,
) -> None:
    """
    Check once, up front, that every credential the registry needs is set.

    Raises:
        ConfigurationError: Listing every missing credential
    """
    missing: dict[str, list[str]] = {}
    for network in networks:
        rule = network.endpoint_rule
        if rule not in CREDENTIAL_ENV_VARS:
            continue
        if not credentials.key_for(rule):
            missing.setdefault(CREDENTIAL_ENV_VARS[rule], []).append(network.name)

    if missing:
        details = "; ".join(
            f"{env_var} (needed by {', '.join(names)})"
            for env_var, names in sorted(missing.items())
        )
        raise ConfigurationError(
            f"Missing provider credentials: {details}",
            config_key=sorted(missing)[0],
            missing_keys=sorted(missing),
        )
