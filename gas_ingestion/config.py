"""
Gas Ingestion - Configuration.

Settings are read from the environment (a local .env file is loaded
first) exactly once, at startup, and passed down as plain values.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from fee_adapters.endpoints import ProviderCredentials
from fee_adapters.exceptions import ConfigurationError
from fee_adapters.models import NetworkDescriptor
from fee_adapters.networks import DEFAULT_NETWORKS


logger = logging.getLogger(__name__)


DEFAULT_POLL_INTERVAL_SECONDS = 60.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0


@dataclass
class IngestionConfig:
    """Configuration for the gas ingestion service."""

    database_url: str
    credentials: ProviderCredentials = field(default_factory=ProviderCredentials)

    # Cadence, measured from the end of one cycle to the start of the next
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS

    # Per upstream request
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    networks: tuple[NetworkDescriptor, ...] = DEFAULT_NETWORKS

    log_level: str = "INFO"
    log_format: str = "text"

    @property
    def network_timeout_seconds(self) -> float:
        """Hard wall-clock bound for one network's fetch + normalize."""
        return self.request_timeout_seconds + 2.0


def _read_float(
    env: Mapping[str, str],
    key: str,
    default: float,
    errors: list[str],
) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        errors.append(f"{key} must be a number, got {raw!r}")
        return default
    if value <= 0:
        errors.append(f"{key} must be positive, got {raw!r}")
        return default
    return value


def load_config(
    env: Optional[Mapping[str, str]] = None,
    load_env_file: bool = True,
) -> IngestionConfig:
    """
    Build the ingestion configuration from environment variables.

    Provider credentials are NOT checked here; which ones are required
    depends on the registered networks (see validate_credentials).

    Args:
        env: Mapping to read from (default: os.environ)
        load_env_file: Load a .env file into os.environ first

    Raises:
        ConfigurationError: If DATABASE_URL is missing or a numeric setting is invalid
    """
    if env is None:
        if load_env_file:
            load_dotenv()
        env = os.environ

    errors: list[str] = []

    database_url = env.get("DATABASE_URL", "").strip()
    if not database_url:
        errors.append("DATABASE_URL is required but not found in environment")

    poll_interval = _read_float(
        env, "GAS_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS, errors
    )
    request_timeout = _read_float(
        env, "GAS_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS, errors
    )

    log_format = env.get("LOG_FORMAT", "text").lower()
    if log_format not in ("text", "json"):
        errors.append(f"LOG_FORMAT must be 'text' or 'json', got {log_format!r}")

    if errors:
        logger.error("=" * 60)
        logger.error("INGESTION CONFIGURATION ERRORS")
        logger.error("=" * 60)
        for i, error in enumerate(errors, 1):
            logger.error(f"  {i}. {error}")
        raise ConfigurationError(
            f"Ingestion has {len(errors)} configuration error(s): {'; '.join(errors)}",
            config_key="DATABASE_URL" if not database_url else None,
        )

    return IngestionConfig(
        database_url=database_url,
        credentials=ProviderCredentials(
            infura_api_key=env.get("INFURA_API_KEY") or None,
            alchemy_api_key=env.get("ALCHEMY_API_KEY") or None,
        ),
        poll_interval_seconds=poll_interval,
        request_timeout_seconds=request_timeout,
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        log_format=log_format,
    )
