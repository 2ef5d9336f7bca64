"""
Application Entry Point Tests.
"""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

import app
from fee_adapters import (
    EndpointRule,
    NetworkDescriptor,
    NormalizedReading,
    ProtocolFamily,
    ProviderCredentials,
)
from gas_ingestion.config import IngestionConfig
from gas_ingestion.types import CycleResult, NetworkFailure


ETHEREUM = NetworkDescriptor(1, "Ethereum", ProtocolFamily.EVM, EndpointRule.INFURA, "mainnet", "ETH")


@pytest.fixture
def clean_env(monkeypatch):
    for key in (
        "DATABASE_URL",
        "INFURA_API_KEY",
        "ALCHEMY_API_KEY",
        "GAS_POLL_INTERVAL_SECONDS",
        "GAS_REQUEST_TIMEOUT_SECONDS",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(key, raising=False)
    with patch("gas_ingestion.config.load_dotenv"):
        yield monkeypatch


class TestArguments:

    def test_defaults(self):
        args = app.create_parser().parse_args([])

        assert not args.single_cycle
        assert not args.init_db
        assert args.tick_interval is None
        assert app.validate_args(args) == []

    def test_invalid_tick_interval(self):
        args = app.create_parser().parse_args(["--tick-interval", "0"])

        assert app.validate_args(args) == ["--tick-interval must be positive"]

    def test_overrides_applied(self):
        args = app.create_parser().parse_args(
            ["--tick-interval", "15", "--log-level", "DEBUG", "--log-format", "json"]
        )

        config = app.apply_overrides(IngestionConfig(database_url="sqlite://"), args)

        assert config.poll_interval_seconds == 15.0
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"


class TestStartupExitCodes:

    def test_missing_database_url_exits_2(self, clean_env):
        assert app.main(["--single-cycle"]) == app.EXIT_CONFIG_ERROR

    def test_missing_provider_key_exits_2(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite://")
        clean_env.setenv("INFURA_API_KEY", "infura-key")

        with patch("gas_ingestion.ingestion_service.FeeCollectionOrchestrator") as orchestrator_cls:
            exit_code = app.main(["--single-cycle"])

        assert exit_code == app.EXIT_CONFIG_ERROR
        orchestrator_cls.return_value.run_cycle.assert_not_called()

    def test_init_db(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite://")

        assert app.main(["--init-db"]) == app.EXIT_OK

    @pytest.mark.asyncio
    async def test_duplicate_chain_id_exits_2(self):
        config = IngestionConfig(
            database_url="sqlite://",
            credentials=ProviderCredentials(infura_api_key="infura-key"),
            networks=(ETHEREUM, ETHEREUM),
        )
        args = app.create_parser().parse_args(["--single-cycle"])

        with patch("gas_ingestion.ingestion_service.FeeCollectionOrchestrator") as orchestrator_cls:
            exit_code = await app.run_application(config, args)

        assert exit_code == app.EXIT_CONFIG_ERROR
        orchestrator_cls.assert_not_called()


# ============================================================
# CYCLE SUMMARY TESTS
# ============================================================

class TestCycleSummary:
    """--single-cycle prints the finished cycle as JSON."""

    def test_summary_lists_readings_and_failures(self):
        observed_at = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
        result = CycleResult(
            cycle_id="abc123def456",
            observed_at=observed_at,
            readings=[NormalizedReading(1, observed_at, 0.8, 1.0, 1.2)],
            failures=[NetworkFailure(0, "Bitcoin", "UpstreamError", "HTTP 503")],
            stored=1,
            completed_at=observed_at,
            duration_seconds=0.25,
        )

        summary = json.loads(app.format_cycle_summary(result))

        assert summary["cycle_id"] == "abc123def456"
        assert summary["observed_at"] == "2025-01-01T12:00:00+00:00"
        assert summary["stored"] == 1
        assert summary["readings"] == [{
            "chain_id": 1,
            "observed_at": "2025-01-01T12:00:00+00:00",
            "fee_slow": 0.8,
            "fee_average": 1.0,
            "fee_fast": 1.2,
        }]
        assert summary["failures"] == [{
            "chain_id": 0,
            "network_name": "Bitcoin",
            "error_type": "UpstreamError",
            "message": "HTTP 503",
        }]

    def test_unfinished_cycle_has_null_completion(self):
        result = CycleResult(cycle_id="abc", observed_at=datetime(2025, 1, 1, tzinfo=timezone.utc))

        summary = json.loads(app.format_cycle_summary(result))

        assert summary["completed_at"] is None
        assert summary["readings"] == []
