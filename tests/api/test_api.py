"""
Gas Price API Tests.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from database import (
    PersistenceError,
    create_database_engine,
    get_session_factory,
    initialize_database,
    upsert_readings,
)
from fee_adapters.exceptions import ConfigurationError
from fee_adapters.models import NormalizedReading


T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def session_factory():
    engine = create_database_engine("sqlite://")
    initialize_database(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    return TestClient(create_app(session_factory=session_factory))


class TestGasNowEndpoint:
    """Tests for GET /api/gas/now."""

    def test_latest_per_chain(self, client, session_factory):
        upsert_readings(session_factory, [
            NormalizedReading(1, T0, 0.8, 1.0, 1.2),
            NormalizedReading(0, T0, 1.0, 1.5, 2.0),
        ])
        upsert_readings(session_factory, [
            NormalizedReading(1, T0 + timedelta(minutes=1), 1.6, 2.0, 2.4),
        ])

        response = client.get("/api/gas/now")

        assert response.status_code == 200
        data = response.json()
        assert [row["chain_id"] for row in data] == [0, 1]
        ethereum = data[1]
        assert ethereum["price_slow"] == pytest.approx(1.6)
        assert ethereum["price_average"] == pytest.approx(2.0)
        assert ethereum["price_fast"] == pytest.approx(2.4)
        assert ethereum["timestamp"].startswith("2025-01-01T12:01:00")

    def test_empty_store(self, client):
        response = client.get("/api/gas/now")

        assert response.status_code == 200
        assert response.json() == []

    def test_store_failure_is_500(self, client):
        with patch("api.app.fetch_latest_readings", side_effect=PersistenceError("down")):
            response = client.get("/api/gas/now")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch gas prices"}

    def test_no_session_factory_is_500(self):
        # Lifespan not entered, nothing built
        app = create_app()

        response = TestClient(app).get("/api/gas/now")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch gas prices"}


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "Gas Price API"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["uptime_seconds"] >= 0


# ============================================================
# STARTUP TESTS
# ============================================================

def initialized_engine(database_url):
    engine = create_database_engine(database_url)
    initialize_database(engine)
    return engine


class TestLifespan:
    """The engine is built once at startup, before any request."""

    def test_engine_built_once_at_startup(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        app = create_app()

        with patch("api.app.load_dotenv"), patch(
            "api.app.create_database_engine", side_effect=initialized_engine
        ) as engine_factory:
            with TestClient(app) as client:
                assert engine_factory.call_count == 1
                assert app.state.session_factory is not None

                responses = [client.get("/api/gas/now") for _ in range(3)]

            assert engine_factory.call_count == 1

        assert [r.status_code for r in responses] == [200, 200, 200]
        assert all(r.json() == [] for r in responses)
        # Disposed on shutdown
        assert app.state.session_factory is None

    def test_missing_database_url_fails_startup(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with patch("api.app.load_dotenv"):
            with pytest.raises(ConfigurationError, match="DATABASE_URL") as exc_info:
                with TestClient(create_app()):
                    pass

        assert exc_info.value.missing_keys == ["DATABASE_URL"]

    def test_injected_factory_kept(self, session_factory):
        app = create_app(session_factory=session_factory)

        with patch("api.app.create_database_engine") as engine_factory:
            with TestClient(app) as client:
                response = client.get("/api/gas/now")

        engine_factory.assert_not_called()
        assert response.status_code == 200
        assert app.state.session_factory is session_factory
