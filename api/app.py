"""
Gas Price API.

============================================================
RESPONSIBILITY
============================================================
Serves the most recent stored reading for every network.

- GET /api/gas/now: latest row per chain id
- GET /health: liveness
============================================================
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from database.engine import PersistenceError, create_database_engine, get_session_factory
from database.repository import fetch_latest_readings
from fee_adapters.exceptions import ConfigurationError

from api.schemas import GasPriceResponse, HealthResponse


logger = logging.getLogger(__name__)


def _resolve_session_factory(request: Request) -> sessionmaker:
    """Session factory built at startup."""
    factory = request.app.state.session_factory
    if factory is None:
        logger.error("API started without a session factory")
        raise HTTPException(status_code=500, detail="Failed to fetch gas prices")
    return factory


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the engine once from DATABASE_URL unless a factory was injected."""
    engine = None
    if app.state.session_factory is None:
        load_dotenv()
        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            logger.error("DATABASE_URL is required but not found in environment")
            raise ConfigurationError(
                "DATABASE_URL is required but not found in environment",
                config_key="DATABASE_URL",
                missing_keys=["DATABASE_URL"],
            )
        engine = create_database_engine(database_url)
        app.state.session_factory = get_session_factory(engine)
        logger.info("Database engine created")

    try:
        yield
    finally:
        if engine is not None:
            engine.dispose()
            app.state.session_factory = None


def create_app(session_factory: Optional[sessionmaker] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        session_factory: Database session factory (default: built once at
            startup from DATABASE_URL)
    """
    app = FastAPI(
        title="Gas Price API",
        description="Latest normalized gas fees for every tracked network",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=_lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.session_factory = session_factory
    app.state.started_at = datetime.now(timezone.utc)

    # ============================================================
    # API Endpoints
    # ============================================================

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {
            "service": "Gas Price API",
            "version": "1.0.0",
            "docs": "/docs",
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        now = datetime.now(timezone.utc)
        return HealthResponse(
            status="healthy",
            timestamp=now.isoformat(),
            uptime_seconds=(now - app.state.started_at).total_seconds(),
        )

    @app.get("/api/gas/now", response_model=List[GasPriceResponse], tags=["Gas"])
    def get_current_gas_prices(
        factory: sessionmaker = Depends(_resolve_session_factory),
    ):
        """Latest gas price for every network in the store."""
        try:
            rows = fetch_latest_readings(factory)
        except PersistenceError as e:
            logger.error(f"Error fetching gas prices: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch gas prices")
        return [GasPriceResponse.model_validate(row) for row in rows]

    return app


app = create_app()
