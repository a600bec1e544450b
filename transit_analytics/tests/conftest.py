"""Shared fixtures: a throwaway SQLite store, the service stack and an HTTP client."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from transit_analytics.config import Settings
from transit_analytics.database import create_engine, drop_db, init_db
from transit_analytics.main import create_app
from transit_analytics.repositories.base import IncidentRepository
from transit_analytics.repositories.sql import SqlIncidentRepository
from transit_analytics.services.transit_service import TransitService


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'transit-test.db'}",
        request_timeout_seconds=5.0,
        log_format="text",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def engine(settings):
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await drop_db(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def repository(engine) -> SqlIncidentRepository:
    return SqlIncidentRepository(engine)


@pytest.fixture
def mock_repository() -> AsyncMock:
    return AsyncMock(spec=IncidentRepository)


@pytest_asyncio.fixture
async def service(repository, settings) -> TransitService:
    return TransitService(repository, settings)


@pytest_asyncio.fixture
async def client(settings, service):
    """HTTP client against the app, wired to the temporary store."""
    app = create_app(settings)
    app.state.service = service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
