"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance.
Tests are skipped when the database cannot be reached.
"""

from collections.abc import AsyncGenerator
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import delete

from infrastructure.database import DatabaseConnectionError, Store
from infrastructure.settings import DatabaseSettings, StoreSettings
from tracking.dependencies import TrackingRepositories, create_repositories


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        GEOTRACE_DB_HOST, GEOTRACE_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("GEOTRACE_DB_HOST", "localhost"),
        port=int(os.getenv("GEOTRACE_DB_PORT", "5432")),
        database=os.getenv("GEOTRACE_DB_DATABASE", "geotrace"),
        username=os.getenv("GEOTRACE_DB_USERNAME", "geotrace"),
        password=SecretStr(os.getenv("GEOTRACE_DB_PASSWORD", "geotrace_dev_password")),
    )


@pytest.fixture(scope="session")
def integration_store_settings() -> StoreSettings:
    """Separate table names so tests never touch real collections."""
    return StoreSettings(
        users_collection="it_users",
        devices_collection="it_devices",
        events_collection="it_events",
        places_collection="it_places",
    )


@pytest_asyncio.fixture
async def store(integration_db_settings) -> AsyncGenerator[Store, None]:
    """Provide an open store, closed after the test."""
    try:
        opened = await Store.open(integration_db_settings)
    except DatabaseConnectionError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    async with opened:
        yield opened


@pytest_asyncio.fixture
async def repositories(
    store, integration_store_settings
) -> AsyncGenerator[TrackingRepositories, None]:
    """Provide repositories over empty tracking tables."""
    repos = create_repositories(store, integration_store_settings)
    await store.create_schema(repos.tables.metadata)

    async def clean():
        async with store.lease() as session:
            for table in reversed(repos.tables.metadata.sorted_tables):
                await session.execute(delete(table))

    await clean()
    yield repos
    await clean()
