"""Unit test fixtures with mocked dependencies."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from infrastructure.settings import StoreSettings
from tracking.infrastructure.tables import build_tables


@pytest.fixture
def mock_session():
    """Create mock async session returning an empty result."""
    session = AsyncMock()
    result = MagicMock()
    result.rowcount = 1
    result.mappings.return_value.one_or_none.return_value = None
    result.mappings.return_value.all.return_value = []
    result.scalars.return_value.all.return_value = []
    session.execute.return_value = result
    return session


@pytest.fixture
def mock_result(mock_session):
    """The result object every execute() call on the mock session returns."""
    return mock_session.execute.return_value


@pytest.fixture
def mock_store(mock_session):
    """Create a store whose lease() always hands out the mock session."""
    store = MagicMock()

    @asynccontextmanager
    async def lease():
        yield mock_session

    store.lease = lease
    return store


@pytest.fixture
def mock_probe():
    """Create a mock repository probe."""
    return MagicMock()


@pytest.fixture
def store_settings() -> StoreSettings:
    """Store settings with default collection names."""
    return StoreSettings()


@pytest.fixture
def tables(store_settings):
    """Tracking tables under the default collection names."""
    return build_tables(store_settings)


@pytest.fixture
def last_statement(mock_session):
    """Return a callable giving the statement of the latest execute() call."""

    def _last_statement():
        return mock_session.execute.call_args.args[0]

    return _last_statement


@pytest.fixture
def where_sql():
    """Return a callable rendering a statement's WHERE clause with literals inlined."""

    def _where_sql(stmt) -> str:
        return str(stmt.whereclause.compile(compile_kwargs={"literal_binds": True}))

    return _where_sql
