"""Store handle for the tracking database.

A Store owns the async engine (and therefore the connection pool) for one
logical database. Repositories hold a non-owning reference to it and borrow a
session for exactly one statement at a time through ``lease()``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import MetaData, text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_store_engine
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.observability.probes import DefaultStoreProbe, StoreProbe

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

# Failures that mean the store could not be talked to at all.
_UNREACHABLE = (OperationalError, InterfaceError, PoolTimeoutError, OSError)


class Store:
    """Handle on one logical database reachable through one engine.

    Use ``Store.open()`` to create a handle; it verifies reachability before
    returning. The creator must call ``close()`` (or use the handle as an
    async context manager) once every repository built on it is done.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        database: str,
        probe: StoreProbe | None = None,
        sessionmaker: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        """Initialize the store around an existing engine.

        Args:
            engine: Async engine connected to the logical database
            database: Logical database name
            probe: Optional observability probe
            sessionmaker: Optional session factory, built from the engine when omitted
        """
        self._engine: AsyncEngine | None = engine
        self._database = database
        self._probe = probe or DefaultStoreProbe()
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = (
            sessionmaker
            or async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
        )

    @classmethod
    async def open(
        cls,
        settings: DatabaseSettings,
        database: str | None = None,
        probe: StoreProbe | None = None,
    ) -> Store:
        """Open a store handle and check that the database answers.

        Args:
            settings: Database connection settings
            database: Logical database name, overriding ``settings.database``
            probe: Optional observability probe

        Returns:
            A ready-to-use Store

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        probe = probe or DefaultStoreProbe()
        name = database or settings.database
        engine = create_store_engine(settings, name)

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            probe.store_open_failed(host=settings.host, database=name, error=e)
            raise DatabaseConnectionError(
                f"Failed to connect to database {name!r}: {e}"
            ) from e

        probe.store_opened(host=settings.host, database=name)
        return cls(engine, name, probe=probe)

    @property
    def database(self) -> str:
        """Logical database name."""
        return self._database

    @property
    def closed(self) -> bool:
        """Whether close() has already released the engine."""
        return self._engine is None

    @asynccontextmanager
    async def lease(self) -> AsyncIterator[AsyncSession]:
        """Borrow a session inside a transaction for one logical operation.

        The transaction commits when the block exits normally and rolls back
        otherwise; the connection goes back to the pool on every path.

        Raises:
            DatabaseConnectionError: If the store is closed or unreachable
        """
        if self._sessionmaker is None:
            raise DatabaseConnectionError(f"Store for {self._database!r} is closed")

        self._probe.lease_acquired()
        try:
            async with self._sessionmaker() as session:
                async with session.begin():
                    yield session
        except _UNREACHABLE as e:
            self._probe.lease_failed(e)
            raise DatabaseConnectionError(f"Store unreachable: {e}") from e
        finally:
            self._probe.lease_released()

    async def create_schema(self, metadata: MetaData) -> None:
        """Create any missing tables described by ``metadata``.

        Intended for bootstrapping development and test databases.
        """
        if self._engine is None:
            raise DatabaseConnectionError(f"Store for {self._database!r} is closed")
        async with self._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def close(self) -> None:
        """Release the engine and all pooled connections.

        Safe to call more than once.
        """
        if self._engine is None:
            return

        engine = self._engine
        self._engine = None
        self._sessionmaker = None
        await engine.dispose()
        self._probe.store_closed(self._database)

    async def __aenter__(self) -> Store:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
