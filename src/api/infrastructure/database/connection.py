"""Process-wide database handle.

The handle owns the async engine and the session factory. It is created
once at startup, passed explicitly to every component that needs the
store, and closed on shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_engine
from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseNotInitializedError,
)
from infrastructure.database.metadata import load_all_models
from infrastructure.database.models import Base
from infrastructure.observability.probes import DatabaseProbe, DefaultDatabaseProbe

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings


class Database:
    """Owns the engine and session factory for the lifetime of the process.

    Sessions are created with ``expire_on_commit=False`` and never
    auto-commit; callers open transactions with ``async with session.begin()``.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        probe: DatabaseProbe | None = None,
    ) -> None:
        """Initialize the handle without connecting.

        Args:
            settings: Database connection settings
            probe: Optional observability probe
        """
        self._settings = settings
        self._probe = probe or DefaultDatabaseProbe()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def connect(self) -> None:
        """Create the engine and session factory.

        Raises:
            DatabaseConnectionError: If the engine cannot be created
        """
        if self._engine is not None:
            return

        try:
            self._engine = create_engine(self._settings)
        except (SQLAlchemyError, ImportError) as e:
            self._probe.engine_creation_failed(e)
            raise DatabaseConnectionError(f"Failed to create engine: {e}") from e

        self._session_factory = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )
        pool_size = getattr(self._engine.pool, "size", None)
        self._probe.engine_created(
            dialect=self._engine.dialect.name,
            pool_size=pool_size() if callable(pool_size) else None,
        )

    @property
    def engine(self) -> AsyncEngine:
        """Return the engine, failing if the handle is not connected."""
        if self._engine is None:
            raise DatabaseNotInitializedError("Database handle is not connected")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Return the session factory, failing if the handle is not connected."""
        if self._session_factory is None:
            raise DatabaseNotInitializedError("Database handle is not connected")
        return self._session_factory

    async def create_all(self) -> None:
        """Create every mapped table.

        Used for local SQLite runs and tests; deployed databases are
        managed by Alembic migrations.
        """
        load_all_models()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._probe.schema_created(len(Base.metadata.tables))

    async def dispose(self) -> None:
        """Close all pooled connections and forget the engine."""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self._probe.engine_disposed()
