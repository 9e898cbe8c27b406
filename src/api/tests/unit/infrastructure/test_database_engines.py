"""Unit tests for database engine creation."""

from unittest.mock import patch

import pytest
from pydantic import SecretStr

from infrastructure.database.connection import Database
from infrastructure.database.engines import (
    SQLITE_BUSY_TIMEOUT,
    build_async_url,
    create_engine,
)
from infrastructure.database.exceptions import DatabaseNotInitializedError
from infrastructure.settings import DatabaseSettings


class TestBuildAsyncUrl:
    """Tests for build_async_url()."""

    def test_builds_asyncpg_url(self):
        settings = DatabaseSettings(
            host="db",
            port=5433,
            database="orders",
            username="shop",
            password=SecretStr("pw"),
        )

        assert build_async_url(settings) == "postgresql+asyncpg://shop:pw@db:5433/orders"

    def test_percent_encodes_credentials(self):
        """Special characters in the password must not break the URL."""
        settings = DatabaseSettings(username="shop", password=SecretStr("p@ss:w/rd"))

        url = build_async_url(settings)

        assert "p%40ss%3Aw%2Frd" in url

    def test_explicit_url_wins(self):
        settings = DatabaseSettings(url="sqlite+aiosqlite:///./test.db")
        assert build_async_url(settings) == "sqlite+aiosqlite:///./test.db"


class TestCreateEngine:
    """Tests for create_engine()."""

    def test_sqlite_gets_busy_timeout_and_no_pool_sizing(self):
        settings = DatabaseSettings(url="sqlite+aiosqlite:///./test.db")

        with patch("infrastructure.database.engines.create_async_engine") as factory:
            create_engine(settings)

        kwargs = factory.call_args.kwargs
        assert kwargs["connect_args"] == {"timeout": SQLITE_BUSY_TIMEOUT}
        assert "pool_size" not in kwargs

    def test_postgres_uses_strict_pool(self):
        settings = DatabaseSettings(pool_size=7)

        with patch("infrastructure.database.engines.create_async_engine") as factory:
            create_engine(settings)

        kwargs = factory.call_args.kwargs
        assert kwargs["pool_size"] == 7
        assert kwargs["max_overflow"] == 0
        assert kwargs["pool_pre_ping"] is True


class TestDatabaseHandle:
    """Tests for the Database handle before connecting."""

    def test_session_factory_requires_connect(self):
        database = Database(DatabaseSettings(url="sqlite+aiosqlite:///./test.db"))

        with pytest.raises(DatabaseNotInitializedError):
            database.session_factory

    @pytest.mark.asyncio
    async def test_dispose_without_connect_is_noop(self):
        database = Database(DatabaseSettings(url="sqlite+aiosqlite:///./test.db"))
        await database.dispose()
