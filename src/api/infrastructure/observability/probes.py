"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class DatabaseProbe(Protocol):
    """Domain probe for database handle lifecycle.

    Captures engine creation and disposal without exposing logging
    implementation details to the database layer.
    """

    def engine_created(self, dialect: str, pool_size: int | None) -> None:
        """Record that the async engine was created."""
        ...

    def engine_creation_failed(self, error: Exception) -> None:
        """Record that the engine could not be created."""
        ...

    def schema_created(self, table_count: int) -> None:
        """Record that tables were created from ORM metadata."""
        ...

    def engine_disposed(self) -> None:
        """Record that the engine and its pool were closed."""
        ...


class DefaultDatabaseProbe:
    """Default implementation of DatabaseProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def engine_created(self, dialect: str, pool_size: int | None) -> None:
        """Record that the async engine was created."""
        self._logger.info(
            "database_engine_created",
            dialect=dialect,
            pool_size=pool_size,
        )

    def engine_creation_failed(self, error: Exception) -> None:
        """Record that the engine could not be created."""
        self._logger.error("database_engine_creation_failed", error=str(error))

    def schema_created(self, table_count: int) -> None:
        """Record that tables were created from ORM metadata."""
        self._logger.info("database_schema_created", table_count=table_count)

    def engine_disposed(self) -> None:
        """Record that the engine and its pool were closed."""
        self._logger.info("database_engine_disposed")
