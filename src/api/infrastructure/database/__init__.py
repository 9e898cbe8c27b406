"""Database infrastructure - shared engine and session primitives."""

from infrastructure.database.connection import Database
from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseNotInitializedError,
)

__all__ = [
    "Database",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseNotInitializedError",
]
