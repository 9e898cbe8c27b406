"""Database-specific exceptions shared by all bounded contexts."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the engine cannot be created or reached."""

    pass


class DatabaseNotInitializedError(DatabaseError):
    """Raised when a session is requested before the handle is connected."""

    pass
