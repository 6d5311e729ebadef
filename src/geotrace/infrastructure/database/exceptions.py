"""Database-specific exceptions shared by every store consumer."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the store cannot be reached.

    Failed store calls are surfaced immediately; nothing at this layer
    retries them.
    """

    pass
