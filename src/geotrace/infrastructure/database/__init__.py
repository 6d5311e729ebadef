"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
)
from infrastructure.database.store import Store

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
    "Store",
]
