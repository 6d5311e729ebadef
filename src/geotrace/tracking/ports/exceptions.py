"""Errors raised by tracking repositories.

Every repository operation either succeeds or raises exactly one of these.
They should be caught and translated by whatever layer sits on top.
"""

from infrastructure.database.exceptions import DatabaseConnectionError
from shared_kernel.security import SecretHashingError
from tracking.domain.exceptions import MissingGeometryError, ValidationError

__all__ = [
    "DatabaseConnectionError",
    "DuplicateKeyError",
    "InvalidIdentifierError",
    "MissingGeometryError",
    "NotFoundError",
    "SecretHashingError",
    "ValidationError",
]


class NotFoundError(LookupError):
    """Raised when an entity does not exist in the caller's group.

    A record that exists in another group raises this same error, so that
    identifiers cannot be probed across tenants.
    """

    def __init__(self, collection: str, entity_id: str) -> None:
        super().__init__(f"{collection} record {entity_id!r} not found")
        self.collection = collection
        self.entity_id = entity_id


class DuplicateKeyError(Exception):
    """Raised when a create collides with an existing primary key.

    Primary keys are global: a login or device id taken in one group cannot
    be reused in another.
    """

    def __init__(self, collection: str, entity_ids: list[str]) -> None:
        super().__init__(f"{collection} record already exists: {', '.join(entity_ids)}")
        self.collection = collection
        self.entity_ids = entity_ids


class InvalidIdentifierError(ValidationError):
    """Raised when an identifier does not have the shape the store requires."""

    pass
