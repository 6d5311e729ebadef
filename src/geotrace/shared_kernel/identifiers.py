"""Identifier generation shared across the tracking context.

Identifiers are ULIDs: 26 character Crockford base32 strings that sort by
creation time, which keeps event ids roughly monotonic.
"""

from __future__ import annotations

from ulid import ULID


def new_id() -> str:
    """Generate a new globally unique identifier."""
    return str(ULID())


def is_valid_id(value: str) -> bool:
    """Return True if ``value`` is a well-formed ULID string."""
    try:
        ULID.from_str(value)
    except ValueError:
        return False
    return True
