"""User aggregate for the tracking context."""

from __future__ import annotations

from dataclasses import dataclass, field

from tracking.domain.value_objects import PasswordDigest


@dataclass(frozen=True)
class User:
    """A person who belongs to exactly one group at a time.

    The login is a global identifier, unique across every group, so an
    e-mail address is a natural choice. The group may change over the
    user's lifetime; the login may not.
    """

    login: str = ""
    group_id: str = ""
    display_name: str | None = None
    password: PasswordDigest | None = field(default=None, repr=False)

    def __str__(self) -> str:
        """Return the display name, falling back to the login."""
        return self.display_name or self.login
