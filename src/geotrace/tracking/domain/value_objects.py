"""Value objects for the tracking domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for secrets, geometry and free-form event payloads.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeAlias, Union

from shared_kernel.geo import Circle, Point, Polygon
from shared_kernel.security import hash_secret, verify_secret
from tracking.domain.exceptions import ValidationError

__all__ = [
    "Circle",
    "ExtraValue",
    "PasswordDigest",
    "Point",
    "Polygon",
    "validate_extra",
]

# A value in an event's extra bag: a scalar or a nested map of the same.
ExtraValue: TypeAlias = Union[str, int, float, bool, Mapping[str, "ExtraValue"]]


@dataclass(frozen=True)
class PasswordDigest:
    """A bcrypt hash of a user or device password.

    The digest is store-internal: it is never part of the repr and the
    repositories only return it from login lookups.
    """

    value: str

    def __repr__(self) -> str:
        """Return a representation that does not leak the hash."""
        return "PasswordDigest(<hidden>)"

    @classmethod
    def from_plaintext(cls, password: str) -> PasswordDigest:
        """Hash ``password`` into a new digest.

        Raises:
            ValidationError: If the password is too long to hash
            SecretHashingError: If hashing fails
        """
        try:
            return cls(value=hash_secret(password))
        except ValueError as e:
            raise ValidationError(str(e)) from e

    def verify(self, password: str) -> bool:
        """Return True if ``password`` is, with overwhelming probability, the original."""
        return verify_secret(password, self.value)


def validate_extra(extra: Mapping[str, object]) -> dict[str, ExtraValue]:
    """Check an extra-data bag and return a plain-dict copy of it.

    Keys must be strings; values must be strings, finite numbers, booleans or
    nested maps following the same rules.

    Raises:
        ValueError: If a key or value has an unsupported type
    """
    result: dict[str, ExtraValue] = {}
    for key, value in extra.items():
        if not isinstance(key, str):
            raise ValueError(f"extra keys must be strings, got {key!r}")
        result[key] = _validate_extra_value(key, value)
    return result


def _validate_extra_value(key: str, value: object) -> ExtraValue:
    if isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"extra value for {key!r} must be finite")
        return value
    if isinstance(value, Mapping):
        return validate_extra(value)
    raise ValueError(
        f"unsupported extra value for {key!r}: {type(value).__name__}"
    )
