"""Device aggregate for the tracking context."""

from __future__ import annotations

from dataclasses import dataclass, field

from tracking.domain.value_objects import PasswordDigest


@dataclass(frozen=True)
class Device:
    """A tracker reporting events for the group it is currently bound to.

    Moving a device to another group stops the old group from seeing any
    event recorded after the move. The device type is an opaque tag the
    service uses to tell supported features and data formats apart.
    """

    id: str = ""
    group_id: str = ""
    display_name: str | None = None
    device_type: str | None = None
    password: PasswordDigest | None = field(default=None, repr=False)

    def __str__(self) -> str:
        """Return the display name, falling back to the device id."""
        return self.display_name or self.id
