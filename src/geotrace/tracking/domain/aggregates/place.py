"""Place aggregate for the tracking context."""

from __future__ import annotations

from dataclasses import dataclass

from tracking.domain.value_objects import Circle, Polygon


@dataclass(frozen=True)
class Place:
    """A named geofence shared by a group.

    A place is described either by a circle or by a polygon. When both are
    present the circle takes priority; see ``normalize_place_geometry``.
    """

    id: str = ""
    group_id: str = ""
    display_name: str | None = None
    circle: Circle | None = None
    polygon: Polygon | None = None

    def __str__(self) -> str:
        """Return the display name, falling back to the place id."""
        return self.display_name or self.id
