"""Event aggregate for the tracking context."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from tracking.domain.exceptions import ValidationError
from tracking.domain.value_objects import ExtraValue, Point, validate_extra

MAX_POWER_LEVEL = 255


@dataclass(frozen=True)
class Event:
    """Something that happened to a device at a given time and place.

    The event keeps its own copy of the group id, taken from the caller's
    scope when the event is created and never recomputed afterwards. If the
    device later moves to another group, its old events stay with the old
    group and do not become visible to the new one.

    Attributes:
        id: ULID assigned by the store when left empty
        device_id: Device that reported the event
        group_id: Group the device belonged to when the event was created
        timestamp: When it happened; the current server time when omitted
        event_type: Free-form kind, e.g. Arrive, Leave, Travel, Check-in, Happen
        location: Where it happened
        accuracy: Radius of uncertainty of the location, in meters
        power_level: Battery reading of the device at that moment
        emoji: A single glyph annotating the event
        comment: Free text
        extra: Named sensor readings and other payload
    """

    id: str = ""
    device_id: str = ""
    group_id: str = ""
    timestamp: datetime | None = None
    event_type: str | None = None
    location: Point | None = None
    accuracy: float | None = None
    power_level: int | None = None
    emoji: str | None = None
    comment: str | None = None
    extra: dict[str, ExtraValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.accuracy is not None and self.accuracy < 0:
            raise ValidationError(f"accuracy must not be negative: {self.accuracy}")
        if self.power_level is not None and not (
            0 <= self.power_level <= MAX_POWER_LEVEL
        ):
            raise ValidationError(
                f"power_level must be within 0..{MAX_POWER_LEVEL}: {self.power_level}"
            )
        if self.emoji is not None and len(self.emoji) != 1:
            raise ValidationError(f"emoji must be a single character: {self.emoji!r}")
        if self.timestamp is not None:
            object.__setattr__(self, "timestamp", _as_utc(self.timestamp))
        try:
            object.__setattr__(self, "extra", validate_extra(self.extra))
        except ValueError as e:
            raise ValidationError(str(e)) from e

    def stamped(self, now: datetime | None = None, **changes: Any) -> Event:
        """Return a copy with the timestamp defaulted and ``changes`` applied."""
        timestamp = self.timestamp or now or datetime.now(UTC)
        return replace(self, timestamp=timestamp, **changes)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC already.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
