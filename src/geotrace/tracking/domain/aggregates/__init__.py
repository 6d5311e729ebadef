"""Aggregates for the tracking context."""

from tracking.domain.aggregates.device import Device
from tracking.domain.aggregates.event import Event
from tracking.domain.aggregates.place import Place
from tracking.domain.aggregates.user import User

__all__ = [
    "Device",
    "Event",
    "Place",
    "User",
]
