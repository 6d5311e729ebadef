"""Infrastructure layer for the tracking context.

Repositories here implement the ports in ``tracking.ports.repositories`` on
top of a ``Store`` handle and the tables from ``build_tables``.
"""

from tracking.infrastructure.device_repository import DeviceRepository
from tracking.infrastructure.event_repository import EventRepository
from tracking.infrastructure.place_repository import PlaceRepository
from tracking.infrastructure.tables import TrackingTables, build_tables
from tracking.infrastructure.user_repository import UserRepository

__all__ = [
    "DeviceRepository",
    "EventRepository",
    "PlaceRepository",
    "TrackingTables",
    "UserRepository",
    "build_tables",
]
