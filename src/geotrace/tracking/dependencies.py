"""Wiring for the tracking repositories.

Builds the tables from the configured collection names and binds one
repository per entity to a store handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from infrastructure.settings import StoreSettings, get_store_settings
from tracking.infrastructure.device_repository import DeviceRepository
from tracking.infrastructure.event_repository import EventRepository
from tracking.infrastructure.observability import (
    DefaultTrackingRepositoryProbe,
    TrackingRepositoryProbe,
)
from tracking.infrastructure.place_repository import PlaceRepository
from tracking.infrastructure.tables import TrackingTables, build_tables
from tracking.infrastructure.user_repository import UserRepository

if TYPE_CHECKING:
    from infrastructure.database.store import Store


@dataclass(frozen=True)
class TrackingRepositories:
    """One repository per tracking entity, all bound to the same store.

    The bundle does not own the store: close the store yourself once the
    repositories are no longer used.
    """

    tables: TrackingTables
    users: UserRepository
    devices: DeviceRepository
    events: EventRepository
    places: PlaceRepository


def create_repositories(
    store: Store,
    settings: StoreSettings | None = None,
    probe: TrackingRepositoryProbe | None = None,
) -> TrackingRepositories:
    """Build the tracking repositories over ``store``.

    Args:
        store: Open store handle
        settings: Store layout and behaviour; the cached settings when omitted
        probe: Optional probe shared by all repositories

    Returns:
        The repository bundle
    """
    settings = settings or get_store_settings()
    probe = probe or DefaultTrackingRepositoryProbe()
    tables = build_tables(settings)

    return TrackingRepositories(
        tables=tables,
        users=UserRepository(
            store, tables.users, probe, update_policy=settings.update_policy
        ),
        devices=DeviceRepository(
            store, tables.devices, probe, update_policy=settings.update_policy
        ),
        events=EventRepository(store, tables.events, probe),
        places=PlaceRepository(
            store,
            tables.places,
            probe,
            update_policy=settings.update_policy,
            circle_segments=settings.circle_segments,
        ),
    )
