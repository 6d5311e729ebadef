"""SQLAlchemy table definitions for the tracking store.

Table names come from ``StoreSettings`` rather than module constants, so one
process can address differently named collections side by side.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    MetaData,
    SmallInteger,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB

if TYPE_CHECKING:
    from infrastructure.settings import StoreSettings

# JSONB on PostgreSQL, plain JSON elsewhere; None is stored as SQL NULL.
Document = JSON(none_as_null=True).with_variant(
    JSONB(none_as_null=True), "postgresql"
)

ID_LENGTH = 255
GROUP_ID_LENGTH = 255


@dataclass(frozen=True)
class TrackingTables:
    """The four tracking tables sharing one MetaData."""

    metadata: MetaData
    users: Table
    devices: Table
    events: Table
    places: Table


def build_tables(settings: StoreSettings) -> TrackingTables:
    """Describe the tracking tables under the configured names.

    Every table carries an indexed ``group_id`` used as the tenant filter.
    Users are keyed globally by ``login``; the other tables by ``id``.
    """
    metadata = MetaData()

    users = Table(
        settings.users_collection,
        metadata,
        Column("login", String(ID_LENGTH), primary_key=True),
        Column("group_id", String(GROUP_ID_LENGTH), nullable=False, index=True),
        Column("display_name", String(255)),
        Column("password", String(255)),
    )

    devices = Table(
        settings.devices_collection,
        metadata,
        Column("id", String(ID_LENGTH), primary_key=True),
        Column("group_id", String(GROUP_ID_LENGTH), nullable=False, index=True),
        Column("display_name", String(255)),
        Column("device_type", String(255)),
        Column("password", String(255)),
    )

    events = Table(
        settings.events_collection,
        metadata,
        Column("id", String(26), primary_key=True),
        Column("device_id", String(ID_LENGTH), nullable=False, index=True),
        Column("group_id", String(GROUP_ID_LENGTH), nullable=False, index=True),
        Column("timestamp", DateTime(timezone=True), nullable=False),
        Column("event_type", String(255)),
        Column("location", Document),
        Column("accuracy", Float),
        Column("power_level", SmallInteger),
        Column("emoji", String(8)),
        Column("comment", Text),
        Column("extra", Document, nullable=False),
    )

    places = Table(
        settings.places_collection,
        metadata,
        Column("id", String(ID_LENGTH), primary_key=True),
        Column("group_id", String(GROUP_ID_LENGTH), nullable=False, index=True),
        Column("display_name", String(255)),
        Column("circle", Document),
        Column("polygon", Document),
        Column("geo", Document, nullable=False),
    )

    return TrackingTables(
        metadata=metadata,
        users=users,
        devices=devices,
        events=events,
        places=places,
    )
