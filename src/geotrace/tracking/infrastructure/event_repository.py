"""PostgreSQL implementation of IEventRepository.

Events are scoped by group AND device. The group stored on an event is the
one the caller wrote it under; moving the device to another group later
does not touch it, so history stays with the group that collected it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import distinct, select

from shared_kernel.identifiers import is_valid_id, new_id
from tracking.domain.aggregates import Event
from tracking.domain.value_objects import Point
from tracking.infrastructure.scoped_repository import ScopedRepository
from tracking.ports.exceptions import InvalidIdentifierError


class EventRepository(ScopedRepository[Event]):
    """Repository for the events of a device within a group."""

    hidden_on_get = frozenset({"group_id", "device_id"})
    hidden_on_list = frozenset({"group_id"})
    preserved_if_unset = frozenset({"timestamp"})
    order_by = ("timestamp", "id")

    async def get(self, group_id: str, device_id: str, event_id: str) -> Event:
        self._check_id(event_id)
        return await self._find_one(self._scope(group_id=group_id, device_id=device_id), event_id)

    async def list(self, group_id: str, device_id: str) -> list[Event]:
        return await self._find_all(self._scope(group_id=group_id, device_id=device_id))

    async def create(self, group_id: str, device_id: str, *events: Event) -> list[Event]:
        """Insert a batch of events for one device in a single statement.

        All events of the batch share the same server timestamp when they
        carry none of their own. A failure of the batch insert is reported
        once for the whole call.
        """
        scope = self._scope(group_id=group_id, device_id=device_id)
        now = datetime.now(UTC)
        return await self._insert(scope, [event.stamped(now) for event in events])

    async def update(self, group_id: str, device_id: str, event: Event) -> Event:
        """Replace an event, matching it on id, group and device.

        An event's group and device never change; a missing timestamp keeps
        the stored one.
        """
        self._check_id(event.id)
        scope = self._scope(group_id=group_id, device_id=device_id)
        return await self._update(scope, scope, event)

    async def delete(self, group_id: str, device_id: str, event_id: str) -> None:
        self._check_id(event_id)
        await self._remove(self._scope(group_id=group_id, device_id=device_id), event_id)

    async def devices(self, group_id: str) -> set[str]:
        """Return the ids of devices with at least one event in the group."""
        scope = self._scope(group_id=group_id)
        column = self._table.c.device_id
        stmt = select(distinct(column)).where(self._where(scope))
        async with self._store.lease() as session:
            result = await session.execute(stmt)
            device_ids = set(result.scalars().all())

        self._probe.distinct_devices_listed(group_id, len(device_ids))
        return device_ids

    def _check_id(self, event_id: str) -> None:
        if not is_valid_id(event_id):
            raise InvalidIdentifierError(f"malformed event id: {event_id!r}")

    def _identity(self, entity: Event) -> str:
        return entity.id

    def _with_identity(self, entity: Event) -> Event:
        if not entity.id:
            return replace(entity, id=new_id())
        self._check_id(entity.id)
        return entity

    def _to_row(self, entity: Event) -> dict[str, Any]:
        return {
            "id": entity.id,
            "device_id": entity.device_id,
            "group_id": entity.group_id,
            "timestamp": entity.timestamp,
            "event_type": entity.event_type,
            "location": entity.location.to_coordinates() if entity.location else None,
            "accuracy": entity.accuracy,
            "power_level": entity.power_level,
            "emoji": entity.emoji,
            "comment": entity.comment,
            "extra": entity.extra,
        }

    def _from_row(self, row: Mapping[str, Any]) -> Event:
        location = row.get("location")
        return Event(
            id=row["id"],
            device_id=row.get("device_id") or "",
            group_id=row.get("group_id") or "",
            timestamp=row.get("timestamp"),
            event_type=row.get("event_type"),
            location=Point.from_coordinates(location) if location else None,
            accuracy=row.get("accuracy"),
            power_level=row.get("power_level"),
            emoji=row.get("emoji"),
            comment=row.get("comment"),
            extra=row.get("extra") or {},
        )
