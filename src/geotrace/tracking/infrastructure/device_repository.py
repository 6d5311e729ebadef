"""PostgreSQL implementation of IDeviceRepository."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from shared_kernel.identifiers import new_id
from tracking.domain.aggregates import Device
from tracking.domain.value_objects import PasswordDigest
from tracking.infrastructure.scoped_repository import GroupScopedRepository


class DeviceRepository(GroupScopedRepository[Device]):
    """Repository for devices, keyed globally by device id.

    Reads never expose the group or the password digest; ``login`` is the
    one unscoped lookup and returns both so a device can authenticate
    before its group is known.
    """

    hidden_on_get = frozenset({"password", "group_id"})
    hidden_on_list = frozenset({"password", "group_id"})
    preserved_if_unset = frozenset({"password"})

    async def login(self, device_id: str) -> Device:
        """Retrieve a device by id for authentication, ignoring groups.

        Raises:
            NotFoundError: If no device has this id
        """
        return await self._find_by_id(device_id)

    def _identity(self, entity: Device) -> str:
        return entity.id

    def _with_identity(self, entity: Device) -> Device:
        if entity.id:
            return entity
        return replace(entity, id=new_id())

    def _to_row(self, entity: Device) -> dict[str, Any]:
        return {
            "id": entity.id,
            "group_id": entity.group_id,
            "display_name": entity.display_name,
            "device_type": entity.device_type,
            "password": entity.password.value if entity.password else None,
        }

    def _from_row(self, row: Mapping[str, Any]) -> Device:
        password = row.get("password")
        return Device(
            id=row["id"],
            group_id=row.get("group_id") or "",
            display_name=row.get("display_name"),
            device_type=row.get("device_type"),
            password=PasswordDigest(password) if password else None,
        )
