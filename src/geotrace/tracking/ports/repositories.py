"""Repository protocols (ports) for the tracking context.

Every operation takes the caller's group explicitly. Implementations fold
it into the store query or command; it is never read from the entity.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

from tracking.domain.aggregates import Device, Event, Place, User

EntityT = TypeVar("EntityT")


@runtime_checkable
class IGroupScopedRepository(Protocol[EntityT]):
    """Group-scoped persistence shared by users, devices and places."""

    async def get(self, group_id: str, entity_id: str) -> EntityT:
        """Retrieve one entity of the group.

        Args:
            group_id: The caller's group
            entity_id: Primary identifier of the entity

        Returns:
            The entity, without store-internal fields

        Raises:
            NotFoundError: If no such entity exists in this group
        """
        ...

    async def list(self, group_id: str) -> list[EntityT]:
        """List every entity of the group; empty when there are none."""
        ...

    async def create(self, group_id: str, entity: EntityT) -> EntityT:
        """Persist a new entity into the group.

        The entity's group is overwritten with ``group_id`` and an empty
        identifier is replaced by a generated one.

        Returns:
            The entity as stored

        Raises:
            DuplicateKeyError: If the identifier is already taken
            ValidationError: If the entity cannot be stored as supplied
        """
        ...

    async def update(self, group_id: str, entity: EntityT) -> EntityT:
        """Replace a stored entity and bind it to the group.

        Raises:
            NotFoundError: If no matching record exists
            ValidationError: If the entity cannot be stored as supplied
        """
        ...

    async def delete(self, group_id: str, entity_id: str) -> None:
        """Delete one entity of the group.

        Raises:
            NotFoundError: If no such entity exists in this group
        """
        ...


@runtime_checkable
class IUserRepository(IGroupScopedRepository[User], Protocol):
    """Repository for users, keyed by their global login."""

    async def login(self, login: str) -> User:
        """Retrieve a user for authentication, regardless of group.

        Returns:
            The full user record including group and password digest

        Raises:
            NotFoundError: If no user has this login
        """
        ...


@runtime_checkable
class IDeviceRepository(IGroupScopedRepository[Device], Protocol):
    """Repository for devices, keyed by their global id."""

    async def login(self, device_id: str) -> Device:
        """Retrieve a device for authentication, regardless of group.

        Returns:
            The full device record including group and password digest

        Raises:
            NotFoundError: If no device has this id
        """
        ...


@runtime_checkable
class IPlaceRepository(IGroupScopedRepository[Place], Protocol):
    """Repository for places (geofences)."""


@runtime_checkable
class IEventRepository(Protocol):
    """Repository for events, scoped by group and device."""

    async def get(self, group_id: str, device_id: str, event_id: str) -> Event:
        """Retrieve one event of a device within the group.

        Raises:
            InvalidIdentifierError: If ``event_id`` is not a valid event id
            NotFoundError: If no such event exists for this group and device
        """
        ...

    async def list(self, group_id: str, device_id: str) -> list[Event]:
        """List the events of a device within the group, oldest first."""
        ...

    async def create(self, group_id: str, device_id: str, *events: Event) -> list[Event]:
        """Persist a batch of events for one device in one insert.

        Every event is stamped with ``group_id`` and ``device_id``, given an id
        when it has none and the current time when it has no timestamp.

        Raises:
            DuplicateKeyError: If any id is already taken
            InvalidIdentifierError: If a supplied id is malformed
        """
        ...

    async def update(self, group_id: str, device_id: str, event: Event) -> Event:
        """Replace an event of a device within the group.

        Raises:
            NotFoundError: If no such event exists for this group and device
        """
        ...

    async def delete(self, group_id: str, device_id: str, event_id: str) -> None:
        """Delete an event of a device within the group.

        Raises:
            NotFoundError: If no such event exists for this group and device
        """
        ...

    async def devices(self, group_id: str) -> set[str]:
        """Return the ids of devices that have reported events in the group."""
        ...
