"""Domain probe for tracking repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user, device, event and place
persistence. Every event names the collection it concerns; secrets are
never passed to the probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TrackingRepositoryProbe(Protocol):
    """Domain probe for tracking repository operations."""

    def entities_created(self, collection: str, group_id: str, entity_ids: list[str]) -> None:
        """Record that one or more entities were inserted."""
        ...

    def entity_retrieved(self, collection: str, group_id: str, entity_id: str) -> None:
        """Record that an entity was read within a group."""
        ...

    def entity_not_found(self, collection: str, group_id: str | None, entity_id: str) -> None:
        """Record that an entity was absent, or absent from the group."""
        ...

    def entities_listed(self, collection: str, group_id: str, count: int) -> None:
        """Record that a group's entities were listed."""
        ...

    def entity_updated(self, collection: str, group_id: str, entity_id: str) -> None:
        """Record that an entity was replaced."""
        ...

    def entity_deleted(self, collection: str, group_id: str, entity_id: str) -> None:
        """Record that an entity was removed."""
        ...

    def duplicate_key(self, collection: str, entity_ids: list[str]) -> None:
        """Record that a create collided with an existing primary key."""
        ...

    def login_lookup(self, collection: str, entity_id: str, found: bool) -> None:
        """Record an unscoped lookup made for authentication."""
        ...

    def distinct_devices_listed(self, group_id: str, count: int) -> None:
        """Record that the devices reporting into a group were enumerated."""
        ...

    def with_context(self, context: ObservationContext) -> TrackingRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTrackingRepositoryProbe:
    """Default implementation of TrackingRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTrackingRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTrackingRepositoryProbe(logger=self._logger, context=context)

    def entities_created(self, collection: str, group_id: str, entity_ids: list[str]) -> None:
        """Record that one or more entities were inserted."""
        self._logger.info(
            "entities_created",
            collection=collection,
            group_id=group_id,
            entity_ids=entity_ids,
            count=len(entity_ids),
            **self._get_context_kwargs(),
        )

    def entity_retrieved(self, collection: str, group_id: str, entity_id: str) -> None:
        """Record that an entity was read within a group."""
        self._logger.debug(
            "entity_retrieved",
            collection=collection,
            group_id=group_id,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def entity_not_found(self, collection: str, group_id: str | None, entity_id: str) -> None:
        """Record that an entity was absent, or absent from the group."""
        self._logger.debug(
            "entity_not_found",
            collection=collection,
            group_id=group_id,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def entities_listed(self, collection: str, group_id: str, count: int) -> None:
        """Record that a group's entities were listed."""
        self._logger.debug(
            "entities_listed",
            collection=collection,
            group_id=group_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def entity_updated(self, collection: str, group_id: str, entity_id: str) -> None:
        """Record that an entity was replaced."""
        self._logger.info(
            "entity_updated",
            collection=collection,
            group_id=group_id,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def entity_deleted(self, collection: str, group_id: str, entity_id: str) -> None:
        """Record that an entity was removed."""
        self._logger.info(
            "entity_deleted",
            collection=collection,
            group_id=group_id,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def duplicate_key(self, collection: str, entity_ids: list[str]) -> None:
        """Record that a create collided with an existing primary key."""
        self._logger.warning(
            "duplicate_key",
            collection=collection,
            entity_ids=entity_ids,
            **self._get_context_kwargs(),
        )

    def login_lookup(self, collection: str, entity_id: str, found: bool) -> None:
        """Record an unscoped lookup made for authentication."""
        self._logger.info(
            "login_lookup",
            collection=collection,
            entity_id=entity_id,
            found=found,
            **self._get_context_kwargs(),
        )

    def distinct_devices_listed(self, group_id: str, count: int) -> None:
        """Record that the devices reporting into a group were enumerated."""
        self._logger.debug(
            "distinct_devices_listed",
            group_id=group_id,
            count=count,
            **self._get_context_kwargs(),
        )
