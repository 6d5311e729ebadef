"""PostgreSQL implementation of IPlaceRepository.

Places are stored with their authoritative shape (circle or polygon) plus a
``geo`` column holding the GeoJSON polygon the spatial index works on. The
``geo`` column is derived on every write and never read back.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from infrastructure.settings import UpdatePolicy
from shared_kernel.identifiers import new_id
from tracking.domain.aggregates import Place
from tracking.domain.geometry import normalize_place_geometry
from tracking.domain.value_objects import Circle, Polygon
from tracking.infrastructure.scoped_repository import GroupScopedRepository

if TYPE_CHECKING:
    from sqlalchemy import Table

    from infrastructure.database.store import Store
    from tracking.infrastructure.observability import TrackingRepositoryProbe


class PlaceRepository(GroupScopedRepository[Place]):
    """Repository for places (geofences) of a group."""

    hidden_on_get = frozenset({"group_id", "geo"})
    hidden_on_list = frozenset({"group_id", "geo"})

    def __init__(
        self,
        store: Store,
        table: Table,
        probe: TrackingRepositoryProbe | None = None,
        update_policy: UpdatePolicy = UpdatePolicy.REASSIGN,
        circle_segments: int = 32,
    ) -> None:
        """Initialize repository.

        Args:
            store: Store handle; not owned
            table: Places table
            probe: Optional domain probe for observability
            update_policy: Whether update may move a place between groups
            circle_segments: Vertices used to index a circular place
        """
        super().__init__(store, table, probe, update_policy)
        self._circle_segments = circle_segments

    def _prepare(self, entity: Place) -> Place:
        # Raises MissingGeometryError before anything reaches the store.
        return normalize_place_geometry(entity, self._circle_segments).place

    def _identity(self, entity: Place) -> str:
        return entity.id

    def _with_identity(self, entity: Place) -> Place:
        if entity.id:
            return entity
        return replace(entity, id=new_id())

    def _to_row(self, entity: Place) -> dict[str, Any]:
        index = normalize_place_geometry(entity, self._circle_segments).index_geometry
        return {
            "id": entity.id,
            "group_id": entity.group_id,
            "display_name": entity.display_name,
            "circle": entity.circle.to_dict() if entity.circle else None,
            "polygon": entity.polygon.to_coordinates() if entity.polygon else None,
            "geo": index.to_geojson(),
        }

    def _from_row(self, row: Mapping[str, Any]) -> Place:
        circle = row.get("circle")
        polygon = row.get("polygon")
        return Place(
            id=row["id"],
            group_id=row.get("group_id") or "",
            display_name=row.get("display_name"),
            circle=Circle.from_dict(circle) if circle else None,
            polygon=Polygon.from_coordinates(polygon) if polygon else None,
        )
