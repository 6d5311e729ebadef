"""Group-scoped persistence shared by every tracking repository.

The scoping rule is implemented here once:

- reads filter on the primary key AND every scope column, so a record
  belonging to another group is indistinguishable from a missing one;
- writes stamp the scope columns from the caller's arguments, never from
  the entity, so a record cannot be created "into" a foreign group.

Each call borrows one session from the store for exactly one statement.
Subclasses only describe how entities map to rows.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, Table, and_, delete, insert, select, update
from sqlalchemy.exc import DataError, IntegrityError

from infrastructure.settings import UpdatePolicy
from tracking.infrastructure.observability import (
    DefaultTrackingRepositoryProbe,
    TrackingRepositoryProbe,
)
from tracking.ports.exceptions import (
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from infrastructure.database.store import Store

EntityT = TypeVar("EntityT")

Scope = Mapping[str, str]


class ScopedRepository(Generic[EntityT]):
    """Store primitives (find, insert, update, remove) under a scope.

    A scope maps column names to the values the caller is authorized for,
    e.g. ``{"group_id": "g1"}``. Scope column names are also entity field
    names, which lets writes stamp them with ``dataclasses.replace``.
    """

    # Columns left out of get() and list() results.
    hidden_on_get: ClassVar[frozenset[str]] = frozenset()
    hidden_on_list: ClassVar[frozenset[str]] = frozenset()
    # Columns an update leaves untouched when the entity has no value for them.
    preserved_if_unset: ClassVar[frozenset[str]] = frozenset()
    # List ordering; the primary key when empty.
    order_by: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        store: Store,
        table: Table,
        probe: TrackingRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with a store handle and its table.

        Args:
            store: Store handle; not owned, must outlive the repository
            table: Table holding this repository's collection
            probe: Optional domain probe for observability
        """
        self._store = store
        self._table = table
        self._probe = probe or DefaultTrackingRepositoryProbe()
        (self._pk,) = table.primary_key.columns

    @property
    def collection(self) -> str:
        """Name of the backing collection."""
        return self._table.name

    def _identity(self, entity: EntityT) -> str:
        """Return the primary key value of ``entity``."""
        raise NotImplementedError

    def _with_identity(self, entity: EntityT) -> EntityT:
        """Return ``entity`` with a primary key, generating one if empty."""
        raise NotImplementedError

    def _to_row(self, entity: EntityT) -> dict[str, Any]:
        raise NotImplementedError

    def _from_row(self, row: Mapping[str, Any]) -> EntityT:
        raise NotImplementedError

    @staticmethod
    def _scope(**values: str) -> dict[str, str]:
        """Build a scope, refusing empty values.

        Raises:
            ValidationError: If any scope value is empty
        """
        for name, value in values.items():
            if not value:
                raise ValidationError(f"{name} is required")
        return dict(values)

    def _where(self, scope: Scope, entity_id: str | None = None) -> ColumnElement[bool]:
        clauses = [self._table.c[column] == value for column, value in scope.items()]
        if entity_id is not None:
            clauses.append(self._pk == entity_id)
        return and_(*clauses)

    def _projection(self, hidden: frozenset[str]) -> list[Any]:
        return [column for column in self._table.columns if column.name not in hidden]

    async def _find_one(self, scope: Scope, entity_id: str) -> EntityT:
        group_id = scope["group_id"]
        stmt = select(*self._projection(self.hidden_on_get)).where(
            self._where(scope, entity_id)
        )
        async with self._store.lease() as session:
            result = await session.execute(stmt)
            row = result.mappings().one_or_none()

        if row is None:
            self._probe.entity_not_found(self.collection, group_id, entity_id)
            raise NotFoundError(self.collection, entity_id)

        self._probe.entity_retrieved(self.collection, group_id, entity_id)
        return self._from_row(row)

    async def _find_all(self, scope: Scope) -> list[EntityT]:
        order = [self._table.c[name] for name in self.order_by] or [self._pk]
        stmt = (
            select(*self._projection(self.hidden_on_list))
            .where(self._where(scope))
            .order_by(*order)
        )
        async with self._store.lease() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()

        entities = [self._from_row(row) for row in rows]
        self._probe.entities_listed(self.collection, scope["group_id"], len(entities))
        return entities

    async def _find_by_id(self, entity_id: str) -> EntityT:
        """Unscoped full-record lookup, reserved for authentication."""
        stmt = select(self._table).where(self._pk == entity_id)
        async with self._store.lease() as session:
            result = await session.execute(stmt)
            row = result.mappings().one_or_none()

        self._probe.login_lookup(self.collection, entity_id, found=row is not None)
        if row is None:
            raise NotFoundError(self.collection, entity_id)
        return self._from_row(row)

    async def _insert(self, scope: Scope, entities: Sequence[EntityT]) -> list[EntityT]:
        stored = [replace(self._with_identity(entity), **scope) for entity in entities]
        if not stored:
            return []

        rows = [self._to_row(entity) for entity in stored]
        entity_ids = [self._identity(entity) for entity in stored]
        try:
            async with self._store.lease() as session:
                await session.execute(insert(self._table), rows)
        except IntegrityError as e:
            self._probe.duplicate_key(self.collection, entity_ids)
            raise DuplicateKeyError(self.collection, entity_ids) from e
        except DataError as e:
            raise ValidationError(f"invalid {self.collection} record: {e.orig}") from e

        self._probe.entities_created(self.collection, scope["group_id"], entity_ids)
        return stored

    async def _update(self, match: Scope, assign: Scope, entity: EntityT) -> EntityT:
        """Replace the record matching ``match`` and the entity's id.

        ``assign`` is stamped onto the entity before it is written.
        """
        stored = replace(entity, **assign)
        entity_id = self._identity(stored)
        values = {
            column: value
            for column, value in self._to_row(stored).items()
            if column != self._pk.name
            and not (value is None and column in self.preserved_if_unset)
        }
        stmt = update(self._table).where(self._where(match, entity_id)).values(**values)
        try:
            async with self._store.lease() as session:
                result = await session.execute(stmt)
                matched = result.rowcount
        except DataError as e:
            raise ValidationError(f"invalid {self.collection} record: {e.orig}") from e

        if not matched:
            self._probe.entity_not_found(self.collection, assign["group_id"], entity_id)
            raise NotFoundError(self.collection, entity_id)

        self._probe.entity_updated(self.collection, assign["group_id"], entity_id)
        return stored

    async def _remove(self, scope: Scope, entity_id: str) -> None:
        stmt = delete(self._table).where(self._where(scope, entity_id))
        async with self._store.lease() as session:
            result = await session.execute(stmt)
            matched = result.rowcount

        if not matched:
            self._probe.entity_not_found(self.collection, scope["group_id"], entity_id)
            raise NotFoundError(self.collection, entity_id)

        self._probe.entity_deleted(self.collection, scope["group_id"], entity_id)


class GroupScopedRepository(ScopedRepository[EntityT]):
    """Public get/list/create/update/delete for entities keyed by group alone.

    How ``update`` treats a record's current group depends on the
    ``UpdatePolicy``: REASSIGN moves the record into the caller's group,
    SCOPED only touches records already in it.
    """

    def __init__(
        self,
        store: Store,
        table: Table,
        probe: TrackingRepositoryProbe | None = None,
        update_policy: UpdatePolicy = UpdatePolicy.REASSIGN,
    ) -> None:
        super().__init__(store, table, probe)
        self._update_policy = update_policy

    def _prepare(self, entity: EntityT) -> EntityT:
        """Validate and normalize an entity before it is written."""
        return entity

    async def get(self, group_id: str, entity_id: str) -> EntityT:
        return await self._find_one(self._scope(group_id=group_id), entity_id)

    async def list(self, group_id: str) -> list[EntityT]:
        return await self._find_all(self._scope(group_id=group_id))

    async def create(self, group_id: str, entity: EntityT) -> EntityT:
        scope = self._scope(group_id=group_id)
        (stored,) = await self._insert(scope, [self._prepare(entity)])
        return stored

    async def update(self, group_id: str, entity: EntityT) -> EntityT:
        assign = self._scope(group_id=group_id)
        match = assign if self._update_policy is UpdatePolicy.SCOPED else {}
        return await self._update(match, assign, self._prepare(entity))

    async def delete(self, group_id: str, entity_id: str) -> None:
        await self._remove(self._scope(group_id=group_id), entity_id)
