"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from shared_kernel.identifiers import new_id
from tracking.domain.aggregates import User
from tracking.domain.value_objects import PasswordDigest
from tracking.infrastructure.scoped_repository import GroupScopedRepository


class UserRepository(GroupScopedRepository[User]):
    """Repository for users, keyed globally by login.

    ``get`` keeps the group in the result but never the password digest;
    ``list`` drops both. Only ``login`` returns the full record.
    """

    hidden_on_get = frozenset({"password"})
    hidden_on_list = frozenset({"password", "group_id"})
    preserved_if_unset = frozenset({"password"})

    async def login(self, login: str) -> User:
        """Retrieve a user by login for authentication, ignoring groups.

        Raises:
            NotFoundError: If no user has this login
        """
        return await self._find_by_id(login)

    def _identity(self, entity: User) -> str:
        return entity.login

    def _with_identity(self, entity: User) -> User:
        if entity.login:
            return entity
        return replace(entity, login=new_id())

    def _to_row(self, entity: User) -> dict[str, Any]:
        return {
            "login": entity.login,
            "group_id": entity.group_id,
            "display_name": entity.display_name,
            "password": entity.password.value if entity.password else None,
        }

    def _from_row(self, row: Mapping[str, Any]) -> User:
        password = row.get("password")
        return User(
            login=row["login"],
            group_id=row.get("group_id") or "",
            display_name=row.get("display_name"),
            password=PasswordDigest(password) if password else None,
        )
