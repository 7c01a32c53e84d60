"""
minifeed.db.repositories.users

Repository for `User` entities and their role assignments.

Responsibilities:
- Look users up by id and username.
- Insert users with their roles (the unique constraint reports duplicates).
- Read role names for a user through an explicit join.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minifeed.db.models import Role, User, users_roles


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: uuid.UUID) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def add(self, *, username: str, password_hash: str, roles: Sequence[Role]) -> User:
        # Flush surfaces IntegrityError on a duplicate username; callers translate it.
        user = User(username=username, password_hash=password_hash, roles=list(roles))
        self._session.add(user)
        await self._session.flush()
        return user

    async def list_all(self) -> list[User]:
        stmt = select(User).order_by(User.created_at, User.username)
        return list((await self._session.execute(stmt)).scalars().all())

    async def count(self) -> int:
        stmt = select(func.count()).select_from(User)
        return int((await self._session.execute(stmt)).scalar_one())

    async def role_names_for(self, user_id: uuid.UUID) -> list[str]:
        # Ordered by role id so the derived scope string is deterministic.
        stmt = (
            select(Role.name)
            .join(users_roles, users_roles.c.role_id == Role.id)
            .where(users_roles.c.user_id == user_id)
            .order_by(Role.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def role_names_by_user(self, user_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, list[str]]:
        if not user_ids:
            return {}
        stmt = (
            select(users_roles.c.user_id, Role.name)
            .join(Role, users_roles.c.role_id == Role.id)
            .where(users_roles.c.user_id.in_(user_ids))
            .order_by(users_roles.c.user_id, Role.id)
        )
        out: dict[uuid.UUID, list[str]] = {uid: [] for uid in user_ids}
        for user_id, name in (await self._session.execute(stmt)).all():
            out[user_id].append(name)
        return out
