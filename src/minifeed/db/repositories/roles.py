"""
minifeed.db.repositories.roles

Repository for `Role` entities (the closed ADMIN/BASIC set).
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minifeed.auth.models import RoleName
from minifeed.db.models import Role


class RoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_name(self, name: str) -> Role | None:
        # Role names are unique regardless of case.
        stmt = select(Role).where(func.upper(Role.name) == name.upper())
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def ensure(self, role: RoleName) -> Role:
        existing = await self._session.get(Role, role.role_id)
        if existing is not None:
            return existing
        created = Role(id=role.role_id, name=role.value)
        self._session.add(created)
        await self._session.flush()
        return created
