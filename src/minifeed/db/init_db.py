"""
minifeed.db.init_db

DB initialization helpers.

Responsibilities:
- Create tables for local development and tests (prod uses Alembic).
- Seed the closed role set and, optionally, the bootstrap admin user.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from minifeed.auth.models import RoleName
from minifeed.auth.passwords import hash_password
from minifeed.db.base import Base
from minifeed.db.repositories.roles import RoleRepo
from minifeed.db.repositories.users import UserRepo
from minifeed.observability.logging import get_logger
from minifeed.settings import Settings

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_reference_data(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    """
    Idempotent: safe to run on every startup.
    """

    async with session_factory() as session:
        roles = RoleRepo(session)
        for role in RoleName:
            await roles.ensure(role)
        await session.commit()

        if not settings.bootstrap_admin:
            return

        users = UserRepo(session)
        if await users.get_by_username(settings.admin_username) is not None:
            log.info("admin_already_exists")
            return

        admin_role = await roles.ensure(RoleName.admin)
        try:
            admin = await users.add(
                username=settings.admin_username,
                password_hash=hash_password(settings.admin_password, rounds=settings.bcrypt_rounds),
                roles=[admin_role],
            )
            await session.commit()
        except IntegrityError:
            # Another worker seeded the admin between the check and the insert.
            await session.rollback()
            log.info("admin_already_exists")
            return
        log.info("admin_bootstrapped", user_id=str(admin.id))


# --- Module Notes -----------------------------------------------------------
# In prod, run Alembic migrations before starting; seeding still runs at startup.
