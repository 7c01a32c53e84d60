"""
minifeed.db.models

Persistence schema.

Responsibilities:
- User: identity with unique username and bcrypt digest.
- Role: closed set of role names (ADMIN, BASIC) with stable ids.
- users_roles: many-to-many assignment, read explicitly via `UserRepo.role_names_for`.
- Post: short text owned (by reference) by a user; timestamped at insert.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Table, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minifeed.db.base import Base

POST_MAX_LENGTH = 280


def _utcnow() -> datetime:
    # Naive UTC timestamps; SQLite has no tz-aware column type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


users_roles = Table(
    "users_roles",
    Base.metadata,
    Column("user_id", SAUuid(as_uuid=True), ForeignKey("users.id"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"

    # Ids are assigned from `RoleName.role_id`, not autoincremented.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    # Write-side only; role reads go through the explicit join in UserRepo.
    roles: Mapped[list[Role]] = relationship(secondary=users_roles, lazy="raise")


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    __table_args__ = (Index("ix_posts_created_id", "created_at", "id"),)


# --- Module Notes -----------------------------------------------------------
# Posts reference their author by id only; deleting a post never touches the user.
