"""
minifeed.db.repositories.posts

Repository for `Post` entities.

Responsibilities:
- Insert, fetch and delete posts by id.
- Page through posts newest-first together with their author's username.
"""

from __future__ import annotations

import uuid

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minifeed.db.models import Post, User


class PostRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, *, user_id: uuid.UUID, content: str) -> Post:
        post = Post(user_id=user_id, content=content)
        self._session.add(post)
        await self._session.flush()
        return post

    async def get(self, post_id: int) -> Post | None:
        return await self._session.get(Post, post_id)

    async def delete(self, post_id: int) -> None:
        await self._session.execute(delete(Post).where(Post.id == post_id))

    async def count(self) -> int:
        stmt = select(func.count()).select_from(Post)
        return int((await self._session.execute(stmt)).scalar_one())

    async def list_page(self, *, page: int, size: int) -> list[tuple[Post, str]]:
        # Ties on created_at fall back to id so pages never overlap.
        stmt = (
            select(Post, User.username)
            .join(User, User.id == Post.user_id)
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(page * size)
            .limit(size)
        )
        return [(post, username) for post, username in (await self._session.execute(stmt)).all()]
