"""
minifeed.services.post_service

Post lifecycle and feed.

Responsibilities:
- Create posts owned by the calling principal.
- Delete posts: existence first (404), then ownership-or-admin (403).
- Page the feed newest-first.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from minifeed.auth.guard import AuthorizationGuard
from minifeed.auth.models import Principal
from minifeed.db.models import Post
from minifeed.db.repositories.posts import PostRepo
from minifeed.db.repositories.users import UserRepo
from minifeed.errors import AuthenticationError, NotFoundError
from minifeed.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class FeedItem:
    post_id: int
    content: str
    username: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class FeedPage:
    items: list[FeedItem]
    page: int
    page_size: int
    total_pages: int
    total_elements: int


class PostService:
    def __init__(self, *, session: AsyncSession, guard: AuthorizationGuard) -> None:
        self._session = session
        self._guard = guard
        self._posts = PostRepo(session)
        self._users = UserRepo(session)

    async def _author_id(self, principal: Principal) -> uuid.UUID:
        # A valid token whose subject no longer resolves is treated as unauthenticated.
        try:
            user_id = uuid.UUID(principal.subject)
        except ValueError as e:
            raise AuthenticationError("Unknown subject") from e
        if await self._users.get(user_id) is None:
            raise AuthenticationError("Unknown subject")
        return user_id

    async def create(self, principal: Principal, content: str) -> Post:
        user_id = await self._author_id(principal)
        post = await self._posts.add(user_id=user_id, content=content)
        await self._session.commit()
        log.info("post_created", post_id=post.id, user_id=str(user_id))
        return post

    async def delete(self, principal: Principal, post_id: int) -> None:
        post = await self._posts.get(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        self._guard.require_owner_or_admin(principal, owner_id=str(post.user_id))
        await self._posts.delete(post_id)
        await self._session.commit()
        log.info("post_deleted", post_id=post_id, by=principal.subject)

    async def feed(self, *, page: int, page_size: int) -> FeedPage:
        total = await self._posts.count()
        # Past the last post: skip the query, the offset may not fit a DB integer.
        rows: list[tuple[Post, str]] = []
        if page * page_size < total:
            rows = await self._posts.list_page(page=page, size=page_size)
        return FeedPage(
            items=[
                FeedItem(
                    post_id=post.id,
                    content=post.content,
                    username=username,
                    created_at=post.created_at,
                )
                for post, username in rows
            ],
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
            total_elements=total,
        )


# --- Module Notes -----------------------------------------------------------
# Delete reports 404 before checking ownership, so non-owners can learn that a
# post id exists.
