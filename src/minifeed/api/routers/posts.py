"""
minifeed.api.routers.posts

Protected post endpoints.

Responsibilities:
- `POST /posts`: create a post owned by the caller.
- `DELETE /posts/{post_id}`: owner-or-admin deletion (404 before 403).
- `GET /feed`: newest-first paginated feed.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from minifeed.api.deps import post_service, settings_dep
from minifeed.auth.deps import authorize_route, get_principal
from minifeed.auth.models import Principal
from minifeed.db.models import POST_MAX_LENGTH
from minifeed.services.post_service import PostService
from minifeed.settings import Settings

router = APIRouter(tags=["posts"], dependencies=[Depends(authorize_route)])


class CreatePostRequest(BaseModel):
    content: str = Field(min_length=1, max_length=POST_MAX_LENGTH)


class PostResponse(BaseModel):
    id: int
    content: str
    created_at: datetime


class FeedItemResponse(BaseModel):
    post_id: int
    content: str
    username: str
    created_at: datetime


class FeedResponse(BaseModel):
    feed_items: list[FeedItemResponse]
    page: int
    page_size: int
    total_pages: int
    total_elements: int


@router.post("/posts", response_model=PostResponse, status_code=HTTP_201_CREATED)
async def create_post(
    body: CreatePostRequest,
    principal: Principal = Depends(get_principal),
    service: PostService = Depends(post_service),
) -> PostResponse:
    post = await service.create(principal, body.content)
    return PostResponse(id=post.id, content=post.content, created_at=post.created_at)


@router.delete("/posts/{post_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    principal: Principal = Depends(get_principal),
    service: PostService = Depends(post_service),
) -> Response:
    await service.delete(principal, post_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get("/feed", response_model=FeedResponse)
async def feed(
    page: int = Query(default=0, ge=0),
    page_size: int | None = Query(default=None, ge=1),
    service: PostService = Depends(post_service),
    settings: Settings = Depends(settings_dep),
) -> FeedResponse:
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    result = await service.feed(page=page, page_size=size)
    return FeedResponse(
        feed_items=[
            FeedItemResponse(
                post_id=item.post_id,
                content=item.content,
                username=item.username,
                created_at=item.created_at,
            )
            for item in result.items
        ],
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        total_elements=result.total_elements,
    )
