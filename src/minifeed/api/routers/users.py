"""
minifeed.api.routers.users

Protected user administration endpoints.

Responsibilities:
- `GET /users`: list every identity with its role names (ADMIN authority, see guard table).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from minifeed.api.deps import db_session
from minifeed.auth.deps import authorize_route
from minifeed.db.repositories.users import UserRepo

router = APIRouter(tags=["users"], dependencies=[Depends(authorize_route)])


class UserResponse(BaseModel):
    # The password digest is never part of any response.
    id: uuid.UUID
    username: str
    roles: list[str]


@router.get("/users", response_model=list[UserResponse])
async def list_users(session: AsyncSession = Depends(db_session)) -> list[UserResponse]:
    users = UserRepo(session)
    all_users = await users.list_all()
    roles = await users.role_names_by_user([u.id for u in all_users])
    return [UserResponse(id=u.id, username=u.username, roles=roles[u.id]) for u in all_users]
