"""
minifeed.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and services.
- Encapsulate app.state access patterns (sessionmaker, issuer, guard).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from minifeed.auth.deps import authorization_guard, token_issuer
from minifeed.auth.guard import AuthorizationGuard
from minifeed.auth.jwt import TokenIssuer
from minifeed.services.auth_service import AuthService
from minifeed.services.post_service import PostService
from minifeed.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The settings the app was built with, not a fresh env read.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created on app startup in `minifeed.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def auth_service(
    session: AsyncSession = Depends(db_session),
    issuer: TokenIssuer = Depends(token_issuer),
    settings: Settings = Depends(settings_dep),
) -> AuthService:
    return AuthService(session=session, issuer=issuer, bcrypt_rounds=settings.bcrypt_rounds)


def post_service(
    session: AsyncSession = Depends(db_session),
    guard: AuthorizationGuard = Depends(authorization_guard),
) -> PostService:
    return PostService(session=session, guard=guard)
