"""
minifeed.api.app

FastAPI app factory.

Responsibilities:
- Load key material and build the token issuer/verifier and guard (fatal on bad keys).
- Register routers, middleware and the AppError -> HTTP translation.
- Initialize and dispose the DB engine/session factory; seed roles and admin.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from minifeed import __version__
from minifeed.api.routers.auth import router as auth_router
from minifeed.api.routers.health import router as health_router
from minifeed.api.routers.posts import router as posts_router
from minifeed.api.routers.users import router as users_router
from minifeed.auth.guard import AuthorizationGuard
from minifeed.auth.jwt import Clock, JwtConfig, TokenIssuer, TokenVerifier, utcnow
from minifeed.auth.keys import KeyMaterial, load_key_material
from minifeed.db.init_db import init_db, seed_reference_data
from minifeed.db.session import create_engine, create_sessionmaker
from minifeed.errors import AppError, AuthenticationError
from minifeed.observability.logging import configure_logging, get_logger
from minifeed.observability.middleware import RequestContextMiddleware
from minifeed.settings import Settings

log = get_logger(__name__)


async def _app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code, content={"detail": exc.detail}, headers=headers
    )


def create_app(
    *,
    settings: Settings,
    keys: KeyMaterial | None = None,
    clock: Clock = utcnow,
) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    # Keys load here, not lazily: a misconfigured process never starts serving.
    keys = keys or load_key_material(settings)
    jwt_cfg = JwtConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod schemas come from Alembic migrations.
            await init_db(engine)
        await seed_reference_data(app.state.sessionmaker, settings)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="minifeed",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.token_issuer = TokenIssuer(cfg=jwt_cfg, keys=keys, clock=clock)
    app.state.token_verifier = TokenVerifier(cfg=jwt_cfg, keys=keys, clock=clock)
    app.state.guard = AuthorizationGuard()

    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(posts_router)
    return app


# --- Module Notes -----------------------------------------------------------
# Composition only; credential and ownership logic lives in auth/ and services/.
