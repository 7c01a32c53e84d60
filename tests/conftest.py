"""
tests.conftest

Shared fixtures.

Responsibilities:
- One RSA key pair per test session (generation is the slow part).
- A controllable clock for token TTL checks.
- An app per test, backed by a file SQLite DB in tmp_path, with lifespan driven explicitly.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from minifeed.api.app import create_app
from minifeed.auth.keys import KeyMaterial
from minifeed.settings import Settings

from helpers import ADMIN_PASSWORD, FakeClock


@pytest.fixture(scope="session")
def keys() -> KeyMaterial:
    return KeyMaterial.generate()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'minifeed.db'}",
        bcrypt_rounds=4,
        admin_password=ADMIN_PASSWORD,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings: Settings, keys: KeyMaterial, clock: FakeClock) -> AsyncIterator[FastAPI]:
    application = create_app(settings=settings, keys=keys, clock=clock)
    # httpx ASGITransport does not run lifespan; drive it here.
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
