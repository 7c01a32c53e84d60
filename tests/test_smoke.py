"""
tests.test_smoke

Minimal smoke tests: the app boots, seeds, and serves its probes.
"""

from __future__ import annotations

import httpx
import pytest

from minifeed.api.app import create_app
from minifeed.errors import KeyMaterialError
from minifeed.settings import Settings


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "abc-123"})
    assert r.headers["x-request-id"] == "abc-123"

    r = await client.get("/healthz")
    assert r.headers["x-request-id"]


def test_prod_without_keys_refuses_to_build(tmp_path) -> None:
    settings = Settings(env="prod", database_url=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
    with pytest.raises(KeyMaterialError):
        create_app(settings=settings)
