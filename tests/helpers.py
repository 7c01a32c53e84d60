"""
tests.helpers

HTTP helpers shared by API tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import httpx

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-pass"


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


async def register(client: httpx.AsyncClient, username: str, password: str) -> str:
    r = await client.post("/users", json={"username": username, "password": password})
    assert r.status_code == 201, r.text
    return r.json()["id"]


async def login(client: httpx.AsyncClient, username: str, password: str) -> str:
    r = await client.post("/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
