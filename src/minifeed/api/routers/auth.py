"""
minifeed.api.routers.auth

Public credential endpoints.

Responsibilities:
- `POST /login`: exchange username/password for a signed bearer token.
- `POST /users`: self-registration with the default BASIC role.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from starlette.status import HTTP_201_CREATED

from minifeed.api.deps import auth_service
from minifeed.auth.passwords import MAX_PASSWORD_BYTES
from minifeed.services.auth_service import AuthService

router = APIRouter(tags=["auth"])


class Credentials(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, repr=False)

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginResponse(BaseModel):
    access_token: str
    expires_in: int
    token_type: str = "bearer"


class RegisterResponse(BaseModel):
    id: uuid.UUID
    username: str


@router.post("/login", response_model=LoginResponse)
async def login(
    body: Credentials,
    service: AuthService = Depends(auth_service),
) -> LoginResponse:
    issued = await service.login(body.username, body.password)
    return LoginResponse(access_token=issued.access_token, expires_in=issued.expires_in)


@router.post("/users", response_model=RegisterResponse, status_code=HTTP_201_CREATED)
async def register(
    body: Credentials,
    service: AuthService = Depends(auth_service),
) -> RegisterResponse:
    user = await service.register(body.username, body.password)
    return RegisterResponse(id=uuid.UUID(user.id), username=user.username)
