"""
minifeed.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (PEM keys, bootstrap admin password).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration, one object injected across layers.
    Defaults are safe for local dev; prod must supply key material.
    """

    model_config = SettingsConfigDict(env_prefix="MINIFEED_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "minifeed"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Tokens
    jwt_alg: str = "RS256"
    jwt_issuer: str = "mybackend"
    token_ttl_seconds: int = Field(default=300, ge=1)

    # Key material: inline PEM takes precedence over file paths.
    jwt_public_key: str | None = Field(default=None, repr=False)
    jwt_private_key: str | None = Field(default=None, repr=False)
    jwt_public_key_file: str | None = None
    jwt_private_key_file: str | None = None

    # Passwords
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./minifeed.db"

    # Admin bootstrap (runs at startup, idempotent)
    bootstrap_admin: bool = True
    admin_username: str = "admin"
    admin_password: str = Field(default="123", repr=False)

    # Feed paging
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The bootstrap admin password default matches a local dev setup only; prod
# deployments set MINIFEED_ADMIN_PASSWORD or disable MINIFEED_BOOTSTRAP_ADMIN.
