"""
minifeed.auth.jwt

JWT issuing and verification (RS256 via PyJWT).

Responsibilities:
- Issue short-lived tokens carrying issuer, subject, issued-at, expiry and scope.
- Verify signature, issuer and the `iat <= now < exp` window against an injectable clock.
- Turn verified claims into a `Principal`; any failure is one opaque AuthenticationError.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from minifeed.auth.keys import KeyMaterial
from minifeed.auth.models import Principal, authorities_from_scope
from minifeed.errors import AuthenticationError
from minifeed.observability.logging import get_logger
from minifeed.settings import Settings

log = get_logger(__name__)

Clock = Callable[[], datetime]

INVALID_TOKEN_DETAIL = "Invalid token"

_REQUIRED_CLAIMS = ["iss", "sub", "iat", "exp", "scope"]


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    ttl: timedelta

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            ttl=timedelta(seconds=settings.token_ttl_seconds),
        )


@dataclass(frozen=True, slots=True)
class IssuedToken:
    access_token: str
    expires_in: int


def build_scope(role_names: Iterable[str]) -> str:
    # Order follows the caller's iteration order; an empty role set gives "".
    return " ".join(name.upper() for name in role_names)


class TokenIssuer:
    def __init__(self, *, cfg: JwtConfig, keys: KeyMaterial, clock: Clock = utcnow) -> None:
        self._cfg = cfg
        self._keys = keys
        self._clock = clock

    def issue(self, *, subject: str, role_names: Iterable[str]) -> IssuedToken:
        now = self._clock()
        payload: dict[str, Any] = {
            "iss": self._cfg.issuer,
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int((now + self._cfg.ttl).timestamp()),
            "scope": build_scope(role_names),
        }
        token = jwt.encode(payload, self._keys.signing_key(), algorithm=self._cfg.alg)
        return IssuedToken(access_token=token, expires_in=int(self._cfg.ttl.total_seconds()))


class TokenVerifier:
    def __init__(self, *, cfg: JwtConfig, keys: KeyMaterial, clock: Clock = utcnow) -> None:
        self._cfg = cfg
        self._public_key = keys.public_key
        self._clock = clock

    def decode(self, token: str) -> dict[str, Any]:
        """
        Return validated claims or raise AuthenticationError.
        The reason is logged; callers only ever see INVALID_TOKEN_DETAIL.
        """
        try:
            # Time checks run below against our own clock, not PyJWT's.
            claims = jwt.decode(
                token,
                self._public_key,
                algorithms=[self._cfg.alg],
                issuer=self._cfg.issuer,
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except InvalidTokenError as e:
            log.info("token_rejected", reason=type(e).__name__)
            raise AuthenticationError(INVALID_TOKEN_DETAIL) from e

        reason = self._check_claims(claims)
        if reason is not None:
            log.info("token_rejected", reason=reason, sub=claims.get("sub"))
            raise AuthenticationError(INVALID_TOKEN_DETAIL)
        return claims

    def _check_claims(self, claims: dict[str, Any]) -> str | None:
        iat, exp = claims["iat"], claims["exp"]
        if not isinstance(iat, int | float) or not isinstance(exp, int | float):
            return "malformed_time_claims"
        now = self._clock().timestamp()
        if now < iat:
            return "not_yet_valid"
        if now >= exp:
            return "expired"
        if not isinstance(claims["sub"], str) or not claims["sub"]:
            return "malformed_subject"
        if not isinstance(claims["scope"], str):
            return "malformed_scope"
        return None

    def verify(self, token: str) -> Principal:
        claims = self.decode(token)
        return Principal(
            subject=claims["sub"],
            authorities=authorities_from_scope(claims["scope"]),
        )


# --- Module Notes -----------------------------------------------------------
# Tokens are not revocable before `exp`; there is no refresh flow.
