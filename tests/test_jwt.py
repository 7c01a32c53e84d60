"""
tests.test_jwt

Token issuing and verification: claims, TTL boundary, tampering, issuer and key checks.
"""

from __future__ import annotations

import base64
import json
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from minifeed.auth.jwt import (
    INVALID_TOKEN_DETAIL,
    JwtConfig,
    TokenIssuer,
    TokenVerifier,
    build_scope,
)
from minifeed.auth.keys import KeyMaterial
from minifeed.errors import AuthenticationError

from helpers import FakeClock

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)
CFG = JwtConfig(alg="RS256", issuer="mybackend", ttl=timedelta(seconds=300))


def _pair(keys: KeyMaterial, cfg: JwtConfig = CFG) -> tuple[TokenIssuer, TokenVerifier, FakeClock]:
    clock = FakeClock(T0)
    issuer = TokenIssuer(cfg=cfg, keys=keys, clock=clock)
    verifier = TokenVerifier(cfg=cfg, keys=keys, clock=clock)
    return issuer, verifier, clock


def _claims(scope: str = "") -> dict:
    iat = int(T0.timestamp())
    return {"iss": "mybackend", "sub": "user-1", "iat": iat, "exp": iat + 300, "scope": scope}


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _unb64(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def test_issue_then_verify(keys: KeyMaterial) -> None:
    issuer, verifier, _ = _pair(keys)
    issued = issuer.issue(subject="user-1", role_names=["admin", "basic"])
    assert issued.expires_in == 300

    principal = verifier.verify(issued.access_token)
    assert principal.subject == "user-1"
    assert principal.authorities == frozenset({"SCOPE_ADMIN", "SCOPE_BASIC"})
    assert principal.is_admin


def test_claim_set(keys: KeyMaterial) -> None:
    issuer, _, _ = _pair(keys)
    token = issuer.issue(subject="user-1", role_names=["basic"]).access_token

    header = jwt.get_unverified_header(token)
    claims = jwt.decode(token, options={"verify_signature": False})
    assert header["alg"] == "RS256"
    assert claims == {
        "iss": "mybackend",
        "sub": "user-1",
        "iat": int(T0.timestamp()),
        "exp": int(T0.timestamp()) + 300,
        "scope": "BASIC",
    }


def test_scope_keeps_caller_order_and_uppercases() -> None:
    assert build_scope(["Admin", "basic"]) == "ADMIN BASIC"
    assert build_scope(["basic", "admin"]) == "BASIC ADMIN"


def test_empty_roles_give_empty_scope(keys: KeyMaterial) -> None:
    issuer, verifier, _ = _pair(keys)
    token = issuer.issue(subject="user-1", role_names=[]).access_token
    assert jwt.decode(token, options={"verify_signature": False})["scope"] == ""
    assert verifier.verify(token).authorities == frozenset()


@pytest.mark.parametrize(
    ("elapsed", "accepted"),
    [(0, True), (299, True), (300, False), (301, False)],
)
def test_ttl_boundary(keys: KeyMaterial, elapsed: int, accepted: bool) -> None:
    issuer, verifier, clock = _pair(keys)
    token = issuer.issue(subject="user-1", role_names=["basic"]).access_token
    clock.advance(elapsed)
    if accepted:
        assert verifier.verify(token).subject == "user-1"
    else:
        with pytest.raises(AuthenticationError):
            verifier.verify(token)


def test_not_yet_valid_is_rejected(keys: KeyMaterial) -> None:
    issuer, verifier, clock = _pair(keys)
    token = issuer.issue(subject="user-1", role_names=[]).access_token
    clock.advance(-1)
    with pytest.raises(AuthenticationError):
        verifier.verify(token)


@pytest.mark.parametrize("index", [0, 17, 128, 255])
def test_tampered_signature_is_rejected(keys: KeyMaterial, index: int) -> None:
    issuer, verifier, _ = _pair(keys)
    token = issuer.issue(subject="user-1", role_names=[]).access_token
    header, payload, signature = token.split(".")

    raw = bytearray(_unb64(signature))
    raw[index] ^= 0x01
    tampered = ".".join([header, payload, _b64(bytes(raw))])

    with pytest.raises(AuthenticationError) as exc:
        verifier.verify(tampered)
    assert exc.value.detail == INVALID_TOKEN_DETAIL


def test_tampered_payload_is_rejected(keys: KeyMaterial) -> None:
    issuer, verifier, _ = _pair(keys)
    header, _, signature = issuer.issue(subject="user-1", role_names=[]).access_token.split(".")
    forged = _b64(json.dumps(_claims(scope="ADMIN")).encode())
    with pytest.raises(AuthenticationError):
        verifier.verify(".".join([header, forged, signature]))


def test_token_from_other_key_is_rejected(keys: KeyMaterial) -> None:
    other_issuer, _, _ = _pair(KeyMaterial.generate())
    _, verifier, _ = _pair(keys)
    token = other_issuer.issue(subject="user-1", role_names=["admin"]).access_token
    with pytest.raises(AuthenticationError):
        verifier.verify(token)


def test_wrong_issuer_is_rejected(keys: KeyMaterial) -> None:
    foreign = JwtConfig(alg="RS256", issuer="someone-else", ttl=timedelta(seconds=300))
    issuer, _, _ = _pair(keys, foreign)
    _, verifier, _ = _pair(keys)
    with pytest.raises(AuthenticationError):
        verifier.verify(issuer.issue(subject="user-1", role_names=[]).access_token)


def test_missing_scope_claim_is_rejected(keys: KeyMaterial) -> None:
    _, verifier, _ = _pair(keys)
    token = jwt.encode(
        {k: v for k, v in _claims().items() if k != "scope"},
        keys.signing_key(),
        algorithm="RS256",
    )
    with pytest.raises(AuthenticationError):
        verifier.verify(token)


def test_unsigned_token_is_rejected(keys: KeyMaterial) -> None:
    _, verifier, _ = _pair(keys)
    token = jwt.encode(
        _claims(scope="ADMIN"),
        None,
        algorithm="none",
    )
    with pytest.raises(AuthenticationError):
        verifier.verify(token)


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "a.b"])
def test_malformed_token_gives_generic_error(keys: KeyMaterial, garbage: str) -> None:
    _, verifier, _ = _pair(keys)
    with pytest.raises(AuthenticationError) as exc:
        verifier.verify(garbage)
    assert exc.value.detail == INVALID_TOKEN_DETAIL
