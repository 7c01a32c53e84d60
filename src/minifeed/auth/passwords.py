"""
minifeed.auth.passwords

Password hashing with bcrypt (used directly, no passlib wrapper).

Responsibilities:
- One-way salted hashing with a tunable cost factor.
- Verification that never raises for a wrong password or a malformed digest.
- A dummy digest so unknown usernames still cost one bcrypt check.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt

# bcrypt only looks at the first 72 bytes; longer secrets are rejected outright.
MAX_PASSWORD_BYTES = 72

DEFAULT_ROUNDS = 12


def _encode_secret(plain: str) -> bytes:
    if not isinstance(plain, str):
        raise TypeError("password must be a string")
    secret = plain.encode("utf-8")
    if len(secret) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
    return secret


def hash_password(plain: str, *, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a bcrypt digest (salt and cost embedded) of the plaintext."""
    return bcrypt.hashpw(_encode_secret(plain), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Return True if the plaintext matches the digest.

    Raises only for malformed input (non-string or over-long plaintext).
    A mismatch, a missing digest or a digest bcrypt cannot parse yields False.
    """
    secret = _encode_secret(plain)
    if not isinstance(hashed, str) or not hashed:
        return False
    try:
        return bcrypt.checkpw(secret, hashed.encode("utf-8"))
    except ValueError:
        # "Invalid salt" and friends: the stored digest is not a bcrypt hash.
        return False


@lru_cache(maxsize=8)
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    # Computed once per cost factor, then reused for timing equalization.
    return hash_password("minifeed-timing-dummy", rounds=rounds)


# --- Module Notes -----------------------------------------------------------
# Callers must never log the plaintext or the digest.
