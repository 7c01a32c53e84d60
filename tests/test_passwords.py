"""
tests.test_passwords

bcrypt hashing and verification behavior.
"""

from __future__ import annotations

import pytest

from minifeed.auth.passwords import MAX_PASSWORD_BYTES, dummy_hash, hash_password, verify_password


def test_hash_is_salted_and_verifies() -> None:
    a = hash_password("s3cret", rounds=4)
    b = hash_password("s3cret", rounds=4)
    assert a != b
    assert "s3cret" not in a
    assert verify_password("s3cret", a)
    assert verify_password("s3cret", b)


def test_cost_factor_is_embedded() -> None:
    assert hash_password("pw", rounds=5).startswith("$2b$05$")


def test_wrong_password_is_false() -> None:
    digest = hash_password("right", rounds=4)
    assert verify_password("wrong", digest) is False


@pytest.mark.parametrize("digest", ["", "not-a-bcrypt-hash", "$2b$04$short", None])
def test_malformed_digest_is_false(digest) -> None:
    assert verify_password("anything", digest) is False


def test_overlong_plaintext_raises() -> None:
    too_long = "x" * (MAX_PASSWORD_BYTES + 1)
    with pytest.raises(ValueError):
        hash_password(too_long, rounds=4)
    with pytest.raises(ValueError):
        verify_password(too_long, hash_password("x", rounds=4))


def test_multibyte_length_counts_bytes() -> None:
    # 25 three-byte characters = 75 bytes.
    with pytest.raises(ValueError):
        hash_password("€" * 25, rounds=4)


def test_non_string_plaintext_raises() -> None:
    with pytest.raises(TypeError):
        verify_password(b"bytes", hash_password("x", rounds=4))  # type: ignore[arg-type]


def test_dummy_hash_is_cached_per_rounds() -> None:
    assert dummy_hash(4) is dummy_hash(4)
    assert verify_password("guess", dummy_hash(4)) is False
