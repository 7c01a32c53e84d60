"""
minifeed.auth.keys

RSA key material for token signing and verification.

Responsibilities:
- Load the public/private key pair once from settings (inline PEM or files).
- Reject malformed or mismatched keys before the service starts serving.
- Keep the private key reachable only through the signing accessor used by the issuer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from minifeed.errors import KeyMaterialError
from minifeed.observability.logging import get_logger
from minifeed.settings import Settings

log = get_logger(__name__)

_EPHEMERAL_KEY_SIZE = 2048


@dataclass(frozen=True, slots=True)
class KeyMaterial:
    """
    Immutable key pair held for the lifetime of the process (no rotation).
    """

    public_key: rsa.RSAPublicKey
    _private_key: rsa.RSAPrivateKey = field(repr=False)

    def signing_key(self) -> rsa.RSAPrivateKey:
        return self._private_key

    @classmethod
    def from_pem(cls, *, public_pem: bytes, private_pem: bytes) -> KeyMaterial:
        try:
            public_key = serialization.load_pem_public_key(public_pem)
            private_key = serialization.load_pem_private_key(private_pem, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyMaterialError(f"unreadable PEM key material: {e}") from e

        if not isinstance(public_key, rsa.RSAPublicKey) or not isinstance(
            private_key, rsa.RSAPrivateKey
        ):
            raise KeyMaterialError("key material must be an RSA key pair")
        if private_key.public_key().public_numbers() != public_key.public_numbers():
            raise KeyMaterialError("public key does not match private key")
        return cls(public_key=public_key, _private_key=private_key)

    @classmethod
    def generate(cls, key_size: int = _EPHEMERAL_KEY_SIZE) -> KeyMaterial:
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        return cls(public_key=private_key.public_key(), _private_key=private_key)


def _read_pem(inline: str | None, path: str | None, *, label: str) -> bytes | None:
    if inline:
        # Env vars often carry PEM with escaped newlines.
        return inline.replace("\\n", "\n").encode("utf-8")
    if path:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise KeyMaterialError(f"cannot read {label} key file {path!r}: {e}") from e
    return None


def load_key_material(settings: Settings) -> KeyMaterial:
    """
    Build the process-wide key pair.

    Missing keys are tolerated only in dev/test, where an ephemeral pair is
    generated (tokens then do not survive a restart). Anything else is fatal.
    """

    public_pem = _read_pem(settings.jwt_public_key, settings.jwt_public_key_file, label="public")
    private_pem = _read_pem(
        settings.jwt_private_key, settings.jwt_private_key_file, label="private"
    )

    if public_pem is None and private_pem is None:
        if settings.env == "prod":
            raise KeyMaterialError("no JWT key pair configured")
        log.warning("keys_generated_ephemeral", env=settings.env)
        return KeyMaterial.generate()

    if public_pem is None or private_pem is None:
        raise KeyMaterialError("both public and private JWT keys must be configured")
    return KeyMaterial.from_pem(public_pem=public_pem, private_pem=private_pem)


# --- Module Notes -----------------------------------------------------------
# The verifier only ever reads `public_key`; `signing_key()` is for `jwt.TokenIssuer`.
