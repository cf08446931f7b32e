"""Version 4 suites: XChaCha20 with keyed BLAKE2b, and Ed25519."""
from __future__ import annotations

import hashlib

from ..core.exceptions import AuthenticationFailure
from ..crypto.pae import pae
from ..crypto.signing import ED25519_PUBLIC_SIZE, ED25519_SECRET_SIZE, ED25519_SIGNATURE_SIZE
from ..crypto.xchacha import xchacha20_xor
from ..models import Purpose, Version
from ..utils.checks import constant_time_compare
from .base import Algorithm, LocalCipher
from .v2 import Ed25519Suite

KEY_SIZE = 32
NONCE_SIZE = 32
TAG_SIZE = 32
_ENCRYPTION_INFO = b"paseto-encryption-key"
_AUTH_INFO = b"paseto-auth-key-for-aead"


def _split_keys(key: bytes, nonce: bytes) -> tuple[bytes, bytes, bytes]:
    tmp = hashlib.blake2b(_ENCRYPTION_INFO + nonce, key=key, digest_size=56).digest()
    auth_key = hashlib.blake2b(_AUTH_INFO + nonce, key=key, digest_size=32).digest()
    return tmp[:32], tmp[32:], auth_key


def _tag(auth_key: bytes, *parts: bytes) -> bytes:
    return hashlib.blake2b(pae(*parts), key=auth_key, digest_size=TAG_SIZE).digest()


class XChaCha20Blake2bCipher(LocalCipher):
    """Encrypt-then-MAC with XChaCha20 and a keyed BLAKE2b-256 tag."""

    def encrypt(self, *, key, nonce, header, payload, footer, implicit):
        enc_key, stream_nonce, auth_key = _split_keys(key, nonce)
        ciphertext = xchacha20_xor(enc_key, stream_nonce, payload)
        return nonce + ciphertext + _tag(auth_key, header, nonce, ciphertext, footer, implicit)

    def decrypt(self, *, key, body, header, footer, implicit):
        nonce, ciphertext, tag = body[:NONCE_SIZE], body[NONCE_SIZE:-TAG_SIZE], body[-TAG_SIZE:]
        enc_key, stream_nonce, auth_key = _split_keys(key, nonce)
        expected = _tag(auth_key, header, nonce, ciphertext, footer, implicit)
        if not constant_time_compare(expected, tag):
            raise AuthenticationFailure("Token authentication failed")
        return xchacha20_xor(enc_key, stream_nonce, ciphertext)


class Ed25519ImplicitSuite(Ed25519Suite):
    bind_implicit = True


V4_LOCAL = Algorithm(
    version=Version.V4,
    purpose=Purpose.LOCAL,
    name="xchacha20-blake2b",
    key_length=KEY_SIZE,
    nonce_length=NONCE_SIZE,
    tag_length=TAG_SIZE,
    implementation=XChaCha20Blake2bCipher(),
)

V4_PUBLIC = Algorithm(
    version=Version.V4,
    purpose=Purpose.PUBLIC,
    name="ed25519",
    key_length=ED25519_SECRET_SIZE,
    nonce_length=0,
    tag_length=ED25519_SIGNATURE_SIZE,
    implementation=Ed25519ImplicitSuite(),
    public_key_length=ED25519_PUBLIC_SIZE,
)

ALGORITHMS = (V4_LOCAL, V4_PUBLIC)

__all__ = ["ALGORITHMS", "Ed25519ImplicitSuite", "V4_LOCAL", "V4_PUBLIC", "XChaCha20Blake2bCipher"]
