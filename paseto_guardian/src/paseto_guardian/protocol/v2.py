"""Version 2 suites: XChaCha20-Poly1305 and Ed25519.

Version 2 predates implicit assertions, so neither suite binds one.
"""
from __future__ import annotations

import hashlib

from cryptography.exceptions import InvalidTag

from ..core.exceptions import AuthenticationFailure
from ..crypto.pae import pae
from ..crypto.signing import (
    ED25519_PUBLIC_SIZE,
    ED25519_SECRET_SIZE,
    ED25519_SIGNATURE_SIZE,
    Ed25519Signer,
)
from ..crypto.xchacha import KEY_SIZE, NONCE_SIZE, TAG_SIZE, XChaCha20Poly1305
from ..models import Purpose, Version
from .base import Algorithm, LocalCipher, PublicSigner


class XChaCha20Poly1305Cipher(LocalCipher):
    """AEAD with a nonce derived from the payload under a random BLAKE2b key."""

    def encrypt(self, *, key, nonce, header, payload, footer, implicit):
        # the random bytes key the hash; the hash output is the nonce
        derived = hashlib.blake2b(payload, key=nonce, digest_size=NONCE_SIZE).digest()
        ciphertext = XChaCha20Poly1305(key).encrypt(derived, payload, pae(header, derived, footer))
        return derived + ciphertext

    def decrypt(self, *, key, body, header, footer, implicit):
        nonce, ciphertext = body[:NONCE_SIZE], body[NONCE_SIZE:]
        try:
            return XChaCha20Poly1305(key).decrypt(nonce, ciphertext, pae(header, nonce, footer))
        except InvalidTag as exc:
            raise AuthenticationFailure("Token authentication failed") from exc


class Ed25519Suite(PublicSigner):
    """Ed25519 over ``PAE(h, m, f)``, extended with ``i`` when ``bind_implicit`` is set."""

    bind_implicit = False

    def generate(self) -> bytes:
        return Ed25519Signer.generate_secret()

    def from_seed(self, seed: bytes) -> bytes:
        return Ed25519Signer.secret_from_seed(seed)

    def public_from_secret(self, secret: bytes) -> bytes:
        return Ed25519Signer.from_secret_bytes(secret).public_bytes()

    def validate_secret(self, secret: bytes) -> None:
        Ed25519Signer.from_secret_bytes(secret)

    def validate_public(self, public: bytes) -> None:
        Ed25519Signer.from_public_bytes(public)

    def _message(self, header: bytes, payload: bytes, footer: bytes, implicit: bytes) -> bytes:
        if self.bind_implicit:
            return pae(header, payload, footer, implicit)
        return pae(header, payload, footer)

    def sign(self, *, secret, header, payload, footer, implicit):
        signer = Ed25519Signer.from_secret_bytes(secret)
        return signer.sign(message=self._message(header, payload, footer, implicit))

    def verify(self, *, public, header, payload, signature, footer, implicit):
        signer = Ed25519Signer.from_public_bytes(public)
        signer.verify(message=self._message(header, payload, footer, implicit), signature=signature)


V2_LOCAL = Algorithm(
    version=Version.V2,
    purpose=Purpose.LOCAL,
    name="xchacha20-poly1305",
    key_length=KEY_SIZE,
    nonce_length=NONCE_SIZE,
    tag_length=TAG_SIZE,
    implementation=XChaCha20Poly1305Cipher(),
    implicit_assertion=False,
)

V2_PUBLIC = Algorithm(
    version=Version.V2,
    purpose=Purpose.PUBLIC,
    name="ed25519",
    key_length=ED25519_SECRET_SIZE,
    nonce_length=0,
    tag_length=ED25519_SIGNATURE_SIZE,
    implementation=Ed25519Suite(),
    public_key_length=ED25519_PUBLIC_SIZE,
    implicit_assertion=False,
)

ALGORITHMS = (V2_LOCAL, V2_PUBLIC)

__all__ = ["ALGORITHMS", "Ed25519Suite", "V2_LOCAL", "V2_PUBLIC", "XChaCha20Poly1305Cipher"]
