"""Version 3 suites: AES-256-CTR with HMAC-SHA384, and ECDSA P-384."""
from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..core.exceptions import AuthenticationFailure
from ..crypto.pae import pae
from ..crypto.signing import P384_PUBLIC_SIZE, P384_SECRET_SIZE, P384_SIGNATURE_SIZE, P384Signer
from ..models import Purpose, Version
from .base import Algorithm, LocalCipher, PublicSigner

KEY_SIZE = 32
NONCE_SIZE = 32
TAG_SIZE = 48
_DERIVED_SIZE = 48
_ENCRYPTION_INFO = b"paseto-encryption-key"
_AUTH_INFO = b"paseto-auth-key-for-aead"


def _hkdf(key: bytes, info: bytes) -> bytes:
    return HKDF(algorithm=hashes.SHA384(), length=_DERIVED_SIZE, salt=None, info=info).derive(key)


def _split_keys(key: bytes, nonce: bytes) -> tuple[bytes, bytes, bytes]:
    tmp = _hkdf(key, _ENCRYPTION_INFO + nonce)
    return tmp[:32], tmp[32:], _hkdf(key, _AUTH_INFO + nonce)


def _ctr(key: bytes, counter: bytes, data: bytes) -> bytes:
    encryptor = Cipher(algorithms.AES(key), modes.CTR(counter)).encryptor()
    return encryptor.update(data) + encryptor.finalize()


class AesCtrHmacCipher(LocalCipher):
    """Encrypt-then-MAC with per-token keys derived by HKDF-SHA384."""

    def encrypt(self, *, key, nonce, header, payload, footer, implicit):
        enc_key, counter, auth_key = _split_keys(key, nonce)
        ciphertext = _ctr(enc_key, counter, payload)
        mac = hmac.HMAC(auth_key, hashes.SHA384())
        mac.update(pae(header, nonce, ciphertext, footer, implicit))
        return nonce + ciphertext + mac.finalize()

    def decrypt(self, *, key, body, header, footer, implicit):
        nonce, ciphertext, tag = body[:NONCE_SIZE], body[NONCE_SIZE:-TAG_SIZE], body[-TAG_SIZE:]
        enc_key, counter, auth_key = _split_keys(key, nonce)
        mac = hmac.HMAC(auth_key, hashes.SHA384())
        mac.update(pae(header, nonce, ciphertext, footer, implicit))
        try:
            mac.verify(tag)
        except InvalidSignature as exc:
            raise AuthenticationFailure("Token authentication failed") from exc
        return _ctr(enc_key, counter, ciphertext)


class P384Suite(PublicSigner):
    """ECDSA P-384 over ``PAE(pk, h, m, f, i)`` with the compressed public key bound in."""

    def generate(self) -> bytes:
        return P384Signer.generate_secret()

    def public_from_secret(self, secret: bytes) -> bytes:
        return P384Signer.from_secret_bytes(secret).public_bytes()

    def validate_secret(self, secret: bytes) -> None:
        P384Signer.from_secret_bytes(secret)

    def validate_public(self, public: bytes) -> None:
        P384Signer.from_public_bytes(public)

    def sign(self, *, secret, header, payload, footer, implicit):
        signer = P384Signer.from_secret_bytes(secret)
        return signer.sign(message=pae(signer.public_bytes(), header, payload, footer, implicit))

    def verify(self, *, public, header, payload, signature, footer, implicit):
        signer = P384Signer.from_public_bytes(public)
        signer.verify(message=pae(public, header, payload, footer, implicit), signature=signature)


V3_LOCAL = Algorithm(
    version=Version.V3,
    purpose=Purpose.LOCAL,
    name="aes-256-ctr-hmac-sha384",
    key_length=KEY_SIZE,
    nonce_length=NONCE_SIZE,
    tag_length=TAG_SIZE,
    implementation=AesCtrHmacCipher(),
)

V3_PUBLIC = Algorithm(
    version=Version.V3,
    purpose=Purpose.PUBLIC,
    name="ecdsa-p384-sha384",
    key_length=P384_SECRET_SIZE,
    nonce_length=0,
    tag_length=P384_SIGNATURE_SIZE,
    implementation=P384Suite(),
    public_key_length=P384_PUBLIC_SIZE,
)

ALGORITHMS = (V3_LOCAL, V3_PUBLIC)

__all__ = ["ALGORITHMS", "AesCtrHmacCipher", "P384Suite", "V3_LOCAL", "V3_PUBLIC"]
