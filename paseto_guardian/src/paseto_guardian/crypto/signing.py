from __future__ import annotations

from typing import Final

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey
)
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ..core.exceptions import AuthenticationFailure, FormatError
from ..utils.checks import constant_time_compare
from .rng import random_bytes

ED25519_SEED_SIZE: Final[int] = 32
ED25519_SECRET_SIZE: Final[int] = 64
ED25519_PUBLIC_SIZE: Final[int] = 32
ED25519_SIGNATURE_SIZE: Final[int] = 64

P384_SECRET_SIZE: Final[int] = 48
P384_PUBLIC_SIZE: Final[int] = 49
P384_SIGNATURE_SIZE: Final[int] = 96
_P384_COORDINATE_SIZE: Final[int] = 48


def _raw_public(public_key: Ed25519PublicKey) -> bytes:
    return public_key.public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)


class Ed25519Signer:
    """Ed25519 over 64-byte secret keys (seed || public key) with normalized errors"""

    def __init__(self, *, private_key: Ed25519PrivateKey | None = None, public_key: Ed25519PublicKey | None = None) -> None:
        if not private_key and not public_key:
            raise ValueError("At least one of private_key or public_key is required")
        self._private_key = private_key
        self._public_key = public_key or private_key.public_key()  # type: ignore[union-attr]

    @staticmethod
    def generate_secret() -> bytes:
        return Ed25519Signer.secret_from_seed(random_bytes(ED25519_SEED_SIZE))

    @staticmethod
    def secret_from_seed(seed: bytes) -> bytes:
        if len(seed) != ED25519_SEED_SIZE:
            raise FormatError("Ed25519 seed must be 32 bytes")
        private_key = Ed25519PrivateKey.from_private_bytes(seed)
        return seed + _raw_public(private_key.public_key())

    @classmethod
    def from_secret_bytes(cls, data: bytes) -> Ed25519Signer:
        if len(data) != ED25519_SECRET_SIZE:
            raise FormatError("Ed25519 secret key must be 64 bytes")
        seed, public = data[:ED25519_SEED_SIZE], data[ED25519_SEED_SIZE:]
        private_key = Ed25519PrivateKey.from_private_bytes(seed)
        if not constant_time_compare(_raw_public(private_key.public_key()), public):
            raise FormatError("Ed25519 secret key does not match its public half")
        return cls(private_key=private_key)

    @classmethod
    def from_public_bytes(cls, data: bytes) -> Ed25519Signer:
        if len(data) != ED25519_PUBLIC_SIZE:
            raise FormatError("Ed25519 public key must be 32 bytes")
        try:
            return cls(public_key=Ed25519PublicKey.from_public_bytes(data))
        except ValueError as exc:
            raise FormatError("Invalid Ed25519 public key") from exc

    def public_bytes(self) -> bytes:
        return _raw_public(self._public_key)

    def sign(self, *, message: bytes) -> bytes:
        if not self._private_key:
            raise ValueError("Signing requested without private key material")
        return self._private_key.sign(message)

    def verify(self, *, message: bytes, signature: bytes) -> None:
        try:
            self._public_key.verify(signature, message)
        except InvalidSignature as exc:
            raise AuthenticationFailure("Signature verification failed") from exc


class P384Signer:
    """ECDSA P-384 / SHA-384 with raw scalars, compressed points and r || s signatures"""

    def __init__(
        self,
        *,
        private_key: ec.EllipticCurvePrivateKey | None = None,
        public_key: ec.EllipticCurvePublicKey | None = None,
    ) -> None:
        if not private_key and not public_key:
            raise ValueError("At least one of private_key or public_key is required")
        self._private_key = private_key
        self._public_key = public_key or private_key.public_key()  # type: ignore[union-attr]

    @staticmethod
    def generate_secret() -> bytes:
        private_key = ec.generate_private_key(ec.SECP384R1())
        return private_key.private_numbers().private_value.to_bytes(P384_SECRET_SIZE, "big")

    @classmethod
    def from_secret_bytes(cls, data: bytes) -> P384Signer:
        if len(data) != P384_SECRET_SIZE:
            raise FormatError("P-384 secret key must be 48 bytes")
        try:
            private_key = ec.derive_private_key(int.from_bytes(data, "big"), ec.SECP384R1())
        except ValueError as exc:
            raise FormatError("Invalid P-384 secret scalar") from exc
        return cls(private_key=private_key)

    @classmethod
    def from_public_bytes(cls, data: bytes) -> P384Signer:
        if len(data) != P384_PUBLIC_SIZE or data[0] not in (0x02, 0x03):
            raise FormatError("P-384 public key must be a 49-byte compressed point")
        try:
            public_key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP384R1(), data)
        except ValueError as exc:
            raise FormatError("Invalid P-384 public key") from exc
        return cls(public_key=public_key)

    def public_bytes(self) -> bytes:
        return self._public_key.public_bytes(
            serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
        )

    def sign(self, *, message: bytes) -> bytes:
        if not self._private_key:
            raise ValueError("Signing requested without private key material")
        der = self._private_key.sign(message, ec.ECDSA(hashes.SHA384()))
        r, s = decode_dss_signature(der)
        return r.to_bytes(_P384_COORDINATE_SIZE, "big") + s.to_bytes(_P384_COORDINATE_SIZE, "big")

    def verify(self, *, message: bytes, signature: bytes) -> None:
        if len(signature) != P384_SIGNATURE_SIZE:
            raise AuthenticationFailure("Signature verification failed")
        r = int.from_bytes(signature[:_P384_COORDINATE_SIZE], "big")
        s = int.from_bytes(signature[_P384_COORDINATE_SIZE:], "big")
        try:
            self._public_key.verify(encode_dss_signature(r, s), message, ec.ECDSA(hashes.SHA384()))
        except InvalidSignature as exc:
            raise AuthenticationFailure("Signature verification failed") from exc
