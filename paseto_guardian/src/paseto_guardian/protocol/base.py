"""Algorithm descriptors and the interfaces suite implementations provide.

An :class:`Algorithm` is the immutable value the registry hands out for a
``(version, purpose)`` pair. The actual primitive lives in its ``implementation``
object, which is a :class:`LocalCipher` for ``local`` suites and a
:class:`PublicSigner` for ``public`` suites.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.exceptions import AlgorithmUnsupported
from ..models import Purpose, Version, token_header


class AlgorithmKind(str, Enum):
    AEAD = "aead"
    SIGNATURE = "signature"


class LocalCipher:
    """Protocol-like base class for symmetric suites."""

    def encrypt(
        self, *, key: bytes, nonce: bytes, header: bytes, payload: bytes, footer: bytes, implicit: bytes
    ) -> bytes:  # pragma: no cover - protocol
        """Return the token body (nonce, ciphertext and tag) for ``payload``."""
        raise NotImplementedError

    def decrypt(
        self, *, key: bytes, body: bytes, header: bytes, footer: bytes, implicit: bytes
    ) -> bytes:  # pragma: no cover - protocol
        """Authenticate and decrypt ``body``; raise ``AuthenticationFailure`` on any mismatch."""
        raise NotImplementedError


class PublicSigner:
    """Protocol-like base class for signature suites."""

    def generate(self) -> bytes:  # pragma: no cover - protocol
        raise NotImplementedError

    def from_seed(self, seed: bytes) -> bytes:
        raise AlgorithmUnsupported(f"{type(self).__name__} cannot derive a secret key from a seed")

    def public_from_secret(self, secret: bytes) -> bytes:  # pragma: no cover - protocol
        raise NotImplementedError

    def validate_secret(self, secret: bytes) -> None:  # pragma: no cover - protocol
        raise NotImplementedError

    def validate_public(self, public: bytes) -> None:  # pragma: no cover - protocol
        raise NotImplementedError

    def sign(
        self, *, secret: bytes, header: bytes, payload: bytes, footer: bytes, implicit: bytes
    ) -> bytes:  # pragma: no cover - protocol
        raise NotImplementedError

    def verify(
        self, *, public: bytes, header: bytes, payload: bytes, signature: bytes, footer: bytes, implicit: bytes
    ) -> None:  # pragma: no cover - protocol
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Algorithm:
    """Immutable description of the primitive bound to one ``(version, purpose)`` pair.

    ``key_length`` is the local key length for ``local`` suites and the secret key
    length for ``public`` suites. ``tag_length`` is the MAC/AEAD tag length or the
    signature length. ``nonce_length`` is 0 for signature suites.
    """

    version: Version
    purpose: Purpose
    name: str
    key_length: int
    nonce_length: int
    tag_length: int
    implementation: LocalCipher | PublicSigner
    public_key_length: int = 0
    implicit_assertion: bool = True

    def __post_init__(self) -> None:
        expected = LocalCipher if self.purpose is Purpose.LOCAL else PublicSigner
        if not isinstance(self.implementation, expected):
            raise TypeError(
                f"{self.header}{self.name} requires a {expected.__name__} implementation"
            )
        if self.key_length <= 0 or self.tag_length <= 0 or self.nonce_length < 0:
            raise ValueError(f"{self.header}{self.name} has invalid lengths")
        if self.purpose is Purpose.PUBLIC and self.public_key_length <= 0:
            raise ValueError(f"{self.header}{self.name} requires a public key length")

    @property
    def kind(self) -> AlgorithmKind:
        return AlgorithmKind.AEAD if self.purpose is Purpose.LOCAL else AlgorithmKind.SIGNATURE

    @property
    def header(self) -> str:
        return token_header(self.version, self.purpose)


__all__ = ["Algorithm", "AlgorithmKind", "LocalCipher", "PublicSigner"]
