"""Typed key values for local, secret and public purposes.

The three classes form a closed set; code that branches on key kind should match
all three and raise ``TypeError`` otherwise. Keys are immutable, validate their
material against the registered algorithm on construction and never reveal their
bytes in ``repr``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from .core.exceptions import FormatError
from .crypto.rng import random_bytes
from .models import Purpose, Version
from .protocol.base import Algorithm, PublicSigner
from .registry import DEFAULT_REGISTRY, AlgorithmRegistry
from .utils.checks import constant_time_compare


@dataclass(frozen=True, eq=False, repr=False)
class _BaseKey:
    kind: ClassVar[str]
    purpose: ClassVar[Purpose]

    version: Version
    material: bytes
    registry: Optional[AlgorithmRegistry] = field(default=None, compare=False)
    algorithm: Algorithm = field(init=False, compare=False)

    def __post_init__(self) -> None:
        registry = self.registry or DEFAULT_REGISTRY
        if not isinstance(self.material, (bytes, bytearray, memoryview)):
            raise TypeError(f"{type(self).__name__} material must be bytes")
        object.__setattr__(self, "version", Version.parse(self.version))
        object.__setattr__(self, "material", bytes(self.material))
        object.__setattr__(self, "registry", registry)
        object.__setattr__(self, "algorithm", registry.resolve(self.version, self.purpose))
        expected = self._expected_length()
        if len(self.material) != expected:
            raise FormatError(
                f"{self.version.value} {self.kind} key must be {expected} bytes, got {len(self.material)}"
            )
        self._validate()

    def _expected_length(self) -> int:
        return self.algorithm.key_length

    def _validate(self) -> None:
        return None

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.version is other.version and constant_time_compare(self.material, other.material)

    def __hash__(self) -> int:
        return hash((self.kind, self.version, self.material))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(version={self.version.value!r}, material=<redacted {len(self.material)} bytes>)"


@dataclass(frozen=True, eq=False, repr=False)
class LocalKey(_BaseKey):
    """Symmetric key for ``local`` tokens."""

    kind: ClassVar[str] = "local"
    purpose: ClassVar[Purpose] = Purpose.LOCAL

    @classmethod
    def generate(cls, version: Version | str, registry: AlgorithmRegistry | None = None) -> "LocalKey":
        registry = registry or DEFAULT_REGISTRY
        algorithm = registry.resolve(version, Purpose.LOCAL)
        return cls(algorithm.version, random_bytes(algorithm.key_length), registry)


@dataclass(frozen=True, eq=False, repr=False)
class SecretKey(_BaseKey):
    """Signing key for ``public`` tokens."""

    kind: ClassVar[str] = "secret"
    purpose: ClassVar[Purpose] = Purpose.PUBLIC

    def _validate(self) -> None:
        _signer(self.algorithm).validate_secret(self.material)

    @classmethod
    def generate(cls, version: Version | str, registry: AlgorithmRegistry | None = None) -> "SecretKey":
        registry = registry or DEFAULT_REGISTRY
        algorithm = registry.resolve(version, Purpose.PUBLIC)
        return cls(algorithm.version, _signer(algorithm).generate(), registry)

    @classmethod
    def from_seed(
        cls, version: Version | str, seed: bytes, registry: AlgorithmRegistry | None = None
    ) -> "SecretKey":
        """Expand a seed into a full secret key where the suite defines one (Ed25519)."""
        registry = registry or DEFAULT_REGISTRY
        algorithm = registry.resolve(version, Purpose.PUBLIC)
        return cls(algorithm.version, _signer(algorithm).from_seed(bytes(seed)), registry)

    def public_key(self) -> "PublicKey":
        public = _signer(self.algorithm).public_from_secret(self.material)
        return PublicKey(self.version, public, self.registry)


@dataclass(frozen=True, eq=False, repr=False)
class PublicKey(_BaseKey):
    """Verification key for ``public`` tokens."""

    kind: ClassVar[str] = "public"
    purpose: ClassVar[Purpose] = Purpose.PUBLIC

    def _expected_length(self) -> int:
        return self.algorithm.public_key_length

    def _validate(self) -> None:
        _signer(self.algorithm).validate_public(self.material)


def _signer(algorithm: Algorithm) -> PublicSigner:
    implementation = algorithm.implementation
    if not isinstance(implementation, PublicSigner):
        raise TypeError(f"{algorithm.header} is not a signature suite")
    return implementation


Key = Union[LocalKey, SecretKey, PublicKey]

__all__ = ["Key", "LocalKey", "PublicKey", "SecretKey"]
