"""PASERK serialization of keys and key identifiers.

A PASERK string is ``k<version>.<type>.<base64url(bytes)>``. Key identifiers
(``lid``, ``sid``, ``pid``) hash the *serialized* key together with the id header,
so an id is bound to both the version and the exact key encoding:

    digest = H("k4.lid." + "k4.local.<...>")[:33]

``H`` is BLAKE2b for the sodium-based versions and SHA-384 for the NIST ones.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .core.exceptions import FormatError
from .keys import Key, LocalKey, PublicKey, SecretKey
from .models import ID_DIGEST_SIZE, VERSION_INFO, Purpose, Version
from .registry import AlgorithmRegistry
from .utils.checks import ensure_complete
from .utils.encoding import b64d, b64e

_WRAP_TYPES = frozenset({"seal", "local-wrap", "local-pw", "secret-wrap", "secret-pw"})


class PaserkType(str, Enum):
    LOCAL = "local"
    SECRET = "secret"
    PUBLIC = "public"
    LID = "lid"
    SID = "sid"
    PID = "pid"

    @classmethod
    def parse(cls, value: str) -> "PaserkType":
        if value in _WRAP_TYPES:
            raise FormatError(f"PASERK type {value!r} is not supported")
        try:
            return cls(value)
        except ValueError as exc:
            raise FormatError(f"Unknown PASERK type: {value!r}") from exc

    @property
    def info(self) -> "PaserkTypeInfo":
        return PASERK_TYPE_INFO[self]


@dataclass(frozen=True, slots=True)
class PaserkTypeInfo:
    purpose: Purpose
    id_type: Optional[PaserkType]
    is_id: bool
    allowed_in_footer: bool


PASERK_TYPE_INFO: Mapping[PaserkType, PaserkTypeInfo] = MappingProxyType(
    {
        PaserkType.LOCAL: PaserkTypeInfo(Purpose.LOCAL, PaserkType.LID, False, False),
        PaserkType.SECRET: PaserkTypeInfo(Purpose.PUBLIC, PaserkType.SID, False, False),
        PaserkType.PUBLIC: PaserkTypeInfo(Purpose.PUBLIC, PaserkType.PID, False, False),
        PaserkType.LID: PaserkTypeInfo(Purpose.LOCAL, None, True, True),
        PaserkType.SID: PaserkTypeInfo(Purpose.PUBLIC, None, True, True),
        PaserkType.PID: PaserkTypeInfo(Purpose.PUBLIC, None, True, True),
    }
)
ensure_complete(PASERK_TYPE_INFO, PaserkType, "PaserkType")

_KEY_CLASSES = {
    PaserkType.LOCAL: LocalKey,
    PaserkType.SECRET: SecretKey,
    PaserkType.PUBLIC: PublicKey,
}


@dataclass(frozen=True, slots=True)
class KeyId:
    """A parsed or derived ``lid``/``sid``/``pid`` value."""

    version: Version
    type: PaserkType
    digest: bytes

    def __post_init__(self) -> None:
        if not self.type.info.is_id:
            raise FormatError(f"{self.type.value!r} is not a key id type")
        if len(self.digest) != ID_DIGEST_SIZE:
            raise FormatError(f"Key id digest must be {ID_DIGEST_SIZE} bytes")

    def __str__(self) -> str:
        return f"{self.version.paserk_prefix}.{self.type.value}.{b64e(self.digest)}"


def paserk_type_of(key: Key) -> PaserkType:
    if isinstance(key, LocalKey):
        return PaserkType.LOCAL
    if isinstance(key, SecretKey):
        return PaserkType.SECRET
    if isinstance(key, PublicKey):
        return PaserkType.PUBLIC
    raise TypeError(f"Unsupported key type: {type(key).__name__}")


def _split(value: str) -> Tuple[Version, PaserkType, str]:
    if not isinstance(value, str):
        raise FormatError("PASERK value must be a string")
    parts = value.split(".")
    if len(parts) != 3:
        raise FormatError("PASERK value must have exactly three segments")
    prefix, type_name, payload = parts
    return Version.from_paserk_prefix(prefix), PaserkType.parse(type_name), payload


def serialize_key(key: Key) -> str:
    paserk_type = paserk_type_of(key)
    return f"{key.version.paserk_prefix}.{paserk_type.value}.{b64e(key.material)}"


def parse_key(value: str, registry: AlgorithmRegistry | None = None) -> Key:
    """Parse a ``local``/``secret``/``public`` PASERK into a key.

    Raises :class:`FormatError` for malformed strings, id types and wrong-length
    material, and :class:`AlgorithmUnsupported` when no suite is registered for the
    version.
    """
    version, paserk_type, payload = _split(value)
    if paserk_type.info.is_id:
        raise FormatError(f"{paserk_type.value!r} is a key id, use parse_id()")
    material = b64d(payload)
    return _KEY_CLASSES[paserk_type](version, material, registry)


def parse_id(value: str) -> KeyId:
    version, paserk_type, payload = _split(value)
    if not paserk_type.info.is_id:
        raise FormatError(f"{paserk_type.value!r} is not a key id type")
    return KeyId(version, paserk_type, b64d(payload))


def derive_id(key: Key) -> KeyId:
    id_type = paserk_type_of(key).info.id_type
    if id_type is None:
        raise TypeError(f"No id type for {type(key).__name__}")
    header = f"{key.version.paserk_prefix}.{id_type.value}."
    digest = VERSION_INFO[key.version].id_digest((header + serialize_key(key)).encode("ascii"))
    return KeyId(key.version, id_type, digest)


def key_id(key: Key) -> str:
    return str(derive_id(key))


def ensure_footer_safe_kid(kid: object) -> None:
    """Reject a footer ``kid`` that carries raw key material instead of an id."""
    if not isinstance(kid, str):
        raise FormatError("Footer kid must be a string")
    parts = kid.split(".")
    if len(parts) < 2:
        return
    try:
        Version.from_paserk_prefix(parts[0])
    except FormatError:
        return
    if parts[1] in _WRAP_TYPES:
        raise FormatError("Footer kid may not carry wrapped key material")
    try:
        paserk_type = PaserkType(parts[1])
    except ValueError:
        return
    if not paserk_type.info.allowed_in_footer:
        raise FormatError(f"Footer kid may not be a {paserk_type.value!r} PASERK")


__all__ = [
    "KeyId",
    "PASERK_TYPE_INFO",
    "PaserkType",
    "PaserkTypeInfo",
    "derive_id",
    "ensure_footer_safe_kid",
    "key_id",
    "paserk_type_of",
    "parse_id",
    "parse_key",
    "serialize_key",
]
