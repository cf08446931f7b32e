"""Protocol versions, purposes and their static descriptors."""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping

from .core.exceptions import FormatError
from .utils.checks import ensure_complete

ID_DIGEST_SIZE = 33


class Version(str, Enum):
    V1 = "v1"
    V2 = "v2"
    V3 = "v3"
    V4 = "v4"

    @property
    def paserk_prefix(self) -> str:
        return VERSION_INFO[self].paserk_prefix

    @classmethod
    def parse(cls, value: "Version | str") -> "Version":
        try:
            return cls(value)
        except ValueError as exc:
            raise FormatError(f"Unknown PASETO version: {value!r}") from exc

    @classmethod
    def from_paserk_prefix(cls, prefix: str) -> "Version":
        for version, info in VERSION_INFO.items():
            if info.paserk_prefix == prefix:
                return version
        raise FormatError(f"Unknown PASERK version: {prefix!r}")


class Purpose(str, Enum):
    LOCAL = "local"
    PUBLIC = "public"

    @classmethod
    def parse(cls, value: "Purpose | str") -> "Purpose":
        try:
            return cls(value)
        except ValueError as exc:
            raise FormatError(f"Unknown PASETO purpose: {value!r}") from exc


def _blake2b_digest(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=ID_DIGEST_SIZE).digest()


def _sha384_digest(data: bytes) -> bytes:
    return hashlib.sha384(data).digest()[:ID_DIGEST_SIZE]


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """Per-version constants that do not depend on the registered algorithms."""

    paserk_prefix: str
    id_digest: Callable[[bytes], bytes]


VERSION_INFO: Mapping[Version, VersionInfo] = MappingProxyType(
    {
        Version.V1: VersionInfo("k1", _sha384_digest),
        Version.V2: VersionInfo("k2", _blake2b_digest),
        Version.V3: VersionInfo("k3", _sha384_digest),
        Version.V4: VersionInfo("k4", _blake2b_digest),
    }
)
ensure_complete(VERSION_INFO, Version, "Version")


def token_header(version: Version, purpose: Purpose) -> str:
    """Return the ``<version>.<purpose>.`` prefix shared by every token of the pair."""
    return f"{version.value}.{purpose.value}."


__all__ = [
    "ID_DIGEST_SIZE",
    "Purpose",
    "VERSION_INFO",
    "Version",
    "VersionInfo",
    "token_header",
]
