"""Byte-level token codec.

Encoding and decoding are short linear pipelines. Decoding always runs the
structural checks (segment count, header, base64url, body length) before a key or
primitive is touched, and the key must match the token header exactly.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Collection, Dict, Optional

from .core.exceptions import FormatError, ImplicitAssertionError, KeyMismatch
from .crypto.rng import random_bytes
from .keys import Key, LocalKey, PublicKey, SecretKey
from .models import Purpose, Version, token_header
from .paserk import ensure_footer_safe_kid
from .protocol.base import Algorithm, LocalCipher, PublicSigner
from .utils.encoding import b64d, b64e, check_json_limits, is_json_object

MAX_FOOTER_DEPTH = 8
MAX_FOOTER_KEYS = 512


@dataclass(frozen=True, slots=True)
class Token:
    """Parsed ``<version>.<purpose>.<body>[.<footer>]`` string. Nothing here is verified."""

    version: Version
    purpose: Purpose
    body: bytes
    footer: bytes = b""

    @property
    def header(self) -> str:
        return token_header(self.version, self.purpose)

    @classmethod
    def parse(cls, value: str) -> "Token":
        if not isinstance(value, str):
            raise FormatError("Token must be a string")
        if not value.isascii():
            raise FormatError("Token must be ASCII")
        parts = value.split(".")
        if len(parts) not in (3, 4):
            raise FormatError("Token must have three or four segments")
        version = Version.parse(parts[0])
        purpose = Purpose.parse(parts[1])
        body = b64d(parts[2])
        footer = b""
        if len(parts) == 4:
            if not parts[3]:
                raise FormatError("Empty footer segment")
            footer = b64d(parts[3])
        return cls(version, purpose, body, footer)

    def __str__(self) -> str:
        token = self.header + b64e(self.body)
        if self.footer:
            token += "." + b64e(self.footer)
        return token


@dataclass(frozen=True, slots=True)
class TokenMessage:
    payload: bytes
    footer: bytes
    version: Version
    purpose: Purpose


def peek_footer(token: str) -> bytes:
    """Return the footer of an unverified token.

    The result is untrusted until the token has been decoded; use it only to pick
    the key for :func:`decode_bytes`.
    """
    return Token.parse(token).footer


def _as_bytes(value: bytes, label: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{label} must be bytes")
    return bytes(value)


def _check_implicit(algorithm: Algorithm, implicit: bytes, required: Collection[Version]) -> None:
    if implicit and not algorithm.implicit_assertion:
        raise ImplicitAssertionError(f"{algorithm.header} cannot bind an implicit assertion")
    if not implicit and algorithm.version in required:
        raise ImplicitAssertionError(f"{algorithm.header} requires an implicit assertion")


def footer_json(footer: bytes) -> Optional[Dict[str, Any]]:
    """Return the footer as a dict when it holds a JSON object, else ``None``.

    Footers that open like a JSON object must stay within ``MAX_FOOTER_DEPTH`` and
    ``MAX_FOOTER_KEYS``; anything else is treated as opaque bytes.
    """
    if not is_json_object(footer):
        return None
    check_json_limits(footer, max_depth=MAX_FOOTER_DEPTH, max_keys=MAX_FOOTER_KEYS)
    try:
        data = json.loads(footer.decode("utf-8"))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _check_footer(footer: bytes) -> None:
    data = footer_json(footer)
    if data is not None and "kid" in data:
        ensure_footer_safe_kid(data["kid"])


def encode_bytes(
    key: Key,
    payload: bytes,
    footer: bytes = b"",
    implicit_assertion: bytes = b"",
    *,
    require_implicit_assertion: Collection[Version] = (),
) -> str:
    payload = _as_bytes(payload, "payload")
    footer = _as_bytes(footer, "footer")
    implicit = _as_bytes(implicit_assertion, "implicit_assertion")
    if isinstance(key, PublicKey):
        raise KeyMismatch("Public keys cannot create tokens")
    if not isinstance(key, (LocalKey, SecretKey)):
        raise TypeError(f"Unsupported key type: {type(key).__name__}")

    algorithm = key.registry.resolve(key.version, key.purpose)
    _check_implicit(algorithm, implicit, require_implicit_assertion)
    _check_footer(footer)
    header = algorithm.header.encode("ascii")
    implementation = algorithm.implementation

    if isinstance(implementation, LocalCipher):
        body = implementation.encrypt(
            key=key.material,
            nonce=random_bytes(algorithm.nonce_length),
            header=header,
            payload=payload,
            footer=footer,
            implicit=implicit,
        )
    elif isinstance(implementation, PublicSigner):
        signature = implementation.sign(
            secret=key.material, header=header, payload=payload, footer=footer, implicit=implicit
        )
        body = payload + signature
    else:
        raise TypeError(f"Unsupported implementation for {algorithm.header}")
    return str(Token(algorithm.version, algorithm.purpose, body, footer))


def decode_bytes(
    key: Key,
    token: str | Token,
    implicit_assertion: bytes = b"",
    *,
    require_implicit_assertion: Collection[Version] = (),
) -> TokenMessage:
    parsed = token if isinstance(token, Token) else Token.parse(token)
    implicit = _as_bytes(implicit_assertion, "implicit_assertion")
    if not isinstance(key, (LocalKey, SecretKey, PublicKey)):
        raise TypeError(f"Unsupported key type: {type(key).__name__}")

    algorithm = key.registry.resolve(parsed.version, parsed.purpose)
    if isinstance(key, SecretKey):
        raise KeyMismatch("Secret keys cannot verify tokens, use the public key")
    if key.version is not parsed.version or key.purpose is not parsed.purpose:
        raise KeyMismatch(
            f"{key.version.value} {key.kind} key cannot decode a {parsed.header} token"
        )
    _check_implicit(algorithm, implicit, require_implicit_assertion)
    _check_footer(parsed.footer)
    header = algorithm.header.encode("ascii")
    implementation = algorithm.implementation

    if isinstance(implementation, LocalCipher):
        if len(parsed.body) < algorithm.nonce_length + algorithm.tag_length:
            raise FormatError("Token body is too short")
        payload = implementation.decrypt(
            key=key.material, body=parsed.body, header=header, footer=parsed.footer, implicit=implicit
        )
    elif isinstance(implementation, PublicSigner):
        if len(parsed.body) < algorithm.tag_length:
            raise FormatError("Token body is too short")
        payload, signature = parsed.body[: -algorithm.tag_length], parsed.body[-algorithm.tag_length :]
        implementation.verify(
            public=key.material,
            header=header,
            payload=payload,
            signature=signature,
            footer=parsed.footer,
            implicit=implicit,
        )
    else:
        raise TypeError(f"Unsupported implementation for {algorithm.header}")
    return TokenMessage(payload, parsed.footer, parsed.version, parsed.purpose)


__all__ = [
    "MAX_FOOTER_DEPTH",
    "MAX_FOOTER_KEYS",
    "Token",
    "TokenMessage",
    "decode_bytes",
    "encode_bytes",
    "footer_json",
    "peek_footer",
]
