"""Claims-level encode/decode consumed by host applications."""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Mapping, Optional

import structlog

from .claims import Claims
from .config import DEFAULT_CONFIG, AppConfig
from .core.exceptions import PasetoError
from .keys import Key, LocalKey, SecretKey
from .models import Purpose, Version
from .paserk import key_id
from .token import Token, decode_bytes, encode_bytes, footer_json

logger = structlog.get_logger(__name__)

FooterInput = Optional[bytes | str | Mapping[str, Any]]


def _footer_mapping(footer: bytes) -> Optional[Mapping[str, Any]]:
    data = footer_json(footer)
    return MappingProxyType(data) if data is not None else None


@dataclass(frozen=True, slots=True)
class DecodedToken:
    """Verified claims and footer of a decoded token."""

    claims: Claims
    footer: bytes
    version: Version
    purpose: Purpose

    @property
    def footer_claims(self) -> Optional[Mapping[str, Any]]:
        """The footer as a read-only mapping when it is a JSON object."""
        return _footer_mapping(self.footer)

    @property
    def kid(self) -> Optional[str]:
        footer_claims = self.footer_claims
        if footer_claims is None:
            return None
        kid = footer_claims.get("kid")
        return kid if isinstance(kid, str) else None


def _identifier_for(key: Key) -> str:
    if isinstance(key, SecretKey):
        return key_id(key.public_key())
    return key_id(key)


def _footer_bytes(footer: FooterInput, key: Key, include_key_id: bool) -> bytes:
    if footer is None:
        footer = {} if include_key_id else b""
    if isinstance(footer, Mapping):
        data = dict(footer)
        if include_key_id:
            data.setdefault("kid", _identifier_for(key))
        return json.dumps(data, separators=(",", ":")).encode("utf-8") if data else b""
    if include_key_id:
        raise ValueError("include_key_id requires a mapping footer")
    if isinstance(footer, str):
        return footer.encode("utf-8")
    return bytes(footer)


def encode(
    key: LocalKey | SecretKey,
    claims: Claims | Mapping[str, Any],
    footer: FooterInput = None,
    implicit_assertion: bytes = b"",
    *,
    include_key_id: bool | None = None,
    config: AppConfig | None = None,
) -> str:
    """Serialize ``claims`` and produce a ``local`` or ``public`` token for ``key``."""
    settings = (config or DEFAULT_CONFIG).tokens
    if not isinstance(claims, Claims):
        claims = Claims.from_mapping(claims)
    include = settings.include_key_id if include_key_id is None else include_key_id
    token = encode_bytes(
        key,
        claims.to_bytes(),
        _footer_bytes(footer, key, include),
        implicit_assertion,
        require_implicit_assertion=settings.require_implicit_assertion,
    )
    logger.debug("token.encoded", version=key.version.value, purpose=key.purpose.value)
    return token


def decode(
    key: Key,
    token: str | Token,
    implicit_assertion: bytes = b"",
    *,
    now: datetime | None = None,
    leeway: timedelta | None = None,
    config: AppConfig | None = None,
) -> DecodedToken:
    """Verify ``token`` with ``key`` and return its claims.

    Temporal checks run only after cryptographic verification succeeded, so
    :class:`TokenExpired` always means the token itself was authentic.
    """
    settings = (config or DEFAULT_CONFIG).tokens
    try:
        message = decode_bytes(
            key,
            token,
            implicit_assertion,
            require_implicit_assertion=settings.require_implicit_assertion,
        )
        claims = Claims.from_bytes(message.payload)
        claims.check_time(now, settings.leeway if leeway is None else leeway)
    except PasetoError as exc:
        logger.info("token.decode.failed", reason=type(exc).__name__)
        raise
    return DecodedToken(claims, message.footer, message.version, message.purpose)


__all__ = ["DecodedToken", "decode", "encode"]
