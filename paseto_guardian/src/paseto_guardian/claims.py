"""Token claims serialized as compact JSON payloads."""
from __future__ import annotations

import json
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .core.exceptions import FormatError, TokenExpired, TokenNotYetValid
from .crypto.rng import random_bytes
from .utils.encoding import b64e, load_json

RESERVED_CLAIMS = ("iss", "sub", "aud", "exp", "nbf", "iat", "jti")
TIMESTAMP_CLAIMS = ("exp", "nbf", "iat")
DEFAULT_TTL = timedelta(minutes=10)

_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})"
)
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Timestamps must be timezone-aware")
    return value.astimezone(timezone.utc).replace(microsecond=0)


def _parse_timestamp(value: str) -> datetime:
    if _RFC3339.fullmatch(value) is None:
        raise ValueError(f"Not an RFC 3339 date-time: {value!r}")
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    # fromisoformat wants exactly six fractional digits on older interpreters
    head, sep, tail = normalized.partition(".")
    if sep:
        offset_at = max(tail.rfind("+"), tail.rfind("-"))
        fraction = tail[:offset_at][:6].ljust(6, "0")
        normalized = f"{head}.{fraction}{tail[offset_at:]}"
    return datetime.fromisoformat(normalized)


class Claims(BaseModel):
    """Reserved PASETO claims plus arbitrary custom claims.

    ``exp``, ``nbf`` and ``iat`` are timezone-aware UTC datetimes truncated to whole
    seconds. Custom claims are kept as extra fields and must be JSON values.
    """

    iss: Optional[str] = None
    sub: Optional[str] = None
    aud: Optional[str] = None
    exp: Optional[datetime] = None
    nbf: Optional[datetime] = None
    iat: Optional[datetime] = None
    jti: Optional[str] = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator(*TIMESTAMP_CLAIMS, mode="before")
    @classmethod
    def _validate_timestamp(cls, value: Any) -> Optional[datetime]:
        if value is None:
            return None
        if isinstance(value, datetime):
            return _to_utc(value)
        if isinstance(value, str):
            return _to_utc(_parse_timestamp(value))
        raise ValueError("Timestamps must be RFC 3339 strings or datetimes")

    @classmethod
    def issue(
        cls,
        *,
        now: datetime | None = None,
        ttl: timedelta = DEFAULT_TTL,
        exp: datetime | None = None,
        nbf: datetime | None = None,
        iss: str | None = None,
        sub: str | None = None,
        aud: str | None = None,
        jti: str | None = None,
        **custom: Any,
    ) -> "Claims":
        """Build claims for a fresh token: ``iat=now``, ``nbf=iat``, ``exp=iat+ttl``."""
        reserved = sorted(set(custom) & set(RESERVED_CLAIMS))
        if reserved:
            raise ValueError(f"Reserved claims cannot be passed as custom claims: {', '.join(reserved)}")
        iat = _to_utc(now or datetime.now(tz=timezone.utc))
        not_before = _to_utc(nbf) if nbf else iat
        expires = _to_utc(exp) if exp else iat + ttl
        if expires <= iat or expires <= not_before:
            raise ValueError("Expiration must be after issued-at and not-before")
        return cls(
            iss=iss,
            sub=sub,
            aud=aud,
            iat=iat,
            nbf=not_before,
            exp=expires,
            jti=jti or b64e(random_bytes(16)),
            **custom,
        )

    @property
    def custom(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    def __getitem__(self, name: str) -> Any:
        if name in RESERVED_CLAIMS:
            value = getattr(self, name)
            if value is None:
                raise KeyError(name)
            return value
        return self.custom[name]

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in RESERVED_CLAIMS:
            value = getattr(self, name)
            if value is None:
                continue
            data[name] = value.strftime(_TIMESTAMP_FORMAT) if isinstance(value, datetime) else value
        data.update(self.custom)
        return data

    def to_bytes(self) -> bytes:
        try:
            return json.dumps(self.as_dict(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise FormatError("Claims are not JSON serializable") from exc

    @classmethod
    def from_bytes(cls, payload: bytes) -> "Claims":
        return cls.from_mapping(load_json(payload))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Claims":
        if not isinstance(data, Mapping):
            raise FormatError("Claims payload must be a JSON object")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise FormatError(f"Invalid claims: {exc.error_count()} error(s)") from exc

    def check_time(self, now: datetime | None = None, leeway: timedelta = timedelta(0)) -> None:
        """Raise if the claims are expired or not yet valid at ``now``.

        A token whose ``exp`` equals ``now`` is already expired.
        """
        current = now or datetime.now(tz=timezone.utc)
        if current.tzinfo is None:
            raise ValueError("now must be timezone-aware")
        if self.exp is not None and current >= self.exp + leeway:
            raise TokenExpired("Token has expired")
        if self.nbf is not None and current + leeway < self.nbf:
            raise TokenNotYetValid("Token is not valid yet")


__all__ = ["Claims", "DEFAULT_TTL", "RESERVED_CLAIMS", "TIMESTAMP_CLAIMS"]
