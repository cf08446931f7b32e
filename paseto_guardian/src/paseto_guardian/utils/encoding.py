"""Strict base64url helpers and bounded JSON loading.

PASETO and PASERK only accept unpadded base64url in its canonical form, so decoding
rejects padding, foreign characters and non-zero trailing bits instead of tolerating
them. Footers are read before authentication, so JSON is scanned for nesting depth
and member count before it reaches the parser.
"""
from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Optional

from ..core.exceptions import FormatError

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")
_JSON_WHITESPACE = b" \t\r\n"

MAX_JSON_DEPTH = 64


def b64e(data: bytes) -> str:
    """URL-safe base64 encode without padding"""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64d(value: str) -> bytes:
    """URL-safe base64 decode that only accepts canonical unpadded input"""
    if not isinstance(value, str) or _ALPHABET.fullmatch(value) is None:
        raise FormatError("Invalid base64url encoding")
    if len(value) % 4 == 1:
        raise FormatError("Invalid base64url length")
    try:
        decoded = base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
    except binascii.Error as exc:
        raise FormatError("Invalid base64url encoding") from exc
    if b64e(decoded) != value:
        raise FormatError("Non-canonical base64url encoding")
    return decoded


def is_json_object(data: bytes) -> bool:
    """True when ``data`` opens like a JSON object (leading JSON whitespace allowed)."""
    return data.lstrip(_JSON_WHITESPACE).startswith(b"{")


def check_json_limits(data: bytes, *, max_depth: int, max_keys: Optional[int] = None) -> None:
    """Raise ``FormatError`` if ``data`` nests deeper than ``max_depth`` or has too many members.

    Brackets and colons inside string literals are skipped; the input does not have
    to be valid JSON.
    """
    depth = keys = 0
    in_string = escaped = False
    for byte in data:
        if in_string:
            if escaped:
                escaped = False
            elif byte == 0x5C:  # backslash
                escaped = True
            elif byte == 0x22:
                in_string = False
        elif byte == 0x22:
            in_string = True
        elif byte in (0x7B, 0x5B):
            depth += 1
            if depth > max_depth:
                raise FormatError(f"JSON nesting exceeds {max_depth} levels")
        elif byte in (0x7D, 0x5D):
            depth -= 1
        elif byte == 0x3A and max_keys is not None:
            keys += 1
            if keys > max_keys:
                raise FormatError(f"JSON object has more than {max_keys} keys")


def load_json(data: bytes, *, max_depth: int = MAX_JSON_DEPTH, max_keys: Optional[int] = None) -> Any:
    """Parse UTF-8 JSON within the given limits, reporting every failure as ``FormatError``."""
    check_json_limits(data, max_depth=max_depth, max_keys=max_keys)
    try:
        return json.loads(data.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise FormatError("Invalid JSON") from exc


__all__ = ["MAX_JSON_DEPTH", "b64d", "b64e", "check_json_limits", "is_json_object", "load_json"]
