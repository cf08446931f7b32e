"""Utility validation helpers."""
from __future__ import annotations

import secrets
from enum import Enum
from typing import Mapping, Type


def constant_time_compare(lhs: bytes | str, rhs: bytes | str) -> bool:
    """Compare two byte sequences without leaking timing information"""
    if isinstance(lhs, str):
        lhs = lhs.encode("utf-8")
    if isinstance(rhs, str):
        rhs = rhs.encode("utf-8")
    return secrets.compare_digest(lhs, rhs)


def ensure_complete(table: Mapping[Enum, object], enum_cls: Type[Enum], label: str) -> None:
    """Fail at import time when a descriptor table misses an enum member."""
    missing = [str(member.value) for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(f"{label} descriptor table is missing: {', '.join(missing)}")


__all__ = ["constant_time_compare", "ensure_complete"]
