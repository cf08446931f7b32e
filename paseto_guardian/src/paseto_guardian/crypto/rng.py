"""Fresh randomness for nonces and key generation."""
from __future__ import annotations

import os

from ..core.exceptions import RngFailure

_ZERO_CHECK_MIN = 16


def random_bytes(length: int) -> bytes:
    """Return ``length`` bytes from the OS CSPRNG or raise :class:`RngFailure`.

    Failures are never retried here. A block of 16 or more bytes that comes back
    all zero is treated as a broken RNG.
    """
    if length < 0:
        raise ValueError("length must be non-negative")
    try:
        data = os.urandom(length)
    except (OSError, NotImplementedError) as exc:
        raise RngFailure("Operating system RNG is unavailable") from exc
    if len(data) != length:
        raise RngFailure("Operating system RNG returned a short read")
    if length >= _ZERO_CHECK_MIN and not any(data):
        raise RngFailure("Operating system RNG returned an all-zero block")
    return data


__all__ = ["random_bytes"]
