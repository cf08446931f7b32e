"""Pre-Authentication Encoding (PAE).

Every MAC, AEAD associated-data block and signed message is built with :func:`pae`
so that no two different sequences of parts can encode to the same bytes:

- the number of parts as an unsigned 64-bit little-endian integer
- for each part, its length as an unsigned 64-bit little-endian integer, then the part

The most significant bit of each 64-bit word is always cleared.
"""
from __future__ import annotations

import struct

_LE64 = struct.Struct("<Q")
_MSB_CLEAR = 0x7FFF_FFFF_FFFF_FFFF


def le64(value: int) -> bytes:
    if value < 0:
        raise ValueError("LE64 requires a non-negative integer")
    return _LE64.pack(value & _MSB_CLEAR)


def pae(*parts: bytes) -> bytes:
    chunks = [le64(len(parts))]
    for part in parts:
        if not isinstance(part, (bytes, bytearray, memoryview)):
            raise TypeError(f"PAE parts must be bytes, got {type(part).__name__}")
        data = bytes(part)
        chunks.append(le64(len(data)))
        chunks.append(data)
    return b"".join(chunks)


__all__ = ["le64", "pae"]
