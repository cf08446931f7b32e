"""XChaCha20 built on the IETF ChaCha20 ciphers shipped by ``cryptography``.

HChaCha20 turns the key and the first 16 nonce bytes into a subkey; the last 8 nonce
bytes, prefixed with four zero bytes, become the 96-bit nonce of the inner cipher.
"""
from __future__ import annotations

import struct
from typing import Final, List, Tuple

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

KEY_SIZE: Final[int] = 32
NONCE_SIZE: Final[int] = 24
TAG_SIZE: Final[int] = 16
HCHACHA_NONCE_SIZE: Final[int] = 16

_SIGMA: Final[bytes] = b"expand 32-byte k"
_MASK32: Final[int] = 0xFFFFFFFF


def _rotl32(value: int, count: int) -> int:
    return ((value << count) & _MASK32) | (value >> (32 - count))


def _quarter_round(state: List[int], a: int, b: int, c: int, d: int) -> None:
    state[a] = (state[a] + state[b]) & _MASK32
    state[d] = _rotl32(state[d] ^ state[a], 16)
    state[c] = (state[c] + state[d]) & _MASK32
    state[b] = _rotl32(state[b] ^ state[c], 12)
    state[a] = (state[a] + state[b]) & _MASK32
    state[d] = _rotl32(state[d] ^ state[a], 8)
    state[c] = (state[c] + state[d]) & _MASK32
    state[b] = _rotl32(state[b] ^ state[c], 7)


def hchacha20(key: bytes, nonce: bytes) -> bytes:
    """Derive a 32-byte subkey from ``key`` and a 16-byte nonce."""
    if len(key) != KEY_SIZE:
        raise ValueError("HChaCha20 requires a 32-byte key")
    if len(nonce) != HCHACHA_NONCE_SIZE:
        raise ValueError("HChaCha20 requires a 16-byte nonce")

    state = list(struct.unpack("<16I", _SIGMA + key + nonce))
    for _ in range(10):
        # column rounds
        _quarter_round(state, 0, 4, 8, 12)
        _quarter_round(state, 1, 5, 9, 13)
        _quarter_round(state, 2, 6, 10, 14)
        _quarter_round(state, 3, 7, 11, 15)
        # diagonal rounds
        _quarter_round(state, 0, 5, 10, 15)
        _quarter_round(state, 1, 6, 11, 12)
        _quarter_round(state, 2, 7, 8, 13)
        _quarter_round(state, 3, 4, 9, 14)

    return struct.pack("<8I", *state[0:4], *state[12:16])


def _subkey_and_nonce(key: bytes, nonce: bytes) -> Tuple[bytes, bytes]:
    if len(nonce) != NONCE_SIZE:
        raise ValueError("XChaCha20 requires a 24-byte nonce")
    return hchacha20(key, nonce[:HCHACHA_NONCE_SIZE]), b"\x00" * 4 + nonce[HCHACHA_NONCE_SIZE:]


def xchacha20_xor(key: bytes, nonce: bytes, data: bytes) -> bytes:
    """Apply the XChaCha20 keystream (block counter starting at 0) to ``data``."""
    subkey, inner_nonce = _subkey_and_nonce(key, nonce)
    # cryptography expects LE32 block counter || 96-bit nonce
    encryptor = Cipher(algorithms.ChaCha20(subkey, b"\x00" * 4 + inner_nonce), mode=None).encryptor()
    return encryptor.update(data) + encryptor.finalize()


class XChaCha20Poly1305:
    """XChaCha20-Poly1305 (IETF) with API parity to ``ChaCha20Poly1305``"""

    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            raise ValueError("XChaCha20-Poly1305 requires a 32-byte key")
        self._key = key

    def encrypt(self, nonce: bytes, data: bytes, associated_data: bytes | None) -> bytes:
        subkey, inner_nonce = _subkey_and_nonce(self._key, nonce)
        return ChaCha20Poly1305(subkey).encrypt(inner_nonce, data, associated_data)

    def decrypt(self, nonce: bytes, data: bytes, associated_data: bytes | None) -> bytes:
        subkey, inner_nonce = _subkey_and_nonce(self._key, nonce)
        return ChaCha20Poly1305(subkey).decrypt(inner_nonce, data, associated_data)


__all__ = [
    "HCHACHA_NONCE_SIZE",
    "KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "XChaCha20Poly1305",
    "hchacha20",
    "xchacha20_xor",
]
