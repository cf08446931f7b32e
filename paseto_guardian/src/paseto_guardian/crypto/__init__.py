"""Cryptographic primitives used by the protocol suites."""
from .pae import le64, pae
from .rng import random_bytes
from .signing import Ed25519Signer, P384Signer
from .xchacha import XChaCha20Poly1305, hchacha20, xchacha20_xor

__all__ = [
    "Ed25519Signer",
    "P384Signer",
    "XChaCha20Poly1305",
    "hchacha20",
    "le64",
    "pae",
    "random_bytes",
    "xchacha20_xor",
]
