"""PASETO tokens and PASERK keys."""
from .api import DecodedToken, decode, encode
from .claims import Claims
from .core.exceptions import (
    AlgorithmUnsupported,
    AuthenticationFailure,
    ClaimsError,
    FormatError,
    ImplicitAssertionError,
    KeyMismatch,
    PasetoError,
    RegistryError,
    RngFailure,
    TokenExpired,
    TokenNotYetValid,
)
from .keys import Key, LocalKey, PublicKey, SecretKey
from .models import Purpose, Version
from .paserk import KeyId, PaserkType, derive_id, key_id, parse_id, parse_key, serialize_key
from .protocol.base import Algorithm, AlgorithmKind, LocalCipher, PublicSigner
from .registry import DEFAULT_REGISTRY, AlgorithmRegistry, default_registry
from .token import Token, TokenMessage, decode_bytes, encode_bytes, peek_footer

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "AlgorithmKind",
    "AlgorithmRegistry",
    "AlgorithmUnsupported",
    "AuthenticationFailure",
    "Claims",
    "ClaimsError",
    "DEFAULT_REGISTRY",
    "DecodedToken",
    "FormatError",
    "ImplicitAssertionError",
    "Key",
    "KeyId",
    "KeyMismatch",
    "LocalCipher",
    "LocalKey",
    "PaserkType",
    "PasetoError",
    "PublicKey",
    "PublicSigner",
    "Purpose",
    "RegistryError",
    "RngFailure",
    "SecretKey",
    "Token",
    "TokenExpired",
    "TokenMessage",
    "TokenNotYetValid",
    "Version",
    "decode",
    "decode_bytes",
    "default_registry",
    "derive_id",
    "encode",
    "encode_bytes",
    "key_id",
    "parse_id",
    "parse_key",
    "peek_footer",
    "serialize_key",
]
