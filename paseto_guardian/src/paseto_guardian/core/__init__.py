"""Core exports."""
from .exceptions import (
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

__all__ = [
    "AlgorithmUnsupported",
    "AuthenticationFailure",
    "ClaimsError",
    "FormatError",
    "ImplicitAssertionError",
    "KeyMismatch",
    "PasetoError",
    "RegistryError",
    "RngFailure",
    "TokenExpired",
    "TokenNotYetValid",
]
