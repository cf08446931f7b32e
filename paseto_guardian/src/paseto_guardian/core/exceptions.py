"""Central exception hierarchy.

Callers should reject a token on any :class:`PasetoError`. The subclasses exist for
logging and diagnostics; :class:`AuthenticationFailure` deliberately carries no detail
about which check failed.
"""
from __future__ import annotations


class PasetoError(Exception):
    """Base exception for all token and key failures"""


class FormatError(PasetoError, ValueError):
    """Raised when a token, PASERK string or payload is structurally malformed"""


class AlgorithmUnsupported(PasetoError, LookupError):
    """Raised when no algorithm is registered for a version/purpose pair"""


class RegistryError(PasetoError):
    """Raised for duplicate registrations or registrations after first use"""


class KeyMismatch(PasetoError):
    """Raised when a key's version or purpose does not match the token header"""


class AuthenticationFailure(PasetoError):
    """Raised when a MAC, AEAD tag or signature fails to verify"""


class ImplicitAssertionError(PasetoError):
    """Raised when an implicit assertion is missing or cannot be bound by the version"""


class RngFailure(PasetoError):
    """Raised when the operating system RNG cannot supply fresh bytes"""


class ClaimsError(PasetoError):
    """Base for claim checks that run after successful verification"""


class TokenExpired(ClaimsError):
    """Raised when the ``exp`` claim is not after the supplied time"""


class TokenNotYetValid(ClaimsError):
    """Raised when the ``nbf`` claim is still in the future"""
