"""Built-in protocol suites."""
from .base import Algorithm, AlgorithmKind, LocalCipher, PublicSigner

__all__ = ["Algorithm", "AlgorithmKind", "LocalCipher", "PublicSigner"]
