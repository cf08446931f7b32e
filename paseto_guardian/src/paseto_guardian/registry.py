"""Algorithm registry keyed by ``(version, purpose)``.

Registration is single-writer: every suite must be registered before the first
:meth:`AlgorithmRegistry.resolve`, which seals the registry. A sealed registry is
read-only and can be shared across threads without locking.
"""
from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple

import structlog

from .core.exceptions import AlgorithmUnsupported, RegistryError
from .models import Purpose, Version
from .protocol.base import Algorithm

logger = structlog.get_logger(__name__)

Pair = Tuple[Version, Purpose]


class AlgorithmRegistry:
    """Runtime registry for built-in and host provided algorithm suites."""

    def __init__(self, algorithms: Iterable[Algorithm] = ()) -> None:
        self._algorithms: Dict[Pair, Algorithm] = {}
        self._sealed = False
        for algorithm in algorithms:
            self.register(algorithm)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, algorithm: Algorithm) -> None:
        if not isinstance(algorithm, Algorithm):
            raise TypeError("register() expects an Algorithm")
        if self._sealed:
            raise RegistryError(f"Registry is sealed; cannot register {algorithm.header}")
        self._add(algorithm)
        logger.debug("algorithm.registered", header=algorithm.header, name=algorithm.name)

    def _add(self, algorithm: Algorithm) -> None:
        pair = (algorithm.version, algorithm.purpose)
        if pair in self._algorithms:
            raise RegistryError(f"Algorithm already registered: {algorithm.header}")
        self._algorithms[pair] = algorithm

    def seal(self) -> None:
        self._sealed = True

    def resolve(self, version: Version | str, purpose: Purpose | str) -> Algorithm:
        self._sealed = True
        pair = (Version.parse(version), Purpose.parse(purpose))
        try:
            return self._algorithms[pair]
        except KeyError as exc:
            raise AlgorithmUnsupported(f"No algorithm registered for {pair[0].value}.{pair[1].value}") from exc

    def is_registered(self, version: Version | str, purpose: Purpose | str) -> bool:
        return (Version.parse(version), Purpose.parse(purpose)) in self._algorithms

    def supported(self) -> list[Pair]:
        return sorted(self._algorithms, key=lambda pair: (pair[0].value, pair[1].value))

    def algorithms(self) -> Mapping[Pair, Algorithm]:
        return dict(self._algorithms)


def load_builtin_algorithms(registry: AlgorithmRegistry) -> AlgorithmRegistry:
    from .protocol import v2, v3, v4

    if registry.sealed:
        raise RegistryError("Registry is sealed; cannot load built-in algorithms")
    for module in (v2, v3, v4):
        for algorithm in module.ALGORITHMS:
            registry._add(algorithm)
    return registry


def default_registry() -> AlgorithmRegistry:
    """Return a fresh, unsealed registry holding the built-in suites."""
    return load_builtin_algorithms(AlgorithmRegistry())


DEFAULT_REGISTRY = default_registry()


__all__ = [
    "AlgorithmRegistry",
    "DEFAULT_REGISTRY",
    "Pair",
    "default_registry",
    "load_builtin_algorithms",
]
