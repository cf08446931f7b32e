import pytest

from paseto_guardian.core.exceptions import AlgorithmUnsupported, RegistryError
from paseto_guardian.keys import LocalKey
from paseto_guardian.models import Purpose, Version
from paseto_guardian.protocol.base import Algorithm, AlgorithmKind
from paseto_guardian.protocol.v2 import Ed25519Suite
from paseto_guardian.protocol.v4 import V4_LOCAL, XChaCha20Blake2bCipher
from paseto_guardian.registry import DEFAULT_REGISTRY, AlgorithmRegistry, default_registry
from paseto_guardian.token import decode_bytes, encode_bytes


def _v1_local() -> Algorithm:
    return Algorithm(
        version=Version.V1,
        purpose=Purpose.LOCAL,
        name="test-suite",
        key_length=32,
        nonce_length=32,
        tag_length=32,
        implementation=XChaCha20Blake2bCipher(),
    )


def test_default_registry_pairs() -> None:
    expected = [(version, purpose) for version in (Version.V2, Version.V3, Version.V4) for purpose in Purpose]
    assert sorted(default_registry().supported()) == sorted(expected)


def test_unregistered_pair_is_a_lookup_failure() -> None:
    with pytest.raises(AlgorithmUnsupported):
        DEFAULT_REGISTRY.resolve(Version.V1, Purpose.LOCAL)
    with pytest.raises(LookupError):
        DEFAULT_REGISTRY.resolve("v1", "public")


def test_resolve_accepts_strings() -> None:
    assert DEFAULT_REGISTRY.resolve("v4", "local") is V4_LOCAL
    assert DEFAULT_REGISTRY.is_registered("v4", "local")
    assert not DEFAULT_REGISTRY.is_registered(Version.V1, Purpose.LOCAL)


def test_duplicate_registration_is_rejected() -> None:
    registry = default_registry()
    with pytest.raises(RegistryError):
        registry.register(V4_LOCAL)


def test_registration_after_first_resolve_is_rejected() -> None:
    registry = default_registry()
    assert not registry.sealed
    registry.resolve(Version.V4, Purpose.LOCAL)
    assert registry.sealed
    with pytest.raises(RegistryError):
        registry.register(_v1_local())


def test_failed_resolve_also_seals() -> None:
    registry = AlgorithmRegistry()
    with pytest.raises(AlgorithmUnsupported):
        registry.resolve(Version.V4, Purpose.LOCAL)
    with pytest.raises(RegistryError):
        registry.register(V4_LOCAL)


def test_algorithm_descriptor_properties() -> None:
    assert V4_LOCAL.kind is AlgorithmKind.AEAD
    assert V4_LOCAL.header == "v4.local."
    assert (V4_LOCAL.key_length, V4_LOCAL.nonce_length, V4_LOCAL.tag_length) == (32, 32, 32)
    v3_public = DEFAULT_REGISTRY.resolve(Version.V3, Purpose.PUBLIC)
    assert v3_public.kind is AlgorithmKind.SIGNATURE
    assert (v3_public.key_length, v3_public.public_key_length, v3_public.tag_length) == (48, 49, 96)
    assert not DEFAULT_REGISTRY.resolve(Version.V2, Purpose.LOCAL).implicit_assertion


def test_algorithm_rejects_mismatched_implementation() -> None:
    with pytest.raises(TypeError):
        Algorithm(
            version=Version.V1,
            purpose=Purpose.LOCAL,
            name="broken",
            key_length=32,
            nonce_length=0,
            tag_length=64,
            implementation=Ed25519Suite(),
        )


def test_register_rejects_non_algorithm() -> None:
    with pytest.raises(TypeError):
        AlgorithmRegistry().register("v4.local")  # type: ignore[arg-type]


def test_host_registered_suite_round_trips() -> None:
    registry = default_registry()
    registry.register(_v1_local())
    key = LocalKey(Version.V1, b"\x01" * 32, registry)
    token = encode_bytes(key, b"hello", b"footer")
    assert token.startswith("v1.local.")
    message = decode_bytes(key, token)
    assert (message.payload, message.footer) == (b"hello", b"footer")
    assert message.version is Version.V1


def test_host_suite_is_invisible_to_default_registry() -> None:
    registry = default_registry()
    registry.register(_v1_local())
    token = encode_bytes(LocalKey(Version.V1, b"\x01" * 32, registry), b"hello")
    with pytest.raises(AlgorithmUnsupported):
        decode_bytes(LocalKey(Version.V4, b"\x01" * 32), token)
