from datetime import datetime, timedelta, timezone

import pytest

from paseto_guardian import (
    AuthenticationFailure,
    Claims,
    FormatError,
    ImplicitAssertionError,
    LocalKey,
    SecretKey,
    TokenExpired,
    TokenNotYetValid,
    Version,
    decode,
    encode,
    key_id,
)
from paseto_guardian.config import AppConfig, TokenConfig
from paseto_guardian.utils.encoding import b64e

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_zero_key_scenario() -> None:
    key = LocalKey(Version.V4, b"\x00" * 32)
    token = encode(key, {"sub": "123"})
    decoded = decode(key, token)
    assert decoded.claims.as_dict() == {"sub": "123"}
    assert decoded.footer == b""
    assert decoded.footer_claims is None
    with pytest.raises(AuthenticationFailure):
        decode(LocalKey(Version.V4, b"\x01" * 32), token)


def test_public_round_trip_with_mapping_footer() -> None:
    secret = SecretKey.generate(Version.V4)
    token = encode(secret, Claims(sub="123"), {"app": "billing"})
    decoded = decode(secret.public_key(), token)
    assert decoded.claims.sub == "123"
    assert decoded.footer_claims == {"app": "billing"}
    assert decoded.kid is None


def test_text_footer_is_kept_as_bytes() -> None:
    key = LocalKey.generate(Version.V3)
    decoded = decode(key, encode(key, {"sub": "1"}, "plain footer"))
    assert decoded.footer == b"plain footer"
    assert decoded.footer_claims is None


def test_expired_token_is_authentic_but_rejected() -> None:
    key = LocalKey(Version.V4, b"\x00" * 32)
    token = encode(key, Claims(sub="123", exp=NOW - timedelta(seconds=1)))
    with pytest.raises(TokenExpired):
        decode(key, token, now=NOW)
    assert decode(key, token, now=NOW - timedelta(seconds=2)).claims.sub == "123"


def test_not_yet_valid_token() -> None:
    key = LocalKey(Version.V4, b"\x00" * 32)
    token = encode(key, Claims(nbf=NOW + timedelta(minutes=1)))
    with pytest.raises(TokenNotYetValid):
        decode(key, token, now=NOW)
    assert decode(key, token, now=NOW, leeway=timedelta(minutes=2)).claims.nbf is not None


def test_config_leeway_is_used() -> None:
    key = LocalKey(Version.V4, b"\x00" * 32)
    config = AppConfig(tokens=TokenConfig(leeway_seconds=30))
    token = encode(key, Claims(exp=NOW))
    decode(key, token, now=NOW + timedelta(seconds=10), config=config)


def test_secret_key_id_footer_uses_public_id() -> None:
    secret = SecretKey.generate(Version.V4)
    token = encode(secret, {"sub": "123"}, include_key_id=True)
    decoded = decode(secret.public_key(), token)
    assert decoded.kid == key_id(secret.public_key())
    assert decoded.kid.startswith("k4.pid.")


def test_local_key_id_footer_from_config() -> None:
    key = LocalKey.generate(Version.V4)
    config = AppConfig(tokens=TokenConfig(include_key_id=True))
    token = encode(key, {"sub": "123"}, {"app": "x"}, config=config)
    decoded = decode(key, token)
    assert decoded.kid == key_id(key)
    assert decoded.footer_claims["app"] == "x"


def test_key_id_requires_mapping_footer() -> None:
    with pytest.raises(ValueError):
        encode(LocalKey.generate(Version.V4), {"sub": "1"}, b"raw", include_key_id=True)


def test_caller_kid_with_raw_key_is_rejected() -> None:
    key = LocalKey(Version.V4, b"\x00" * 32)
    with pytest.raises(FormatError):
        encode(key, {"sub": "1"}, {"kid": "k4.local.AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"})


def test_config_can_require_implicit_assertion() -> None:
    key = LocalKey.generate(Version.V4)
    config = AppConfig(tokens=TokenConfig(require_implicit_assertion=["v4", "v4"]))
    assert config.tokens.require_implicit_assertion == [Version.V4]
    with pytest.raises(ImplicitAssertionError):
        encode(key, {"sub": "1"}, config=config)
    token = encode(key, {"sub": "1"}, implicit_assertion=b"tenant-7", config=config)
    assert decode(key, token, b"tenant-7", config=config).claims.sub == "1"


def test_invalid_claims_mapping_is_format_error() -> None:
    with pytest.raises(FormatError):
        encode(LocalKey.generate(Version.V4), {"exp": "tomorrow"})


def test_non_object_payload_is_format_error() -> None:
    from paseto_guardian.token import encode_bytes

    key = LocalKey.generate(Version.V4)
    with pytest.raises(FormatError):
        decode(key, encode_bytes(key, b"[1, 2, 3]"))


def test_nested_footer_is_format_error() -> None:
    key = LocalKey(Version.V4, b"\x00" * 32)
    token = encode(key, {"sub": "1"})
    footer = b'{"a":' + b"[" * 200_000 + b"]" * 200_000 + b"}"
    with pytest.raises(FormatError):
        decode(key, f"{token}.{b64e(footer)}")


def test_footer_claims_accept_leading_whitespace() -> None:
    key = LocalKey(Version.V4, b"\x00" * 32)
    decoded = decode(key, encode(key, {"sub": "1"}, b' {"kid":"k4.lid.x"}'))
    assert decoded.footer_claims == {"kid": "k4.lid.x"}
    assert decoded.kid == "k4.lid.x"
