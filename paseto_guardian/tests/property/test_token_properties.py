import pytest
from hypothesis import given, settings, strategies as st

from paseto_guardian.api import decode, encode
from paseto_guardian.claims import Claims
from paseto_guardian.core.exceptions import AuthenticationFailure, FormatError
from paseto_guardian.crypto.pae import pae
from paseto_guardian.keys import LocalKey, SecretKey
from paseto_guardian.models import Version
from paseto_guardian.paserk import key_id, parse_key, serialize_key
from paseto_guardian.token import Token, decode_bytes, encode_bytes
from paseto_guardian.utils.encoding import b64d, b64e

_LOCAL = LocalKey(Version.V4, bytes(range(32)))
_SECRET = SecretKey.from_seed(Version.V4, bytes(range(32, 64)))
_PUBLIC = _SECRET.public_key()

_json_values = st.recursive(
    st.none() | st.booleans() | st.integers(min_value=-(2**53), max_value=2**53) | st.text(max_size=16),
    lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=12,
)
_custom_claims = st.dictionaries(
    st.text(min_size=1, max_size=12).filter(lambda name: name not in {"iss", "sub", "aud", "exp", "nbf", "iat", "jti"}),
    _json_values,
    max_size=5,
)


@settings(deadline=None, max_examples=50)
@given(st.lists(st.binary(max_size=8), max_size=5), st.lists(st.binary(max_size=8), max_size=5))
def test_pae_is_injective(left: list, right: list) -> None:
    if left != right:
        assert pae(*left) != pae(*right)


@settings(deadline=None)
@given(st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_", max_size=24))
def test_accepted_base64_is_canonical(value: str) -> None:
    try:
        decoded = b64d(value)
    except FormatError:
        return
    assert b64e(decoded) == value


@settings(deadline=None, max_examples=40)
@given(_custom_claims, st.text(max_size=10), st.binary(max_size=32))
def test_claims_round_trip_through_local_tokens(custom: dict, subject: str, footer: bytes) -> None:
    claims = Claims(sub=subject, **custom)
    decoded = decode(_LOCAL, encode(_LOCAL, claims, footer))
    assert decoded.claims == claims
    assert decoded.footer == footer


@settings(deadline=None, max_examples=40)
@given(st.binary(max_size=64), st.binary(max_size=16), st.binary(max_size=16))
def test_public_tokens_round_trip(payload: bytes, footer: bytes, assertion: bytes) -> None:
    token = encode_bytes(_SECRET, payload, footer, assertion)
    message = decode_bytes(_PUBLIC, token, assertion)
    assert (message.payload, message.footer) == (payload, footer)


@settings(deadline=None, max_examples=60)
@given(st.binary(max_size=32), st.data())
def test_any_single_bit_flip_in_body_is_rejected(payload: bytes, data: st.DataObject) -> None:
    parsed = Token.parse(encode_bytes(_LOCAL, payload))
    index = data.draw(st.integers(min_value=0, max_value=len(parsed.body) - 1))
    bit = data.draw(st.integers(min_value=0, max_value=7))
    body = bytearray(parsed.body)
    body[index] ^= 1 << bit
    tampered = str(Token(parsed.version, parsed.purpose, bytes(body), parsed.footer))
    with pytest.raises(AuthenticationFailure):
        decode_bytes(_LOCAL, tampered)


@settings(deadline=None, max_examples=60)
@given(st.binary(min_size=32, max_size=32), st.integers(min_value=0, max_value=31), st.integers(min_value=1, max_value=255))
def test_key_ids_are_deterministic_and_distinct(material: bytes, index: int, delta: int) -> None:
    other = bytearray(material)
    other[index] ^= delta
    key = LocalKey(Version.V4, material)
    assert key_id(key) == key_id(LocalKey(Version.V4, material))
    assert key_id(key) != key_id(LocalKey(Version.V4, bytes(other)))


@settings(deadline=None, max_examples=30)
@given(st.binary(min_size=32, max_size=32), st.sampled_from([Version.V2, Version.V3, Version.V4]))
def test_paserk_round_trip(material: bytes, version: Version) -> None:
    key = LocalKey(version, material)
    assert parse_key(serialize_key(key)) == key
