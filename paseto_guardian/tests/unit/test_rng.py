import pytest

from paseto_guardian.core.exceptions import RngFailure
from paseto_guardian.crypto import rng
from paseto_guardian.keys import LocalKey
from paseto_guardian.models import Version
from paseto_guardian.token import encode_bytes


def test_random_bytes_length() -> None:
    assert len(rng.random_bytes(32)) == 32
    assert rng.random_bytes(0) == b""


def test_unavailable_rng_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(_size: int) -> bytes:
        raise OSError("no entropy")

    monkeypatch.setattr(rng.os, "urandom", broken)
    with pytest.raises(RngFailure):
        rng.random_bytes(32)


def test_all_zero_block_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(rng.os, "urandom", lambda size: b"\x00" * size)
    with pytest.raises(RngFailure):
        rng.random_bytes(24)


def test_short_read_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(rng.os, "urandom", lambda size: b"\x01" * (size - 1))
    with pytest.raises(RngFailure):
        rng.random_bytes(24)


def test_local_encode_stops_on_rng_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    key = LocalKey(Version.V4, b"\x00" * 32)
    monkeypatch.setattr(rng.os, "urandom", lambda size: b"\x00" * size)
    with pytest.raises(RngFailure):
        encode_bytes(key, b'{"sub":"123"}')


def test_key_generation_stops_on_rng_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(rng.os, "urandom", lambda size: b"\x00" * size)
    with pytest.raises(RngFailure):
        LocalKey.generate(Version.V4)
