import pytest

from paseto_guardian.crypto.pae import le64, pae


def test_pae_of_nothing_is_a_zero_count() -> None:
    assert pae() == b"\x00" * 8


def test_pae_single_empty_part() -> None:
    assert pae(b"") == b"\x01" + b"\x00" * 7 + b"\x00" * 8


def test_pae_single_part() -> None:
    assert pae(b"test") == b"\x01" + b"\x00" * 7 + b"\x04" + b"\x00" * 7 + b"test"


def test_pae_boundaries_are_unambiguous() -> None:
    assert pae(b"ab", b"c") != pae(b"a", b"bc")
    assert pae(b"abc") != pae(b"abc", b"")


def test_le64_clears_most_significant_bit() -> None:
    assert le64(2**63) == b"\x00" * 8
    assert le64(2**63 + 5) == b"\x05" + b"\x00" * 7


def test_le64_rejects_negative() -> None:
    with pytest.raises(ValueError):
        le64(-1)


def test_pae_rejects_text_parts() -> None:
    with pytest.raises(TypeError):
        pae("v4.local.")  # type: ignore[arg-type]
