"""Tests for otplab.codec."""

import secrets

import pytest

from otplab.codec import (
    SecretFormat,
    base32_decode,
    base32_encode,
    bytes_to_hex,
    decode_secret,
    encode_secret,
    format_otp,
    generate_secret,
    hex_to_bytes,
)
from otplab.errors import InvalidBase32Character, InvalidHexInput, InvalidSecretLength


# ── Base32 ────────────────────────────────────────────────────────────────────
# RFC 4648 §10 test vectors

_BASE32_VECTORS = [
    (b"", ""),
    (b"f", "MY======"),
    (b"fo", "MZXQ===="),
    (b"foo", "MZXW6==="),
    (b"foob", "MZXW6YQ="),
    (b"fooba", "MZXW6YTB"),
    (b"foobar", "MZXW6YTBOI======"),
]


@pytest.mark.parametrize("raw,encoded", _BASE32_VECTORS)
def test_base32_rfc4648_vectors(raw: bytes, encoded: str) -> None:
    assert base32_encode(raw) == encoded
    assert base32_decode(encoded) == raw


def test_base32_decode_rfc_secret() -> None:
    assert base32_decode("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ") == b"12345678901234567890"


def test_base32_decode_is_lenient_about_formatting() -> None:
    expected = b"Hello!\xde\xad\xbe\xef"
    assert base32_decode("JBSWY3DPEHPK3PXP") == expected
    assert base32_decode("jbswy3dpehpk3pxp") == expected
    assert base32_decode("JBSW Y3DP\tEHPK\n3PXP") == expected
    assert base32_decode("JBSWY3DPEHPK3PXP====") == expected


def test_base32_decode_without_padding() -> None:
    assert base32_decode("MY") == b"f"
    assert base32_decode("MZXW6") == b"foo"
    assert base32_decode("MZXW6YTBOI") == b"foobar"


def test_base32_decode_drops_partial_byte() -> None:
    # 3 chars = 15 bits: one full byte, 7 leftover bits discarded
    assert base32_decode("MZX") == b"f"


@pytest.mark.parametrize("text,char,pos", [
    ("JBSWY3D1", "1", 7),
    ("ABC!", "!", 3),
    ("AB=CD", "=", 2),
    ("AB8", "8", 2),
])
def test_base32_decode_invalid_character(text: str, char: str, pos: int) -> None:
    with pytest.raises(InvalidBase32Character) as excinfo:
        base32_decode(text)
    assert excinfo.value.character == char
    assert excinfo.value.position == pos


def test_base32_invalid_is_value_error() -> None:
    with pytest.raises(ValueError, match="Invalid Base32"):
        base32_decode("!!!NOTBASE32!!!")


def test_base32_roundtrip_random() -> None:
    for length in range(0, 41):
        raw = secrets.token_bytes(length)
        encoded = base32_encode(raw)
        assert len(encoded) % 8 == 0
        assert base32_decode(encoded) == raw


# ── Hex ───────────────────────────────────────────────────────────────────────

def test_hex_encode_lowercase() -> None:
    assert bytes_to_hex(b"\x00\xab\xff") == "00abff"


def test_hex_decode_case_insensitive() -> None:
    assert hex_to_bytes("00ABff") == b"\x00\xab\xff"
    assert hex_to_bytes("  0a0b  ") == b"\x0a\x0b"
    assert hex_to_bytes("") == b""


@pytest.mark.parametrize("text", ["abc", "zz", "0x12", "12 34", "g0"])
def test_hex_decode_rejects_bad_input(text: str) -> None:
    with pytest.raises(InvalidHexInput):
        hex_to_bytes(text)


def test_hex_roundtrip_random() -> None:
    for length in range(0, 33):
        raw = secrets.token_bytes(length)
        assert hex_to_bytes(bytes_to_hex(raw)) == raw


# ── Secrets ───────────────────────────────────────────────────────────────────

def test_generate_secret_default_length() -> None:
    assert len(generate_secret()) == 20


def test_generate_secret_is_random() -> None:
    assert generate_secret(32) != generate_secret(32)


@pytest.mark.parametrize("length", [0, -5, 2.5])
def test_generate_secret_bad_length(length) -> None:
    with pytest.raises(InvalidSecretLength):
        generate_secret(length)


def test_decode_secret_formats() -> None:
    assert decode_secret("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ") == b"12345678901234567890"
    assert (
        decode_secret("3132333435363738393031323334353637383930", SecretFormat.HEX)
        == b"12345678901234567890"
    )
    assert decode_secret("3132", "hex") == b"12"


def test_decode_secret_empty_raises() -> None:
    with pytest.raises(InvalidSecretLength):
        decode_secret("====")
    with pytest.raises(InvalidSecretLength):
        decode_secret("", SecretFormat.HEX)


def test_encode_secret_roundtrip() -> None:
    raw = b"\x00\x01\x02\x03\x04\x05\x06\x07\x08\x09"
    for fmt in SecretFormat:
        assert decode_secret(encode_secret(raw, fmt), fmt) == raw


# ── Display ───────────────────────────────────────────────────────────────────

def test_format_otp_6_digits() -> None:
    assert format_otp("123456") == "123 456"


def test_format_otp_8_digits() -> None:
    assert format_otp("12345678") == "123 456 78"
