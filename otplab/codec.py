"""
Codec helpers for otplab: Base32 / hex secrets and OTP display formatting.
"""

import base64
import re
import secrets
from enum import Enum

from otplab.errors import InvalidBase32Character, InvalidHexInput, InvalidSecretLength

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_BASE32_INDEX = {ch: i for i, ch in enumerate(BASE32_ALPHABET)}

_HEX_RE = re.compile(r"[0-9a-fA-F]*")
_WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_SECRET_LENGTH = 20  # 160 bits, the RFC 4226 recommendation


class SecretFormat(str, Enum):
    """Text encodings accepted for secrets."""

    BASE32 = "base32"
    HEX = "hex"


# ── Base32 ────────────────────────────────────────────────────────────────────

def base32_decode(text: str) -> bytes:
    """
    Decode an RFC 4648 Base32 string.

    Whitespace is ignored, lowercase is accepted and trailing ``=`` padding is
    optional. Input length is not required to be a multiple of 8: leftover
    bits that do not fill a whole byte are dropped.

    Args:
        text: Base32 text.

    Returns:
        Decoded bytes.

    Raises:
        InvalidBase32Character: On any character outside ``A-Z2-7``.
    """
    cleaned = _WHITESPACE_RE.sub("", text).upper().rstrip("=")

    out = bytearray()
    buffer = 0
    bits = 0
    for position, ch in enumerate(cleaned):
        value = _BASE32_INDEX.get(ch)
        if value is None:
            raise InvalidBase32Character(ch, position)
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out)


def base32_encode(raw: bytes) -> str:
    """Encode bytes as Base32, padded with ``=`` to a multiple of 8 chars."""
    return base64.b32encode(bytes(raw)).decode("ascii")


# ── Hex ───────────────────────────────────────────────────────────────────────

def hex_to_bytes(text: str) -> bytes:
    """
    Decode a hex string (case-insensitive, surrounding whitespace ignored).

    Raises:
        InvalidHexInput: On odd length or non-hex characters.
    """
    text = text.strip()
    if len(text) % 2:
        raise InvalidHexInput(f"Hex input must have even length, got {len(text)}.")
    if not _HEX_RE.fullmatch(text):
        raise InvalidHexInput("Hex input contains non-hex characters.")
    return bytes.fromhex(text)


def bytes_to_hex(raw: bytes) -> str:
    """Lowercase hex, two digits per byte."""
    return bytes(raw).hex()


# ── Secrets ───────────────────────────────────────────────────────────────────

def generate_secret(length: int = DEFAULT_SECRET_LENGTH) -> bytes:
    """Return ``length`` cryptographically random bytes."""
    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise InvalidSecretLength(
            None, f"Secret length must be a positive integer, got {length!r}."
        )
    return secrets.token_bytes(length)


def decode_secret(secret: str, fmt: SecretFormat = SecretFormat.BASE32) -> bytes:
    """
    Decode a user-supplied secret string to raw bytes.

    Args:
        secret: Secret text.
        fmt:    Encoding of ``secret``.

    Returns:
        Raw secret bytes.

    Raises:
        InvalidBase32Character: Bad Base32 input.
        InvalidHexInput:        Bad hex input.
        InvalidSecretLength:    Input decodes to zero bytes.
    """
    fmt = SecretFormat(fmt)
    if fmt is SecretFormat.HEX:
        raw = hex_to_bytes(secret)
    else:
        raw = base32_decode(secret)
    if not raw:
        raise InvalidSecretLength(0)
    return raw


def encode_secret(raw: bytes, fmt: SecretFormat = SecretFormat.BASE32) -> str:
    """Inverse of :func:`decode_secret`, used for display."""
    if SecretFormat(fmt) is SecretFormat.HEX:
        return bytes_to_hex(raw)
    return base32_encode(raw)


# ── Display ───────────────────────────────────────────────────────────────────

def format_otp(code: str, group: int = 3) -> str:
    """
    Format an OTP code with spaces for readability.

    Example::

        >>> format_otp("123456")
        '123 456'
    """
    return " ".join(code[i : i + group] for i in range(0, len(code), group))
