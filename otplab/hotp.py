"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.
"""

from typing import Optional

from otplab.config import validate_secret
from otplab.mac import Algorithm, constant_time_compare
from otplab.totp import compute


def generate_hotp(
    secret_bytes: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code.

    Args:
        secret_bytes: Raw decoded secret bytes.
        counter:      Synchronisation counter value.
        digits:       Number of OTP digits.
        algorithm:    HMAC algorithm.

    Returns:
        Zero-padded OTP string.
    """
    return compute(validate_secret(secret_bytes), counter, algorithm, digits).otp


def validate_hotp(
    token: str,
    secret_bytes: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
    look_ahead: int = 10,
) -> Optional[int]:
    """
    Validate an HOTP token and return the synchronised counter value.

    Args:
        token:       Token to validate.
        secret_bytes: Raw secret bytes.
        counter:     Current counter.
        digits:      Expected OTP length.
        algorithm:   HMAC algorithm.
        look_ahead:  Max steps to search ahead for resync.

    Returns:
        The new counter value if valid, or None if invalid.
    """
    secret_bytes = validate_secret(secret_bytes)
    token = token.strip()
    for i in range(look_ahead + 1):
        expected = compute(secret_bytes, counter + i, algorithm, digits).otp
        if constant_time_compare(token, expected):
            return counter + i + 1
    return None
