"""
Exceptions raised by otplab.

Every error derives from :class:`ValueError`: a bad secret, algorithm or digit
count is a permanent input error, never a transient condition, so callers can
keep catching ``ValueError`` at their boundary.
"""

from typing import Optional


class OTPError(ValueError):
    """Base class for all otplab input errors."""


class InvalidBase32Character(OTPError):
    """A character outside the RFC 4648 Base32 alphabet was found."""

    def __init__(self, character: str, position: int) -> None:
        self.character = character
        self.position = position
        super().__init__(
            f"Invalid Base32 character {character!r} at position {position}."
        )


class InvalidHexInput(OTPError):
    """Hex input has odd length or contains non-hex characters."""


class UnsupportedAlgorithm(OTPError):
    def __init__(self, algorithm: object) -> None:
        self.algorithm = algorithm
        super().__init__(
            f"Unsupported algorithm {algorithm!r}. Supported: SHA1, SHA256, SHA512."
        )


class InvalidDigitCount(OTPError):
    def __init__(self, digits: object, minimum: int, maximum: int) -> None:
        self.digits = digits
        super().__init__(
            f"Digits must be an integer between {minimum} and {maximum}, got {digits!r}."
        )


class InvalidSecretLength(OTPError):
    def __init__(self, length: Optional[int], message: Optional[str] = None) -> None:
        self.length = length
        super().__init__(message or f"Secret must not be empty (got {length} bytes).")


class InvalidCounter(OTPError):
    """Counter cannot be serialized as an unsigned 64-bit integer."""

    def __init__(self, counter: object) -> None:
        self.counter = counter
        super().__init__(
            f"Counter must be an integer in [0, 2**64), got {counter!r}."
        )


class InvalidStep(OTPError):
    def __init__(self, step: object) -> None:
        self.step = step
        super().__init__(f"Time step must be a positive integer, got {step!r}.")


class InvalidWindow(OTPError):
    def __init__(self, window: object) -> None:
        self.window = window
        super().__init__(
            f"Verification window must be a non-negative integer, got {window!r}."
        )
