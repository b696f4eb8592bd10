"""
Configuration for TOTP generation and verification.

There is no process-wide default configuration: callers build a
:class:`TOTPConfig` for each call site.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Union

from otplab.clock import DEFAULT_STEP, TimeManager, validate_step
from otplab.errors import InvalidDigitCount, InvalidSecretLength, InvalidWindow
from otplab.mac import Algorithm

logger = logging.getLogger(__name__)

# ── Defaults ──────────────────────────────────────────────────────────────────

DEFAULT_ALGORITHM = Algorithm.SHA1
DEFAULT_DIGITS = 6
DEFAULT_WINDOW = 1

MIN_DIGITS = 1
MAX_DIGITS = 10         # a 31-bit truncated value never has more than 10 digits
MIN_SECRET_BYTES = 16   # RFC 4226 R6: at least 128 bits

__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_DIGITS",
    "DEFAULT_STEP",
    "DEFAULT_WINDOW",
    "MAX_DIGITS",
    "MIN_DIGITS",
    "MIN_SECRET_BYTES",
    "TOTPConfig",
    "validate_digits",
    "validate_secret",
    "validate_step",
    "validate_window",
]


# ── Validation ────────────────────────────────────────────────────────────────

def validate_digits(digits: int) -> int:
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise InvalidDigitCount(digits, MIN_DIGITS, MAX_DIGITS)
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidDigitCount(digits, MIN_DIGITS, MAX_DIGITS)
    return digits


def validate_window(window: int) -> int:
    if isinstance(window, bool) or not isinstance(window, int) or window < 0:
        raise InvalidWindow(window)
    return window


def validate_secret(secret: bytes) -> bytes:
    """
    Reject empty secrets and warn about short ones.

    RFC 4226 recommends at least 128 bits but does not forbid shorter keys,
    so anything non-empty is accepted.

    Raises:
        InvalidSecretLength: If ``secret`` is not bytes or is empty.
    """
    if not isinstance(secret, (bytes, bytearray, memoryview)):
        raise InvalidSecretLength(
            None, f"Secret must be bytes, got {type(secret).__name__}."
        )
    secret = bytes(secret)
    if not secret:
        raise InvalidSecretLength(0)
    if len(secret) < MIN_SECRET_BYTES:
        logger.warning(
            "Secret is %d bytes; RFC 4226 recommends at least %d.",
            len(secret),
            MIN_SECRET_BYTES,
        )
    return secret


# ── Config object ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TOTPConfig:
    """Everything needed to produce a TOTP except the clock reading itself."""

    secret: bytes
    algorithm: Union[Algorithm, str] = DEFAULT_ALGORITHM
    digits: int = DEFAULT_DIGITS
    time_manager: TimeManager = field(default_factory=TimeManager)

    def __post_init__(self) -> None:
        object.__setattr__(self, "secret", validate_secret(self.secret))
        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))
        validate_digits(self.digits)

    def __repr__(self) -> str:
        # never print the secret
        return (
            f"TOTPConfig(secret=<{len(self.secret)} bytes>, "
            f"algorithm={self.algorithm.value}, digits={self.digits}, "
            f"time_manager={self.time_manager!r})"
        )

    @property
    def step(self) -> int:
        return self.time_manager.step

    def with_time_manager(self, time_manager: TimeManager) -> "TOTPConfig":
        return replace(self, time_manager=time_manager)
