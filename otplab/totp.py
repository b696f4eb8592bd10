"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Produces codes identical to Google Authenticator. Every intermediate value of
the pipeline (counter bytes, HMAC digest, truncation) is returned alongside
the code so a front end can show how it was derived.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from otplab.clock import DEFAULT_STEP, TimeManager, counter_to_bytes, seconds_remaining
from otplab.config import (
    DEFAULT_DIGITS,
    DEFAULT_WINDOW,
    TOTPConfig,
    validate_digits,
    validate_window,
)
from otplab.mac import Algorithm, compute_hmac, constant_time_compare

logger = logging.getLogger(__name__)

_MIN_DIGEST_SIZE = 20


# ── Result types ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TruncationResult:
    """Outcome of RFC 4226 §5.3 dynamic truncation."""

    offset: int
    selected_bytes: bytes
    binary_value: int
    masked_value: int

    @property
    def selected_bytes_hex(self) -> str:
        return self.selected_bytes.hex()


@dataclass(frozen=True)
class TOTPResult:
    """A generated code together with every step that produced it."""

    otp: str
    counter: int
    counter_bytes: bytes
    digest: bytes
    truncation: TruncationResult
    algorithm: Algorithm
    digits: int
    timestamp: Optional[int] = None

    @property
    def counter_bytes_hex(self) -> str:
        return self.counter_bytes.hex()

    @property
    def digest_hex(self) -> str:
        return self.digest.hex()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view."""
        return {
            "otp": self.otp,
            "counter": self.counter,
            "counter_bytes": self.counter_bytes_hex,
            "hmac": self.digest_hex,
            "truncation": {
                "offset": self.truncation.offset,
                "selected_bytes": self.truncation.selected_bytes_hex,
                "binary_value": self.truncation.binary_value,
                "masked_value": self.truncation.masked_value,
            },
            "algorithm": self.algorithm.value,
            "digits": self.digits,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class CounterCheck:
    """One counter tried during verification."""

    counter: int
    otp: Optional[str]      # None for counters below zero
    matched: bool
    current: bool           # True for the window centre


@dataclass(frozen=True)
class VerifyResult:
    valid: bool
    matched_counter: Optional[int]
    checked_counters: Tuple[int, ...]
    checks: Tuple[CounterCheck, ...] = field(default=(), compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "matched_counter": self.matched_counter,
            "checked_counters": list(self.checked_counters),
            "checks": [
                {
                    "counter": c.counter,
                    "otp": c.otp,
                    "matched": c.matched,
                    "current": c.current,
                }
                for c in self.checks
            ],
        }


# ── Pipeline ──────────────────────────────────────────────────────────────────

def dynamic_truncation(digest: bytes) -> TruncationResult:
    """
    RFC 4226 §5.3 dynamic truncation.

    The low nibble of the last byte selects a 4-byte window of the digest,
    read as a big-endian 32-bit integer with the top bit cleared.

    Raises:
        ValueError: If ``digest`` is shorter than 20 bytes.
    """
    digest = bytes(digest)
    if len(digest) < _MIN_DIGEST_SIZE:
        raise ValueError(
            f"Digest must be at least {_MIN_DIGEST_SIZE} bytes, got {len(digest)}."
        )
    offset = digest[-1] & 0x0F
    selected = digest[offset : offset + 4]
    binary = int.from_bytes(selected, "big")
    return TruncationResult(
        offset=offset,
        selected_bytes=selected,
        binary_value=binary,
        masked_value=binary & 0x7FFFFFFF,
    )


def otp_from_truncation(truncation: TruncationResult, digits: int) -> str:
    """``masked_value mod 10**digits``, zero-padded to ``digits``."""
    digits = validate_digits(digits)
    return str(truncation.masked_value % (10**digits)).zfill(digits)


def compute(
    secret: bytes,
    counter: int,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
    timestamp: Optional[int] = None,
) -> TOTPResult:
    """
    Run the HOTP pipeline (RFC 4226 §5) for an explicit counter.

    Args:
        secret:    Raw secret bytes.
        counter:   Moving factor, ``0 <= counter < 2**64``.
        algorithm: HMAC algorithm.
        digits:    Number of OTP digits.
        timestamp: Unix time the counter was derived from, if any.

    Returns:
        :class:`TOTPResult` with every intermediate value.

    Raises:
        InvalidCounter, InvalidDigitCount, UnsupportedAlgorithm: On bad input.
    """
    digits = validate_digits(digits)
    msg = counter_to_bytes(counter)
    mac = compute_hmac(secret, msg, algorithm)
    truncation = dynamic_truncation(mac.digest)
    otp = otp_from_truncation(truncation, digits)
    logger.debug(
        "counter=%d msg=%s %s=%s offset=%d masked=%d",
        counter,
        msg.hex(),
        mac.algorithm.value,
        mac.digest_hex,
        truncation.offset,
        truncation.masked_value,
    )
    return TOTPResult(
        otp=otp,
        counter=counter,
        counter_bytes=msg,
        digest=mac.digest,
        truncation=truncation,
        algorithm=mac.algorithm,
        digits=digits,
        timestamp=timestamp,
    )


def generate(config: TOTPConfig) -> TOTPResult:
    """Generate the TOTP for the instant ``config.time_manager`` reports."""
    state = config.time_manager.state()
    return compute(
        config.secret,
        state.counter,
        algorithm=config.algorithm,
        digits=config.digits,
        timestamp=state.current_time,
    )


def verify(
    config: TOTPConfig, candidate_otp: str, window: int = DEFAULT_WINDOW
) -> VerifyResult:
    """
    Check ``candidate_otp`` against the counters ``c0 - window .. c0 + window``.

    Counters are tried in ascending order and the first match wins. The time
    manager is read once and never mutated. Counters below zero are listed in
    the result but cannot match.

    Args:
        config:        Secret, algorithm, digits and clock.
        candidate_otp: Code to check, compared exactly.
        window:        Allowed drift in steps on either side.

    Returns:
        :class:`VerifyResult`.
    """
    window = validate_window(window)
    centre = config.time_manager.counter()
    checked: List[int] = []
    checks: List[CounterCheck] = []

    for i in range(-window, window + 1):
        counter = centre + i
        checked.append(counter)
        if counter < 0:
            checks.append(CounterCheck(counter, None, False, i == 0))
            continue
        expected = compute(config.secret, counter, config.algorithm, config.digits).otp
        matched = constant_time_compare(candidate_otp, expected)
        checks.append(CounterCheck(counter, expected, matched, i == 0))
        if matched:
            logger.debug("OTP matched counter %d (drift %+d)", counter, i)
            return VerifyResult(True, counter, tuple(checked), tuple(checks))

    logger.debug("OTP did not match counters %d..%d", checked[0], checked[-1])
    return VerifyResult(False, None, tuple(checked), tuple(checks))


# ── Convenience wrappers ──────────────────────────────────────────────────────

def generate_totp(
    secret_bytes: bytes,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_STEP,
    algorithm: Algorithm = Algorithm.SHA1,
    timestamp: Optional[float] = None,
) -> str:
    """
    Generate a TOTP code.

    Args:
        secret_bytes: Raw (already base32-decoded) secret bytes.
        digits:       Number of digits in the OTP (default 6).
        period:       Time step in seconds (default 30).
        algorithm:    HMAC algorithm (default SHA1 for GA compatibility).
        timestamp:    Override Unix timestamp (uses the clock if None).

    Returns:
        OTP string, zero-padded to ``digits`` characters.
    """
    if timestamp is None:
        tm = TimeManager(step=period)
    else:
        tm = TimeManager.at(timestamp, step=period)
    config = TOTPConfig(secret_bytes, algorithm=algorithm, digits=digits, time_manager=tm)
    return generate(config).otp


def remaining_seconds(period: int = DEFAULT_STEP, timestamp: Optional[float] = None) -> int:
    """Return seconds until the current TOTP window expires."""
    if timestamp is None:
        return TimeManager(step=period).time_remaining()
    return seconds_remaining(timestamp, period)


def validate_totp(
    token: str,
    secret_bytes: bytes,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_STEP,
    algorithm: Algorithm = Algorithm.SHA1,
    window: int = DEFAULT_WINDOW,
    timestamp: Optional[float] = None,
) -> bool:
    """
    Validate a TOTP token within ±``window`` time steps.

    Args:
        token:        Token to validate (surrounding whitespace ignored).
        secret_bytes: Raw secret bytes.
        digits:       Expected number of digits.
        period:       Time step in seconds.
        algorithm:    HMAC algorithm.
        window:       Allowed skew in steps (default 1).
        timestamp:    Override Unix timestamp.

    Returns:
        True if the token is valid within the window.
    """
    if timestamp is None:
        tm = TimeManager(step=period)
    else:
        tm = TimeManager.at(timestamp, step=period)
    config = TOTPConfig(secret_bytes, algorithm=algorithm, digits=digits, time_manager=tm)
    return verify(config, token.strip(), window=window).valid
