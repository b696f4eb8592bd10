"""
Time / counter handling for TOTP (RFC 6238 §4).

``TimeManager`` turns wall-clock time, optionally frozen or shifted by an
offset, into the moving factor fed to HOTP. The module-level helpers do the
same arithmetic on explicit values and need no mutable object.
"""

import struct
import time
from dataclasses import dataclass
from typing import Optional

from otplab.errors import InvalidCounter, InvalidStep

DEFAULT_STEP = 30
_MAX_COUNTER = 2**64


def validate_step(step: int) -> int:
    if isinstance(step, bool) or not isinstance(step, int) or step < 1:
        raise InvalidStep(step)
    return step


def counter_at(timestamp: float, step: int = DEFAULT_STEP) -> int:
    """``floor(timestamp / step)`` for a Unix timestamp."""
    return int(timestamp) // validate_step(step)


def seconds_remaining(timestamp: float, step: int = DEFAULT_STEP) -> int:
    """Seconds until the window containing ``timestamp`` ends, in (0, step]."""
    return step - (int(timestamp) % validate_step(step))


def counter_to_bytes(counter: int) -> bytes:
    """
    Serialize ``counter`` as the 8-byte big-endian HOTP message.

    Raises:
        InvalidCounter: If ``counter`` is negative or does not fit 64 bits.
    """
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise InvalidCounter(counter)
    if not 0 <= counter < _MAX_COUNTER:
        raise InvalidCounter(counter)
    return struct.pack(">Q", counter)


@dataclass(frozen=True)
class TimeState:
    """Snapshot of a :class:`TimeManager`."""

    current_time: int
    counter: int
    step: int
    time_remaining: int
    is_frozen: bool
    time_offset: int = 0


class TimeManager:
    """
    Source of the current TOTP counter.

    ``frozen_time`` pins the clock to an absolute Unix time; otherwise the
    real clock shifted by ``time_offset`` seconds is used. Both exist for
    deterministic tests and simulation.
    """

    def __init__(
        self,
        step: int = DEFAULT_STEP,
        time_offset: int = 0,
        frozen_time: Optional[int] = None,
    ) -> None:
        self._step = validate_step(step)
        self.time_offset = int(time_offset)
        self.frozen_time = None if frozen_time is None else int(frozen_time)

    @classmethod
    def at(cls, timestamp: float, step: int = DEFAULT_STEP) -> "TimeManager":
        """A manager frozen at ``timestamp``."""
        return cls(step=step, frozen_time=int(timestamp))

    def __repr__(self) -> str:
        return (
            f"TimeManager(step={self._step}, time_offset={self.time_offset}, "
            f"frozen_time={self.frozen_time})"
        )

    # ── Step ─────────────────────────────────────────────────────────────

    @property
    def step(self) -> int:
        return self._step

    @step.setter
    def step(self, value: int) -> None:
        self._step = validate_step(value)

    # ── Clock ────────────────────────────────────────────────────────────

    def current_time(self) -> int:
        if self.frozen_time is not None:
            return self.frozen_time
        return int(time.time()) + self.time_offset

    def counter(self) -> int:
        return self.current_time() // self._step

    def time_remaining(self) -> int:
        return self._step - (self.current_time() % self._step)

    def counter_bytes(self) -> bytes:
        return counter_to_bytes(self.counter())

    # ── Freezing ─────────────────────────────────────────────────────────

    @property
    def is_frozen(self) -> bool:
        return self.frozen_time is not None

    def freeze(self) -> None:
        """Pin the clock at the current instant."""
        self.frozen_time = self.current_time()

    def freeze_at(self, timestamp: float) -> None:
        self.frozen_time = int(timestamp)

    def unfreeze(self) -> None:
        self.frozen_time = None

    # ── Snapshots ────────────────────────────────────────────────────────

    def state(self) -> TimeState:
        # One clock read so counter and remaining agree at a step boundary.
        now = self.current_time()
        return TimeState(
            current_time=now,
            counter=now // self._step,
            step=self._step,
            time_remaining=self._step - (now % self._step),
            is_frozen=self.is_frozen,
            time_offset=self.time_offset,
        )

    def copy(self) -> "TimeManager":
        return TimeManager(
            step=self._step,
            time_offset=self.time_offset,
            frozen_time=self.frozen_time,
        )
