"""Duration validation and ``MM:SS`` parsing.

Both entry points return a :class:`Result` instead of raising, so callers can
branch on ``result.ok``.  ``Result.unwrap()`` converts a failure back into the
matching exception for code that prefers exceptions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

MIN_DURATION = 1
MAX_DURATION = 86400  # 24 hours

_TIME_PATTERN = re.compile(r"(\d{1,3}):(\d{2})", re.ASCII)


class DurationErrorKind(Enum):
    """Why a duration was rejected."""

    INVALID_DURATION = "invalid_duration"
    INVALID_FORMAT = "invalid_format"


class DurationError(ValueError):
    """Base class for rejected durations."""

    kind: DurationErrorKind


class InvalidDurationError(DurationError):
    """The number of seconds is not an integer in 1--86400."""

    kind = DurationErrorKind.INVALID_DURATION


class InvalidFormatError(DurationError):
    """The text does not look like ``MM:SS`` or ``MMM:SS``."""

    kind = DurationErrorKind.INVALID_FORMAT


_ERRORS = {
    DurationErrorKind.INVALID_DURATION: InvalidDurationError,
    DurationErrorKind.INVALID_FORMAT: InvalidFormatError,
}


@dataclass(frozen=True)
class Result:
    """Outcome of validating or parsing a duration.

    Exactly one of ``value`` and ``error`` is set.
    """

    value: int | None = None
    error: DurationErrorKind | None = None
    message: str = ""

    @classmethod
    def success(cls, value: int) -> Result:
        return cls(value=value)

    @classmethod
    def failure(cls, error: DurationErrorKind, message: str) -> Result:
        return cls(error=error, message=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> int:
        """Return the value, or raise the exception matching ``error``."""
        if self.error is not None:
            raise _ERRORS[self.error](self.message)
        assert self.value is not None
        return self.value


def validate_duration(seconds: object) -> Result:
    """Check that *seconds* is a whole number of seconds in 1--86400.

    Integral floats (``300.0``) are accepted and normalised to ``int``.
    Booleans are rejected.
    """
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return Result.failure(
            DurationErrorKind.INVALID_DURATION, "Timer duration must be a positive integer"
        )
    if isinstance(seconds, float):
        if not seconds.is_integer():
            return Result.failure(
                DurationErrorKind.INVALID_DURATION, "Timer duration must be a positive integer"
            )
        seconds = int(seconds)

    if seconds < MIN_DURATION:
        return Result.failure(
            DurationErrorKind.INVALID_DURATION, "Timer duration must be a positive integer"
        )
    if seconds > MAX_DURATION:
        return Result.failure(
            DurationErrorKind.INVALID_DURATION, "Timer duration cannot exceed 24 hours"
        )
    return Result.success(seconds)


def parse_time_string(text: str) -> Result:
    """Parse ``"MM:SS"`` or ``"MMM:SS"`` into seconds.

    The seconds field is not range-checked, so ``"01:75"`` is 135 seconds.
    The three-digit minute field caps the input at ``999:99``, well below
    :data:`MAX_DURATION`.
    """
    match = _TIME_PATTERN.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        return Result.failure(
            DurationErrorKind.INVALID_FORMAT, "Invalid time format. Use MM:SS or MMM:SS"
        )

    minutes, secs = int(match.group(1)), int(match.group(2))
    return validate_duration(minutes * 60 + secs)
