"""Timer status and the transitions allowed between statuses."""

from __future__ import annotations

from enum import Enum


class TimerStatus(Enum):
    """Possible statuses of the timer."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class InvalidStateError(Exception):
    """Raised when an action is attempted from a status that does not allow it."""


def allowed_transitions(status: TimerStatus) -> frozenset[TimerStatus]:
    """Return the statuses reachable from *status* in one step.

    IDLE is the only status that may transition to itself.  COMPLETED is not
    terminal: a finished timer can be reset or started again.
    """
    match status:
        case TimerStatus.IDLE:
            return frozenset({TimerStatus.RUNNING, TimerStatus.IDLE})
        case TimerStatus.RUNNING:
            return frozenset({TimerStatus.PAUSED, TimerStatus.IDLE})
        case TimerStatus.PAUSED:
            return frozenset({TimerStatus.RUNNING, TimerStatus.IDLE})
        case TimerStatus.COMPLETED:
            return frozenset({TimerStatus.IDLE, TimerStatus.RUNNING})
        case _:
            return frozenset()


def _coerce(status: TimerStatus | str) -> TimerStatus | None:
    if isinstance(status, TimerStatus):
        return status
    try:
        return TimerStatus(status)
    except ValueError:
        return None


def is_valid_transition(current: TimerStatus | str, next_status: TimerStatus | str) -> bool:
    """Return True if moving from *current* to *next_status* is legal.

    Accepts members or their string values; unknown values are never valid.
    """
    source = _coerce(current)
    target = _coerce(next_status)
    if source is None or target is None:
        return False
    return target in allowed_transitions(source)
