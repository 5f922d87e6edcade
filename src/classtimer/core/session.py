"""Timer Session: owns the runtime state of one timer and drives it per tick.

The session holds no clock.  Whoever drives it calls :meth:`TimerSession.tick`
once per second and reacts to the returned :class:`TickResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from classtimer.config import TimerConfig, save_config
from classtimer.core.duration import validate_duration
from classtimer.core.formatting import format_time, get_progress, get_readable_time_remaining
from classtimer.core.thresholds import (
    calculate_warning_thresholds,
    check_warnings,
    is_in_warning_zone,
)
from classtimer.core.timer import InvalidStateError, TimerStatus, is_valid_transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimerState:
    """Snapshot of a timer at one point in time."""

    remaining_seconds: int = 0
    total_seconds: int = 0
    status: TimerStatus = TimerStatus.IDLE
    warning_thresholds: tuple[int, ...] = ()
    warnings_triggered: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class TickResult:
    """What happened on one tick."""

    state: TimerState
    fired: tuple[int, ...] = ()
    completed: bool = False


class TimerSession:
    """Caller-side owner of the timer state.

    Every action replaces :attr:`state` with a new snapshot.  Status changes
    are checked with :func:`is_valid_transition` before they are committed.
    """

    def __init__(self, config: TimerConfig | None = None, config_dir: Path | None = None) -> None:
        self._config: TimerConfig = config if config is not None else TimerConfig()
        self._config_dir: Path | None = config_dir
        self._state: TimerState = TimerState()

    # -- public API ----------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def config(self) -> TimerConfig:
        return self._config

    def set_duration(self, seconds: int) -> TimerState:
        """Load a new duration and return to IDLE.

        The duration is remembered as ``last_used_duration`` in the config.

        Raises :class:`~classtimer.core.duration.InvalidDurationError` for an
        out-of-range duration.
        """
        if self._state.status in (TimerStatus.RUNNING, TimerStatus.PAUSED):
            raise InvalidStateError(
                f"set_duration() is not valid from {self._state.status.value} state"
            )
        seconds = validate_duration(seconds).unwrap()
        self._state = TimerState(
            remaining_seconds=seconds,
            total_seconds=seconds,
            status=TimerStatus.IDLE,
            warning_thresholds=calculate_warning_thresholds(seconds, self._config),
        )
        self._store_config(self._config.update(last_used_duration=seconds))
        logger.debug("Duration set to %ds (%dmin)", seconds, seconds // 60)
        return self._state

    def start(self) -> TimerState:
        """Start the countdown.  Valid only from IDLE with time loaded."""
        if self._state.status != TimerStatus.IDLE:
            raise InvalidStateError(f"start() is not valid from {self._state.status.value} state")
        if self._state.remaining_seconds == 0:
            raise InvalidStateError("start() is not valid with 0 seconds remaining")
        self._transition("start", TimerStatus.RUNNING)
        logger.debug("Started")
        return self._state

    def pause(self) -> TimerState:
        """Freeze the countdown.  Valid only from RUNNING."""
        self._transition("pause", TimerStatus.PAUSED)
        logger.debug("Paused")
        return self._state

    def resume(self) -> TimerState:
        """Continue a paused countdown.  Valid only from PAUSED."""
        if self._state.status != TimerStatus.PAUSED:
            raise InvalidStateError(f"resume() is not valid from {self._state.status.value} state")
        self._transition("resume", TimerStatus.RUNNING)
        logger.debug("Resumed")
        return self._state

    def restart(self) -> TimerState:
        """Run a completed timer again with its full duration."""
        if self._state.status != TimerStatus.COMPLETED:
            raise InvalidStateError(
                f"restart() is not valid from {self._state.status.value} state"
            )
        self._transition(
            "restart",
            TimerStatus.RUNNING,
            remaining_seconds=self._state.total_seconds,
            warnings_triggered=frozenset(),
        )
        logger.debug("Restarted with %ds", self._state.total_seconds)
        return self._state

    def stop(self) -> TimerState:
        """Return to IDLE, keeping the duration loaded."""
        self._transition(
            "stop",
            TimerStatus.IDLE,
            remaining_seconds=self._state.total_seconds,
            warnings_triggered=frozenset(),
        )
        logger.debug("Stopped, reset to total duration")
        return self._state

    def reset(self) -> TimerState:
        """Return to IDLE and clear the duration."""
        self._transition(
            "reset",
            TimerStatus.IDLE,
            remaining_seconds=0,
            total_seconds=0,
            warning_thresholds=(),
            warnings_triggered=frozenset(),
        )
        logger.debug("Reset to 0")
        return self._state

    def tick(self) -> TickResult:
        """Advance the countdown by one second.

        Does nothing unless RUNNING.  Reaching zero completes the timer;
        otherwise any threshold landed on for the first time is reported in
        ``fired``.
        """
        state = self._state
        if state.status != TimerStatus.RUNNING:
            return TickResult(state=state)

        remaining = state.remaining_seconds - 1
        if remaining <= 0:
            self._state = replace(state, remaining_seconds=0, status=TimerStatus.COMPLETED)
            logger.debug("Completed")
            return TickResult(state=self._state, completed=True)

        fired, triggered = check_warnings(
            remaining, state.warning_thresholds, state.warnings_triggered
        )
        for threshold in fired:
            logger.info("Warning at %ds", threshold)
        self._state = replace(state, remaining_seconds=remaining, warnings_triggered=triggered)
        return TickResult(state=self._state, fired=fired)

    def update_config(self, **changes: Any) -> TimerConfig:
        """Apply *changes* to the config, saving it when a config dir was given.

        Thresholds of an already loaded duration are left as they are; they
        are recalculated on the next :meth:`set_duration`.
        """
        self._store_config(self._config.update(**changes))
        logger.debug("Config updated")
        return self._config

    # -- read helpers --------------------------------------------------------

    @property
    def formatted_time(self) -> str:
        return format_time(self._state.remaining_seconds)

    @property
    def readable_remaining(self) -> str:
        return get_readable_time_remaining(self._state.remaining_seconds)

    @property
    def progress(self) -> float:
        return get_progress(self._state.remaining_seconds, self._state.total_seconds)

    @property
    def in_warning_zone(self) -> bool:
        return is_in_warning_zone(self._state.remaining_seconds, self._state.warning_thresholds)

    # -- private helpers -----------------------------------------------------

    def _store_config(self, config: TimerConfig) -> None:
        """Keep *config*, saving it when the session has a config dir."""
        self._config = config
        if self._config_dir is not None:
            save_config(config, self._config_dir)

    def _transition(self, action: str, target: TimerStatus, **changes: Any) -> None:
        """Raise ``InvalidStateError`` unless *target* is reachable, then commit."""
        if not is_valid_transition(self._state.status, target):
            raise InvalidStateError(
                f"{action}() is not valid from {self._state.status.value} state"
            )
        self._state = replace(self._state, status=target, **changes)
