"""Warning thresholds: which ones apply, and when they fire."""

from __future__ import annotations

from collections.abc import Iterable, Set
from dataclasses import dataclass
from typing import Protocol

TWO_MINUTES = 120
FIVE_MINUTES = 300


class SupportsWarningConfig(Protocol):
    """Anything carrying the two warning switches."""

    @property
    def warning_at_2min(self) -> bool: ...

    @property
    def warning_at_5min(self) -> bool: ...


@dataclass(frozen=True)
class WarningConfig:
    """Which warnings are enabled."""

    warning_at_2min: bool = True
    warning_at_5min: bool = True


def calculate_warning_thresholds(
    total_seconds: int, config: SupportsWarningConfig
) -> tuple[int, ...]:
    """Return the thresholds, ascending, that apply to a timer of *total_seconds*.

    A threshold only applies when the duration is strictly longer than it.
    """
    thresholds: list[int] = []
    if config.warning_at_2min and total_seconds > TWO_MINUTES:
        thresholds.append(TWO_MINUTES)
    if config.warning_at_5min and total_seconds > FIVE_MINUTES:
        thresholds.append(FIVE_MINUTES)
    return tuple(thresholds)


def is_in_warning_zone(remaining_seconds: int, thresholds: Iterable[int]) -> bool:
    """True once *remaining_seconds* is at or below any threshold."""
    return any(remaining_seconds <= threshold for threshold in thresholds)


def has_warning_been_triggered(threshold: int, triggered_warnings: Set[int]) -> bool:
    return threshold in triggered_warnings


def check_warnings(
    remaining_seconds: int,
    thresholds: Iterable[int],
    triggered_warnings: Set[int],
) -> tuple[tuple[int, ...], frozenset[int]]:
    """Decide which warnings fire on this tick.

    A threshold fires when *remaining_seconds* lands exactly on it and it has
    not fired yet.  Returns ``(fired, triggered)`` where *triggered* is a new
    set including the fired thresholds; the input set is left untouched.
    """
    fired = tuple(
        threshold
        for threshold in thresholds
        if remaining_seconds == threshold
        and not has_warning_been_triggered(threshold, triggered_warnings)
    )
    return fired, frozenset(triggered_warnings).union(fired)
