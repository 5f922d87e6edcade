"""CLI entry point for classtimer.

Uses Click to expose the ``classtimer`` command group.  Every command is a
thin wrapper over the pure timer functions or a :class:`TimerSession`.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Callable, TypeVar

import click

import classtimer
from classtimer.config import (
    ConfigError,
    TimerConfig,
    default_config_dir,
    load_config,
    save_config,
)
from classtimer.core.duration import DurationError, parse_time_string, validate_duration
from classtimer.core.formatting import format_time, get_progress, get_readable_time_remaining
from classtimer.core.session import TimerSession
from classtimer.core.thresholds import WarningConfig, calculate_warning_thresholds
from classtimer.core.timer import InvalidStateError, TimerStatus, is_valid_transition

T = TypeVar("T")

_STATUS_CHOICE = click.Choice([status.value for status in TimerStatus])


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting timer errors to a CLI error.

    The message is printed to stderr and the process exits with code 1.
    """
    try:
        return action()
    except (InvalidStateError, DurationError, ConfigError) as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _parse_duration(text: str) -> int:
    """Accept plain seconds or ``MM:SS``."""
    if text.isascii() and text.isdigit():
        return validate_duration(int(text)).unwrap()
    return parse_time_string(text).unwrap()


def _resolve_duration(duration: str | None, preset: int | None, settings: TimerConfig) -> int:
    """Pick the duration to run: DURATION, then --preset, then the last used one."""
    if duration is not None and preset is not None:
        click.echo("Give either DURATION or --preset, not both", err=True)
        sys.exit(1)
    if duration is not None:
        return _run(lambda: _parse_duration(duration))
    if preset is not None:
        if preset not in settings.presets:
            choices = ", ".join(str(p) for p in settings.presets)
            click.echo(f"Unknown preset {preset}; choose from {choices}", err=True)
            sys.exit(1)
        return preset
    if settings.last_used_duration is None:
        click.echo("No DURATION given and no last used duration", err=True)
        sys.exit(1)
    return _run(lambda: validate_duration(settings.last_used_duration).unwrap())


@click.group()
@click.version_option(version=classtimer.__version__, prog_name="classtimer")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding config.json.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: Path | None) -> None:
    """classtimer: countdown-timer tools for the classroom."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config_dir


@cli.command("format")
@click.argument("seconds", type=click.IntRange(min=0))
@click.option("--readable", is_flag=True, help="Use words instead of MM:SS.")
def format_command(seconds: int, readable: bool) -> None:
    """Format SECONDS as MM:SS."""
    click.echo(get_readable_time_remaining(seconds) if readable else format_time(seconds))


@cli.command()
@click.argument("text")
def parse(text: str) -> None:
    """Parse an MM:SS or MMM:SS string into seconds."""
    seconds = _run(parse_time_string(text).unwrap)
    click.echo(seconds)


@cli.command()
@click.argument("remaining", type=int)
@click.argument("total", type=int)
def progress(remaining: int, total: int) -> None:
    """Show the percentage of TOTAL elapsed with REMAINING seconds left."""
    click.echo(f"{get_progress(remaining, total):.1f}%")


@cli.command()
@click.argument("total", type=int)
@click.option("--no-2min", "no_2min", is_flag=True, help="Disable the 2 minute warning.")
@click.option("--no-5min", "no_5min", is_flag=True, help="Disable the 5 minute warning.")
def thresholds(total: int, no_2min: bool, no_5min: bool) -> None:
    """List the warning thresholds for a TOTAL-second timer."""
    config = WarningConfig(warning_at_2min=not no_2min, warning_at_5min=not no_5min)
    found = calculate_warning_thresholds(total, config)
    if not found:
        click.echo("No warnings")
        return
    for threshold in found:
        click.echo(f"{threshold}s ({format_time(threshold)})")


@cli.command()
@click.argument("current", type=_STATUS_CHOICE)
@click.argument("next_status", metavar="NEXT", type=_STATUS_CHOICE)
def transition(current: str, next_status: str) -> None:
    """Check whether CURRENT -> NEXT is a legal status change."""
    if is_valid_transition(current, next_status):
        click.echo(f"{current} -> {next_status}: allowed")
        return
    click.echo(f"{current} -> {next_status}: not allowed", err=True)
    sys.exit(1)


@cli.command()
@click.argument("duration", required=False)
@click.option("--preset", type=int, default=None, help="Use a preset duration, in seconds.")
@click.option(
    "--ticks",
    type=click.IntRange(min=0),
    default=None,
    help="Ticks to run (default: until done).",
)
@click.pass_obj
def simulate(
    config_dir: Path | None, duration: str | None, preset: int | None, ticks: int | None
) -> None:
    """Run a timer of DURATION (seconds or MM:SS) tick by tick, without waiting.

    Without DURATION or --preset the last used duration is run again.
    """
    directory = config_dir if config_dir is not None else default_config_dir()
    settings = _run(lambda: load_config(directory))
    seconds = _resolve_duration(duration, preset, settings)

    session = TimerSession(config=settings, config_dir=directory)
    _run(lambda: session.set_duration(seconds))
    _run(session.start)

    limit = seconds if ticks is None else ticks
    for _ in range(limit):
        result = session.tick()
        for threshold in result.fired:
            click.echo(
                f"[{session.formatted_time}] warning: "
                f"{get_readable_time_remaining(threshold)} remaining"
            )
        if result.completed:
            click.echo("[00:00] completed")
            break

    click.echo(f"{session.formatted_time} {session.state.status.value} ({session.progress:.1f}%)")


@cli.group()
def config() -> None:
    """Show or change timer settings."""


@config.command("show")
@click.pass_obj
def config_show(config_dir: Path | None) -> None:
    """Print the current settings."""
    current = _run(lambda: load_config(config_dir))
    click.echo(f"warning_at_2min: {current.warning_at_2min}")
    click.echo(f"warning_at_5min: {current.warning_at_5min}")
    click.echo(f"last_used_duration: {current.last_used_duration}")
    click.echo("presets: " + ", ".join(format_time(p) for p in current.presets))


@config.command("set")
@click.option("--warning-2min/--no-warning-2min", default=None)
@click.option("--warning-5min/--no-warning-5min", default=None)
@click.option(
    "--add-preset",
    "add_presets",
    multiple=True,
    help="Add a custom preset (seconds or MM:SS). Repeatable.",
)
@click.option("--clear-presets", is_flag=True, help="Remove all custom presets.")
@click.pass_obj
def config_set(
    config_dir: Path | None,
    warning_2min: bool | None,
    warning_5min: bool | None,
    add_presets: tuple[str, ...],
    clear_presets: bool,
) -> None:
    """Enable or disable warnings and manage custom presets."""
    current = _run(lambda: load_config(config_dir))
    changes: dict[str, Any] = {}
    if warning_2min is not None:
        changes["warning_at_2min"] = warning_2min
    if warning_5min is not None:
        changes["warning_at_5min"] = warning_5min
    if clear_presets or add_presets:
        kept = () if clear_presets else current.custom_presets
        added = tuple(_run(lambda: _parse_duration(text)) for text in add_presets)
        changes["custom_presets"] = tuple(dict.fromkeys(kept + added))
    path = save_config(current.update(**changes), config_dir)
    click.echo(f"Saved {path}")
