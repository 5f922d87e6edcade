"""Timer configuration with JSON file persistence.

Only configuration is stored on disk; runtime timer state never is.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "classtimer"
_CONFIG_FILE = "config.json"
_ENV_CONFIG_DIR = "CLASSTIMER_CONFIG_DIR"

# 5, 10, 15 and 30 minutes
DEFAULT_PRESETS = (300, 600, 900, 1800)


class ConfigError(Exception):
    """Raised when the config file cannot be parsed."""


@dataclass(frozen=True)
class TimerConfig:
    """User preferences for the timer."""

    warning_at_2min: bool = True
    warning_at_5min: bool = True
    custom_presets: tuple[int, ...] = field(default_factory=tuple)
    last_used_duration: int | None = 300

    def update(self, **changes: Any) -> TimerConfig:
        """Return a copy with *changes* applied."""
        if "custom_presets" in changes:
            changes["custom_presets"] = tuple(changes["custom_presets"])
        return replace(self, **changes)

    @property
    def presets(self) -> tuple[int, ...]:
        """Built-in presets followed by any custom ones not already listed."""
        extra = tuple(p for p in dict.fromkeys(self.custom_presets) if p not in DEFAULT_PRESETS)
        return DEFAULT_PRESETS + extra

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["custom_presets"] = list(self.custom_presets)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimerConfig:
        """Build a config from decoded JSON, falling back to defaults for missing keys."""
        default = cls()
        warning_at_2min = data.get("warning_at_2min", default.warning_at_2min)
        warning_at_5min = data.get("warning_at_5min", default.warning_at_5min)
        presets = data.get("custom_presets", [])
        last_used = data.get("last_used_duration", default.last_used_duration)

        if not isinstance(warning_at_2min, bool) or not isinstance(warning_at_5min, bool):
            raise ConfigError("warning flags must be booleans")
        if not isinstance(presets, list) or not all(
            isinstance(p, int) and not isinstance(p, bool) for p in presets
        ):
            raise ConfigError("custom_presets must be a list of integers")
        if last_used is not None and (
            not isinstance(last_used, int) or isinstance(last_used, bool)
        ):
            raise ConfigError("last_used_duration must be an integer")

        return cls(
            warning_at_2min=warning_at_2min,
            warning_at_5min=warning_at_5min,
            custom_presets=tuple(presets),
            last_used_duration=last_used,
        )


def default_config_dir() -> Path:
    """Return ``$CLASSTIMER_CONFIG_DIR`` or ``~/.config/classtimer``."""
    override = os.environ.get(_ENV_CONFIG_DIR)
    return Path(override) if override else _DEFAULT_CONFIG_DIR


def load_config(config_dir: Path | None = None) -> TimerConfig:
    """Load the config file, returning defaults if it does not exist."""
    path = (config_dir if config_dir is not None else default_config_dir()) / _CONFIG_FILE
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return TimerConfig()

    try:
        with open(path, encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return TimerConfig.from_dict(data)


def save_config(config: TimerConfig, config_dir: Path | None = None) -> Path:
    """Write *config* with an exclusive lock and return the file path."""
    directory = config_dir if config_dir is not None else default_config_dir()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / _CONFIG_FILE
    with open(path, "w", encoding="utf-8") as f:
        fcntl.flock(f, fcntl.LOCK_EX)
        json.dump(config.to_dict(), f)
    logger.debug("Saved config to %s", path)
    return path
