"""Tests for the classtimer CLI layer."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import click.testing
import pytest

from classtimer.cli.main import cli
from classtimer.core.timer import InvalidStateError


@pytest.fixture()
def runner() -> click.testing.CliRunner:
    """Return a Click CliRunner for invoking CLI commands."""
    return click.testing.CliRunner()


@pytest.fixture()
def config_args(tmp_path: Path) -> list[str]:
    """Point the CLI at an empty config directory."""
    return ["--config-dir", str(tmp_path)]


# ---------------------------------------------------------------------------
# classtimer format / parse / progress
# ---------------------------------------------------------------------------


class TestFormatCommand:
    def test_format(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["format", "330"])
        assert result.exit_code == 0
        assert result.output == "05:30\n"

    def test_format_readable(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["format", "150", "--readable"])
        assert result.output == "2 minutes 30 seconds\n"

    def test_format_negative_rejected(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["format", "--", "-1"])
        assert result.exit_code != 0


class TestParseCommand:
    def test_parse(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["parse", "05:30"])
        assert result.exit_code == 0
        assert result.output == "330\n"

    def test_parse_bad_format(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["parse", "bad"])
        assert result.exit_code == 1
        assert "Invalid time format" in result.output

    def test_parse_zero(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["parse", "00:00"])
        assert result.exit_code == 1
        assert "positive integer" in result.output


class TestProgressCommand:
    def test_progress(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["progress", "30", "100"])
        assert result.output == "70.0%\n"

    def test_progress_zero_total(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["progress", "30", "0"])
        assert result.output == "0.0%\n"


# ---------------------------------------------------------------------------
# classtimer thresholds / transition
# ---------------------------------------------------------------------------


class TestThresholdsCommand:
    def test_both(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["thresholds", "600"])
        assert result.output == "120s (02:00)\n300s (05:00)\n"

    def test_disabled(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["thresholds", "600", "--no-5min"])
        assert result.output == "120s (02:00)\n"

    def test_none(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["thresholds", "120"])
        assert result.output == "No warnings\n"


class TestTransitionCommand:
    def test_allowed(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["transition", "completed", "running"])
        assert result.exit_code == 0
        assert "allowed" in result.output

    def test_not_allowed(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["transition", "running", "running"])
        assert result.exit_code == 1
        assert "not allowed" in result.output

    def test_unknown_status(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["transition", "stopped", "idle"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# classtimer simulate
# ---------------------------------------------------------------------------


class TestSimulateCommand:
    """``simulate`` drives a session without waiting on a clock."""

    def test_full_run(self, runner: click.testing.CliRunner, config_args: list[str]) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "10:00"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "[05:00] warning: 5 minutes remaining",
            "[02:00] warning: 2 minutes remaining",
            "[00:00] completed",
            "00:00 completed (100.0%)",
        ]

    def test_partial_run(self, runner: click.testing.CliRunner, config_args: list[str]) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "600", "--ticks", "150"])
        assert result.exit_code == 0
        assert result.output == "07:30 running (25.0%)\n"

    def test_uses_saved_config(
        self, runner: click.testing.CliRunner, config_args: list[str], tmp_path: Path
    ) -> None:
        (tmp_path / "config.json").write_text(json.dumps({"warning_at_5min": False}))
        result = runner.invoke(cli, [*config_args, "simulate", "600"])
        assert "5 minutes remaining" not in result.output
        assert "2 minutes remaining" in result.output

    def test_invalid_duration(
        self, runner: click.testing.CliRunner, config_args: list[str]
    ) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "0"])
        assert result.exit_code == 1
        assert "positive integer" in result.output

    def test_invalid_format(self, runner: click.testing.CliRunner, config_args: list[str]) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "ten"])
        assert result.exit_code == 1
        assert "Invalid time format" in result.output

    @patch("classtimer.cli.main.TimerSession")
    def test_invalid_state_error(
        self,
        mock_session_cls: MagicMock,
        runner: click.testing.CliRunner,
        config_args: list[str],
    ) -> None:
        """When the session refuses to start, print to stderr and exit 1."""
        mock_session_cls.return_value.start.side_effect = InvalidStateError(
            "start() is not valid from running state"
        )
        result = runner.invoke(cli, [*config_args, "simulate", "60"])
        assert result.exit_code == 1
        assert "start() is not valid from running state" in result.output

    def test_non_ascii_digits(
        self, runner: click.testing.CliRunner, config_args: list[str]
    ) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "²"])
        assert result.exit_code == 1
        assert "Invalid time format" in result.output

    def test_defaults_to_last_used_duration(
        self, runner: click.testing.CliRunner, config_args: list[str]
    ) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "--ticks", "0"])
        assert result.exit_code == 0
        assert result.output == "05:00 running (0.0%)\n"

    def test_remembers_last_duration(
        self, runner: click.testing.CliRunner, config_args: list[str], tmp_path: Path
    ) -> None:
        runner.invoke(cli, [*config_args, "simulate", "90", "--ticks", "0"])
        assert json.loads((tmp_path / "config.json").read_text())["last_used_duration"] == 90
        result = runner.invoke(cli, [*config_args, "simulate", "--ticks", "10"])
        assert result.output == "01:20 running (11.1%)\n"

    def test_no_last_used_duration(
        self, runner: click.testing.CliRunner, config_args: list[str], tmp_path: Path
    ) -> None:
        (tmp_path / "config.json").write_text(json.dumps({"last_used_duration": None}))
        result = runner.invoke(cli, [*config_args, "simulate"])
        assert result.exit_code == 1
        assert "no last used duration" in result.output

    def test_builtin_preset(self, runner: click.testing.CliRunner, config_args: list[str]) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "--preset", "900", "--ticks", "0"])
        assert result.exit_code == 0
        assert result.output == "15:00 running (0.0%)\n"

    def test_custom_preset(
        self, runner: click.testing.CliRunner, config_args: list[str], tmp_path: Path
    ) -> None:
        (tmp_path / "config.json").write_text(json.dumps({"custom_presets": [45]}))
        result = runner.invoke(cli, [*config_args, "simulate", "--preset", "45", "--ticks", "0"])
        assert result.output == "00:45 running (0.0%)\n"

    def test_unknown_preset(self, runner: click.testing.CliRunner, config_args: list[str]) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "--preset", "42"])
        assert result.exit_code == 1
        assert "Unknown preset 42" in result.output

    def test_duration_and_preset_conflict(
        self, runner: click.testing.CliRunner, config_args: list[str]
    ) -> None:
        result = runner.invoke(cli, [*config_args, "simulate", "60", "--preset", "300"])
        assert result.exit_code == 1
        assert "not both" in result.output


# ---------------------------------------------------------------------------
# classtimer config
# ---------------------------------------------------------------------------


class TestConfigCommand:
    def test_show_defaults(self, runner: click.testing.CliRunner, config_args: list[str]) -> None:
        result = runner.invoke(cli, [*config_args, "config", "show"])
        assert result.exit_code == 0
        assert "warning_at_2min: True" in result.output
        assert "last_used_duration: 300" in result.output

    def test_set_then_show(self, runner: click.testing.CliRunner, config_args: list[str]) -> None:
        result = runner.invoke(cli, [*config_args, "config", "set", "--no-warning-2min"])
        assert result.exit_code == 0
        result = runner.invoke(cli, [*config_args, "config", "show"])
        assert "warning_at_2min: False" in result.output
        assert "warning_at_5min: True" in result.output

    def test_corrupt_config(
        self, runner: click.testing.CliRunner, config_args: list[str], tmp_path: Path
    ) -> None:
        (tmp_path / "config.json").write_text("{oops")
        result = runner.invoke(cli, [*config_args, "config", "show"])
        assert result.exit_code == 1
        assert "Failed to parse" in result.output

    def test_non_utf8_config(
        self, runner: click.testing.CliRunner, config_args: list[str], tmp_path: Path
    ) -> None:
        (tmp_path / "config.json").write_bytes(b"\xff\xfe")
        result = runner.invoke(cli, [*config_args, "config", "show"])
        assert result.exit_code == 1
        assert "Failed to parse" in result.output

    def test_show_presets(self, runner: click.testing.CliRunner, config_args: list[str]) -> None:
        result = runner.invoke(cli, [*config_args, "config", "show"])
        assert "presets: 05:00, 10:00, 15:00, 30:00" in result.output

    def test_add_and_clear_presets(
        self, runner: click.testing.CliRunner, config_args: list[str]
    ) -> None:
        result = runner.invoke(
            cli, [*config_args, "config", "set", "--add-preset", "1:30", "--add-preset", "45"]
        )
        assert result.exit_code == 0
        result = runner.invoke(cli, [*config_args, "config", "show"])
        assert "presets: 05:00, 10:00, 15:00, 30:00, 01:30, 00:45" in result.output

        runner.invoke(cli, [*config_args, "config", "set", "--clear-presets"])
        result = runner.invoke(cli, [*config_args, "config", "show"])
        assert "presets: 05:00, 10:00, 15:00, 30:00\n" in result.output

    def test_add_invalid_preset(
        self, runner: click.testing.CliRunner, config_args: list[str]
    ) -> None:
        result = runner.invoke(cli, [*config_args, "config", "set", "--add-preset", "0"])
        assert result.exit_code == 1
        assert "positive integer" in result.output


# ---------------------------------------------------------------------------
# classtimer --version
# ---------------------------------------------------------------------------


class TestVersionFlag:
    def test_version_output(self, runner: click.testing.CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
