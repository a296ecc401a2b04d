"""
Unit tests for CLI commands.

Tests cover:
- demo command
- config command
"""

import asyncio
import logging
import textwrap

import pytest
from typer.testing import CliRunner

from change_tracker.cli.app import app
from change_tracker.cli.services import StoreValue, run_increment_demo

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """The demo command reconfigures logging; undo it after each test."""
    logger = logging.getLogger("change_tracker")
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers


class TestDemoCommand:
    """Tests for demo command."""

    def test_demo_default(self):
        """Demo increments 123 to 124 and reports the event."""
        result = runner.invoke(app, ["demo"])

        assert result.exit_code == 0
        assert "StoreValue(val=123)" in result.stdout
        assert "StoreValue(val=124)" in result.stdout
        assert "val=124" in result.stdout

    def test_demo_custom_values(self):
        result = runner.invoke(app, ["demo", "--start", "10", "--step", "5"])

        assert result.exit_code == 0
        assert "val=15" in result.stdout

    def test_demo_many_subscribers(self):
        result = runner.invoke(app, ["demo", "-n", "3"])

        assert result.exit_code == 0
        assert "#3" in result.stdout

    def test_demo_without_subscribers(self):
        result = runner.invoke(app, ["demo", "-n", "0"])

        assert result.exit_code == 0
        assert "No subscribers" in result.stdout
        assert "val=124" in result.stdout

    def test_demo_zero_step_reports_no_change(self):
        result = runner.invoke(app, ["demo", "--step", "0"])

        assert result.exit_code == 0
        assert "Value unchanged" in result.stdout

    def test_demo_verbose(self):
        result = runner.invoke(app, ["demo", "--verbose"])

        assert result.exit_code == 0

    def test_demo_missing_config(self, tmp_path):
        result = runner.invoke(app, ["demo", "--config", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "Path not found" in result.stdout


class TestConfigCommand:
    """Tests for config command."""

    def test_config_shows_file_values(self, tmp_path):
        path = tmp_path / "tracker.yaml"
        path.write_text(
            textwrap.dedent(
                """
                tracker:
                  channel_capacity: 2
                  overflow: drop_newest
                """
            ),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["config", str(path)])

        assert result.exit_code == 0
        assert "channel_capacity" in result.stdout
        assert "drop_newest" in result.stdout

    def test_config_invalid_file(self, tmp_path):
        path = tmp_path / "tracker.yaml"
        path.write_text("tracker:\n  channel_capacity: 0\n", encoding="utf-8")

        result = runner.invoke(app, ["config", str(path)])

        assert result.exit_code == 1
        assert "Failed to load settings" in result.stdout


def test_run_increment_demo_service():
    """Each subscriber observes the increment exactly once."""
    result = asyncio.run(run_increment_demo(1, step=2, subscribers=2))

    assert result.final == StoreValue(val=3)
    assert [(e.old.val, e.new.val) for e in result.events] == [(1, 3), (1, 3)]
