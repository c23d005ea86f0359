"""Unit tests for the main CLI application."""

import logging

from kprune import __version__
from kprune.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for the top-level Typer app."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"kprune version {__version__}" in result.output

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])

        assert "prune" in result.output
        assert "scan" in result.output

    def test_verbose_enables_debug_logging(self) -> None:
        runner.invoke(app, ["-v", "scan", "--help"])

        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_limits_logging_to_errors(self) -> None:
        runner.invoke(app, ["-q", "scan", "--help"])

        assert logging.getLogger().level == logging.ERROR
