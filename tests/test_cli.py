"""Tests for the root CLI group."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from quickdoc import __version__
from quickdoc.cli import cli


class TestRootGroup:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_subcommand_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        for name in ("get", "set", "push", "pull", "all", "export", "import"):
            assert name in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_help_does_not_touch_database(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cli_runner.invoke(cli, ["get", "--help"])
        assert not (tmp_path / ".quickdoc").exists()

    @pytest.mark.usefixtures("_isolated_project")
    def test_explicit_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cfg = tmp_path / "conf" / "alt.toml"
        cfg.parent.mkdir()
        cfg.write_text('[store]\npath = "alt.db"\n[collection]\nname = "alt"\n')
        result = cli_runner.invoke(cli, ["-c", str(cfg), "--json", "set", "a", "1"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "conf" / "alt.db").is_file()

    @pytest.mark.usefixtures("_isolated_project")
    def test_missing_explicit_config(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-c", "nope.toml", "count"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_verbose_json_includes_telemetry(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "--json", "count"])
        assert result.exit_code == 0, result.output
        assert '"telemetry"' in result.output
        assert "DocumentService.count" in result.output
