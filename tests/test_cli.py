"""Tests for the root pagetrail CLI."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from pagetrail import __version__
from pagetrail.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "pagetrail" in result.output
    for group in ("page", "name", "history", "resolve", "init", "upgrade"):
        assert group in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_site_flag(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["--json", "-C", str(tmp_path), "page", "add", "About"])
    assert result.exit_code == 0
    assert json.loads(result.output)["data"]["path"] == "/about"
    assert (tmp_path / ".pagetrail").is_dir()


def test_config_flag(cli_runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "custom.toml"
    config.write_text('[names]\nuntitled = "draft"\n')
    result = cli_runner.invoke(
        cli,
        ["--json", "-c", str(config), "-C", str(tmp_path)]
        + ["name", "preview", "--format", "untitled"],
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["data"]["name"] == "draft"


def test_verbose_error_shows_code(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-v", "-C", str(tmp_path), "page", "show", "42"])
    assert result.exit_code == 1
    assert "code: NOT_FOUND (not_found)" in result.output
