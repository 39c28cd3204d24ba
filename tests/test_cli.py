"""Tests for the root pkdwire CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from pkdwire import __version__
from pkdwire.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "pkdwire" in result.output
    for command in ("decode", "check-value", "timestamp"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_config")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_cli_examples(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--examples"])
    assert result.exit_code == 0
    assert "pkdwire --json timestamp" in result.output


@pytest.mark.usefixtures("_isolated_config")
def test_missing_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path / "nope.toml"), "timestamp"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


@pytest.mark.usefixtures("_isolated_config")
def test_config_limits_decode(cli_runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "small.toml"
    config.write_text("[codec]\nmax_message_bytes = 4\n")
    result = cli_runner.invoke(cli, ["-c", str(config), "decode"], input='{"action": "x"}')
    assert result.exit_code == 1
    assert "input_too_large" in result.output


@pytest.mark.usefixtures("_isolated_config")
@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flags_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "timestamp"])
    assert result.exit_code == 0


def test_project_metadata_matches_package() -> None:
    import tomllib

    root = Path(__file__).resolve().parents[1]
    project = tomllib.loads((root / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    assert project["version"] == __version__
    assert project["readme"] == "README.md"
    assert (root / project["readme"]).is_file()
