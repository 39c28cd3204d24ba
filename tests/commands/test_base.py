"""Tests for the shared click command classes."""

import click
from click.testing import CliRunner

from pkdwire.commands._base import PkdCommand, PkdGroup


class TestExamplesFlag:
    def test_only_added_when_examples_given(self) -> None:
        plain = PkdCommand("plain")
        documented = PkdCommand("documented", examples="  pkdwire documented")
        assert "--examples" not in [opt for p in plain.params for opt in p.opts]
        assert "--examples" in [opt for p in documented.params for opt in p.opts]

    def test_prints_and_skips_callback(self, cli_runner: CliRunner) -> None:
        calls: list[str] = []
        cmd = PkdCommand("greet", callback=lambda: calls.append("ran"), examples="  demo")
        result = cli_runner.invoke(cmd, ["--examples"])
        assert result.exit_code == 0
        assert "demo" in result.output
        assert calls == []

    def test_group_subcommands_accept_examples(self) -> None:
        group = PkdGroup("root")

        @group.command(examples="  root leaf")
        def leaf() -> None:
            click.echo("leaf")

        assert isinstance(leaf, PkdCommand)
        assert leaf.examples == "  root leaf"
