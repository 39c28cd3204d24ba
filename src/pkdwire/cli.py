"""Root CLI group for pkdwire with global flags and command registration."""

from __future__ import annotations

import click

from pkdwire import __version__
from pkdwire.commands import register_commands
from pkdwire.commands._base import PkdGroup
from pkdwire.commands._context import AppContext
from pkdwire.config.settings import PkdSettings


@click.group(
    cls=PkdGroup,
    invoke_without_command=True,
    examples="""\
  pkdwire decode action.json
  pkdwire check-value public-key ed25519:Tm2XBvb0mAb4ldVubCzvz0HMTczR8VGF44sv478VFLM
  pkdwire --json timestamp""",
)
@click.version_option(version=__version__, prog_name="pkdwire")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """pkdwire: inspect federated public key directory wire messages."""
    settings = PkdSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
