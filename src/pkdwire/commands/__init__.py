"""Subcommand modules for pkdwire.

Provides register_commands(), which uses deferred imports to keep
``pkdwire --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pkdwire.commands.check_value import check_value
    from pkdwire.commands.decode import decode
    from pkdwire.commands.timestamp import timestamp

    cli.add_command(decode)
    cli.add_command(check_value)
    cli.add_command(timestamp)
