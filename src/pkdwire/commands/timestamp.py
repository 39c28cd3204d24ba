"""Command: print the current wire timestamp."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pkdwire.commands._base import PkdCommand

if TYPE_CHECKING:
    from pkdwire.commands._context import AppContext


@click.command(
    cls=PkdCommand,
    examples="""\
  pkdwire timestamp
  pkdwire -q timestamp""",
)
@click.pass_obj
def timestamp(app: AppContext) -> None:
    """Print the current time as a wire timestamp."""
    app.emit(app.wire.timestamp())
