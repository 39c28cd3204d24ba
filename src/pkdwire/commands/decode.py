"""Command: decode one action from JSON text."""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO

import click

from pkdwire.commands._base import PkdCommand

if TYPE_CHECKING:
    from pkdwire.commands._context import AppContext


@click.command(
    cls=PkdCommand,
    examples="""\
  pkdwire decode action.json
  cat action.json | pkdwire decode
  pkdwire --json decode action.json""",
)
@click.argument("source", type=click.File("rb"), default="-")
@click.pass_obj
def decode(app: AppContext, source: BinaryIO) -> None:
    """Decode an action from FILE (default: stdin) and describe it."""
    app.emit(app.wire.decode(source.read()))
