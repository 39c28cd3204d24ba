"""Command: validate a single wire value."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pkdwire.commands._base import PkdCommand
from pkdwire.services.wire import VALUE_CHECKERS

if TYPE_CHECKING:
    from pkdwire.commands._context import AppContext


@click.command(
    "check-value",
    cls=PkdCommand,
    examples="""\
  pkdwire check-value public-key ed25519:Tm2XBvb0mAb4ldVubCzvz0HMTczR8VGF44sv478VFLM
  pkdwire check-value merkle-root pkd-mr-v1:7TwKAbkiKCCQuCpDBV2GbkkkIDfMg2AmG7TMHqXBDJU
  pkdwire check-value encrypted AQID
  pkdwire -q check-value timestamp 1700000000""",
)
@click.argument("kind", type=click.Choice(sorted(VALUE_CHECKERS)))
@click.argument("value")
@click.pass_obj
def check_value(app: AppContext, kind: str, value: str) -> None:
    """Check that VALUE is canonical wire text for KIND."""
    app.emit(app.wire.check_value(kind, value))
