"""Click classes shared by every pkdwire command.

Both accept an ``examples=`` string; when given, the command grows an eager
``--examples`` flag that prints it and exits without running the command.
"""

from __future__ import annotations

from typing import Any

import click


def _examples_option(examples: str) -> click.Option:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(examples)
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )


class _ExamplesMixin:
    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class PkdCommand(_ExamplesMixin, click.Command):
    """A leaf command such as ``decode``."""


class PkdGroup(_ExamplesMixin, click.Group):
    """The root group; its subcommands are :class:`PkdCommand` by default."""

    command_class = PkdCommand
