"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns logging setup and result emission (stdout/stderr
routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pkdwire.config.logging import configure_logging
from pkdwire.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pkdwire.config.settings import PkdSettings
    from pkdwire.services.result import ServiceResult
    from pkdwire.services.wire import WireService


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: PkdSettings) -> None:
        self.settings = settings
        self._wire: WireService | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def wire(self) -> WireService:
        """The wire service (created lazily on first access)."""
        if self._wire is None:
            from pkdwire.services.wire import WireService

            self._wire = WireService(self.settings)
        return self._wire

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
