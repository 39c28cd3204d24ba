"""Rich Console factory and theme for pkdwire output.

Consoles render to a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` function. In non-TTY environments (tests, pipes)
Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PKD_THEME = Theme(
    {
        "pkd.ok": "bold green",
        "pkd.error": "bold red",
        "pkd.warning": "bold yellow",
        "pkd.op": "bold cyan",
        "pkd.key": "dim",
        "pkd.tag": "bold blue",
        "pkd.sealed": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=PKD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
