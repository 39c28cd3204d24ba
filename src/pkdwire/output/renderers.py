"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.text import Text

from pkdwire.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from pkdwire.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: the one value a script wants."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    for key in ("action", "canonical", "time"):
        value = result.data.get(key)
        if value is not None:
            return str(value)
    return f"OK: {result.op}"


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="pkd.ok")
    op = Text(f"  {result.op}", style="pkd.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any, *, style: str = "") -> None:
    """Print a single indented key-value field."""
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    console.print(Text.assemble((f"  {key}: ", "pkd.key"), (str(value), style)))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pkd.error")
    op = Text(f"  {result.op}", style="pkd.op")
    code = Text(f"  [{err.code}]" if err else "", style="pkd.warning")
    console.print(Text.assemble(label, op, code, f": {msg}"))

    field = err.detail.get("field") if err else None
    if field:
        _field(console, "field", field)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


def _render_decode(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "action", data["action"], style="pkd.tag")
    if data.get("time") is not None:
        _field(console, "time", data["time"])
    sealed = set(data.get("sealed", []))
    if data.get("message_fields"):
        console.print(Text("  message:", style="pkd.key"))
        for name in data["message_fields"]:
            marker = Text(" (sealed)", style="pkd.sealed") if name in sealed else Text("")
            console.print(Text.assemble(f"    {name}", marker))
    if verbose:
        _field(console, "fields", data.get("fields", []))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "decode": _render_decode,
    "check_value": _render_generic,
    "timestamp": _render_generic,
}
