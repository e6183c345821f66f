"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich key/value table) or
machines (--json). Quiet mode prints only the status line.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from asini.output.console import create_console, get_output

if TYPE_CHECKING:
    from asini.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def _value_text(value: Any) -> Text:
    if isinstance(value, bool):
        return Text(str(value).lower(), style="asini.true" if value else "asini.false")
    if isinstance(value, list):
        return Text("\n".join(str(v) for v in value) if value else "-")
    if isinstance(value, dict):
        return Text(_json.dumps(value, separators=(",", ":")))
    if value is None:
        return Text("-", style="asini.key")
    return Text(str(value))


def _render_human(result: ServiceResult, *, verbose: bool) -> str:
    console = create_console()
    if result.ok:
        console.print(Text("OK", style="asini.ok"), Text(f"  {result.op}", style="asini.op"))
        if result.data:
            table = Table(show_header=False, box=None, pad_edge=False)
            table.add_column(style="asini.key")
            table.add_column()
            for key, value in result.data.items():
                table.add_row(key, _value_text(value))
            console.print(table)
    else:
        message = result.error.message if result.error else "Unknown error"
        console.print(
            Text("ERROR", style="asini.error"),
            Text(f"  {result.op}", style="asini.op"),
            Text(f"  {message}"),
        )
        if verbose and result.error and result.error.detail:
            for key, value in result.error.detail.items():
                console.print(Text(f"  {key}: ", style="asini.key"), _value_text(value))
    return get_output(console).rstrip("\n")


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        if result.ok:
            return f"OK: {result.op}"
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    return _render_human(result, verbose=settings.verbose)
