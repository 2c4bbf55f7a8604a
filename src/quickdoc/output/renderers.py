"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from quickdoc.output.console import create_console, get_output, style_for_value

if TYPE_CHECKING:
    from rich.console import Console

    from quickdoc.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Reads print the bare value so the output can be piped; writes print
    only the status.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    d = result.data
    match result.op:
        case "get":
            return _compact(d.get("value"))
        case "has":
            return _compact(d.get("exists", False))
        case "count":
            return str(d.get("count", 0))
        case "all":
            return "\n".join(str(item["id"]) for item in d.get("items", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _compact(value: Any) -> str:
    """Serialize a document value as single-line JSON."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _target(data: dict[str, Any]) -> str:
    key = str(data.get("key", ""))
    path = data.get("path")
    return f"{key}.{path}" if path else key


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "qd.ok"), (f"  {result.op}", "qd.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="qd.key")
    if key in ("id", "key", "namespace"):
        v = Text(str(value), style="qd.id")
    elif key == "path":
        v = Text(str(value), style="qd.path")
    elif isinstance(value, dict | list):
        v = Text(_compact(value))
    else:
        v = Text(_compact(value) if value is None else str(value), style=style_for_value(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations")
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="qd.error")
    op = Text(f"  {result.op}", style="qd.op")
    sep = Text(" — ")
    console.print(Text.assemble(label, op, sep, msg))

    if err:
        console.print(Text(f"  code: {err.code}", style="dim"))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Document renderers ────────────────────────────────────────────────


def _render_value(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get and the value-returning writes (set/push/pull/add/subtract)."""
    _status_line(console, result)
    d = result.data
    _field(console, "key", _target(d))
    if "pulled" in d:
        _field(console, "pulled", d["pulled"])
    _field(console, "value", d.get("value"))
    if verbose:
        _render_meta(console, result)


def _render_has(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "key", _target(result.data))
    _field(console, "exists", result.data.get("exists", False))
    if verbose:
        _render_meta(console, result)


def _render_delete(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "key", _target(result.data))
    _field(console, "deleted", result.data.get("deleted", False))
    if verbose:
        _render_meta(console, result)


def _render_documents(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render ``all`` as an id/value table."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="qd.id", no_wrap=True)
    table.add_column("Value")
    for item in items:
        table.add_row(Text(str(item.get("id", ""))), Text(_compact(item.get("value"))))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} documents")
    if verbose:
        _render_meta(console, result)


def _render_schema(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    console.print(Text(json.dumps(result.data.get("schema"), indent=2, ensure_ascii=False)))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_Renderer = Callable[..., None]

_OP_RENDERERS: dict[str, _Renderer] = {
    "get": _render_value,
    "set": _render_value,
    "push": _render_value,
    "pull": _render_value,
    "add": _render_value,
    "subtract": _render_value,
    "has": _render_has,
    "delete": _render_delete,
    "all": _render_documents,
    "schema": _render_schema,
}
