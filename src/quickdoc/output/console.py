"""Rich Console factory and theme for quickdoc output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

QD_THEME = Theme(
    {
        "qd.ok": "bold green",
        "qd.error": "bold red",
        "qd.warning": "bold yellow",
        "qd.op": "bold cyan",
        "qd.key": "dim",
        "qd.id": "bold blue",
        "qd.path": "dim",
        "qd.value": "bold",
        "qd.type.null": "dim italic",
        "qd.type.number": "magenta",
        "qd.type.string": "green",
        "qd.type.boolean": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=QD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_value(value: object) -> str:
    """Return the Rich style name for a JSON scalar."""
    if value is None:
        return "qd.type.null"
    if isinstance(value, bool):
        return "qd.type.boolean"
    if isinstance(value, int | float):
        return "qd.type.number"
    if isinstance(value, str):
        return "qd.type.string"
    return ""
