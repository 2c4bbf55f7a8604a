"""Commands: whole-namespace operations (listing, counting, export/import)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from quickdoc.commands._base import QdCommand

if TYPE_CHECKING:
    from quickdoc.commands._context import AppContext


@click.command(
    name="all",
    cls=QdCommand,
    examples="""\
  quickdoc all
  quickdoc all --max 10
  quickdoc all --sort age --order desc
  quickdoc all --sort address.city --sort name
  quickdoc --json all""",
)
@click.option("--max", "limit", type=click.IntRange(min=0), default=None, help="Max documents.")
@click.option(
    "--sort",
    "sort_targets",
    multiple=True,
    help="Dotted value path to sort by (repeatable).",
)
@click.option(
    "--order",
    type=click.Choice(["asc", "desc"]),
    default="asc",
    help="Sort direction.",
)
@click.pass_obj
def all_(app: AppContext, limit: int | None, sort_targets: tuple[str, ...], order: str) -> None:
    """List every document in the collection."""
    app.emit(
        app.run(
            app.service.list_all,
            limit=limit,
            sort=list(sort_targets) or None,
            direction=order,
        )
    )


@click.command(cls=QdCommand, examples="  quickdoc count")
@click.pass_obj
def count(app: AppContext) -> None:
    """Count the documents in the collection."""
    app.emit(app.run(app.service.count))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc clear --yes""",
)
@click.confirmation_option("--yes", prompt="Delete every document in the collection?")
@click.pass_obj
def clear(app: AppContext) -> None:
    """Delete every document in the collection."""
    app.emit(app.run(app.service.clear))


@click.command(cls=QdCommand, examples="  quickdoc ping")
@click.pass_obj
def ping(app: AppContext) -> None:
    """Measure a round trip to the store."""
    app.emit(app.run(app.service.ping))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc schema
  quickdoc --json schema""",
)
@click.pass_obj
def schema(app: AppContext) -> None:
    """Show the collection schema as a descriptor."""
    app.emit(app.run(app.service.schema))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc export
  quickdoc export --output backups/users.json""",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: <collection>.json in the current directory).",
)
@click.pass_obj
def export(app: AppContext, output: Path | None) -> None:
    """Export the collection to a JSON file."""
    target = output or Path(f"{app.settings.collection.name}.json")
    app.emit(app.run(app.service.export_json, target))


@click.command(
    name="import",
    cls=QdCommand,
    examples="""\
  quickdoc import backups/users.json""",
)
@click.argument("source", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def import_(app: AppContext, source: Path) -> None:
    """Import documents from a JSON export file."""
    app.emit(app.run(app.service.import_json, source))
