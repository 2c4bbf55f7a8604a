"""Commands: read and write single documents by dotted key."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from quickdoc.commands._base import JSON_VALUE, QdCommand

if TYPE_CHECKING:
    from quickdoc.commands._context import AppContext

_path_option = click.option(
    "-p",
    "--path",
    default=None,
    help="Dotted path inside the document, appended to KEY.",
)


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc get simon
  quickdoc get simon.friends
  quickdoc get simon --path friends.0
  quickdoc -q get simon.age""",
)
@click.argument("key")
@_path_option
@click.pass_obj
def get(app: AppContext, key: str, path: str | None) -> None:
    """Read the value stored at KEY."""
    app.emit(app.run(app.service.get, key, path))


@click.command(
    name="set",
    cls=QdCommand,
    examples="""\
  quickdoc set simon '{"name": "Simon", "friends": []}'
  quickdoc set simon.age 30
  quickdoc set simon.name Simon
  quickdoc set simon --path address.city Berlin""",
)
@click.argument("key")
@click.argument("value", type=JSON_VALUE)
@_path_option
@click.pass_obj
def set_(app: AppContext, key: str, value: Any, path: str | None) -> None:
    """Write VALUE (JSON, or a plain string) at KEY."""
    app.emit(app.run(app.service.set, key, value, path))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc delete simon
  quickdoc delete simon.address""",
)
@click.argument("key")
@_path_option
@click.pass_obj
def delete(app: AppContext, key: str, path: str | None) -> None:
    """Delete the document at KEY, or one member when KEY has a path."""
    app.emit(app.run(app.service.delete, key, path))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc has simon
  quickdoc -q has simon.address""",
)
@click.argument("key")
@_path_option
@click.pass_obj
def has(app: AppContext, key: str, path: str | None) -> None:
    """Check whether a value exists at KEY."""
    app.emit(app.run(app.service.has, key, path))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc push simon.friends Kyle
  quickdoc push simon.friends '["Kyle", "Ana"]'""",
)
@click.argument("key")
@click.argument("value", type=JSON_VALUE)
@_path_option
@click.pass_obj
def push(app: AppContext, key: str, value: Any, path: str | None) -> None:
    """Append VALUE to the array at KEY (a JSON array appends each element)."""
    app.emit(app.run(app.service.push, key, value, path))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc pull simon.friends Kyle
  quickdoc pull simon.friends Kyle --single
  quickdoc pull simon.friends '["Kyle", "Ana"]'""",
)
@click.argument("key")
@click.argument("value", type=JSON_VALUE)
@_path_option
@click.option("--single", is_flag=True, help="Remove only the first matching element.")
@click.pass_obj
def pull(app: AppContext, key: str, value: Any, path: str | None, single: bool) -> None:
    """Remove VALUE from the array at KEY."""
    app.emit(app.run(app.service.pull, key, value, path, multiple=not single))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc add simon.age 1
  quickdoc add stats.visits 0.5""",
)
@click.argument("key")
@click.argument("amount", type=JSON_VALUE)
@_path_option
@click.pass_obj
def add(app: AppContext, key: str, amount: Any, path: str | None) -> None:
    """Add AMOUNT to the number at KEY (a missing number counts as 0)."""
    app.emit(app.run(app.service.add, key, amount, path))


@click.command(
    cls=QdCommand,
    examples="""\
  quickdoc subtract simon.age 1""",
)
@click.argument("key")
@click.argument("amount", type=JSON_VALUE)
@_path_option
@click.pass_obj
def subtract(app: AppContext, key: str, amount: Any, path: str | None) -> None:
    """Subtract AMOUNT from the number at KEY."""
    app.emit(app.run(app.service.subtract, key, amount, path))
