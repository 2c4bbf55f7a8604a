"""Subcommand modules for quickdoc.

Provides register_commands() which uses deferred imports to keep
``quickdoc --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every document and collection command on the root CLI group."""
    # --- Documents ---
    from quickdoc.commands.document import add, delete, get, has, pull, push, set_, subtract

    for command in (get, set_, delete, has, push, pull, add, subtract):
        cli.add_command(command)

    # --- Collection ---
    from quickdoc.commands.collection import all_, clear, count, export, import_, ping, schema

    for command in (all_, count, clear, ping, schema, export, import_):
        cli.add_command(command)
