"""SQLAlchemy Core table definitions for the quickdoc database.

One table holds every namespace. ``value`` is the document value as JSON
text; sorting reaches into it with SQLite's ``json_extract``.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, MetaData, PrimaryKeyConstraint, Table, Text

metadata = MetaData()

documents = Table(
    "documents",
    metadata,
    Column("namespace", Text, nullable=False),
    Column("id", Text, nullable=False),
    Column("value", Text, nullable=False),  # JSON
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    PrimaryKeyConstraint("namespace", "id"),
)

Index("ix_documents_namespace", documents.c.namespace)
