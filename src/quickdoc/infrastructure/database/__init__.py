"""SQLite database engine, schema, and document store via SQLAlchemy Core."""

from quickdoc.infrastructure.database.engine import create_db_engine, init_database
from quickdoc.infrastructure.database.schema import documents, metadata
from quickdoc.infrastructure.database.store import SqliteStore

__all__ = [
    "SqliteStore",
    "create_db_engine",
    "documents",
    "init_database",
    "metadata",
]
