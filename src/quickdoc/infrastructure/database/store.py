"""SQLite-backed document store via SQLAlchemy Core.

Each public coroutine runs its blocking SQLAlchemy work in a worker
thread (``anyio.to_thread.run_sync``) so the event loop never blocks.
Every method is one statement in one transaction, which gives the
single-document atomicity ``Collection`` relies on.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import anyio
from sqlalchemy import delete, func, literal_column, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine

from quickdoc.domain.paths import split_path
from quickdoc.domain.types import Document, SortSpec
from quickdoc.infrastructure.database.schema import documents
from quickdoc.infrastructure.store import DEFAULT_NAMESPACE


def json_path(target: str) -> str:
    """Translate a dotted value path into a SQLite JSON path.

    Examples:
        >>> json_path("")
        '$'
        >>> json_path("stats.level")
        '$."stats"."level"'
    """
    return "$" + "".join(f'."{segment}"' for segment in split_path(target))


class SqliteStore:
    """Documents of one namespace inside the shared ``documents`` table."""

    def __init__(self, engine: Engine, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._engine = engine
        self.namespace = namespace

    # --- async contract ---

    async def find_one(self, doc_id: str) -> Document | None:
        return await anyio.to_thread.run_sync(self._find_one, doc_id)

    async def upsert(self, doc_id: str, value: Any) -> None:
        await anyio.to_thread.run_sync(self._upsert, doc_id, value)

    async def delete_one(self, doc_id: str) -> int:
        return await anyio.to_thread.run_sync(self._delete_one, doc_id)

    async def delete_many(self) -> int:
        return await anyio.to_thread.run_sync(self._delete_many)

    async def find_all(self, limit: int = 0, sort: SortSpec | None = None) -> list[Document]:
        return await anyio.to_thread.run_sync(self._find_all, limit, sort)

    async def count(self) -> int:
        return await anyio.to_thread.run_sync(self._count)

    # --- blocking implementations ---

    def _in_namespace(self) -> Any:
        return documents.c.namespace == self.namespace

    def _find_one(self, doc_id: str) -> Document | None:
        stmt = select(documents.c.value).where(self._in_namespace(), documents.c.id == doc_id)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).first()
        if row is None:
            return None
        return Document(id=doc_id, value=json.loads(row.value))

    def _upsert(self, doc_id: str, value: Any) -> None:
        now = datetime.now(UTC).isoformat()
        stmt = sqlite_insert(documents).values(
            namespace=self.namespace,
            id=doc_id,
            # Strict JSON so json_extract can read every row; NaN/inf raise here
            value=json.dumps(value, allow_nan=False),
            created=now,
            modified=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[documents.c.namespace, documents.c.id],
            set_={"value": stmt.excluded.value, "modified": stmt.excluded.modified},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def _delete_one(self, doc_id: str) -> int:
        stmt = delete(documents).where(self._in_namespace(), documents.c.id == doc_id)
        with self._engine.begin() as conn:
            return int(conn.execute(stmt).rowcount or 0)

    def _delete_many(self) -> int:
        stmt = delete(documents).where(self._in_namespace())
        with self._engine.begin() as conn:
            return int(conn.execute(stmt).rowcount or 0)

    def _find_all(self, limit: int, sort: SortSpec | None) -> list[Document]:
        stmt = select(documents.c.id, documents.c.value).where(self._in_namespace())
        if sort is not None:
            for target in sort.path_targets:
                expr = func.json_extract(documents.c.value, json_path(target))
                stmt = stmt.order_by(expr.desc() if sort.descending else expr.asc())
        # Insertion order, and the tie-break for sorted listings
        stmt = stmt.order_by(literal_column("documents.rowid"))
        if limit > 0:
            stmt = stmt.limit(limit)

        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [Document(id=str(row.id), value=json.loads(row.value)) for row in rows]

    def _count(self) -> int:
        stmt = select(func.count()).select_from(documents).where(self._in_namespace())
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)
