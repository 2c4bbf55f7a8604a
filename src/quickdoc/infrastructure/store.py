"""Document store contract and the in-memory implementation.

The collection delegates every read and write to a :class:`DocumentStore`.
Stores are responsible for atomic single-document upsert/find/delete;
they know nothing about schemas or dotted paths.

Typical implementations:
- MemoryStore: transient, dict-backed; tests and ephemeral use
- SqliteStore: durable, SQLAlchemy Core over SQLite
  (:mod:`quickdoc.infrastructure.database.store`)
"""

from __future__ import annotations

import copy
import json
from typing import Any, Protocol, runtime_checkable

from quickdoc.domain.paths import get_path, split_path
from quickdoc.domain.types import Document, SortSpec

DEFAULT_NAMESPACE = "JSON"


@runtime_checkable
class DocumentStore(Protocol):
    """Async persistence contract consumed by ``Collection``."""

    namespace: str

    async def find_one(self, doc_id: str) -> Document | None: ...

    async def upsert(self, doc_id: str, value: Any) -> None: ...

    async def delete_one(self, doc_id: str) -> int: ...

    async def delete_many(self) -> int: ...

    async def find_all(self, limit: int = 0, sort: SortSpec | None = None) -> list[Document]: ...

    async def count(self) -> int: ...


def sort_key(value: Any) -> tuple[int, Any]:
    """Total ordering across JSON value types.

    None < numbers and booleans < text, matching SQLite's NULL < numeric
    < TEXT. Arrays and objects rank as text through their compact JSON,
    which is what ``json_extract`` returns for them.
    """
    if value is None:
        return (0, 0)
    if isinstance(value, bool | int | float):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    return (2, json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str))


def sort_documents(documents: list[Document], sort: SortSpec) -> list[Document]:
    """Sort *documents* by the value paths in *sort* (stable)."""
    paths = [split_path(target) for target in sort.path_targets]

    def key(doc: Document) -> tuple[tuple[int, Any], ...]:
        return tuple(sort_key(get_path(doc.value, path)) for path in paths)

    return sorted(documents, key=key, reverse=sort.descending)


class MemoryStore:
    """Dict-backed store. Values are deep-copied on the way in and out."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace
        self._documents: dict[str, Any] = {}

    async def find_one(self, doc_id: str) -> Document | None:
        if doc_id not in self._documents:
            return None
        return Document(id=doc_id, value=copy.deepcopy(self._documents[doc_id]))

    async def upsert(self, doc_id: str, value: Any) -> None:
        self._documents[doc_id] = copy.deepcopy(value)

    async def delete_one(self, doc_id: str) -> int:
        return 1 if self._documents.pop(doc_id, _ABSENT) is not _ABSENT else 0

    async def delete_many(self) -> int:
        removed = len(self._documents)
        self._documents.clear()
        return removed

    async def find_all(self, limit: int = 0, sort: SortSpec | None = None) -> list[Document]:
        documents = [
            Document(id=doc_id, value=copy.deepcopy(value))
            for doc_id, value in self._documents.items()
        ]
        if sort is not None:
            documents = sort_documents(documents, sort)
        return documents[:limit] if limit > 0 else documents

    async def count(self) -> int:
        return len(self._documents)


_ABSENT = object()
