"""Collection — typed, path-addressable documents on top of a DocumentStore.

The collection owns two collaborators passed in at construction: the
store (all persistence) and the schema (all validation). Keys are dotted:
``"user.friends"`` addresses the ``friends`` member of document ``user``.
An explicit *path* argument extends the key, so ``get("user", "friends")``
is the same read.

INVARIANT: The whole-document value is validated against the schema
before every write; a failed validation writes nothing.
INVARIANT: Root-level writes are a single store call. Path-scoped writes
read the document, mutate a deep copy, and write it back — two store
calls, not atomic. Concurrent path-scoped writers on the same root are
last-write-wins.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Iterable
from typing import Any

from quickdoc.domain.descriptors import resolve_field
from quickdoc.domain.errors import (
    InvalidKeyError,
    NotAnArrayError,
    ShapeMismatchError,
    UndefinedOperandError,
)
from quickdoc.domain.fields import FieldModel
from quickdoc.domain.paths import KeyPath, get_path, parse_key, set_path, unset_path
from quickdoc.domain.types import AllOptions, CollectionExport, Document
from quickdoc.infrastructure.store import DocumentStore
from quickdoc.services.telemetry import trace_span

logger = logging.getLogger(__name__)

_ABSENT = object()


def _same(left: Any, right: Any) -> bool:
    """Element equality for pull: ``True`` never equals ``1``, at any depth."""
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(_same(left[k], right[k]) for k in left)
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(map(_same, left, right))
    if isinstance(left, dict | list) or isinstance(right, dict | list):
        return False
    return isinstance(left, bool) == isinstance(right, bool) and left == right


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class Collection:
    """Schema-validated document access over an injected store.

    Usage::

        store = MemoryStore()
        users = Collection(store, {"name": str, "age": int, "friends": [str]})
        await users.set("simon", {"name": "Simon", "age": 30, "friends": []})
        await users.push("simon", "Kyle", "friends")
    """

    def __init__(self, store: DocumentStore, schema: Any = None) -> None:
        self._store = store
        self.schema: FieldModel = resolve_field(schema)

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def namespace(self) -> str:
        return self._store.namespace

    # ------------------------------------------------------------------
    # store access
    # ------------------------------------------------------------------

    async def _load(self, root: str) -> Document | None:
        with trace_span("store.find_one") as span:
            doc = await self._store.find_one(root)
            if span is not None:
                span.annotate("id", root)
                span.annotate("found", doc is not None)
        return doc

    async def _save(self, root: str, value: Any) -> None:
        with trace_span("store.upsert") as span:
            await self._store.upsert(root, value)
            if span is not None:
                span.annotate("id", root)

    async def _read(self, target: KeyPath, default: Any = None) -> Any:
        doc = await self._load(target.root)
        if doc is None:
            return default
        self.schema.validate(doc.value)
        return get_path(doc.value, target.remainder, default)

    # ------------------------------------------------------------------
    # core operations
    # ------------------------------------------------------------------

    async def get(self, key: str, path: str | None = None) -> Any:
        """Return the value at *key* (and *path*), or None if absent.

        The stored document is validated on the way out so a value written
        under a different schema surfaces as an error instead of bad data.
        """
        return await self._read(parse_key(key, path))

    async def set(self, key: str, value: Any, path: str | None = None) -> Any:
        """Write *value* at *key* (and *path*); returns the new document value.

        Without a path the document value is replaced. With a path the
        stored value (or ``{}`` when there is none) is copied, *value* is
        written into the copy, and the copy replaces the document.

        Raises:
            ShapeMismatchError: The resulting document does not fit the schema.
            UnknownFieldError: The resulting document has undeclared keys.
            NonObjectTargetError: A path write into a non-container value.
        """
        target = parse_key(key, path)
        if target.is_root:
            new_value = value
        else:
            doc = await self._load(target.root)
            current = doc.value if doc is not None and doc.value is not None else {}
            new_value = set_path(copy.deepcopy(current), target.remainder, value)

        self.schema.validate(new_value)
        await self._save(target.root, new_value)
        logger.debug("Set %s", target)
        return new_value

    async def delete(self, key: str, path: str | None = None) -> bool:
        """Delete the document at *key*, or only the member at its path.

        Returns whether anything was there to delete from.
        """
        target = parse_key(key, path)
        if target.is_root:
            with trace_span("store.delete_one") as span:
                removed = await self._store.delete_one(target.root)
                if span is not None:
                    span.annotate("removed", removed)
            logger.debug("Deleted %s (%d removed)", target, removed)
            return removed > 0

        doc = await self._load(target.root)
        if doc is None:
            return False
        new_value = unset_path(copy.deepcopy(doc.value), target.remainder)
        self.schema.validate(new_value)
        await self._save(target.root, new_value)
        logger.debug("Unset %s", target)
        return True

    async def push(self, key: str, value: Any, path: str | None = None) -> Any:
        """Append *value* to the array at *key* (and *path*).

        A list *value* is concatenated. An absent target becomes a new
        array. Returns the new document value.

        Raises:
            UndefinedOperandError: *value* is None.
            NotAnArrayError: The target exists and is not a list.
        """
        if value is None:
            raise UndefinedOperandError("Cannot push an undefined value")
        target = parse_key(key, path)
        current = await self._read(target)
        if current is None:
            items = list(value) if isinstance(value, list) else [value]
        elif not isinstance(current, list):
            raise NotAnArrayError(
                f'Cannot push because target "{target}" is not an array',
                location=str(target),
            )
        elif isinstance(value, list):
            items = [*current, *value]
        else:
            items = [*current, value]
        return await self.set(key, items, path)

    async def pull(
        self,
        key: str,
        value: Any,
        path: str | None = None,
        *,
        multiple: bool = True,
    ) -> Any:
        """Remove *value* from the array at *key* (and *path*).

        A list *value* removes every element it contains. A single value
        removes every equal element, or only the first when *multiple* is
        False. Returns the new document value, or False when there was
        nothing to pull from (absent target, or no match with
        ``multiple=False``).

        Raises:
            UndefinedOperandError: *value* is None.
            NotAnArrayError: The target exists and is not a list.
        """
        if value is None:
            raise UndefinedOperandError("Cannot pull an undefined value")
        target = parse_key(key, path)
        current = await self._read(target)
        if current is None:
            return False
        if not isinstance(current, list):
            raise NotAnArrayError(
                f'Cannot pull because target "{target}" is not an array',
                location=str(target),
            )

        if isinstance(value, list):
            kept = [item for item in current if not any(_same(item, v) for v in value)]
        elif multiple:
            kept = [item for item in current if not _same(item, value)]
        else:
            index = next((i for i, item in enumerate(current) if _same(item, value)), None)
            if index is None:
                return False
            kept = current[:index] + current[index + 1 :]
        return await self.set(key, kept, path)

    async def all(self, options: AllOptions | None = None) -> list[Document]:
        """Every document, optionally capped and sorted by value paths."""
        options = options or AllOptions()
        sort = options.sort.to_spec() if options.sort is not None else None
        with trace_span("store.find_all") as span:
            docs = await self._store.find_all(options.max or 0, sort)
            if span is not None:
                span.annotate("count", len(docs))
        return docs

    # ------------------------------------------------------------------
    # supplementary operations
    # ------------------------------------------------------------------

    async def has(self, key: str, path: str | None = None) -> bool:
        """Whether a value exists at *key* (a stored None counts).

        The stored document is validated first, as in :meth:`get`.
        """
        return await self._read(parse_key(key, path), _ABSENT) is not _ABSENT

    async def add(self, key: str, amount: int | float, path: str | None = None) -> Any:
        """Add *amount* to the number at the target (non-numbers count as 0)."""
        if not _is_number(amount):
            raise ShapeMismatchError(
                f"Amount must be a number, got {type(amount).__name__}",
                location="amount",
            )
        current = await self.get(key, path)
        base = current if _is_number(current) else 0
        return await self.set(key, base + amount, path)

    async def subtract(self, key: str, amount: int | float, path: str | None = None) -> Any:
        """Subtract *amount* from the number at the target."""
        if not _is_number(amount):
            raise ShapeMismatchError(
                f"Amount must be a number, got {type(amount).__name__}",
                location="amount",
            )
        return await self.add(key, -amount, path)

    async def count(self) -> int:
        return await self._store.count()

    async def delete_all(self) -> int:
        """Drop every document in the namespace; returns how many went."""
        removed = await self._store.delete_many()
        logger.debug("Cleared namespace %s (%d removed)", self.namespace, removed)
        return removed

    async def latency(self) -> float:
        """Milliseconds for a one-document round trip to the store."""
        start = time.perf_counter()
        await self.all(AllOptions(max=1))
        return (time.perf_counter() - start) * 1000

    async def export(self) -> CollectionExport:
        """Snapshot every document in the namespace."""
        return CollectionExport(namespace=self.namespace, data=await self.all())

    async def import_documents(self, documents: Iterable[Document]) -> int:
        """Upsert *documents*, validating all of them before the first write.

        Returns the number of documents written.
        """
        batch = list(documents)
        for doc in batch:
            if not parse_key(doc.id).is_root:
                raise InvalidKeyError(f"Document id {doc.id!r} must not contain '.'")
            self.schema.validate(doc.value)
        for doc in batch:
            await self._save(doc.id, doc.value)
        logger.debug("Imported %d documents into %s", len(batch), self.namespace)
        return len(batch)
