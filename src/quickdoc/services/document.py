"""DocumentService — Collection operations as ServiceResult.

Adapts the raising, value-returning :class:`Collection` API to the
ServiceResult contract consumed by the CLI. Document-layer errors
(:class:`QuickdocError`) become ``ok=False`` results carrying the error's
code; store errors propagate untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quickdoc.domain.descriptors import describe_field
from quickdoc.domain.errors import QuickdocError
from quickdoc.domain.types import AllOptions, CollectionExport, SortOptions
from quickdoc.infrastructure.filesystem import read_json, write_json
from quickdoc.services.collection import Collection
from quickdoc.services.result import ServiceError, ServiceResult
from quickdoc.services.telemetry import traced

logger = logging.getLogger(__name__)


def _failure(op: str, exc: QuickdocError) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=exc.code, message=exc.message, detail=exc.to_detail()),
    )


def _error(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail),
    )


class DocumentService:
    """Key-value document operations for one collection."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    @traced
    async def get(self, key: str, path: str | None = None) -> ServiceResult:
        try:
            value = await self._collection.get(key, path)
            if value is None and not await self._collection.has(key, path):
                return _error("get", "NOT_FOUND", f"No value at {key!r}", key=key, path=path)
        except QuickdocError as exc:
            return _failure("get", exc)
        return ServiceResult(ok=True, op="get", data={"key": key, "path": path, "value": value})

    @traced
    async def has(self, key: str, path: str | None = None) -> ServiceResult:
        try:
            exists = await self._collection.has(key, path)
        except QuickdocError as exc:
            return _failure("has", exc)
        return ServiceResult(ok=True, op="has", data={"key": key, "path": path, "exists": exists})

    @traced
    async def list_all(
        self,
        *,
        limit: int | None = None,
        sort: list[str] | None = None,
        direction: str = "ascending",
    ) -> ServiceResult:
        """List documents, capped at *limit* and sorted by value paths."""
        try:
            options = AllOptions(
                max=limit,
                sort=SortOptions(target=sort, by=direction) if sort else None,
            )
        except ValidationError as exc:
            return _error("all", "INVALID_OPTIONS", str(exc))

        docs = await self._collection.all(options)
        items = [{"id": doc.id, "value": doc.value} for doc in docs]
        return ServiceResult(ok=True, op="all", data={"count": len(items), "items": items})

    @traced
    async def count(self) -> ServiceResult:
        total = await self._collection.count()
        return ServiceResult(
            ok=True,
            op="count",
            data={"namespace": self._collection.namespace, "count": total},
        )

    @traced
    async def ping(self) -> ServiceResult:
        latency_ms = await self._collection.latency()
        return ServiceResult(ok=True, op="ping", data={"latency_ms": round(latency_ms, 3)})

    async def schema(self) -> ServiceResult:
        try:
            described = describe_field(self._collection.schema)
        except ValueError as exc:
            return _error("schema", "UNDESCRIBABLE_SCHEMA", str(exc))
        return ServiceResult(ok=True, op="schema", data={"schema": described})

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    @traced
    async def set(self, key: str, value: Any, path: str | None = None) -> ServiceResult:
        try:
            new_value = await self._collection.set(key, value, path)
        except QuickdocError as exc:
            return _failure("set", exc)
        return ServiceResult(ok=True, op="set", data={"key": key, "path": path, "value": new_value})

    @traced
    async def delete(self, key: str, path: str | None = None) -> ServiceResult:
        try:
            deleted = await self._collection.delete(key, path)
        except QuickdocError as exc:
            return _failure("delete", exc)
        return ServiceResult(
            ok=True,
            op="delete",
            data={"key": key, "path": path, "deleted": deleted},
        )

    @traced
    async def push(self, key: str, value: Any, path: str | None = None) -> ServiceResult:
        try:
            new_value = await self._collection.push(key, value, path)
        except QuickdocError as exc:
            return _failure("push", exc)
        return ServiceResult(
            ok=True,
            op="push",
            data={"key": key, "path": path, "value": new_value},
        )

    @traced
    async def pull(
        self,
        key: str,
        value: Any,
        path: str | None = None,
        *,
        multiple: bool = True,
    ) -> ServiceResult:
        try:
            result = await self._collection.pull(key, value, path, multiple=multiple)
        except QuickdocError as exc:
            return _failure("pull", exc)

        warnings: list[str] = []
        if result is False:
            warnings.append(f"Nothing to pull from {key!r}")
        return ServiceResult(
            ok=True,
            op="pull",
            data={
                "key": key,
                "path": path,
                "pulled": result is not False,
                "value": None if result is False else result,
            },
            warnings=warnings,
        )

    @traced
    async def add(self, key: str, amount: int | float, path: str | None = None) -> ServiceResult:
        try:
            new_value = await self._collection.add(key, amount, path)
        except QuickdocError as exc:
            return _failure("add", exc)
        return ServiceResult(ok=True, op="add", data={"key": key, "path": path, "value": new_value})

    @traced
    async def subtract(
        self, key: str, amount: int | float, path: str | None = None
    ) -> ServiceResult:
        try:
            new_value = await self._collection.subtract(key, amount, path)
        except QuickdocError as exc:
            return _failure("subtract", exc)
        return ServiceResult(
            ok=True,
            op="subtract",
            data={"key": key, "path": path, "value": new_value},
        )

    @traced
    async def clear(self) -> ServiceResult:
        removed = await self._collection.delete_all()
        return ServiceResult(
            ok=True,
            op="clear",
            data={"namespace": self._collection.namespace, "removed": removed},
        )

    # ------------------------------------------------------------------
    # export / import
    # ------------------------------------------------------------------

    @traced
    async def export_json(self, output: Path) -> ServiceResult:
        """Write every document in the namespace to *output* as JSON."""
        snapshot = await self._collection.export()
        written = write_json(output, snapshot.model_dump_json(indent=2))
        logger.debug("Exported %d documents to %s", len(snapshot.data), written)
        return ServiceResult(
            ok=True,
            op="export",
            data={
                "namespace": snapshot.namespace,
                "path": str(written),
                "count": len(snapshot.data),
            },
        )

    @traced
    async def import_json(self, source: Path) -> ServiceResult:
        """Load an export file and upsert its documents into this namespace."""
        if not source.is_file():
            return _error("import", "FILE_NOT_FOUND", f"No such file: {source}", path=str(source))
        try:
            snapshot = CollectionExport.model_validate(read_json(source))
        except (ValueError, ValidationError) as exc:
            return _error("import", "INVALID_EXPORT", f"Invalid export file {source}: {exc}")

        warnings: list[str] = []
        if snapshot.namespace != self._collection.namespace:
            warnings.append(
                f"Export namespace {snapshot.namespace!r} imported into "
                f"{self._collection.namespace!r}"
            )
        try:
            written = await self._collection.import_documents(snapshot.data)
        except QuickdocError as exc:
            return _failure("import", exc)
        return ServiceResult(
            ok=True,
            op="import",
            data={"namespace": self._collection.namespace, "count": written},
            warnings=warnings,
        )
