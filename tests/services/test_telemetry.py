"""Tests for telemetry spans and the @traced decorator."""

from __future__ import annotations

import pytest

from quickdoc.infrastructure.store import MemoryStore
from quickdoc.services.collection import Collection
from quickdoc.services.document import DocumentService
from quickdoc.services.result import ServiceResult
from quickdoc.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)

pytestmark = pytest.mark.anyio


class _Service:
    @traced
    async def work(self) -> ServiceResult:
        with trace_span("store.find_one"):
            pass
        return ServiceResult(ok=True, op="work")

    @traced
    async def boom(self) -> ServiceResult:
        raise RuntimeError("store down")


class TestSpan:
    async def test_duration_zero_until_ended(self) -> None:
        span = Span(name="x")
        assert span.duration_ms == 0.0
        span.end()
        assert span.duration_ms >= 0.0

    async def test_to_dict_nests_children(self) -> None:
        parent = Span(name="parent")
        child = Span(name="child", parent=parent)
        parent.children.append(child)
        child.annotate("k", "v")
        data = parent.to_dict()
        assert data["children"][0]["name"] == "child"
        assert data["children"][0]["annotations"] == {"k": "v"}
        assert "annotations" not in data


class TestTraced:
    async def test_disabled_is_passthrough(self) -> None:
        result = await _Service().work()
        assert result.meta is None

    async def test_enabled_injects_span_tree(self) -> None:
        enable_telemetry()
        try:
            result = await _Service().work()
        finally:
            disable_telemetry()
        assert result.meta is not None
        telemetry = result.meta["telemetry"]
        assert telemetry["name"] == "_Service.work"
        assert telemetry["children"][0]["name"] == "store.find_one"

    async def test_errors_propagate(self) -> None:
        enable_telemetry()
        try:
            with pytest.raises(RuntimeError, match="store down"):
                await _Service().boom()
            assert _current_span.get() is None
        finally:
            disable_telemetry()

    async def test_trace_span_without_parent(self) -> None:
        with trace_span("orphan") as span:
            assert span is None


class TestStoreSpans:
    async def test_set_records_store_calls(self) -> None:
        service = DocumentService(Collection(MemoryStore()))
        await service.set("user", {"role": "guest"})
        enable_telemetry()
        try:
            result = await service.set("user", "admin", "role")
        finally:
            disable_telemetry()
        assert result.meta is not None
        children = result.meta["telemetry"]["children"]
        assert [c["name"] for c in children] == ["store.find_one", "store.upsert"]
        assert children[0]["annotations"] == {"id": "user", "found": True}
        assert children[1]["annotations"] == {"id": "user"}

    async def test_all_records_count(self) -> None:
        service = DocumentService(Collection(MemoryStore()))
        for key in ("a", "b"):
            await service.set(key, 1)
        enable_telemetry()
        try:
            result = await service.list_all()
        finally:
            disable_telemetry()
        assert result.meta is not None
        assert result.meta["telemetry"]["children"][0]["annotations"] == {"count": 2}
