"""Tests for Collection — the schema-validated document access layer.

Most tests run once per store implementation via the ``store`` fixture.
"""

from __future__ import annotations

from typing import Any

import pytest

from quickdoc.domain.errors import (
    InvalidKeyError,
    NonObjectTargetError,
    NotAnArrayError,
    ShapeMismatchError,
    UndefinedOperandError,
    UnknownFieldError,
)
from quickdoc.domain.fields import AnyField, NullableField, NumberField, ObjectField, StringField
from quickdoc.domain.types import AllOptions, Document, SortOptions
from quickdoc.infrastructure.store import DocumentStore
from quickdoc.services.collection import Collection

pytestmark = pytest.mark.anyio

SIMON: dict[str, Any] = {"name": "Simon", "age": 30, "isHuman": True, "isJobless": None}


@pytest.fixture
def people(store: DocumentStore) -> Collection:
    return Collection(store, {"name": str, "friends": [str]})


@pytest.fixture
def untyped(store: DocumentStore) -> Collection:
    return Collection(store)


class TestConstruction:
    async def test_schema_is_resolved(self, store: DocumentStore) -> None:
        col = Collection(store, {"name": str, "nick?": str})
        assert col.schema == ObjectField(
            {"name": StringField(), "nick": NullableField(StringField())}
        )

    async def test_default_schema_accepts_anything(self, untyped: Collection) -> None:
        assert untyped.schema == NullableField(AnyField())
        await untyped.set("x", [1, "two", {"three": None}])
        assert await untyped.get("x") == [1, "two", {"three": None}]

    async def test_store_and_namespace(self, store: DocumentStore) -> None:
        col = Collection(store, NumberField())
        assert col.store is store
        assert col.namespace == "JSON"


class TestGetSet:
    async def test_round_trip(self, untyped: Collection) -> None:
        await untyped.set("user", {"name": "Mongoose", "age": 69})
        assert await untyped.get("user") == {"name": "Mongoose", "age": 69}

    async def test_set_returns_new_value(self, users: Collection) -> None:
        assert await users.set("simon", SIMON) == SIMON

    async def test_nested_round_trip(self, users: Collection) -> None:
        await users.set("simon", SIMON)
        await users.set("simon", "Monkey", "name")
        assert await users.get("simon", "name") == "Monkey"
        assert await users.get("simon") == {**SIMON, "name": "Monkey"}

    async def test_dotted_key_equals_explicit_path(self, users: Collection) -> None:
        await users.set("simon", SIMON)
        await users.set("simon.age", 31)
        assert await users.get("simon", "age") == await users.get("simon.age") == 31

    async def test_get_missing_document(self, users: Collection) -> None:
        assert await users.get("ghost") is None
        assert await users.get("ghost", "name") is None

    async def test_get_missing_member(self, users: Collection) -> None:
        await users.set("simon", SIMON)
        assert await users.get("simon", "isJobless.deeper") is None

    async def test_get_superscript_list_index(self, untyped: Collection) -> None:
        await untyped.set("doc", {"xs": [1, 2]})
        assert await untyped.get("doc.xs.²") is None
        assert await untyped.has("doc.xs.²") is False

    async def test_failed_validation_writes_nothing(self, users: Collection) -> None:
        await users.set("simon", SIMON)
        with pytest.raises(ShapeMismatchError):
            await users.set("simon", "thirty", "age")
        with pytest.raises(UnknownFieldError):
            await users.set("simon", "cat", "pet")
        assert await users.get("simon") == SIMON

    async def test_path_write_into_new_document_must_validate(self, users: Collection) -> None:
        with pytest.raises(ShapeMismatchError, match="missing required member"):
            await users.set("ghost", "Boo", "name")
        assert await users.has("ghost") is False

    async def test_path_write_creates_document(self, untyped: Collection) -> None:
        assert await untyped.set("cfg", "dark", "ui.theme") == {"ui": {"theme": "dark"}}

    async def test_path_write_into_scalar(self, untyped: Collection) -> None:
        await untyped.set("n", 5)
        with pytest.raises(NonObjectTargetError):
            await untyped.set("n", 1, "a")
        assert await untyped.get("n") == 5

    async def test_stored_value_validated_on_read(
        self, store: DocumentStore, users: Collection
    ) -> None:
        await store.upsert("bad", {"name": 5})
        with pytest.raises(ShapeMismatchError):
            await users.get("bad")

    async def test_empty_key_rejected(self, users: Collection) -> None:
        with pytest.raises(InvalidKeyError):
            await users.get("")
        with pytest.raises(InvalidKeyError):
            await users.set(".name", "x")


class TestDelete:
    async def test_delete_nested_member(self, users: Collection) -> None:
        await users.set("simon", {**SIMON, "isJobless": False})
        assert await users.delete("simon", "isJobless") is True
        assert await users.get("simon", "isJobless") is None
        assert await users.has("simon", "isJobless") is False
        assert await users.get("simon", "name") == "Simon"

    async def test_delete_document(self, users: Collection) -> None:
        await users.set("simon", SIMON)
        assert await users.delete("simon") is True
        assert await users.get("simon") is None
        assert await users.count() == 0

    async def test_delete_missing(self, users: Collection) -> None:
        assert await users.delete("ghost") is False
        assert await users.delete("ghost", "name") is False

    async def test_delete_required_member_is_rejected(self, users: Collection) -> None:
        await users.set("simon", SIMON)
        with pytest.raises(ShapeMismatchError):
            await users.delete("simon", "name")
        assert await users.get("simon") == SIMON


@pytest.fixture
async def simon(people: Collection) -> Collection:
    await people.set("simon", {"name": "Simon", "friends": []})
    return people


class TestPushPull:
    async def test_push_single(self, simon: Collection) -> None:
        result = await simon.push("simon", "Kyle", "friends")
        assert result == {"name": "Simon", "friends": ["Kyle"]}

    async def test_push_list_concatenates(self, simon: Collection) -> None:
        await simon.push("simon", "Kyle", "friends")
        await simon.push("simon", ["Samrid", "Baun"], "friends")
        assert await simon.get("simon.friends") == ["Kyle", "Samrid", "Baun"]

    async def test_push_to_missing_target_creates_array(self, untyped: Collection) -> None:
        assert await untyped.push("log", "first") == ["first"]
        assert await untyped.push("tags", ["a", "b"], "list") == {"list": ["a", "b"]}

    async def test_push_validates(self, simon: Collection) -> None:
        with pytest.raises(ShapeMismatchError):
            await simon.push("simon", 7, "friends")
        assert await simon.get("simon.friends") == []

    async def test_push_non_array(self, simon: Collection) -> None:
        with pytest.raises(NotAnArrayError, match="not an array"):
            await simon.push("simon", "x", "name")

    async def test_push_undefined(self, simon: Collection) -> None:
        with pytest.raises(UndefinedOperandError):
            await simon.push("simon", None, "friends")

    async def test_pull_single_value(self, simon: Collection) -> None:
        await simon.push("simon", ["Kyle", "Ana", "Kyle"], "friends")
        result = await simon.pull("simon", "Kyle", "friends")
        assert result == {"name": "Simon", "friends": ["Ana"]}

    async def test_pull_list(self, simon: Collection) -> None:
        await simon.push("simon", ["Kyle", "Samrid", "Baun"], "friends")
        await simon.pull("simon", ["Samrid", "Baun"], "friends")
        assert await simon.get("simon.friends") == ["Kyle"]

    async def test_pull_first_only(self, simon: Collection) -> None:
        await simon.push("simon", ["Kyle", "Ana", "Kyle"], "friends")
        await simon.pull("simon", "Kyle", "friends", multiple=False)
        assert await simon.get("simon.friends") == ["Ana", "Kyle"]

    async def test_pull_first_only_without_match(self, simon: Collection) -> None:
        await simon.push("simon", "Ana", "friends")
        assert await simon.pull("simon", "Kyle", "friends", multiple=False) is False
        assert await simon.get("simon.friends") == ["Ana"]

    async def test_pull_missing_document_returns_false(self, people: Collection) -> None:
        assert await people.pull("ghost", "Kyle", "friends") is False
        assert await people.count() == 0

    async def test_pull_keeps_booleans_and_numbers_apart(self, untyped: Collection) -> None:
        await untyped.set("mixed", [1, True, 0, False, 1.0])
        assert await untyped.pull("mixed", True) == [1, 0, False, 1.0]
        assert await untyped.pull("mixed", 1) == [0, False]

    async def test_pull_keeps_nested_booleans_and_numbers_apart(self, untyped: Collection) -> None:
        await untyped.set("nested", [{"flag": 1}, {"flag": True}, [1], [True]])
        assert await untyped.pull("nested", {"flag": True}) == [{"flag": 1}, [1], [True]]
        assert await untyped.pull("nested", [[1]]) == [{"flag": 1}, [True]]
        assert await untyped.pull("nested", {"flag": 1.0}) == [[True]]

    async def test_pull_non_array(self, simon: Collection) -> None:
        with pytest.raises(NotAnArrayError):
            await simon.pull("simon", "x", "name")

    async def test_pull_undefined(self, simon: Collection) -> None:
        with pytest.raises(UndefinedOperandError):
            await simon.pull("simon", None, "friends")


class TestHasAddSubtract:
    async def test_has(self, untyped: Collection) -> None:
        await untyped.set("a", {"n": None})
        assert await untyped.has("a") is True
        assert await untyped.has("a", "n") is True
        assert await untyped.has("a", "m") is False
        assert await untyped.has("b") is False

    async def test_has_validates_stored_document(self, users: Collection) -> None:
        await users.store.upsert("stale", {"name": 5})
        with pytest.raises(ShapeMismatchError):
            await users.has("stale")
        with pytest.raises(ShapeMismatchError):
            await users.has("stale", "name")

    async def test_add_and_subtract(self, users: Collection) -> None:
        await users.set("simon", SIMON)
        assert (await users.add("simon.age", 2))["age"] == 32
        assert (await users.subtract("simon", 0.5, "age"))["age"] == 31.5

    async def test_add_to_missing_starts_at_zero(self, untyped: Collection) -> None:
        assert await untyped.add("counter", 3) == 3
        assert await untyped.add("stats", 1, "visits") == {"visits": 1}

    @pytest.mark.parametrize("amount", ["1", True, None])
    async def test_amount_must_be_number(self, untyped: Collection, amount: Any) -> None:
        with pytest.raises(ShapeMismatchError):
            await untyped.add("counter", amount)
        with pytest.raises(ShapeMismatchError):
            await untyped.subtract("counter", amount)


@pytest.fixture
async def crowd(users: Collection) -> Collection:
    for name, age in (("ann", 41), ("bob", 23), ("cid", 35)):
        await users.set(name, {**SIMON, "name": name, "age": age})
    return users


class TestAll:
    async def test_insertion_order(self, crowd: Collection) -> None:
        assert [d.id for d in await crowd.all()] == ["ann", "bob", "cid"]

    async def test_max(self, crowd: Collection) -> None:
        assert len(await crowd.all(AllOptions(max=2))) == 2
        assert len(await crowd.all(AllOptions(max=0))) == 3

    async def test_sort_ascending(self, crowd: Collection) -> None:
        docs = await crowd.all(AllOptions(sort=SortOptions(target="age")))
        assert [d.id for d in docs] == ["bob", "cid", "ann"]

    async def test_sort_descending_with_max(self, crowd: Collection) -> None:
        options = AllOptions(max=2, sort=SortOptions(target=".age", by="desc"))
        assert [d.id for d in await crowd.all(options)] == ["ann", "cid"]

    async def test_sort_containers_as_text(self, untyped: Collection) -> None:
        for key, value in (("a", "b"), ("b", [1]), ("c", "a"), ("d", {"k": 1})):
            await untyped.set(key, {"v": value})
        docs = await untyped.all(AllOptions(sort=SortOptions(target="v")))
        assert [d.id for d in docs] == ["b", "c", "a", "d"]

    async def test_documents_carry_values(self, crowd: Collection) -> None:
        first = (await crowd.all(AllOptions(max=1)))[0]
        assert first == Document(id="ann", value={**SIMON, "name": "ann", "age": 41})


class TestNamespaceOperations:
    async def test_count_and_delete_all(self, untyped: Collection) -> None:
        for key in "abc":
            await untyped.set(key, key)
        assert await untyped.count() == 3
        assert await untyped.delete_all() == 3
        assert await untyped.count() == 0

    async def test_latency(self, untyped: Collection) -> None:
        assert await untyped.latency() >= 0

    async def test_export(self, untyped: Collection) -> None:
        await untyped.set("a", {"x": 1})
        snapshot = await untyped.export()
        assert snapshot.namespace == "JSON"
        assert snapshot.data == [Document(id="a", value={"x": 1})]

    async def test_import(self, users: Collection) -> None:
        docs = [Document(id="simon", value=SIMON), Document(id="ann", value={**SIMON, "age": 2})]
        assert await users.import_documents(docs) == 2
        assert await users.get("ann.age") == 2

    async def test_import_is_all_or_nothing(self, users: Collection) -> None:
        docs = [Document(id="simon", value=SIMON), Document(id="bad", value={"name": 1})]
        with pytest.raises(ShapeMismatchError):
            await users.import_documents(docs)
        assert await users.count() == 0

    async def test_import_rejects_dotted_ids(self, users: Collection) -> None:
        with pytest.raises(InvalidKeyError):
            await users.import_documents([Document(id="a.b", value=SIMON)])
        assert await users.count() == 0
