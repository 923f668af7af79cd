"""Tests for typed collection operations."""

from __future__ import annotations

import uuid

import bson
import pytest
from docstore_rpc_protocol import ErrorCode, decode_bytes, encode_bytes

from docstore.collection import Collection, Document
from docstore.errors import (
    DecodeError,
    MalformedResponseError,
    NothingInsertedError,
    RemoteOperationError,
)
from tests.fakes import FakeStore, Greeting, Task


def _bson_b64(doc: dict) -> str:
    return encode_bytes(bson.encode(doc))


class TestInsert:
    async def test_insert_returns_document_with_server_id(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        doc = await greetings.insert(Greeting(hello="world"))

        assert isinstance(doc, Document)
        assert isinstance(doc.id, uuid.UUID)
        assert doc.document.hello == "world"
        assert doc.collection is greetings
        assert str(doc.id) in store.records("test")

    async def test_insert_sends_one_document_with_return_old(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        await greetings.insert(Greeting(hello="world"))

        method, params = store.calls[-1]
        assert method == "insert"
        assert params["collection"] == "test"
        assert params["return_old"] is True
        assert len(params["documents"]) == 1
        assert bson.decode(decode_bytes(params["documents"][0])) == {"hello": "world"}

    async def test_zero_count_raises_nothing_inserted(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        store.responses["insert"] = {"count": 0, "inserts": []}

        with pytest.raises(NothingInsertedError) as exc_info:
            await greetings.insert(Greeting(hello="world"))
        assert exc_info.value.count == 0

    async def test_missing_body_raises_malformed_response(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        store.responses["insert"] = {"count": 1, "inserts": [{"document": None}]}

        with pytest.raises(MalformedResponseError):
            await greetings.insert(Greeting(hello="world"))

    async def test_no_entries_raises_malformed_response(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        store.responses["insert"] = {"count": 1, "inserts": []}

        with pytest.raises(MalformedResponseError, match="no document returned"):
            await greetings.insert(Greeting(hello="world"))

    async def test_returned_document_without_id_raises_decode_error(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        store.responses["insert"] = {
            "count": 1,
            "inserts": [{"document": _bson_b64({"hello": "world"})}],
        }

        with pytest.raises(DecodeError):
            await greetings.insert(Greeting(hello="world"))

    async def test_transport_failure_propagates(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        store.errors["insert"] = RemoteOperationError(ErrorCode.UNAVAILABLE, "down")

        with pytest.raises(RemoteOperationError) as exc_info:
            await greetings.insert(Greeting(hello="world"))
        assert exc_info.value.code == ErrorCode.UNAVAILABLE
        assert len(store.calls) == 1


class TestInsertMany:
    async def test_returns_every_document(self, tasks: Collection[Task], store: FakeStore):
        docs = await tasks.insert_many([Task(title="a"), Task(title="b"), Task(title="c")])

        assert [d.document.title for d in docs] == ["a", "b", "c"]
        assert len({d.id for d in docs}) == 3
        assert len(store.records("tasks")) == 3

        method, params = store.calls[-1]
        assert method == "insert"
        assert len(params["documents"]) == 3

    async def test_zero_count_raises(self, tasks: Collection[Task], store: FakeStore):
        store.responses["insert"] = {"count": 0, "inserts": []}

        with pytest.raises(NothingInsertedError):
            await tasks.insert_many([Task(title="a")])

    async def test_one_malformed_entry_fails_whole_call(
        self, tasks: Collection[Task], store: FakeStore
    ):
        good = _bson_b64({"_id": str(uuid.uuid4()), "title": "a"})
        bad = _bson_b64({"_id": str(uuid.uuid4()), "name": "not a task"})
        store.responses["insert"] = {
            "count": 2,
            "inserts": [{"document": good}, {"document": bad}],
        }

        with pytest.raises(DecodeError):
            await tasks.insert_many([Task(title="a"), Task(title="b")])

    async def test_entry_without_body_raises(self, tasks: Collection[Task], store: FakeStore):
        good = _bson_b64({"_id": str(uuid.uuid4()), "title": "a"})
        store.responses["insert"] = {
            "count": 2,
            "inserts": [{"document": good}, {}],
        }

        with pytest.raises(MalformedResponseError):
            await tasks.insert_many([Task(title="a"), Task(title="b")])


class TestQueries:
    async def test_insert_then_get(self, greetings: Collection[Greeting]):
        inserted = await greetings.insert(Greeting(hello="world"))

        fetched = await greetings.get(inserted.id)

        assert fetched is not None
        assert fetched.id == inserted.id
        assert fetched.document == Greeting(hello="world")

    async def test_get_missing_returns_none(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        missing = uuid.uuid4()

        assert await greetings.get(missing) is None
        assert store.calls[-1] == ("get", {"collection": "test", "id": str(missing)})

    async def test_find_filters_and_limits(self, tasks: Collection[Task], store: FakeStore):
        await tasks.insert_many(
            [Task(title="a", done=True), Task(title="b"), Task(title="c", done=True)]
        )

        done = await tasks.find({"done": True})
        assert sorted(d.document.title for d in done) == ["a", "c"]

        limited = await tasks.find({"done": True}, limit=1)
        assert len(limited) == 1
        assert store.calls[-1][1]["limit"] == 1

    async def test_find_all_sends_no_filter(self, tasks: Collection[Task], store: FakeStore):
        await tasks.insert_many([Task(title="a"), Task(title="b")])

        docs = await tasks.find_all()

        assert len(docs) == 2
        method, params = store.calls[-1]
        assert method == "find"
        assert "filter" not in params
        assert "limit" not in params

    async def test_find_decode_failure_is_fatal(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        store.responses["find"] = {
            "documents": [
                _bson_b64({"_id": str(uuid.uuid4()), "hello": "ok"}),
                _bson_b64({"hello": "no id"}),
            ]
        }

        with pytest.raises(DecodeError):
            await greetings.find_all()

    async def test_malformed_result_raises(
        self, greetings: Collection[Greeting], store: FakeStore
    ):
        store.responses["find"] = {"documents": "not-a-list"}

        with pytest.raises(MalformedResponseError):
            await greetings.find_all()


class TestUpdateAndRemove:
    async def test_update_returns_updated_documents(self, tasks: Collection[Task]):
        await tasks.insert_many([Task(title="a"), Task(title="b"), Task(title="c")])

        updated = await tasks.update({"done": False}, {"$set": {"done": True}}, limit=2)

        assert len(updated) == 2
        assert all(d.document.done for d in updated)
        remaining = await tasks.find({"done": False})
        assert len(remaining) == 1

    async def test_update_passes_filter_through_verbatim(
        self, tasks: Collection[Task], store: FakeStore
    ):
        filter = {"title": {"$in": ["a", "b"]}}
        await tasks.update(filter, {"$set": {"done": True}})

        params = store.calls[-1][1]
        assert bson.decode(decode_bytes(params["filter"])) == filter
        assert "limit" not in params

    async def test_remove_returns_count(self, tasks: Collection[Task]):
        await tasks.insert_many([Task(title="a"), Task(title="b", done=True)])

        assert await tasks.remove({"done": True}) == 1
        assert len(await tasks.find_all()) == 1

    async def test_truncate_reports_prior_size(self, tasks: Collection[Task], store: FakeStore):
        await tasks.insert_many([Task(title=t) for t in "abcd"])

        assert await tasks.truncate() == 4
        assert await tasks.find_all() == []

        method, params = store.calls[-2]
        assert method == "remove"
        assert bson.decode(decode_bytes(params["filter"])) == {}
        assert "limit" not in params


class TestCollectionValue:
    def test_collection_is_immutable(self, greetings: Collection[Greeting]):
        with pytest.raises(AttributeError):
            greetings.name = "other"  # type: ignore[misc]

    def test_collections_with_same_fields_are_equal(self, connection):
        assert connection.collection("test", Greeting) == connection.collection(
            "test", Greeting
        )


async def test_hello_world_scenario(greetings: Collection[Greeting]):
    doc = await greetings.insert(Greeting(hello="world"))
    assert doc.document.hello == "world"

    found = await greetings.find_all(None)
    assert [d.id for d in found] == [doc.id]

    await doc.delete()
    assert await greetings.find_all(None) == []
