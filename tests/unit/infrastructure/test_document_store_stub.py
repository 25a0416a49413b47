"""Unit tests for InMemoryDocumentStore."""

import pytest

from src.domain.errors import (
    ConcurrentModificationError,
    DocumentExistsError,
    DocumentNotFoundError,
)
from src.infrastructure.stubs.document_store_stub import InMemoryDocumentStore


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


class TestCreateAndGet:
    async def test_create_starts_at_version_one(self, store: InMemoryDocumentStore) -> None:
        doc = await store.create("users", "u1", {"username": "alice"})

        assert doc.version == 1
        assert (await store.get("users", "u1")) == doc

    async def test_create_is_exclusive(self, store: InMemoryDocumentStore) -> None:
        await store.create("users", "u1", {})

        with pytest.raises(DocumentExistsError):
            await store.create("users", "u1", {})

    async def test_missing_document(self, store: InMemoryDocumentStore) -> None:
        assert await store.get("users", "nope") is None

    async def test_returned_data_is_a_copy(self, store: InMemoryDocumentStore) -> None:
        doc = await store.create("users", "u1", {"tags": ["a"]})
        doc.data["tags"].append("b")

        assert (await store.get("users", "u1")).data == {"tags": ["a"]}


class TestCompareAndSwap:
    async def test_update_bumps_version(self, store: InMemoryDocumentStore) -> None:
        await store.create("users", "u1", {"n": 1})

        doc = await store.update("users", "u1", {"n": 2}, expected_version=1)

        assert doc.version == 2
        assert doc.data == {"n": 2}

    async def test_stale_update_rejected(self, store: InMemoryDocumentStore) -> None:
        await store.create("users", "u1", {"n": 1})
        await store.update("users", "u1", {"n": 2}, expected_version=1)

        with pytest.raises(ConcurrentModificationError) as exc_info:
            await store.update("users", "u1", {"n": 3}, expected_version=1)

        assert exc_info.value.actual_version == 2
        assert (await store.get("users", "u1")).data == {"n": 2}

    async def test_update_missing(self, store: InMemoryDocumentStore) -> None:
        with pytest.raises(DocumentNotFoundError):
            await store.update("users", "u1", {}, expected_version=1)

    async def test_delete_checks_version(self, store: InMemoryDocumentStore) -> None:
        await store.create("pairings", "k", {})

        with pytest.raises(ConcurrentModificationError):
            await store.delete("pairings", "k", expected_version=5)
        await store.delete("pairings", "k", expected_version=1)

        assert await store.get("pairings", "k") is None

    async def test_delete_missing(self, store: InMemoryDocumentStore) -> None:
        with pytest.raises(DocumentNotFoundError):
            await store.delete("pairings", "k")


class TestQuery:
    async def test_equality_and_creation_order(self, store: InMemoryDocumentStore) -> None:
        await store.create("chests", "c2", {"pairKey": "p", "status": "completed"})
        await store.create("chests", "c1", {"pairKey": "p", "status": "active"})
        await store.create("chests", "c3", {"pairKey": "q", "status": "active"})

        found = await store.query("chests", {"pairKey": "p"})

        assert [doc.id for doc in found] == ["c2", "c1"]

    async def test_sequence_means_any_of(self, store: InMemoryDocumentStore) -> None:
        await store.create("chests", "c1", {"status": "active"})
        await store.create("chests", "c2", {"status": "opened"})
        await store.create("chests", "c3", {"status": "completed"})

        found = await store.query("chests", {"status": ["active", "opened"]})

        assert {doc.id for doc in found} == {"c1", "c2"}

    async def test_none_matches_missing_field(self, store: InMemoryDocumentStore) -> None:
        await store.create("users", "u1", {"pairedId": None})
        await store.create("users", "u2", {})
        await store.create("users", "u3", {"pairedId": "u4"})

        found = await store.query("users", {"pairedId": None})

        assert {doc.id for doc in found} == {"u1", "u2"}

    async def test_empty_collection(self, store: InMemoryDocumentStore) -> None:
        assert await store.query("nothing") == []


class TestFailureInjection:
    async def test_next_write_fails_once(self, store: InMemoryDocumentStore) -> None:
        await store.create("users", "u1", {"n": 1})
        store.inject_failure("update", "users", RuntimeError("crash"))

        with pytest.raises(RuntimeError):
            await store.update("users", "u1", {"n": 2}, expected_version=1)
        doc = await store.update("users", "u1", {"n": 2}, expected_version=1)

        assert doc.version == 2

    async def test_other_collections_unaffected(self, store: InMemoryDocumentStore) -> None:
        store.inject_failure("create", "users", RuntimeError("crash"))

        await store.create("settings", "s1", {})

        assert store.count("settings") == 1

    async def test_clear_drops_failures(self, store: InMemoryDocumentStore) -> None:
        store.inject_failure("create", "users", RuntimeError("crash"))
        store.clear()

        await store.create("users", "u1", {})
        assert store.count("users") == 1
