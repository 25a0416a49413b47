"""In-memory document store stub.

Implements DocumentStoreProtocol over plain dicts for development and
testing. It is NOT suitable for production use.

A single asyncio.Lock makes every call atomic with respect to the others,
standing in for the per-document atomicity a real store provides. In
production, PostgreSQL's ``UPDATE ... WHERE version = :expected`` provides
the same compare-and-swap.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Mapping
from typing import Any

from src.application.ports.document_store import (
    Document,
    DocumentStoreProtocol,
    matches,
)
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.document_store import (
    DocumentExistsError,
    DocumentNotFoundError,
)


class InMemoryDocumentStore(DocumentStoreProtocol):
    """Dict-backed document store.

    Attributes:
        _collections: collection name -> doc id -> (version, data). Python
            dicts keep insertion order, which gives query() its creation
            ordering.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, tuple[int, dict[str, Any]]]] = {}
        self._lock = asyncio.Lock()
        self._failures: dict[tuple[str, str], list[Exception]] = {}

    async def get(self, collection: str, doc_id: str) -> Document | None:
        async with self._lock:
            stored = self._collections.get(collection, {}).get(doc_id)
            if stored is None:
                return None
            return self._document(doc_id, stored)

    async def create(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> Document:
        async with self._lock:
            self._raise_injected("create", collection)
            docs = self._collections.setdefault(collection, {})
            if doc_id in docs:
                raise DocumentExistsError(collection, doc_id)
            docs[doc_id] = (1, copy.deepcopy(data))
            return self._document(doc_id, docs[doc_id])

    async def update(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        expected_version: int,
    ) -> Document:
        async with self._lock:
            self._raise_injected("update", collection)
            docs = self._collections.get(collection, {})
            stored = docs.get(doc_id)
            if stored is None:
                raise DocumentNotFoundError(collection, doc_id)
            if stored[0] != expected_version:
                raise ConcurrentModificationError(
                    collection, doc_id, expected_version, stored[0]
                )
            docs[doc_id] = (stored[0] + 1, copy.deepcopy(data))
            return self._document(doc_id, docs[doc_id])

    async def delete(
        self,
        collection: str,
        doc_id: str,
        expected_version: int | None = None,
    ) -> None:
        async with self._lock:
            self._raise_injected("delete", collection)
            docs = self._collections.get(collection, {})
            stored = docs.get(doc_id)
            if stored is None:
                raise DocumentNotFoundError(collection, doc_id)
            if expected_version is not None and stored[0] != expected_version:
                raise ConcurrentModificationError(
                    collection, doc_id, expected_version, stored[0]
                )
            del docs[doc_id]

    async def query(
        self,
        collection: str,
        where: Mapping[str, Any] | None = None,
    ) -> list[Document]:
        async with self._lock:
            docs = self._collections.get(collection, {})
            return [
                self._document(doc_id, stored)
                for doc_id, stored in docs.items()
                if matches(stored[1], where)
            ]

    # Test helpers

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))

    def clear(self) -> None:
        self._collections.clear()
        self._failures.clear()

    def inject_failure(self, operation: str, collection: str, error: Exception) -> None:
        """Make the next ``operation`` (create, update or delete) on collection
        raise error instead of writing. Used to simulate a crash between two
        writes."""
        self._failures.setdefault((operation, collection), []).append(error)

    def _raise_injected(self, operation: str, collection: str) -> None:
        pending = self._failures.get((operation, collection))
        if pending:
            raise pending.pop(0)

    @staticmethod
    def _document(doc_id: str, stored: tuple[int, dict[str, Any]]) -> Document:
        return Document(id=doc_id, version=stored[0], data=copy.deepcopy(stored[1]))
