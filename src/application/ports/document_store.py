"""Document store port.

The store offers single-document atomicity only: create-if-absent and
compare-and-swap on a per-document version. There is no multi-document
transaction, so every cross-document invariant is enforced by the services
on top of these two primitives.

Developer Golden Rules:
1. FAIL LOUD - implementations raise, never return sentinel values on conflict
2. VERSIONS START AT 1 - create() returns version 1, each update() adds 1
3. NO BLIND WRITES - every overwrite names the version it is based on
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Document:
    """A stored document.

    Attributes:
        id: Document id, unique within its collection.
        version: CAS version, starting at 1.
        data: JSON-compatible document body.
    """

    id: str
    version: int
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Versioned(Generic[T]):
    """A domain object together with the document version it was read at."""

    value: T
    version: int


class DocumentStoreProtocol(Protocol):
    """Contract for the document store.

    Methods:
        get: Read one document
        create: Atomic create-if-absent
        update: Atomic compare-and-swap on version
        delete: Remove a document, optionally guarded by version
        query: Equality-filtered scan of one collection
    """

    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Return the document, or None if it does not exist."""
        ...

    async def create(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> Document:
        """Create a document at version 1.

        Raises:
            DocumentExistsError: If the id is already taken.
        """
        ...

    async def update(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        expected_version: int,
    ) -> Document:
        """Replace the document body if its version still matches.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            ConcurrentModificationError: If the stored version differs.
        """
        ...

    async def delete(
        self,
        collection: str,
        doc_id: str,
        expected_version: int | None = None,
    ) -> None:
        """Delete a document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            ConcurrentModificationError: If expected_version is given and
                the stored version differs.
        """
        ...

    async def query(
        self,
        collection: str,
        where: Mapping[str, Any] | None = None,
    ) -> list[Document]:
        """Return documents whose fields equal the given values.

        A list or tuple value matches when the field equals any member.
        Results are ordered by creation.
        """
        ...


def matches(data: Mapping[str, Any], where: Mapping[str, Any] | None) -> bool:
    """Evaluate a query filter against a document body."""
    if not where:
        return True
    for name, expected in where.items():
        actual = data.get(name)
        if isinstance(expected, Sequence) and not isinstance(expected, str):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True
