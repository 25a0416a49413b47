"""Chit repository over the document store.

Chits of a chest live in ``chests/{chestId}/chits``. Counters live in
``chest_counters/{chestId}`` and are incremented with compare-and-set,
re-reading and re-applying on a version conflict.
"""

from __future__ import annotations

from collections.abc import Callable
from uuid import UUID

from structlog import get_logger

from src.application.ports.chit_repository import ChitRepositoryProtocol
from src.application.ports.document_store import DocumentStoreProtocol, Versioned
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.document_store import DocumentExistsError
from src.domain.models.chest_counters import ChestCounters
from src.domain.models.chit import Chit
from src.infrastructure.adapters.persistence.collections import (
    CHEST_COUNTERS,
    chits_of,
)

logger = get_logger(__name__)

# Attempts for one counter increment before the conflict is surfaced
MAX_INCREMENT_ATTEMPTS = 10


def _chronological(chits: list[Chit]) -> list[Chit]:
    # uuid7 ids break ties between chits written in the same instant
    return sorted(chits, key=lambda chit: (chit.created_at, chit.id.int))


class DocumentChitRepository(ChitRepositoryProtocol):
    def __init__(self, store: DocumentStoreProtocol) -> None:
        self._store = store

    async def create(self, chit: Chit) -> Versioned[Chit]:
        doc = await self._store.create(
            chits_of(chit.chest_id), str(chit.id), chit.to_document()
        )
        return Versioned(Chit.from_document(doc.id, doc.data), doc.version)

    async def get(self, chest_id: UUID, chit_id: UUID) -> Versioned[Chit] | None:
        doc = await self._store.get(chits_of(chest_id), str(chit_id))
        if doc is None:
            return None
        return Versioned(Chit.from_document(doc.id, doc.data), doc.version)

    async def update(self, chit: Chit, expected_version: int) -> Versioned[Chit]:
        doc = await self._store.update(
            chits_of(chit.chest_id), str(chit.id), chit.to_document(), expected_version
        )
        return Versioned(Chit.from_document(doc.id, doc.data), doc.version)

    async def list_by_chest(self, chest_id: UUID) -> list[Chit]:
        docs = await self._store.query(chits_of(chest_id))
        return _chronological([Chit.from_document(doc.id, doc.data) for doc in docs])

    async def list_by_author(self, chest_id: UUID, author_id: UUID) -> list[Chit]:
        docs = await self._store.query(chits_of(chest_id), {"authorId": str(author_id)})
        return _chronological([Chit.from_document(doc.id, doc.data) for doc in docs])

    async def get_counters(self, chest_id: UUID) -> ChestCounters:
        doc = await self._store.get(CHEST_COUNTERS, str(chest_id))
        if doc is None:
            return ChestCounters(chest_id=chest_id)
        return ChestCounters.from_document(doc.id, doc.data)

    async def increment_chit_count(
        self, chest_id: UUID, author_id: UUID
    ) -> ChestCounters:
        return await self._increment(
            chest_id, lambda counters: counters.with_chit_added(author_id)
        )

    async def increment_read_count(
        self, chest_id: UUID, chit_id: UUID, reader_id: UUID
    ) -> ChestCounters:
        return await self._increment(
            chest_id, lambda counters: counters.with_chit_read(chit_id, reader_id)
        )

    async def _increment(
        self,
        chest_id: UUID,
        apply: Callable[[ChestCounters], ChestCounters],
    ) -> ChestCounters:
        doc_id = str(chest_id)
        for attempt in range(1, MAX_INCREMENT_ATTEMPTS + 1):
            doc = await self._store.get(CHEST_COUNTERS, doc_id)
            try:
                if doc is None:
                    updated = apply(ChestCounters(chest_id=chest_id))
                    await self._store.create(
                        CHEST_COUNTERS, doc_id, updated.to_document()
                    )
                else:
                    current = ChestCounters.from_document(doc.id, doc.data)
                    updated = apply(current)
                    if updated is current:
                        return current
                    await self._store.update(
                        CHEST_COUNTERS, doc_id, updated.to_document(), doc.version
                    )
                return updated
            except (ConcurrentModificationError, DocumentExistsError):
                logger.debug(
                    "chest_counter_increment_contended",
                    chest_id=doc_id,
                    attempt=attempt,
                )
        raise ConcurrentModificationError(
            CHEST_COUNTERS, doc_id, expected_version=None
        )
