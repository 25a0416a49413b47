"""Pairing record repository over the document store.

Records are keyed by the unordered pair key, so a pair can never have two
records at once.
"""

from __future__ import annotations

from uuid import UUID

from src.application.ports.document_store import DocumentStoreProtocol, Versioned
from src.application.ports.pairing_repository import PairingRepositoryProtocol
from src.domain.models.pairing import PairingRecord, pair_key
from src.infrastructure.adapters.persistence.collections import PAIRINGS


class DocumentPairingRepository(PairingRepositoryProtocol):
    def __init__(self, store: DocumentStoreProtocol) -> None:
        self._store = store

    async def create(self, record: PairingRecord) -> Versioned[PairingRecord]:
        doc = await self._store.create(PAIRINGS, record.key, record.to_document())
        return Versioned(PairingRecord.from_document(doc.data), doc.version)

    async def get(self, id_a: UUID, id_b: UUID) -> Versioned[PairingRecord] | None:
        doc = await self._store.get(PAIRINGS, pair_key(id_a, id_b))
        if doc is None:
            return None
        return Versioned(PairingRecord.from_document(doc.data), doc.version)

    async def update(
        self, record: PairingRecord, expected_version: int
    ) -> Versioned[PairingRecord]:
        doc = await self._store.update(
            PAIRINGS, record.key, record.to_document(), expected_version
        )
        return Versioned(PairingRecord.from_document(doc.data), doc.version)

    async def delete(self, record: PairingRecord, expected_version: int) -> None:
        await self._store.delete(PAIRINGS, record.key, expected_version)

    async def list_pending_for(
        self, identity_id: UUID
    ) -> list[Versioned[PairingRecord]]:
        pending: list[Versioned[PairingRecord]] = []
        for field in ("idA", "idB"):
            docs = await self._store.query(
                PAIRINGS, {field: str(identity_id), "completed": False}
            )
            pending.extend(
                Versioned(PairingRecord.from_document(doc.data), doc.version)
                for doc in docs
            )
        return pending

    async def has_historical(self, id_a: UUID, id_b: UUID) -> bool:
        found = await self.get(id_a, id_b)
        return found is not None and found.value.historical
