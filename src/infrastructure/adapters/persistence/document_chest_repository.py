"""Chest repository over the document store.

Chests live in ``chests``; the per-pair live-chest pointer lives in
``chest_slots/{pairKey}``.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from structlog import get_logger

from src.application.ports.chest_repository import (
    ChestRepositoryProtocol,
    LiveChestSlot,
)
from src.application.ports.document_store import (
    Document,
    DocumentStoreProtocol,
    Versioned,
)
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.document_store import DocumentExistsError
from src.domain.models.chest import Chest
from src.domain.models.document_codec import (
    format_datetime,
    parse_datetime,
    parse_uuid,
)
from src.infrastructure.adapters.persistence.collections import CHEST_SLOTS, CHESTS

logger = get_logger(__name__)


class DocumentChestRepository(ChestRepositoryProtocol):
    def __init__(self, store: DocumentStoreProtocol) -> None:
        self._store = store

    async def create(self, chest: Chest) -> Versioned[Chest]:
        doc = await self._store.create(CHESTS, str(chest.id), chest.to_document())
        return Versioned(Chest.from_document(doc.id, doc.data), doc.version)

    async def get(self, chest_id: UUID) -> Versioned[Chest] | None:
        doc = await self._store.get(CHESTS, str(chest_id))
        if doc is None:
            return None
        return Versioned(Chest.from_document(doc.id, doc.data), doc.version)

    async def update(self, chest: Chest, expected_version: int) -> Versioned[Chest]:
        doc = await self._store.update(
            CHESTS, str(chest.id), chest.to_document(), expected_version
        )
        return Versioned(Chest.from_document(doc.id, doc.data), doc.version)

    async def list_for_pair(self, pair_key: str) -> list[Chest]:
        docs = await self._store.query(CHESTS, {"pairKey": pair_key})
        return [Chest.from_document(doc.id, doc.data) for doc in docs]

    async def list_for_owner(self, identity_id: UUID) -> list[Chest]:
        chests: dict[str, Chest] = {}
        for field in ("ownerA", "ownerB"):
            for doc in await self._store.query(CHESTS, {field: str(identity_id)}):
                chests[doc.id] = Chest.from_document(doc.id, doc.data)
        return list(chests.values())

    async def get_slot(self, pair_key: str) -> LiveChestSlot | None:
        doc = await self._store.get(CHEST_SLOTS, pair_key)
        return _slot(doc) if doc is not None else None

    async def claim_slot(
        self,
        pair_key: str,
        chest_id: UUID,
        claimed_at: datetime,
        current: LiveChestSlot | None,
    ) -> LiveChestSlot:
        data = {
            "liveChestId": str(chest_id),
            "claimedAt": format_datetime(claimed_at),
        }
        if current is None:
            try:
                doc = await self._store.create(CHEST_SLOTS, pair_key, data)
            except DocumentExistsError:
                raise ConcurrentModificationError(
                    CHEST_SLOTS, pair_key, expected_version=None
                ) from None
        else:
            doc = await self._store.update(CHEST_SLOTS, pair_key, data, current.version)
        return _slot(doc)

    async def release_slot(self, pair_key: str, chest_id: UUID) -> None:
        doc = await self._store.get(CHEST_SLOTS, pair_key)
        if doc is None or doc.data.get("liveChestId") != str(chest_id):
            return
        try:
            await self._store.update(
                CHEST_SLOTS,
                pair_key,
                {"liveChestId": None, "claimedAt": None},
                doc.version,
            )
        except ConcurrentModificationError:
            # A new claim only lands on a free slot, so the slot moved on
            logger.debug("chest_slot_release_skipped", pair_key=pair_key)


def _slot(doc: Document) -> LiveChestSlot:
    return LiveChestSlot(
        pair_key=doc.id,
        live_chest_id=parse_uuid(doc.data.get("liveChestId")),
        version=doc.version,
        claimed_at=parse_datetime(doc.data.get("claimedAt")),
    )
