"""Settings repository over the document store."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.document_store import DocumentStoreProtocol, Versioned
from src.application.ports.settings_repository import SettingsRepositoryProtocol
from src.domain.models.settings import Settings
from src.infrastructure.adapters.persistence.collections import SETTINGS


class DocumentSettingsRepository(SettingsRepositoryProtocol):
    def __init__(self, store: DocumentStoreProtocol) -> None:
        self._store = store

    async def get(self, owner_id: UUID) -> Versioned[Settings] | None:
        doc = await self._store.get(SETTINGS, str(owner_id))
        if doc is None:
            return None
        return Versioned(Settings.from_document(doc.id, doc.data), doc.version)

    async def create(self, settings: Settings) -> Versioned[Settings]:
        doc = await self._store.create(
            SETTINGS, str(settings.owner_id), settings.to_document()
        )
        return Versioned(Settings.from_document(doc.id, doc.data), doc.version)

    async def update(
        self, settings: Settings, expected_version: int
    ) -> Versioned[Settings]:
        doc = await self._store.update(
            SETTINGS, str(settings.owner_id), settings.to_document(), expected_version
        )
        return Versioned(Settings.from_document(doc.id, doc.data), doc.version)
