"""Identity repository over the document store."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.document_store import DocumentStoreProtocol, Versioned
from src.application.ports.identity_repository import IdentityRepositoryProtocol
from src.domain.errors.document_store import DocumentExistsError, DocumentNotFoundError
from src.domain.errors.identity import UsernameTakenError
from src.domain.models.identity import Identity
from src.infrastructure.adapters.persistence.collections import USERNAMES, USERS


class DocumentIdentityRepository(IdentityRepositoryProtocol):
    def __init__(self, store: DocumentStoreProtocol) -> None:
        self._store = store

    async def reserve_username(self, username: str, identity_id: UUID) -> None:
        try:
            await self._store.create(
                USERNAMES, username, {"identityId": str(identity_id)}
            )
        except DocumentExistsError:
            raise UsernameTakenError(username) from None

    async def release_username(self, username: str) -> None:
        try:
            await self._store.delete(USERNAMES, username)
        except DocumentNotFoundError:
            return

    async def create(self, identity: Identity) -> Versioned[Identity]:
        doc = await self._store.create(USERS, str(identity.id), identity.to_document())
        return Versioned(Identity.from_document(doc.id, doc.data), doc.version)

    async def get(self, identity_id: UUID) -> Versioned[Identity] | None:
        doc = await self._store.get(USERS, str(identity_id))
        if doc is None:
            return None
        return Versioned(Identity.from_document(doc.id, doc.data), doc.version)

    async def get_by_username(self, username: str) -> Versioned[Identity] | None:
        reservation = await self._store.get(USERNAMES, username)
        if reservation is None:
            return None
        return await self.get(UUID(reservation.data["identityId"]))

    async def update(
        self, identity: Identity, expected_version: int
    ) -> Versioned[Identity]:
        doc = await self._store.update(
            USERS, str(identity.id), identity.to_document(), expected_version
        )
        return Versioned(Identity.from_document(doc.id, doc.data), doc.version)

    async def list_unpaired(self) -> list[Identity]:
        docs = await self._store.query(USERS, {"pairedId": None})
        return [Identity.from_document(doc.id, doc.data) for doc in docs]
