"""Identity repository port.

Identities live in the ``users`` collection. Username uniqueness is made
atomic by a separate ``usernames/{username}`` reservation document that is
created with create-if-absent before the identity is written.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.application.ports.document_store import Versioned
from src.domain.models.identity import Identity


class IdentityRepositoryProtocol(Protocol):
    async def reserve_username(self, username: str, identity_id: UUID) -> None:
        """Claim a username for identity_id.

        Raises:
            UsernameTakenError: If the username is already reserved.
        """
        ...

    async def release_username(self, username: str) -> None:
        """Drop a reservation whose identity was never written."""
        ...

    async def create(self, identity: Identity) -> Versioned[Identity]:
        ...

    async def get(self, identity_id: UUID) -> Versioned[Identity] | None:
        ...

    async def get_by_username(self, username: str) -> Versioned[Identity] | None:
        ...

    async def update(
        self, identity: Identity, expected_version: int
    ) -> Versioned[Identity]:
        """CAS write of an identity.

        Raises:
            ConcurrentModificationError: If the identity changed since read.
        """
        ...

    async def list_unpaired(self) -> list[Identity]:
        ...
