"""Pairing record repository port.

One record per unordered pair, keyed by pair_key(a, b). A record with
``completed=False`` is an intent left by a pairing that has not finished
applying; reconciliation resolves it.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.application.ports.document_store import Versioned
from src.domain.models.pairing import PairingRecord


class PairingRepositoryProtocol(Protocol):
    async def create(self, record: PairingRecord) -> Versioned[PairingRecord]:
        """Write a new record.

        Raises:
            DocumentExistsError: If a record for the pair already exists.
        """
        ...

    async def get(self, id_a: UUID, id_b: UUID) -> Versioned[PairingRecord] | None:
        ...

    async def update(
        self, record: PairingRecord, expected_version: int
    ) -> Versioned[PairingRecord]:
        ...

    async def delete(self, record: PairingRecord, expected_version: int) -> None:
        ...

    async def list_pending_for(
        self, identity_id: UUID
    ) -> list[Versioned[PairingRecord]]:
        """Intent records (completed=False) that involve identity_id."""
        ...

    async def has_historical(self, id_a: UUID, id_b: UUID) -> bool:
        ...
