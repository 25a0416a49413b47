"""Chit repository port.

Chits are stored per chest under ``chests/{chestId}/chits``. Per-chest
counters live in ``chest_counters/{chestId}`` and only move through
compare-and-set increments.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.application.ports.document_store import Versioned
from src.domain.models.chest_counters import ChestCounters
from src.domain.models.chit import Chit


class ChitRepositoryProtocol(Protocol):
    async def create(self, chit: Chit) -> Versioned[Chit]:
        ...

    async def get(self, chest_id: UUID, chit_id: UUID) -> Versioned[Chit] | None:
        ...

    async def update(self, chit: Chit, expected_version: int) -> Versioned[Chit]:
        """CAS write of a chit.

        Raises:
            ConcurrentModificationError: If the chit changed since read.
        """
        ...

    async def list_by_chest(self, chest_id: UUID) -> list[Chit]:
        """All chits of a chest, createdAt ascending."""
        ...

    async def list_by_author(self, chest_id: UUID, author_id: UUID) -> list[Chit]:
        """Chits of one author in a chest, createdAt ascending."""
        ...

    async def get_counters(self, chest_id: UUID) -> ChestCounters:
        ...

    async def increment_chit_count(
        self, chest_id: UUID, author_id: UUID
    ) -> ChestCounters:
        ...

    async def increment_read_count(
        self, chest_id: UUID, chit_id: UUID, reader_id: UUID
    ) -> ChestCounters:
        """Count the first read of chit_id; repeated calls are no-ops."""
        ...
