"""Chest repository port.

Besides the chests themselves this port owns the live-chest slot: one
``chest_slots/{pairKey}`` document per pair holding the id of the pair's
live chest. Claiming the slot is the single-document atomic step that
keeps a pair at one live chest even across processes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.application.ports.document_store import Versioned
from src.domain.models.chest import Chest


@dataclass(frozen=True)
class LiveChestSlot:
    """Pointer from a pair to its live chest.

    Attributes:
        pair_key: Unordered pair key.
        live_chest_id: The live chest, or None once released.
        claimed_at: When the current chest claimed the slot.
        version: Slot document version (for CAS).
    """

    pair_key: str
    live_chest_id: UUID | None
    version: int
    claimed_at: datetime | None = None


class ChestRepositoryProtocol(Protocol):
    async def create(self, chest: Chest) -> Versioned[Chest]:
        ...

    async def get(self, chest_id: UUID) -> Versioned[Chest] | None:
        ...

    async def update(self, chest: Chest, expected_version: int) -> Versioned[Chest]:
        """CAS write of a chest.

        Raises:
            ConcurrentModificationError: If the chest changed since read.
        """
        ...

    async def list_for_pair(self, pair_key: str) -> list[Chest]:
        ...

    async def list_for_owner(self, identity_id: UUID) -> list[Chest]:
        ...

    async def get_slot(self, pair_key: str) -> LiveChestSlot | None:
        ...

    async def claim_slot(
        self,
        pair_key: str,
        chest_id: UUID,
        claimed_at: datetime,
        current: LiveChestSlot | None,
    ) -> LiveChestSlot:
        """Point the pair's slot at chest_id.

        Creates the slot when current is None, otherwise CAS-updates it at
        current.version.

        Raises:
            ConcurrentModificationError: If another caller claimed first.
        """
        ...

    async def release_slot(self, pair_key: str, chest_id: UUID) -> None:
        """Clear the slot if it still points at chest_id."""
        ...
