"""Settings repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.application.ports.document_store import Versioned
from src.domain.models.settings import Settings


class SettingsRepositoryProtocol(Protocol):
    async def get(self, owner_id: UUID) -> Versioned[Settings] | None:
        ...

    async def create(self, settings: Settings) -> Versioned[Settings]:
        """Write first-access defaults.

        Raises:
            DocumentExistsError: If settings already exist for the owner.
        """
        ...

    async def update(
        self, settings: Settings, expected_version: int
    ) -> Versioned[Settings]:
        ...
