"""Chest API request/response models."""

from uuid import UUID

from pydantic import BaseModel, Field

from src.api.models.common import DateTimeWithZ
from src.domain.models.chest import Chest, ChestStatus, DurationUnit


class CreateChestRequest(BaseModel):
    """Start a chest for a paired couple.

    Attributes:
        owner_a: The creator.
        owner_b: The creator's partner.
        duration_days: Omit to use the creator's ``chest_duration_days``.
    """

    owner_a: UUID
    owner_b: UUID
    duration_days: int | None = Field(default=None, strict=True)


class ChestResponse(BaseModel):
    id: UUID
    owners: list[UUID]
    start_at: DateTimeWithZ
    unlock_at: DateTimeWithZ
    duration_units: int
    duration_unit: DurationUnit
    status: ChestStatus
    updated_at: DateTimeWithZ | None = None
    completed_at: DateTimeWithZ | None = None

    @classmethod
    def from_domain(cls, chest: Chest) -> "ChestResponse":
        return cls(
            id=chest.id,
            owners=list(chest.owners),
            start_at=chest.start_at,
            unlock_at=chest.unlock_at,
            duration_units=chest.duration_units,
            duration_unit=chest.duration_unit,
            status=chest.status,
            updated_at=chest.updated_at,
            completed_at=chest.completed_at,
        )


class ActiveChestResponse(BaseModel):
    can_start: bool
    chest: ChestResponse | None = None


class UnlockStatusResponse(BaseModel):
    chest_id: UUID
    is_unlockable: bool
    days_remaining: int
    status: ChestStatus


class SetChestStatusRequest(BaseModel):
    status: ChestStatus
    requester_id: UUID


class ChestActionRequest(BaseModel):
    reader_id: UUID


class ChestStatsResponse(BaseModel):
    chest_id: UUID
    total_chits: int
    emotion_count: dict[str, int]
    status: ChestStatus
    start_at: DateTimeWithZ
    unlock_at: DateTimeWithZ


class ChestHistoryResponse(BaseModel):
    identity_id: UUID
    chests: list[ChestResponse]
