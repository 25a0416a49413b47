"""Chit API request/response models."""

from uuid import UUID

from pydantic import BaseModel, Field

from src.api.models.common import DateTimeWithZ
from src.domain.models.chit import Chit


class AddChitRequest(BaseModel):
    """A new chit.

    Content is trimmed and length-checked by the service, and the emotion
    is normalized there too, so both arrive as plain strings.
    """

    author_id: UUID
    content: str
    emotion: str = Field(..., description="angry, sad, disappointed, grateful or happy")


class MarkReadRequest(BaseModel):
    reader_id: UUID


class ChitResponse(BaseModel):
    id: UUID
    chest_id: UUID
    author_id: UUID
    content: str
    emotion: str
    created_at: DateTimeWithZ
    is_read: bool
    read_at: DateTimeWithZ | None = None

    @classmethod
    def from_domain(cls, chit: Chit) -> "ChitResponse":
        return cls(
            id=chit.id,
            chest_id=chit.chest_id,
            author_id=chit.author_id,
            content=chit.content,
            emotion=chit.emotion.value,
            created_at=chit.created_at,
            is_read=chit.is_read,
            read_at=chit.read_at,
        )


class ChitListResponse(BaseModel):
    chest_id: UUID
    reader_id: UUID
    chits: list[ChitResponse]


class ChitStatsResponse(BaseModel):
    chest_id: UUID
    total_chits: int
    read_count: int
    remaining_count: int
    emotion_count: dict[str, int]
    progress: int = Field(..., ge=0, le=100)


class ChitHistoryEntryResponse(BaseModel):
    chest_id: UUID
    unlock_at: DateTimeWithZ
    chits: list[ChitResponse]
