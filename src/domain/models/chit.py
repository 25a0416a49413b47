"""Chit domain model.

A chit is one short message written into a chest by one of its owners. The
author never reads it back; only the partner does, once the chest unlocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from src.domain.errors.chit import (
    ContentTooLongError,
    EmptyContentError,
    InvalidEmotionError,
)
from src.domain.models.document_codec import (
    SCHEMA_VERSION,
    format_datetime,
    format_uuid,
    parse_datetime,
    parse_uuid,
)

MAX_CONTENT_LENGTH = 1000


class Emotion(Enum):
    """Emotion tag attached to every chit."""

    ANGRY = "angry"
    SAD = "sad"
    DISAPPOINTED = "disappointed"
    GRATEFUL = "grateful"
    HAPPY = "happy"

    @classmethod
    def parse(cls, value: object) -> Emotion:
        if isinstance(value, Emotion):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidEmotionError(value)


def normalize_content(content: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """Trim chit content and check its bounds.

    Raises:
        EmptyContentError: If nothing is left after trimming.
        ContentTooLongError: If the trimmed content exceeds max_length.
    """
    trimmed = content.strip()
    if not trimmed:
        raise EmptyContentError()
    if len(trimmed) > max_length:
        raise ContentTooLongError(len(trimmed), max_length)
    return trimmed


@dataclass(frozen=True, eq=True)
class Chit:
    """A message inside a chest.

    Attributes:
        id: Chit id.
        chest_id: Owning chest.
        author_id: Identity that wrote it.
        content: Trimmed message text.
        emotion: Emotion tag.
        created_at: Write instant (UTC).
        is_read: Whether the partner has read it. Only ever goes False -> True.
        read_at: First read instant.
        read_by: The reader (always the author's partner).
    """

    id: UUID
    chest_id: UUID
    author_id: UUID
    content: str
    emotion: Emotion
    created_at: datetime
    is_read: bool = field(default=False)
    read_at: datetime | None = field(default=None)
    read_by: UUID | None = field(default=None)

    def __post_init__(self) -> None:
        if self.is_read and (self.read_at is None or self.read_by is None):
            raise ValueError("A read chit must carry read_at and read_by")
        if self.read_by == self.author_id and self.read_by is not None:
            raise ValueError("A chit cannot be read by its author")

    def with_read(self, reader_id: UUID, at: datetime) -> Chit:
        """Return a copy marked read. Already-read chits are returned unchanged."""
        if self.is_read:
            return self
        return replace(self, is_read=True, read_at=at, read_by=reader_id)

    def to_document(self) -> dict[str, Any]:
        return {
            "chestId": str(self.chest_id),
            "authorId": str(self.author_id),
            "content": self.content,
            "emotion": self.emotion.value,
            "createdAt": format_datetime(self.created_at),
            "isRead": self.is_read,
            "readAt": format_datetime(self.read_at),
            "readBy": format_uuid(self.read_by),
            "schemaVersion": SCHEMA_VERSION,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> Chit:
        created_at = parse_datetime(data["createdAt"])
        assert created_at is not None
        return cls(
            id=UUID(doc_id),
            chest_id=UUID(data["chestId"]),
            author_id=UUID(data["authorId"]),
            content=data["content"],
            emotion=Emotion(data["emotion"]),
            created_at=created_at,
            is_read=bool(data.get("isRead", False)),
            read_at=parse_datetime(data.get("readAt")),
            read_by=parse_uuid(data.get("readBy")),
        )
