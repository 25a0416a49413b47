"""Per-identity settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from src.domain.errors.settings import InvalidSettingError
from src.domain.models.document_codec import (
    SCHEMA_VERSION,
    format_datetime,
    parse_datetime,
)

DEFAULT_CHEST_DURATION_DAYS = 7


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, value: object) -> Theme:
        if isinstance(value, Theme):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidSettingError("theme", value)


@dataclass(frozen=True, eq=True)
class Settings:
    """User preferences.

    chest_duration_days is the duration the next chest will be created with.
    It is frozen while the owner has an ACTIVE or UNLOCKABLE chest.
    """

    owner_id: UUID
    chest_duration_days: int = field(default=DEFAULT_CHEST_DURATION_DAYS)
    notifications_enabled: bool = field(default=True)
    sound_enabled: bool = field(default=True)
    theme: Theme = field(default=Theme.LIGHT)
    updated_at: datetime | None = field(default=None)

    def to_document(self) -> dict[str, Any]:
        return {
            "chestDurationDays": self.chest_duration_days,
            "notificationsEnabled": self.notifications_enabled,
            "soundEnabled": self.sound_enabled,
            "theme": self.theme.value,
            "updatedAt": format_datetime(self.updated_at),
            "schemaVersion": SCHEMA_VERSION,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> Settings:
        return cls(
            owner_id=UUID(doc_id),
            chest_duration_days=int(
                data.get("chestDurationDays", DEFAULT_CHEST_DURATION_DAYS)
            ),
            notifications_enabled=bool(data.get("notificationsEnabled", True)),
            sound_enabled=bool(data.get("soundEnabled", True)),
            theme=Theme(data.get("theme", Theme.LIGHT.value)),
            updated_at=parse_datetime(data.get("updatedAt")),
        )
