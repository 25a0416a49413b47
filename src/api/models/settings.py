"""Settings API request/response models."""

from uuid import UUID

from pydantic import BaseModel, Field

from src.api.models.common import DateTimeWithZ
from src.domain.models.settings import Settings


class UpdateSettingsRequest(BaseModel):
    """Partial settings update; omitted fields are left unchanged."""

    chest_duration_days: int | None = Field(default=None, strict=True)
    notifications_enabled: bool | None = Field(default=None, strict=True)
    sound_enabled: bool | None = Field(default=None, strict=True)
    theme: str | None = None


class SettingsResponse(BaseModel):
    owner_id: UUID
    chest_duration_days: int
    notifications_enabled: bool
    sound_enabled: bool
    theme: str
    updated_at: DateTimeWithZ | None = None

    @classmethod
    def from_domain(cls, settings: Settings) -> "SettingsResponse":
        return cls(
            owner_id=settings.owner_id,
            chest_duration_days=settings.chest_duration_days,
            notifications_enabled=settings.notifications_enabled,
            sound_enabled=settings.sound_enabled,
            theme=settings.theme.value,
            updated_at=settings.updated_at,
        )


class SettingsEditabilityResponse(BaseModel):
    owner_id: UUID
    can_edit: bool
    reason: str | None = None
    chest_id: UUID | None = None
