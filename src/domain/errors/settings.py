"""Settings errors."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from src.domain.errors.base import StateError, ValidationError


class ChestActiveLockedError(StateError):
    """Raised when changing the chest duration while a chest is running.

    The duration may only change while the owner's pair has no chest in
    ``active`` or ``unlockable`` status.

    Attributes:
        owner_id: The settings owner.
        chest_id: The running chest.
    """

    error_type = "urn:chitchest:settings:chest-active-locked"
    title = "Settings Locked"

    def __init__(self, owner_id: UUID, chest_id: UUID) -> None:
        self.owner_id = owner_id
        self.chest_id = chest_id
        super().__init__(
            "There is an active chest. Settings can only be changed when no chest is active."
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"owner_id": str(self.owner_id), "chest_id": str(self.chest_id)}


class InvalidSettingError(ValidationError):
    """Raised when a cosmetic setting has an unsupported value."""

    error_type = "urn:chitchest:settings:invalid-setting"
    title = "Invalid Setting"

    def __init__(self, name: str, value: object) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value for {name}: {value!r}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"setting": self.name}
