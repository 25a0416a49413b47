"""Chest lifecycle errors.

Constraints:
- At most one live chest (active, unlockable or opened) per pair
- Status only moves forward: active -> unlockable -> opened -> completed
- Only the two owners may act on a chest
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from src.domain.errors.base import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)

if TYPE_CHECKING:
    from src.domain.models.chest import ChestStatus


class ChestNotFoundError(NotFoundError):
    """Raised when a chest id does not resolve.

    Attributes:
        chest_id: The chest that was not found.
    """

    error_type = "urn:chitchest:chest:not-found"
    title = "Chest Not Found"

    def __init__(self, chest_id: UUID) -> None:
        self.chest_id = chest_id
        super().__init__(f"Chest not found: {chest_id}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"chest_id": str(self.chest_id)}


class ChestAccessDeniedError(AuthorizationError):
    """Raised when the caller is not one of the chest's two owners.

    Attributes:
        chest_id: The chest being accessed.
        identity_id: The caller.
    """

    error_type = "urn:chitchest:chest:access-denied"
    title = "Not A Chest Owner"

    def __init__(self, chest_id: UUID, identity_id: UUID) -> None:
        self.chest_id = chest_id
        self.identity_id = identity_id
        super().__init__(f"Identity {identity_id} is not an owner of chest {chest_id}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"chest_id": str(self.chest_id), "identity_id": str(self.identity_id)}


class ChestAlreadyActiveError(ConflictError):
    """Raised when creating a chest while the pair already has a live one.

    Attributes:
        existing_chest_id: The live chest blocking creation.
        status: Its current status.
    """

    error_type = "urn:chitchest:chest:already-active"
    title = "Chest Already Active"

    def __init__(self, existing_chest_id: UUID, status: ChestStatus) -> None:
        self.existing_chest_id = existing_chest_id
        self.status = status
        super().__init__(
            "An active chest already exists between you and your partner"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "existing_chest_id": str(self.existing_chest_id),
            "chest_status": self.status.value,
        }


class InvalidChestTransitionError(StateError):
    """Raised when a status change would move backward or skip a state.

    Attributes:
        chest_id: The chest.
        from_status: Current status.
        to_status: Requested status.
    """

    error_type = "urn:chitchest:chest:invalid-transition"
    title = "Invalid Status Transition"

    def __init__(
        self,
        chest_id: UUID,
        from_status: ChestStatus,
        to_status: ChestStatus,
    ) -> None:
        self.chest_id = chest_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Chest {chest_id} cannot move from {from_status.value} to {to_status.value}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "chest_id": str(self.chest_id),
            "from_status": self.from_status.value,
            "to_status": self.to_status.value,
        }


class ChestStillLockedError(StateError):
    """Raised when opening a chest whose unlock deadline has not passed."""

    error_type = "urn:chitchest:chest:still-locked"
    title = "Chest Still Locked"

    def __init__(self, chest_id: UUID, days_remaining: int) -> None:
        self.chest_id = chest_id
        self.days_remaining = days_remaining
        super().__init__("This chest is not ready to be opened")

    def problem_extensions(self) -> dict[str, Any]:
        return {"chest_id": str(self.chest_id), "days_remaining": self.days_remaining}


class DurationOutOfRangeError(ValidationError):
    """Raised when a chest duration falls outside the allowed range."""

    error_type = "urn:chitchest:chest:duration-out-of-range"
    title = "Duration Out Of Range"

    def __init__(self, value: object, minimum: int, maximum: int) -> None:
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Chest duration must be between {minimum} and {maximum} days"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"minimum": self.minimum, "maximum": self.maximum}
