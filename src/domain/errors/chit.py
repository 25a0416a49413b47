"""Chit errors.

Chits are append-only: they can only be written while their chest is
active and before its unlock deadline, and only read by the partner of
their author.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from src.domain.errors.base import (
    AuthorizationError,
    NotFoundError,
    StateError,
    ValidationError,
)


class InvalidEmotionError(ValidationError):
    """Raised when the emotion is not one of the closed set."""

    error_type = "urn:chitchest:chit:invalid-emotion"
    title = "Invalid Emotion"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__("Invalid emotion selected")

    def problem_extensions(self) -> dict[str, Any]:
        return {"emotion": str(self.value)}


class EmptyContentError(ValidationError):
    """Raised when chit content is empty after trimming whitespace."""

    error_type = "urn:chitchest:chit:empty-content"
    title = "Empty Content"

    def __init__(self) -> None:
        super().__init__("Chit content cannot be empty")


class ContentTooLongError(ValidationError):
    """Raised when chit content exceeds the maximum length."""

    error_type = "urn:chitchest:chit:content-too-long"
    title = "Content Too Long"

    def __init__(self, length: int, maximum: int) -> None:
        self.length = length
        self.maximum = maximum
        super().__init__(
            f"Chit content is too long (max {maximum} characters)"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"length": self.length, "maximum": self.maximum}


class ChestNotWritableError(StateError):
    """Raised when adding a chit outside the chest's write window.

    The window closes as soon as the chest leaves ``active`` or the unlock
    deadline passes, whichever comes first. The deadline is checked even if
    the stored status has not caught up yet.

    Attributes:
        chest_id: The chest.
        reason: ``not_active`` or ``past_deadline``.
    """

    error_type = "urn:chitchest:chit:chest-not-writable"
    title = "Chest Not Writable"

    NOT_ACTIVE = "not_active"
    PAST_DEADLINE = "past_deadline"

    def __init__(self, chest_id: UUID, reason: str) -> None:
        self.chest_id = chest_id
        self.reason = reason
        if reason == self.PAST_DEADLINE:
            message = "Chest has already unlocked. Cannot add new chits."
        else:
            message = "Cannot add chit to a chest that is not active"
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        return {"chest_id": str(self.chest_id), "reason": self.reason}


class ChitNotFoundError(NotFoundError):
    """Raised when a chit id does not resolve inside the given chest."""

    error_type = "urn:chitchest:chit:not-found"
    title = "Chit Not Found"

    def __init__(self, chest_id: UUID, chit_id: UUID) -> None:
        self.chest_id = chest_id
        self.chit_id = chit_id
        super().__init__(f"Chit {chit_id} not found in chest {chest_id}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"chest_id": str(self.chest_id), "chit_id": str(self.chit_id)}


class OwnChitAccessError(AuthorizationError):
    """Raised when an author tries to read or mark their own chit."""

    error_type = "urn:chitchest:chit:own-chit"
    title = "Cannot Read Own Chit"

    def __init__(self, chit_id: UUID, identity_id: UUID) -> None:
        self.chit_id = chit_id
        self.identity_id = identity_id
        super().__init__("Chits can only be read by the author's partner")

    def problem_extensions(self) -> dict[str, Any]:
        return {"chit_id": str(self.chit_id)}
