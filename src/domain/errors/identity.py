"""Identity errors.

Raised by the identity store and by lookups performed on behalf of
pairing and settings operations.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from src.domain.errors.base import ConflictError, NotFoundError, ValidationError


class IdentityNotFoundError(NotFoundError):
    """Raised when an identity id or username does not resolve.

    Exactly one of identity_id / username is set, matching how the caller
    looked the identity up.

    Attributes:
        identity_id: The identity id that was not found.
        username: The username that was not found.
    """

    error_type = "urn:chitchest:identity:not-found"
    title = "Identity Not Found"

    def __init__(
        self,
        identity_id: UUID | None = None,
        username: str | None = None,
    ) -> None:
        self.identity_id = identity_id
        self.username = username
        if username is not None:
            message = f"Username not found: {username}"
        else:
            message = f"Identity not found: {identity_id}"
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        if self.username is not None:
            return {"username": self.username}
        return {"identity_id": str(self.identity_id)}


class UsernameTakenError(ConflictError):
    """Raised when registering a username that is already reserved.

    Attributes:
        username: The requested username.
    """

    error_type = "urn:chitchest:identity:username-taken"
    title = "Username Taken"

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username already taken: {username}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"username": self.username}


class InvalidUsernameError(ValidationError):
    """Raised when a username fails the format rules."""

    error_type = "urn:chitchest:identity:invalid-username"
    title = "Invalid Username"

    def __init__(self, username: str, reason: str) -> None:
        self.username = username
        self.reason = reason
        super().__init__(f"Invalid username {username!r}: {reason}")


class InvalidGenderError(ValidationError):
    """Raised when a gender value is outside the closed set."""

    error_type = "urn:chitchest:identity:invalid-gender"
    title = "Invalid Gender"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid gender: {value!r}. Expected 'male' or 'female'")
