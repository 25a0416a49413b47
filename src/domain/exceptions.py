"""Base exception classes for the Chit Chest domain layer."""

from __future__ import annotations

from typing import Any


class ChestAppError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class (usually via
    one of the category classes in src.domain.errors.base). This enables
    consistent error handling across the application.

    Attributes:
        status_code: HTTP status the API layer should answer with.
        error_type: RFC 7807 problem type URN.
        title: Short human-readable summary of the problem type.
    """

    status_code: int = 500
    error_type: str = "urn:chitchest:error"
    title: str = "Chit Chest Error"

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        """Extra members merged into the RFC 7807 problem body.

        Subclasses override this to expose the ids involved in the failure.
        """
        return {}

    def to_rfc7807_dict(self) -> dict[str, Any]:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary conforming to RFC 7807 problem details.
        """
        result: dict[str, Any] = {
            "type": self.error_type,
            "title": self.title,
            "status": self.status_code,
            "detail": self.message,
        }
        result.update(self.problem_extensions())
        return result
