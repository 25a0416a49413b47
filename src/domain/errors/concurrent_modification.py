"""Concurrent modification error for compare-and-swap writes.

The document store only guarantees atomicity per document. Every
read-modify-write goes through a version check; when the version moved
underneath the writer this error is raised instead of overwriting.
"""

from __future__ import annotations

from typing import Any

from src.domain.errors.base import ConflictError


class ConcurrentModificationError(ConflictError):
    """Raised when a CAS write fails because the document changed.

    This is surfaced to the caller: the caller should re-read and decide
    whether to try again.

    Attributes:
        collection: Collection of the contested document.
        doc_id: Id of the contested document.
        expected_version: The version the writer based its change on.
        actual_version: The version found in the store (None if deleted).
    """

    error_type = "urn:chitchest:concurrent-modification"
    title = "Concurrent Modification"

    def __init__(
        self,
        collection: str,
        doc_id: str,
        expected_version: int | None,
        actual_version: int | None = None,
    ) -> None:
        self.collection = collection
        self.doc_id = doc_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrent modification detected for {collection}/{doc_id}. "
            f"Expected version: {expected_version}, found: {actual_version}."
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"collection": self.collection, "doc_id": self.doc_id}
