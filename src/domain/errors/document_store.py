"""Document store errors raised by DocumentStoreProtocol implementations."""

from __future__ import annotations

from src.domain.errors.base import ConflictError, NotFoundError


class DocumentExistsError(ConflictError):
    """Raised by create() when the document id is already taken."""

    error_type = "urn:chitchest:store:document-exists"
    title = "Document Exists"

    def __init__(self, collection: str, doc_id: str) -> None:
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Document already exists: {collection}/{doc_id}")


class DocumentNotFoundError(NotFoundError):
    """Raised by update()/delete() when the document is missing."""

    error_type = "urn:chitchest:store:document-not-found"
    title = "Document Not Found"

    def __init__(self, collection: str, doc_id: str) -> None:
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Document not found: {collection}/{doc_id}")
