"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        document_store: Backend in use ("memory" or "postgresql").
    """

    status: str
    document_store: str
