"""Health check endpoint."""

from fastapi import APIRouter

from src.api.models.health import HealthResponse
from src.bootstrap.chest_services import get_document_store_backend

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return health status and the document store backend in use."""
    return HealthResponse(status="healthy", document_store=get_document_store_backend())
