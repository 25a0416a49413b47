"""
API models (Pydantic DTOs) for Chit Chest.
"""

from src.api.models.common import DateTimeWithZ, ProblemDetailResponse
from src.api.models.health import HealthResponse

__all__: list[str] = ["DateTimeWithZ", "HealthResponse", "ProblemDetailResponse"]
