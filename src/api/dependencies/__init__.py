"""FastAPI dependencies."""

from src.api.dependencies.chest import (
    get_chest_lifecycle_service,
    get_chit_service,
    get_identity_service,
    get_pairing_service,
    get_settings_service,
    reset_chest_dependencies,
)

__all__ = [
    "get_chest_lifecycle_service",
    "get_chit_service",
    "get_identity_service",
    "get_pairing_service",
    "get_settings_service",
    "reset_chest_dependencies",
]
