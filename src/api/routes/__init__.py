"""
API routes for Chit Chest, one router per resource:
health, identities (with pairings), chests, chits and settings.
"""

from src.api.routes.chest import router as chest_router
from src.api.routes.chit import router as chit_router
from src.api.routes.health import router as health_router
from src.api.routes.identity import router as identity_router
from src.api.routes.settings import router as settings_router

__all__: list[str] = [
    "chest_router",
    "chit_router",
    "health_router",
    "identity_router",
    "settings_router",
]
