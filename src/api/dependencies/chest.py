"""Chit Chest API dependencies.

Thin FastAPI-facing wrappers over the bootstrap singletons so routes can
be overridden with ``app.dependency_overrides`` in tests.
"""

from src.application.services.chest_lifecycle_service import ChestLifecycleService
from src.application.services.chit_service import ChitService
from src.application.services.identity_service import IdentityService
from src.application.services.pairing_service import PairingService
from src.application.services.settings_service import SettingsService
from src.bootstrap import chest_services


def get_identity_service() -> IdentityService:
    return chest_services.get_identity_service()


def get_pairing_service() -> PairingService:
    return chest_services.get_pairing_service()


def get_chest_lifecycle_service() -> ChestLifecycleService:
    return chest_services.get_chest_lifecycle_service()


def get_chit_service() -> ChitService:
    return chest_services.get_chit_service()


def get_settings_service() -> SettingsService:
    return chest_services.get_settings_service()


def reset_chest_dependencies() -> None:
    """Reset all singleton instances for testing."""
    chest_services.reset_chest_services()
