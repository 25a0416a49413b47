"""Application services - use case orchestration.

Available services:
- IdentityService: signup, lookups, symmetric pairing status
- PairingService: permanent pairing with intent record and reconciliation
- ChestLifecycleService: chest creation and the status state machine
- ChitService: write window, blind-box reads, idempotent read marking
- SettingsService: settings with the running-chest duration lock
- TimeAuthorityService: production clock
"""

from src.application.services.chest_lifecycle_service import (
    ChestLifecycleService,
    ChestStartCheck,
    ChestStats,
    UnlockStatus,
)
from src.application.services.chit_service import (
    ChitHistoryEntry,
    ChitService,
    ChitStats,
)
from src.application.services.identity_service import (
    IdentityService,
    PairingStatus,
    PartnerInfo,
)
from src.application.services.pairing_service import PairingService
from src.application.services.settings_service import (
    SettingsEditability,
    SettingsService,
)
from src.application.services.time_authority_service import TimeAuthorityService

__all__ = [
    "ChestLifecycleService",
    "ChestStartCheck",
    "ChestStats",
    "ChitHistoryEntry",
    "ChitService",
    "ChitStats",
    "IdentityService",
    "PairingService",
    "PairingStatus",
    "PartnerInfo",
    "SettingsEditability",
    "SettingsService",
    "TimeAuthorityService",
    "UnlockStatus",
]
