"""Domain models for Chit Chest.

Immutable value objects for identities, pairings, chests, chits and
settings. They carry no infrastructure dependencies; each knows how to map
itself to and from its store document.
"""

from src.domain.models.chest import (
    LIVE_STATUSES,
    SETTINGS_LOCK_STATUSES,
    STATUS_TRANSITION_MATRIX,
    Chest,
    ChestStatus,
    DurationUnit,
)
from src.domain.models.chest_counters import ChestCounters
from src.domain.models.chit import MAX_CONTENT_LENGTH, Chit, Emotion, normalize_content
from src.domain.models.identity import Gender, Identity, validate_username
from src.domain.models.pairing import PairingRecord, pair_key
from src.domain.models.settings import DEFAULT_CHEST_DURATION_DAYS, Settings, Theme

__all__: list[str] = [
    "Chest",
    "ChestCounters",
    "ChestStatus",
    "Chit",
    "DEFAULT_CHEST_DURATION_DAYS",
    "DurationUnit",
    "Emotion",
    "Gender",
    "Identity",
    "LIVE_STATUSES",
    "MAX_CONTENT_LENGTH",
    "PairingRecord",
    "SETTINGS_LOCK_STATUSES",
    "STATUS_TRANSITION_MATRIX",
    "Settings",
    "Theme",
    "normalize_content",
    "pair_key",
    "validate_username",
]
