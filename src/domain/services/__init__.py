"""Domain services for Chit Chest.

Pure business logic that does not belong to a single model. Domain services
must NOT depend on infrastructure or read the clock themselves.

Available services:
- time_gate: deadline arithmetic (is_unlockable, days_remaining)
- validate_duration: chest duration range check
"""

from src.domain.services.duration_validator import (
    MAX_CHEST_DURATION_DAYS,
    MIN_CHEST_DURATION_DAYS,
    validate_duration,
)
from src.domain.services.time_gate import (
    UnlockCheck,
    days_remaining,
    evaluate,
    is_unlockable,
)

__all__ = [
    "MAX_CHEST_DURATION_DAYS",
    "MIN_CHEST_DURATION_DAYS",
    "UnlockCheck",
    "days_remaining",
    "evaluate",
    "is_unlockable",
    "validate_duration",
]
