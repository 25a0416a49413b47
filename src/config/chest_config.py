"""Chest and chit configuration.

Environment Variables:
- DEFAULT_CHEST_DURATION_DAYS: Duration for new settings documents (default: 7)
- MIN_CHEST_DURATION_DAYS: Smallest allowed duration (default: 1)
- MAX_CHEST_DURATION_DAYS: Largest allowed duration (default: 30)
- MAX_CHIT_LENGTH: Maximum chit content length after trimming (default: 1000)
- CHEST_DURATION_UNIT: days | hours | minutes (default: days). The shorter
  units turn a week-long chest into a few minutes for manual testing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from src.domain.models.chest import DurationUnit


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_unit_env(key: str, default: DurationUnit) -> DurationUnit:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return DurationUnit(value.strip().lower())
    except ValueError:
        return default


@dataclass(frozen=True)
class ChestConfig:
    """Configuration for chest durations and chit limits.

    Attributes:
        default_duration_days: Duration written into first-access settings.
        min_duration_days: Inclusive lower bound for a chest duration.
        max_duration_days: Inclusive upper bound for a chest duration.
        max_chit_length: Maximum trimmed chit length.
        duration_unit: Unit a chest duration is counted in.
    """

    default_duration_days: int = 7
    min_duration_days: int = 1
    max_duration_days: int = 30
    max_chit_length: int = 1000
    duration_unit: DurationUnit = DurationUnit.DAYS

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.min_duration_days < 1:
            raise ValueError(
                f"min_duration_days must be positive, got {self.min_duration_days}"
            )
        if self.max_duration_days < self.min_duration_days:
            raise ValueError(
                f"max_duration_days ({self.max_duration_days}) must not be less "
                f"than min_duration_days ({self.min_duration_days})"
            )
        if not (
            self.min_duration_days
            <= self.default_duration_days
            <= self.max_duration_days
        ):
            raise ValueError(
                f"default_duration_days ({self.default_duration_days}) must lie in "
                f"[{self.min_duration_days}, {self.max_duration_days}]"
            )
        if self.max_chit_length < 1:
            raise ValueError(
                f"max_chit_length must be positive, got {self.max_chit_length}"
            )

    @classmethod
    def from_environment(cls) -> "ChestConfig":
        """Create config from environment variables with defaults."""
        return cls(
            default_duration_days=_get_int_env("DEFAULT_CHEST_DURATION_DAYS", 7),
            min_duration_days=_get_int_env("MIN_CHEST_DURATION_DAYS", 1),
            max_duration_days=_get_int_env("MAX_CHEST_DURATION_DAYS", 30),
            max_chit_length=_get_int_env("MAX_CHIT_LENGTH", 1000),
            duration_unit=_get_unit_env("CHEST_DURATION_UNIT", DurationUnit.DAYS),
        )


DEFAULT_CHEST_CONFIG = ChestConfig()

# Minute-long chests for manual end-to-end runs
DEV_CHEST_CONFIG = ChestConfig(duration_unit=DurationUnit.MINUTES)
