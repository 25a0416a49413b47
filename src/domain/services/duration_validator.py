"""Chest duration validation.

Durations are whole numbers of units (days in production) inside an
inclusive range loaded from configuration, [1, 30] by default.
"""

from __future__ import annotations

from src.domain.errors.chest import DurationOutOfRangeError

MIN_CHEST_DURATION_DAYS: int = 1
MAX_CHEST_DURATION_DAYS: int = 30


def validate_duration(
    value: object,
    minimum: int = MIN_CHEST_DURATION_DAYS,
    maximum: int = MAX_CHEST_DURATION_DAYS,
) -> int:
    """Validate a chest duration and return it as an int.

    Args:
        value: Candidate duration. Booleans and non-integers are rejected.
        minimum: Inclusive lower bound.
        maximum: Inclusive upper bound.

    Raises:
        DurationOutOfRangeError: If value is not an integer in range.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise DurationOutOfRangeError(value, minimum, maximum)
    if value < minimum or value > maximum:
        raise DurationOutOfRangeError(value, minimum, maximum)
    return value
