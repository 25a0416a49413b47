"""Deadline arithmetic for chest unlocking.

Pure functions only: no I/O, no clock access. Callers pass ``now`` from
their TimeAuthority so the arithmetic stays testable in isolation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

SECONDS_PER_DAY: int = 86_400


@dataclass(frozen=True)
class UnlockCheck:
    """Result of evaluating a deadline.

    Attributes:
        is_unlockable: True once now >= unlock_at.
        days_remaining: Whole days left, rounded up, never negative.
    """

    is_unlockable: bool
    days_remaining: int


def is_unlockable(now: datetime, unlock_at: datetime) -> bool:
    """Return True when the deadline has been reached."""
    return now >= unlock_at


def days_remaining(now: datetime, unlock_at: datetime) -> int:
    """Whole days until unlock_at, rounded up and clamped at zero.

    A deadline 1 second away still counts as 1 day remaining.
    """
    seconds = (unlock_at - now).total_seconds()
    return max(0, math.ceil(seconds / SECONDS_PER_DAY))


def evaluate(now: datetime, unlock_at: datetime) -> UnlockCheck:
    return UnlockCheck(
        is_unlockable=is_unlockable(now, unlock_at),
        days_remaining=days_remaining(now, unlock_at),
    )
