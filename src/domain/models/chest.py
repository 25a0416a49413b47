"""Chest domain model.

A chest is the time-locked container a pair writes into. Its lifecycle is
strictly forward and never skips a state:

    ACTIVE -> UNLOCKABLE -> OPENED -> COMPLETED

ACTIVE to UNLOCKABLE is lazy: nothing sweeps chests when the deadline
passes, the lifecycle service re-derives the status from the clock on every
access that cares about it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any
from uuid import UUID

from src.domain.errors.chest import InvalidChestTransitionError
from src.domain.models.document_codec import (
    SCHEMA_VERSION,
    format_datetime,
    parse_datetime,
)
from src.domain.models.pairing import pair_key


class ChestStatus(Enum):
    """Lifecycle status of a chest.

    States:
        ACTIVE: Open for writing, contents hidden.
        UNLOCKABLE: Deadline passed, writing closed, ready to open.
        OPENED: Contents revealed to the readers.
        COMPLETED: Reading finished (terminal).
    """

    ACTIVE = "active"
    UNLOCKABLE = "unlockable"
    OPENED = "opened"
    COMPLETED = "completed"

    def is_terminal(self) -> bool:
        return self is ChestStatus.COMPLETED

    def is_live(self) -> bool:
        """A live chest blocks the pair from starting another one."""
        return self in LIVE_STATUSES

    def locks_settings(self) -> bool:
        """Whether chest duration settings are frozen while in this status."""
        return self in SETTINGS_LOCK_STATUSES

    def valid_transitions(self) -> frozenset[ChestStatus]:
        return STATUS_TRANSITION_MATRIX.get(self, frozenset())

    def has_reached(self, other: ChestStatus) -> bool:
        """True when self is other or a later step of the lifecycle."""
        return STATUS_ORDER.index(self) >= STATUS_ORDER.index(other)


STATUS_ORDER: tuple[ChestStatus, ...] = (
    ChestStatus.ACTIVE,
    ChestStatus.UNLOCKABLE,
    ChestStatus.OPENED,
    ChestStatus.COMPLETED,
)

LIVE_STATUSES: frozenset[ChestStatus] = frozenset(
    {ChestStatus.ACTIVE, ChestStatus.UNLOCKABLE, ChestStatus.OPENED}
)

SETTINGS_LOCK_STATUSES: frozenset[ChestStatus] = frozenset(
    {ChestStatus.ACTIVE, ChestStatus.UNLOCKABLE}
)

# Single forward steps only
STATUS_TRANSITION_MATRIX: dict[ChestStatus, frozenset[ChestStatus]] = {
    ChestStatus.ACTIVE: frozenset({ChestStatus.UNLOCKABLE}),
    ChestStatus.UNLOCKABLE: frozenset({ChestStatus.OPENED}),
    ChestStatus.OPENED: frozenset({ChestStatus.COMPLETED}),
    ChestStatus.COMPLETED: frozenset(),
}


class DurationUnit(Enum):
    """Unit a chest duration is counted in.

    DAYS is the production unit. MINUTES and HOURS exist so a full cycle can
    be exercised by hand in development.
    """

    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    def to_timedelta(self, count: int) -> timedelta:
        if self is DurationUnit.MINUTES:
            return timedelta(minutes=count)
        if self is DurationUnit.HOURS:
            return timedelta(hours=count)
        return timedelta(days=count)


@dataclass(frozen=True, eq=True)
class Chest:
    """A time-locked chest shared by two paired identities.

    Attributes:
        id: Chest id.
        owner_a: First owner (the creator).
        owner_b: Second owner (the creator's partner).
        start_at: Creation instant (UTC).
        unlock_at: Instant after which the chest becomes unlockable.
        status: Stored lifecycle status; may lag the clock (see module doc).
        duration_units: Duration used to compute unlock_at.
        duration_unit: Unit of duration_units.
        updated_at: Last status change.
        completed_at: Set once the chest reaches COMPLETED.
    """

    id: UUID
    owner_a: UUID
    owner_b: UUID
    start_at: datetime
    unlock_at: datetime
    duration_units: int
    status: ChestStatus = field(default=ChestStatus.ACTIVE)
    duration_unit: DurationUnit = field(default=DurationUnit.DAYS)
    updated_at: datetime | None = field(default=None)
    completed_at: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        if self.owner_a == self.owner_b:
            raise ValueError("A chest needs two distinct owners")
        if self.start_at.tzinfo is None or self.unlock_at.tzinfo is None:
            raise ValueError("Chest timestamps must be timezone-aware (UTC)")
        if self.unlock_at < self.start_at:
            raise ValueError("unlock_at must not precede start_at")

    @classmethod
    def open_new(
        cls,
        chest_id: UUID,
        owner_a: UUID,
        owner_b: UUID,
        start_at: datetime,
        duration_units: int,
        duration_unit: DurationUnit = DurationUnit.DAYS,
    ) -> Chest:
        """Build a fresh ACTIVE chest with unlock_at derived from the duration."""
        return cls(
            id=chest_id,
            owner_a=owner_a,
            owner_b=owner_b,
            start_at=start_at,
            unlock_at=start_at + duration_unit.to_timedelta(duration_units),
            duration_units=duration_units,
            duration_unit=duration_unit,
            updated_at=start_at,
        )

    @property
    def owners(self) -> tuple[UUID, UUID]:
        return (self.owner_a, self.owner_b)

    @property
    def pair_key(self) -> str:
        return pair_key(self.owner_a, self.owner_b)

    def is_owner(self, identity_id: UUID) -> bool:
        return identity_id in self.owners

    def partner_of(self, identity_id: UUID) -> UUID:
        if identity_id == self.owner_a:
            return self.owner_b
        if identity_id == self.owner_b:
            return self.owner_a
        raise ValueError(f"Identity {identity_id} does not own chest {self.id}")

    def with_status(self, new_status: ChestStatus, at: datetime) -> Chest:
        """Return a copy moved one step forward in the lifecycle.

        Raises:
            InvalidChestTransitionError: If new_status is not the next step.
        """
        if new_status not in self.status.valid_transitions():
            raise InvalidChestTransitionError(self.id, self.status, new_status)
        completed_at = at if new_status is ChestStatus.COMPLETED else None
        return replace(
            self, status=new_status, updated_at=at, completed_at=completed_at
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "ownerA": str(self.owner_a),
            "ownerB": str(self.owner_b),
            "pairKey": self.pair_key,
            "startAt": format_datetime(self.start_at),
            "unlockAt": format_datetime(self.unlock_at),
            "status": self.status.value,
            "durationUnits": self.duration_units,
            "durationUnit": self.duration_unit.value,
            "updatedAt": format_datetime(self.updated_at),
            "completedAt": format_datetime(self.completed_at),
            "schemaVersion": SCHEMA_VERSION,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> Chest:
        start_at = parse_datetime(data["startAt"])
        unlock_at = parse_datetime(data["unlockAt"])
        assert start_at is not None and unlock_at is not None
        return cls(
            id=UUID(doc_id),
            owner_a=UUID(data["ownerA"]),
            owner_b=UUID(data["ownerB"]),
            start_at=start_at,
            unlock_at=unlock_at,
            duration_units=int(data["durationUnits"]),
            status=ChestStatus(data["status"]),
            duration_unit=DurationUnit(data.get("durationUnit", "days")),
            updated_at=parse_datetime(data.get("updatedAt")),
            completed_at=parse_datetime(data.get("completedAt")),
        )
