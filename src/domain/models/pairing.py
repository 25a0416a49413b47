"""Pairing record domain model.

A PairingRecord is the audit/history entry for one pairing. It is written
before the two identity documents are linked (as an intent with
``completed=False``) and flipped to ``completed=True`` once both sides
point at each other. A record marked ``historical`` blocks the same two
identities from ever pairing again.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.models.document_codec import (
    SCHEMA_VERSION,
    format_datetime,
    parse_datetime,
)


def pair_key(id_a: UUID, id_b: UUID) -> str:
    """Order-independent key for an unordered pair of identities."""
    first, second = sorted((str(id_a), str(id_b)))
    return f"{first}_{second}"


@dataclass(frozen=True, eq=True)
class PairingRecord:
    """Append-only record of a pairing.

    Attributes:
        id_a: The identity that requested the pairing.
        id_b: The identity that was requested.
        paired_at: The pairing instant shared by both identities.
        historical: True once the pairing is no longer current.
        completed: False while the pairing is still being applied.
    """

    id_a: UUID
    id_b: UUID
    paired_at: datetime
    historical: bool = field(default=False)
    completed: bool = field(default=False)

    def __post_init__(self) -> None:
        if self.id_a == self.id_b:
            raise ValueError("A pairing needs two distinct identities")
        if self.paired_at.tzinfo is None:
            raise ValueError("paired_at must be timezone-aware (UTC)")

    @property
    def key(self) -> str:
        return pair_key(self.id_a, self.id_b)

    def involves(self, identity_id: UUID) -> bool:
        return identity_id in (self.id_a, self.id_b)

    def partner_of(self, identity_id: UUID) -> UUID:
        if identity_id == self.id_a:
            return self.id_b
        if identity_id == self.id_b:
            return self.id_a
        raise ValueError(f"Identity {identity_id} is not part of pairing {self.key}")

    def as_completed(self) -> PairingRecord:
        return replace(self, completed=True)

    def to_document(self) -> dict[str, Any]:
        return {
            "idA": str(self.id_a),
            "idB": str(self.id_b),
            "pairedAt": format_datetime(self.paired_at),
            "historical": self.historical,
            "completed": self.completed,
            "schemaVersion": SCHEMA_VERSION,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> PairingRecord:
        paired_at = parse_datetime(data["pairedAt"])
        assert paired_at is not None
        return cls(
            id_a=UUID(data["idA"]),
            id_b=UUID(data["idB"]),
            paired_at=paired_at,
            historical=bool(data.get("historical", False)),
            completed=bool(data.get("completed", True)),
        )
