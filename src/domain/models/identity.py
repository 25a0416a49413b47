"""Identity domain model.

An identity is the durable record of one participant: username, gender and
the pairing pointer. It is created at signup and mutated exactly once, when
the pairing protocol links it to a partner.

Constraints:
- username is unique and immutable
- pairedId is symmetric: A.pairedId == B implies B.pairedId == A
- once set, pairedId never changes (pairing is permanent)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from src.domain.errors.identity import InvalidGenderError, InvalidUsernameError
from src.domain.models.document_codec import (
    SCHEMA_VERSION,
    format_datetime,
    format_uuid,
    parse_datetime,
    parse_uuid,
)

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 24
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class Gender(Enum):
    """Gender of a participant. Pairing requires opposite genders."""

    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: object) -> Gender:
        """Parse a gender value, accepting any case and surrounding spaces.

        Raises:
            InvalidGenderError: If the value is not male/female.
        """
        if isinstance(value, Gender):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidGenderError(value)


def validate_username(username: str) -> str:
    """Validate a username and return it with surrounding spaces removed.

    Raises:
        InvalidUsernameError: If the username is too short, too long or
            contains characters outside [A-Za-z0-9_.-].
    """
    candidate = username.strip()
    if len(candidate) < USERNAME_MIN_LENGTH:
        raise InvalidUsernameError(
            username, f"must be at least {USERNAME_MIN_LENGTH} characters"
        )
    if len(candidate) > USERNAME_MAX_LENGTH:
        raise InvalidUsernameError(
            username, f"must be at most {USERNAME_MAX_LENGTH} characters"
        )
    if not USERNAME_PATTERN.match(candidate):
        raise InvalidUsernameError(
            username, "may only contain letters, digits, '_', '.' and '-'"
        )
    return candidate


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Identity:
    """A participant.

    Attributes:
        id: Identity id (assigned at signup).
        username: Unique, immutable public name.
        gender: Gender of the participant.
        paired_id: Partner id once paired, None before.
        paired_at: Shared pairing instant, identical on both sides.
        created_at: Signup timestamp (UTC).
    """

    id: UUID
    username: str
    gender: Gender
    paired_id: UUID | None = field(default=None)
    paired_at: datetime | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if (self.paired_id is None) != (self.paired_at is None):
            raise ValueError("paired_id and paired_at must be set together")
        if self.paired_id == self.id:
            raise ValueError("An identity cannot be paired with itself")

    @property
    def is_paired(self) -> bool:
        return self.paired_id is not None

    def with_pairing(self, partner_id: UUID, paired_at: datetime) -> Identity:
        """Return a copy linked to partner_id.

        Raises:
            ValueError: If already paired (pairing is permanent).
        """
        if self.paired_id is not None:
            raise ValueError(f"Identity {self.id} is already paired")
        return replace(self, paired_id=partner_id, paired_at=paired_at)

    def without_pairing(self) -> Identity:
        """Return an unpaired copy.

        Only used to compensate a pairing that never completed; a completed
        pairing is never undone.
        """
        return replace(self, paired_id=None, paired_at=None)

    def to_document(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "gender": self.gender.value,
            "pairedId": format_uuid(self.paired_id),
            "pairedAt": format_datetime(self.paired_at),
            "createdAt": format_datetime(self.created_at),
            "schemaVersion": SCHEMA_VERSION,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> Identity:
        return cls(
            id=UUID(doc_id),
            username=data["username"],
            gender=Gender(data["gender"]),
            paired_id=parse_uuid(data.get("pairedId")),
            paired_at=parse_datetime(data.get("pairedAt")),
            created_at=parse_datetime(data.get("createdAt")) or _utc_now(),
        )
