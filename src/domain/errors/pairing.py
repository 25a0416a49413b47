"""Pairing errors.

Each precondition of the pairing protocol has its own error so callers can
tell the failure modes apart. They are checked in this order:

1. AlreadyPairedError - requester is already paired
2. IdentityNotFoundError - partner username does not resolve
3. SelfPairError - partner is the requester
4. PartnerAlreadyPairedError - partner is already paired
5. GenderMismatchError - both identities share a gender
6. HistoricalRepairBlockedError - the two were paired before
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from src.domain.errors.base import ConflictError, ValidationError


class AlreadyPairedError(ConflictError):
    """Raised when the requester already has a partner.

    Pairing is permanent, so this can never be resolved by the requester.

    Attributes:
        identity_id: The requester.
        paired_id: Their existing partner.
    """

    error_type = "urn:chitchest:pairing:already-paired"
    title = "Already Paired"

    def __init__(self, identity_id: UUID, paired_id: UUID) -> None:
        self.identity_id = identity_id
        self.paired_id = paired_id
        super().__init__("You are already paired with someone")

    def problem_extensions(self) -> dict[str, Any]:
        return {"identity_id": str(self.identity_id)}


class PartnerAlreadyPairedError(ConflictError):
    """Raised when the requested partner already has a partner."""

    error_type = "urn:chitchest:pairing:partner-already-paired"
    title = "Partner Already Paired"

    def __init__(self, partner_username: str) -> None:
        self.partner_username = partner_username
        super().__init__("This user is already paired with someone")

    def problem_extensions(self) -> dict[str, Any]:
        return {"partner_username": self.partner_username}


class SelfPairError(ValidationError):
    """Raised when an identity tries to pair with itself."""

    error_type = "urn:chitchest:pairing:self-pair"
    title = "Cannot Pair With Self"

    def __init__(self, identity_id: UUID) -> None:
        self.identity_id = identity_id
        super().__init__("You cannot pair with yourself")


class GenderMismatchError(ValidationError):
    """Raised when both identities have the same gender."""

    error_type = "urn:chitchest:pairing:gender-mismatch"
    title = "Gender Mismatch"

    def __init__(self, gender: str) -> None:
        self.gender = gender
        super().__init__("You can only pair with someone of opposite gender")


class HistoricalRepairBlockedError(ConflictError):
    """Raised when the two identities share a historical pairing record."""

    error_type = "urn:chitchest:pairing:historical-repair-blocked"
    title = "Re-pairing Blocked"

    def __init__(self, id_a: UUID, id_b: UUID) -> None:
        self.id_a = id_a
        self.id_b = id_b
        super().__init__(
            "You have been paired with this person before. New pairing not allowed."
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"id_a": str(self.id_a), "id_b": str(self.id_b)}


class NotPairedError(ConflictError):
    """Raised when an operation needs a partner but the identity has none."""

    error_type = "urn:chitchest:pairing:not-paired"
    title = "Not Paired"

    def __init__(self, identity_id: UUID) -> None:
        self.identity_id = identity_id
        super().__init__(f"Identity {identity_id} is not paired")

    def problem_extensions(self) -> dict[str, Any]:
        return {"identity_id": str(self.identity_id)}
