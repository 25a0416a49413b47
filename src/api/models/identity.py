"""Identity and pairing API request/response models."""

from uuid import UUID

from pydantic import BaseModel, Field

from src.api.models.common import DateTimeWithZ
from src.domain.models.identity import Gender, Identity
from src.domain.models.pairing import PairingRecord


class RegisterIdentityRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    gender: str


class IdentityResponse(BaseModel):
    id: UUID
    username: str
    gender: str
    paired_id: UUID | None = None
    paired_at: DateTimeWithZ | None = None
    created_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, identity: Identity) -> "IdentityResponse":
        return cls(
            id=identity.id,
            username=identity.username,
            gender=identity.gender.value,
            paired_id=identity.paired_id,
            paired_at=identity.paired_at,
            created_at=identity.created_at,
        )


class PartnerResponse(BaseModel):
    id: UUID
    username: str
    gender: str
    paired_since: DateTimeWithZ


class PairingStatusResponse(BaseModel):
    """Pairing as seen from one identity.

    ``is_paired`` is only true when both identities point at each other.
    """

    is_paired: bool
    partner: PartnerResponse | None = None


class PairRequest(BaseModel):
    requester_id: UUID
    partner_username: str = Field(..., min_length=1, max_length=64)


class PairingResponse(BaseModel):
    id: str = Field(..., description="Unordered pair key")
    id_a: UUID
    id_b: UUID
    paired_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, record: PairingRecord) -> "PairingResponse":
        return cls(
            id=record.key,
            id_a=record.id_a,
            id_b=record.id_b,
            paired_at=record.paired_at,
        )
