"""Identity service.

Signup and lookups for participants. Username uniqueness is made atomic by
reserving ``usernames/{username}`` before the identity document is written;
if the identity write fails the reservation is released again.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from src.domain.errors import IdentityNotFoundError
from src.domain.models.identity import Gender, Identity, validate_username

if TYPE_CHECKING:
    from src.application.ports.identity_repository import (
        IdentityRepositoryProtocol,
    )
    from src.application.ports.time_authority import TimeAuthorityProtocol

logger = get_logger(__name__)


@dataclass(frozen=True)
class PairingStatus:
    is_paired: bool
    partner_id: UUID | None


@dataclass(frozen=True)
class PartnerInfo:
    partner_id: UUID
    username: str
    gender: Gender
    paired_since: datetime


class IdentityService:
    """Registers identities and answers pairing-status questions.

    Example:
        >>> service = IdentityService(identity_repo, time_authority)
        >>> alice = await service.register("alice", "female")
    """

    def __init__(
        self,
        identity_repo: IdentityRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._identity_repo = identity_repo
        self._time = time_authority

    async def register(self, username: str, gender: str | Gender) -> Identity:
        """Create a new unpaired identity.

        Raises:
            InvalidUsernameError: Username fails validation.
            InvalidGenderError: Gender is not male/female.
            UsernameTakenError: Username already reserved.
        """
        clean_username = validate_username(username)
        parsed_gender = Gender.parse(gender)
        identity = Identity(
            id=uuid7(),
            username=clean_username,
            gender=parsed_gender,
            created_at=self._time.now(),
        )
        log = logger.bind(identity_id=str(identity.id), username=clean_username)

        await self._identity_repo.reserve_username(clean_username, identity.id)
        try:
            stored = await self._identity_repo.create(identity)
        except Exception:
            log.warning("identity_create_failed_releasing_username")
            await self._identity_repo.release_username(clean_username)
            raise

        log.info("identity_registered", gender=parsed_gender.value)
        return stored.value

    async def get_identity(self, identity_id: UUID) -> Identity:
        """Raises IdentityNotFoundError if the id does not resolve."""
        found = await self._identity_repo.get(identity_id)
        if found is None:
            logger.warning("identity_not_found", identity_id=str(identity_id))
            raise IdentityNotFoundError(identity_id=identity_id)
        return found.value

    async def get_by_username(self, username: str) -> Identity:
        found = await self._identity_repo.get_by_username(username.strip())
        if found is None:
            logger.warning("identity_not_found", username=username)
            raise IdentityNotFoundError(username=username)
        return found.value

    async def get_pairing_status(self, identity_id: UUID) -> PairingStatus:
        """Report pairing only when both sides point at each other.

        A half-applied pairing (one side written, the other not yet) is
        reported as unpaired.
        """
        identity = await self.get_identity(identity_id)
        if identity.paired_id is None:
            return PairingStatus(is_paired=False, partner_id=None)

        partner = await self._identity_repo.get(identity.paired_id)
        if partner is None or partner.value.paired_id != identity.id:
            logger.warning(
                "asymmetric_pairing_observed",
                identity_id=str(identity_id),
                paired_id=str(identity.paired_id),
            )
            return PairingStatus(is_paired=False, partner_id=None)
        return PairingStatus(is_paired=True, partner_id=identity.paired_id)

    async def get_partner_info(self, identity_id: UUID) -> PartnerInfo | None:
        status = await self.get_pairing_status(identity_id)
        if not status.is_paired or status.partner_id is None:
            return None
        partner = await self.get_identity(status.partner_id)
        assert partner.paired_at is not None
        return PartnerInfo(
            partner_id=partner.id,
            username=partner.username,
            gender=partner.gender,
            paired_since=partner.paired_at,
        )

    async def list_unpaired(self, excluding_id: UUID | None = None) -> list[Identity]:
        identities = await self._identity_repo.list_unpaired()
        return [i for i in identities if i.id != excluding_id]
