"""Pairing protocol.

Pairing links two identities permanently. It touches three documents (both
identities plus the pairing record) on a store that is atomic per document
only, so the write sequence is:

    1. create the PairingRecord as an intent (completed=False)
    2. CAS the requester's identity
    3. CAS the partner's identity
    4. mark the record completed

Both identity writes carry the same ``pairedAt``. A failure at step 3 is
compensated by unwinding step 2 and deleting the intent. A crash anywhere in
the sequence leaves an intent record behind; ``reconcile`` resolves it by
rolling forward when both sides are still free (or already linked) and
rolling back otherwise. ``pair`` reconciles both parties before checking its
preconditions, so a retry after a crash is safe.

Same-process callers are serialized by a keyed lock on both identity ids;
across processes the identity CAS decides the winner.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

from src.application.ports.document_store import Versioned
from src.domain.errors import (
    AlreadyPairedError,
    ConcurrentModificationError,
    DocumentExistsError,
    DocumentNotFoundError,
    GenderMismatchError,
    HistoricalRepairBlockedError,
    IdentityNotFoundError,
    PartnerAlreadyPairedError,
    SelfPairError,
)
from src.domain.models.identity import Identity
from src.domain.models.pairing import PairingRecord

if TYPE_CHECKING:
    from src.application.ports.identity_repository import (
        IdentityRepositoryProtocol,
    )
    from src.application.ports.keyed_lock import KeyedLockProtocol
    from src.application.ports.pairing_repository import PairingRepositoryProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol

logger = get_logger(__name__)


def identity_lock_key(identity_id: UUID) -> str:
    return f"identity:{identity_id}"


class PairingService:
    """Establishes permanent, symmetric pairings.

    Preconditions of ``pair`` are checked in this order, each with its own
    error:
    1. requester not already paired (AlreadyPairedError)
    2. partner username resolves (IdentityNotFoundError)
    3. partner is not the requester (SelfPairError)
    4. partner not already paired (PartnerAlreadyPairedError)
    5. genders differ (GenderMismatchError)
    6. no historical record for the pair (HistoricalRepairBlockedError)
    """

    def __init__(
        self,
        identity_repo: IdentityRepositoryProtocol,
        pairing_repo: PairingRepositoryProtocol,
        keyed_lock: KeyedLockProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._identity_repo = identity_repo
        self._pairing_repo = pairing_repo
        self._locks = keyed_lock
        self._time = time_authority

    async def pair(self, requester_id: UUID, partner_username: str) -> PairingRecord:
        """Pair requester_id with the identity owning partner_username.

        Returns:
            The completed PairingRecord.

        Raises:
            IdentityNotFoundError: Requester or partner does not exist.
            AlreadyPairedError: Requester is already paired.
            SelfPairError: Requester named themselves.
            PartnerAlreadyPairedError: Partner is already paired.
            GenderMismatchError: Both have the same gender.
            HistoricalRepairBlockedError: The two were paired before.
            ConcurrentModificationError: Another writer won the race.
        """
        log = logger.bind(
            requester_id=str(requester_id), partner_username=partner_username
        )
        log.info("pairing_requested")

        partner_lookup = await self._identity_repo.get_by_username(
            partner_username.strip()
        )
        keys = {identity_lock_key(requester_id)}
        if partner_lookup is not None:
            keys.add(identity_lock_key(partner_lookup.value.id))

        async with self._locks.hold(*keys):
            await self._reconcile_locked(requester_id)
            requester = await self._identity_repo.get(requester_id)
            if requester is None:
                log.warning("pairing_rejected", reason="requester_not_found")
                raise IdentityNotFoundError(identity_id=requester_id)
            if requester.value.paired_id is not None:
                log.warning("pairing_rejected", reason="already_paired")
                raise AlreadyPairedError(requester_id, requester.value.paired_id)

            if partner_lookup is None:
                log.warning("pairing_rejected", reason="partner_not_found")
                raise IdentityNotFoundError(username=partner_username)
            partner_id = partner_lookup.value.id
            if partner_id == requester_id:
                log.warning("pairing_rejected", reason="self_pair")
                raise SelfPairError(requester_id)

            await self._reconcile_locked(partner_id)
            partner = await self._identity_repo.get(partner_id)
            if partner is None:
                raise IdentityNotFoundError(username=partner_username)
            if partner.value.paired_id is not None:
                log.warning("pairing_rejected", reason="partner_already_paired")
                raise PartnerAlreadyPairedError(partner_username)

            if requester.value.gender is partner.value.gender:
                log.warning(
                    "pairing_rejected",
                    reason="gender_mismatch",
                    gender=requester.value.gender.value,
                )
                raise GenderMismatchError(requester.value.gender.value)

            if await self._pairing_repo.has_historical(requester_id, partner_id):
                log.warning("pairing_rejected", reason="historical_block")
                raise HistoricalRepairBlockedError(requester_id, partner_id)

            record = await self._apply(requester, partner)

        log.info(
            "pairing_completed",
            partner_id=str(record.id_b),
            paired_at=record.paired_at.isoformat(),
        )
        return record

    async def reconcile(self, identity_id: UUID) -> Identity | None:
        """Resolve any half-applied pairing involving identity_id.

        Returns:
            The identity after reconciliation, or None if it does not exist.
        """
        pending = await self._pairing_repo.list_pending_for(identity_id)
        keys = {identity_lock_key(identity_id)}
        keys.update(
            identity_lock_key(entry.value.partner_of(identity_id)) for entry in pending
        )
        async with self._locks.hold(*keys):
            await self._reconcile_locked(identity_id)
        found = await self._identity_repo.get(identity_id)
        return found.value if found is not None else None

    async def get_pairing(self, identity_id: UUID) -> PairingRecord | None:
        """Return the completed pairing record of a paired identity."""
        found = await self._identity_repo.get(identity_id)
        if found is None:
            raise IdentityNotFoundError(identity_id=identity_id)
        if found.value.paired_id is None:
            return None
        record = await self._pairing_repo.get(identity_id, found.value.paired_id)
        if record is None or not record.value.completed:
            return None
        return record.value

    async def _apply(
        self,
        requester: Versioned[Identity],
        partner: Versioned[Identity],
    ) -> PairingRecord:
        paired_at = self._time.now()
        intent = PairingRecord(
            id_a=requester.value.id,
            id_b=partner.value.id,
            paired_at=paired_at,
        )
        log = logger.bind(pair_key=intent.key)

        try:
            stored_intent = await self._pairing_repo.create(intent)
        except DocumentExistsError:
            existing = await self._pairing_repo.get(intent.id_a, intent.id_b)
            if existing is not None and existing.value.historical:
                raise HistoricalRepairBlockedError(intent.id_a, intent.id_b) from None
            log.warning("pairing_intent_conflict")
            raise ConcurrentModificationError(
                "pairings",
                intent.key,
                expected_version=None,
                actual_version=existing.version if existing else None,
            ) from None

        try:
            await self._identity_repo.update(
                requester.value.with_pairing(partner.value.id, paired_at),
                requester.version,
            )
        except ConcurrentModificationError:
            log.warning("pairing_requester_write_lost")
            await self._discard_intent(stored_intent)
            raise

        try:
            await self._identity_repo.update(
                partner.value.with_pairing(requester.value.id, paired_at),
                partner.version,
            )
        except ConcurrentModificationError:
            log.warning("pairing_partner_write_lost")
            if await self._is_linked(partner.value.id, intent):
                # Someone else already rolled this intent forward
                return await self._mark_completed(stored_intent)
            await self._unlink(requester.value.id, intent)
            await self._discard_intent(stored_intent)
            raise

        return await self._mark_completed(stored_intent)

    async def _reconcile_locked(self, identity_id: UUID) -> None:
        for entry in await self._pairing_repo.list_pending_for(identity_id):
            await self._resolve_intent(entry)

    async def _resolve_intent(self, entry: Versioned[PairingRecord]) -> None:
        record = entry.value
        log = logger.bind(pair_key=record.key)
        side_a = await self._identity_repo.get(record.id_a)
        side_b = await self._identity_repo.get(record.id_b)
        if side_a is None or side_b is None:
            log.warning("pairing_intent_orphaned")
            await self._discard_intent(entry)
            return

        a_linked = self._points_at(side_a.value, record)
        b_linked = self._points_at(side_b.value, record)
        a_free = side_a.value.paired_id is None
        b_free = side_b.value.paired_id is None

        if (a_linked or a_free) and (b_linked or b_free):
            if a_free:
                await self._identity_repo.update(
                    side_a.value.with_pairing(record.id_b, record.paired_at),
                    side_a.version,
                )
            if b_free:
                await self._identity_repo.update(
                    side_b.value.with_pairing(record.id_a, record.paired_at),
                    side_b.version,
                )
            await self._mark_completed(entry)
            log.info("pairing_intent_rolled_forward")
            return

        if a_linked:
            await self._identity_repo.update(
                side_a.value.without_pairing(), side_a.version
            )
        if b_linked:
            await self._identity_repo.update(
                side_b.value.without_pairing(), side_b.version
            )
        await self._discard_intent(entry)
        log.info("pairing_intent_rolled_back")

    async def _mark_completed(
        self, entry: Versioned[PairingRecord]
    ) -> PairingRecord:
        try:
            stored = await self._pairing_repo.update(
                entry.value.as_completed(), entry.version
            )
        except ConcurrentModificationError:
            fresh = await self._pairing_repo.get(entry.value.id_a, entry.value.id_b)
            if fresh is not None and fresh.value.completed:
                # A concurrent reconcile finished the same intent
                return fresh.value
            raise
        return stored.value

    async def _discard_intent(self, entry: Versioned[PairingRecord]) -> None:
        try:
            await self._pairing_repo.delete(entry.value, entry.version)
        except DocumentNotFoundError:
            logger.debug("pairing_intent_already_gone", pair_key=entry.value.key)

    async def _is_linked(self, identity_id: UUID, record: PairingRecord) -> bool:
        found = await self._identity_repo.get(identity_id)
        return found is not None and self._points_at(found.value, record)

    async def _unlink(self, identity_id: UUID, record: PairingRecord) -> None:
        found = await self._identity_repo.get(identity_id)
        if found is None or not self._points_at(found.value, record):
            return
        try:
            await self._identity_repo.update(
                found.value.without_pairing(), found.version
            )
        except ConcurrentModificationError:
            # Intent stays behind; the next reconcile resolves it
            logger.error(
                "pairing_compensation_failed",
                identity_id=str(identity_id),
                pair_key=record.key,
            )
            raise

    @staticmethod
    def _points_at(identity: Identity, record: PairingRecord) -> bool:
        if identity.id not in (record.id_a, record.id_b):
            return False
        return (
            identity.paired_id == record.partner_of(identity.id)
            and identity.paired_at == record.paired_at
        )


__all__ = ["PairingService", "identity_lock_key"]
