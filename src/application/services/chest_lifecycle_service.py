"""Chest lifecycle service.

Owns chest creation and the status state machine:

    active --(now >= unlockAt)--> unlockable --(first partner read)--> opened
           --(all partner chits read, or reader finishes)--> completed

The active -> unlockable step is lazy. No background task sweeps chests;
``check_unlockable`` and every operation that depends on the deadline
re-derive eligibility from ``unlockAt`` and advance the stored status as a
side effect. Stored status may therefore lag the clock between the deadline
and the next caller.

Single live chest per pair:
    Creation claims the pair's ``chest_slots/{pairKey}`` document with
    create-if-absent or CAS before the chest is written. The slot may only
    be claimed when it is empty, points at a completed chest, or points at
    a chest that was never written (after SLOT_CLAIM_GRACE). Same-process
    callers are additionally serialized by a per-pair keyed lock that
    settings updates share.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from src.application.ports.chest_repository import LiveChestSlot
from src.application.ports.document_store import Versioned
from src.config.chest_config import ChestConfig
from src.domain.errors import (
    ChestAccessDeniedError,
    ChestAlreadyActiveError,
    ChestNotFoundError,
    ChestStillLockedError,
    ConcurrentModificationError,
    IdentityNotFoundError,
    NotPairedError,
    ValidationError,
)
from src.domain.models.chest import Chest, ChestStatus
from src.domain.models.pairing import pair_key
from src.domain.services import time_gate
from src.domain.services.duration_validator import validate_duration

if TYPE_CHECKING:
    from src.application.ports.chest_repository import ChestRepositoryProtocol
    from src.application.ports.chit_repository import ChitRepositoryProtocol
    from src.application.ports.identity_repository import (
        IdentityRepositoryProtocol,
    )
    from src.application.ports.keyed_lock import KeyedLockProtocol
    from src.application.ports.settings_repository import (
        SettingsRepositoryProtocol,
    )
    from src.application.ports.time_authority import TimeAuthorityProtocol

logger = get_logger(__name__)

# A slot pointing at a chest that does not exist yet is left alone this long
SLOT_CLAIM_GRACE = timedelta(seconds=30)


def pair_lock_key(key: str) -> str:
    return f"pair:{key}"


def settings_lock_key(identity_id: UUID) -> str:
    return f"settings:{identity_id}"


@dataclass(frozen=True)
class UnlockStatus:
    is_unlockable: bool
    days_remaining: int
    status: ChestStatus


@dataclass(frozen=True)
class ChestStartCheck:
    can_start: bool
    existing_chest_id: UUID | None = None
    status: ChestStatus | None = None


@dataclass(frozen=True)
class ChestStats:
    total_chits: int
    emotion_count: dict[str, int]
    status: ChestStatus
    start_at: datetime
    unlock_at: datetime


class ChestLifecycleService:
    """Creates chests and moves them through their lifecycle.

    Example:
        >>> chest = await lifecycle.create(alice.id, bob.id, 7)
        >>> status = await lifecycle.check_unlockable(chest.id)
        >>> status.days_remaining
        7
    """

    def __init__(
        self,
        chest_repo: ChestRepositoryProtocol,
        chit_repo: ChitRepositoryProtocol,
        identity_repo: IdentityRepositoryProtocol,
        settings_repo: SettingsRepositoryProtocol,
        keyed_lock: KeyedLockProtocol,
        time_authority: TimeAuthorityProtocol,
        config: ChestConfig | None = None,
    ) -> None:
        self._chest_repo = chest_repo
        self._chit_repo = chit_repo
        self._identity_repo = identity_repo
        self._settings_repo = settings_repo
        self._locks = keyed_lock
        self._time = time_authority
        self._config = config or ChestConfig()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create(
        self,
        owner_a: UUID,
        owner_b: UUID,
        duration_days: int | None = None,
    ) -> Chest:
        """Start a new chest for a paired couple.

        Args:
            owner_a: The creator.
            owner_b: The creator's partner.
            duration_days: Chest duration; defaults to the creator's
                ``chestDurationDays`` setting.

        Raises:
            IdentityNotFoundError: Either owner does not exist.
            NotPairedError: The two are not paired with each other.
            DurationOutOfRangeError: Duration outside the configured range.
            ChestAlreadyActiveError: The pair already has a live chest.
        """
        log = logger.bind(owner_a=str(owner_a), owner_b=str(owner_b))
        if owner_a == owner_b:
            raise ValidationError("A chest needs two different owners")
        await self._require_paired(owner_a, owner_b)

        if duration_days is not None:
            self._validate_duration(duration_days)

        key = pair_key(owner_a, owner_b)
        # Owner settings locks serialize this against duration updates
        async with self._locks.hold(
            pair_lock_key(key), settings_lock_key(owner_a), settings_lock_key(owner_b)
        ):
            if duration_days is None:
                duration_days = await self._default_duration(owner_a)
            duration = self._validate_duration(duration_days)
            slot = await self._chest_repo.get_slot(key)
            live = await self._find_live(key)
            if live is not None:
                log.warning(
                    "chest_create_rejected",
                    existing_chest_id=str(live.id),
                    status=live.status.value,
                )
                raise ChestAlreadyActiveError(live.id, live.status)
            await self._reject_inflight_claim(key, slot)

            chest = Chest.open_new(
                chest_id=uuid7(),
                owner_a=owner_a,
                owner_b=owner_b,
                start_at=self._time.now(),
                duration_units=duration,
                duration_unit=self._config.duration_unit,
            )
            await self._claim_slot(key, chest.id, slot)
            try:
                await self._chest_repo.create(chest)
            except Exception:
                await self._chest_repo.release_slot(key, chest.id)
                raise

        log.info(
            "chest_created",
            chest_id=str(chest.id),
            duration_units=duration,
            duration_unit=chest.duration_unit.value,
            unlock_at=chest.unlock_at.isoformat(),
        )
        return chest

    async def can_start_new_chest(self, owner_a: UUID, owner_b: UUID) -> ChestStartCheck:
        live = await self._find_live(pair_key(owner_a, owner_b))
        if live is None:
            return ChestStartCheck(can_start=True)
        return ChestStartCheck(
            can_start=False, existing_chest_id=live.id, status=live.status
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_chest(self, chest_id: UUID, requester_id: UUID | None = None) -> Chest:
        """Return the stored chest.

        Raises:
            ChestNotFoundError: Unknown chest id.
            ChestAccessDeniedError: requester_id given and not an owner.
        """
        return (await self._load(chest_id, requester_id)).value

    async def get_active_chest(self, owner_a: UUID, owner_b: UUID) -> Chest | None:
        """Return the pair's live chest (active, unlockable or opened)."""
        return await self._find_live(pair_key(owner_a, owner_b))

    async def get_history(self, identity_id: UUID) -> list[Chest]:
        """Every chest the identity owns, newest first."""
        chests = await self._chest_repo.list_for_owner(identity_id)
        return sorted(chests, key=lambda c: c.start_at, reverse=True)

    async def get_stats(self, chest_id: UUID, requester_id: UUID) -> ChestStats:
        chest = (await self._load(chest_id, requester_id)).value
        chits = await self._chit_repo.list_by_chest(chest_id)
        emotions = Counter(chit.emotion.value for chit in chits)
        return ChestStats(
            total_chits=len(chits),
            emotion_count=dict(emotions),
            status=chest.status,
            start_at=chest.start_at,
            unlock_at=chest.unlock_at,
        )

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    async def check_unlockable(
        self, chest_id: UUID, requester_id: UUID | None = None
    ) -> UnlockStatus:
        """Evaluate the deadline, advancing active -> unlockable when due."""
        entry = await self.advance_if_due(await self._load(chest_id, requester_id))
        check = time_gate.evaluate(self._time.now(), entry.value.unlock_at)
        return UnlockStatus(
            is_unlockable=check.is_unlockable,
            days_remaining=check.days_remaining,
            status=entry.value.status,
        )

    async def set_status(
        self,
        chest_id: UUID,
        status: ChestStatus | str,
        requester_id: UUID | None = None,
    ) -> Chest:
        """Move a chest one step forward.

        Setting the current status again is a no-op.

        Raises:
            ChestNotFoundError: Unknown chest id.
            ChestStillLockedError: Unlocking before the deadline.
            InvalidChestTransitionError: Backward or skipping transition.
        """
        target = ChestStatus(status)
        entry = await self.advance_if_due(await self._load(chest_id, requester_id))
        if target is ChestStatus.UNLOCKABLE and entry.value.status is ChestStatus.ACTIVE:
            raise self._still_locked(entry.value)
        return (await self._transition(entry, target)).value

    async def open_for_reader(self, chest_id: UUID, reader_id: UUID) -> Chest:
        """Handle a partner's first read request: unlockable -> opened."""
        entry = await self.advance_if_due(await self._load(chest_id, reader_id))
        status = entry.value.status
        if status is ChestStatus.ACTIVE:
            raise self._still_locked(entry.value)
        if status is ChestStatus.UNLOCKABLE:
            entry = await self._transition(entry, ChestStatus.OPENED)
        return entry.value

    async def finish_reading(self, chest_id: UUID, reader_id: UUID) -> Chest:
        """The reader is done: complete the chest (opening it first if needed)."""
        chest = await self.open_for_reader(chest_id, reader_id)
        if chest.status is ChestStatus.COMPLETED:
            return chest
        entry = await self._load(chest_id, reader_id)
        return (await self._transition(entry, ChestStatus.COMPLETED)).value

    async def complete_if_all_read(self, chest_id: UUID, reader_id: UUID) -> Chest:
        """Complete an opened chest once the reader has no unread partner chits."""
        entry = await self._load(chest_id, reader_id)
        chest = entry.value
        if chest.status is not ChestStatus.OPENED:
            return chest
        partner_chits = await self._chit_repo.list_by_author(
            chest_id, chest.partner_of(reader_id)
        )
        if any(not chit.is_read for chit in partner_chits):
            return chest
        logger.info(
            "chest_all_chits_read",
            chest_id=str(chest_id),
            reader_id=str(reader_id),
            chit_count=len(partner_chits),
        )
        return (await self._transition(entry, ChestStatus.COMPLETED)).value

    async def advance_if_due(self, entry: Versioned[Chest]) -> Versioned[Chest]:
        """Lazily promote an active chest whose deadline has passed."""
        chest = entry.value
        if chest.status is not ChestStatus.ACTIVE:
            return entry
        if not time_gate.is_unlockable(self._time.now(), chest.unlock_at):
            return entry
        return await self._transition(entry, ChestStatus.UNLOCKABLE)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load(
        self, chest_id: UUID, requester_id: UUID | None = None
    ) -> Versioned[Chest]:
        entry = await self._chest_repo.get(chest_id)
        if entry is None:
            logger.warning("chest_not_found", chest_id=str(chest_id))
            raise ChestNotFoundError(chest_id)
        if requester_id is not None and not entry.value.is_owner(requester_id):
            logger.warning(
                "chest_access_denied",
                chest_id=str(chest_id),
                identity_id=str(requester_id),
            )
            raise ChestAccessDeniedError(chest_id, requester_id)
        return entry

    async def _transition(
        self, entry: Versioned[Chest], target: ChestStatus
    ) -> Versioned[Chest]:
        chest = entry.value
        if chest.status is target:
            return entry
        updated = chest.with_status(target, self._time.now())
        try:
            stored = await self._chest_repo.update(updated, entry.version)
        except ConcurrentModificationError:
            fresh = await self._chest_repo.get(chest.id)
            if fresh is not None and fresh.value.status.has_reached(target):
                # Another caller got there first
                return fresh
            raise

        if target is ChestStatus.COMPLETED:
            await self._chest_repo.release_slot(chest.pair_key, chest.id)
        logger.info(
            "chest_status_changed",
            chest_id=str(chest.id),
            from_status=chest.status.value,
            to_status=target.value,
        )
        return stored

    async def _find_live(self, key: str) -> Chest | None:
        slot = await self._chest_repo.get_slot(key)
        if slot is not None and slot.live_chest_id is not None:
            pointed = await self._chest_repo.get(slot.live_chest_id)
            if pointed is not None and pointed.value.status.is_live():
                return pointed.value
        live = [c for c in await self._chest_repo.list_for_pair(key) if c.status.is_live()]
        if not live:
            return None
        return max(live, key=lambda c: c.start_at)

    async def _reject_inflight_claim(self, key: str, slot: LiveChestSlot | None) -> None:
        """Refuse to take over a slot another creator claimed moments ago.

        The creator claims the slot before writing its chest, so a slot that
        points at a missing chest is either mid-creation or left by a crash.
        Only claims older than SLOT_CLAIM_GRACE are treated as abandoned.
        """
        if slot is None or slot.live_chest_id is None or slot.claimed_at is None:
            return
        if await self._chest_repo.get(slot.live_chest_id) is not None:
            return
        if self._time.now() - slot.claimed_at >= SLOT_CLAIM_GRACE:
            return
        logger.warning(
            "chest_create_rejected",
            reason="slot_claim_in_flight",
            pair_key=key,
            claimed_chest_id=str(slot.live_chest_id),
        )
        raise ConcurrentModificationError(
            "chest_slots", key, expected_version=slot.version
        )

    async def _claim_slot(
        self, key: str, chest_id: UUID, slot: LiveChestSlot | None
    ) -> None:
        try:
            await self._chest_repo.claim_slot(key, chest_id, self._time.now(), slot)
        except ConcurrentModificationError:
            winner = await self._find_live(key)
            logger.warning(
                "chest_slot_claim_lost",
                pair_key=key,
                winner_chest_id=str(winner.id) if winner else None,
            )
            if winner is not None:
                raise ChestAlreadyActiveError(winner.id, winner.status) from None
            raise

    async def _require_paired(self, owner_a: UUID, owner_b: UUID) -> None:
        first = await self._identity_repo.get(owner_a)
        if first is None:
            raise IdentityNotFoundError(identity_id=owner_a)
        second = await self._identity_repo.get(owner_b)
        if second is None:
            raise IdentityNotFoundError(identity_id=owner_b)
        if first.value.paired_id != owner_b or second.value.paired_id != owner_a:
            logger.warning(
                "chest_create_rejected", reason="not_paired", owner_a=str(owner_a)
            )
            raise NotPairedError(owner_a)

    def _validate_duration(self, duration_days: int) -> int:
        return validate_duration(
            duration_days,
            self._config.min_duration_days,
            self._config.max_duration_days,
        )

    async def _default_duration(self, owner_id: UUID) -> int:
        settings = await self._settings_repo.get(owner_id)
        if settings is None:
            return self._config.default_duration_days
        return settings.value.chest_duration_days

    def _still_locked(self, chest: Chest) -> ChestStillLockedError:
        remaining = time_gate.days_remaining(self._time.now(), chest.unlock_at)
        logger.info(
            "chest_still_locked", chest_id=str(chest.id), days_remaining=remaining
        )
        return ChestStillLockedError(chest.id, remaining)
