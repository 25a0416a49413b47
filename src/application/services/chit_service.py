"""Chit service.

Writing:
    A chit may only be added while its chest is ``active`` AND the clock is
    before ``unlockAt``. The deadline is checked on its own because the
    stored status is advanced lazily and may still read ``active`` after
    the deadline has passed.

Reading (blind box):
    A reader only ever sees chits written by their partner, never their
    own, in every chest status. Nothing is readable before the deadline.

Read marking:
    ``mark_read`` is idempotent in effect. The chit document is flipped with
    compare-and-swap and the read counter is keyed by chit id, so repeated or
    concurrent calls count one read. Every call re-runs the counter, open and
    complete steps, so a retry finishes a read that failed part way.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from src.application.ports.document_store import Versioned
from src.config.chest_config import ChestConfig
from src.domain.errors import (
    ChestAccessDeniedError,
    ChestNotFoundError,
    ChestNotWritableError,
    ChestStillLockedError,
    ChitNotFoundError,
    ConcurrentModificationError,
    OwnChitAccessError,
)
from src.domain.models.chest import Chest, ChestStatus
from src.domain.models.chit import Chit, Emotion, normalize_content
from src.domain.services import time_gate

if TYPE_CHECKING:
    from src.application.ports.chest_repository import ChestRepositoryProtocol
    from src.application.ports.chit_repository import ChitRepositoryProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.chest_lifecycle_service import (
        ChestLifecycleService,
    )

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChitStats:
    """Reading progress of one reader over the partner's chits.

    Attributes:
        total_chits: Partner chits in the chest.
        read_count: How many of them are read.
        remaining_count: How many are still unread.
        emotion_count: Partner chits per emotion value.
        progress: Whole-number percentage read (0 when there are none).
    """

    total_chits: int
    read_count: int
    remaining_count: int
    emotion_count: dict[str, int]
    progress: int


@dataclass(frozen=True)
class ChitHistoryEntry:
    chest: Chest
    chits: list[Chit]


class ChitService:
    """Adds, lists and marks chits."""

    def __init__(
        self,
        chit_repo: ChitRepositoryProtocol,
        chest_repo: ChestRepositoryProtocol,
        lifecycle: ChestLifecycleService,
        time_authority: TimeAuthorityProtocol,
        config: ChestConfig | None = None,
    ) -> None:
        self._chit_repo = chit_repo
        self._chest_repo = chest_repo
        self._lifecycle = lifecycle
        self._time = time_authority
        self._config = config or ChestConfig()

    async def add(
        self,
        chest_id: UUID,
        author_id: UUID,
        content: str,
        emotion: Emotion | str,
    ) -> Chit:
        """Append a chit to an active chest.

        Raises:
            InvalidEmotionError: Emotion outside the closed set.
            EmptyContentError: Content is blank after trimming.
            ContentTooLongError: Content longer than the configured limit.
            ChestNotFoundError: Unknown chest.
            ChestAccessDeniedError: Author does not own the chest.
            ChestNotWritableError: Chest not active, or deadline passed.
        """
        parsed_emotion = Emotion.parse(emotion)
        text = normalize_content(content, self._config.max_chit_length)
        log = logger.bind(chest_id=str(chest_id), author_id=str(author_id))

        entry = await self._chest_repo.get(chest_id)
        if entry is None:
            log.warning("chit_add_rejected", reason="chest_not_found")
            raise ChestNotFoundError(chest_id)
        chest = entry.value
        if not chest.is_owner(author_id):
            log.warning("chit_add_rejected", reason="not_owner")
            raise ChestAccessDeniedError(chest_id, author_id)

        now = self._time.now()
        if chest.status is not ChestStatus.ACTIVE:
            log.warning(
                "chit_add_rejected", reason="not_active", status=chest.status.value
            )
            raise ChestNotWritableError(chest_id, ChestNotWritableError.NOT_ACTIVE)
        if time_gate.is_unlockable(now, chest.unlock_at):
            log.warning("chit_add_rejected", reason="past_deadline")
            await self._lifecycle.advance_if_due(entry)
            raise ChestNotWritableError(chest_id, ChestNotWritableError.PAST_DEADLINE)

        chit = Chit(
            id=uuid7(),
            chest_id=chest_id,
            author_id=author_id,
            content=text,
            emotion=parsed_emotion,
            created_at=now,
        )
        await self._chit_repo.create(chit)
        try:
            await self._chit_repo.increment_chit_count(chest_id, author_id)
        except ConcurrentModificationError:
            # The chit is stored; counters are statistics and may lag
            log.error("chit_counter_update_failed", chit_id=str(chit.id))

        log.info("chit_added", chit_id=str(chit.id), emotion=parsed_emotion.value)
        return chit

    async def list_for_reader(self, chest_id: UUID, reader_id: UUID) -> list[Chit]:
        """Partner chits visible to reader_id, oldest first.

        Returns an empty list until the deadline has passed.

        Raises:
            ChestNotFoundError: Unknown chest.
            ChestAccessDeniedError: Reader does not own the chest.
        """
        entry = await self._load_for_member(chest_id, reader_id)
        chest = entry.value
        if not time_gate.is_unlockable(self._time.now(), chest.unlock_at):
            return []
        await self._lifecycle.advance_if_due(entry)

        partner_id = chest.partner_of(reader_id)
        chits = await self._chit_repo.list_by_author(chest_id, partner_id)
        return [chit for chit in chits if chit.author_id != reader_id]

    async def mark_read(self, chest_id: UUID, chit_id: UUID, reader_id: UUID) -> Chit:
        """Mark a partner chit as read.

        The first successful read opens an unlockable chest; the read that
        leaves the reader with nothing unread completes it.

        Raises:
            ChestNotFoundError: Unknown chest.
            ChestAccessDeniedError: Reader does not own the chest.
            ChitNotFoundError: No such chit in this chest.
            OwnChitAccessError: The reader wrote the chit.
            ChestStillLockedError: Deadline not reached yet.
        """
        log = logger.bind(
            chest_id=str(chest_id), chit_id=str(chit_id), reader_id=str(reader_id)
        )
        entry = await self._load_for_member(chest_id, reader_id)
        chest = entry.value

        found = await self._chit_repo.get(chest_id, chit_id)
        if found is None:
            log.warning("chit_read_rejected", reason="chit_not_found")
            raise ChitNotFoundError(chest_id, chit_id)
        chit = found.value
        if chit.author_id == reader_id:
            log.warning("chit_read_rejected", reason="own_chit")
            raise OwnChitAccessError(chit_id, reader_id)

        now = self._time.now()
        if not time_gate.is_unlockable(now, chest.unlock_at):
            log.warning("chit_read_rejected", reason="still_locked")
            raise ChestStillLockedError(
                chest_id, time_gate.days_remaining(now, chest.unlock_at)
            )

        if chit.is_read:
            log.debug("chit_already_read")
        else:
            chit = await self._flip_read(chit, found.version, reader_id, now)

        # Idempotent steps; a retry finishes a read interrupted here
        await self._chit_repo.increment_read_count(chest_id, chit_id, reader_id)
        await self._lifecycle.open_for_reader(chest_id, reader_id)
        await self._lifecycle.complete_if_all_read(chest_id, reader_id)
        return chit

    async def _flip_read(
        self, chit: Chit, version: int, reader_id: UUID, now: datetime
    ) -> Chit:
        try:
            stored = await self._chit_repo.update(
                chit.with_read(reader_id, now), version
            )
        except ConcurrentModificationError:
            fresh = await self._chit_repo.get(chit.chest_id, chit.id)
            if fresh is not None and fresh.value.is_read:
                logger.debug("chit_read_by_concurrent_call", chit_id=str(chit.id))
                return fresh.value
            raise
        logger.info(
            "chit_marked_read", chest_id=str(chit.chest_id), chit_id=str(chit.id)
        )
        return stored.value

    async def get_chit_stats(self, chest_id: UUID, reader_id: UUID) -> ChitStats:
        """Reading progress over the partner's chits.

        Before the deadline every figure is zero, so stats never leak more
        than the blind box does.
        """
        entry = await self._load_for_member(chest_id, reader_id)
        chest = entry.value
        if not time_gate.is_unlockable(self._time.now(), chest.unlock_at):
            return ChitStats(0, 0, 0, {}, 0)

        chits = await self._chit_repo.list_by_author(
            chest_id, chest.partner_of(reader_id)
        )
        total = len(chits)
        read = sum(1 for chit in chits if chit.is_read)
        return ChitStats(
            total_chits=total,
            read_count=read,
            remaining_count=total - read,
            emotion_count=dict(Counter(chit.emotion.value for chit in chits)),
            progress=round(read * 100 / total) if total else 0,
        )

    async def get_history(self, identity_id: UUID) -> list[ChitHistoryEntry]:
        """Partner chits from every unlocked chest, newest unlock first."""
        now = self._time.now()
        history: list[ChitHistoryEntry] = []
        for chest in await self._chest_repo.list_for_owner(identity_id):
            if not time_gate.is_unlockable(now, chest.unlock_at):
                continue
            chits = await self._chit_repo.list_by_author(
                chest.id, chest.partner_of(identity_id)
            )
            if chits:
                history.append(ChitHistoryEntry(chest=chest, chits=chits))
        history.sort(key=lambda item: item.chest.unlock_at, reverse=True)
        return history

    async def _load_for_member(
        self, chest_id: UUID, identity_id: UUID
    ) -> Versioned[Chest]:
        entry = await self._chest_repo.get(chest_id)
        if entry is None:
            raise ChestNotFoundError(chest_id)
        if not entry.value.is_owner(identity_id):
            logger.warning(
                "chit_access_denied",
                chest_id=str(chest_id),
                identity_id=str(identity_id),
            )
            raise ChestAccessDeniedError(chest_id, identity_id)
        return entry
