"""Unit tests for ChitService: write window, blind box and read marking."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from src.application.services.chest_lifecycle_service import ChestLifecycleService
from src.application.services.chit_service import ChitService
from src.application.services.identity_service import IdentityService
from src.application.services.pairing_service import PairingService
from src.config.chest_config import ChestConfig
from src.domain.errors import (
    ChestAccessDeniedError,
    ChestNotFoundError,
    ChestNotWritableError,
    ChestStillLockedError,
    ChitNotFoundError,
    ConcurrentModificationError,
    ContentTooLongError,
    EmptyContentError,
    InvalidEmotionError,
    OwnChitAccessError,
)
from src.domain.models.chest import ChestStatus
from src.infrastructure.adapters.locking import AsyncioKeyedLock
from src.infrastructure.adapters.persistence import (
    DocumentChestRepository,
    DocumentChitRepository,
    DocumentIdentityRepository,
    DocumentPairingRepository,
    DocumentSettingsRepository,
)
from src.infrastructure.stubs.document_store_stub import InMemoryDocumentStore
from tests.helpers.fake_time_authority import FakeTimeAuthority

WEEK = timedelta(days=7)


@pytest.fixture
async def chest(lifecycle: ChestLifecycleService, couple):
    return await lifecycle.create(couple.alice.id, couple.bob.id, 7)


class TestAdd:
    async def test_adds_trimmed_chit(
        self, chit_service: ChitService, fake_time: FakeTimeAuthority, chest, couple
    ) -> None:
        chit = await chit_service.add(chest.id, couple.alice.id, "  thank you  ", "grateful")

        assert chit.content == "thank you"
        assert chit.emotion.value == "grateful"
        assert chit.author_id == couple.alice.id
        assert chit.created_at == fake_time.now()
        assert not chit.is_read

    async def test_counts_chit_per_author(
        self, chit_service: ChitService, chit_repo: DocumentChitRepository, chest, couple
    ) -> None:
        await chit_service.add(chest.id, couple.alice.id, "one", "happy")
        await chit_service.add(chest.id, couple.alice.id, "two", "sad")
        await chit_service.add(chest.id, couple.bob.id, "three", "angry")

        counters = await chit_repo.get_counters(chest.id)

        assert counters.chit_count == 3
        assert counters.chits_by(couple.alice.id) == 2
        assert counters.chits_by(couple.bob.id) == 1

    async def test_counter_conflict_keeps_stored_chit(
        self,
        chit_service: ChitService,
        chit_repo: DocumentChitRepository,
        store: InMemoryDocumentStore,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        await chit_service.add(chest.id, couple.alice.id, "first", "happy")
        for _ in range(10):
            store.inject_failure(
                "update",
                "chest_counters",
                ConcurrentModificationError("chest_counters", str(chest.id), 1, 2),
            )

        second = await chit_service.add(chest.id, couple.alice.id, "second", "sad")
        fake_time.advance(delta=WEEK)

        listed = await chit_service.list_for_reader(chest.id, couple.bob.id)
        assert [c.content for c in listed] == ["first", "second"]
        assert listed[-1].id == second.id
        assert (await chit_repo.get_counters(chest.id)).chit_count == 1

    async def test_rejects_unknown_emotion(
        self, chit_service: ChitService, chest, couple
    ) -> None:
        with pytest.raises(InvalidEmotionError):
            await chit_service.add(chest.id, couple.alice.id, "hi", "smug")

    async def test_rejects_blank_content(
        self, chit_service: ChitService, chest, couple
    ) -> None:
        with pytest.raises(EmptyContentError):
            await chit_service.add(chest.id, couple.alice.id, "   \n ", "happy")

    async def test_rejects_long_content(
        self, chit_service: ChitService, chest, couple
    ) -> None:
        with pytest.raises(ContentTooLongError):
            await chit_service.add(chest.id, couple.alice.id, "x" * 1001, "happy")

    async def test_content_validated_before_chest_lookup(
        self, chit_service: ChitService, couple
    ) -> None:
        with pytest.raises(EmptyContentError):
            await chit_service.add(uuid4(), couple.alice.id, "", "happy")

    async def test_unknown_chest(self, chit_service: ChitService, couple) -> None:
        with pytest.raises(ChestNotFoundError):
            await chit_service.add(uuid4(), couple.alice.id, "hi", "happy")

    async def test_outsider_cannot_write(
        self,
        chit_service: ChitService,
        identity_service: IdentityService,
        chest,
    ) -> None:
        carol = await identity_service.register("carol", "female")

        with pytest.raises(ChestAccessDeniedError):
            await chit_service.add(chest.id, carol.id, "hi", "happy")

    async def test_closed_at_deadline_and_advances_status(
        self,
        chit_service: ChitService,
        lifecycle: ChestLifecycleService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        fake_time.advance(delta=WEEK)

        with pytest.raises(ChestNotWritableError) as exc_info:
            await chit_service.add(chest.id, couple.alice.id, "late", "sad")

        assert exc_info.value.reason == ChestNotWritableError.PAST_DEADLINE
        assert (await lifecycle.get_chest(chest.id)).status is ChestStatus.UNLOCKABLE

    async def test_one_second_before_deadline_is_writable(
        self,
        chit_service: ChitService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        fake_time.advance(delta=WEEK - timedelta(seconds=1))

        chit = await chit_service.add(chest.id, couple.alice.id, "just in time", "happy")

        assert chit.chest_id == chest.id

    async def test_not_active(
        self,
        chit_service: ChitService,
        lifecycle: ChestLifecycleService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        fake_time.advance(delta=WEEK)
        await lifecycle.check_unlockable(chest.id)

        with pytest.raises(ChestNotWritableError) as exc_info:
            await chit_service.add(chest.id, couple.bob.id, "late", "sad")

        assert exc_info.value.reason == ChestNotWritableError.NOT_ACTIVE


class TestBlindBox:
    async def test_nothing_visible_before_deadline(
        self, chit_service: ChitService, chest, couple
    ) -> None:
        await chit_service.add(chest.id, couple.alice.id, "for bob", "happy")

        assert await chit_service.list_for_reader(chest.id, couple.bob.id) == []
        assert await chit_service.list_for_reader(chest.id, couple.alice.id) == []

    async def test_reader_sees_only_partner_chits(
        self,
        chit_service: ChitService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        first = await chit_service.add(chest.id, couple.alice.id, "first", "happy")
        fake_time.advance(seconds=60)
        await chit_service.add(chest.id, couple.bob.id, "mine", "sad")
        second = await chit_service.add(chest.id, couple.alice.id, "second", "grateful")
        fake_time.advance(delta=WEEK)

        visible = await chit_service.list_for_reader(chest.id, couple.bob.id)

        assert [c.id for c in visible] == [first.id, second.id]

    async def test_listing_advances_status(
        self,
        chit_service: ChitService,
        lifecycle: ChestLifecycleService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        fake_time.advance(delta=WEEK)

        await chit_service.list_for_reader(chest.id, couple.bob.id)

        assert (await lifecycle.get_chest(chest.id)).status is ChestStatus.UNLOCKABLE

    async def test_outsider_cannot_list(
        self,
        chit_service: ChitService,
        identity_service: IdentityService,
        chest,
    ) -> None:
        carol = await identity_service.register("carol", "female")

        with pytest.raises(ChestAccessDeniedError):
            await chit_service.list_for_reader(chest.id, carol.id)


class TestMarkRead:
    async def test_read_before_deadline_rejected(
        self, chit_service: ChitService, chest, couple
    ) -> None:
        chit = await chit_service.add(chest.id, couple.alice.id, "hi", "happy")

        with pytest.raises(ChestStillLockedError) as exc_info:
            await chit_service.mark_read(chest.id, chit.id, couple.bob.id)

        assert exc_info.value.days_remaining == 7

    async def test_first_read_opens_chest(
        self,
        chit_service: ChitService,
        lifecycle: ChestLifecycleService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        first = await chit_service.add(chest.id, couple.alice.id, "one", "happy")
        await chit_service.add(chest.id, couple.alice.id, "two", "happy")
        fake_time.advance(delta=WEEK)

        read = await chit_service.mark_read(chest.id, first.id, couple.bob.id)

        assert read.is_read
        assert read.read_by == couple.bob.id
        assert read.read_at == fake_time.now()
        assert (await lifecycle.get_chest(chest.id)).status is ChestStatus.OPENED

    async def test_last_read_completes_chest(
        self,
        chit_service: ChitService,
        lifecycle: ChestLifecycleService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        chits = [
            await chit_service.add(chest.id, couple.alice.id, text, "grateful")
            for text in ("a", "b")
        ]
        fake_time.advance(delta=WEEK)

        for chit in chits:
            await chit_service.mark_read(chest.id, chit.id, couple.bob.id)

        assert (await lifecycle.get_chest(chest.id)).status is ChestStatus.COMPLETED
        assert await lifecycle.get_active_chest(couple.alice.id, couple.bob.id) is None

    async def test_idempotent(
        self,
        chit_service: ChitService,
        chit_repo: DocumentChitRepository,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        chit = await chit_service.add(chest.id, couple.alice.id, "hi", "happy")
        fake_time.advance(delta=WEEK)

        first = await chit_service.mark_read(chest.id, chit.id, couple.bob.id)
        fake_time.advance(seconds=30)
        again = await chit_service.mark_read(chest.id, chit.id, couple.bob.id)

        assert again.read_at == first.read_at
        counters = await chit_repo.get_counters(chest.id)
        assert counters.read_count == 1
        assert counters.reads_by(couple.bob.id) == 1

    async def test_concurrent_reads_count_once(
        self,
        chit_service: ChitService,
        chit_repo: DocumentChitRepository,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        chit = await chit_service.add(chest.id, couple.alice.id, "hi", "happy")
        fake_time.advance(delta=WEEK)

        results = await asyncio.gather(
            *(chit_service.mark_read(chest.id, chit.id, couple.bob.id) for _ in range(5))
        )

        assert all(r.is_read for r in results)
        assert len({r.read_at for r in results}) == 1
        assert (await chit_repo.get_counters(chest.id)).read_count == 1

    async def test_own_chit_rejected(
        self,
        chit_service: ChitService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        chit = await chit_service.add(chest.id, couple.alice.id, "hi", "happy")
        fake_time.advance(delta=WEEK)

        with pytest.raises(OwnChitAccessError):
            await chit_service.mark_read(chest.id, chit.id, couple.alice.id)

    async def test_chit_from_other_chest_not_found(
        self,
        chit_service: ChitService,
        lifecycle: ChestLifecycleService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        chit = await chit_service.add(chest.id, couple.alice.id, "hi", "happy")
        fake_time.advance(delta=WEEK)
        await lifecycle.finish_reading(chest.id, couple.bob.id)
        other = await lifecycle.create(couple.alice.id, couple.bob.id, 7)

        with pytest.raises(ChitNotFoundError):
            await chit_service.mark_read(other.id, chit.id, couple.bob.id)

    @pytest.mark.parametrize(
        ("collection", "conflicts"), [("chest_counters", 10), ("chests", 1)]
    )
    async def test_retry_finishes_interrupted_read(
        self,
        chit_service: ChitService,
        chit_repo: DocumentChitRepository,
        lifecycle: ChestLifecycleService,
        store: InMemoryDocumentStore,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
        collection: str,
        conflicts: int,
    ) -> None:
        chit = await chit_service.add(chest.id, couple.alice.id, "hi", "happy")
        fake_time.advance(delta=WEEK)
        for _ in range(conflicts):
            store.inject_failure(
                "update",
                collection,
                ConcurrentModificationError(collection, str(chest.id), 1, 2),
            )

        with pytest.raises(ConcurrentModificationError):
            await chit_service.mark_read(chest.id, chit.id, couple.bob.id)
        assert (await chit_repo.get(chest.id, chit.id)).value.is_read

        await chit_service.mark_read(chest.id, chit.id, couple.bob.id)

        counters = await chit_repo.get_counters(chest.id)
        assert counters.read_count == 1
        assert counters.reads_by(couple.bob.id) == 1
        assert (await lifecycle.get_chest(chest.id)).status is ChestStatus.COMPLETED


class TestStatsAndHistory:
    async def test_stats_zero_before_deadline(
        self, chit_service: ChitService, chest, couple
    ) -> None:
        await chit_service.add(chest.id, couple.alice.id, "hi", "happy")

        stats = await chit_service.get_chit_stats(chest.id, couple.bob.id)

        assert stats.total_chits == 0
        assert stats.progress == 0

    async def test_stats_track_progress(
        self,
        chit_service: ChitService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        chits = [
            await chit_service.add(chest.id, couple.alice.id, str(i), emotion)
            for i, emotion in enumerate(["happy", "happy", "sad"])
        ]
        await chit_service.add(chest.id, couple.bob.id, "not counted", "angry")
        fake_time.advance(delta=WEEK)
        await chit_service.mark_read(chest.id, chits[0].id, couple.bob.id)

        stats = await chit_service.get_chit_stats(chest.id, couple.bob.id)

        assert stats.total_chits == 3
        assert stats.read_count == 1
        assert stats.remaining_count == 2
        assert stats.emotion_count == {"happy": 2, "sad": 1}
        assert stats.progress == 33

    async def test_history_groups_unlocked_chests(
        self,
        chit_service: ChitService,
        lifecycle: ChestLifecycleService,
        fake_time: FakeTimeAuthority,
        chest,
        couple,
    ) -> None:
        await chit_service.add(chest.id, couple.alice.id, "old", "happy")
        fake_time.advance(delta=WEEK)
        await lifecycle.finish_reading(chest.id, couple.bob.id)
        current = await lifecycle.create(couple.alice.id, couple.bob.id, 7)
        await chit_service.add(current.id, couple.alice.id, "still sealed", "sad")

        history = await chit_service.get_history(couple.bob.id)

        assert [entry.chest.id for entry in history] == [chest.id]
        assert [c.content for c in history[0].chits] == ["old"]
        assert await chit_service.get_history(couple.alice.id) == []


@settings(max_examples=25, suppress_health_check=[HealthCheck.too_slow])
@given(
    authors=st.lists(st.sampled_from(["alice", "bob"]), min_size=0, max_size=12),
    reader=st.sampled_from(["alice", "bob"]),
)
def test_reader_never_sees_own_chits(authors: list[str], reader: str) -> None:
    asyncio.run(_blind_box_scenario(authors, reader))


async def _blind_box_scenario(authors: list[str], reader: str) -> None:
    store = InMemoryDocumentStore()
    clock = FakeTimeAuthority()
    locks = AsyncioKeyedLock()
    config = ChestConfig()
    identities = DocumentIdentityRepository(store)
    chests = DocumentChestRepository(store)
    chits = DocumentChitRepository(store)
    lifecycle = ChestLifecycleService(
        chests,
        chits,
        identities,
        DocumentSettingsRepository(store),
        locks,
        clock,
        config,
    )
    service = ChitService(chits, chests, lifecycle, clock, config)
    people = IdentityService(identities, clock)
    alice = await people.register("alice", "female")
    bob = await people.register("bob", "male")
    await PairingService(
        identities, DocumentPairingRepository(store), locks, clock
    ).pair(alice.id, "bob")
    ids = {"alice": alice.id, "bob": bob.id}

    chest = await lifecycle.create(alice.id, bob.id, 1)
    for index, author in enumerate(authors):
        await service.add(chest.id, ids[author], f"note {index}", "happy")

    assert await service.list_for_reader(chest.id, ids[reader]) == []
    clock.advance(delta=timedelta(days=1))
    visible = await service.list_for_reader(chest.id, ids[reader])

    assert all(chit.author_id != ids[reader] for chit in visible)
    assert len(visible) == sum(1 for author in authors if author != reader)
