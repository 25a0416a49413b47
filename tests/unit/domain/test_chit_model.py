"""Unit tests for Chit, Emotion and content normalization."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from src.domain.errors import ContentTooLongError, EmptyContentError, InvalidEmotionError
from src.domain.models.chest_counters import ChestCounters
from src.domain.models.chit import MAX_CONTENT_LENGTH, Chit, Emotion, normalize_content

WRITTEN_AT = datetime(2026, 1, 2, tzinfo=timezone.utc)
READ_AT = datetime(2026, 1, 9, tzinfo=timezone.utc)


class TestEmotion:
    @pytest.mark.parametrize("raw", ["happy", "HAPPY", "  Happy\n"])
    def test_parse_normalizes(self, raw: str) -> None:
        assert Emotion.parse(raw) is Emotion.HAPPY

    @pytest.mark.parametrize("raw", ["joyful", "", None, 3])
    def test_parse_rejects_outside_closed_set(self, raw: object) -> None:
        with pytest.raises(InvalidEmotionError):
            Emotion.parse(raw)

    def test_closed_set(self) -> None:
        assert {e.value for e in Emotion} == {
            "angry",
            "sad",
            "disappointed",
            "grateful",
            "happy",
        }


class TestNormalizeContent:
    def test_trims(self) -> None:
        assert normalize_content("  thank you  ") == "thank you"

    @pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
    def test_blank_rejected(self, raw: str) -> None:
        with pytest.raises(EmptyContentError):
            normalize_content(raw)

    def test_length_limit_applies_after_trimming(self) -> None:
        exact = "x" * MAX_CONTENT_LENGTH
        assert normalize_content(f"  {exact}  ") == exact

        with pytest.raises(ContentTooLongError) as exc_info:
            normalize_content(exact + "x")
        assert exc_info.value.length == MAX_CONTENT_LENGTH + 1


class TestChit:
    def _chit(self) -> Chit:
        return Chit(
            id=uuid4(),
            chest_id=uuid4(),
            author_id=uuid4(),
            content="you made dinner",
            emotion=Emotion.GRATEFUL,
            created_at=WRITTEN_AT,
        )

    def test_with_read_sets_reader_and_time(self) -> None:
        reader = uuid4()

        read = self._chit().with_read(reader, READ_AT)

        assert read.is_read
        assert read.read_by == reader
        assert read.read_at == READ_AT

    def test_with_read_is_idempotent(self) -> None:
        first = self._chit().with_read(uuid4(), READ_AT)

        assert first.with_read(uuid4(), WRITTEN_AT) is first

    def test_author_cannot_be_reader(self) -> None:
        chit = self._chit()
        with pytest.raises(ValueError):
            chit.with_read(chit.author_id, READ_AT)

    def test_document_round_trip(self) -> None:
        chit = self._chit().with_read(uuid4(), READ_AT)

        assert Chit.from_document(str(chit.id), chit.to_document()) == chit


class TestChestCounters:
    def test_increments_per_author_and_reader(self) -> None:
        alice, bob = uuid4(), uuid4()
        counters = ChestCounters(chest_id=uuid4())

        counters = counters.with_chit_added(alice).with_chit_added(alice)
        counters = counters.with_chit_added(bob).with_chit_read(uuid4(), bob)

        assert counters.chit_count == 3
        assert counters.chits_by(alice) == 2
        assert counters.chits_by(bob) == 1
        assert counters.read_count == 1
        assert counters.reads_by(bob) == 1
        assert counters.reads_by(alice) == 0

    def test_read_counted_once_per_chit(self) -> None:
        chit_id, bob = uuid4(), uuid4()
        counters = ChestCounters(chest_id=uuid4()).with_chit_read(chit_id, bob)

        assert counters.with_chit_read(chit_id, bob) is counters
        assert counters.has_read(chit_id)
        assert counters.read_count == 1

    def test_read_ledger_survives_document_round_trip(self) -> None:
        chit_id = uuid4()
        counters = ChestCounters(chest_id=uuid4()).with_chit_read(chit_id, uuid4())

        restored = ChestCounters.from_document(
            str(counters.chest_id), counters.to_document()
        )

        assert restored == counters
        assert restored.has_read(chit_id)
