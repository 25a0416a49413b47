"""Unit tests for Identity, Gender and username validation."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from src.domain.errors import InvalidGenderError, InvalidUsernameError
from src.domain.models.identity import Gender, Identity, validate_username

PAIRED_AT = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestGender:
    @pytest.mark.parametrize("raw", ["male", "MALE", " Male "])
    def test_parse_is_case_and_space_insensitive(self, raw: str) -> None:
        assert Gender.parse(raw) is Gender.MALE

    @pytest.mark.parametrize("raw", ["", "other", None, 1])
    def test_parse_rejects_unknown(self, raw: object) -> None:
        with pytest.raises(InvalidGenderError):
            Gender.parse(raw)


class TestValidateUsername:
    def test_strips_surrounding_spaces(self) -> None:
        assert validate_username("  alice ") == "alice"

    def test_keeps_case(self) -> None:
        assert validate_username("Alice.B-2_x") == "Alice.B-2_x"

    @pytest.mark.parametrize("raw", ["a", "x" * 25, "has space", "emoji🙂", "semi;colon"])
    def test_rejects_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidUsernameError):
            validate_username(raw)


class TestIdentity:
    def test_new_identity_is_unpaired(self) -> None:
        identity = Identity(id=uuid4(), username="alice", gender=Gender.FEMALE)

        assert not identity.is_paired
        assert identity.paired_at is None

    def test_with_pairing_links_partner(self) -> None:
        partner_id = uuid4()
        identity = Identity(id=uuid4(), username="alice", gender=Gender.FEMALE)

        paired = identity.with_pairing(partner_id, PAIRED_AT)

        assert paired.paired_id == partner_id
        assert paired.paired_at == PAIRED_AT
        assert not identity.is_paired

    def test_pairing_is_permanent(self) -> None:
        identity = Identity(
            id=uuid4(),
            username="alice",
            gender=Gender.FEMALE,
            paired_id=uuid4(),
            paired_at=PAIRED_AT,
        )

        with pytest.raises(ValueError, match="already paired"):
            identity.with_pairing(uuid4(), PAIRED_AT)

    def test_paired_id_and_paired_at_go_together(self) -> None:
        with pytest.raises(ValueError):
            Identity(id=uuid4(), username="alice", gender=Gender.FEMALE, paired_id=uuid4())

    def test_cannot_pair_with_self(self) -> None:
        identity_id = uuid4()
        with pytest.raises(ValueError):
            Identity(
                id=identity_id,
                username="alice",
                gender=Gender.FEMALE,
                paired_id=identity_id,
                paired_at=PAIRED_AT,
            )

    def test_document_round_trip(self) -> None:
        identity = Identity(
            id=uuid4(),
            username="alice",
            gender=Gender.FEMALE,
            paired_id=uuid4(),
            paired_at=PAIRED_AT,
            created_at=PAIRED_AT,
        )

        doc = identity.to_document()

        assert doc["pairedId"] == str(identity.paired_id)
        assert doc["gender"] == "female"
        assert Identity.from_document(str(identity.id), doc) == identity
