import pytest

from cubecraft.models.card import Card
from cubecraft.models.cube import CubeCard, CubeEntry, CubeRecord, CubeSnapshot
from cubecraft.models.failure import (
    CubeValidationError,
    DuplicateLimitError,
    FailureKind,
    NotFoundError,
    OutcomeType,
    PersistenceError,
)


class TestCard:
    def test_key_is_string_id(self) -> None:
        card = Card(id=89631139, name="Blue-Eyes White Dragon")
        assert card.key == "89631139"

    def test_card_immutable(self) -> None:
        card = Card(id=1, name="Pot of Greed")
        with pytest.raises(AttributeError):
            card.name = "Pot of Desires"  # type: ignore[misc]

    def test_from_dict_generic_format(self) -> None:
        card = Card.from_dict(
            {
                "id": "abc",
                "name": "Lightning Bolt",
                "type": "Instant",
                "description": "Deal 3 damage.",
                "imageUrl": "https://example.com/bolt.jpg",
                "score": 80,
                "attributes": {"cmc": 1, "colors": ["R"]},
            }
        )
        assert card.description == "Deal 3 damage."
        assert card.image_url == "https://example.com/bolt.jpg"
        assert card.score == 80
        assert card.attributes == {"cmc": 1, "colors": ["R"]}

    def test_from_dict_flat_format_keeps_extra_keys(self) -> None:
        """Unknown keys of a flat card become attributes."""
        card = Card.from_dict(
            {"id": 46986414, "name": "Dark Magician", "desc": "Wizard.", "atk": 2500, "level": 7}
        )
        assert card.description == "Wizard."
        assert card.attributes == {"atk": 2500, "level": 7}
        assert card.score is None

    def test_to_dict_round_trips(self) -> None:
        card = Card(id=7, name="Test", type="Spell Card", score=55, attributes={"race": "Normal"})
        assert Card.from_dict(card.to_dict()) == card


class TestCubeSnapshot:
    def test_copy_count_compares_ids_as_strings(self) -> None:
        card = Card(id=123, name="Test")
        snapshot = CubeSnapshot(
            cards={"a": CubeCard("a", card), "b": CubeCard("b", card)},
            order=("a", "b"),
        )
        assert snapshot.copy_count(123) == 2
        assert snapshot.copy_count("123") == 2
        assert snapshot.copy_count(999) == 0

    def test_ordered_follows_order(self) -> None:
        first = CubeCard("x", Card(id=1, name="First"))
        second = CubeCard("y", Card(id=2, name="Second"))
        snapshot = CubeSnapshot(cards={"x": first, "y": second}, order=("y", "x"))
        assert [card.name for card in snapshot.ordered()] == ["Second", "First"]

    def test_cube_card_exposes_card_fields(self) -> None:
        cube_card = CubeCard("i-1", Card(id=5, name="Five", type="Spell Card"), score=60)
        assert cube_card.id == 5
        assert cube_card.card_id == "5"
        assert cube_card.type == "Spell Card"
        assert cube_card.score == 60


class TestCubeRecord:
    def test_card_count(self) -> None:
        card = Card(id=1, name="One")
        record = CubeRecord(name="Cube", game_id="yugioh", entries=(CubeEntry(card), CubeEntry(card)))
        assert record.card_count == 2


class TestKnownErrors:
    def test_validation_error_response(self) -> None:
        response = CubeValidationError("Cube name is required").to_response()
        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == FailureKind.VALIDATION_FAILED
        assert response.data is None

    def test_duplicate_limit_error(self) -> None:
        error = DuplicateLimitError("42", current=2, requested=1, limit=2)
        assert error.kind == FailureKind.DUPLICATE_LIMIT
        assert error.status_code == 400
        assert "limit is 2" in error.message
        assert isinstance(error, CubeValidationError)

    def test_not_found_lists_available(self) -> None:
        error = NotFoundError("game", "chess", available=["yugioh", "mtg"])
        assert error.status_code == 404
        assert error.message == "Unknown game: chess"
        assert error.detail == "Available: yugioh, mtg"

    def test_persistence_error_is_service_unavailable(self) -> None:
        error = PersistenceError("Failed to save cube")
        assert error.status_code == 503
        assert error.kind == FailureKind.SERVICE_UNAVAILABLE
