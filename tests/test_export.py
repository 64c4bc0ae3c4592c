from datetime import date

import pytest

from cubecraft.games import MTG_CONFIG, YUGIOH_CONFIG
from cubecraft.models.card import Card
from cubecraft.models.failure import NotFoundError
from cubecraft.services.export import export_deck, scores_to_csv


class TestExportDeck:
    def test_filename_uses_date_and_extension(self) -> None:
        result = export_deck([], "mtgo", MTG_CONFIG, today=date(2024, 3, 1))
        assert result.filename == "draft-deck-2024-03-01.dec"
        assert result.format_id == "mtgo"

    def test_unknown_format(self) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            export_deck([], "ydk", MTG_CONFIG)
        assert exc_info.value.detail == "Available: arena, mtgo"

    def test_content_from_generator(self) -> None:
        cards = [Card(id=46986414, name="Dark Magician", type="Normal Monster")]
        result = export_deck(cards, "ydk", YUGIOH_CONFIG)
        assert "#main\n46986414\n" in result.content


class TestScoresToCsv:
    def test_one_row_per_card(self) -> None:
        bolt = Card(id="bolt", name="Lightning Bolt", score=88)
        csv_text = scores_to_csv([bolt, bolt, Card(id="x", name="Unscored")])
        assert csv_text == "ID,Name,Score\nbolt,Lightning Bolt,88\nx,Unscored,50\n"

    def test_names_with_commas_are_quoted(self) -> None:
        card = Card(id=1, name="Borreload, Dragon", score=70)
        assert scores_to_csv([card]).splitlines()[1] == '1,"Borreload, Dragon",70'
