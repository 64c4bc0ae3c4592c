"""
Deck and score exports.

Deck text comes from the game's export formats; the score sheet is a
game-independent CSV that the cube build job can read back.
"""

import csv
import io
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from cubecraft.config import DEFAULT_EXPORT_SCORE
from cubecraft.games.common import grouped_counts
from cubecraft.models.card import CardLike
from cubecraft.models.failure import NotFoundError
from cubecraft.models.game_config import GameConfig

SCORE_CSV_HEADER = ("ID", "Name", "Score")


@dataclass(frozen=True, slots=True)
class ExportResult:
    format_id: str
    content: str
    filename: str


def export_deck(
    cards: Sequence[CardLike],
    format_id: str,
    config: GameConfig,
    today: date | None = None,
) -> ExportResult:
    """
    Render cards in one of the game's export formats.

    Raises:
        NotFoundError: If the game has no format with this id
    """
    export_format = config.export_format(format_id)
    if export_format is None:
        raise NotFoundError(
            "export format",
            format_id,
            available=[candidate.id for candidate in config.export_formats],
        )
    content = export_format.generate(cards, config.deck_zones)
    extension = export_format.extension
    if not extension.startswith("."):
        extension = f".{extension}"
    stamp = (today or date.today()).isoformat()
    return ExportResult(
        format_id=format_id,
        content=content,
        filename=f"draft-deck-{stamp}{extension}",
    )


def scores_to_csv(cards: Sequence[CardLike]) -> str:
    """One "ID,Name,Score" row per distinct card; unscored cards get the default."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(SCORE_CSV_HEADER)
    for card, _count in grouped_counts(cards):
        score = card.score if card.score is not None else DEFAULT_EXPORT_SCORE
        writer.writerow((card.id, card.name, score))
    return buffer.getvalue()
