"""
Deck zone assignment and validation.

Cards go to the zone named by their hint when the game has that zone,
otherwise to the first zone whose membership predicate accepts them.
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from cubecraft.games.common import zone_of
from cubecraft.models.card import CardLike
from cubecraft.models.game_config import GameConfig

Severity = Literal["warning", "error"]


@dataclass(frozen=True, slots=True)
class ZoneWarning:
    """A deck construction problem."""

    id: str
    type: Literal["zone_count", "copy_limit"]
    severity: Severity
    message: str
    zone_id: str | None = None
    card_id: str | None = None


@dataclass(frozen=True, slots=True)
class ZoneSummary:
    zone_id: str
    name: str
    count: int
    min_cards: int | None = None
    max_cards: int | None = None
    card_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DeckCheck:
    zones: tuple[ZoneSummary, ...]
    warnings: tuple[ZoneWarning, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not any(warning.severity == "error" for warning in self.warnings)


def resolve_zone(card: CardLike, config: GameConfig) -> str:
    hint = zone_of(card)
    if hint and config.zone(hint) is not None:
        return hint
    for zone in config.deck_zones:
        if zone.belongs_to(card):
            return zone.id
    return config.main_zone.id


def split_by_zone(cards: Sequence[CardLike], config: GameConfig) -> dict[str, list[CardLike]]:
    """Cards per zone id, every zone present even when empty."""
    zones: dict[str, list[CardLike]] = {zone.id: [] for zone in config.deck_zones}
    for card in cards:
        zones[resolve_zone(card, config)].append(card)
    return zones


def check_deck(cards: Sequence[CardLike], config: GameConfig) -> DeckCheck:
    """
    Summarize zone sizes and report construction problems.

    Below-minimum zones are warnings; over-maximum zones and copy limit
    violations are errors. The main zone's copy limit applies across zones.
    """
    by_zone = split_by_zone(cards, config)
    summaries = []
    warnings = []
    for zone in config.deck_zones:
        zone_cards = by_zone[zone.id]
        count = len(zone_cards)
        summaries.append(
            ZoneSummary(
                zone_id=zone.id,
                name=zone.name,
                count=count,
                min_cards=zone.min_cards,
                max_cards=zone.max_cards,
                card_ids=tuple(str(card.id) for card in zone_cards),
            )
        )
        if zone.min_cards is not None and count < zone.min_cards:
            warnings.append(
                ZoneWarning(
                    id=f"zone_min_{zone.id}",
                    type="zone_count",
                    severity="warning",
                    message=(
                        f"{zone.name} needs at least {zone.min_cards} cards (currently {count})"
                    ),
                    zone_id=zone.id,
                )
            )
        if zone.max_cards is not None and count > zone.max_cards:
            warnings.append(
                ZoneWarning(
                    id=f"zone_max_{zone.id}",
                    type="zone_count",
                    severity="error",
                    message=f"{zone.name} has too many cards: {count}/{zone.max_cards}",
                    zone_id=zone.id,
                )
            )

    copy_limit = config.main_zone.copy_limit
    if copy_limit:
        names = {str(card.id): card.name for card in cards}
        for card_id, count in Counter(str(card.id) for card in cards).items():
            if count > copy_limit:
                warnings.append(
                    ZoneWarning(
                        id=f"copy_limit_{card_id}",
                        type="copy_limit",
                        severity="error",
                        message=f"{names[card_id]} exceeds copy limit: {count}/{copy_limit}",
                        card_id=card_id,
                    )
                )

    return DeckCheck(zones=tuple(summaries), warnings=tuple(warnings))
