"""Yu-Gi-Oh! game configuration."""

from collections.abc import Sequence

from cubecraft.games.common import attr, attr_equals, number, type_has, zone_of
from cubecraft.models.card import CardLike
from cubecraft.models.game_config import (
    CardClassifiers,
    CardDisplay,
    CardIndicator,
    CardStat,
    DeckZone,
    ExportFormat,
    FilterGroup,
    FilterGroupOption,
    FilterOption,
    GameConfig,
    GameTheme,
    ImageSize,
    RangeConfig,
    SortOption,
)

EXTRA_DECK_TYPES = (
    "Fusion Monster",
    "Synchro Monster",
    "XYZ Monster",
    "Link Monster",
    "Pendulum Effect Fusion Monster",
    "Synchro Pendulum Effect Monster",
    "XYZ Pendulum Effect Monster",
)

CARD_TYPES = (
    "Normal Monster",
    "Effect Monster",
    "Ritual Monster",
    "Fusion Monster",
    "Synchro Monster",
    "XYZ Monster",
    "Pendulum Monster",
    "Link Monster",
    "Spell Card",
    "Trap Card",
)

ATTRIBUTES = ("DARK", "DIVINE", "EARTH", "FIRE", "LIGHT", "WATER", "WIND")

ATTRIBUTE_COLORS = {
    "DARK": "#581C87",
    "LIGHT": "#FEF08A",
    "EARTH": "#854D0E",
    "WATER": "#1D4ED8",
    "FIRE": "#DC2626",
    "WIND": "#16A34A",
    "DIVINE": "#FBBF24",
}

MONSTER_TYPES = (
    "Aqua", "Beast", "Beast-Warrior", "Cyberse", "Dinosaur", "Divine-Beast",
    "Dragon", "Fairy", "Fiend", "Fish", "Insect", "Machine", "Plant",
    "Psychic", "Pyro", "Reptile", "Rock", "Sea Serpent", "Spellcaster",
    "Thunder", "Warrior", "Winged Beast", "Wyrm", "Zombie",
)  # fmt: skip


def is_extra_deck(card: CardLike) -> bool:
    return any(extra in card.type for extra in EXTRA_DECK_TYPES)


is_monster = type_has("monster")
is_spell = type_has("spell")
is_trap = type_has("trap")


def _is_monster_with(word: str):
    has_word = type_has(word)
    return lambda card: has_word(card) and is_monster(card)


def _format_stat(value: float | None) -> str:
    if value is None or value == -1:
        return "?"
    return str(int(value))


def atk_def_display(card: CardLike) -> str:
    atk = number(card, "atk")
    if atk is None:
        return ""
    defense = number(card, "def")
    if defense is None:
        return f"{_format_stat(atk)} / LINK"
    return f"{_format_stat(atk)} / {_format_stat(defense)}"


def level_display(card: CardLike) -> str:
    """Level, Rank (XYZ) or Link rating."""
    linkval = number(card, "linkval")
    if linkval:
        return f"Link {int(linkval)}"
    level = number(card, "level")
    if not level:
        return ""
    if "XYZ" in card.type:
        return f"Rank {int(level)}"
    return f"Lv {int(level)}"


def generate_ydk(cards: Sequence[CardLike], _zones: Sequence[DeckZone]) -> str:
    """
    Build a YDK deck file.

    Cards with a zone hint go to that zone; the rest are split between the
    main and extra decks by type.
    """
    main: list[str] = []
    extra: list[str] = []
    side: list[str] = []
    for card in cards:
        zone = zone_of(card)
        if zone == "side":
            side.append(str(card.id))
        elif zone == "extra" or (zone != "main" and is_extra_deck(card)):
            extra.append(str(card.id))
        else:
            main.append(str(card.id))
    lines = ["#created by CubeCraft", "#main", *main, "#extra", *extra, "!side", *side]
    return "\n".join(lines) + "\n"


def image_url(card: CardLike, size: ImageSize) -> str:
    if size == "sm":
        return f"/images/cards_small/{card.id}.jpg"
    return f"/images/cards/{card.id}.jpg"


FILTER_GROUPS = (
    FilterGroup(
        id="monsterType",
        label="Monster Type",
        options=(
            FilterGroupOption("normal", "Normal", type_has("normal monster"), "#FDE68A"),
            FilterGroupOption("effect", "Effect", _is_monster_with("effect"), "#FF8B53"),
            FilterGroupOption("ritual", "Ritual", _is_monster_with("ritual"), "#9FC5E8"),
            FilterGroupOption("fusion", "Fusion", type_has("fusion"), "#A855F7"),
            FilterGroupOption("synchro", "Synchro", type_has("synchro"), "#FFFFFF"),
            FilterGroupOption("xyz", "XYZ", type_has("xyz"), "#1F1F1F"),
            FilterGroupOption("pendulum", "Pendulum", type_has("pendulum"), "#22D3EE"),
            FilterGroupOption("link", "Link", type_has("link"), "#3B82F6"),
            FilterGroupOption("tuner", "Tuner", type_has("tuner"), "#FBBF24"),
        ),
    ),
    FilterGroup(
        id="attribute",
        label="Attribute",
        options=tuple(
            FilterGroupOption(name, name, attr_equals("attribute", name), ATTRIBUTE_COLORS[name])
            for name in ("DARK", "LIGHT", "EARTH", "WATER", "FIRE", "WIND", "DIVINE")
        ),
    ),
    FilterGroup(
        id="race",
        label="Type",
        options=tuple(
            FilterGroupOption(
                race.lower().replace("-", "_").replace(" ", "_"),
                race,
                attr_equals("race", race),
            )
            for race in MONSTER_TYPES
        ),
    ),
    FilterGroup(
        id="level",
        label="Level/Rank",
        type="range",
        range=RangeConfig(
            min=1,
            max=12,
            get_value=lambda card: number(card, "level"),
            format_value=lambda value: f"Lv {int(value)}",
        ),
    ),
)


YUGIOH_CONFIG = GameConfig(
    id="yugioh",
    name="Yu-Gi-Oh!",
    short_name="YGO",
    theme=GameTheme(
        primary_color="#fbbf24",
        accent_color="#7c3aed",
        background_color="#0a0a0f",
        card_back_image="/card-back.jpg",
    ),
    deck_zones=(
        DeckZone("main", "Main Deck", lambda card: not is_extra_deck(card), 40, 60),
        DeckZone("extra", "Extra Deck", is_extra_deck, 0, 15),
        # Cards only land in the side deck through a zone hint
        DeckZone("side", "Side Deck", lambda card: False, 0, 15),
    ),
    classifiers=CardClassifiers(
        is_extra_deck=is_extra_deck,
        is_creature=is_monster,
        is_spell=is_spell,
        is_trap=is_trap,
    ),
    get_image_url=image_url,
    card_types=CARD_TYPES,
    card_attributes=ATTRIBUTES,
    display=CardDisplay(
        primary_stats=(CardStat("ATK/DEF", atk_def_display, "text-white"),),
        secondary_info=(
            CardStat("Level", level_display, "text-yellow-400"),
            CardStat("Attribute", lambda card: attr(card, "attribute", ""), "text-gray-300"),
            CardStat("Type", lambda card: attr(card, "race", ""), "text-gray-400"),
        ),
        indicators=(CardIndicator(is_extra_deck, "#7c3aed", "Extra Deck"),),
        detail_fields=(
            CardStat("ATK", lambda card: _format_stat(number(card, "atk")), "text-red-400"),
            CardStat(
                "DEF",
                lambda card: (
                    "LINK" if number(card, "def") is None else _format_stat(number(card, "def"))
                ),
                "text-blue-400",
            ),
        ),
    ),
    filter_options=(
        FilterOption("monsters", "Monsters", is_monster),
        FilterOption("spells", "Spells", is_spell),
        FilterOption("traps", "Traps", is_trap),
        FilterOption("main", "Main Deck", lambda card: not is_extra_deck(card)),
        FilterOption("extra", "Extra Deck", is_extra_deck),
    ),
    filter_groups=FILTER_GROUPS,
    sort_options=(
        SortOption("type", "Type", lambda card: card.type.casefold()),
        SortOption(
            "level",
            "Level",
            lambda card: number(card, "level") or 0,
            descending_default=True,
            group_by_category=True,
        ),
        SortOption(
            "atk",
            "ATK",
            lambda card: number(card, "atk") if number(card, "atk") is not None else -1,
            descending_default=True,
            group_by_category=True,
        ),
        SortOption(
            "def",
            "DEF",
            lambda card: number(card, "def") if number(card, "def") is not None else -1,
            descending_default=True,
            group_by_category=True,
        ),
    ),
    export_formats=(ExportFormat("ydk", "YDK (YGOPro/EDOPro)", ".ydk", generate_ydk),),
    storage_key_prefix="yugioh-draft",
)
