"""Magic: The Gathering game configuration."""

from collections.abc import Sequence

from cubecraft.games.common import always, attr, attr_contains, count_list, never, number, type_has
from cubecraft.models.card import CardLike
from cubecraft.models.game_config import (
    BasicResource,
    CardClassifiers,
    CardDisplay,
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

COLOR_NAMES = {"W": "White", "U": "Blue", "B": "Black", "R": "Red", "G": "Green"}

CARD_TYPES = ("Creature", "Instant", "Sorcery", "Enchantment", "Artifact", "Planeswalker", "Land")

SCRYFALL_SIZES = {"sm": "small", "md": "normal", "lg": "large"}

is_creature = type_has("creature")
is_land = type_has("land")
is_instant = type_has("instant")
is_sorcery = type_has("sorcery")


def is_spell(card: CardLike) -> bool:
    return is_instant(card) or is_sorcery(card)


def is_colorless(card: CardLike) -> bool:
    return not attr(card, "colors")


def is_multicolor(card: CardLike) -> bool:
    return len(attr(card, "colors") or ()) > 1


def power_toughness(card: CardLike) -> str:
    power = attr(card, "power")
    toughness = attr(card, "toughness")
    if power is None or toughness is None:
        return ""
    return f"{power}/{toughness}"


def colors_display(card: CardLike) -> str:
    colors = attr(card, "colors") or []
    if not colors:
        return "Colorless"
    return "/".join(COLOR_NAMES.get(color, color) for color in colors)


def generate_count_list(cards: Sequence[CardLike], _zones: Sequence[DeckZone]) -> str:
    return count_list(cards, lambda card, count: f"{count} {card.name}")


def image_url(card: CardLike, size: ImageSize) -> str:
    """Catalog URL if present, otherwise the Scryfall CDN path for the card."""
    explicit = getattr(card, "image_url", None)
    if explicit:
        return explicit
    scryfall_id = attr(card, "scryfallId")
    if not scryfall_id:
        return ""
    scryfall_size = SCRYFALL_SIZES.get(size, "normal")
    return (
        f"https://cards.scryfall.io/{scryfall_size}/front/"
        f"{scryfall_id[0]}/{scryfall_id[1]}/{scryfall_id}.jpg"
    )


def _basic_land(name: str, color: str, scryfall_id: str) -> BasicResource:
    return BasicResource(
        id=name.lower(),
        name=name,
        type=f"Basic Land - {name}",
        description=f"({{T}}: Add {{{color}}}.)",
        image_url=(
            f"https://cards.scryfall.io/normal/front/"
            f"{scryfall_id[0]}/{scryfall_id[1]}/{scryfall_id}.jpg"
        ),
        attributes={
            "manaCost": "",
            "cmc": 0,
            "colors": [],
            "colorIdentity": [color],
            "rarity": "common",
            "scryfallId": scryfall_id,
        },
    )


BASIC_LANDS = (
    _basic_land("Plains", "W", "fcabc17c-67ed-4865-befd-df53a9ca0a45"),
    _basic_land("Island", "U", "636c60e5-7a06-4cbc-bf51-0e4eb8d3c3c4"),
    _basic_land("Swamp", "B", "87173c55-25a6-4a4e-9d6b-1c7e3bb9e59b"),
    _basic_land("Mountain", "R", "66fd2d3d-0ec3-4f96-b7ed-d880d24c3a0c"),
    _basic_land("Forest", "G", "3cf23791-1b15-43ee-b81a-5fe068709bc1"),
)


FILTER_GROUPS = (
    FilterGroup(
        id="colors",
        label="Colors",
        options=(
            FilterGroupOption("W", "White", attr_contains("colors", "W"), "#F9FAF4"),
            FilterGroupOption("U", "Blue", attr_contains("colors", "U"), "#0E68AB"),
            FilterGroupOption("B", "Black", attr_contains("colors", "B"), "#150B00"),
            FilterGroupOption("R", "Red", attr_contains("colors", "R"), "#D3202A"),
            FilterGroupOption("G", "Green", attr_contains("colors", "G"), "#00733E"),
            FilterGroupOption("C", "Colorless", is_colorless, "#A0A0A0"),
            FilterGroupOption("M", "Multicolor", is_multicolor, "#CFB53B"),
        ),
    ),
    FilterGroup(
        id="cardTypes",
        label="Card Type",
        options=tuple(
            FilterGroupOption(name.lower(), name, type_has(name)) for name in CARD_TYPES
        ),
    ),
    FilterGroup(
        id="cmc",
        label="Mana Value",
        type="range",
        range=RangeConfig(
            min=0,
            max=16,
            get_value=lambda card: number(card, "cmc"),
            format_value=lambda value: str(int(value)),
        ),
    ),
)


MTG_CONFIG = GameConfig(
    id="mtg",
    name="Magic: The Gathering",
    short_name="MTG",
    theme=GameTheme(
        primary_color="#b91c1c",
        accent_color="#1e3a8a",
        background_color="#0f172a",
        card_back_image="/images/mtg-card-back.jpg",
    ),
    deck_zones=(
        DeckZone("main", "Main Deck", always, min_cards=40),
        DeckZone("side", "Sideboard", never, 0, 15),
    ),
    classifiers=CardClassifiers(is_creature=is_creature, is_spell=is_spell, is_land=is_land),
    get_image_url=image_url,
    card_types=CARD_TYPES,
    display=CardDisplay(
        primary_stats=(CardStat("P/T", power_toughness, "text-white"),),
        secondary_info=(
            CardStat("Mana", lambda card: attr(card, "manaCost", ""), "text-yellow-300"),
            CardStat("Colors", colors_display, "text-gray-300"),
        ),
        detail_fields=(
            CardStat("CMC", lambda card: str(attr(card, "cmc", "")), "text-blue-400"),
            CardStat("Rarity", lambda card: attr(card, "rarity", ""), "text-purple-400"),
        ),
    ),
    filter_options=(
        FilterOption("creatures", "Creatures", is_creature),
        FilterOption("spells", "Spells", is_spell),
        FilterOption("lands", "Lands", is_land),
    ),
    filter_groups=FILTER_GROUPS,
    sort_options=(
        SortOption("type", "Type", lambda card: card.type.casefold()),
        SortOption("cmc", "Mana Value", lambda card: number(card, "cmc") or 0),
    ),
    export_formats=(
        ExportFormat("arena", "MTG Arena", ".txt", generate_count_list),
        ExportFormat("mtgo", "MTGO", ".dec", generate_count_list),
    ),
    basic_resources=BASIC_LANDS,
    storage_key_prefix="mtg-draft",
)
