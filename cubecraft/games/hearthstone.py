"""Hearthstone game configuration, including deck code encoding."""

import base64
from collections import Counter
from collections.abc import Sequence

from cubecraft.games.common import always, attr, attr_equals, count_list, number
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
    GameConfig,
    GameTheme,
    ImageSize,
    PileGroup,
    RangeConfig,
    SortOption,
)

CLASSES = (
    "NEUTRAL",
    "DEATHKNIGHT",
    "DEMONHUNTER",
    "DRUID",
    "HUNTER",
    "MAGE",
    "PALADIN",
    "PRIEST",
    "ROGUE",
    "SHAMAN",
    "WARLOCK",
    "WARRIOR",
)

HERO_DBF_IDS = {
    "DEATHKNIGHT": 78065,
    "DEMONHUNTER": 56550,
    "DRUID": 274,
    "HUNTER": 31,
    "MAGE": 637,
    "PALADIN": 671,
    "PRIEST": 813,
    "ROGUE": 930,
    "SHAMAN": 1066,
    "WARLOCK": 893,
    "WARRIOR": 7,
}

CLASS_COLORS = {
    "NEUTRAL": "#808080",
    "DEATHKNIGHT": "#C41E3A",
    "DEMONHUNTER": "#A330C9",
    "DRUID": "#FF7C0A",
    "HUNTER": "#AAD372",
    "MAGE": "#3FC7EB",
    "PALADIN": "#F48CBA",
    "PRIEST": "#FFFFFF",
    "ROGUE": "#FFF468",
    "SHAMAN": "#0070DD",
    "WARLOCK": "#8788EE",
    "WARRIOR": "#C69B6D",
}

RARITY_ORDER = {"FREE": 0, "COMMON": 1, "RARE": 2, "EPIC": 3, "LEGENDARY": 4}

RARITY_COLORS = {
    "FREE": "#9d9d9d",
    "COMMON": "#ffffff",
    "RARE": "#0070dd",
    "EPIC": "#a335ee",
    "LEGENDARY": "#ff8000",
}

DEFAULT_HERO_CLASS = "MAGE"

is_minion = attr_equals("cardType", "MINION")
is_spell = attr_equals("cardType", "SPELL")


def card_class(card: CardLike) -> str:
    return attr(card, "cardClass") or "NEUTRAL"


def mana_cost(card: CardLike) -> float | None:
    return number(card, "cost")


def encode_varint(value: int) -> bytes:
    """Unsigned LEB128, as used by Hearthstone deck codes."""
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def dominant_class(cards: Sequence[CardLike]) -> str:
    """Most common non-neutral class; the first one seen wins ties."""
    counts = Counter(card_class(card) for card in cards if card_class(card) != "NEUTRAL")
    if not counts:
        return DEFAULT_HERO_CLASS
    return counts.most_common(1)[0][0]


def generate_deck_code(cards: Sequence[CardLike], hero_class: str) -> str:
    """
    Encode cards as a Hearthstone deck code (Wild format, one hero).

    Cards without a dbfId cannot be represented and are skipped.
    """
    hero_dbf_id = HERO_DBF_IDS.get(hero_class, HERO_DBF_IDS[DEFAULT_HERO_CLASS])
    counts: Counter[int] = Counter()
    for card in cards:
        dbf_id = attr(card, "dbfId")
        if dbf_id:
            counts[int(dbf_id)] += 1

    singles = sorted(dbf_id for dbf_id, count in counts.items() if count == 1)
    doubles = sorted(dbf_id for dbf_id, count in counts.items() if count == 2)
    multiples = sorted((dbf_id, count) for dbf_id, count in counts.items() if count > 2)

    # reserved, version, format (1 = Wild), hero count
    payload = bytearray([0, 1, 1, 1])
    payload += encode_varint(hero_dbf_id)
    payload += encode_varint(len(singles))
    for dbf_id in singles:
        payload += encode_varint(dbf_id)
    payload += encode_varint(len(doubles))
    for dbf_id in doubles:
        payload += encode_varint(dbf_id)
    payload += encode_varint(len(multiples))
    for dbf_id, count in multiples:
        payload += encode_varint(dbf_id)
        payload += encode_varint(count)
    return base64.b64encode(bytes(payload)).decode("ascii")


def generate_deck_code_export(cards: Sequence[CardLike], _zones: Sequence[DeckZone]) -> str:
    hero_class = dominant_class(cards)
    code = generate_deck_code(cards, hero_class)
    return (
        "### CubeCraft Draft Deck\n"
        f"# Class: {hero_class}\n"
        "# Format: Wild\n"
        "#\n"
        f"{code}\n"
        "#\n"
        "# Generated by CubeCraft"
    )


def generate_card_list(cards: Sequence[CardLike], _zones: Sequence[DeckZone]) -> str:
    return count_list(cards, lambda card, count: f"{count}x {card.name}", sort_by_name=True)


def image_url(card: CardLike, size: ImageSize) -> str:
    explicit = getattr(card, "image_url", None)
    if explicit:
        if size == "sm" and "/512x/" in explicit:
            return explicit.replace("/512x/", "/256x/")
        return explicit
    hs_card_id = attr(card, "hsCardId") or card.id
    resolution = "256x" if size == "sm" else "512x"
    return f"https://art.hearthstonejson.com/v1/render/latest/enUS/{resolution}/{hs_card_id}.png"


def _cost_pile(cost: int) -> PileGroup:
    return PileGroup(str(cost), str(cost), lambda card: mana_cost(card) == cost, cost)


PILE_GROUPS = (
    *(_cost_pile(cost) for cost in range(7)),
    PileGroup("7+", "7+", lambda card: (mana_cost(card) or 0) >= 7, 7),
)


FILTER_GROUPS = (
    FilterGroup(
        id="cardType",
        label="Type",
        options=(
            FilterGroupOption("minion", "Minion", is_minion),
            FilterGroupOption("spell", "Spell", is_spell),
            FilterGroupOption("weapon", "Weapon", attr_equals("cardType", "WEAPON")),
            FilterGroupOption("hero", "Hero", attr_equals("cardType", "HERO")),
        ),
    ),
    FilterGroup(
        id="cardClass",
        label="Class",
        options=tuple(
            FilterGroupOption(
                cls.lower(),
                cls.capitalize(),
                lambda card, cls=cls: card_class(card) == cls,
                CLASS_COLORS[cls],
            )
            for cls in CLASSES
        ),
    ),
    FilterGroup(
        id="rarity",
        label="Rarity",
        options=tuple(
            FilterGroupOption(
                rarity.lower(), rarity.capitalize(), attr_equals("rarity", rarity), color
            )
            for rarity, color in RARITY_COLORS.items()
        ),
    ),
    FilterGroup(
        id="manaCost",
        label="Mana Cost",
        type="range",
        range=RangeConfig(
            min=0,
            max=10,
            get_value=mana_cost,
            format_value=lambda value: "10+" if value >= 10 else str(int(value)),
        ),
    ),
)


def _stat(key: str, suffix: str = ""):
    return lambda card: f"{attr(card, key)}{suffix}" if attr(card, key) is not None else ""


HEARTHSTONE_CONFIG = GameConfig(
    id="hearthstone",
    name="Hearthstone",
    short_name="HS",
    theme=GameTheme(
        primary_color="#FFB700",
        accent_color="#4A3C2D",
        background_color="#1a1612",
        card_back_image="/card-backs/hearthstone.jpg",
    ),
    deck_zones=(DeckZone("main", "Deck", always, 30, 30, copy_limit=2),),
    classifiers=CardClassifiers(is_creature=is_minion, is_spell=is_spell),
    get_image_url=image_url,
    card_types=("MINION", "SPELL", "WEAPON", "HERO"),
    card_attributes=CLASSES,
    display=CardDisplay(
        primary_stats=(
            CardStat("ATK", _stat("attack"), "text-yellow-400"),
            CardStat("HP", _stat("health"), "text-red-400"),
        ),
        secondary_info=(
            CardStat("Cost", _stat("cost", " Mana")),
            CardStat("Class", lambda card: card_class(card).capitalize()),
        ),
        indicators=(
            CardIndicator(lambda card: card_class(card) != "NEUTRAL", "bg-amber-500", "Class card"),
        ),
    ),
    filter_groups=FILTER_GROUPS,
    sort_options=(
        SortOption("cost", "Mana Cost", lambda card: mana_cost(card) or 0),
        SortOption(
            "rarity",
            "Rarity",
            lambda card: RARITY_ORDER.get(attr(card, "rarity") or "FREE", 0),
        ),
    ),
    export_formats=(
        ExportFormat("deckcode", "Deck Code", ".txt", generate_deck_code_export),
        ExportFormat("list", "Card List", ".txt", generate_card_list),
    ),
    pile_groups=PILE_GROUPS,
    storage_key_prefix="hs_",
)
