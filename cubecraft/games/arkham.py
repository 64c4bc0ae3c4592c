"""Arkham Horror: The Card Game configuration."""

from collections.abc import Sequence

from cubecraft.games.common import always, attr, attr_equals, grouped_counts, number
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

FACTION_COLORS = {
    "guardian": "#2B80C5",
    "seeker": "#EC8426",
    "rogue": "#107116",
    "mystic": "#4331B9",
    "survivor": "#CC3038",
    "neutral": "#808080",
    "mythos": "#000000",
}

CARD_TYPES = ("Asset", "Event", "Skill")

# Cost value ArkhamDB uses for "X"
X_COST = -2

SKILL_ICONS = (
    ("skill_willpower", "W"),
    ("skill_intellect", "I"),
    ("skill_combat", "C"),
    ("skill_agility", "A"),
    ("skill_wild", "?"),
)

is_asset = attr_equals("type_code", "asset")
is_event = attr_equals("type_code", "event")
is_skill = attr_equals("type_code", "skill")


def has_faction(faction: str):
    return lambda card: faction in (attr(card, "faction_code"), attr(card, "faction2_code"))


def xp(card: CardLike) -> int:
    return int(number(card, "xp") or 0)


def playable_cost(card: CardLike) -> float | None:
    """Printed cost; X, free and missing costs have no value."""
    cost = number(card, "cost")
    if cost is None or cost < 0:
        return None
    return cost


def arkham_code(card: CardLike) -> str:
    return str(attr(card, "code") or card.id)


def cost_display(card: CardLike) -> str:
    cost = number(card, "cost")
    if cost is None:
        return ""
    if cost == X_COST:
        return "X"
    return str(int(cost))


def faction_display(card: CardLike) -> str:
    factions = [attr(card, "faction_code"), attr(card, "faction2_code")]
    return "/".join(faction.capitalize() for faction in factions if faction)


def skill_icons(card: CardLike) -> str:
    icons = []
    for key, symbol in SKILL_ICONS:
        value = attr(card, key)
        if value:
            icons.append(f"{symbol}:{value}")
    return " ".join(icons)


def generate_arkhamdb(cards: Sequence[CardLike], _zones: Sequence[DeckZone]) -> str:
    """One "<count>x <name> (<code>)" line per distinct ArkhamDB code."""
    counts: dict[str, list] = {}
    for card, count in grouped_counts(cards):
        code = arkham_code(card)
        if code in counts:
            counts[code][1] += count
        else:
            counts[code] = [card, count]
    return "\n".join(f"{count}x {card.name} ({code})" for code, (card, count) in counts.items())


def image_url(card: CardLike, _size: ImageSize) -> str:
    return f"https://arkhamdb.com/bundles/cards/{arkham_code(card)}.png"


FILTER_GROUPS = (
    FilterGroup(
        id="faction",
        label="Faction",
        options=tuple(
            FilterGroupOption(faction, faction.capitalize(), has_faction(faction), color)
            for faction, color in FACTION_COLORS.items()
            if faction != "mythos"
        ),
    ),
    FilterGroup(
        id="type",
        label="Type",
        options=(
            FilterGroupOption("asset", "Asset", is_asset),
            FilterGroupOption("event", "Event", is_event),
            FilterGroupOption("skill", "Skill", is_skill),
        ),
    ),
    FilterGroup(
        id="level",
        label="Level",
        options=(
            FilterGroupOption("level0", "Level 0", lambda card: xp(card) == 0),
            FilterGroupOption("level1-2", "Level 1-2", lambda card: 1 <= xp(card) <= 2),
            FilterGroupOption("level3+", "Level 3+", lambda card: xp(card) >= 3),
        ),
    ),
    FilterGroup(
        id="cost",
        label="Cost",
        type="range",
        range=RangeConfig(
            min=0, max=10, get_value=playable_cost, format_value=lambda v: str(int(v))
        ),
    ),
)


ARKHAM_CONFIG = GameConfig(
    id="arkham",
    name="Arkham Horror LCG",
    short_name="AHLCG",
    theme=GameTheme(
        primary_color="#1a472a",
        accent_color="#4a3728",
        background_color="#0d1117",
        card_back_image="/images/arkham-card-back.jpg",
    ),
    deck_zones=(DeckZone("main", "Deck", always, 30, 50, copy_limit=2),),
    classifiers=CardClassifiers(),
    get_image_url=image_url,
    card_types=CARD_TYPES,
    display=CardDisplay(
        primary_stats=(CardStat("XP", lambda card: f"Level {xp(card)}", "text-yellow-400"),),
        secondary_info=(
            CardStat("Cost", cost_display, "text-blue-300"),
            CardStat("Faction", faction_display, "text-gray-300"),
        ),
        indicators=(
            CardIndicator(lambda card: bool(attr(card, "is_unique")), "#FFD700", "Unique"),
            CardIndicator(lambda card: bool(attr(card, "permanent")), "#9370DB", "Permanent"),
        ),
        detail_fields=(
            CardStat("Skills", skill_icons, "text-green-400"),
            CardStat("Slot", lambda card: attr(card, "slot", ""), "text-purple-400"),
            CardStat("Traits", lambda card: attr(card, "traits", ""), "text-gray-400"),
        ),
    ),
    filter_options=(
        FilterOption("assets", "Assets", is_asset),
        FilterOption("events", "Events", is_event),
        FilterOption("skills", "Skills", is_skill),
    ),
    filter_groups=FILTER_GROUPS,
    sort_options=(
        SortOption("type", "Type", lambda card: card.type.casefold()),
        SortOption("faction", "Faction", lambda card: attr(card, "faction_code") or ""),
        SortOption(
            "cost",
            "Cost",
            lambda card: number(card, "cost") if number(card, "cost") is not None else 99,
        ),
        SortOption("xp", "XP Level", xp),
    ),
    export_formats=(ExportFormat("arkhamdb", "ArkhamDB", ".txt", generate_arkhamdb),),
    storage_key_prefix="arkham-draft",
)
