"""Pokemon TCG game configuration."""

from collections.abc import Sequence

from cubecraft.games.common import always, attr, attr_equals, grouped_counts, number, type_has
from cubecraft.models.card import CardLike
from cubecraft.models.game_config import (
    BasicResource,
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

ENERGY_COLORS = {
    "Grass": "#78C850",
    "Fire": "#F08030",
    "Water": "#6890F0",
    "Lightning": "#F8D030",
    "Psychic": "#F85888",
    "Fighting": "#C03028",
    "Darkness": "#705848",
    "Metal": "#B8B8D0",
    "Dragon": "#7038F8",
    "Fairy": "#EE99AC",
    "Colorless": "#A8A878",
}

CARD_TYPES = (
    "Pokemon - Basic",
    "Pokemon - Stage 1",
    "Pokemon - Stage 2",
    "Pokemon - V",
    "Pokemon - VMAX",
    "Pokemon - ex",
    "Trainer",
    "Energy - Basic",
    "Energy - Special",
)

ENERGY_TYPES = tuple(ENERGY_COLORS)

# Basic energy from Sun & Moon base set, numbered 164-172
BASIC_ENERGY_TYPES = (
    "Grass", "Fire", "Water", "Lightning", "Psychic", "Fighting", "Darkness", "Metal", "Fairy",
)  # fmt: skip


def is_pokemon(card: CardLike) -> bool:
    card_type = card.type.lower()
    return "pokemon" in card_type or "pokémon" in card_type


is_trainer = type_has("trainer")
is_energy = type_has("energy")


def _stage_check(stage: str):
    lowered = stage.lower()

    def check(card: CardLike) -> bool:
        return is_pokemon(card) and (
            attr(card, "stage") == stage or lowered in card.type.lower()
        )

    return check


is_basic_pokemon = _stage_check("Basic")
is_stage1_pokemon = _stage_check("Stage 1")
is_stage2_pokemon = _stage_check("Stage 2")


def is_special_pokemon(card: CardLike) -> bool:
    card_type = card.type.lower()
    return " v" in card_type or "vmax" in card_type or " ex" in card_type


def generate_ptcgo(cards: Sequence[CardLike], _zones: Sequence[DeckZone]) -> str:
    """One "<count> <name> <set> <number>" line per card."""
    lines = []
    for card, count in grouped_counts(cards):
        set_id = attr(card, "setId") or "UNK"
        set_number = attr(card, "setNumber") or "0"
        lines.append(f"{count} {card.name} {set_id} {set_number}")
    return "\n".join(lines)


def image_url(card: CardLike, size: ImageSize) -> str:
    explicit = getattr(card, "image_url", None)
    if explicit:
        return explicit
    set_id = attr(card, "setId")
    set_number = attr(card, "setNumber")
    if not set_id or not set_number:
        return ""
    number_only = str(set_number).split("/")[0]
    if size == "lg":
        return f"https://images.pokemontcg.io/{set_id}/{number_only}_hires.png"
    return f"https://images.pokemontcg.io/{set_id}/{number_only}.png"


BASIC_ENERGY = tuple(
    BasicResource(
        id=f"{energy.lower()}-energy",
        name=f"{energy} Energy",
        type="Energy - Basic",
        description=f"Provides 1 {energy} Energy.",
        image_url=f"https://images.pokemontcg.io/sm1/{164 + offset}.png",
        attributes={
            "energyType": energy,
            "energyValue": 1,
            "setId": "sm1",
            "setNumber": str(164 + offset),
        },
    )
    for offset, energy in enumerate(BASIC_ENERGY_TYPES)
)


FILTER_GROUPS = (
    FilterGroup(
        id="energyType",
        label="Energy Type",
        options=tuple(
            FilterGroupOption(
                energy.lower(), energy, attr_equals("energyType", energy), ENERGY_COLORS[energy]
            )
            for energy in ENERGY_TYPES
        ),
    ),
    FilterGroup(
        id="stage",
        label="Stage",
        options=(
            FilterGroupOption("basic", "Basic", is_basic_pokemon, "#4ADE80"),
            FilterGroupOption("stage1", "Stage 1", is_stage1_pokemon, "#60A5FA"),
            FilterGroupOption("stage2", "Stage 2", is_stage2_pokemon, "#A78BFA"),
            FilterGroupOption("special", "V/VMAX/ex", is_special_pokemon, "#F472B6"),
        ),
    ),
    FilterGroup(
        id="hp",
        label="HP",
        type="range",
        range=RangeConfig(
            min=30,
            max=340,
            step=10,
            get_value=lambda card: number(card, "hp"),
            format_value=lambda value: f"{int(value)} HP",
        ),
    ),
)


def _retreat(card: CardLike) -> str:
    cost = attr(card, "retreatCost")
    return str(cost) if cost is not None else "None"


POKEMON_CONFIG = GameConfig(
    id="pokemon",
    name="Pokemon TCG",
    short_name="PKM",
    theme=GameTheme(
        primary_color="#FFCB05",
        accent_color="#2A75BB",
        background_color="#1a1a2e",
        card_back_image="/images/pokemon-card-back.jpg",
    ),
    deck_zones=(DeckZone("main", "Deck", always, 60, 60),),
    classifiers=CardClassifiers(
        is_creature=is_pokemon,
        is_pokemon=is_pokemon,
        is_trainer=is_trainer,
        is_energy=is_energy,
    ),
    get_image_url=image_url,
    card_types=CARD_TYPES,
    card_attributes=ENERGY_TYPES,
    display=CardDisplay(
        primary_stats=(
            CardStat(
                "HP",
                lambda card: f"{attr(card, 'hp')} HP" if attr(card, "hp") is not None else "",
                "text-red-400",
            ),
        ),
        secondary_info=(
            CardStat("Type", lambda card: attr(card, "energyType", ""), "text-yellow-300"),
            CardStat("Stage", lambda card: attr(card, "stage", ""), "text-gray-300"),
        ),
        indicators=(CardIndicator(is_basic_pokemon, "#4ade80", "Basic Pokemon"),),
        detail_fields=(
            CardStat("Weakness", lambda card: attr(card, "weakness") or "None", "text-red-400"),
            CardStat("Retreat", _retreat, "text-gray-400"),
        ),
    ),
    filter_options=(
        FilterOption("pokemon", "Pokemon", is_pokemon),
        FilterOption("trainers", "Trainers", is_trainer),
        FilterOption("energy", "Energy", is_energy),
        FilterOption("basic", "Basic Pokemon", is_basic_pokemon),
    ),
    filter_groups=FILTER_GROUPS,
    sort_options=(
        SortOption("type", "Type", lambda card: card.type.casefold()),
        SortOption("hp", "HP", lambda card: number(card, "hp") or 0, descending_default=True),
    ),
    export_formats=(ExportFormat("ptcgo", "PTCGO/TCG Live", ".txt", generate_ptcgo),),
    basic_resources=BASIC_ENERGY,
    storage_key_prefix="pokemon-draft",
)
