"""
Per-game configuration contract.

Every supported card game is described by one GameConfig record: its deck
zones, how cards are classified, which filters and sorts apply, how images
resolve and which export formats exist. The rest of the engine only talks
to games through this record.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from cubecraft.models.card import CardLike

CardPredicate = Callable[[CardLike], bool]
ValueExtractor = Callable[[CardLike], float | None]
ImageSize = Literal["sm", "md", "lg"]

FilterGroupType = Literal["multi-select", "single-select", "range"]


@dataclass(frozen=True, slots=True)
class DeckZone:
    """
    A named section of a deck.

    Attributes:
        id: Zone identifier (e.g., "main", "extra", "side")
        name: Display name
        belongs_to: Whether a card is placed here automatically
        min_cards: Minimum legal size, None for no bound
        max_cards: Maximum legal size, None for no bound
        copy_limit: Max copies of one card in this zone, None for unlimited
    """

    id: str
    name: str
    belongs_to: CardPredicate
    min_cards: int | None = None
    max_cards: int | None = None
    copy_limit: int | None = None


@dataclass(frozen=True, slots=True)
class CardClassifiers:
    """
    Capability table of card predicates.

    A game only sets the predicates that make sense for it; an absent
    predicate answers False for every card.
    """

    is_extra_deck: CardPredicate | None = None
    is_creature: CardPredicate | None = None
    is_spell: CardPredicate | None = None
    is_trap: CardPredicate | None = None
    is_land: CardPredicate | None = None
    is_pokemon: CardPredicate | None = None
    is_trainer: CardPredicate | None = None
    is_energy: CardPredicate | None = None

    def check(self, capability: str, card: CardLike) -> bool:
        predicate = getattr(self, capability, None)
        if predicate is None:
            return False
        return bool(predicate(card))

    def category_of(self, card: CardLike) -> int:
        """Rank used to group cards: creatures, spells, traps, then everything else."""
        if self.check("is_creature", card):
            return 0
        if self.check("is_spell", card):
            return 1
        if self.check("is_trap", card):
            return 2
        return 3


@dataclass(frozen=True, slots=True)
class FilterOption:
    """Legacy single-select filter (e.g., "Monsters", "Lands")."""

    id: str
    label: str
    predicate: CardPredicate


@dataclass(frozen=True, slots=True)
class FilterGroupOption:
    """One selectable value of a multi-select filter group."""

    id: str
    label: str
    predicate: CardPredicate
    color: str | None = None


@dataclass(frozen=True, slots=True)
class RangeConfig:
    """Bounds and value extraction for a range filter group."""

    min: float
    max: float
    get_value: ValueExtractor
    step: float = 1
    format_value: Callable[[float], str] | None = None


@dataclass(frozen=True, slots=True)
class FilterGroup:
    """
    A game-specific filtering dimension.

    Attributes:
        id: Group identifier used as the key in filter requests
        label: Display label
        type: "multi-select", "single-select" or "range"
        options: Selectable options (select types only)
        range: Range bounds and extractor (range type only)
        collapsed: Whether the group starts collapsed in a UI
    """

    id: str
    label: str
    type: FilterGroupType = "multi-select"
    options: tuple[FilterGroupOption, ...] = ()
    range: RangeConfig | None = None
    collapsed: bool = False

    def option(self, option_id: str) -> FilterGroupOption | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


@dataclass(frozen=True, slots=True)
class SortOption:
    """
    A named ordering.

    Attributes:
        id: Sort identifier
        label: Display label
        key: Sort key extractor; must return comparable values for every card
        descending_default: Direction a UI should pick when selecting this sort
        group_by_category: Order creatures, spells, traps, other before the key
    """

    id: str
    label: str
    key: Callable[[CardLike], Any]
    descending_default: bool = False
    group_by_category: bool = False


@dataclass(frozen=True, slots=True)
class CardStat:
    """A labelled value shown on or beside a card."""

    label: str
    get_value: Callable[[CardLike], str | None]
    color: str | None = None


@dataclass(frozen=True, slots=True)
class CardIndicator:
    """A visual marker shown when its predicate holds."""

    show: CardPredicate
    color: str
    tooltip: str | None = None


@dataclass(frozen=True, slots=True)
class CardDisplay:
    primary_stats: tuple[CardStat, ...] = ()
    secondary_info: tuple[CardStat, ...] = ()
    indicators: tuple[CardIndicator, ...] = ()
    detail_fields: tuple[CardStat, ...] = ()


@dataclass(frozen=True, slots=True)
class GameTheme:
    primary_color: str
    accent_color: str
    background_color: str | None = None
    card_back_image: str | None = None


ExportGenerator = Callable[[Sequence[CardLike], Sequence[DeckZone]], str]


@dataclass(frozen=True, slots=True)
class ExportFormat:
    """A deck export format (e.g., YDK, MTG Arena list, Hearthstone deck code)."""

    id: str
    name: str
    extension: str
    generate: ExportGenerator


@dataclass(frozen=True, slots=True)
class BasicResource:
    """A freely available card such as an MTG basic land."""

    id: str | int
    name: str
    type: str
    description: str = ""
    image_url: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PileGroup:
    """A stack in pile view, ordered by `order`."""

    id: str
    label: str
    matches: CardPredicate
    order: int


@dataclass(frozen=True, slots=True)
class GameConfig:
    """
    Everything the engine needs to know about one card game.

    Attributes:
        id: Registry key (e.g., "yugioh", "mtg")
        name: Full display name
        short_name: Abbreviation (e.g., "YGO", "MTG")
        theme: Colors and artwork
        deck_zones: Ordered deck sections; the first is the main deck
        classifiers: Card capability predicates
        get_image_url: Resolves an image URL for a card at a size
        card_types: Known type names for this game
        card_attributes: Attribute keys cards of this game carry
        display: How cards are rendered
        filter_options: Legacy single-select filters
        filter_groups: Multi-select and range filter groups
        sort_options: Available sorts
        export_formats: Deck export formats
        basic_resources: Freely available cards (e.g., basic lands)
        pile_groups: Stacks for pile view
        storage_key_prefix: Namespace for client-side storage
    """

    id: str
    name: str
    short_name: str
    theme: GameTheme
    deck_zones: tuple[DeckZone, ...]
    classifiers: CardClassifiers
    get_image_url: Callable[[CardLike, ImageSize], str]
    card_types: tuple[str, ...] = ()
    card_attributes: tuple[str, ...] = ()
    display: CardDisplay = field(default_factory=CardDisplay)
    filter_options: tuple[FilterOption, ...] = ()
    filter_groups: tuple[FilterGroup, ...] = ()
    sort_options: tuple[SortOption, ...] = ()
    export_formats: tuple[ExportFormat, ...] = ()
    basic_resources: tuple[BasicResource, ...] = ()
    pile_groups: tuple[PileGroup, ...] = ()
    storage_key_prefix: str = ""

    @property
    def main_zone(self) -> DeckZone:
        return self.deck_zones[0]

    @property
    def default_duplicate_limit(self) -> int | None:
        """Copy limit a new cube for this game starts with."""
        return self.main_zone.copy_limit

    def zone(self, zone_id: str) -> DeckZone | None:
        for zone in self.deck_zones:
            if zone.id == zone_id:
                return zone
        return None

    def filter_group(self, group_id: str) -> FilterGroup | None:
        for group in self.filter_groups:
            if group.id == group_id:
                return group
        return None

    def filter_option(self, option_id: str) -> FilterOption | None:
        for option in self.filter_options:
            if option.id == option_id:
                return option
        return None

    def sort_option(self, sort_id: str) -> SortOption | None:
        for option in self.sort_options:
            if option.id == sort_id:
                return option
        return None

    def export_format(self, format_id: str) -> ExportFormat | None:
        for export_format in self.export_formats:
            if export_format.id == format_id:
                return export_format
        return None
