"""
Card filter and sort pipeline.

Applies a FilterRequest to a list of cards under a game's configuration.
Stages run in a fixed order, each only ever removing cards:

1. Text search over name, type and description
2. Legacy single-select filter option
3. Tier selection
4. Multi-select filter groups (OR within a group, AND across groups)
5. Range filter groups (inclusive bounds; cards without a value are excluded)
6. Sort (stable)

Unknown group, option, tier and sort ids are ignored rather than rejected,
so a request built for one game degrades gracefully under another.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from cubecraft.models.card import CardLike
from cubecraft.models.filter_request import ALL_FILTER, FilterRequest
from cubecraft.models.game_config import FilterGroup, GameConfig, SortOption
from cubecraft.services.tiers import UNSCORED, tier_labels, tier_of

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=CardLike)

# Sorts every game supports in addition to its own
BUILTIN_SORTS = (
    SortOption("name", "Name", lambda card: card.name.casefold()),
    SortOption(
        "score",
        "Score",
        lambda card: card.score if card.score is not None else 0,
        descending_default=True,
    ),
)

# Keeps incoming order (e.g., draft pick order) regardless of direction
PICK_SORT = "pick"


@dataclass
class FilterMetrics:
    """Card counts after each stage of one pipeline run."""

    total_cards: int = 0
    after_search: int = 0
    after_filter_option: int = 0
    after_tiers: int = 0
    after_groups: int = 0
    after_ranges: int = 0


def available_sorts(config: GameConfig) -> list[SortOption]:
    """Game sorts plus the built-in ones, game definitions taking precedence."""
    sorts = {option.id: option for option in BUILTIN_SORTS}
    sorts.update({option.id: option for option in config.sort_options})
    return list(sorts.values())


def _matches_search(card: CardLike, needle: str) -> bool:
    return (
        needle in card.name.casefold()
        or needle in card.type.casefold()
        or needle in (card.description or "").casefold()
    )


def _filter_by_search(items: list[tuple[int, C]], search: str) -> list[tuple[int, C]]:
    needle = search.strip().casefold()
    if not needle:
        return items
    return [(index, card) for index, card in items if _matches_search(card, needle)]


def _filter_by_option(
    items: list[tuple[int, C]], option_id: str, config: GameConfig
) -> list[tuple[int, C]]:
    if option_id == ALL_FILTER:
        return items
    option = config.filter_option(option_id)
    if option is None:
        return items
    return [(index, card) for index, card in items if option.predicate(card)]


def _filter_by_tiers(
    items: list[tuple[int, C]], request: FilterRequest
) -> list[tuple[int, C]]:
    if not request.tiers:
        return items
    known = set(tier_labels(request.tier_scheme)) | {UNSCORED}
    selected = request.tiers & known
    if not selected:
        return items
    return [
        (index, card)
        for index, card in items
        if tier_of(card.score, request.tier_scheme) in selected
    ]


def _filter_by_group(
    items: list[tuple[int, C]], group: FilterGroup, selected: frozenset[str]
) -> list[tuple[int, C]]:
    options = [option for option in (group.option(option_id) for option_id in selected) if option]
    if not options:
        return items
    return [
        (index, card)
        for index, card in items
        if any(option.predicate(card) for option in options)
    ]


def _filter_by_range(
    items: list[tuple[int, C]], group: FilterGroup, bounds: tuple[float, float]
) -> list[tuple[int, C]]:
    if group.range is None:
        return items
    low, high = bounds
    result = []
    for index, card in items:
        value = group.range.get_value(card)
        if value is not None and low <= value <= high:
            result.append((index, card))
    return result


def _sort(items: list[tuple[int, C]], request: FilterRequest, config: GameConfig) -> None:
    if request.sort_by == PICK_SORT:
        return
    sorts = {option.id: option for option in available_sorts(config)}
    option = sorts.get(request.sort_by, sorts["name"])
    items.sort(key=lambda item: option.key(item[1]), reverse=request.descending)
    if option.group_by_category:
        # Stable second pass keeps the key order within each category
        items.sort(key=lambda item: config.classifiers.category_of(item[1]))


def apply_filters_indexed(
    cards: Sequence[C], request: FilterRequest, config: GameConfig
) -> list[tuple[int, C]]:
    """
    Run the pipeline, keeping each card's position in the input.

    Returns:
        (input index, card) pairs in result order.
    """
    metrics = FilterMetrics(total_cards=len(cards))
    items = list(enumerate(cards))

    items = _filter_by_search(items, request.search)
    metrics.after_search = len(items)

    items = _filter_by_option(items, request.filter_option, config)
    metrics.after_filter_option = len(items)

    items = _filter_by_tiers(items, request)
    metrics.after_tiers = len(items)

    for group in config.filter_groups:
        selected = request.selections.get(group.id)
        if group.type != "range" and selected:
            items = _filter_by_group(items, group, selected)
    metrics.after_groups = len(items)

    for group in config.filter_groups:
        bounds = request.ranges.get(group.id)
        if group.type == "range" and bounds is not None:
            items = _filter_by_range(items, group, bounds)
    metrics.after_ranges = len(items)

    _sort(items, request, config)

    logger.info(
        "card_filter_applied",
        extra={
            "game_id": config.id,
            "total": metrics.total_cards,
            "after_search": metrics.after_search,
            "after_filter_option": metrics.after_filter_option,
            "after_tiers": metrics.after_tiers,
            "after_groups": metrics.after_groups,
            "final": metrics.after_ranges,
            "sort_by": request.sort_by,
        },
    )
    return items


def apply_filters(cards: Sequence[C], request: FilterRequest, config: GameConfig) -> list[C]:
    """Filter and sort cards; the input sequence is left untouched."""
    return [card for _, card in apply_filters_indexed(cards, request, config)]
