"""Predicates and helpers shared by the built-in game configurations."""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from cubecraft.models.card import CardLike
from cubecraft.models.game_config import CardPredicate


def attr(card: CardLike, key: str, default: Any = None) -> Any:
    """Read a game-specific attribute, falling back to `default`."""
    return card.attributes.get(key, default)


def number(card: CardLike, key: str) -> float | None:
    """Read a numeric attribute; missing or non-numeric values are None."""
    value = card.attributes.get(key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return value


def type_has(word: str) -> CardPredicate:
    """Predicate: the type line contains `word` (case-insensitive)."""
    needle = word.lower()
    return lambda card: needle in card.type.lower()


def attr_equals(key: str, value: Any) -> CardPredicate:
    return lambda card: card.attributes.get(key) == value


def attr_contains(key: str, value: Any) -> CardPredicate:
    """Predicate: list attribute `key` contains `value`."""

    def check(card: CardLike) -> bool:
        values = card.attributes.get(key) or ()
        return value in values

    return check


def never(_card: CardLike) -> bool:
    return False


def always(_card: CardLike) -> bool:
    return True


def zone_of(card: CardLike) -> str | None:
    """Zone hint carried by a cube copy, None for plain catalog cards."""
    return getattr(card, "zone", None)


def grouped_counts(cards: Iterable[CardLike]) -> list[tuple[CardLike, int]]:
    """Collapse copies into (first copy, count) pairs, in first-seen order."""
    counts: dict[str, list[Any]] = {}
    for card in cards:
        key = str(card.id)
        if key in counts:
            counts[key][1] += 1
        else:
            counts[key] = [card, 1]
    return [(card, count) for card, count in counts.values()]


def count_list(
    cards: Sequence[CardLike],
    line: Callable[[CardLike, int], str],
    sort_by_name: bool = False,
) -> str:
    """Render one line per distinct card, e.g. "4 Lightning Bolt"."""
    groups = grouped_counts(cards)
    if sort_by_name:
        groups.sort(key=lambda item: item[0].name.casefold())
    return "\n".join(line(card, count) for card, count in groups)
