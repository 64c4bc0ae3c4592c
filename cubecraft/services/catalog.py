"""
Card catalog providers.

A catalog answers "which Card is id X in game Y". The cube builder only
depends on the CardCatalog protocol; the JSON catalog reads one file per
game from the catalog directory and caches it after the first load.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol

from cubecraft.config import settings
from cubecraft.models.card import Card
from cubecraft.models.failure import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 50


class CardCatalog(Protocol):
    def get_card(self, game_id: str, card_id: str | int) -> Card: ...

    def search_cards(
        self, game_id: str, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[Card]: ...


def _search(cards: Iterable[Card], query: str, limit: int) -> list[Card]:
    needle = query.strip().casefold()
    results = []
    for card in cards:
        if not needle or needle in card.name.casefold():
            results.append(card)
            if len(results) >= limit:
                break
    return results


class InMemoryCardCatalog:
    """Catalog backed by dicts; used by tests and for bundled cube cards."""

    def __init__(self, cards_by_game: Mapping[str, Iterable[Card]] | None = None):
        self._cards: dict[str, dict[str, Card]] = {}
        for game_id, cards in (cards_by_game or {}).items():
            self.add_cards(game_id, cards)

    def add_cards(self, game_id: str, cards: Iterable[Card]) -> None:
        game_cards = self._cards.setdefault(game_id, {})
        for card in cards:
            game_cards[card.key] = card

    def clear(self, game_id: str) -> None:
        self._cards.pop(game_id, None)

    def get_card(self, game_id: str, card_id: str | int) -> Card:
        card = self._cards.get(game_id, {}).get(str(card_id))
        if card is None:
            raise NotFoundError("card", f"{game_id}/{card_id}")
        return card

    def search_cards(
        self, game_id: str, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[Card]:
        return _search(self._cards.get(game_id, {}).values(), query, limit)


def parse_catalog(data: Any) -> list[Card]:
    """
    Read cards from catalog JSON.

    Accepts a plain list of cards, {"cards": [...]}, or a cube-style
    {"cardMap": {id: card}} document.
    """
    if isinstance(data, Mapping):
        if "cards" in data:
            data = data["cards"]
        elif "cardMap" in data:
            data = list(data["cardMap"].values())
    if not isinstance(data, list):
        raise ValueError("Catalog must be a list of cards")
    return [Card.from_dict(item) for item in data]


class JsonCardCatalog:
    """
    Catalog reading `<catalog_dir>/<game_id>.json`.

    Each game's file is loaded once; missing files give an empty catalog.
    """

    def __init__(self, catalog_dir: Path | str | None = None):
        self.catalog_dir = Path(catalog_dir or settings.catalog_dir)
        self._loaded = InMemoryCardCatalog()
        self._games: set[str] = set()

    def _ensure_loaded(self, game_id: str) -> None:
        if game_id in self._games:
            return
        path = self.catalog_dir / f"{game_id}.json"
        cards: list[Card] = []
        if path.exists():
            with open(path, encoding="utf-8") as f:
                cards = parse_catalog(json.load(f))
            logger.info("Loaded %d %s cards from %s", len(cards), game_id, path)
        else:
            logger.warning("No catalog file for %s at %s", game_id, path)
        self._loaded.add_cards(game_id, cards)
        self._games.add(game_id)

    def get_card(self, game_id: str, card_id: str | int) -> Card:
        self._ensure_loaded(game_id)
        return self._loaded.get_card(game_id, card_id)

    def search_cards(
        self, game_id: str, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[Card]:
        self._ensure_loaded(game_id)
        return self._loaded.search_cards(game_id, query, limit)

    def reload(self, game_id: str | None = None) -> None:
        """Drop cached cards so the next lookup rereads the file."""
        if game_id is None:
            self._loaded = InMemoryCardCatalog()
            self._games.clear()
        else:
            self._loaded.clear(game_id)
            self._games.discard(game_id)
