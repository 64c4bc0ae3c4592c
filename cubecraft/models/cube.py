"""
Cube domain models.

A cube holds CubeCards, one per physical copy of a catalog card. The editable
part of a cube is captured in an immutable CubeSnapshot so history entries can
share structure without being corrupted by later edits.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cubecraft.models.card import Card


@dataclass(frozen=True, slots=True)
class CubeCard:
    """
    One copy of a catalog card inside a cube.

    Attributes:
        instance_id: Unique per copy, stable across reorders, never reused
        card: The catalog card this copy refers to
        score: Power score shared by every copy of the same card
        zone: Deck zone hint (e.g., "extra", "side"), None for automatic
        added_at: When the copy was added
    """

    instance_id: str
    card: Card
    score: int | None = None
    zone: str | None = None
    added_at: datetime | None = None

    @property
    def id(self) -> str | int:
        return self.card.id

    @property
    def card_id(self) -> str:
        return self.card.key

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def type(self) -> str:
        return self.card.type

    @property
    def description(self) -> str:
        return self.card.description

    @property
    def image_url(self) -> str | None:
        return self.card.image_url

    @property
    def attributes(self) -> Mapping[str, Any]:
        return self.card.attributes


@dataclass(frozen=True, slots=True)
class CubeSnapshot:
    """
    The undoable state of a cube.

    Attributes:
        cards: CubeCards keyed by instance id
        order: Instance ids in insertion order
        name: Cube name (required to save)
        description: Free-form description
        is_public: Whether other users can see the cube
        duplicate_limit: Max copies per card on add, None for unlimited
    """

    cards: Mapping[str, CubeCard] = field(default_factory=dict)
    order: tuple[str, ...] = ()
    name: str = ""
    description: str = ""
    is_public: bool = False
    duplicate_limit: int | None = None

    def ordered(self) -> list[CubeCard]:
        return [self.cards[instance_id] for instance_id in self.order]

    def copies_of(self, card_id: str | int) -> list[CubeCard]:
        key = str(card_id)
        return [card for card in self.ordered() if card.card_id == key]

    def copy_count(self, card_id: str | int) -> int:
        key = str(card_id)
        return sum(1 for card in self.cards.values() if card.card_id == key)


@dataclass(frozen=True, slots=True)
class CubeEntry:
    """A persisted copy: the card, its score and its zone hint."""

    card: Card
    score: int | None = None
    zone: str | None = None


@dataclass(frozen=True, slots=True)
class CubeRecord:
    """
    The persisted form of a cube, independent of the storage backend.

    Instance ids are not part of the record; loading assigns fresh ones.
    """

    name: str
    game_id: str
    entries: tuple[CubeEntry, ...] = ()
    description: str = ""
    is_public: bool = False
    duplicate_limit: int | None = None
    id: str | None = None

    @property
    def card_count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class CubeSummary:
    """Listing row for a stored cube."""

    id: str
    name: str
    game_id: str
    card_count: int
    description: str = ""
    is_public: bool = False
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class SaveResult:
    """Outcome of a gateway save."""

    id: str
    success: bool = True
