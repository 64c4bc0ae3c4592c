from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class Card:
    """
    A catalog card, shared read-only across every cube that uses it.

    Attributes:
        id: Catalog identifier (numeric for Yu-Gi-Oh!/Hearthstone, text elsewhere)
        name: Card name as printed
        type: Type line (e.g., "Effect Monster", "Creature - Elf")
        description: Rules text
        image_url: Resolved image URL, if the catalog provides one
        score: Default power score (0-100), None when unscored
        attributes: Game-specific fields (atk, cmc, hp, colors, ...)
    """

    id: str | int
    name: str
    type: str = ""
    description: str = ""
    image_url: str | None = None
    score: int | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """Identifier in string form; ids are always compared this way."""
        return str(self.id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Card":
        """Build a card from catalog JSON, keeping unknown keys as attributes."""
        known = {"id", "name", "type", "description", "desc", "imageUrl", "image_url", "score"}
        attributes = data.get("attributes")
        if not isinstance(attributes, Mapping):
            attributes = {k: v for k, v in data.items() if k not in known}
        score = data.get("score")
        return cls(
            id=data["id"],
            name=str(data.get("name", "")),
            type=str(data.get("type", "")),
            description=str(data.get("description", data.get("desc", "")) or ""),
            image_url=data.get("image_url", data.get("imageUrl")),
            score=int(score) if score is not None else None,
            attributes=dict(attributes),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "image_url": self.image_url,
            "score": self.score,
            "attributes": dict(self.attributes),
        }


class CardLike(Protocol):
    """Anything classifiers and filters can read: a Card or a copy of one in a cube."""

    @property
    def id(self) -> str | int: ...

    @property
    def name(self) -> str: ...

    @property
    def type(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def score(self) -> int | None: ...

    @property
    def attributes(self) -> Mapping[str, Any]: ...
