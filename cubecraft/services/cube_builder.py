"""
Cube state engine.

A CubeBuilder owns one cube being edited. Every mutation builds a new
immutable CubeSnapshot and records it in the undo history; a mutation that
would leave the cube unchanged records nothing. Rejected edits raise before
anything is recorded, so the cube is never left half-modified.

Saving and loading are the only asynchronous operations. Both capture a
generation number when they start and drop their effect if the builder
moved on in the meantime (a newer load, a game switch or close()).
"""

import itertools
import logging
import math
import uuid
from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime
from numbers import Real

from cubecraft.config import MAX_HISTORY_ENTRIES, MAX_SCORE, MIN_SCORE, settings
from cubecraft.filtering.engine import apply_filters
from cubecraft.games import default_registry
from cubecraft.games.registry import GameRegistry
from cubecraft.models.card import Card
from cubecraft.models.cube import CubeCard, CubeEntry, CubeRecord, CubeSnapshot, SaveResult
from cubecraft.models.failure import (
    CubeValidationError,
    DuplicateLimitError,
    FailureKind,
    InvariantViolationError,
    KnownError,
    NotFoundError,
    PersistenceError,
)
from cubecraft.models.filter_request import FilterRequest
from cubecraft.models.game_config import GameConfig
from cubecraft.services.catalog import CardCatalog
from cubecraft.services.export import ExportResult, export_deck, scores_to_csv
from cubecraft.services.history import History
from cubecraft.services.persistence import CubePersistence
from cubecraft.services.tiers import score_for_tier
from cubecraft.services.zones import DeckCheck, check_deck

logger = logging.getLogger(__name__)

# Shared by every builder in the process so instance ids are never reused
_instance_counter = itertools.count(1)


def validate_score(score: object) -> int:
    """
    Coerce a score into the valid range.

    Raises:
        CubeValidationError: If the score is not a finite number
    """
    if isinstance(score, bool) or not isinstance(score, Real):
        raise CubeValidationError(f"Score must be a number, got {score!r}")
    if math.isnan(score):
        raise CubeValidationError("Score must be a number, got NaN")
    return int(round(min(max(float(score), MIN_SCORE), MAX_SCORE)))


def validate_duplicate_limit(limit: object) -> int | None:
    if limit is None:
        return None
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise CubeValidationError(
            f"Duplicate limit must be a positive integer or unlimited, got {limit!r}"
        )
    return limit


class CubeBuilder:
    """
    Editable cube for one game.

    Attributes:
        game_id: Game the cube belongs to
        cube_id: Persisted id, None until first saved or loaded
        is_dirty: Unsaved changes exist
        is_saving: A save is in flight
        is_loading: A load is in flight
        last_saved: When the last successful save completed
        error: Message of the last failed save or load
    """

    def __init__(
        self,
        catalog: CardCatalog,
        gateway: CubePersistence | None = None,
        game_id: str | None = None,
        games: GameRegistry | None = None,
        max_history: int = MAX_HISTORY_ENTRIES,
    ):
        self.catalog = catalog
        self.gateway = gateway
        self.games = games or default_registry
        config = self.games.get(game_id or settings.default_game_id)

        self.game_id = config.id
        self.cube_id: str | None = None
        self.is_dirty = False
        self.is_saving = False
        self.is_loading = False
        self.last_saved: datetime | None = None
        self.error: str | None = None

        self._token = uuid.uuid4().hex[:8]
        self._generation = 0
        self._revision = 0
        self._history = History(
            CubeSnapshot(duplicate_limit=config.default_duplicate_limit), max_history
        )

    # --- State access ---

    @property
    def snapshot(self) -> CubeSnapshot:
        return self._history.current

    @property
    def config(self) -> GameConfig:
        return self.games.get(self.game_id)

    @property
    def name(self) -> str:
        return self.snapshot.name

    @property
    def description(self) -> str:
        return self.snapshot.description

    @property
    def is_public(self) -> bool:
        return self.snapshot.is_public

    @property
    def duplicate_limit(self) -> int | None:
        return self.snapshot.duplicate_limit

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def card_count(self) -> int:
        return len(self.snapshot.cards)

    def get_cards(self) -> list[CubeCard]:
        """Cube cards in insertion order."""
        return self.snapshot.ordered()

    def get_card(self, instance_id: str) -> CubeCard | None:
        return self.snapshot.cards.get(instance_id)

    def get_card_copy_count(self, card_id: str | int) -> int:
        return self.snapshot.copy_count(card_id)

    def has_card(self, card_id: str | int) -> bool:
        return self.get_card_copy_count(card_id) > 0

    def get_card_score(self, card_id: str | int) -> int | None:
        """Shared score of a card's copies, None if the card is not in the cube."""
        copies = self.snapshot.copies_of(card_id)
        return copies[0].score if copies else None

    def can_add_card(self, card_id: str | int, count: int = 1) -> bool:
        limit = self.snapshot.duplicate_limit
        if limit is None:
            return True
        return self.get_card_copy_count(card_id) + count <= limit

    def over_limit_card_ids(self) -> list[str]:
        """Cards holding more copies than the current duplicate limit allows."""
        limit = self.snapshot.duplicate_limit
        if limit is None:
            return []
        counts = Counter(card.card_id for card in self.get_cards())
        return [card_id for card_id, count in counts.items() if count > limit]

    # --- Internals ---

    def _commit(self, snapshot: CubeSnapshot) -> bool:
        if not self._history.record(snapshot):
            return False
        self.is_dirty = True
        self._revision += 1
        return True

    def _reset(self, snapshot: CubeSnapshot) -> None:
        self._history.reset(snapshot)
        self._generation += 1
        self._revision += 1

    def _new_instance_id(self, existing: dict[str, CubeCard]) -> str:
        instance_id = f"{self._token}-{next(_instance_counter)}"
        if instance_id in existing:
            raise InvariantViolationError(f"Instance id {instance_id} already in use")
        return instance_id

    def _resolve_card(self, card_id: str | int) -> Card:
        """Catalog card, falling back to the game's basic resources."""
        try:
            return self.catalog.get_card(self.game_id, card_id)
        except NotFoundError:
            for resource in self.config.basic_resources:
                if str(resource.id) == str(card_id):
                    return Card(
                        id=resource.id,
                        name=resource.name,
                        type=resource.type,
                        description=resource.description,
                        image_url=resource.image_url,
                        attributes=dict(resource.attributes),
                    )
            raise

    def _with_cards(
        self, cards: dict[str, CubeCard], order: Iterable[str] | None = None
    ) -> CubeSnapshot:
        current = self.snapshot
        return CubeSnapshot(
            cards=cards,
            order=tuple(order) if order is not None else current.order,
            name=current.name,
            description=current.description,
            is_public=current.is_public,
            duplicate_limit=current.duplicate_limit,
        )

    def _check_limit(self, card: Card, requested: int) -> None:
        limit = self.snapshot.duplicate_limit
        current = self.get_card_copy_count(card.key)
        if limit is not None and current + requested > limit:
            raise DuplicateLimitError(card.key, current, requested, limit)

    def _append_copies(self, additions: list[tuple[Card, int]]) -> list[CubeCard]:
        cards = dict(self.snapshot.cards)
        order = list(self.snapshot.order)
        added: list[CubeCard] = []
        now = datetime.now(UTC)
        for card, count in additions:
            score = self.get_card_score(card.key)
            if score is None:
                score = card.score
            for _ in range(count):
                instance_id = self._new_instance_id(cards)
                cube_card = CubeCard(instance_id, card, score, None, now)
                cards[instance_id] = cube_card
                order.append(instance_id)
                added.append(cube_card)
        self._commit(self._with_cards(cards, order))
        return added

    # --- Card mutations ---

    def add_card(self, card_id: str | int, count: int = 1) -> list[CubeCard]:
        """
        Add `count` copies of a catalog card.

        New copies share the score of copies already in the cube, or take the
        card's default score. Either every copy is added or none is.

        Raises:
            NotFoundError: If the card is not in the current game's catalog
            DuplicateLimitError: If the copies would exceed the duplicate limit
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise CubeValidationError(f"Copy count must be at least 1, got {count!r}")
        card = self._resolve_card(card_id)
        self._check_limit(card, count)
        added = self._append_copies([(card, count)])
        logger.debug("Added %d x %s to cube", count, card.key)
        return added

    def add_cards(self, card_ids: Iterable[str | int]) -> list[CubeCard]:
        """Add one copy per id as a single undoable edit, all or nothing."""
        requested = Counter(str(card_id) for card_id in card_ids)
        if not requested:
            return []
        resolved = [(self._resolve_card(card_id), count) for card_id, count in requested.items()]
        for card, count in resolved:
            self._check_limit(card, count)
        added = self._append_copies(resolved)
        logger.debug("Added %d cards to cube in bulk", len(added))
        return added

    def remove_card(self, instance_id: str) -> bool:
        """Remove one copy; False if it was not in the cube."""
        return self.remove_cards([instance_id]) == 1

    def remove_cards(self, instance_ids: Iterable[str]) -> int:
        targets = {instance_id for instance_id in instance_ids} & set(self.snapshot.cards)
        if not targets:
            return 0
        cards = {k: v for k, v in self.snapshot.cards.items() if k not in targets}
        order = [instance_id for instance_id in self.snapshot.order if instance_id not in targets]
        self._commit(self._with_cards(cards, order))
        return len(targets)

    def remove_all_copies(self, card_id: str | int) -> int:
        copies = self.snapshot.copies_of(card_id)
        return self.remove_cards(copy.instance_id for copy in copies)

    def update_card_score(self, instance_id: str, score: float) -> int:
        """
        Set the score of the card behind one copy.

        Scores belong to the card, so every copy is updated. Returns the
        number of copies changed; an unknown instance id changes nothing.
        """
        value = validate_score(score)
        cube_card = self.snapshot.cards.get(instance_id)
        if cube_card is None:
            return 0
        return self.update_all_copies_score(cube_card.card_id, value)

    def update_all_copies_score(self, card_id: str | int, score: float) -> int:
        value = validate_score(score)
        key = str(card_id)
        targets = [card for card in self.snapshot.cards.values() if card.card_id == key]
        if not targets:
            return 0
        cards = dict(self.snapshot.cards)
        for target in targets:
            cards[target.instance_id] = CubeCard(
                target.instance_id, target.card, value, target.zone, target.added_at
            )
        self._commit(self._with_cards(cards))
        return len(targets)

    def set_tier(self, card_id: str | int, tier: str, scheme: str = "standard") -> int:
        """Move a card into a tier by setting its score to the tier's midpoint."""
        return self.update_all_copies_score(card_id, score_for_tier(tier, scheme))

    def set_all_scores(self, score: float) -> int:
        value = validate_score(score)
        if not self.snapshot.cards:
            return 0
        cards = {
            instance_id: CubeCard(card.instance_id, card.card, value, card.zone, card.added_at)
            for instance_id, card in self.snapshot.cards.items()
        }
        self._commit(self._with_cards(cards))
        return len(cards)

    def set_card_zone(self, instance_id: str, zone_id: str | None) -> bool:
        """Pin a copy to a deck zone, or clear the hint with None."""
        if zone_id is not None and self.config.zone(zone_id) is None:
            raise CubeValidationError(
                f"Unknown zone {zone_id} for {self.config.name}",
                detail=f"Available: {', '.join(zone.id for zone in self.config.deck_zones)}",
            )
        cube_card = self.snapshot.cards.get(instance_id)
        if cube_card is None:
            return False
        cards = dict(self.snapshot.cards)
        cards[instance_id] = CubeCard(
            cube_card.instance_id, cube_card.card, cube_card.score, zone_id, cube_card.added_at
        )
        return self._commit(self._with_cards(cards))

    # --- Cube settings ---

    def set_metadata(
        self,
        name: str | None = None,
        description: str | None = None,
        is_public: bool | None = None,
    ) -> bool:
        """Update the given fields, leaving the others as they are."""
        current = self.snapshot
        return self._commit(
            CubeSnapshot(
                cards=current.cards,
                order=current.order,
                name=current.name if name is None else name,
                description=current.description if description is None else description,
                is_public=current.is_public if is_public is None else is_public,
                duplicate_limit=current.duplicate_limit,
            )
        )

    def set_duplicate_limit(self, limit: int | None) -> bool:
        """
        Change the cap on copies per card for future adds.

        Copies already over the new limit are kept; see over_limit_card_ids().
        """
        value = validate_duplicate_limit(limit)
        current = self.snapshot
        changed = self._commit(
            CubeSnapshot(
                cards=current.cards,
                order=current.order,
                name=current.name,
                description=current.description,
                is_public=current.is_public,
                duplicate_limit=value,
            )
        )
        over_limit = self.over_limit_card_ids()
        if changed and over_limit:
            logger.warning(
                "duplicate_limit_below_existing_copies",
                extra={"limit": value, "card_ids": over_limit},
            )
        return changed

    def set_game(self, game_id: str) -> None:
        """
        Switch to another game.

        Clears every card, resets the duplicate limit to the game's default
        and forgets the undo history. Loads still in flight are discarded.
        """
        config = self.games.get(game_id)
        current = self.snapshot
        self.game_id = config.id
        self._reset(
            CubeSnapshot(
                name=current.name,
                description=current.description,
                is_public=current.is_public,
                duplicate_limit=config.default_duplicate_limit,
            )
        )
        self.is_dirty = True
        self.is_loading = False
        logger.info("Cube switched to game %s", config.id)

    def new_cube(self, game_id: str | None = None) -> None:
        """Start over with an empty, unsaved cube."""
        config = self.games.get(game_id or self.game_id)
        self.game_id = config.id
        self.cube_id = None
        self.is_dirty = False
        self.is_loading = False
        self.last_saved = None
        self.error = None
        self._reset(CubeSnapshot(duplicate_limit=config.default_duplicate_limit))

    # --- History ---

    def undo(self) -> bool:
        if self._history.undo() is None:
            return False
        self.is_dirty = True
        self._revision += 1
        return True

    def redo(self) -> bool:
        if self._history.redo() is None:
            return False
        self.is_dirty = True
        self._revision += 1
        return True

    # --- Persistence ---

    def to_record(self, snapshot: CubeSnapshot | None = None) -> CubeRecord:
        snapshot = snapshot or self.snapshot
        return CubeRecord(
            id=self.cube_id,
            name=snapshot.name,
            description=snapshot.description,
            game_id=self.game_id,
            is_public=snapshot.is_public,
            duplicate_limit=snapshot.duplicate_limit,
            entries=tuple(
                CubeEntry(card.card, card.score, card.zone) for card in snapshot.ordered()
            ),
        )

    def _require_gateway(self) -> CubePersistence:
        if self.gateway is None:
            raise PersistenceError("No cube storage is configured")
        return self.gateway

    async def save_cube(self) -> SaveResult:
        """
        Save the cube as it is right now.

        Edits made while the save is in flight stay unsaved. A failed save
        keeps every edit and records the failure in `error`.

        Raises:
            CubeValidationError: If the cube has no name
            PersistenceError: If the storage backend fails
        """
        gateway = self._require_gateway()
        snapshot = self.snapshot
        if not snapshot.name.strip():
            raise CubeValidationError(
                "Cube name is required",
                suggestion="Give the cube a name before saving.",
                kind=FailureKind.MISSING_REQUIRED,
            )
        generation = self._generation
        revision = self._revision
        record = self.to_record(snapshot)

        self.is_saving = True
        self.error = None
        try:
            result = await gateway.save(self.cube_id, record)
        except KnownError as e:
            if generation == self._generation:
                self.error = e.message
            logger.error("Failed to save cube %s: %s", self.cube_id, e.message)
            raise
        finally:
            self.is_saving = False

        if generation != self._generation:
            logger.info("Discarding stale save result for cube %s", result.id)
            return result

        self.cube_id = result.id
        self.last_saved = datetime.now(UTC)
        if self._revision == revision:
            self.is_dirty = False
        logger.info(
            "cube_saved",
            extra={"cube_id": result.id, "game_id": self.game_id, "cards": record.card_count},
        )
        return result

    async def load_cube(self, cube_id: str) -> bool:
        """
        Replace the cube with a stored one.

        Only the most recent load takes effect. Returns False when this load
        was superseded, or the builder was closed or switched games first.

        Raises:
            NotFoundError: If no cube has this id, or it names an unknown game
            PersistenceError: If the storage backend fails
        """
        gateway = self._require_gateway()
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self.error = None
        try:
            record = await gateway.load(cube_id)
            if generation != self._generation:
                logger.info("Discarding superseded load of cube %s", cube_id)
                return False
            config = self.games.get(record.game_id)
        except KnownError as e:
            if generation != self._generation:
                return False
            self.is_loading = False
            self.error = e.message
            logger.error("Failed to load cube %s: %s", cube_id, e.message)
            raise

        cards: dict[str, CubeCard] = {}
        order: list[str] = []
        # Copies of one card share the first copy's score
        scores: dict[str, int | None] = {}
        now = datetime.now(UTC)
        for entry in record.entries:
            instance_id = self._new_instance_id(cards)
            zone = entry.zone if entry.zone and config.zone(entry.zone) else None
            score = scores.setdefault(entry.card.key, entry.score)
            cards[instance_id] = CubeCard(instance_id, entry.card, score, zone, now)
            order.append(instance_id)

        self.game_id = config.id
        self.cube_id = record.id or cube_id
        self._history.reset(
            CubeSnapshot(
                cards=cards,
                order=tuple(order),
                name=record.name,
                description=record.description,
                is_public=record.is_public,
                duplicate_limit=record.duplicate_limit,
            )
        )
        self._revision += 1
        self.is_dirty = False
        self.is_loading = False
        self.last_saved = None
        logger.info(
            "cube_loaded",
            extra={"cube_id": self.cube_id, "game_id": self.game_id, "cards": len(cards)},
        )
        return True

    def close(self) -> None:
        """Drop the effect of any load or save still in flight."""
        self._generation += 1
        self.is_loading = False

    def clear_error(self) -> None:
        self.error = None

    # --- Projections ---

    def query(self, request: FilterRequest) -> list[CubeCard]:
        return apply_filters(self.get_cards(), request, self.config)

    def export(self, format_id: str) -> ExportResult:
        return export_deck(self.get_cards(), format_id, self.config)

    def export_scores(self) -> str:
        return scores_to_csv(self.get_cards())

    def check_deck(self) -> DeckCheck:
        return check_deck(self.get_cards(), self.config)
