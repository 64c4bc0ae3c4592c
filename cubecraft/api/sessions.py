"""
Cube builder session endpoints.

A session wraps one CubeBuilder: the cube being edited, its undo history
and its save state. Every mutating endpoint returns the full session state.
"""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from cubecraft.api.dependencies import (
    get_builder_sessions,
    get_catalog,
    get_cube_gateway,
    get_game_registry,
)
from cubecraft.games.registry import GameRegistry
from cubecraft.models.cube import CubeCard
from cubecraft.models.filter_request import ALL_FILTER, FilterRequest
from cubecraft.services.builder_sessions import BuilderSessions
from cubecraft.services.catalog import CardCatalog
from cubecraft.services.cube_builder import CubeBuilder
from cubecraft.services.persistence import CubeGateway
from cubecraft.services.tiers import tier_of

router = APIRouter(prefix="/sessions", tags=["sessions"])

Sessions = Annotated[BuilderSessions, Depends(get_builder_sessions)]


# --- Request models ---


class CreateSessionRequest(BaseModel):
    """Open a builder on a new cube for a game, or on a stored cube."""

    game_id: str | None = Field(default=None, description="Game for a new cube")
    cube_id: str | None = Field(
        default=None,
        description="Stored cube to load (bundled id or db:<uuid>)",
        examples=["starter", "db:3f2b..."],
    )


class MetadataRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    is_public: bool | None = None


class GameRequest(BaseModel):
    game_id: str


class DuplicateLimitRequest(BaseModel):
    limit: int | None = Field(..., description="Max copies per card, null for unlimited")


class AddCardsRequest(BaseModel):
    card_id: str | int | None = None
    count: int = Field(default=1, ge=1)
    card_ids: list[str | int] | None = Field(
        default=None,
        description="Add one copy of each, as a single undoable edit",
    )


class ScoreRequest(BaseModel):
    score: float
    instance_id: str | None = Field(default=None, description="Score one copy")
    card_id: str | int | None = Field(default=None, description="Score every copy of a card")


class TierRequest(BaseModel):
    card_id: str | int
    tier: str
    scheme: str = "standard"


class ZoneRequest(BaseModel):
    zone: str | None = Field(..., description="Zone id, null for automatic placement")


class QueryRequest(BaseModel):
    """Filter and sort the cube's cards."""

    search: str = ""
    filter_option: str = ALL_FILTER
    selections: dict[str, list[str]] = Field(default_factory=dict)
    ranges: dict[str, tuple[float, float]] = Field(default_factory=dict)
    tiers: list[str] = Field(default_factory=list)
    tier_scheme: str = "standard"
    sort_by: str = "name"
    descending: bool = False

    def to_filter_request(self) -> FilterRequest:
        request = FilterRequest(
            search=self.search,
            filter_option=self.filter_option,
            selections={k: frozenset(v) for k, v in self.selections.items() if v},
            tiers=frozenset(self.tiers),
            tier_scheme=self.tier_scheme,
            sort_by=self.sort_by,
            descending=self.descending,
        )
        for group_id, (low, high) in self.ranges.items():
            request = request.set_range(group_id, low, high)
        return request


# --- Response models ---


class CubeCardResponse(BaseModel):
    instance_id: str
    card_id: str
    name: str
    type: str = ""
    score: int | None = None
    tier: str
    zone: str | None = None
    image_url: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class ZoneSummaryResponse(BaseModel):
    zone_id: str
    name: str
    count: int
    min_cards: int | None = None
    max_cards: int | None = None


class ZoneWarningResponse(BaseModel):
    id: str
    type: str
    severity: str
    message: str
    zone_id: str | None = None
    card_id: str | None = None


class SessionStateResponse(BaseModel):
    """Everything a client needs to render the builder."""

    session_id: str
    game_id: str
    cube_id: str | None = None
    name: str = ""
    description: str = ""
    is_public: bool = False
    duplicate_limit: int | None = None
    card_count: int = 0
    is_dirty: bool = False
    is_saving: bool = False
    last_saved: datetime | None = None
    error: str | None = None
    can_undo: bool = False
    can_redo: bool = False
    cards: list[CubeCardResponse] = Field(default_factory=list)
    over_limit_card_ids: list[str] = Field(default_factory=list)
    zones: list[ZoneSummaryResponse] = Field(default_factory=list)
    warnings: list[ZoneWarningResponse] = Field(default_factory=list)


class QueryResponse(BaseModel):
    total: int
    matched: int
    cards: list[CubeCardResponse]


class CountResponse(BaseModel):
    changed: int


class ExportResponse(BaseModel):
    format_id: str
    filename: str
    content: str


def _card(builder: CubeBuilder, cube_card: CubeCard) -> CubeCardResponse:
    return CubeCardResponse(
        instance_id=cube_card.instance_id,
        card_id=cube_card.card_id,
        name=cube_card.name,
        type=cube_card.type,
        score=cube_card.score,
        tier=tier_of(cube_card.score),
        zone=cube_card.zone,
        image_url=cube_card.image_url or builder.config.get_image_url(cube_card, "sm"),
        attributes=dict(cube_card.attributes),
    )


def _state(session_id: str, builder: CubeBuilder) -> SessionStateResponse:
    deck = builder.check_deck()
    return SessionStateResponse(
        session_id=session_id,
        game_id=builder.game_id,
        cube_id=builder.cube_id,
        name=builder.name,
        description=builder.description,
        is_public=builder.is_public,
        duplicate_limit=builder.duplicate_limit,
        card_count=builder.card_count,
        is_dirty=builder.is_dirty,
        is_saving=builder.is_saving,
        last_saved=builder.last_saved,
        error=builder.error,
        can_undo=builder.can_undo,
        can_redo=builder.can_redo,
        cards=[_card(builder, card) for card in builder.get_cards()],
        over_limit_card_ids=builder.over_limit_card_ids(),
        zones=[
            ZoneSummaryResponse(
                zone_id=zone.zone_id,
                name=zone.name,
                count=zone.count,
                min_cards=zone.min_cards,
                max_cards=zone.max_cards,
            )
            for zone in deck.zones
        ],
        warnings=[
            ZoneWarningResponse(
                id=warning.id,
                type=warning.type,
                severity=warning.severity,
                message=warning.message,
                zone_id=warning.zone_id,
                card_id=warning.card_id,
            )
            for warning in deck.warnings
        ],
    )


# --- Session lifecycle ---


@router.post("", response_model=SessionStateResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: CreateSessionRequest,
    sessions: Sessions,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    gateway: Annotated[CubeGateway, Depends(get_cube_gateway)],
    games: Annotated[GameRegistry, Depends(get_game_registry)],
) -> SessionStateResponse:
    """
    Open a builder.

    With cube_id the stored cube is loaded; otherwise an empty cube for
    game_id (or the default game) is started.
    """
    builder = CubeBuilder(catalog, gateway, game_id=request.game_id, games=games)
    if request.cube_id:
        await builder.load_cube(request.cube_id)
    session_id = sessions.open(builder)
    return _state(session_id, builder)


@router.get("/{session_id}", response_model=SessionStateResponse)
async def get_state(session_id: str, sessions: Sessions) -> SessionStateResponse:
    return _state(session_id, sessions.get(session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(session_id: str, sessions: Sessions) -> Response:
    """Close a session. Unsaved edits are discarded."""
    sessions.get(session_id)
    sessions.close(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Cube settings ---


@router.patch("/{session_id}/metadata", response_model=SessionStateResponse)
async def update_metadata(
    session_id: str, request: MetadataRequest, sessions: Sessions
) -> SessionStateResponse:
    builder = sessions.get(session_id)
    builder.set_metadata(request.name, request.description, request.is_public)
    return _state(session_id, builder)


@router.put("/{session_id}/game", response_model=SessionStateResponse)
async def switch_game(
    session_id: str, request: GameRequest, sessions: Sessions
) -> SessionStateResponse:
    """Switch games. Clears every card and the undo history."""
    builder = sessions.get(session_id)
    builder.set_game(request.game_id)
    return _state(session_id, builder)


@router.put("/{session_id}/duplicate-limit", response_model=SessionStateResponse)
async def set_duplicate_limit(
    session_id: str, request: DuplicateLimitRequest, sessions: Sessions
) -> SessionStateResponse:
    builder = sessions.get(session_id)
    builder.set_duplicate_limit(request.limit)
    return _state(session_id, builder)


@router.post("/{session_id}/new", response_model=SessionStateResponse)
async def new_cube(
    session_id: str, sessions: Sessions, request: GameRequest | None = None
) -> SessionStateResponse:
    """Start over with an empty, unsaved cube."""
    builder = sessions.get(session_id)
    builder.new_cube(request.game_id if request else None)
    return _state(session_id, builder)


# --- Cards ---


@router.post("/{session_id}/cards", response_model=SessionStateResponse)
async def add_cards(
    session_id: str, request: AddCardsRequest, sessions: Sessions
) -> SessionStateResponse:
    """
    Add cards.

    Either card_id with count, or card_ids for one copy of each. The edit is
    all-or-nothing: a duplicate limit or unknown card rejects it entirely.
    """
    builder = sessions.get(session_id)
    if request.card_ids is not None:
        builder.add_cards(request.card_ids)
    elif request.card_id is not None:
        builder.add_card(request.card_id, request.count)
    return _state(session_id, builder)


@router.delete("/{session_id}/cards/{instance_id}", response_model=SessionStateResponse)
async def remove_card(
    session_id: str, instance_id: str, sessions: Sessions
) -> SessionStateResponse:
    """Remove one copy. Unknown instance ids are ignored."""
    builder = sessions.get(session_id)
    builder.remove_card(instance_id)
    return _state(session_id, builder)


@router.delete("/{session_id}/copies/{card_id}", response_model=SessionStateResponse)
async def remove_all_copies(
    session_id: str, card_id: str, sessions: Sessions
) -> SessionStateResponse:
    builder = sessions.get(session_id)
    builder.remove_all_copies(card_id)
    return _state(session_id, builder)


@router.put("/{session_id}/scores", response_model=CountResponse)
async def update_scores(
    session_id: str, request: ScoreRequest, sessions: Sessions
) -> CountResponse:
    """
    Set a score (clamped to 0-100).

    Targets one copy by instance_id, every copy of card_id, or every card in
    the cube when neither is given.
    """
    builder = sessions.get(session_id)
    if request.instance_id is not None:
        changed = builder.update_card_score(request.instance_id, request.score)
    elif request.card_id is not None:
        changed = builder.update_all_copies_score(request.card_id, request.score)
    else:
        changed = builder.set_all_scores(request.score)
    return CountResponse(changed=changed)


@router.put("/{session_id}/tier", response_model=CountResponse)
async def set_tier(session_id: str, request: TierRequest, sessions: Sessions) -> CountResponse:
    builder = sessions.get(session_id)
    return CountResponse(changed=builder.set_tier(request.card_id, request.tier, request.scheme))


@router.put("/{session_id}/cards/{instance_id}/zone", response_model=SessionStateResponse)
async def set_zone(
    session_id: str, instance_id: str, request: ZoneRequest, sessions: Sessions
) -> SessionStateResponse:
    builder = sessions.get(session_id)
    builder.set_card_zone(instance_id, request.zone)
    return _state(session_id, builder)


# --- History ---


@router.post("/{session_id}/undo", response_model=SessionStateResponse)
async def undo(session_id: str, sessions: Sessions) -> SessionStateResponse:
    builder = sessions.get(session_id)
    builder.undo()
    return _state(session_id, builder)


@router.post("/{session_id}/redo", response_model=SessionStateResponse)
async def redo(session_id: str, sessions: Sessions) -> SessionStateResponse:
    builder = sessions.get(session_id)
    builder.redo()
    return _state(session_id, builder)


# --- Projections ---


@router.post("/{session_id}/query", response_model=QueryResponse)
async def query_cards(
    session_id: str, request: QueryRequest, sessions: Sessions
) -> QueryResponse:
    builder = sessions.get(session_id)
    cards = builder.query(request.to_filter_request())
    return QueryResponse(
        total=builder.card_count,
        matched=len(cards),
        cards=[_card(builder, card) for card in cards],
    )


@router.get("/{session_id}/export/{format_id}", response_model=ExportResponse)
async def export_deck(session_id: str, format_id: str, sessions: Sessions) -> ExportResponse:
    builder = sessions.get(session_id)
    result = builder.export(format_id)
    return ExportResponse(
        format_id=result.format_id, filename=result.filename, content=result.content
    )


@router.get("/{session_id}/scores.csv")
async def export_scores(session_id: str, sessions: Sessions) -> Response:
    """Scores as CSV (ID,Name,Score), one row per distinct card."""
    builder = sessions.get(session_id)
    return Response(
        content=builder.export_scores(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="cube-scores.csv"'},
    )


# --- Persistence ---


@router.post("/{session_id}/save", response_model=SessionStateResponse)
async def save_cube(session_id: str, sessions: Sessions) -> SessionStateResponse:
    """
    Save the cube.

    New and bundled cubes are saved as new user cubes; the returned state
    carries the new db:<uuid> id.
    """
    builder = sessions.get(session_id)
    await builder.save_cube()
    return _state(session_id, builder)


@router.post("/{session_id}/load/{cube_id}", response_model=SessionStateResponse)
async def load_cube(session_id: str, cube_id: str, sessions: Sessions) -> SessionStateResponse:
    builder = sessions.get(session_id)
    await builder.load_cube(cube_id)
    return _state(session_id, builder)


@router.delete("/{session_id}/error", response_model=SessionStateResponse)
async def clear_error(session_id: str, sessions: Sessions) -> SessionStateResponse:
    builder = sessions.get(session_id)
    builder.clear_error()
    return _state(session_id, builder)
