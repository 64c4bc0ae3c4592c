"""
Game catalog endpoints.

Describes the registered games (zones, filters, sorts, export formats) so a
client can render a builder for any of them, and searches their card pools.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from cubecraft.api.dependencies import get_catalog, get_game_registry
from cubecraft.filtering import available_sorts
from cubecraft.games.registry import GameRegistry
from cubecraft.models.game_config import FilterGroup, GameConfig
from cubecraft.services.catalog import CardCatalog
from cubecraft.services.tiers import SCHEMES, tier_bands

router = APIRouter(prefix="/games", tags=["games"])


class ZoneResponse(BaseModel):
    id: str
    name: str
    min_cards: int | None = None
    max_cards: int | None = None
    copy_limit: int | None = None


class OptionResponse(BaseModel):
    id: str
    label: str
    color: str | None = None


class RangeResponse(BaseModel):
    min: float
    max: float
    step: float = 1


class FilterGroupResponse(BaseModel):
    id: str
    label: str
    type: str
    options: list[OptionResponse] = Field(default_factory=list)
    range: RangeResponse | None = None
    collapsed: bool = False


class SortResponse(BaseModel):
    id: str
    label: str
    descending_default: bool = False


class ExportFormatResponse(BaseModel):
    id: str
    name: str
    extension: str


class TierBandResponse(BaseModel):
    label: str
    lower: int
    upper: int


class GameSummaryResponse(BaseModel):
    """One registered game."""

    id: str
    name: str
    short_name: str
    default_duplicate_limit: int | None = None


class GameDetailResponse(GameSummaryResponse):
    """Everything a client needs to build a cube for one game."""

    zones: list[ZoneResponse]
    filter_options: list[OptionResponse]
    filter_groups: list[FilterGroupResponse]
    sort_options: list[SortResponse]
    export_formats: list[ExportFormatResponse]
    basic_resources: list[str] = Field(
        default_factory=list,
        description="Ids of cards that can always be added without a catalog entry",
    )
    tiers: dict[str, list[TierBandResponse]] = Field(
        default_factory=dict,
        description="Tier bands per scheme (standard, display)",
    )


class CardResponse(BaseModel):
    id: str | int
    name: str
    type: str = ""
    description: str = ""
    image_url: str | None = None
    score: int | None = None
    attributes: dict = Field(default_factory=dict)


def _summary(config: GameConfig) -> GameSummaryResponse:
    return GameSummaryResponse(
        id=config.id,
        name=config.name,
        short_name=config.short_name,
        default_duplicate_limit=config.default_duplicate_limit,
    )


def _group(group: FilterGroup) -> FilterGroupResponse:
    range_response = None
    if group.range is not None:
        range_response = RangeResponse(
            min=group.range.min, max=group.range.max, step=group.range.step
        )
    return FilterGroupResponse(
        id=group.id,
        label=group.label,
        type=group.type,
        options=[
            OptionResponse(id=option.id, label=option.label, color=option.color)
            for option in group.options
        ],
        range=range_response,
        collapsed=group.collapsed,
    )


@router.get("", response_model=list[GameSummaryResponse])
async def list_games(
    games: Annotated[GameRegistry, Depends(get_game_registry)],
) -> list[GameSummaryResponse]:
    """List every registered game."""
    return [_summary(config) for config in games.list()]


@router.get("/{game_id}", response_model=GameDetailResponse)
async def get_game(
    game_id: str,
    games: Annotated[GameRegistry, Depends(get_game_registry)],
) -> GameDetailResponse:
    """Describe one game. Unknown ids return 404 with the available ids."""
    config = games.get(game_id)
    summary = _summary(config)
    return GameDetailResponse(
        **summary.model_dump(),
        zones=[
            ZoneResponse(
                id=zone.id,
                name=zone.name,
                min_cards=zone.min_cards,
                max_cards=zone.max_cards,
                copy_limit=zone.copy_limit,
            )
            for zone in config.deck_zones
        ],
        filter_options=[
            OptionResponse(id=option.id, label=option.label) for option in config.filter_options
        ],
        filter_groups=[_group(group) for group in config.filter_groups],
        sort_options=[
            SortResponse(id=sort.id, label=sort.label, descending_default=sort.descending_default)
            for sort in available_sorts(config)
        ],
        export_formats=[
            ExportFormatResponse(id=fmt.id, name=fmt.name, extension=fmt.extension)
            for fmt in config.export_formats
        ],
        basic_resources=[str(resource.id) for resource in config.basic_resources],
        tiers={
            scheme: [
                TierBandResponse(label=band.label, lower=band.lower, upper=band.upper)
                for band in tier_bands(scheme)
            ]
            for scheme in SCHEMES
        },
    )


@router.get("/{game_id}/cards", response_model=list[CardResponse])
async def search_cards(
    game_id: str,
    games: Annotated[GameRegistry, Depends(get_game_registry)],
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    q: Annotated[str, Query(description="Case-insensitive text matched against card names")] = "",
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[CardResponse]:
    """Search a game's card pool."""
    config = games.get(game_id)
    return [
        CardResponse(**card.to_dict()) for card in catalog.search_cards(config.id, q, limit)
    ]
