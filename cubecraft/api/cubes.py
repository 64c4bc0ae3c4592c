"""
Stored cube endpoints.

Lists bundled and user cubes and deletes user cubes. Editing happens
through builder sessions.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from cubecraft.api.dependencies import get_cube_gateway
from cubecraft.services.persistence import CubeGateway, is_database_cube

router = APIRouter(prefix="/cubes", tags=["cubes"])


class CubeSummaryResponse(BaseModel):
    id: str
    name: str
    game_id: str
    card_count: int
    description: str = ""
    is_public: bool = False
    editable: bool = False


class DeleteResponse(BaseModel):
    id: str
    deleted: bool


@router.get("", response_model=list[CubeSummaryResponse])
async def list_cubes(
    gateway: Annotated[CubeGateway, Depends(get_cube_gateway)],
    game_id: Annotated[str | None, Query()] = None,
) -> list[CubeSummaryResponse]:
    """
    List bundled cubes followed by user cubes.

    Bundled cubes are read-only; saving one creates an editable copy.
    """
    summaries = await gateway.list_cubes(game_id)
    return [
        CubeSummaryResponse(
            id=summary.id,
            name=summary.name,
            game_id=summary.game_id,
            card_count=summary.card_count,
            description=summary.description,
            is_public=summary.is_public,
            editable=is_database_cube(summary.id),
        )
        for summary in summaries
    ]


@router.delete("/{cube_id}", response_model=DeleteResponse)
async def delete_cube(
    cube_id: str,
    gateway: Annotated[CubeGateway, Depends(get_cube_gateway)],
) -> DeleteResponse:
    """Delete a user cube."""
    return DeleteResponse(id=cube_id, deleted=await gateway.delete(cube_id))
