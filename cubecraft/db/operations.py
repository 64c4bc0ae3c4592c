"""
Database CRUD operations.

Provides async functions for creating, reading, updating, deleting and
listing user cubes, plus converters between rows and CubeRecords.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cubecraft.models.card import Card
from cubecraft.models.cube import CubeEntry, CubeRecord, CubeSummary
from cubecraft.models.db import CubeDB


def record_to_card_data(record: CubeRecord) -> dict[str, Any]:
    """
    Encode entries as a JSON object keyed by slot number.

    Keys are decimal positions so order survives backends that reorder
    JSON object keys.
    """
    return {
        str(position): {
            "card": entry.card.to_dict(),
            "score": entry.score,
            "zone": entry.zone,
        }
        for position, entry in enumerate(record.entries)
    }


def card_data_to_entries(card_data: dict[str, Any]) -> tuple[CubeEntry, ...]:
    def position(key: str) -> tuple[int, str]:
        return (int(key), key) if key.isdigit() else (len(card_data), key)

    entries = []
    for key in sorted(card_data, key=position):
        slot = card_data[key]
        card_payload = slot.get("card", slot)
        entries.append(
            CubeEntry(
                card=Card.from_dict(card_payload),
                score=slot.get("score", card_payload.get("score")),
                zone=slot.get("zone"),
            )
        )
    return tuple(entries)


def _apply_record(cube: CubeDB, record: CubeRecord) -> None:
    cube.name = record.name
    cube.description = record.description
    cube.game_id = record.game_id
    cube.is_public = record.is_public
    cube.duplicate_limit = record.duplicate_limit
    cube.card_data = record_to_card_data(record)
    cube.card_count = record.card_count


async def get_cube(session: AsyncSession, cube_id: str) -> CubeDB | None:
    """
    Get a cube by its database id (without the "db:" prefix).

    Returns None if no such cube exists.
    """
    result = await session.execute(select(CubeDB).where(CubeDB.id == cube_id))
    return result.scalar_one_or_none()


async def create_cube(
    session: AsyncSession, record: CubeRecord, creator_id: str | None = None
) -> CubeDB:
    """Insert a new cube and return it with its generated id."""
    cube = CubeDB(creator_id=creator_id)
    _apply_record(cube, record)
    session.add(cube)
    await session.flush()
    return cube


async def update_cube(session: AsyncSession, cube_id: str, record: CubeRecord) -> CubeDB | None:
    """
    Replace a cube's contents.

    Returns None if the cube does not exist.
    """
    cube = await get_cube(session, cube_id)
    if cube is None:
        return None
    _apply_record(cube, record)
    await session.flush()
    return cube


async def delete_cube(session: AsyncSession, cube_id: str) -> bool:
    """Delete a cube. Returns True if a row was removed."""
    result = await session.execute(delete(CubeDB).where(CubeDB.id == cube_id))
    return bool(result.rowcount)


async def list_cubes(
    session: AsyncSession,
    game_id: str | None = None,
    creator_id: str | None = None,
    public_only: bool = False,
) -> list[CubeDB]:
    """List cubes, most recently updated first."""
    query = select(CubeDB)
    if game_id is not None:
        query = query.where(CubeDB.game_id == game_id)
    if creator_id is not None:
        query = query.where(CubeDB.creator_id == creator_id)
    if public_only:
        query = query.where(CubeDB.is_public.is_(True))
    result = await session.execute(query.order_by(CubeDB.updated_at.desc(), CubeDB.name))
    return list(result.scalars().all())


def cube_to_record(cube: CubeDB, id_prefix: str = "") -> CubeRecord:
    """Convert a row to a CubeRecord, prefixing its id for routing."""
    return CubeRecord(
        id=f"{id_prefix}{cube.id}",
        name=cube.name,
        description=cube.description or "",
        game_id=cube.game_id,
        is_public=cube.is_public,
        duplicate_limit=cube.duplicate_limit,
        entries=card_data_to_entries(cube.card_data or {}),
    )


def cube_to_summary(cube: CubeDB, id_prefix: str = "") -> CubeSummary:
    return CubeSummary(
        id=f"{id_prefix}{cube.id}",
        name=cube.name,
        game_id=cube.game_id,
        card_count=cube.card_count,
        description=cube.description or "",
        is_public=cube.is_public,
        updated_at=cube.updated_at,
    )
