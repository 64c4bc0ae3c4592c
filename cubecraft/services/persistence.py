"""
Cube persistence gateway.

Two backends sit behind one interface:

- Bundled cubes: read-only JSON files shipped under settings.cubes_dir,
  addressed by their file stem (e.g., "starter").
- User cubes: rows in the database, addressed as "db:<uuid>".

Saving a bundled cube never writes the file; it forks a new user cube.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cubecraft.config import DATABASE_CUBE_PREFIX, settings
from cubecraft.db import operations
from cubecraft.models.card import Card
from cubecraft.models.cube import CubeEntry, CubeRecord, CubeSummary, SaveResult
from cubecraft.models.failure import CubeValidationError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

LEGACY_GAME_ID = "yugioh"


class CubePersistence(Protocol):
    """What the cube builder needs from storage."""

    async def save(self, cube_id: str | None, record: CubeRecord) -> SaveResult: ...

    async def load(self, cube_id: str) -> CubeRecord: ...


def is_database_cube(cube_id: str | None) -> bool:
    return bool(cube_id) and cube_id.startswith(DATABASE_CUBE_PREFIX)


def strip_database_prefix(cube_id: str) -> str:
    return cube_id.removeprefix(DATABASE_CUBE_PREFIX)


def card_from_cube_json(data: Mapping[str, Any]) -> Card:
    """
    Decode one cardMap entry.

    Entries carrying an "attributes" object are the generic format. Anything
    else is a flat Yu-Gi-Oh! card (desc, atk, def, level, ...), whose extra
    keys become attributes.
    """
    card = Card.from_dict(data)
    if isinstance(data.get("attributes"), Mapping):
        return card
    attributes = {k: v for k, v in card.attributes.items() if v is not None}
    return Card(
        id=card.id,
        name=card.name,
        type=card.type,
        description=card.description,
        image_url=card.image_url,
        score=card.score,
        attributes=attributes,
    )


def record_from_cube_json(cube_id: str, payload: Mapping[str, Any]) -> CubeRecord:
    """Build a record from a bundled cube file ({id, name, gameId, cardMap, ...})."""
    card_map = payload.get("cardMap")
    if not isinstance(card_map, Mapping):
        raise PersistenceError(
            f"Cube file '{cube_id}' has no cardMap",
            detail="Expected an object mapping card id to card",
        )
    entries = []
    for card_id, raw in card_map.items():
        data = dict(raw)
        data.setdefault("id", card_id)
        card = card_from_cube_json(data)
        entries.append(CubeEntry(card=card, score=card.score))
    return CubeRecord(
        id=cube_id,
        name=str(payload.get("name") or cube_id),
        description=str(payload.get("description") or ""),
        game_id=str(payload.get("gameId") or LEGACY_GAME_ID),
        entries=tuple(entries),
    )


class StaticCubeStore:
    """Read-only bundled cubes, one JSON file per cube."""

    def __init__(self, cubes_dir: str | Path | None = None) -> None:
        self.cubes_dir = Path(cubes_dir if cubes_dir is not None else settings.cubes_dir)
        self._cache: dict[str, CubeRecord] = {}

    def _path(self, cube_id: str) -> Path:
        if not cube_id or "/" in cube_id or "\\" in cube_id or cube_id.startswith("."):
            raise NotFoundError("cube", cube_id)
        return self.cubes_dir / f"{cube_id}.json"

    async def load(self, cube_id: str) -> CubeRecord:
        if cube_id in self._cache:
            return self._cache[cube_id]
        path = self._path(cube_id)
        if not path.is_file():
            raise NotFoundError("cube", cube_id, available=self.ids())
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read cube '{cube_id}'", detail=str(e)) from e

        record = record_from_cube_json(cube_id, payload)
        self._cache[cube_id] = record
        logger.info(
            "static_cube_loaded",
            extra={"cube_id": cube_id, "card_count": record.card_count},
        )
        return record

    def ids(self) -> list[str]:
        if not self.cubes_dir.is_dir():
            return []
        return sorted(path.stem for path in self.cubes_dir.glob("*.json"))

    async def list_cubes(self, game_id: str | None = None) -> list[CubeSummary]:
        summaries = []
        for cube_id in self.ids():
            record = await self.load(cube_id)
            if game_id is not None and record.game_id != game_id:
                continue
            summaries.append(
                CubeSummary(
                    id=cube_id,
                    name=record.name,
                    game_id=record.game_id,
                    card_count=record.card_count,
                    description=record.description,
                )
            )
        return summaries


class DatabaseCubeStore:
    """User cubes in the database. Ids passed in and out carry the "db:" prefix."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, cube_id: str | None, record: CubeRecord) -> SaveResult:
        try:
            async with self._session_factory() as session:
                if cube_id is None:
                    row = await operations.create_cube(session, record)
                else:
                    row = await operations.update_cube(
                        session, strip_database_prefix(cube_id), record
                    )
                    if row is None:
                        raise NotFoundError("cube", cube_id)
                saved_id = f"{DATABASE_CUBE_PREFIX}{row.id}"
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("cube_save_failed", extra={"cube_id": cube_id, "error": str(e)})
            raise PersistenceError("Failed to save cube", detail=str(e)) from e
        return SaveResult(id=saved_id)

    async def load(self, cube_id: str) -> CubeRecord:
        try:
            async with self._session_factory() as session:
                row = await operations.get_cube(session, strip_database_prefix(cube_id))
                if row is None:
                    raise NotFoundError("cube", cube_id)
                return operations.cube_to_record(row, id_prefix=DATABASE_CUBE_PREFIX)
        except SQLAlchemyError as e:
            logger.error("cube_load_failed", extra={"cube_id": cube_id, "error": str(e)})
            raise PersistenceError("Failed to load cube", detail=str(e)) from e

    async def delete(self, cube_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                deleted = await operations.delete_cube(session, strip_database_prefix(cube_id))
                await session.commit()
                return deleted
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to delete cube", detail=str(e)) from e

    async def list_cubes(self, game_id: str | None = None) -> list[CubeSummary]:
        try:
            async with self._session_factory() as session:
                rows = await operations.list_cubes(session, game_id=game_id)
                return [
                    operations.cube_to_summary(row, id_prefix=DATABASE_CUBE_PREFIX)
                    for row in rows
                ]
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to list cubes", detail=str(e)) from e


class CubeGateway:
    """
    Routes cube ids to the right backend.

    A save with no id, or with a bundled cube's id, creates a new user cube.
    """

    def __init__(self, static: StaticCubeStore, database: DatabaseCubeStore | None = None) -> None:
        self.static = static
        self.database = database

    def _require_database(self) -> DatabaseCubeStore:
        if self.database is None:
            raise PersistenceError(
                "Database storage is not configured",
                detail="Only bundled cubes are available",
            )
        return self.database

    async def save(self, cube_id: str | None, record: CubeRecord) -> SaveResult:
        database = self._require_database()
        if is_database_cube(cube_id):
            return await database.save(cube_id, record)
        if cube_id:
            logger.info("static_cube_forked", extra={"source_cube_id": cube_id})
        return await database.save(None, record)

    async def load(self, cube_id: str) -> CubeRecord:
        if is_database_cube(cube_id):
            return await self._require_database().load(cube_id)
        return await self.static.load(cube_id)

    async def delete(self, cube_id: str) -> bool:
        if not is_database_cube(cube_id):
            raise CubeValidationError(
                f"Cube '{cube_id}' is bundled and cannot be deleted",
                detail="Only user cubes (db:...) can be deleted",
            )
        return await self._require_database().delete(cube_id)

    async def list_cubes(self, game_id: str | None = None) -> list[CubeSummary]:
        summaries = await self.static.list_cubes(game_id)
        if self.database is not None:
            summaries.extend(await self.database.list_cubes(game_id))
        return summaries
