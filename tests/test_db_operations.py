"""Tests for database CRUD operations."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cubecraft.db.operations import (
    card_data_to_entries,
    create_cube,
    cube_to_record,
    cube_to_summary,
    delete_cube,
    get_cube,
    list_cubes,
    record_to_card_data,
    update_cube,
)
from cubecraft.models.card import Card
from cubecraft.models.cube import CubeEntry, CubeRecord
from cubecraft.models.db import Base


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def sample_record() -> CubeRecord:
    dragon = Card(id=89631139, name="Blue-Eyes White Dragon", type="Normal Monster", attributes={"atk": 3000})
    reborn = Card(id=83764718, name="Monster Reborn", type="Spell Card")
    return CubeRecord(
        name="Starter Cube",
        game_id="yugioh",
        description="Classic cards",
        duplicate_limit=3,
        entries=(
            CubeEntry(dragon, score=92),
            CubeEntry(dragon, score=92),
            CubeEntry(reborn, score=85, zone="side"),
        ),
    )


class TestCardData:
    def test_keyed_by_position(self, sample_record: CubeRecord) -> None:
        data = record_to_card_data(sample_record)
        assert list(data) == ["0", "1", "2"]
        assert data["2"] == {"card": sample_record.entries[2].card.to_dict(), "score": 85, "zone": "side"}

    def test_decoding_restores_order(self, sample_record: CubeRecord) -> None:
        data = record_to_card_data(sample_record)
        shuffled = {key: data[key] for key in ("2", "0", "1")}
        assert card_data_to_entries(shuffled) == sample_record.entries

    def test_double_digit_positions_sort_numerically(self) -> None:
        entries = tuple(CubeEntry(Card(id=i, name=f"Card {i}"), score=i) for i in range(12))
        data = record_to_card_data(CubeRecord(name="x", game_id="mtg", entries=entries))
        assert card_data_to_entries(dict(sorted(data.items()))) == entries


class TestCubeOperations:
    async def test_create_cube(self, session: AsyncSession, sample_record: CubeRecord) -> None:
        """Can create a new cube with a generated id."""
        cube = await create_cube(session, sample_record, creator_id="user-1")

        assert cube.id is not None
        assert cube.card_count == 3
        assert cube.creator_id == "user-1"

    async def test_get_cube(self, session: AsyncSession, sample_record: CubeRecord) -> None:
        created = await create_cube(session, sample_record)
        await session.commit()

        cube = await get_cube(session, created.id)

        assert cube is not None
        assert cube.name == "Starter Cube"

    async def test_get_cube_not_found(self, session: AsyncSession) -> None:
        """Returns None for non-existent cube."""
        assert await get_cube(session, "nonexistent") is None

    async def test_update_cube(self, session: AsyncSession, sample_record: CubeRecord) -> None:
        created = await create_cube(session, sample_record)
        await session.commit()

        updated_record = CubeRecord(name="Renamed", game_id="yugioh", entries=sample_record.entries[:1])
        cube = await update_cube(session, created.id, updated_record)

        assert cube is not None
        assert cube.name == "Renamed"
        assert cube.card_count == 1

    async def test_update_missing_cube(self, session: AsyncSession, sample_record: CubeRecord) -> None:
        assert await update_cube(session, "nonexistent", sample_record) is None

    async def test_delete_cube(self, session: AsyncSession, sample_record: CubeRecord) -> None:
        created = await create_cube(session, sample_record)
        await session.commit()

        assert await delete_cube(session, created.id) is True
        assert await delete_cube(session, created.id) is False

    async def test_list_cubes_by_game(self, session: AsyncSession, sample_record: CubeRecord) -> None:
        await create_cube(session, sample_record)
        await create_cube(session, CubeRecord(name="Vintage", game_id="mtg"))
        await session.commit()

        cubes = await list_cubes(session, game_id="mtg")

        assert [cube.name for cube in cubes] == ["Vintage"]

    async def test_list_public_only(self, session: AsyncSession) -> None:
        await create_cube(session, CubeRecord(name="Private", game_id="mtg"))
        await create_cube(session, CubeRecord(name="Shared", game_id="mtg", is_public=True))
        await session.commit()

        cubes = await list_cubes(session, public_only=True)

        assert [cube.name for cube in cubes] == ["Shared"]

    async def test_cube_to_record(self, session: AsyncSession, sample_record: CubeRecord) -> None:
        created = await create_cube(session, sample_record)
        await session.commit()

        record = cube_to_record(created, id_prefix="db:")

        assert record.id == f"db:{created.id}"
        assert record.entries == sample_record.entries
        assert record.duplicate_limit == 3
        assert record.description == "Classic cards"

    async def test_cube_to_summary(self, session: AsyncSession, sample_record: CubeRecord) -> None:
        created = await create_cube(session, sample_record)
        await session.commit()
        await session.refresh(created)

        summary = cube_to_summary(created, id_prefix="db:")

        assert summary.card_count == 3
        assert summary.game_id == "yugioh"
        assert summary.updated_at is not None
