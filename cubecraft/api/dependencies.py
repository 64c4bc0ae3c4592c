"""
Shared FastAPI dependencies.

Each returns a process-wide instance; tests replace them through
app.dependency_overrides.
"""

from functools import lru_cache

from cubecraft.db.database import async_session_factory
from cubecraft.games import default_registry
from cubecraft.games.registry import GameRegistry
from cubecraft.services.builder_sessions import BuilderSessions
from cubecraft.services.catalog import CardCatalog, JsonCardCatalog
from cubecraft.services.persistence import CubeGateway, DatabaseCubeStore, StaticCubeStore


@lru_cache(maxsize=1)
def get_catalog() -> CardCatalog:
    return JsonCardCatalog()


@lru_cache(maxsize=1)
def get_cube_gateway() -> CubeGateway:
    return CubeGateway(StaticCubeStore(), DatabaseCubeStore(async_session_factory))


def get_game_registry() -> GameRegistry:
    return default_registry


@lru_cache(maxsize=1)
def get_builder_sessions() -> BuilderSessions:
    return BuilderSessions()
