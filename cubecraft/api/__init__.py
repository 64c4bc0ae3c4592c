from cubecraft.api.cubes import router as cubes_router
from cubecraft.api.games import router as games_router
from cubecraft.api.health import router as health_router
from cubecraft.api.sessions import router as sessions_router

__all__ = [
    "cubes_router",
    "games_router",
    "health_router",
    "sessions_router",
]
