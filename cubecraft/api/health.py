"""
Liveness and readiness probes.

Bundled cubes and game configs are served from disk and memory, so the
process is live as soon as it answers. Saving, loading and listing user
cubes needs the database, so readiness is a database round trip.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from cubecraft.config import settings
from cubecraft.db.database import get_session

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    service: str = settings.app_name
    database: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """The process is up; game and bundled cube routes can answer."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    User cube storage is reachable.

    Returns 503 while the database is down: builder sessions still work,
    but saves and loads of db: cubes would fail.
    """
    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")
    return HealthResponse(status="ready", database="connected")
