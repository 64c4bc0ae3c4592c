"""
SQLAlchemy ORM models for persistent storage.

Cubes are stored one row per cube; the cards live in a JSON column keyed
by slot position so a cube round-trips without a join.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def _new_cube_id() -> str:
    return str(uuid.uuid4())


class CubeDB(Base):
    """
    A user-created cube.

    card_data maps slot position ("0", "1", ...) to {"card": {...}, "score": int, "zone": str}.
    """

    __tablename__ = "cubes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_cube_id)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    game_id: Mapped[str] = mapped_column(String(50), index=True)
    creator_id: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    duplicate_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    card_count: Mapped[int] = mapped_column(Integer, default=0)
    card_data: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<CubeDB(id={self.id}, name={self.name}, game={self.game_id})>"
