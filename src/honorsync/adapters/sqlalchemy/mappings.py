"""SQLAlchemy table metadata for the game catalog."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Column, DateTime, Integer, MetaData, String, Table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _utcnow() -> datetime:
    return datetime.now(UTC)


metadata = MetaData()

game_table = Table(
    "game",
    metadata,
    Column("bgg_id", Integer, primary_key=True, autoincrement=False),
    Column("name", String(512), nullable=False),
    Column("year_published", Integer, nullable=True),
    Column("image_url", String(1024), nullable=True),
    Column("thumbnail_url", String(1024), nullable=True),
    Column("honors", JSON, nullable=False, default=list),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    ),
)


def create_all_tables(engine: Engine) -> None:
    """Create tables without running migrations (used by tests)."""

    metadata.create_all(engine)
