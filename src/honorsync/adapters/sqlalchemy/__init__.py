"""SQLAlchemy adapter package for honorsync."""

from __future__ import annotations

from .mappings import create_all_tables, game_table, metadata
from .repositories import SqlAlchemyGameRepository
from .store import SqlAlchemyEntityStore
from .unit_of_work import (
    SqlAlchemyGameUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyEntityStore",
    "SqlAlchemyGameRepository",
    "SqlAlchemyGameUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "game_table",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
