"""Ports implemented by adapters."""

from __future__ import annotations

from .checkpoint import Checkpoint, CheckpointStore
from .persistence import GameRepository, Repository
from .store import EntityStore, StoreError, iter_entities
from .unit_of_work import GameRepositories, GameUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "Checkpoint",
    "CheckpointStore",
    "EntityStore",
    "GameRepositories",
    "GameRepository",
    "GameUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "StoreError",
    "UnitOfWork",
    "iter_entities",
]
