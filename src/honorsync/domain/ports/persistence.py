"""Ports for persisting catalog entities."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from honorsync.domain.model import Entity


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class GameRepository(Repository[Entity], Protocol):
    """Persistence contract for board game entities."""

    def get(self, external_id: int) -> Entity | None: ...

    def list_page(self, *, offset: int, limit: int) -> list[Entity]: ...

    def update(self, entity: Entity) -> None: ...

    def remove(self, external_id: int) -> None: ...
