"""Entity store over SQLAlchemy units of work, one transaction per call."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from honorsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyGameUnitOfWork
from honorsync.domain.ports.store import StoreError

if TYPE_CHECKING:
    from honorsync.domain.model import Entity
    from honorsync.domain.ports.store import EntityStore
    from honorsync.domain.ports.unit_of_work import GameUnitOfWork

log = getLogger(__name__)

type UnitOfWorkFactory = Callable[[], GameUnitOfWork]


class SqlAlchemyEntityStore:
    def __init__(self, uow_factory: UnitOfWorkFactory = SqlAlchemyGameUnitOfWork) -> None:
        self._uow_factory = uow_factory

    def fetch(self, external_id: int) -> Entity | None:
        try:
            with self._uow_factory() as uow:
                return uow.repositories.games.get(external_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to fetch game {external_id}: {exc}") from exc

    def upsert(self, entity: Entity) -> None:
        try:
            with self._uow_factory() as uow:
                games = uow.repositories.games
                if games.get(entity.external_id) is None:
                    games.add(entity)
                else:
                    games.update(entity)
                uow.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to upsert game {entity.external_id}: {exc}") from exc

    def page(self, *, offset: int, limit: int) -> list[Entity]:
        try:
            with self._uow_factory() as uow:
                return uow.repositories.games.list_page(offset=offset, limit=limit)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to list games at offset {offset}: {exc}") from exc

    def delete(self, external_id: int) -> None:
        try:
            with self._uow_factory() as uow:
                uow.repositories.games.remove(external_id)
                uow.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to delete game {external_id}: {exc}") from exc
        log.debug("Deleted game %s", external_id)


if TYPE_CHECKING:
    _store_check: EntityStore = SqlAlchemyEntityStore()
