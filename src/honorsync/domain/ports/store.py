"""Store contract consumed by the sync, residue and refresh services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from honorsync.domain.model import Entity


class StoreError(RuntimeError):
    """Raised by store adapters when a read or write against the store fails."""


@runtime_checkable
class EntityStore(Protocol):
    """Entities keyed by external id; ``page`` orders by external id."""

    def fetch(self, external_id: int) -> Entity | None: ...

    def upsert(self, entity: Entity) -> None: ...

    def page(self, *, offset: int, limit: int) -> list[Entity]: ...

    def delete(self, external_id: int) -> None: ...


def iter_entities(store: EntityStore, *, page_size: int) -> Iterator[Entity]:
    """Yield every stored entity, one page at a time."""

    if page_size <= 0:
        raise ValueError("page_size must be positive")
    offset = 0
    while True:
        page = store.page(offset=offset, limit=page_size)
        yield from page
        if len(page) < page_size:
            return
        offset += page_size
