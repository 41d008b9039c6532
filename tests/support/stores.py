"""In-memory fakes for the store and checkpoint ports."""

from __future__ import annotations

import copy
import threading
from collections import Counter
from typing import TYPE_CHECKING

from honorsync.domain.ports.store import StoreError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from honorsync.domain.model import Entity
    from honorsync.domain.ports.checkpoint import Checkpoint, CheckpointStore
    from honorsync.domain.ports.store import EntityStore


class FakeEntityStore:
    """Thread-safe dict-backed store; entities are copied in and out.

    ``fail_upserts`` maps an external id to the number of upserts that raise
    ``StoreError`` before one succeeds.
    """

    def __init__(
        self,
        entities: Iterable[Entity] = (),
        *,
        fail_upserts: dict[int, int] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self.entities: dict[int, Entity] = {
            entity.external_id: copy.deepcopy(entity) for entity in entities
        }
        self._fail_upserts = dict(fail_upserts or {})
        self.calls: Counter[str] = Counter()
        self.upserted: list[int] = []
        self.deleted: list[int] = []

    def fetch(self, external_id: int) -> Entity | None:
        with self._lock:
            self.calls["fetch"] += 1
            entity = self.entities.get(external_id)
            return copy.deepcopy(entity) if entity is not None else None

    def upsert(self, entity: Entity) -> None:
        with self._lock:
            self.calls["upsert"] += 1
            remaining = self._fail_upserts.get(entity.external_id, 0)
            if remaining:
                self._fail_upserts[entity.external_id] = remaining - 1
                raise StoreError(f"upsert of {entity.external_id} failed")
            self.entities[entity.external_id] = copy.deepcopy(entity)
            self.upserted.append(entity.external_id)

    def page(self, *, offset: int, limit: int) -> list[Entity]:
        with self._lock:
            self.calls["page"] += 1
            ordered = [self.entities[key] for key in sorted(self.entities)]
            return [copy.deepcopy(entity) for entity in ordered[offset : offset + limit]]

    def delete(self, external_id: int) -> None:
        with self._lock:
            self.calls["delete"] += 1
            self.entities.pop(external_id, None)
            self.deleted.append(external_id)

    @property
    def writes(self) -> int:
        return self.calls["upsert"] + self.calls["delete"]


class FakeCheckpointStore:
    def __init__(self, checkpoint: Checkpoint | None = None) -> None:
        self.checkpoint = checkpoint
        self.saved: list[Checkpoint] = []
        self.cleared = False

    def load(self) -> Checkpoint | None:
        return self.checkpoint

    def save(self, checkpoint: Checkpoint) -> None:
        self.checkpoint = checkpoint
        self.saved.append(checkpoint)

    def clear(self) -> None:
        self.checkpoint = None
        self.cleared = True


if TYPE_CHECKING:
    _store_check: EntityStore = FakeEntityStore()
    _checkpoint_check: CheckpointStore = FakeCheckpointStore()
