"""Checkpoint contract for resumable sync runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(slots=True, frozen=True)
class Checkpoint:
    """Progress after the last fully committed batch.

    ``last_index`` is the absolute index, in external-id order, of the last
    entity of that batch.
    """

    last_index: int
    processed: int
    updated: int
    timestamp: datetime


@runtime_checkable
class CheckpointStore(Protocol):
    def load(self) -> Checkpoint | None: ...

    def save(self, checkpoint: Checkpoint) -> None: ...

    def clear(self) -> None: ...
