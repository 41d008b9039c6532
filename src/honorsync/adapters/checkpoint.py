"""JSON file checkpoints for resumable sync runs."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from honorsync.domain.ports.checkpoint import Checkpoint

if TYPE_CHECKING:
    from honorsync.domain.ports.checkpoint import CheckpointStore

log = getLogger(__name__)


class JsonFileCheckpointStore:
    """Stores one checkpoint as ``{lastIndex, processed, updated, timestamp}``."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> Checkpoint | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            payload = json.loads(raw)
            return Checkpoint(
                last_index=int(payload["lastIndex"]),
                processed=int(payload.get("processed", 0)),
                updated=int(payload.get("updated", 0)),
                timestamp=datetime.fromisoformat(payload["timestamp"]),
            )
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            log.warning("Ignoring unreadable checkpoint %s: %s", self.path, exc)
            return None

    def save(self, checkpoint: Checkpoint) -> None:
        payload = {
            "lastIndex": checkpoint.last_index,
            "processed": checkpoint.processed,
            "updated": checkpoint.updated,
            "timestamp": checkpoint.timestamp.isoformat(),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            Path(tmp_name).replace(self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug("Checkpoint saved at index %s", checkpoint.last_index)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


if TYPE_CHECKING:
    _checkpoint_check: CheckpointStore = JsonFileCheckpointStore("checkpoint.json")
