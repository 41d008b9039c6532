from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003

from honorsync.adapters.checkpoint import JsonFileCheckpointStore
from honorsync.domain.ports.checkpoint import Checkpoint

SAVED_AT = datetime(2025, 3, 1, 12, 30, tzinfo=UTC)


def test_missing_checkpoint_loads_as_none(tmp_path: Path) -> None:
    assert JsonFileCheckpointStore(tmp_path / "checkpoint.json").load() is None


def test_save_writes_camel_case_json(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "checkpoint.json"
    store = JsonFileCheckpointStore(path)

    store.save(Checkpoint(last_index=299, processed=300, updated=12, timestamp=SAVED_AT))

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "lastIndex": 299,
        "processed": 300,
        "updated": 12,
        "timestamp": "2025-03-01T12:30:00+00:00",
    }
    assert [entry.name for entry in path.parent.iterdir()] == ["checkpoint.json"]


def test_save_then_load_overwrites_previous(tmp_path: Path) -> None:
    store = JsonFileCheckpointStore(tmp_path / "checkpoint.json")
    store.save(Checkpoint(last_index=1, processed=2, updated=0, timestamp=SAVED_AT))
    store.save(Checkpoint(last_index=3, processed=4, updated=1, timestamp=SAVED_AT))

    loaded = store.load()

    assert loaded == Checkpoint(last_index=3, processed=4, updated=1, timestamp=SAVED_AT)


def test_corrupt_checkpoint_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "checkpoint.json"
    path.write_text('{"processed": 3}', encoding="utf-8")

    assert JsonFileCheckpointStore(path).load() is None


def test_clear_removes_file_and_tolerates_absence(tmp_path: Path) -> None:
    path = tmp_path / "checkpoint.json"
    store = JsonFileCheckpointStore(path)
    store.save(Checkpoint(last_index=0, processed=1, updated=1, timestamp=SAVED_AT))

    store.clear()
    store.clear()

    assert not path.exists()
