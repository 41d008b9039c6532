from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from honorsync.config import ConfigurationError
from honorsync.domain.model import Entity
from honorsync.ui import cli
from tests.support.stores import FakeEntityStore

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def fast_sync_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HONORSYNC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HONORSYNC_SYNC_CALL_DELAY", "0")
    monkeypatch.setenv("HONORSYNC_SYNC_RETRY_BACKOFF", "0")


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> FakeEntityStore:
    fake = FakeEntityStore([Entity(1, "Sky Team"), Entity(4, "Cascadia")])
    requested: list[str | None] = []

    def fake_build_store(kind: str | None = None) -> FakeEntityStore:
        requested.append(kind)
        return fake

    monkeypatch.setattr(cli, "build_store", fake_build_store)
    return fake


def test_reconcile_logs_group_audit(feed_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="honorsync"):
        cli.main(["reconcile", "--input", str(feed_path)])

    assert "Facts: seen=10, used=7" in caplog.text
    assert "missing_winner=1" in caplog.text


def test_sync_defaults_to_dry_run(feed_path: Path, store: FakeEntityStore) -> None:
    cli.main(["sync", "--input", str(feed_path)])

    assert store.writes == 0


def test_sync_dry_run_logs_each_projected_change(
    feed_path: Path, store: FakeEntityStore, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="honorsync"):
        cli.main(["sync", "--input", str(feed_path)])

    assert "Projected: game 1 updated" in caplog.text
    assert "Projected: game 4 updated" in caplog.text
    assert "Projected: game 5 missing" in caplog.text
    assert "Applied:" not in caplog.text
    assert store.writes == 0


def test_sync_apply_writes_honors(
    feed_path: Path, store: FakeEntityStore, tmp_path: Path
) -> None:
    cli.main(["sync", "--input", str(feed_path), "--apply", "--limit", "1"])

    assert store.upserted == [1]
    assert (tmp_path / "sync-honors.checkpoint.json").exists()


def test_sync_passes_options(
    monkeypatch: pytest.MonkeyPatch, feed_path: Path, store: FakeEntityStore
) -> None:
    captured: dict[str, object] = {}

    def fake_sync(source: str, options: object, **kwargs: object) -> None:
        captured.update(kwargs, source=source, options=options)
        raise SystemExit(0)

    monkeypatch.setattr(cli, "sync_honors", fake_sync)

    with pytest.raises(SystemExit):
        cli.main(
            [
                "sync",
                "--input",
                str(feed_path),
                "--apply",
                "--replace",
                "--create-missing",
                "--start-offset",
                "3",
                "--award-type",
                "Mensa Select",
            ]
        )

    options = captured["options"]
    assert isinstance(options, cli.SyncOptions)
    assert not options.dry_run
    assert options.mode == "replace"
    assert options.create_missing
    assert options.start_offset == 3
    assert captured["award_type"] == "Mensa Select"
    assert captured["store"] is store


def test_reset_checkpoint_conflicts_with_resume(feed_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync", "--input", str(feed_path), "--resume", "--reset-checkpoint"])

    assert excinfo.value.code == 2


@pytest.mark.parametrize("limit", ["0", "-2", "ten"])
def test_invalid_limit_is_rejected(feed_path: Path, limit: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync", "--input", str(feed_path), "--limit", limit])

    assert excinfo.value.code == 2


def test_configuration_errors_exit_with_2(
    monkeypatch: pytest.MonkeyPatch, feed_path: Path
) -> None:
    def broken_store(_kind: str | None = None) -> FakeEntityStore:
        raise ConfigurationError("Missing configuration for: SUPABASE_URL")

    monkeypatch.setattr(cli, "build_store", broken_store)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["residue", "--input", str(feed_path), "--store", "supabase"])

    assert excinfo.value.code == 2


def test_unreadable_feed_exits_with_1(tmp_path: Path, store: FakeEntityStore) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["residue", "--input", str(tmp_path / "absent.json")])

    assert excinfo.value.code == 1
    assert store.writes == 0


def test_refresh_primaries_dry_run(store: FakeEntityStore) -> None:
    cli.main(["refresh-primaries", "--force"])

    assert store.writes == 0


def test_first_interrupt_requests_stop(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "_STOP_REQUESTED", cli.threading.Event())

    cli.sigint_handler(2, None)
    assert cli._STOP_REQUESTED.is_set()  # noqa: SLF001

    with pytest.raises(SystemExit) as excinfo:
        cli.sigint_handler(2, None)
    assert excinfo.value.code == 0
