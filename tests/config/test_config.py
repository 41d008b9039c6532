from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from honorsync.config import (
    ConfigurationError,
    MissingConfigurationError,
    StoreKind,
    get_database_config,
    get_feed_config,
    get_honors_config,
    get_storage_config,
    get_store_kind,
    get_sync_config,
    require_env_vars,
)
from honorsync.config.storage import CHECKPOINT_FILENAME, DEFAULT_DB_FILENAME
from honorsync.config.sync import DEFAULT_BATCH_SIZE
from honorsync.domain.primary_winner import DEFAULT_MULTI_EQUAL_AWARDS


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_A", raising=False)
    monkeypatch.setenv("MISSING_B", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_data_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("HONORSYNC_DATA_DIR", str(custom))

    storage = get_storage_config()

    assert storage.resolve_data_dir() == custom.resolve()
    assert storage.checkpoint_path() == custom.resolve() / CHECKPOINT_FILENAME
    assert custom.exists()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_uri_defaults_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("HONORSYNC_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_config().uri

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_store_kind_from_env_and_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HONORSYNC_STORE", raising=False)
    assert get_store_kind() is StoreKind.SQLALCHEMY

    monkeypatch.setenv("HONORSYNC_STORE", " Supabase ")
    assert get_store_kind() is StoreKind.SUPABASE
    assert get_store_kind("sqlalchemy") is StoreKind.SQLALCHEMY


def test_unknown_store_kind_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="Unknown store"):
        get_store_kind("postgres")


def test_sync_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HONORSYNC_SYNC_CONCURRENCY", "5")
    monkeypatch.setenv("HONORSYNC_SYNC_CALL_DELAY", "0")
    monkeypatch.delenv("HONORSYNC_SYNC_BATCH_SIZE", raising=False)

    config = get_sync_config()

    assert config.concurrency == 5
    assert config.call_delay_seconds == 0.0
    assert config.batch_size == DEFAULT_BATCH_SIZE


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("HONORSYNC_SYNC_BATCH_SIZE", "many", "must be an integer"),
        ("HONORSYNC_SYNC_BATCH_SIZE", "0", "must be >= 1"),
        ("HONORSYNC_SYNC_CALL_DELAY", "-1", "must be >= 0"),
    ],
)
def test_sync_config_rejects_bad_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=message):
        get_sync_config()


def test_honors_config_parses_multi_equal_awards(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HONORSYNC_MULTI_EQUAL_AWARDS", "Mensa Select, ,Origins Award")
    monkeypatch.setenv("HONORSYNC_SOURCE_TAG", "nightly")

    config = get_honors_config()

    assert config.multi_equal_awards == ("Mensa Select", "Origins Award")
    assert config.source_tag == "nightly"


def test_honors_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HONORSYNC_MULTI_EQUAL_AWARDS", raising=False)

    assert get_honors_config().multi_equal_awards == DEFAULT_MULTI_EQUAL_AWARDS


def test_feed_config_caches_in_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HONORSYNC_DATA_DIR", str(tmp_path))

    cache = get_feed_config().resilience.cache

    assert cache is not None
    assert cache.sqlite_path == str(tmp_path.resolve() / "http_cache.db")
