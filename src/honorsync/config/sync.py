"""Synchronization defaults for honor sync runs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float, optional_env_int

DEFAULT_BATCH_SIZE = 300
DEFAULT_CONCURRENCY = 3
DEFAULT_CALL_DELAY_SECONDS = 0.8
DEFAULT_CALL_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BACKOFF_SECONDS = 1.0
DEFAULT_PAGE_SIZE = 1000


@dataclass(frozen=True, slots=True)
class SyncConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    concurrency: int = DEFAULT_CONCURRENCY
    call_delay_seconds: float = DEFAULT_CALL_DELAY_SECONDS
    call_timeout_seconds: float = DEFAULT_CALL_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS
    page_size: int = DEFAULT_PAGE_SIZE


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        batch_size=optional_env_int("HONORSYNC_SYNC_BATCH_SIZE", DEFAULT_BATCH_SIZE, minimum=1),
        concurrency=optional_env_int("HONORSYNC_SYNC_CONCURRENCY", DEFAULT_CONCURRENCY, minimum=1),
        call_delay_seconds=optional_env_float(
            "HONORSYNC_SYNC_CALL_DELAY", DEFAULT_CALL_DELAY_SECONDS
        ),
        call_timeout_seconds=optional_env_float(
            "HONORSYNC_SYNC_CALL_TIMEOUT", DEFAULT_CALL_TIMEOUT_SECONDS, minimum=0.1
        ),
        max_retries=optional_env_int("HONORSYNC_SYNC_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        retry_backoff_seconds=optional_env_float(
            "HONORSYNC_SYNC_RETRY_BACKOFF", DEFAULT_RETRY_BACKOFF_SECONDS
        ),
        page_size=optional_env_int("HONORSYNC_SYNC_PAGE_SIZE", DEFAULT_PAGE_SIZE, minimum=1),
    )
