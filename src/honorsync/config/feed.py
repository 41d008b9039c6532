"""Configuration for fetching the honor feed over HTTP."""

from __future__ import annotations

from dataclasses import dataclass

from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import StorageConfig, get_storage_config

DEFAULT_FEED_CACHE_TTL_SECONDS = 6 * 60 * 60


@dataclass(frozen=True, slots=True)
class FeedConfig:
    resilience: ResilienceConfig


def get_feed_config(*, storage: StorageConfig | None = None) -> FeedConfig:
    storage_config = storage or get_storage_config()
    resilience = ResilienceConfig(
        name="honor-feed",
        timeout_seconds=120.0,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        retry=RetryPolicy(total=3),
        cache=CacheConfig(
            enabled=True,
            sqlite_path=str(storage_config.http_cache_path()),
            default_ttl_seconds=DEFAULT_FEED_CACHE_TTL_SECONDS,
        ),
    )
    return FeedConfig(resilience=resilience)
