"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_float, optional_env_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .feed import FeedConfig, get_feed_config
from .honors import HonorsConfig, get_honors_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    StoreKind,
    get_database_config,
    get_storage_config,
    get_store_kind,
)
from .supabase import SupabaseConfig, get_supabase_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "FeedConfig",
    "HonorsConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "StoreKind",
    "SupabaseConfig",
    "SyncConfig",
    "configure_logging",
    "get_database_config",
    "get_feed_config",
    "get_honors_config",
    "get_storage_config",
    "get_store_kind",
    "get_supabase_config",
    "get_sync_config",
    "optional_env_float",
    "optional_env_int",
    "require_env_vars",
]
