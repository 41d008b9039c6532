"""Supabase (PostgREST) configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_GAMES_TABLE = "games"


@dataclass(frozen=True, slots=True)
class SupabaseConfig:
    table: str
    resilience: ResilienceConfig


def get_supabase_config() -> SupabaseConfig:
    values = require_env_vars(("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"))
    url = values["SUPABASE_URL"].rstrip("/")
    key = values["SUPABASE_SERVICE_ROLE_KEY"]
    table = os.getenv("SUPABASE_GAMES_TABLE") or DEFAULT_GAMES_TABLE

    resilience = ResilienceConfig(
        name="supabase",
        base_url=f"{url}/rest/v1",
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        cache=None,
        default_headers={
            "apikey": key,
            "Authorization": f"Bearer {key}",
        },
    )

    return SupabaseConfig(table=table, resilience=resilience)
