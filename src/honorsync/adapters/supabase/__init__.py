"""Public interface for the Supabase adapter."""

from __future__ import annotations

from .schema import GameRow
from .store import SupabaseAPIError, SupabaseEntityStore

__all__ = [
    "GameRow",
    "SupabaseAPIError",
    "SupabaseEntityStore",
]
