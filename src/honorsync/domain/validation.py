"""Store-boundary validation of honor records."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from honorsync.domain.model import HonorCategory

if TYPE_CHECKING:
    from collections.abc import Mapping

MIN_HONOR_YEAR = 1900
MAX_YEARS_AHEAD = 2

VALID_CATEGORIES = frozenset(category.value for category in HonorCategory)


def honor_record_violation(
    record: Mapping[str, object],
    *,
    current_year: int | None = None,
) -> str | None:
    """Return why ``record`` would be rejected by the store, or ``None`` if valid."""

    category = record.get("category")
    if category not in VALID_CATEGORIES:
        return f"invalid category {category!r}"

    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        return "missing name"

    year = record.get("year")
    if isinstance(year, bool) or not isinstance(year, int):
        return f"invalid year {year!r}"
    latest = (current_year or datetime.now(UTC).year) + MAX_YEARS_AHEAD
    if not MIN_HONOR_YEAR <= year <= latest:
        return f"year {year} outside {MIN_HONOR_YEAR}..{latest}"

    return None
