"""Display names and URLs for persisted honor entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from honorsync.domain.classification import OVERALL

if TYPE_CHECKING:
    from honorsync.domain.model import ClassifiedFact

DEFAULT_HONOR_BASE_URL = "https://boardgamegeek.com"
DEFAULT_SOURCE_TAG = "honorsync"


def honor_name(classified: ClassifiedFact) -> str:
    parts = [str(classified.year), classified.award_type]
    if classified.subcategory != OVERALL:
        parts.append(classified.subcategory)
    parts.append(str(classified.category))
    return " ".join(parts)


def honor_url(classified: ClassifiedFact, *, base_url: str = DEFAULT_HONOR_BASE_URL) -> str:
    fact = classified.fact
    base = base_url.rstrip("/")
    if fact.url:
        if fact.url.startswith(("http://", "https://")):
            return fact.url
        return f"{base}/{fact.url.lstrip('/')}"
    if fact.slug:
        return f"{base}/boardgamehonor/{fact.id}/{fact.slug}"
    return f"{base}/boardgamehonor/{fact.id}"
