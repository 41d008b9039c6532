"""Honor naming and primary-winner settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from honorsync.domain.primary_winner import DEFAULT_MULTI_EQUAL_AWARDS
from honorsync.domain.reconciliation.naming import DEFAULT_HONOR_BASE_URL, DEFAULT_SOURCE_TAG


@dataclass(frozen=True, slots=True)
class HonorsConfig:
    base_url: str = DEFAULT_HONOR_BASE_URL
    source_tag: str = DEFAULT_SOURCE_TAG
    multi_equal_awards: tuple[str, ...] = DEFAULT_MULTI_EQUAL_AWARDS


def get_honors_config() -> HonorsConfig:
    raw_awards = os.getenv("HONORSYNC_MULTI_EQUAL_AWARDS")
    awards = (
        tuple(part.strip() for part in raw_awards.split(",") if part.strip())
        if raw_awards
        else DEFAULT_MULTI_EQUAL_AWARDS
    )
    return HonorsConfig(
        base_url=os.getenv("HONORSYNC_HONOR_BASE_URL") or DEFAULT_HONOR_BASE_URL,
        source_tag=os.getenv("HONORSYNC_SOURCE_TAG") or DEFAULT_SOURCE_TAG,
        multi_equal_awards=awards,
    )
