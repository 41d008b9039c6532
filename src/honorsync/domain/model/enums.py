"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class HonorCategory(StrEnum):
    """Closed result taxonomy accepted by the catalog store."""

    WINNER = "Winner"
    NOMINEE = "Nominee"
    SPECIAL = "Special"


class ClassificationRule(StrEnum):
    """Classifier stage that produced a category (persisted as ``classified_by``)."""

    EXPLICIT_RESULT = "explicit_result"
    POSITION = "position"
    TEXT_TOKEN = "text_token"
    ENTITY_COUNT = "entity_count"
    KEYWORD = "keyword"
    FALLBACK = "fallback"


class SkipReason(StrEnum):
    NO_ENTITIES = "no_entities"
    EMPTY_ENTITIES = "empty_entities"
    INVALID_ENTITY = "invalid_entity"
    NO_YEAR = "no_year"
    DUPLICATE = "duplicate"


class PrimaryOutcome(StrEnum):
    MULTI_EQUAL = "multi_equal"
    UNCHANGED = "unchanged"
    RESOLVED = "resolved"
    FORCED_FALLBACK = "forced_fallback"


class SyncMode(StrEnum):
    MERGE = "merge"
    REPLACE = "replace"


class ResidueAction(StrEnum):
    RENAME = "rename"
    DELETE = "delete"
