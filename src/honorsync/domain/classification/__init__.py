"""Classification of raw honor facts."""

from __future__ import annotations

from .award import UNKNOWN_AWARD_TYPE, derive_award_type, resolve_year
from .classifier import (
    CLASSIFICATION_RULES,
    TRUNCATED_CATEGORY_FAMILIES,
    ClassificationInput,
    TruncatedAwardFamily,
    classify,
)
from .subcategory import GAME_OF_THE_YEAR, OVERALL, derive_subcategory

__all__ = [
    "CLASSIFICATION_RULES",
    "GAME_OF_THE_YEAR",
    "OVERALL",
    "TRUNCATED_CATEGORY_FAMILIES",
    "UNKNOWN_AWARD_TYPE",
    "ClassificationInput",
    "TruncatedAwardFamily",
    "classify",
    "derive_award_type",
    "derive_subcategory",
    "resolve_year",
]
