"""Domain model for honors and catalog entities."""

from __future__ import annotations

from .entity import Entity
from .enums import (
    ClassificationRule,
    HonorCategory,
    PrimaryOutcome,
    ResidueAction,
    SkipReason,
    SyncMode,
)
from .honors import (
    Classification,
    ClassifiedFact,
    GroupKey,
    HonorEntry,
    HonorRecord,
    RawHonorFact,
    ReferencedEntity,
)

__all__ = [
    "Classification",
    "ClassificationRule",
    "ClassifiedFact",
    "Entity",
    "GroupKey",
    "HonorCategory",
    "HonorEntry",
    "HonorRecord",
    "PrimaryOutcome",
    "RawHonorFact",
    "ReferencedEntity",
    "ResidueAction",
    "SkipReason",
    "SyncMode",
]
