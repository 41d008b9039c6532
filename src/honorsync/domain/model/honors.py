"""Honor facts, classifications and persisted honor entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .enums import ClassificationRule, HonorCategory

type HonorRecord = dict[str, object]


@dataclass(slots=True, frozen=True)
class ReferencedEntity:
    external_id: int
    display_name: str | None = None


@dataclass(slots=True, frozen=True)
class RawHonorFact:
    """One scraped honor listing, possibly naming several entities.

    Optional text fields use ``None`` as the single "unknown" state; adapters
    normalise blank strings before constructing facts. ``referenced_entities``
    is ``None`` when the listing carried no entity list at all, which is
    counted separately from an empty list.
    """

    id: str
    slug: str | None = None
    title: str | None = None
    year: int | None = None
    award_set: str | None = None
    position: str | None = None
    url: str | None = None
    result_raw: str | None = None
    category: HonorCategory | None = None
    referenced_entities: tuple[ReferencedEntity, ...] | None = None


class GroupKey(NamedTuple):
    """Facts competing for one primary winner."""

    award_type: str
    year: int


@dataclass(slots=True, frozen=True)
class Classification:
    category: HonorCategory
    result_raw: str
    rule: ClassificationRule

    @property
    def low_confidence(self) -> bool:
        return self.rule is ClassificationRule.ENTITY_COUNT


@dataclass(slots=True, frozen=True)
class ClassifiedFact:
    fact: RawHonorFact
    award_type: str
    year: int
    classification: Classification
    subcategory: str

    @property
    def category(self) -> HonorCategory:
        return self.classification.category

    @property
    def group_key(self) -> GroupKey:
        return GroupKey(self.award_type, self.year)


@dataclass(slots=True)
class HonorEntry:
    """Per-entity, per-fact honor as persisted into an entity's honor list.

    ``primary_winner`` stays ``None`` for entries that never took part in a
    primary resolution (non-winners) and is left out of the stored record.
    """

    honor_id: str
    external_id: int
    name: str
    year: int
    award_type: str
    category: HonorCategory
    subcategory: str
    result_raw: str
    source_tag: str
    created_at: str
    award_set: str | None = None
    position: str | None = None
    title: str | None = None
    slug: str | None = None
    url: str | None = None
    entity_display_name: str | None = None
    primary_winner: bool | None = None
    classified_by: ClassificationRule | None = None

    @property
    def group_key(self) -> GroupKey:
        return GroupKey(self.award_type, self.year)

    def to_record(self) -> HonorRecord:
        record: HonorRecord = {
            "honor_id": self.honor_id,
            "name": self.name,
            "year": self.year,
            "award_type": self.award_type,
            "award_set": self.award_set,
            "position": self.position,
            "title": self.title,
            "slug": self.slug,
            "url": self.url,
            "entity_display_name": self.entity_display_name,
            "category": str(self.category),
            "subcategory": self.subcategory,
            "result_raw": self.result_raw,
            "source_tag": self.source_tag,
            "created_at": self.created_at,
        }
        if self.primary_winner is not None:
            record["primary_winner"] = self.primary_winner
        if self.classified_by is not None:
            record["classified_by"] = str(self.classified_by)
        return record
