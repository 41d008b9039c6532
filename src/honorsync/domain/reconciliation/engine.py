"""Reconciliation of raw honor facts into per-entity honor entries.

The engine is a single synchronous pass over a fully materialised feed:

1. every usable fact is classified once and its subcategory derived once,
2. one ``HonorEntry`` is emitted per referenced entity, sharing the fact's
   honor id, category and subcategory,
3. entries are grouped by (award_type, year) and each group holding a Winner
   gets its primary winner resolved.

Primary resolution needs complete groups, so nothing is emitted until the
whole feed has been read. All aggregation lives in locals of ``reconcile``.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from honorsync.domain.classification import (
    ClassificationInput,
    classify,
    derive_award_type,
    derive_subcategory,
    resolve_year,
)
from honorsync.domain.model import (
    ClassifiedFact,
    GroupKey,
    HonorCategory,
    HonorEntry,
    PrimaryOutcome,
    SkipReason,
)
from honorsync.domain.primary_winner import PrimaryWinnerResolver

from .audit import GroupAudit, audit_groups
from .naming import DEFAULT_HONOR_BASE_URL, DEFAULT_SOURCE_TAG, honor_name, honor_url

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from honorsync.domain.model import HonorRecord, RawHonorFact, ReferencedEntity

log = getLogger(__name__)

FACT_SKIP_REASONS = frozenset(
    {SkipReason.NO_ENTITIES, SkipReason.EMPTY_ENTITIES, SkipReason.NO_YEAR}
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ReconciliationStats:
    facts_seen: int = 0
    facts_used: int = 0
    facts_filtered: int = 0
    skipped: Counter[SkipReason] = field(default_factory=Counter)
    entries_emitted: int = 0
    categories: Counter[HonorCategory] = field(default_factory=Counter)
    low_confidence: int = 0
    groups_resolved: int = 0
    multi_equal_groups: int = 0
    forced_fallbacks: int = 0

    @property
    def facts_skipped(self) -> int:
        return sum(count for reason, count in self.skipped.items() if reason in FACT_SKIP_REASONS)


@dataclass(slots=True)
class ReconciliationResult:
    entries_by_entity: dict[int, list[HonorEntry]]
    classified: list[ClassifiedFact]
    stats: ReconciliationStats
    audit: GroupAudit

    def iter_entries(self) -> Iterator[HonorEntry]:
        for entries in self.entries_by_entity.values():
            yield from entries

    def honors_for(self, external_id: int) -> list[HonorRecord]:
        return [entry.to_record() for entry in self.entries_by_entity.get(external_id, ())]


class ReconciliationEngine:
    def __init__(
        self,
        *,
        resolver: PrimaryWinnerResolver | None = None,
        source_tag: str = DEFAULT_SOURCE_TAG,
        base_url: str = DEFAULT_HONOR_BASE_URL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._resolver = resolver or PrimaryWinnerResolver()
        self._source_tag = source_tag
        self._base_url = base_url
        self._clock = clock

    def reconcile(
        self,
        facts: Iterable[RawHonorFact],
        *,
        award_type: str | None = None,
    ) -> ReconciliationResult:
        """Classify ``facts`` and resolve primary winners per award year.

        ``award_type`` restricts the run to one award family; the filter is
        applied before grouping so retained groups are always complete.
        """

        stats = ReconciliationStats()
        created_at = self._clock().isoformat()
        wanted_award = award_type.casefold() if award_type else None

        classified_facts: list[ClassifiedFact] = []
        entries_by_entity: dict[int, list[HonorEntry]] = defaultdict(list)
        seen_pairs: set[tuple[str, int]] = set()

        for fact in facts:
            stats.facts_seen += 1
            classified = self._classify_fact(fact, stats, wanted_award)
            if classified is None:
                continue
            entities = self._usable_entities(fact, stats)
            if not entities:
                continue

            stats.facts_used += 1
            classified_facts.append(classified)
            stats.categories[classified.category] += 1
            if classified.classification.low_confidence:
                stats.low_confidence += 1

            for entity in entities:
                pair = (fact.id, entity.external_id)
                if pair in seen_pairs:
                    stats.skipped[SkipReason.DUPLICATE] += 1
                    log.debug("Duplicate honor %s for entity %s", fact.id, entity.external_id)
                    continue
                seen_pairs.add(pair)
                entries_by_entity[entity.external_id].append(
                    self._build_entry(classified, entity, created_at)
                )
                stats.entries_emitted += 1

        self._resolve_primaries(entries_by_entity, stats)
        audit = audit_groups(
            (entry for entries in entries_by_entity.values() for entry in entries),
            is_multi_equal=self._resolver.is_multi_equal,
        )

        log.info(
            "Reconciled %s of %s facts into %s entries for %s entities (skipped=%s, "
            "low_confidence=%s, forced_fallbacks=%s)",
            stats.facts_used,
            stats.facts_seen,
            stats.entries_emitted,
            len(entries_by_entity),
            dict(stats.skipped),
            stats.low_confidence,
            stats.forced_fallbacks,
        )

        return ReconciliationResult(
            entries_by_entity=dict(sorted(entries_by_entity.items())),
            classified=classified_facts,
            stats=stats,
            audit=audit,
        )

    def _classify_fact(
        self,
        fact: RawHonorFact,
        stats: ReconciliationStats,
        wanted_award: str | None,
    ) -> ClassifiedFact | None:
        if fact.referenced_entities is None:
            stats.skipped[SkipReason.NO_ENTITIES] += 1
            log.debug("Skipping honor %s: no entity list", fact.id)
            return None
        if not fact.referenced_entities:
            stats.skipped[SkipReason.EMPTY_ENTITIES] += 1
            log.debug("Skipping honor %s: empty entity list", fact.id)
            return None

        year = resolve_year(fact)
        if year is None:
            stats.skipped[SkipReason.NO_YEAR] += 1
            log.debug("Skipping honor %s: no resolvable year", fact.id)
            return None

        award_type = derive_award_type(
            award_set=fact.award_set,
            title=fact.title,
            position=fact.position,
        )
        if wanted_award is not None and award_type.casefold() != wanted_award:
            stats.facts_filtered += 1
            return None

        entity_count = sum(1 for entity in fact.referenced_entities if entity.external_id > 0)
        classification = classify(
            ClassificationInput(
                result_raw=fact.result_raw,
                position=fact.position,
                slug=fact.slug,
                title=fact.title,
                award_type=award_type,
                entity_count=entity_count,
                prior_category=fact.category,
            )
        )
        return ClassifiedFact(
            fact=fact,
            award_type=award_type,
            year=year,
            classification=classification,
            subcategory=derive_subcategory(fact.position, award_type),
        )

    @staticmethod
    def _usable_entities(fact: RawHonorFact, stats: ReconciliationStats) -> list[ReferencedEntity]:
        entities = [entity for entity in fact.referenced_entities or () if entity.external_id > 0]
        dropped = len(fact.referenced_entities or ()) - len(entities)
        if dropped:
            stats.skipped[SkipReason.INVALID_ENTITY] += dropped
            log.debug("Honor %s: dropped %s entities without a valid id", fact.id, dropped)
        if not entities:
            stats.skipped[SkipReason.EMPTY_ENTITIES] += 1
        return entities

    def _build_entry(
        self,
        classified: ClassifiedFact,
        entity: ReferencedEntity,
        created_at: str,
    ) -> HonorEntry:
        fact = classified.fact
        classification = classified.classification
        return HonorEntry(
            honor_id=fact.id,
            external_id=entity.external_id,
            name=honor_name(classified),
            year=classified.year,
            award_type=classified.award_type,
            category=classification.category,
            subcategory=classified.subcategory,
            result_raw=classification.result_raw,
            source_tag=self._source_tag,
            created_at=created_at,
            award_set=fact.award_set,
            position=fact.position,
            title=fact.title,
            slug=fact.slug,
            url=honor_url(classified, base_url=self._base_url),
            entity_display_name=entity.display_name,
            classified_by=classification.rule,
        )

    def _resolve_primaries(
        self,
        entries_by_entity: dict[int, list[HonorEntry]],
        stats: ReconciliationStats,
    ) -> None:
        winners: dict[GroupKey, list[HonorEntry]] = defaultdict(list)
        for entries in entries_by_entity.values():
            for entry in entries:
                if entry.category is HonorCategory.WINNER:
                    winners[entry.group_key].append(entry)

        for key in sorted(winners):
            resolution = self._resolver.resolve(key, winners[key], force=True)
            stats.groups_resolved += 1
            if resolution.outcome is PrimaryOutcome.MULTI_EQUAL:
                stats.multi_equal_groups += 1
            elif resolution.outcome is PrimaryOutcome.FORCED_FALLBACK:
                stats.forced_fallbacks += 1
