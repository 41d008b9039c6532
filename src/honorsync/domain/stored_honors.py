"""Recompute subcategories and primary winners over honors already stored.

Works directly on the stored JSON records so entries written by earlier
import runs are refreshed without a feed. Groups span entities, so every
entity is loaded before any group is resolved.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from honorsync.domain.classification import derive_subcategory
from honorsync.domain.model import GroupKey, HonorCategory, PrimaryOutcome
from honorsync.domain.ports.store import StoreError, iter_entities
from honorsync.domain.primary_winner import PrimaryWinnerResolver

if TYPE_CHECKING:
    from honorsync.domain.model import Entity, HonorRecord
    from honorsync.domain.ports.store import EntityStore

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class StoredWinner:
    """Adapts a stored Winner record to the primary resolver's candidate shape."""

    __slots__ = ("external_id", "record")

    def __init__(self, external_id: int, record: HonorRecord) -> None:
        self.external_id = external_id
        self.record = record

    @property
    def honor_id(self) -> str:
        value = self.record.get("honor_id")
        return "" if value is None else str(value)

    @property
    def subcategory(self) -> str:
        value = self.record.get("subcategory")
        return value if isinstance(value, str) else ""

    @property
    def primary_winner(self) -> bool | None:
        value = self.record.get("primary_winner")
        return value if isinstance(value, bool) else None

    @primary_winner.setter
    def primary_winner(self, value: bool | None) -> None:
        if value is None:
            self.record.pop("primary_winner", None)
        else:
            self.record["primary_winner"] = value


@dataclass(slots=True)
class RefreshReport:
    dry_run: bool
    entities_scanned: int = 0
    subcategories_added: int = 0
    winner_groups: int = 0
    groups_unchanged: int = 0
    groups_changed: int = 0
    multi_equal_groups: int = 0
    forced_fallbacks: int = 0
    entities_mutated: int = 0
    entities_written: int = 0
    failed: int = 0


def _group_key(record: HonorRecord) -> GroupKey | None:
    award_type = record.get("award_type")
    year = record.get("year")
    if not isinstance(award_type, str) or not award_type:
        return None
    if isinstance(year, bool) or not isinstance(year, int):
        return None
    return GroupKey(award_type, year)


def refresh_stored_primaries(
    store: EntityStore,
    *,
    resolver: PrimaryWinnerResolver | None = None,
    force: bool = False,
    award_type: str | None = None,
    limit: int | None = None,
    dry_run: bool = True,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> RefreshReport:
    """Fill missing subcategories and resolve primary winners across the store.

    Groups that already hold exactly one primary are left alone unless
    ``force`` is set. Only entities whose honors changed are written, at most
    ``limit`` of them.
    """

    resolver = resolver or PrimaryWinnerResolver()
    report = RefreshReport(dry_run=dry_run)
    entities: dict[int, Entity] = {}
    mutated: set[int] = set()
    groups: dict[GroupKey, list[StoredWinner]] = defaultdict(list)

    for entity in iter_entities(store, page_size=page_size):
        report.entities_scanned += 1
        entities[entity.external_id] = entity
        for record in entity.honors:
            record_award = record.get("award_type")
            if award_type is not None and record_award != award_type:
                continue
            if not record.get("subcategory"):
                record["subcategory"] = derive_subcategory(
                    _text(record.get("position")), _text(record_award)
                )
                report.subcategories_added += 1
                mutated.add(entity.external_id)
            if record.get("category") != HonorCategory.WINNER:
                continue
            key = _group_key(record)
            if key is not None:
                groups[key].append(StoredWinner(entity.external_id, record))

    report.winner_groups = len(groups)
    for key in sorted(groups):
        members = groups[key]
        resolution = resolver.resolve(key, members, force=force)
        if resolution.outcome is PrimaryOutcome.MULTI_EQUAL:
            report.multi_equal_groups += 1
        elif resolution.outcome is PrimaryOutcome.FORCED_FALLBACK:
            report.forced_fallbacks += 1
        if resolution.changed:
            report.groups_changed += 1
            mutated.update(member.external_id for member in members)
        else:
            report.groups_unchanged += 1

    report.entities_mutated = len(mutated)
    for external_id in sorted(mutated):
        if limit is not None and report.entities_written + report.failed >= limit:
            break
        if dry_run:
            report.entities_written += 1
            continue
        try:
            store.upsert(entities[external_id])
        except StoreError:
            log.exception("Failed to write refreshed honors for entity %s", external_id)
            report.failed += 1
            continue
        report.entities_written += 1

    log.info(
        "Primary refresh: scanned=%s, subcategories_added=%s, groups=%s, changed=%s, "
        "written=%s, failed=%s, dry_run=%s",
        report.entities_scanned,
        report.subcategories_added,
        report.winner_groups,
        report.groups_changed,
        report.entities_written,
        report.failed,
        dry_run,
    )
    return report


def _text(value: object) -> str | None:
    return value if isinstance(value, str) else None
