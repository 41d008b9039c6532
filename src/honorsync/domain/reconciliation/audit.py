"""Per-group anomaly report over reconciled honor entries."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from honorsync.domain.model import GroupKey, HonorCategory

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from honorsync.domain.model import HonorEntry


@dataclass(slots=True, frozen=True)
class GroupAnomaly:
    key: GroupKey
    winners: int
    primaries: int


@dataclass(slots=True)
class GroupAudit:
    groups: int = 0
    groups_with_primary: int = 0
    multi_equal_groups: int = 0
    missing_winner: list[GroupKey] = field(default_factory=list)
    missing_primary: list[GroupAnomaly] = field(default_factory=list)
    multiple_primary: list[GroupAnomaly] = field(default_factory=list)

    @property
    def anomaly_count(self) -> int:
        return len(self.missing_primary) + len(self.multiple_primary)


def audit_groups(
    entries: Iterable[HonorEntry],
    *,
    is_multi_equal: Callable[[str], bool],
) -> GroupAudit:
    """Count groups lacking a winner or holding the wrong number of primaries.

    Each (honor, entity) pair is one entry, so a fact naming two winning games
    contributes two Winner entries to its group.
    """

    groups: dict[GroupKey, list[HonorEntry]] = defaultdict(list)
    for entry in entries:
        groups[entry.group_key].append(entry)

    audit = GroupAudit(groups=len(groups))
    for key in sorted(groups):
        winners = [entry for entry in groups[key] if entry.category is HonorCategory.WINNER]
        if not winners:
            audit.missing_winner.append(key)
            continue
        primaries = sum(1 for entry in winners if entry.primary_winner is True)
        if is_multi_equal(key.award_type):
            audit.groups_with_primary += 1
            audit.multi_equal_groups += 1
        elif primaries == 1:
            audit.groups_with_primary += 1
        elif primaries == 0:
            audit.missing_primary.append(GroupAnomaly(key, len(winners), primaries))
        else:
            audit.multiple_primary.append(GroupAnomaly(key, len(winners), primaries))
    return audit
