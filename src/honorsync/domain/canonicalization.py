"""Canonical display names for catalog entities.

Earlier imports sometimes stored a truncated honor title as a game's name
("Golden Geek Best Board Game Artwork and Prese..."). The feed lists every
name under which each game was referenced, so the canonical name is chosen
from that evidence: the longest name that does not look like an honor title.
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from honorsync.domain.model import RawHonorFact

PLACEHOLDER_MIN_LENGTH = 25
MIN_VOCABULARY_HITS = 2

PLACEHOLDER_SUFFIX = re.compile(
    r"(?:^|[\s-])(?:winner|winne|winn|nominee|nomin|nomi|nom)$", re.IGNORECASE
)

AWARD_VOCABULARY: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\bbest\b",
        r"\bawards?\b",
        r"\bnominee\b",
        r"\bwinner\b",
        r"\brecommended\b",
        r"\bhonou?rs?\b",
        r"\bgolden geek\b",
        r"\bgame of the year\b",
        r"\bdes jahres\b",
        r"\bmensa select\b",
        r"\bparents'? choice\b",
        r"\bprint (?:and|&) play\b",
        r"\b(?:heavy|light|medium) game\b",
        r"\bbest (?:solo|party|family|expansion|artwork|zoomable)\b",
    )
)


def is_placeholder_name(name: str) -> bool:
    """Return whether ``name`` carries the truncated honor-title signature."""

    text = name.strip()
    if len(text) < PLACEHOLDER_MIN_LENGTH:
        return False
    if PLACEHOLDER_SUFFIX.search(text):
        return True
    hits = sum(1 for pattern in AWARD_VOCABULARY if pattern.search(text))
    return hits >= MIN_VOCABULARY_HITS


@dataclass(slots=True, frozen=True)
class CanonicalName:
    name: str
    safe: bool


def _preference(name: str) -> tuple[int, str]:
    return (-len(name), name)


class CanonicalNameResolver:
    """Aggregate observed names per external id and pick a canonical one."""

    def __init__(self) -> None:
        self._names: dict[int, set[str]] = defaultdict(set)

    @classmethod
    def from_facts(cls, facts: Iterable[RawHonorFact]) -> CanonicalNameResolver:
        resolver = cls()
        for fact in facts:
            for entity in fact.referenced_entities or ():
                if entity.display_name:
                    resolver.observe(entity.external_id, entity.display_name)
        return resolver

    def observe(self, external_id: int, name: str) -> None:
        text = name.strip()
        if text:
            self._names[external_id].add(text)

    def observed_names(self, external_id: int) -> frozenset[str]:
        return frozenset(self._names.get(external_id, ()))

    def __contains__(self, external_id: object) -> bool:
        return external_id in self._names

    def __len__(self) -> int:
        return len(self._names)

    def resolve(self, external_id: int) -> CanonicalName | None:
        """Longest non-placeholder name, else the longest name flagged as unsafe."""

        names = self._names.get(external_id)
        if not names:
            return None
        genuine = [name for name in names if not is_placeholder_name(name)]
        if genuine:
            return CanonicalName(name=min(genuine, key=_preference), safe=True)
        return CanonicalName(name=min(names, key=_preference), safe=False)
