"""Primary winner selection per (award_type, year) group.

Several Winner entries can share one award year when an award hands out
category prizes. One of them is surfaced as the primary winner for display;
award families whose yearly winners are co-equal mark all of them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from honorsync.domain.classification.subcategory import OVERALL
from honorsync.domain.model import PrimaryOutcome

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from honorsync.domain.model import GroupKey

log = getLogger(__name__)

DEFAULT_MULTI_EQUAL_AWARDS: tuple[str, ...] = ("Mensa Select", "Meeples Choice Award")

GAME_OF_THE_YEAR_PATTERN = re.compile(r"game of the year", re.IGNORECASE)
FAMILY_PATTERN = re.compile(r"family", re.IGNORECASE)


class WinnerCandidate(Protocol):
    """A Winner entry taking part in primary resolution."""

    @property
    def honor_id(self) -> str: ...

    @property
    def external_id(self) -> int: ...

    @property
    def subcategory(self) -> str: ...

    primary_winner: bool | None


type PrimaryChooser = Callable[[Sequence[WinnerCandidate]], WinnerCandidate | None]


def _tier(subcategory: str) -> int:
    if GAME_OF_THE_YEAR_PATTERN.search(subcategory):
        return 0
    if subcategory == OVERALL:
        return 1
    if FAMILY_PATTERN.search(subcategory):
        return 2
    return 3


def priority_key(candidate: WinnerCandidate) -> tuple[int, int, str, int]:
    subcategory = candidate.subcategory or ""
    return (_tier(subcategory), len(subcategory), candidate.honor_id, candidate.external_id)


def choose_by_priority(candidates: Sequence[WinnerCandidate]) -> WinnerCandidate | None:
    """Game of the Year, then Overall, then Family, then the shortest subcategory."""

    if not candidates:
        return None
    return min(candidates, key=priority_key)


@dataclass(slots=True, frozen=True)
class PrimaryResolution:
    key: GroupKey
    outcome: PrimaryOutcome
    primary_honor_ids: tuple[str, ...]
    changed: bool


class PrimaryWinnerResolver:
    def __init__(
        self,
        *,
        multi_equal_awards: Iterable[str] = DEFAULT_MULTI_EQUAL_AWARDS,
        chooser: PrimaryChooser = choose_by_priority,
    ) -> None:
        self._multi_equal = frozenset(award.casefold() for award in multi_equal_awards)
        self._chooser = chooser

    def is_multi_equal(self, award_type: str) -> bool:
        return award_type.casefold() in self._multi_equal

    def resolve(
        self,
        key: GroupKey,
        members: Iterable[WinnerCandidate],
        *,
        force: bool = False,
    ) -> PrimaryResolution:
        """Mark primary winners among ``members`` in place.

        An existing single primary is kept unless ``force`` is set, so repeated
        runs do not flip the choice when nothing changed.
        """

        candidates = list(members)
        if not candidates:
            raise ValueError(f"Primary resolution for {key} requires at least one member")
        before = [candidate.primary_winner for candidate in candidates]

        if self.is_multi_equal(key.award_type):
            for candidate in candidates:
                candidate.primary_winner = True
            return self._result(key, PrimaryOutcome.MULTI_EQUAL, candidates, before)

        current = [candidate for candidate in candidates if candidate.primary_winner is True]
        if len(current) == 1 and not force:
            return self._result(key, PrimaryOutcome.UNCHANGED, candidates, before)

        chosen = self._chooser(candidates)
        for candidate in candidates:
            candidate.primary_winner = candidate is chosen

        outcome = PrimaryOutcome.RESOLVED
        primaries = sum(1 for candidate in candidates if candidate.primary_winner)
        if primaries != 1:
            fallback = min(candidates, key=lambda c: (c.honor_id, c.external_id))
            log.error(
                "Primary resolution for %s %s produced %s primaries; forcing honor %s",
                key.award_type,
                key.year,
                primaries,
                fallback.honor_id,
            )
            for candidate in candidates:
                candidate.primary_winner = candidate is fallback
            outcome = PrimaryOutcome.FORCED_FALLBACK

        return self._result(key, outcome, candidates, before)

    @staticmethod
    def _result(
        key: GroupKey,
        outcome: PrimaryOutcome,
        candidates: Sequence[WinnerCandidate],
        before: Sequence[bool | None],
    ) -> PrimaryResolution:
        return PrimaryResolution(
            key=key,
            outcome=outcome,
            primary_honor_ids=tuple(
                candidate.honor_id for candidate in candidates if candidate.primary_winner
            ),
            changed=any(
                candidate.primary_winner != previous
                for candidate, previous in zip(candidates, before, strict=True)
            ),
        )
