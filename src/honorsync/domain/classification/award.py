"""Award family and year derivation for raw honor facts."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from honorsync.domain.model import RawHonorFact

UNKNOWN_AWARD_TYPE = "Unknown"

LEADING_YEAR = re.compile(r"^\d{4}\s+")
AWARD_SET_YEAR = re.compile(r"^(\d{4})\b")
SLUG_YEAR = re.compile(r"^(\d{4})-")
TRAILING_TITLE_RESULT = re.compile(
    r"\s*(?:winner|nominee|finalist|recommended|selection|inductee)$", re.IGNORECASE
)

# Position and title text name these families more reliably than the award set.
JAHRES_FAMILIES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"kinderspiel des jahres", re.IGNORECASE), "Kinderspiel des Jahres"),
    (re.compile(r"kennerspiel des jahres", re.IGNORECASE), "Kennerspiel des Jahres"),
    (re.compile(r"spiel des jahres", re.IGNORECASE), "Spiel des Jahres"),
)


def _jahres_family(text: str | None) -> str | None:
    if not text:
        return None
    for pattern, label in JAHRES_FAMILIES:
        if pattern.search(text):
            return label
    return None


def derive_award_type(
    *,
    award_set: str | None,
    title: str | None = None,
    position: str | None = None,
) -> str:
    """Return the award family a fact belongs to (the award set without its year)."""

    family = _jahres_family(position) or _jahres_family(title)
    if family is not None:
        return family

    if award_set and award_set.strip():
        stripped = LEADING_YEAR.sub("", award_set.strip()).strip()
        return stripped or award_set.strip()

    if title and title.strip():
        stripped = TRAILING_TITLE_RESULT.sub("", title.strip())
        head = re.split(r"\s{2,}", stripped)[0].strip()
        if head:
            return head

    return UNKNOWN_AWARD_TYPE


def resolve_year(fact: RawHonorFact) -> int | None:
    """Explicit year, else the leading year of the award set, else of the slug."""

    if fact.year is not None:
        return fact.year
    if fact.award_set:
        match = AWARD_SET_YEAR.match(fact.award_set.strip())
        if match:
            return int(match[1])
    if fact.slug:
        match = SLUG_YEAR.match(fact.slug.strip())
        if match:
            return int(match[1])
    return None
