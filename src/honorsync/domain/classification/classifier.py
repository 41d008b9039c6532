"""Honor result classification over truncated scrape text.

Scraped honor titles and slugs are cut at a fixed length, so "Winner" often
survives only as "Winn" and some award families lose the result token
entirely. Classification walks ``CLASSIFICATION_RULES`` in order and the first
rule that matches decides the category; when none matches the prior category
(or Special) is used.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from honorsync.domain.model import Classification, ClassificationRule, HonorCategory

if TYPE_CHECKING:
    from collections.abc import Callable

type RuleOutcome = tuple[HonorCategory, str] | None

WINNER_TOKEN = re.compile(r"\b(?:winner|winne|winn)\b")
NOMINEE_TOKEN = re.compile(r"\b(?:nominee|nomin|nom)\b")
POSITION_WINNER = re.compile(r"\bwinner\b")
POSITION_NOMINEE = re.compile(r"\bnominee\b")


@dataclass(slots=True, frozen=True)
class ClassificationInput:
    result_raw: str | None = None
    position: str | None = None
    slug: str | None = None
    title: str | None = None
    name: str | None = None
    award_type: str | None = None
    entity_count: int = 0
    prior_category: HonorCategory | None = None


@dataclass(slots=True, frozen=True)
class _Evidence:
    source: ClassificationInput
    result: str
    position: str
    parts: tuple[str, ...]

    @property
    def corpus(self) -> str:
        return " ".join(self.parts)

    @classmethod
    def collect(cls, source: ClassificationInput) -> _Evidence:
        parts = tuple(
            text.strip().lower() for text in (source.slug, source.title, source.name) if text
        )
        return cls(
            source=source,
            result=(source.result_raw or "").lower(),
            position=(source.position or "").lower(),
            parts=tuple(part for part in parts if part),
        )


@dataclass(slots=True, frozen=True)
class TruncatedAwardFamily:
    """Award family whose category phrase is truncated before any result token.

    When earlier rules find nothing and the text carries one of the family's
    truncated category phrases or truncated suffixes, the number of referenced
    entities decides: one entity is a Winner, several are Nominees.
    """

    name: str
    award_pattern: re.Pattern[str]
    category_pattern: re.Pattern[str]
    suffix_pattern: re.Pattern[str]

    def applies_to(self, evidence: _Evidence) -> bool:
        award_type = evidence.source.award_type
        if award_type:
            return self.award_pattern.search(award_type) is not None
        return self.award_pattern.search(evidence.corpus) is not None

    def looks_truncated(self, evidence: _Evidence) -> bool:
        if self.category_pattern.search(evidence.corpus):
            return True
        return any(self.suffix_pattern.search(part) for part in evidence.parts)


TRUNCATED_CATEGORY_FAMILIES: tuple[TruncatedAwardFamily, ...] = (
    TruncatedAwardFamily(
        name="Golden Geek",
        award_pattern=re.compile(r"golden[\s-]geek", re.IGNORECASE),
        category_pattern=re.compile(
            r"artwork|prese|print.?(?:&|and).?play|expansion|solo board game"
            r"|strategy board game|thematic board game|wargame|game of the year"
            r"|heavy|light|medium"
        ),
        suffix_pattern=re.compile(r"-no\b|\sno$|-wi\b|\swi$"),
    ),
)


def _explicit_result(evidence: _Evidence) -> RuleOutcome:
    if "winner" in evidence.result:
        return HonorCategory.WINNER, "Winner"
    if "nominee" in evidence.result:
        return HonorCategory.NOMINEE, "Nominee"
    return None


def _position(evidence: _Evidence) -> RuleOutcome:
    if POSITION_WINNER.search(evidence.position):
        return HonorCategory.WINNER, "Winner"
    if POSITION_NOMINEE.search(evidence.position):
        return HonorCategory.NOMINEE, "Nominee"
    return None


def _text_token(evidence: _Evidence) -> RuleOutcome:
    corpus = evidence.corpus
    if WINNER_TOKEN.search(corpus):
        return HonorCategory.WINNER, "Winner"
    if NOMINEE_TOKEN.search(corpus):
        return HonorCategory.NOMINEE, "Nominee"
    return None


def _entity_count(evidence: _Evidence) -> RuleOutcome:
    count = evidence.source.entity_count
    if count <= 0:
        return None
    corpus = evidence.corpus
    if WINNER_TOKEN.search(corpus) or NOMINEE_TOKEN.search(corpus):
        return None
    for family in TRUNCATED_CATEGORY_FAMILIES:
        if not family.applies_to(evidence) or not family.looks_truncated(evidence):
            continue
        if count == 1:
            return HonorCategory.WINNER, "Winner"
        return HonorCategory.NOMINEE, "Nominee"
    return None


def _keyword(evidence: _Evidence) -> RuleOutcome:
    corpus = evidence.corpus
    if "recommended" in corpus:
        return HonorCategory.SPECIAL, "Recommended"
    if "special" in corpus:
        return HonorCategory.SPECIAL, "Special"
    return None


CLASSIFICATION_RULES: tuple[tuple[ClassificationRule, Callable[[_Evidence], RuleOutcome]], ...] = (
    (ClassificationRule.EXPLICIT_RESULT, _explicit_result),
    (ClassificationRule.POSITION, _position),
    (ClassificationRule.TEXT_TOKEN, _text_token),
    (ClassificationRule.ENTITY_COUNT, _entity_count),
    (ClassificationRule.KEYWORD, _keyword),
)


def classify(source: ClassificationInput) -> Classification:
    """Return the category for ``source``; never raises."""

    evidence = _Evidence.collect(source)
    for rule, matcher in CLASSIFICATION_RULES:
        outcome = matcher(evidence)
        if outcome is not None:
            category, result_raw = outcome
            return Classification(category=category, result_raw=result_raw, rule=rule)

    fallback = source.prior_category or HonorCategory.SPECIAL
    return Classification(
        category=fallback,
        result_raw=str(fallback),
        rule=ClassificationRule.FALLBACK,
    )
