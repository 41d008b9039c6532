"""Subcategory labels derived from honor position text."""

from __future__ import annotations

import re

OVERALL = "Overall"
GAME_OF_THE_YEAR = "Game of the Year"
MIN_SUBCATEGORY_LENGTH = 3

YEAR_SEASON_PREFIX = re.compile(
    r"^\d{4}(?:\s*/?\s*(?:spring|summer|fall|autumn|winter))?\s*", re.IGNORECASE
)
LEADING_BEST = re.compile(r"^best\s+", re.IGNORECASE)
TRAILING_AWARD = re.compile(r"\s*\bawards?$", re.IGNORECASE)
TRAILING_RESULT = re.compile(r"\s*\b(?:winner|nominee|finalist)$", re.IGNORECASE)
TITLE_WORD = re.compile(r"\w\S*")
WHITESPACE = re.compile(r"\s+")

# Award-family phrases repeated inside position text, with their replacement.
KNOWN_PHRASES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"parents'? choice fun stuff awards?", re.IGNORECASE), "Fun Stuff"),
    (re.compile(r"parents'? choice awards?", re.IGNORECASE), ""),
    (re.compile(r"årets spill\s", re.IGNORECASE), ""),
    (re.compile(r"årets spil\s", re.IGNORECASE), ""),
    (re.compile(r"årets spel\s", re.IGNORECASE), ""),
    (re.compile(r"5 seasons\s", re.IGNORECASE), ""),
    (re.compile(r"golden geek awards?", re.IGNORECASE), ""),
    (re.compile(r"mensa select", re.IGNORECASE), ""),
    (re.compile(r"cardboard republic laurel awards?", re.IGNORECASE), ""),
    (re.compile(r"games magazine game of the year", re.IGNORECASE), GAME_OF_THE_YEAR),
    (re.compile(r"\bawards?\b", re.IGNORECASE), ""),
)

# Checked in order; the Jahres family is matched most specific first.
FIXED_LABELS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"kinderspiel des jahres", re.IGNORECASE), "Kinderspiel des Jahres"),
    (re.compile(r"kennerspiel des jahres", re.IGNORECASE), "Kennerspiel des Jahres"),
    (re.compile(r"spiel des jahres", re.IGNORECASE), "Spiel des Jahres"),
    (re.compile(r"game of the year|\bgoty\b", re.IGNORECASE), GAME_OF_THE_YEAR),
    (re.compile(r"fun stuff", re.IGNORECASE), "Fun Stuff"),
)


def _collapse(text: str) -> str:
    return WHITESPACE.sub(" ", text).strip()


def _title_case(text: str) -> str:
    return TITLE_WORD.sub(lambda match: match[0][0].upper() + match[0][1:], text)


def derive_subcategory(position: str | None, award_type: str | None) -> str:
    """Return the normalised subcategory label for ``position`` within ``award_type``."""

    text = _collapse(position or "")
    award = _collapse(award_type or "")
    if not text:
        return OVERALL
    if award and text.casefold() == award.casefold():
        return OVERALL

    text = YEAR_SEASON_PREFIX.sub("", text)
    if award and text.casefold().startswith(award.casefold()):
        text = text[len(award) :]

    for pattern, replacement in KNOWN_PHRASES:
        text = pattern.sub(replacement, text, count=1)
    text = LEADING_BEST.sub("", _collapse(text))
    text = _collapse(TRAILING_RESULT.sub("", text))

    for pattern, label in FIXED_LABELS:
        if pattern.search(text):
            return label

    text = _collapse(TRAILING_AWARD.sub("", text))
    if not text or len(text) < MIN_SUBCATEGORY_LENGTH:
        return OVERALL
    if award and text.casefold() == award.casefold():
        return OVERALL
    return _title_case(text)
