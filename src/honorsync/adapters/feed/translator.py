"""Translate feed payloads into raw honor facts."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from honorsync.domain.model import HonorCategory, RawHonorFact, ReferencedEntity

if TYPE_CHECKING:
    from .schema import FeedBoardGame, FeedHonor

log = getLogger(__name__)

MISSING_EXTERNAL_ID = 0


def _category(value: str | None, honor_id: str) -> HonorCategory | None:
    if value is None:
        return None
    for category in HonorCategory:
        if category.value.casefold() == value.casefold():
            return category
    log.debug("Honor %s: ignoring unknown category %r", honor_id, value)
    return None


def _entity(game: FeedBoardGame) -> ReferencedEntity:
    return ReferencedEntity(
        external_id=game.bgg_id if game.bgg_id is not None else MISSING_EXTERNAL_ID,
        display_name=game.name,
    )


def translate_honor(payload: FeedHonor) -> RawHonorFact:
    entities = (
        None
        if payload.boardgames is None
        else tuple(_entity(game) for game in payload.boardgames)
    )
    return RawHonorFact(
        id=payload.id,
        slug=payload.slug,
        title=payload.title,
        year=payload.year,
        award_set=payload.award_set,
        position=payload.position,
        url=payload.url,
        result_raw=payload.result_raw,
        category=_category(payload.category, payload.id),
        referenced_entities=entities,
    )
