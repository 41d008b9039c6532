"""Pydantic models describing the scraped honor feed."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class FeedBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Honor feed %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class FeedBoardGame(FeedBaseModel):
    bgg_id: int | None = Field(default=None, alias="bggId")
    name: str | None = None

    _normalize_name = field_validator("name", mode="before")(_blank_to_none)

    @field_validator("bgg_id", mode="before")
    @classmethod
    def _parse_id(cls, value: object) -> int | None:
        # unparseable ids are kept as None so the engine can count them
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        return None


class FeedHonor(FeedBaseModel):
    id: str
    slug: str | None = None
    title: str | None = None
    year: int | None = None
    award_set: str | None = Field(default=None, alias="awardSet")
    position: str | None = None
    url: str | None = None
    result_raw: str | None = None
    category: str | None = None
    boardgames: list[FeedBoardGame] | None = None

    _normalize_text = field_validator(
        "slug", "title", "award_set", "position", "url", "result_raw", "category", mode="before"
    )(_blank_to_none)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("year", mode="before")
    @classmethod
    def _parse_year(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            return int(stripped) if stripped.isdigit() else None
        return value
