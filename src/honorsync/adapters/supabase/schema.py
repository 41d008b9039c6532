"""Pydantic models for rows of the Supabase games table."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, field_validator

log = logging.getLogger(__name__)

GAME_COLUMNS = ("bgg_id", "name", "year_published", "image_url", "thumbnail_url", "honors")


class SupabaseBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
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
            "Supabase %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class GameRow(SupabaseBaseModel):
    bgg_id: int
    name: str
    year_published: int | None = None
    image_url: str | None = None
    thumbnail_url: str | None = None
    honors: list[dict[str, object]] = []

    @field_validator("honors", mode="before")
    @classmethod
    def _null_honors(cls, value: object) -> object:
        return [] if value is None else value
