"""Catalog entity records as exposed by the store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .honors import HonorRecord


@dataclass(slots=True)
class Entity:
    """A board game record keyed by its external catalog id.

    ``honors`` holds raw JSON records because entries written by earlier
    import runs do not share one shape.
    """

    external_id: int
    display_name: str
    honors: list[HonorRecord] = field(default_factory=list)
    year_published: int | None = None
    image_url: str | None = None
    thumbnail_url: str | None = None

    @property
    def has_core_metadata(self) -> bool:
        return self.year_published is not None or bool(self.image_url or self.thumbnail_url)
