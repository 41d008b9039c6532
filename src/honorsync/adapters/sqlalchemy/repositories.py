"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, insert, select, update

from honorsync.adapters.sqlalchemy.mappings import game_table
from honorsync.domain.model import Entity

if TYPE_CHECKING:
    from sqlalchemy import RowMapping
    from sqlalchemy.orm import Session

    from honorsync.domain.model import HonorRecord


def _to_entity(row: RowMapping) -> Entity:
    honors = cast("list[HonorRecord] | None", row["honors"])
    return Entity(
        external_id=row["bgg_id"],
        display_name=row["name"],
        honors=list(honors or []),
        year_published=row["year_published"],
        image_url=row["image_url"],
        thumbnail_url=row["thumbnail_url"],
    )


def _to_values(entity: Entity) -> dict[str, object]:
    return {
        "name": entity.display_name,
        "year_published": entity.year_published,
        "image_url": entity.image_url,
        "thumbnail_url": entity.thumbnail_url,
        # fresh list so the JSON column never aliases the entity's records
        "honors": [dict(record) for record in entity.honors],
    }


class SqlAlchemyGameRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Entity) -> None:
        self.session.execute(
            insert(game_table).values(bgg_id=entity.external_id, **_to_values(entity))
        )

    def get(self, external_id: int) -> Entity | None:
        stmt = select(game_table).where(game_table.c.bgg_id == external_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        return None if row is None else _to_entity(row)

    def list_page(self, *, offset: int, limit: int) -> list[Entity]:
        stmt = select(game_table).order_by(game_table.c.bgg_id).offset(offset).limit(limit)
        return [_to_entity(row) for row in self.session.execute(stmt).mappings()]

    def update(self, entity: Entity) -> None:
        stmt = (
            update(game_table)
            .where(game_table.c.bgg_id == entity.external_id)
            .values(**_to_values(entity))
        )
        self.session.execute(stmt)

    def remove(self, external_id: int) -> None:
        self.session.execute(delete(game_table).where(game_table.c.bgg_id == external_id))
