"""Entity store over the Supabase PostgREST API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
from pydantic import ValidationError

from honorsync.adapters.http_resilience import ResilientClient
from honorsync.domain.model import Entity
from honorsync.domain.ports.store import StoreError

from .schema import GAME_COLUMNS, GameRow

if TYPE_CHECKING:
    from collections.abc import Callable

    from honorsync.config.http_resilience import ResilienceConfig
    from honorsync.config.supabase import SupabaseConfig
    from honorsync.domain.model import HonorRecord
    from honorsync.domain.ports.store import EntityStore

log = getLogger(__name__)

SELECT_COLUMNS = ",".join(GAME_COLUMNS)
UPSERT_PREFER = "resolution=merge-duplicates,return=minimal"


class SupabaseAPIError(StoreError):
    """Raised when the Supabase REST API returns an unexpected response."""


def _to_entity(row: GameRow) -> Entity:
    return Entity(
        external_id=row.bgg_id,
        display_name=row.name,
        honors=cast("list[HonorRecord]", list(row.honors)),
        year_published=row.year_published,
        image_url=row.image_url,
        thumbnail_url=row.thumbnail_url,
    )


def _to_row(entity: Entity) -> dict[str, object]:
    return {
        "bgg_id": entity.external_id,
        "name": entity.display_name,
        "year_published": entity.year_published,
        "image_url": entity.image_url,
        "thumbnail_url": entity.thumbnail_url,
        "honors": entity.honors,
    }


class SupabaseEntityStore:
    """Synchronous store facade; each call runs its own event loop and client."""

    def __init__(
        self,
        *,
        config: SupabaseConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    @property
    def _path(self) -> str:
        return f"/{self._config.table}"

    def fetch(self, external_id: int) -> Entity | None:
        rows = self._run(
            "GET",
            params={"select": SELECT_COLUMNS, "bgg_id": f"eq.{external_id}"},
            context=f"fetch game {external_id}",
        )
        return _to_entity(rows[0]) if rows else None

    def page(self, *, offset: int, limit: int) -> list[Entity]:
        rows = self._run(
            "GET",
            params={
                "select": SELECT_COLUMNS,
                "order": "bgg_id.asc",
                "offset": str(offset),
                "limit": str(limit),
            },
            context=f"list games at offset {offset}",
        )
        return [_to_entity(row) for row in rows]

    def upsert(self, entity: Entity) -> None:
        self._run(
            "POST",
            params={"on_conflict": "bgg_id"},
            json=[_to_row(entity)],
            headers={"Prefer": UPSERT_PREFER},
            context=f"upsert game {entity.external_id}",
        )

    def delete(self, external_id: int) -> None:
        self._run(
            "DELETE",
            params={"bgg_id": f"eq.{external_id}"},
            context=f"delete game {external_id}",
        )

    def _run(
        self,
        method: str,
        *,
        params: dict[str, str],
        context: str,
        json: object = None,
        headers: dict[str, str] | None = None,
    ) -> list[GameRow]:
        try:
            return asyncio.run(self._request(method, params=params, json=json, headers=headers))
        except httpx.HTTPError as exc:
            raise StoreError(f"Failed to {context}: {exc}") from exc

    async def _request(
        self,
        method: str,
        *,
        params: dict[str, str],
        json: object,
        headers: dict[str, str] | None,
    ) -> list[GameRow]:
        async with self._client_factory(self._resilience) as client:
            response = await client.request(
                method, self._path, params=params, json=json, headers=headers
            )
            response.raise_for_status()

        if method != "GET":
            return []
        try:
            payload = response.json()
        except ValueError as exc:
            raise SupabaseAPIError(f"Supabase returned a non-JSON body: {exc}") from exc
        if not isinstance(payload, list):
            raise SupabaseAPIError("Unexpected Supabase response payload")
        try:
            return [GameRow.model_validate(item) for item in cast("list[object]", payload)]
        except ValidationError as exc:
            raise SupabaseAPIError(f"Unexpected Supabase game row: {exc}") from exc


if TYPE_CHECKING:
    from honorsync.config.supabase import get_supabase_config

    _store_check: EntityStore = SupabaseEntityStore(config=get_supabase_config())
