"""Load the honor feed from a local file or an http(s) URL."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, cast

import httpx
from pydantic import ValidationError

from honorsync.adapters.http_resilience import ResilientClient
from honorsync.config.feed import get_feed_config

from .schema import FeedHonor
from .translator import translate_honor

if TYPE_CHECKING:
    from collections.abc import Callable

    from honorsync.config.http_resilience import ResilienceConfig
    from honorsync.domain.model import RawHonorFact

log = getLogger(__name__)


class FeedFormatError(ValueError):
    """Raised when the feed cannot be read as a JSON array of honor records."""


@dataclass(slots=True)
class FeedLoadResult:
    facts: list[RawHonorFact]
    records: int
    invalid: int


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def parse_feed(payload: object) -> FeedLoadResult:
    """Validate a decoded feed, dropping and counting records that fail validation."""

    if not isinstance(payload, list):
        raise FeedFormatError(f"Honor feed must be a JSON array, got {type(payload).__name__}")

    items = cast(list[object], payload)
    facts: list[RawHonorFact] = []
    invalid = 0
    for index, item in enumerate(items):
        try:
            honor = FeedHonor.model_validate(item)
        except ValidationError as exc:
            invalid += 1
            log.warning("Dropping feed record %s: %s", index, exc.errors()[0]["msg"])
            continue
        facts.append(translate_honor(honor))

    log.info("Loaded %s honor facts from %s records (%s invalid)", len(facts), len(items), invalid)
    return FeedLoadResult(facts=facts, records=len(items), invalid=invalid)


def load_feed(
    source: str | Path,
    *,
    resilience: ResilienceConfig | None = None,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> FeedLoadResult:
    if isinstance(source, str) and _is_url(source):
        text = asyncio.run(_fetch_text(source, resilience, client_factory or ResilientClient))
    else:
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FeedFormatError(f"Cannot read honor feed {path}: {exc}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FeedFormatError(f"Honor feed {source} is not valid JSON: {exc}") from exc
    return parse_feed(payload)


async def _fetch_text(
    url: str,
    resilience: ResilienceConfig | None,
    client_factory: Callable[[ResilienceConfig], ResilientClient],
) -> str:
    config = resilience or get_feed_config().resilience
    async with client_factory(config) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FeedFormatError(f"Cannot fetch honor feed {url}: {exc}") from exc
        return response.text
