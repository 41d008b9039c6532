from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003
from pathlib import Path  # noqa: TC003

import httpx
import pytest

from honorsync.adapters.feed import (
    FeedFormatError,
    FeedHonor,
    load_feed,
    parse_feed,
    translate_honor,
)
from honorsync.adapters.feed.translator import MISSING_EXTERNAL_ID
from honorsync.adapters.http_resilience import ResilientClient
from honorsync.config.http_resilience import ResilienceConfig
from honorsync.domain.model import HonorCategory

FEED_URL = "https://feeds.example.test/honors.json"
RESILIENCE = ResilienceConfig(name="test-feed", cache=None)


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def test_translate_normalises_feed_values() -> None:
    honor = FeedHonor.model_validate(
        {
            "id": 404,
            "slug": "  ",
            "year": "2019",
            "awardSet": "2019 As d'Or",
            "category": "nominee",
            "boardgames": [{"bggId": "abc", "name": "Broken"}, {"bggId": " 7 ", "name": ""}],
        }
    )

    fact = translate_honor(honor)

    assert fact.id == "404"
    assert fact.slug is None
    assert fact.year == 2019
    assert fact.award_set == "2019 As d'Or"
    assert fact.category is HonorCategory.NOMINEE
    assert fact.referenced_entities is not None
    broken, valid = fact.referenced_entities
    assert broken.external_id == MISSING_EXTERNAL_ID
    assert valid.external_id == 7
    assert valid.display_name is None


def test_translate_keeps_missing_and_empty_entity_lists_apart() -> None:
    missing = translate_honor(FeedHonor.model_validate({"id": "1"}))
    empty = translate_honor(FeedHonor.model_validate({"id": "2", "boardgames": []}))

    assert missing.referenced_entities is None
    assert empty.referenced_entities == ()


def test_unknown_category_is_ignored() -> None:
    fact = translate_honor(FeedHonor.model_validate({"id": "1", "category": "Honorable"}))

    assert fact.category is None


def test_parse_feed_counts_invalid_records(feed_payload: list[dict[str, object]]) -> None:
    result = parse_feed(feed_payload)

    assert result.records == 11
    assert result.invalid == 1
    assert len(result.facts) == 10
    assert [fact.id for fact in result.facts][:3] == ["101", "102", "103"]


def test_parse_feed_rejects_non_array() -> None:
    with pytest.raises(FeedFormatError, match="JSON array"):
        parse_feed({"honors": []})


def test_load_feed_reads_local_file(feed_path: Path) -> None:
    result = load_feed(feed_path)

    assert len(result.facts) == 10


def test_load_feed_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "feed.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(FeedFormatError, match="not valid JSON"):
        load_feed(path)


def test_load_feed_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FeedFormatError, match="Cannot read"):
        load_feed(tmp_path / "absent.json")


def test_load_feed_fetches_url(feed_payload: list[dict[str, object]]) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, content=json.dumps(feed_payload).encode())

    result = load_feed(
        FEED_URL,
        resilience=RESILIENCE,
        client_factory=_make_client_factory(handler),
    )

    assert len(result.facts) == 10
    assert [str(request.url) for request in requests] == [FEED_URL]


def test_load_feed_wraps_http_errors() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(FeedFormatError, match="Cannot fetch"):
        load_feed(FEED_URL, resilience=RESILIENCE, client_factory=_make_client_factory(handler))
