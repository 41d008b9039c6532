from __future__ import annotations

import pytest

from honorsync.domain.canonicalization import CanonicalNameResolver
from honorsync.domain.model import Entity, ResidueAction
from honorsync.domain.residue import apply_residue_repair, detect_residue
from tests.support.stores import FakeEntityStore

ARTWORK = "Golden Geek Best Board Game Artwork and Prese"
SOLO = "2022 Golden Geek Best Solo Board Game Nomin"
PARTY = "Golden Geek Best Party Game Winner"


@pytest.fixture
def store() -> FakeEntityStore:
    return FakeEntityStore(
        [
            Entity(1, ARTWORK),
            Entity(2, SOLO),
            Entity(3, PARTY, year_published=2019),
            Entity(4, "Cascadia", year_published=2021),
            Entity(5, PARTY, image_url="https://example.test/5.jpg"),
            Entity(6, ARTWORK),
        ]
    )


@pytest.fixture
def resolver() -> CanonicalNameResolver:
    names = CanonicalNameResolver()
    names.observe(1, ARTWORK)
    names.observe(1, "Sky Team")
    names.observe(6, ARTWORK)
    return names


def test_detection_plans_renames_and_deletions(
    store: FakeEntityStore, resolver: CanonicalNameResolver
) -> None:
    report = detect_residue(store, resolver, page_size=2)

    assert report.scanned == 6
    assert report.placeholder_with_metadata == 2
    assert [(finding.external_id, finding.restored_name) for finding in report.renames] == [
        (1, "Sky Team")
    ]
    assert [finding.external_id for finding in report.deletions] == [2, 6]
    assert all(finding.action is ResidueAction.DELETE for finding in report.deletions)


def test_detection_never_writes(store: FakeEntityStore, resolver: CanonicalNameResolver) -> None:
    detect_residue(store, resolver)

    assert store.writes == 0


def test_apply_renames_and_deletes(
    store: FakeEntityStore, resolver: CanonicalNameResolver
) -> None:
    report = detect_residue(store, resolver)

    result = apply_residue_repair(report, store)

    assert result.renamed == 1
    assert result.deleted == 2
    assert result.failed == []
    assert store.entities[1].display_name == "Sky Team"
    assert sorted(store.entities) == [1, 3, 4, 5]


def test_apply_counts_vanished_entities(
    store: FakeEntityStore, resolver: CanonicalNameResolver
) -> None:
    report = detect_residue(store, resolver)
    store.entities.pop(1)

    result = apply_residue_repair(report, store)

    assert result.vanished == 1
    assert result.renamed == 0


def test_apply_records_store_failures(resolver: CanonicalNameResolver) -> None:
    store = FakeEntityStore([Entity(1, ARTWORK)], fail_upserts={1: 1})
    report = detect_residue(store, resolver)

    result = apply_residue_repair(report, store)

    assert result.failed == [1]
    assert store.entities[1].display_name == ARTWORK
