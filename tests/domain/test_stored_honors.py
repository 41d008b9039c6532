from __future__ import annotations

from honorsync.domain.model import Entity
from honorsync.domain.stored_honors import refresh_stored_primaries
from tests.support.honors import make_record
from tests.support.stores import FakeEntityStore

GOLDEN_GEEK = "Golden Geek Awards"


def _entities() -> list[Entity]:
    return [
        Entity(
            1,
            "Cascadia",
            honors=[
                make_record(
                    "10",
                    award_type=GOLDEN_GEEK,
                    year=2023,
                    subcategory=None,
                    position="Best Family Board Game",
                ),
                make_record(
                    "11",
                    award_type=GOLDEN_GEEK,
                    year=2023,
                    category="Nominee",
                    subcategory="Party Game",
                ),
            ],
        ),
        Entity(
            2,
            "Wavelength",
            honors=[
                make_record("20", award_type=GOLDEN_GEEK, year=2023, subcategory="Party Game")
            ],
        ),
        Entity(3, "Azul", honors=[make_record("30", award_type="Mensa Select", year=2022,
                                              primary_winner=True)]),
        Entity(4, "Sagrada", honors=[make_record("30", award_type="Mensa Select", year=2022)]),
        Entity(5, "Dixit", honors=[make_record("50", award_type="As d'Or", year=2019,
                                               primary_winner=True)]),
    ]


def test_refresh_fills_subcategories_and_resolves_groups() -> None:
    store = FakeEntityStore(_entities())

    report = refresh_stored_primaries(store, dry_run=False, page_size=2)

    assert report.entities_scanned == 5
    assert report.subcategories_added == 1
    assert report.winner_groups == 3
    assert report.groups_changed == 2
    assert report.groups_unchanged == 1
    assert report.multi_equal_groups == 1
    assert report.entities_written == 4
    family, nominee = store.entities[1].honors
    assert family["subcategory"] == "Family Board Game"
    assert family["primary_winner"] is True
    assert "primary_winner" not in nominee
    assert store.entities[2].honors[0]["primary_winner"] is False
    assert store.entities[4].honors[0]["primary_winner"] is True
    assert sorted(store.upserted) == [1, 2, 3, 4]


def test_refresh_is_stable_on_second_run() -> None:
    store = FakeEntityStore(_entities())
    refresh_stored_primaries(store, dry_run=False)
    writes = store.writes

    report = refresh_stored_primaries(store, dry_run=False)

    assert report.groups_changed == 0
    assert report.entities_mutated == 0
    assert store.writes == writes


def test_dry_run_counts_without_writing() -> None:
    store = FakeEntityStore(_entities())

    report = refresh_stored_primaries(store)

    assert report.dry_run
    assert report.entities_written == 4
    assert store.writes == 0
    assert "primary_winner" not in store.entities[4].honors[0]


def test_limit_caps_written_entities() -> None:
    store = FakeEntityStore(_entities())

    report = refresh_stored_primaries(store, dry_run=False, limit=2)

    assert report.entities_mutated == 4
    assert report.entities_written == 2
    assert store.upserted == [1, 2]


def test_award_filter_leaves_other_awards_untouched() -> None:
    store = FakeEntityStore(_entities())

    report = refresh_stored_primaries(store, dry_run=False, award_type="Mensa Select")

    assert report.winner_groups == 1
    assert report.subcategories_added == 0
    assert store.upserted == [4]
    assert "subcategory" not in store.entities[1].honors[0]


def test_force_reorders_an_existing_primary() -> None:
    honors = [
        make_record("60", award_type=GOLDEN_GEEK, year=2024, subcategory="Wargame",
                    primary_winner=True),
    ]
    overall = [make_record("61", award_type=GOLDEN_GEEK, year=2024, subcategory="Overall")]
    store = FakeEntityStore([Entity(6, "Root", honors=honors), Entity(7, "Heat", honors=overall)])

    kept = refresh_stored_primaries(store, dry_run=False)
    assert kept.groups_changed == 0

    forced = refresh_stored_primaries(store, dry_run=False, force=True)
    assert forced.groups_changed == 1
    assert store.entities[6].honors[0]["primary_winner"] is False
    assert store.entities[7].honors[0]["primary_winner"] is True


def test_store_failures_are_counted() -> None:
    store = FakeEntityStore(_entities(), fail_upserts={1: 1})

    report = refresh_stored_primaries(store, dry_run=False)

    assert report.failed == 1
    assert report.entities_written == 3
