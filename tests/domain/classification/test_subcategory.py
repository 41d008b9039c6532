from __future__ import annotations

import pytest

from honorsync.domain.classification import GAME_OF_THE_YEAR, OVERALL, derive_subcategory


@pytest.mark.parametrize(
    ("position", "award_type", "expected"),
    [
        (None, "Spiel des Jahres", OVERALL),
        ("   ", "Spiel des Jahres", OVERALL),
        ("Spiel des Jahres", "Spiel des Jahres", OVERALL),
        ("Kennerspiel des Jahres Winner", "Kennerspiel des Jahres", OVERALL),
        ("Best Strategy Game", "Golden Geek Awards", "Strategy Game"),
        ("2024 best solo game nominee", "Golden Geek Awards", "Solo Game"),
        ("Best Board Game Artwork & Presentation", "Golden Geek Awards",
         "Board Game Artwork & Presentation"),
        ("Games Magazine Game of the Year", "Games Magazine Awards", GAME_OF_THE_YEAR),
        ("GOTY", "Some Award", GAME_OF_THE_YEAR),
        ("Parents' Choice Fun Stuff Award", "Parents' Choice Awards", "Fun Stuff"),
        ("Kinderspiel des Jahres Empfehlung", "Spiel des Jahres", "Kinderspiel des Jahres"),
        ("Best XY", "Some Award", OVERALL),
        ("2021 Fall Best Family Game Finalist", "Some Award", "Family Game"),
    ],
)
def test_derive_subcategory(position: str | None, award_type: str, expected: str) -> None:
    assert derive_subcategory(position, award_type) == expected


def test_derive_subcategory_title_cases_each_word() -> None:
    assert derive_subcategory("best cooperative game", "Golden Geek Awards") == (
        "Cooperative Game"
    )


def test_derive_subcategory_strips_repeated_award_name() -> None:
    assert derive_subcategory("Golden Geek Awards Best Wargame", "Golden Geek Awards") == (
        "Wargame"
    )
