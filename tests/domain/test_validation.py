from __future__ import annotations

import pytest

from honorsync.domain.validation import honor_record_violation
from tests.support.honors import make_record


def test_valid_record_has_no_violation() -> None:
    assert honor_record_violation(make_record("1"), current_year=2025) is None


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"category": "Runner-up"}, "invalid category"),
        ({"category": None}, "invalid category"),
        ({"name": ""}, "missing name"),
        ({"name": 12}, "missing name"),
        ({"year": "2024"}, "invalid year"),
        ({"year": True}, "invalid year"),
        ({"year": 1899}, "outside 1900..2027"),
        ({"year": 2028}, "outside 1900..2027"),
    ],
)
def test_violations(overrides: dict[str, object], message: str) -> None:
    record = {**make_record("1"), **overrides}

    violation = honor_record_violation(record, current_year=2025)

    assert violation is not None
    assert message in violation


def test_year_window_allows_two_years_ahead() -> None:
    assert honor_record_violation(make_record("1", year=2027), current_year=2025) is None
