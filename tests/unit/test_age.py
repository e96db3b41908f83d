"""Unit tests for date decoding and age-based income targets"""

from datetime import date, datetime, timezone

import pytest

from vibescore_income.domain.age import (
    compute_age,
    compute_age_from_birthday,
    derive_age_income_targets,
    extract_age,
    get_age_expectation,
)
from vibescore_income.utils.date_utils import decode_date, month_anchor, months_since

TODAY = date(2025, 6, 15)


class FirestoreLikeTimestamp:
    def __init__(self, value: datetime):
        self._value = value

    def toDate(self) -> datetime:
        return self._value


class BrokenTimestamp:
    def to_date(self):
        raise RuntimeError("unavailable")


@pytest.mark.parametrize(
    "value,expected",
    [
        (date(2020, 2, 29), date(2020, 2, 29)),
        (datetime(2020, 2, 29, 13, 45), date(2020, 2, 29)),
        ("2021-03-04", date(2021, 3, 4)),
        ("2021-03-04T10:00:00Z", date(2021, 3, 4)),
        ("2021-3-4", date(2021, 3, 4)),
        ("2021-03", date(2021, 3, 1)),
        (1_700_000_000_000, date(2023, 11, 14)),
        (1_700_000_000, date(2023, 11, 14)),
        ({"seconds": 1_700_000_000, "nanoseconds": 0}, date(2023, 11, 14)),
        ({"year": 2019, "month": 12, "day": 31}, date(2019, 12, 31)),
        (FirestoreLikeTimestamp(datetime(2018, 7, 1, tzinfo=timezone.utc)), date(2018, 7, 1)),
    ],
)
def test_decode_date_shapes(value, expected):
    assert decode_date(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, True, "", "not a date", 12345, float("nan"), {"year": 2020, "month": 13, "day": 1}, [2020, 1, 1], BrokenTimestamp()],
)
def test_decode_date_rejects_unusable_values(value):
    assert decode_date(value) is None


def test_month_anchor_and_months_since():
    assert month_anchor("2024-05-19") == date(2024, 5, 1)
    assert month_anchor("garbage") is None
    assert months_since(date(2024, 6, 15), TODAY) == pytest.approx(365 / 30.4375)
    assert months_since(date(2030, 1, 1), TODAY) == 0


def test_compute_age_handles_birthday_not_yet_reached():
    assert compute_age(date(2010, 6, 15), TODAY) == 15
    assert compute_age(date(2010, 6, 16), TODAY) == 14
    assert compute_age(date(1800, 1, 1), TODAY) == 130
    assert compute_age(date(2030, 1, 1), TODAY) == 0


def test_compute_age_from_birthday():
    assert compute_age_from_birthday("2000-01-01", TODAY) == 25
    assert compute_age_from_birthday("someday", TODAY) is None


def test_extract_age_prefers_explicit_value():
    details = extract_age({"age": "15", "birthday": "1990-01-01"}, TODAY)
    assert details.age == 15
    assert details.source == "explicit"


def test_extract_age_searches_nested_scopes():
    assert extract_age({"profile": {"ageYears": 40}}, TODAY).age == 40
    details = extract_age({"demographics": {"dateOfBirth": "2000-05-20"}}, TODAY)
    assert details.age == 25
    assert details.source == "birthday"
    assert details.birthday == "2000-05-20"


def test_extract_age_skips_future_birthdays():
    assert extract_age({"birthday": "2030-05-01"}, TODAY) is None
    details = extract_age({"birthday": "2030-05-01", "profile": {"birthdate": "1995-02-01"}}, TODAY)
    assert details.age == 30
    assert details.birthday == "1995-02-01"


def test_extract_age_missing():
    assert extract_age({}, TODAY) is None
    assert extract_age({"age": "unknown"}, TODAY) is None


def test_get_age_expectation_brackets():
    youth = get_age_expectation(15)
    assert youth.label == "14-17"
    assert youth.monthly_mid == pytest.approx(5000 / 12)
    assert youth.monthly_max == pytest.approx(750)
    assert get_age_expectation(70).label == "65+"
    assert get_age_expectation(24).label == "18-24"
    assert get_age_expectation(13) is None
    assert get_age_expectation(float("nan")) is None
    assert get_age_expectation(None) is None


def test_derive_age_income_targets_from_bracket():
    targets = derive_age_income_targets(30)
    assert targets.baseline_monthly_income == pytest.approx(58_000 / 12)
    assert targets.strong_income_cap == pytest.approx(82_000 / 12)
    assert targets.expectation.label == "25-34"


def test_derive_age_income_targets_falls_back_to_defaults():
    targets = derive_age_income_targets(None, baseline_monthly_income=7000, strong_income_cap=15000)
    assert targets.baseline_monthly_income == 7000
    assert targets.strong_income_cap == 15000
    assert targets.expectation is None
