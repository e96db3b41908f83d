"""Age resolution and age-based income expectations"""

import math
from datetime import date
from typing import Any, Mapping, Optional

from vibescore_income.domain.constants import AGE_INCOME_EXPECTATIONS, MAX_AGE_YEARS
from vibescore_income.domain.metrics import safe_number
from vibescore_income.domain.models import AgeDetails, AgeExpectation, AgeTargets
from vibescore_income.utils.date_utils import decode_date

AGE_KEYS = ("age", "ageYears", "ageInYears")
BIRTHDAY_KEYS = ("birthday", "birthdate", "dateOfBirth")
NESTED_SCOPES = ("profile", "demographics", "income", "personal", "basics", "onboarding")


def _bounded_age(value: float) -> int:
    return max(0, min(MAX_AGE_YEARS, int(round(value))))


def compute_age(birth_date: date, today: Optional[date] = None) -> int:
    """Calendar-year difference, minus one if the birthday has not happened yet this year"""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return max(0, min(MAX_AGE_YEARS, age))


def compute_age_from_birthday(value: Any, today: Optional[date] = None) -> Optional[int]:
    """Age in years for any decodable birthday, or None"""
    birth_date = decode_date(value)
    if birth_date is None:
        return None
    return compute_age(birth_date, today)


def _scopes(raw: Mapping[str, Any]):
    yield raw
    for name in NESTED_SCOPES:
        scope = raw.get(name)
        if isinstance(scope, Mapping):
            yield scope


def extract_age(raw: Mapping[str, Any], today: Optional[date] = None) -> Optional[AgeDetails]:
    """
    Resolve age from a raw profile document.

    Explicit numeric ages win over birthdays. Both are searched at the top
    level first, then in nested profile-like objects. Birthdays in the future
    are skipped.
    """
    if not isinstance(raw, Mapping):
        return None
    today = today or date.today()

    for scope in _scopes(raw):
        for key in AGE_KEYS:
            value = safe_number(scope.get(key), None)
            if value is not None and value >= 0:
                return AgeDetails(age=_bounded_age(value), source="explicit")

    for scope in _scopes(raw):
        for key in BIRTHDAY_KEYS:
            birth_date = decode_date(scope.get(key))
            if birth_date is None or birth_date > today:
                continue
            return AgeDetails(
                age=compute_age(birth_date, today),
                source="birthday",
                birthday=birth_date.isoformat(),
            )

    return None


def get_age_expectation(age: Any) -> Optional[AgeExpectation]:
    """Income expectation bracket for an age, or None when below the lowest bracket"""
    years = safe_number(age, None)
    if years is None or not math.isfinite(years) or years < 0:
        return None

    for label, min_age, max_age, annual_min, annual_max, annual_mid in AGE_INCOME_EXPECTATIONS:
        upper = max_age if max_age is not None else math.inf
        if min_age <= years <= upper:
            low = float(annual_min)
            high = max(low, float(annual_max))
            mid = float(annual_mid) if annual_mid is not None else (low + high) / 2
            return AgeExpectation(
                label=label,
                min_age=min_age,
                max_age=max_age,
                annual_min=low,
                annual_max=high,
                annual_mid=mid,
                monthly_min=low / 12,
                monthly_max=high / 12,
                monthly_mid=mid / 12,
            )
    return None


def derive_age_income_targets(
    age: Any,
    baseline_monthly_income: float = 6500.0,
    strong_income_cap: float = 14500.0,
) -> AgeTargets:
    """
    Earning-power baseline and saturation cap for an age.

    baseline = bracket monthly mid; cap = max(bracket monthly max, baseline * 1.1).
    Falls back to the supplied defaults when no bracket resolves.
    """
    expectation = get_age_expectation(age)
    if expectation is None:
        return AgeTargets(
            baseline_monthly_income=baseline_monthly_income,
            strong_income_cap=strong_income_cap,
        )

    baseline = max(1.0, expectation.monthly_mid or baseline_monthly_income)
    cap_candidate = expectation.monthly_max if expectation.monthly_max > 0 else expectation.monthly_mid * 1.4
    cap = max(cap_candidate, baseline * 1.1)

    return AgeTargets(
        baseline_monthly_income=baseline,
        strong_income_cap=cap if cap > 0 else strong_income_cap,
        expectation=expectation,
    )
