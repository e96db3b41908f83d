"""Unit tests for the penalty engine"""

import pytest

from vibescore_income.domain.constants import MAX_PENALTY
from vibescore_income.domain.normalizer import normalize_income_data
from vibescore_income.domain.penalties import compute_penalty_adjustments
from vibescore_income.domain.scoring import build_context, resolve_options

# Supplies every data-importance field so the data-gap penalty stays quiet
COMPLETE_PROFILE = {
    "primaryIncome": 5000,
    "averageMonthlyExpenses": 3500,
    "employmentType": "w2",
    "tenureMonths": 24,
    "incomeHistory": [{"month": "2024-01", "amount": 5000}],
    "savingsRate": 0.1,
    "emergencyFundMonths": 3,
    "industryRisk": "moderate",
}


def _penalty(raw):
    data = normalize_income_data(raw)
    return compute_penalty_adjustments(data, build_context(data, resolve_options()))


def _items(penalty):
    return {item.id: item.amount for item in penalty.items}


def test_complete_profile_has_no_penalty():
    penalty = _penalty(COMPLETE_PROFILE)
    assert penalty.total == 0
    assert penalty.items == []


def test_empty_profile_triggers_data_gaps():
    penalty = _penalty({})
    assert _items(penalty) == {"dataGaps": 6.0}
    assert penalty.total == 6.0


@pytest.mark.parametrize("rate,expected", [(5, None), (10, 3.2), (0.1, 3.2), (25, 10.0)])
def test_labor_market_penalty(rate, expected):
    items = _items(_penalty({**COMPLETE_PROFILE, "regionalUnemploymentRate": rate}))
    if expected is None:
        assert "laborMarket" not in items
    else:
        assert items["laborMarket"] == pytest.approx(expected)


def test_profile_event_penalties():
    items = _items(_penalty({**COMPLETE_PROFILE, "upcomingContractRenewal": True, "plannedMajorExpense": "yes"}))
    assert items == {"contractRenewal": 6.0, "majorExpense": 4.0}


def test_volatility_penalty():
    history = [
        {"month": "2024-01", "amount": 500},
        {"month": "2024-02", "amount": 3000},
        {"month": "2024-03", "amount": 500},
        {"month": "2024-04", "amount": 3000},
    ]
    items = _items(_penalty({**COMPLETE_PROFILE, "incomeHistory": history}))
    assert items["volatility"] == pytest.approx(1250 / 1750 * 10)


def test_age_alignment_low():
    items = _items(_penalty({**COMPLETE_PROFILE, "age": 30, "primaryIncome": 1000}))
    ratio = 1000 / (82_000 / 12)
    assert items["ageAlignmentLow"] == pytest.approx(5 * (0.5 - ratio) / 0.5)


def test_age_alignment_high():
    items = _items(_penalty({**COMPLETE_PROFILE, "age": 20, "primaryIncome": 20_000}))
    assert items["ageAlignmentHigh"] == pytest.approx(3.0)
    assert "ageAlignmentLow" not in items


def test_youth_penalties(youth_stressed):
    items = _items(_penalty(youth_stressed))
    assert items["youthCashCrunch"] == 5.0
    assert items["youthNoBuffer"] == 3.0
    assert items["youthRarelyChecks"] == 2.0


def test_guardian_help_softens_cash_crunch(youth_stressed):
    items = _items(_penalty({**youth_stressed, "youthGetsGuardianHelp": True}))
    assert items["youthCashCrunch"] == 3.0


def test_total_is_capped(youth_stressed):
    history = [{"month": f"2024-{m:02d}", "amount": 50 if m % 2 else 900} for m in range(1, 7)]
    raw = {
        **youth_stressed,
        "regionalUnemploymentRate": 25,
        "upcomingContractRenewal": True,
        "plannedMajorExpense": True,
        "incomeHistory": history,
    }
    penalty = _penalty(raw)
    assert sum(item.amount for item in penalty.items) > MAX_PENALTY
    assert penalty.total == MAX_PENALTY
