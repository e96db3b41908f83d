"""Unit tests for the score aggregator"""

import copy
import json

import pytest

from vibescore_income.domain.constants import DATA_IMPORTANCE_WEIGHTS, INCOME_WEIGHTS, MAX_PENALTY
from vibescore_income.domain.metrics import clamp_score
from vibescore_income.domain.models import ScoreOptions
from vibescore_income.domain.normalizer import normalize_income_data
from vibescore_income.domain.scoring import compute_income_score, resolve_options


def test_weights_sum_to_one():
    assert sum(INCOME_WEIGHTS.values()) == pytest.approx(1.0, abs=1e-12)
    assert all(weight > 0 for weight in INCOME_WEIGHTS.values())


def test_lookup_tables_are_read_only():
    with pytest.raises(TypeError):
        INCOME_WEIGHTS["earningPower"] = 0.5


def test_resolve_options_defaults():
    options = resolve_options()
    assert options == ScoreOptions(
        baseline_monthly_income=6500.0,
        strong_income_cap=14500.0,
        essential_expense_fallback_ratio=0.65,
        expense_fallback_ratio=0.82,
        desired_savings_rate=0.20,
        ideal_emergency_months=6.0,
        max_streams_considered=6,
    )


def test_resolve_options_overrides():
    options = resolve_options(
        {"baselineMonthlyIncome": "8000", "desired_savings_rate": 0.3, "maxStreamsConsidered": 0, "unknown": 1}
    )
    assert options.baseline_monthly_income == 8000
    assert options.desired_savings_rate == 0.3
    assert options.max_streams_considered == 1


def test_resolve_options_ignores_bad_values():
    options = resolve_options({"strongIncomeCap": "lots", "idealEmergencyMonths": None})
    assert options.strong_income_cap == 14500.0
    assert options.ideal_emergency_months == 6.0


def test_score_invariants(adult_profile):
    result = compute_income_score(adult_profile)
    weighted = sum(factor.score * factor.weight for factor in result.breakdown.values())
    assert result.base_score == pytest.approx(clamp_score(weighted))
    assert result.score == pytest.approx(clamp_score(result.base_score - result.penalty.total))
    assert result.penalty.total <= MAX_PENALTY
    assert set(result.breakdown) == set(INCOME_WEIGHTS)
    for factor_id, factor in result.breakdown.items():
        assert 0 <= factor.score <= 100
        assert factor.weight == INCOME_WEIGHTS[factor_id]
        assert factor.contribution == pytest.approx(factor.score * factor.weight)


def test_adult_result_shape(adult_profile):
    result = compute_income_score(adult_profile)
    assert result.total_income == 6200
    assert result.adjusted_income == 6200
    assert result.region_cost_index == 100
    assert result.demographics.segment == "adult"
    assert result.demographics.age_bracket == "25-34"
    assert result.diagnostics.has_sufficient_history is True
    assert result.diagnostics.months_measured == 12
    assert result.quality.score == 100
    assert result.quality.missing == []


def test_empty_profile_returns_complete_result():
    result = compute_income_score({})
    assert result.total_income == 0
    assert result.breakdown["diversity"].score == 0
    assert result.breakdown["momentum"].score == 48
    assert set(result.quality.missing) == set(DATA_IMPORTANCE_WEIGHTS)
    assert result.diagnostics.has_sufficient_history is False
    assert result.demographics.age_years is None
    assert 0 <= result.score <= 100


@pytest.mark.parametrize("raw", [None, [], "text", 3.5, {"primaryIncome": float("nan")}, {"incomeStreams": "oops"}])
def test_malformed_input_never_raises(raw):
    result = compute_income_score(raw)
    assert 0 <= result.score <= 100


def test_accepts_normalized_record(adult_profile):
    record = normalize_income_data(adult_profile)
    assert compute_income_score(record).score == pytest.approx(compute_income_score(adult_profile).score)


def test_input_document_is_not_mutated(adult_profile):
    snapshot = copy.deepcopy(adult_profile)
    compute_income_score(adult_profile)
    assert adult_profile == snapshot


def test_sparse_history_is_not_sufficient(monthly_history):
    result = compute_income_score({"primaryIncome": 3000, "incomeHistory": monthly_history([3000, 3100])})
    assert result.diagnostics.has_sufficient_history is False
    assert result.history.count == 2


def test_to_dict_uses_camel_case_and_is_json_ready(youth_supportive):
    payload = compute_income_score(youth_supportive).to_dict()
    assert {"score", "baseScore", "totalIncome", "adjustedIncome", "regionCostIndex"} <= set(payload)
    assert {"total", "items"} <= set(payload["penalty"])
    assert payload["breakdown"]["earningPower"]["details"]["baselineLift"] > 0
    assert "youthAdjust" in payload["breakdown"]["resilience"]["details"]
    assert payload["demographics"]["ageExpectation"]["monthlyMid"] == pytest.approx(5000 / 12)
    assert payload["diagnostics"]["monthsMeasured"] == 0
    json.dumps(payload)
