"""Income scoring engine - builds context, runs factors, applies penalties"""

import logging
from typing import Any, Dict, Mapping, Union

from vibescore_income.config import settings
from vibescore_income.domain.age import derive_age_income_targets
from vibescore_income.domain.constants import DATA_IMPORTANCE_WEIGHTS, INCOME_WEIGHTS, SUFFICIENT_HISTORY_POINTS
from vibescore_income.domain.factors import FACTOR_COMPUTATORS
from vibescore_income.domain.metrics import analyze_income_history, clamp_score, data_presence_score, safe_number
from vibescore_income.domain.models import (
    DataQuality,
    Demographics,
    Diagnostics,
    NormalizedIncomeData,
    ScoreOptions,
    ScoreResult,
    ScoringContext,
    WeightedFactor,
)
from vibescore_income.domain.normalizer import normalize_income_data
from vibescore_income.domain.penalties import compute_penalty_adjustments

logger = logging.getLogger(__name__)

# camelCase option key -> ScoreOptions field
OPTION_KEYS = {
    "baselineMonthlyIncome": "baseline_monthly_income",
    "strongIncomeCap": "strong_income_cap",
    "essentialExpenseFallbackRatio": "essential_expense_fallback_ratio",
    "expenseFallbackRatio": "expense_fallback_ratio",
    "desiredSavingsRate": "desired_savings_rate",
    "idealEmergencyMonths": "ideal_emergency_months",
    "maxStreamsConsidered": "max_streams_considered",
}

OptionsInput = Union[ScoreOptions, Mapping[str, Any], None]


def resolve_options(overrides: OptionsInput = None) -> ScoreOptions:
    """
    Merge caller overrides over the configured defaults.

    Accepts camelCase or snake_case keys. Values that are not finite numbers
    fall back to the default.
    """
    if isinstance(overrides, ScoreOptions):
        return overrides

    values: Dict[str, Any] = {field: getattr(settings, field) for field in OPTION_KEYS.values()}
    if isinstance(overrides, Mapping):
        for key, value in overrides.items():
            field = OPTION_KEYS.get(key, key)
            if field in values:
                values[field] = safe_number(value, values[field])

    values["max_streams_considered"] = max(1, int(values["max_streams_considered"]))
    return ScoreOptions(**values)


def _presence_view(data: NormalizedIncomeData) -> Dict[str, Any]:
    """Importance-weighted fields as the data-quality scorer sees them"""
    total = data.total_income
    return {
        "totalIncome": total if total > 0 else None,
        "averageMonthlyExpenses": data.average_monthly_expenses,
        "employmentType": data.employment_type,
        "tenureMonths": data.tenure_months,
        "incomeHistory": data.income_history,
        "savingsRate": data.savings_rate,
        "emergencyFundMonths": data.emergency_fund_months,
        "industryRisk": data.industry_risk,
    }


def build_context(data: NormalizedIncomeData, options: ScoreOptions) -> ScoringContext:
    total_income = data.total_income
    region_cost_index = safe_number(data.region_cost_index, 100.0)
    adjusted_income = total_income * (100 / max(1.0, region_cost_index))

    quality = data_presence_score(_presence_view(data), DATA_IMPORTANCE_WEIGHTS)
    age_targets = derive_age_income_targets(
        data.age_years,
        baseline_monthly_income=options.baseline_monthly_income,
        strong_income_cap=options.strong_income_cap,
    )

    return ScoringContext(
        total_income=total_income,
        adjusted_income=adjusted_income,
        region_cost_index=region_cost_index,
        history=analyze_income_history(data.income_history),
        quality=quality,
        options=options,
        age_targets=age_targets,
        age_years=data.age_years,
    )


def compute_income_score(raw_or_normalized: Any, options: OptionsInput = None) -> ScoreResult:
    """
    Score a raw profile document or an already normalized record.

    The input is never mutated. Any input shape yields a complete ScoreResult.
    """
    data = normalize_income_data(raw_or_normalized)
    resolved = resolve_options(options)
    context = build_context(data, resolved)

    breakdown: Dict[str, WeightedFactor] = {}
    weighted_sum = 0.0
    for factor_id, computator in FACTOR_COMPUTATORS:
        result = computator(data, context)
        weight = INCOME_WEIGHTS[factor_id]
        contribution = result.score * weight
        weighted_sum += contribution
        breakdown[factor_id] = WeightedFactor(
            id=result.id,
            label=result.label,
            score=result.score,
            details=result.details,
            weight=weight,
            contribution=contribution,
        )

    base_score = clamp_score(weighted_sum)
    penalty = compute_penalty_adjustments(data, context)
    score = clamp_score(base_score - penalty.total)

    expectation = context.age_targets.expectation
    logger.debug(
        "Income score %.2f (base %.2f, penalty %.2f, youth=%s)", score, base_score, penalty.total, data.is_youth
    )

    return ScoreResult(
        score=score,
        base_score=base_score,
        total_income=context.total_income,
        adjusted_income=context.adjusted_income,
        region_cost_index=context.region_cost_index,
        penalty=penalty,
        breakdown=breakdown,
        quality=DataQuality(score=context.quality.score, missing=list(context.quality.missing)),
        history=context.history,
        demographics=Demographics(
            age_years=data.age_years,
            age_bracket=expectation.label if expectation is not None else None,
            age_expectation=expectation,
            segment="youth" if data.is_youth else "adult",
        ),
        diagnostics=Diagnostics(
            data_gaps=list(context.data_gaps),
            has_sufficient_history=context.history.count >= SUFFICIENT_HISTORY_POINTS,
            months_measured=context.history.coverage_months,
        ),
    )
