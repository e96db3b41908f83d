"""
Factor computators - each scores one dimension of income quality.

Every computator is a pure function of (NormalizedIncomeData, ScoringContext)
returning a FactorResult with a score clamped to [0, 100]. Missing or
unrecognised inputs fall back to neutral defaults; nothing here raises.
"""

import logging
from typing import Callable, Mapping, Optional, Tuple

from vibescore_income.domain import constants as c
from vibescore_income.domain.metrics import (
    clamp_score,
    herfindahl_index,
    logistic,
    ratio_score,
    safe_number,
    saturate,
)
from vibescore_income.domain.models import FactorResult, NormalizedIncomeData, ScoringContext, YouthProfile
from vibescore_income.domain.streams import contains_any

logger = logging.getLogger(__name__)

LabelRule = Tuple[Callable[[str], bool], str]

EMPLOYMENT_RULES: Tuple[LabelRule, ...] = (
    (contains_any("self", "owner"), "business-owner"),
    (contains_any("contract", "freelance"), "contract"),
    (contains_any("gig"), "gig"),
    (contains_any("part"), "part-time"),
    (contains_any("full"), "full-time"),
    (contains_any("w2", "salary"), "w2"),
)

RISK_RULES: Tuple[LabelRule, ...] = (
    (lambda text: "very" in text and "low" in text, "very-low"),
    (lambda text: "very" in text and "high" in text, "very-high"),
    (contains_any("high"), "high"),
    (contains_any("low"), "low"),
    (contains_any("elev"), "elevated"),
)

RELIABILITY_RULES: Tuple[LabelRule, ...] = (
    (contains_any("consis"), "high"),
    (contains_any("rare"), "low"),
    (contains_any("none"), "none"),
)

HIRING_RULES: Tuple[LabelRule, ...] = (
    (contains_any("expan", "rapid"), "expanding"),
    (contains_any("contract", "shrink"), "contracting"),
    (contains_any("cool", "slow"), "cooling"),
    (contains_any("steady"), "steady"),
)

SKILL_RULES: Tuple[LabelRule, ...] = (
    (contains_any("high", "in-demand"), "strong"),
    (contains_any("scarce"), "scarce"),
    (contains_any("low", "declin"), "declining"),
)

# Checked in order; "biweekly" must hit the "bi" rule before "week"
PAY_FREQUENCY_RULES: Tuple[Tuple[Callable[[str], bool], float], ...] = (
    (contains_any("irregular"), -6.0),
    (contains_any("semi"), 2.0),
    (contains_any("bi"), 4.0),
    (contains_any("week"), 6.0),
)


def _normalize_label(value: Optional[str], table: Mapping[str, float], rules: Tuple[LabelRule, ...], default: str) -> str:
    if not value:
        return default
    text = str(value).strip().lower()
    if text in table:
        return text
    for predicate, label in rules:
        if predicate(text):
            return label
    logger.debug("Unrecognised label %r, using %s", text, default)
    return default


def normalize_employment_type(value: Optional[str]) -> str:
    return _normalize_label(value, c.EMPLOYMENT_TYPE_BASE, EMPLOYMENT_RULES, "contract")


def normalize_industry_risk(value: Optional[str]) -> str:
    return _normalize_label(value, c.INDUSTRY_RISK_ADJUSTMENT, RISK_RULES, "moderate")


def normalize_bonus_reliability(value: Optional[str]) -> str:
    return _normalize_label(value, c.BONUS_RELIABILITY_ADJUSTMENT, RELIABILITY_RULES, "medium")


def normalize_hiring_trend(value: Optional[str]) -> str:
    return _normalize_label(value, c.HIRING_TREND_ADJUSTMENT, HIRING_RULES, "neutral")


def normalize_skill_demand(value: Optional[str]) -> str:
    return _normalize_label(value, c.SKILL_DEMAND_BASE, SKILL_RULES, "balanced")


def pay_frequency_adjustment(value: Optional[str]) -> float:
    text = str(value or "").strip().lower()
    for predicate, adjustment in PAY_FREQUENCY_RULES:
        if predicate(text):
            return adjustment
    return 0.0


def _unit(value: Optional[float], fallback: float = 0.0) -> float:
    """Unit fraction clamped to [0, 1]"""
    return max(0.0, min(1.0, safe_number(value, fallback)))


# Youth questionnaire weights; unknown labels get the neutral middle value


def balance_discipline(youth: YouthProfile) -> float:
    return c.YOUTH_BALANCE_CHECK_DISCIPLINE.get(youth.balance_check_frequency or "", 0.45)


def spending_approach_weight(youth: YouthProfile) -> float:
    return c.YOUTH_SPENDING_APPROACH_WEIGHT.get(youth.spending_approach or "", 0.5)


def confidence_weight(youth: YouthProfile) -> float:
    return c.YOUTH_CONFIDENCE_WEIGHT.get(youth.money_confidence or "", 0.55)


def income_frequency_momentum(youth: YouthProfile) -> float:
    return float(c.YOUTH_INCOME_FREQUENCY_MOMENTUM.get(youth.income_frequency or "", 0))


def savings_contribution_boost(youth: YouthProfile) -> float:
    return float(c.YOUTH_SAVINGS_CONTRIBUTION_BOOST.get(youth.savings_contribution_frequency or "", 2))


def savings_location_bonus(youth: YouthProfile) -> float:
    return float(c.YOUTH_SAVINGS_LOCATION_BONUS.get(youth.savings_location or "", 0))


def youth_profile(data: NormalizedIncomeData) -> Optional[YouthProfile]:
    return data.youth if data.is_youth and data.youth is not None else None


def compute_earning_power_factor(data: NormalizedIncomeData, context: ScoringContext) -> FactorResult:
    """
    Saturating income level plus lift over the age-aware baseline.

    score = 65 * saturate(adjusted, cap) + 35 * min(1, lift)
    where lift = min(1.1, adjusted / baseline).
    """
    targets = context.age_targets
    adjusted = max(0.0, context.adjusted_income)
    baseline = max(1.0, targets.baseline_monthly_income)
    cap = targets.strong_income_cap

    normalized = saturate(adjusted, cap)
    lift = min(1.1, adjusted / baseline)
    score = clamp_score(65 * normalized + 35 * min(1.0, lift))

    expectation = targets.expectation
    alignment = None
    if expectation is not None and expectation.monthly_mid > 0:
        alignment = adjusted / expectation.monthly_mid

    return FactorResult(
        id="earningPower",
        label="Earning Power",
        score=score,
        details={
            "adjusted_income": adjusted,
            "baseline_monthly_income": baseline,
            "strong_income_cap": cap,
            "normalized": normalized,
            "baseline_lift": lift,
            "age_alignment": alignment,
            "age_years": context.age_years,
        },
    )


def compute_expense_coverage_factor(data: NormalizedIncomeData, context: ScoringContext) -> FactorResult:
    options = context.options
    income = context.total_income
    reported = max(0.0, safe_number(data.average_monthly_expenses, 0.0))

    if data.essential_expenses is not None:
        essential = max(0.0, safe_number(data.essential_expenses, 0.0))
    elif reported > 0:
        essential = reported * options.essential_expense_fallback_ratio
    else:
        essential = income * 0.55
    expenses = reported if reported > 0 else income * options.expense_fallback_ratio

    coverage_ratio = 0.0 if expenses <= 0 else income / expenses
    buffer_ratio = 0.0 if essential <= 0 else max(0.0, income - essential) / essential
    coverage_component = ratio_score(coverage_ratio, 1.25, 0.4) / 100
    buffer_component = logistic(buffer_ratio, 0.4, 5)
    score = clamp_score(coverage_component * 60 + buffer_component * 40)

    details = {
        "total_income": income,
        "total_expenses": expenses,
        "essential_expenses": essential,
        "coverage_ratio": coverage_ratio,
        "buffer_ratio": buffer_ratio,
    }

    youth = youth_profile(data)
    if youth is not None:
        adjust = (spending_approach_weight(youth) - 0.5) * 22
        if youth.tracks_spending:
            adjust += 4
        if youth.pays_recurring_expenses:
            adjust += 3
        if youth.ran_out_of_money:
            adjust -= 6
        if youth.gets_guardian_help:
            adjust += 1.5
        score = clamp_score(score + adjust)
        details["youth_adjust"] = adjust

    return FactorResult(id="expenseCoverage", label="Expense Coverage", score=score, details=details)


def compute_stability_factor(data: NormalizedIncomeData, context: ScoringContext) -> FactorResult:
    employment_type = normalize_employment_type(data.employment_type)
    industry_risk = normalize_industry_risk(data.industry_risk)
    reliability = normalize_bonus_reliability(data.bonus_reliability)

    base = c.EMPLOYMENT_TYPE_BASE.get(employment_type, 55)
    tenure = max(0.0, safe_number(data.tenure_months, 0.0))
    tenure_boost = min(24.0, tenure * 0.9)
    risk_adjust = c.INDUSTRY_RISK_ADJUSTMENT.get(industry_risk, 0)
    pay_adjust = pay_frequency_adjustment(data.pay_frequency)
    layoffs = max(0.0, safe_number(data.layoff_history, 0.0))
    layoff_adjust = -min(10.0, layoffs * 3)
    benefit_coverage = _unit(data.employer_benefit_coverage, 0.5)
    reliability_adjust = c.BONUS_RELIABILITY_ADJUSTMENT.get(reliability, 0)
    insurance = _unit(data.income_protection_coverage)

    score = clamp_score(
        base
        + tenure_boost
        + risk_adjust
        + pay_adjust
        + layoff_adjust
        + benefit_coverage * 10
        + reliability_adjust
        + insurance * 8
    )
    details = {
        "employment_type": employment_type,
        "industry_risk": industry_risk,
        "tenure_months": tenure,
        "volatility_adjust": risk_adjust,
        "pay_adjust": pay_adjust,
        "layoff_history": layoffs,
        "benefit_coverage": benefit_coverage,
        "reliability": reliability,
        "insurance_coverage": insurance,
    }

    youth = youth_profile(data)
    if youth is not None:
        adjust = (balance_discipline(youth) - 0.45) * 14
        if youth.has_checking_account:
            adjust += 4
        if youth.has_savings_account:
            adjust += 5
        if youth.has_debit_card:
            adjust += 2
        if youth.uses_money_apps:
            adjust += 1.5
        if youth.held_part_time_job:
            adjust += 3
        if not youth.has_income:
            adjust -= 10
        if youth.gets_guardian_help:
            adjust += 2
        score = clamp_score(score + adjust)
        details["youth_adjust"] = adjust

    return FactorResult(id="stability", label="Income Stability", score=score, details=details)


def compute_diversity_factor(data: NormalizedIncomeData, context: ScoringContext) -> FactorResult:
    """
    Spread of income across canonical streams.

    Streams are read from the canonical buckets in fixed order, so the order
    of any input stream list does not affect the result.
    """
    streams = [(key, amount) for key, amount in data.stream_amounts().items() if amount > 0]
    streams = streams[: max(1, context.options.max_streams_considered)]
    if not streams:
        return FactorResult(
            id="diversity",
            label="Income Diversity",
            score=0.0,
            details={"stream_count": 0, "herfindahl": 1.0, "passive_share": 0.0},
        )

    total = sum(amount for _, amount in streams)
    herfindahl = herfindahl_index(amount for _, amount in streams)
    count = len(streams)
    passive = sum(amount for key, amount in streams if key in c.PASSIVE_STREAM_KEYS)
    passive_share = passive / total if total > 0 else 0.0

    concentration = 0.0 if count == 1 else (1 - herfindahl) / (1 - 1 / count)
    passive_component = min(1.0, passive_share * 1.4)
    score = clamp_score(concentration * 70 + passive_component * 30)

    return FactorResult(
        id="diversity",
        label="Income Diversity",
        score=score,
        details={"stream_count": count, "herfindahl": herfindahl, "passive_share": passive_share},
    )


def compute_momentum_factor(data: NormalizedIncomeData, context: ScoringContext) -> FactorResult:
    history = context.history
    youth = youth_profile(data)

    if history.count == 0:
        score = c.NEUTRAL_MOMENTUM_SCORE
        details = {
            "slope": 0.0,
            "slope_percent": 0.0,
            "r_squared": 0.0,
            "volatility": 0.0,
            "recent_change_pct": 0.0,
            "recent_component": 50.0,
        }
        if youth is not None:
            adjust = income_frequency_momentum(youth) * 0.6
            if youth.has_savings_goal:
                adjust += 3
            if youth.uses_money_apps:
                adjust += 1.5
            if youth.ran_out_of_money:
                adjust -= 3
            adjust += (spending_approach_weight(youth) - 0.5) * 8
            score = clamp_score(score + adjust)
            details["youth_adjust"] = adjust
        return FactorResult(id="momentum", label="Trajectory", score=score, details=details)

    slope_component = clamp_score(history.slope_percent * 180 + 50)
    r2_component = clamp_score(history.r_squared * 40 + 40)
    volatility_penalty = min(35.0, history.volatility * 60)
    recent_component = clamp_score(history.recent_change_pct * 140 + 50)
    score = clamp_score(
        slope_component * 0.35 + r2_component * 0.25 + recent_component * 0.25 - volatility_penalty * 0.35
    )
    details = {
        "slope": history.slope,
        "slope_percent": history.slope_percent,
        "r_squared": history.r_squared,
        "volatility": history.volatility,
        "recent_change_pct": history.recent_change_pct,
        "recent_component": recent_component,
    }

    if youth is not None:
        adjust = income_frequency_momentum(youth)
        if youth.has_savings_goal:
            adjust += 3
        if youth.savings_contribution_frequency in ("weekly", "biweekly", "monthly"):
            adjust += 2
        if youth.uses_money_apps:
            adjust += 1.5
        if youth.ran_out_of_money:
            adjust -= 4
        if spending_approach_weight(youth) > 0.75:
            adjust += 2
        score = clamp_score(score + adjust)
        details["youth_adjust"] = adjust

    return FactorResult(id="momentum", label="Income Momentum", score=score, details=details)


def compute_resilience_factor(data: NormalizedIncomeData, context: ScoringContext) -> FactorResult:
    options = context.options
    savings_rate = max(
        0.0, safe_number(data.savings_rate if data.savings_rate is not None else data.monthly_savings_rate, 0.0)
    )
    emergency_months = max(0.0, safe_number(data.emergency_fund_months, 0.0))
    dti = max(0.0, safe_number(data.debt_to_income, 0.0))
    insurance = _unit(data.income_protection_coverage)

    savings_component = clamp_score(savings_rate / max(0.05, options.desired_savings_rate) * 45, 0, 45)
    emergency_component = clamp_score(emergency_months / max(1.0, options.ideal_emergency_months) * 35, 0, 35)
    dti_component = clamp_score((1 - min(0.65, dti)) * 25, 0, 25)
    insurance_component = insurance * 8
    score = clamp_score(savings_component + emergency_component + dti_component + insurance_component)

    details = {
        "savings_rate": savings_rate,
        "emergency_months": emergency_months,
        "dti": dti,
        "insurance_component": insurance_component,
    }

    youth = youth_profile(data)
    if youth is not None:
        adjust = 0.0
        if not youth.has_current_savings:
            adjust -= 12
        if youth.has_emergency_buffer:
            adjust += 6
        adjust += savings_location_bonus(youth)
        adjust += savings_contribution_boost(youth)
        if youth.gets_guardian_help:
            adjust += 2
        if youth.has_savings_goal:
            adjust += 3
        score = clamp_score(score + adjust)
        details["youth_adjust"] = adjust

    return FactorResult(id="resilience", label="Shock Resilience", score=score, details=details)


def compute_opportunity_factor(data: NormalizedIncomeData, context: ScoringContext) -> FactorResult:
    skill_demand = normalize_skill_demand(data.skill_demand)
    hiring_trend = normalize_hiring_trend(data.industry_hiring_trend)
    demand_base = c.SKILL_DEMAND_BASE.get(skill_demand, 60)
    # promotion pipeline is a raw 0-2 readiness scale, not a percentage
    promotion = max(0.0, min(2.0, safe_number(data.promotion_pipeline, 0.0)))
    upskilling = _unit(data.upskilling_progress)
    hiring_adjust = c.HIRING_TREND_ADJUSTMENT.get(hiring_trend, 0)
    satisfaction = _unit(data.role_satisfaction, 0.6)

    score = clamp_score(demand_base + promotion * 8 + upskilling * 14 + hiring_adjust + satisfaction * 6)
    details = {
        "skill_demand": skill_demand,
        "promotion_pipeline": promotion,
        "upskilling_momentum": upskilling,
        "hiring_trend": hiring_trend,
        "satisfaction": satisfaction,
    }

    youth = youth_profile(data)
    if youth is not None:
        adjust = (confidence_weight(youth) - 0.55) * 18
        if youth.has_savings_goal:
            adjust += 4
        adjust += (spending_approach_weight(youth) - 0.5) * 10
        if youth.tracks_spending:
            adjust += 2
        if youth.shares_money_with_others:
            adjust += 1
        score = clamp_score(score + adjust)
        details["youth_adjust"] = adjust

    return FactorResult(id="opportunity", label="Future Opportunity", score=score, details=details)


# Keyed like INCOME_WEIGHTS
FACTOR_COMPUTATORS = (
    ("earningPower", compute_earning_power_factor),
    ("expenseCoverage", compute_expense_coverage_factor),
    ("stability", compute_stability_factor),
    ("diversity", compute_diversity_factor),
    ("momentum", compute_momentum_factor),
    ("resilience", compute_resilience_factor),
    ("opportunity", compute_opportunity_factor),
)
