"""Penalty engine - additive risk deductions applied after the weighted factor sum"""

from typing import List

from vibescore_income.domain.constants import MAX_PENALTY
from vibescore_income.domain.factors import balance_discipline, youth_profile
from vibescore_income.domain.metrics import safe_number
from vibescore_income.domain.models import NormalizedIncomeData, Penalty, PenaltyItem, ScoringContext

DEFAULT_UNEMPLOYMENT_RATE = 0.04
UNEMPLOYMENT_THRESHOLD = 0.06
VOLATILITY_THRESHOLD = 0.55
DATA_GAP_THRESHOLD = 4


def _labor_market(data: NormalizedIncomeData) -> List[PenaltyItem]:
    rate = safe_number(data.regional_unemployment_rate, DEFAULT_UNEMPLOYMENT_RATE)
    if rate <= UNEMPLOYMENT_THRESHOLD:
        return []
    amount = min(10.0, (rate - UNEMPLOYMENT_THRESHOLD) * 80)
    return [PenaltyItem(id="laborMarket", label="Local unemployment pressure", amount=amount)]


def _profile_events(data: NormalizedIncomeData) -> List[PenaltyItem]:
    items = []
    if data.upcoming_contract_renewal:
        items.append(PenaltyItem(id="contractRenewal", label="Contract renewal pending", amount=6.0))
    if data.planned_major_expense:
        items.append(PenaltyItem(id="majorExpense", label="Large planned expense", amount=4.0))
    return items


def _history_and_gaps(context: ScoringContext) -> List[PenaltyItem]:
    items = []
    volatility = context.history.volatility
    if volatility > VOLATILITY_THRESHOLD:
        items.append(
            PenaltyItem(id="volatility", label="Income volatility trend", amount=min(8.0, volatility * 10))
        )
    gaps = len(context.data_gaps)
    if gaps >= DATA_GAP_THRESHOLD:
        items.append(PenaltyItem(id="dataGaps", label="Missing key income data", amount=min(6.0, gaps * 1.5)))
    return items


def _age_alignment(context: ScoringContext) -> List[PenaltyItem]:
    """Income far below or far above what the age bracket expects"""
    expectation = context.age_targets.expectation
    if expectation is None or context.age_years is None:
        return []

    items = []
    income = context.total_income
    if expectation.monthly_max > 0:
        ratio = income / expectation.monthly_max
        if ratio < 0.5:
            severity = min(1.0, (0.5 - ratio) / 0.5)
            items.append(
                PenaltyItem(id="ageAlignmentLow", label="Income low relative to age peers", amount=5 * severity)
            )
    if expectation.monthly_mid > 0:
        over_ratio = income / expectation.monthly_mid
        if over_ratio > 3:
            severity = min(1.0, (over_ratio - 3) / 4)
            items.append(
                PenaltyItem(id="ageAlignmentHigh", label="Income atypically high for age band", amount=3 * severity)
            )
    return items


def _youth_habits(data: NormalizedIncomeData) -> List[PenaltyItem]:
    youth = youth_profile(data)
    if youth is None:
        return []

    items = []
    if youth.ran_out_of_money:
        amount = 5.0
        if youth.gets_guardian_help:
            amount = max(2.0, amount - 2)
        items.append(PenaltyItem(id="youthCashCrunch", label="Recently ran out of money", amount=amount))
    if not youth.has_emergency_buffer and not youth.has_current_savings:
        items.append(PenaltyItem(id="youthNoBuffer", label="No savings cushion established", amount=3.0))
    if balance_discipline(youth) <= 0.25:
        items.append(PenaltyItem(id="youthRarelyChecks", label="Rarely checks balances", amount=2.0))
    return items


def compute_penalty_adjustments(data: NormalizedIncomeData, context: ScoringContext) -> Penalty:
    """
    Collect every triggered penalty item and cap the total.

    Items are reported in full even when their sum exceeds MAX_PENALTY;
    only the total is capped.
    """
    items = (
        _labor_market(data)
        + _profile_events(data)
        + _history_and_gaps(context)
        + _age_alignment(context)
        + _youth_habits(data)
    )
    raw_total = sum(max(0.0, item.amount) for item in items)
    return Penalty(total=min(MAX_PENALTY, raw_total), items=items)
