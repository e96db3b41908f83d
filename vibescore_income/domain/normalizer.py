"""
Normalize heterogeneous income profile documents into NormalizedIncomeData.

Two questionnaire shapes feed the same record: the adult profile, which uses
many alias field names for the same concept, and the youth (age <= 17)
questionnaire. Each concept is resolved from an ordered alias list; the
first alias carrying a usable value wins.
"""

import copy
import logging
from datetime import date
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from vibescore_income.domain import constants as c
from vibescore_income.domain.age import extract_age
from vibescore_income.domain.metrics import percent_to_unit, safe_number
from vibescore_income.domain.models import (
    STREAM_FIELDS,
    IncomeHistoryPoint,
    IncomeStream,
    NormalizedIncomeData,
    YouthProfile,
)
from vibescore_income.domain.streams import canonical_stream_key, classify_stream_hint
from vibescore_income.utils.date_utils import decode_date, month_anchor, months_since

logger = logging.getLogger(__name__)

AGGREGATE_INCOME_KEYS = (
    "totalMonthlyIncome",
    "monthlyIncomeTotal",
    "grossMonthlyIncome",
    "monthlyNetIncome",
    "netMonthlyIncome",
    "incomePerMonth",
)
STREAM_COLLECTION_KEYS = ("incomeStreams", "streams", "sources")
STREAM_AMOUNT_KEYS = ("amount", "monthlyAmount", "value", "total")
STREAM_HINT_KEYS = ("type", "category", "label", "name")
HISTORY_KEYS = ("incomeHistory", "incomeTimeline", "history", "monthlyIncomeHistory")
HISTORY_MONTH_KEYS = ("month", "date", "label", "period")
HISTORY_AMOUNT_KEYS = ("amount", "value", "total", "income")
TENURE_START_KEYS = ("employmentStartDate", "roleStartDate", "jobStartDate")
OVERRIDE_KEYS = ("profile", "incomeProfile", "overrides")
YOUTH_TRIGGER_KEYS = ("youthHasIncome", "youthTypicalMonthlyIncome", "youthPrimaryIncomeSource")

TRUE_STRINGS = frozenset({"true", "yes", "y", "1"})
FALSE_STRINGS = frozenset({"false", "no", "n", "0"})


class FieldAlias(NamedTuple):
    attr: str
    keys: Tuple[str, ...]
    kind: str  # "amount" (>= 0), "percent" (unit fraction), "text" or "flag"


SCALAR_ALIASES: Tuple[FieldAlias, ...] = (
    FieldAlias("average_monthly_expenses", ("averageMonthlyExpenses", "monthlyExpenses", "expensesMonthly", "spending"), "amount"),
    FieldAlias("essential_expenses", ("essentialExpenses", "fixedExpenses", "coreExpenses"), "amount"),
    FieldAlias("savings_rate", ("savingsRate", "monthlySavingsRate", "savingRate", "savingsPercent"), "percent"),
    FieldAlias("emergency_fund_months", ("emergencyFundMonths", "safetyNetMonths", "monthsOfExpenses", "emergencyMonths"), "amount"),
    FieldAlias("employment_type", ("employmentType", "jobType", "roleType", "workType"), "text"),
    FieldAlias("industry_risk", ("industryRisk", "industryVolatility", "volatilityLevel", "volatility"), "text"),
    FieldAlias("bonus_reliability", ("bonusReliability", "variablePayReliability", "variablePayConsistency"), "text"),
    FieldAlias("pay_frequency", ("payFrequency", "payCadence", "paySchedule"), "text"),
    FieldAlias("industry_hiring_trend", ("industryHiringTrend", "hiringTrend", "marketTrend"), "text"),
    FieldAlias("skill_demand", ("skillDemand", "marketDemand", "talentDemand"), "text"),
    FieldAlias("promotion_pipeline", ("promotionPipeline", "promotionReadiness", "promotionProbability"), "amount"),
    FieldAlias("upskilling_progress", ("upskillingProgress", "credentialMomentum", "trainingProgress"), "percent"),
    FieldAlias("role_satisfaction", ("roleSatisfaction", "jobSatisfaction", "workSatisfaction"), "percent"),
    FieldAlias("employer_benefit_coverage", ("employerBenefitCoverage", "benefitCoverage"), "percent"),
    FieldAlias("region_cost_index", ("regionCostIndex", "costOfLivingIndex", "metroCostIndex"), "amount"),
    FieldAlias("debt_to_income", ("debtToIncome", "debtToIncomeRatio", "dti", "dtiRatio"), "percent"),
    FieldAlias("income_protection_coverage", ("incomeProtectionCoverage", "disabilityCoverage", "incomeInsuranceCoverage"), "percent"),
    FieldAlias("regional_unemployment_rate", ("regionalUnemploymentRate", "unemploymentRate", "localUnemployment"), "percent"),
    FieldAlias("layoff_history", ("layoffHistory", "layoffCount"), "amount"),
)

FLAG_ALIASES: Tuple[FieldAlias, ...] = (
    FieldAlias("upcoming_contract_renewal", ("upcomingContractRenewal", "contractRenewalPending"), "flag"),
    FieldAlias("planned_major_expense", ("plannedMajorExpense", "largeExpensePlanned"), "flag"),
)


def coerce_flag(value: Any) -> bool:
    """Booleans pass through; yes/no style strings are parsed; everything else uses truthiness"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    return bool(value)


def pick_first_number(source: Mapping[str, Any], keys: Tuple[str, ...]) -> Optional[float]:
    for key in keys:
        if key in source:
            value = safe_number(source[key], None)
            if value is not None:
                return value
    return None


def pick_first_text(source: Mapping[str, Any], keys: Tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = source.get(key)
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _label(value: Any) -> Optional[str]:
    text = str(value).strip().lower() if value is not None else ""
    return text or None


def _resolve_scalars(source: Mapping[str, Any]) -> Dict[str, Any]:
    """Values for every scalar alias group the source actually supplies"""
    resolved: Dict[str, Any] = {}
    for alias in SCALAR_ALIASES:
        if alias.kind == "text":
            value = pick_first_text(source, alias.keys)
        else:
            value = pick_first_number(source, alias.keys)
            if value is not None:
                value = percent_to_unit(value) if alias.kind == "percent" else max(0.0, value)
        if value is not None:
            resolved[alias.attr] = value
    for alias in FLAG_ALIASES:
        for key in alias.keys:
            if key in source and source[key] is not None:
                resolved[alias.attr] = coerce_flag(source[key])
                break
    return resolved


def _resolve_stream_fields(source: Mapping[str, Any]) -> Dict[str, float]:
    resolved = {}
    for key, attr in STREAM_FIELDS.items():
        field_name = f"{key}Income"
        if field_name in source:
            resolved[attr] = max(0.0, safe_number(source[field_name], 0.0))
    return resolved


def _resolve_tenure(source: Mapping[str, Any], today: Optional[date]) -> Optional[float]:
    direct = safe_number(source.get("tenureMonths"), None)
    if direct is not None:
        return max(0.0, direct)
    years = safe_number(source.get("tenureYears"), None)
    if years is not None:
        return max(0.0, years * 12)
    for key in TENURE_START_KEYS:
        start = decode_date(source.get(key))
        if start is not None:
            return float(round(months_since(start, today)))
    return None


def _resolve_history(source: Mapping[str, Any]) -> List[IncomeHistoryPoint]:
    for key in HISTORY_KEYS:
        candidate = source.get(key)
        if not isinstance(candidate, list) or not candidate:
            continue
        points = []
        for entry in candidate:
            if not isinstance(entry, Mapping):
                continue
            month = next((month_anchor(entry[k]) for k in HISTORY_MONTH_KEYS if entry.get(k) is not None), None)
            amount = pick_first_number(entry, HISTORY_AMOUNT_KEYS)
            if month is not None and amount is not None:
                points.append(IncomeHistoryPoint(month=month, amount=amount))
        return points
    return []


def _apply_aggregate_income(record: NormalizedIncomeData, source: Mapping[str, Any]) -> None:
    aggregate = pick_first_number(source, AGGREGATE_INCOME_KEYS)
    if aggregate is None or aggregate <= 0:
        return
    if record.primary_income <= 0:
        record.primary_income = aggregate
    elif record.primary_income < aggregate:
        record.additional_income += aggregate - record.primary_income


def _classify_stream_array(record: NormalizedIncomeData, source: Mapping[str, Any]) -> List[IncomeStream]:
    """
    Route an explicit stream list into canonical buckets.

    The first entry no rule recognises becomes the primary stream (unless an
    earlier entry already claimed primary); later unrecognised entries go to
    additional income.
    """
    entries = next(
        (source[key] for key in STREAM_COLLECTION_KEYS if isinstance(source.get(key), list) and source[key]),
        [],
    )
    classified: List[IncomeStream] = []
    primary_claimed = False

    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            continue
        amount = pick_first_number(entry, STREAM_AMOUNT_KEYS)
        if amount is None or amount <= 0:
            continue

        hints = [str(entry[k]) for k in STREAM_HINT_KEYS if entry.get(k) is not None]
        key = canonical_stream_key(entry.get("type")) or classify_stream_hint(" ".join(hints))
        if key is None:
            key = "additional" if primary_claimed else "primary"
            logger.debug("Unclassified income stream %d routed to %s", index, key)
        if key == "primary":
            primary_claimed = True

        attr = STREAM_FIELDS[key]
        setattr(record, attr, getattr(record, attr) + amount)
        category = pick_first_text(entry, ("category", "label", "name", "type")) or f"stream-{index}"
        classified.append(IncomeStream(type=key, category=category, amount=amount))

    return classified


def _build_youth_profile(source: Mapping[str, Any]) -> YouthProfile:
    typical = max(0.0, safe_number(source.get("youthTypicalMonthlyIncome"), 0.0))
    has_income = coerce_flag(source["youthHasIncome"]) if "youthHasIncome" in source else typical > 0

    def flag(*keys: str) -> bool:
        return any(coerce_flag(source.get(key)) for key in keys if source.get(key) is not None)

    return YouthProfile(
        has_income=has_income,
        primary_income_source=_label(source.get("youthPrimaryIncomeSource")),
        income_frequency=_label(source.get("youthIncomeFrequency")),
        typical_monthly_income=typical,
        held_part_time_job=flag("youthHeldPartTimeJob"),
        has_checking_account=flag("youthHasCheckingAccount"),
        has_savings_account=flag("youthHasSavingsAccount"),
        has_debit_card=flag("youthHasDebitCard"),
        uses_money_apps=flag("youthUsesMoneyApps"),
        balance_check_frequency=_label(source.get("youthBalanceCheckFrequency")),
        has_current_savings=flag("youthHasCurrentSavings"),
        savings_amount=max(0.0, safe_number(source.get("youthSavingsAmount"), 0.0)),
        savings_location=_label(source.get("youthSavingsLocation")),
        savings_contribution_frequency=_label(source.get("youthSavingsContributionFrequency")),
        has_savings_goal=flag("youthHasSavingsGoal", "youthHasSavingsGoalFlag"),
        primary_spending_category=_label(source.get("youthPrimarySpendingCategory")),
        weekly_spending_amount=max(0.0, safe_number(source.get("youthWeeklySpendingAmount"), 0.0)),
        pays_recurring_expenses=flag("youthPaysRecurringExpenses"),
        ran_out_of_money=flag("youthRanOutOfMoney", "youthRanOutOfMoneyRecently"),
        spending_approach=_label(source.get("youthSpendingApproach")),
        tracks_spending=flag("youthTracksSpending", "youthTracksSpendingFlag"),
        has_emergency_buffer=flag("youthHasEmergencyBuffer", "youthHasEmergencyBufferFlag"),
        gets_guardian_help=flag("youthGetsGuardianHelp", "youthHasGuardianSupport"),
        shares_money_with_others=flag("youthSharesMoneyWithOthers", "youthSharesMoneyFlag"),
        money_confidence=_label(source.get("youthMoneyConfidence")),
    )


def _apply_youth_answers(record: NormalizedIncomeData, youth: YouthProfile) -> None:
    """Fill record fields the adult schema left empty from the youth questionnaire"""
    source_label = youth.primary_income_source or ""

    if record.total_income <= 0 and youth.has_income and youth.typical_monthly_income > 0:
        stream_key = (
            c.YOUTH_INCOME_SOURCE_STREAM.get(source_label)
            or classify_stream_hint(source_label)
            or "other"
        )
        attr = STREAM_FIELDS[stream_key]
        setattr(record, attr, youth.typical_monthly_income)

    if record.employment_type is None:
        if not youth.has_income:
            record.employment_type = "unemployed"
        else:
            record.employment_type = c.YOUTH_INCOME_SOURCE_EMPLOYMENT.get(source_label, "gig")

    if record.bonus_reliability is None:
        if not youth.has_income:
            record.bonus_reliability = "none"
        elif youth.income_frequency in c.YOUTH_FREQUENCY_RELIABILITY:
            record.bonus_reliability = c.YOUTH_FREQUENCY_RELIABILITY[youth.income_frequency]

    if record.savings_rate is None and youth.savings_contribution_frequency in c.YOUTH_SAVINGS_CADENCE_RATE:
        rate = c.YOUTH_SAVINGS_CADENCE_RATE[youth.savings_contribution_frequency]
        record.savings_rate = rate
        record.monthly_savings_rate = rate

    monthly_spending = youth.weekly_spending_amount * c.YOUTH_WEEKS_PER_MONTH
    if record.average_monthly_expenses is None and monthly_spending > 0:
        record.average_monthly_expenses = monthly_spending

    if record.essential_expenses is None and monthly_spending > 0:
        share = (
            c.YOUTH_ESSENTIAL_SHARE_WITH_BILLS
            if youth.pays_recurring_expenses
            else c.YOUTH_ESSENTIAL_SHARE_WITHOUT_BILLS
        )
        record.essential_expenses = monthly_spending * share

    if record.emergency_fund_months is None:
        months = 0.0
        if youth.savings_amount > 0 and monthly_spending > 0:
            months = youth.savings_amount / monthly_spending
        if months <= 0 and youth.has_emergency_buffer:
            months = 1.0
        if months > 0 or youth.savings_amount > 0 or youth.has_current_savings:
            record.emergency_fund_months = months

    if record.tenure_months is None:
        if youth.held_part_time_job:
            record.tenure_months = float(c.YOUTH_PART_TIME_TENURE_MONTHS)
        elif youth.has_income:
            record.tenure_months = float(c.YOUTH_ANY_INCOME_TENURE_MONTHS)
        else:
            record.tenure_months = 0.0


def _apply_overrides(record: NormalizedIncomeData, source: Mapping[str, Any], today: Optional[date]) -> None:
    """Explicit profile corrections win over anything derived above"""
    for key in OVERRIDE_KEYS:
        overrides = source.get(key)
        if not isinstance(overrides, Mapping):
            continue
        for attr, value in _resolve_stream_fields(overrides).items():
            setattr(record, attr, value)
        for attr, value in _resolve_scalars(overrides).items():
            setattr(record, attr, value)
        tenure = _resolve_tenure(overrides, today)
        if tenure is not None:
            record.tenure_months = tenure
        savings_override = safe_number(overrides.get("savingsRateOverride"), None)
        if savings_override is not None:
            rate = percent_to_unit(savings_override)
            record.savings_rate = rate
            record.monthly_savings_rate = rate


def _reconcile_stream_list(record: NormalizedIncomeData, classified: List[IncomeStream]) -> List[IncomeStream]:
    """
    Make the stream list sum to total income.

    A bucket holding more than its listed entries gets one residual entry;
    a bucket an override lowered below its listed entries has them scaled
    down to the bucket amount.
    """
    amounts = record.stream_amounts()
    listed: Dict[str, float] = {}
    for stream in classified:
        listed[stream.type] = listed.get(stream.type, 0.0) + stream.amount

    streams = []
    for stream in classified:
        bucket = amounts.get(stream.type, 0.0)
        if listed[stream.type] > bucket:
            amount = stream.amount * bucket / listed[stream.type]
            if amount <= 1e-9:
                continue
            stream = IncomeStream(type=stream.type, category=stream.category, amount=amount)
        streams.append(stream)

    for key, amount in amounts.items():
        residual = amount - listed.get(key, 0.0)
        if residual > 1e-9:
            streams.append(IncomeStream(type=key, category=key, amount=residual))
    return streams


def is_youth_document(source: Mapping[str, Any], age_years: Optional[int]) -> bool:
    if age_years is not None and age_years <= c.YOUTH_MAX_AGE:
        return True
    return any(key in source for key in YOUTH_TRIGGER_KEYS)


def normalize_income_data(raw: Any, today: Optional[date] = None) -> NormalizedIncomeData:
    """
    Build the canonical income record from a raw profile document.

    Never raises and never mutates its input. A record that is already
    normalized is returned as an independent copy.
    """
    if isinstance(raw, NormalizedIncomeData):
        return copy.deepcopy(raw)
    source: Dict[str, Any] = dict(raw) if isinstance(raw, Mapping) else {}

    record = NormalizedIncomeData()
    for attr, value in _resolve_stream_fields(source).items():
        setattr(record, attr, value)

    _apply_aggregate_income(record, source)
    classified = _classify_stream_array(record, source)

    for attr, value in _resolve_scalars(source).items():
        setattr(record, attr, value)
    if record.savings_rate is not None:
        record.monthly_savings_rate = record.savings_rate

    record.tenure_months = _resolve_tenure(source, today)
    record.income_history = _resolve_history(source)

    age = extract_age(source, today)
    if age is not None:
        record.age_years = age.age
        record.age_source = age.source
        record.age_birthday = age.birthday

    if is_youth_document(source, record.age_years):
        record.is_youth = True
        record.youth = _build_youth_profile(source)
        _apply_youth_answers(record, record.youth)
        logger.debug("Youth questionnaire applied (age=%s)", record.age_years)

    _apply_overrides(record, source, today)
    record.income_streams = _reconcile_stream_list(record, classified)
    return record
