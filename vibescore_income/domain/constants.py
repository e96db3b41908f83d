"""Read-only lookup tables shared by the income scoring engine"""

from types import MappingProxyType

INCOME_STREAM_KEYS = (
    "primary",
    "additional",
    "bonus",
    "commission",
    "passive",
    "rental",
    "side",
    "other",
)

PASSIVE_STREAM_KEYS = frozenset({"passive", "rental"})

# Factor weights (sum = 1.0)
INCOME_WEIGHTS = MappingProxyType({
    "earningPower": 0.25,
    "expenseCoverage": 0.17,
    "stability": 0.18,
    "diversity": 0.12,
    "momentum": 0.12,
    "resilience": 0.10,
    "opportunity": 0.06,
})

MAX_PENALTY = 28.0

NEUTRAL_MOMENTUM_SCORE = 48.0

SUFFICIENT_HISTORY_POINTS = 3

EMPLOYMENT_TYPE_BASE = MappingProxyType({
    "w2": 84,
    "salaried": 84,
    "full-time": 80,
    "part-time": 60,
    "contract": 58,
    "consultant": 60,
    "freelance": 55,
    "business-owner": 66,
    "entrepreneur": 64,
    "gig": 48,
    "seasonal": 42,
    "unemployed": 0,
})

INDUSTRY_RISK_ADJUSTMENT = MappingProxyType({
    "very-low": 6,
    "low": 3,
    "moderate": 0,
    "elevated": -8,
    "high": -14,
    "very-high": -20,
})

BONUS_RELIABILITY_ADJUSTMENT = MappingProxyType({
    "high": 6,
    "medium": 2,
    "low": -4,
    "none": -8,
})

HIRING_TREND_ADJUSTMENT = MappingProxyType({
    "expanding": 10,
    "steady": 4,
    "neutral": 0,
    "cooling": -6,
    "contracting": -12,
})

SKILL_DEMAND_BASE = MappingProxyType({
    "scarce": 88,
    "strong": 76,
    "balanced": 64,
    "saturated": 48,
    "declining": 38,
})

# Fields that drive the data-quality score, with their relative importance
DATA_IMPORTANCE_WEIGHTS = MappingProxyType({
    "totalIncome": 1.0,
    "averageMonthlyExpenses": 0.7,
    "employmentType": 0.6,
    "tenureMonths": 0.5,
    "incomeHistory": 0.5,
    "savingsRate": 0.4,
    "emergencyFundMonths": 0.4,
    "industryRisk": 0.3,
})

# (label, min_age, max_age, annual_min, annual_max, annual_mid); max_age None = open-ended
AGE_INCOME_EXPECTATIONS = (
    ("14-17", 14, 17, 1_200, 9_000, 5_000),
    ("18-24", 18, 24, 18_000, 42_000, 30_000),
    ("25-34", 25, 34, 38_000, 82_000, 58_000),
    ("35-44", 35, 44, 50_000, 110_000, 76_000),
    ("45-54", 45, 54, 52_000, 118_000, 80_000),
    ("55-64", 55, 64, 46_000, 104_000, 70_000),
    ("65+", 65, None, 28_000, 70_000, 44_000),
)

MAX_AGE_YEARS = 130
YOUTH_MAX_AGE = 17

# Youth questionnaire vocabularies
YOUTH_INCOME_SOURCE_STREAM = MappingProxyType({
    "part-time-job": "primary",
    "full-time-job": "primary",
    "seasonal-job": "primary",
    "allowance": "other",
    "family": "other",
    "gifts": "other",
    "babysitting": "side",
    "odd-jobs": "side",
    "freelance": "side",
    "gig": "side",
    "small-business": "side",
    "reselling": "side",
})

YOUTH_INCOME_SOURCE_EMPLOYMENT = MappingProxyType({
    "part-time-job": "part-time",
    "full-time-job": "full-time",
    "seasonal-job": "seasonal",
    "allowance": "gig",
    "family": "gig",
    "gifts": "gig",
    "babysitting": "gig",
    "odd-jobs": "gig",
    "freelance": "freelance",
    "gig": "gig",
    "small-business": "entrepreneur",
    "reselling": "entrepreneur",
})

YOUTH_FREQUENCY_RELIABILITY = MappingProxyType({
    "weekly": "high",
    "biweekly": "high",
    "monthly": "medium",
    "occasionally": "low",
    "irregular": "low",
    "never": "none",
})

YOUTH_SAVINGS_CADENCE_RATE = MappingProxyType({
    "weekly": 0.15,
    "biweekly": 0.12,
    "monthly": 0.10,
    "rarely": 0.03,
    "never": 0.0,
})

YOUTH_WEEKS_PER_MONTH = 4.333
YOUTH_ESSENTIAL_SHARE_WITH_BILLS = 0.45
YOUTH_ESSENTIAL_SHARE_WITHOUT_BILLS = 0.15
YOUTH_PART_TIME_TENURE_MONTHS = 8
YOUTH_ANY_INCOME_TENURE_MONTHS = 4

YOUTH_BALANCE_CHECK_DISCIPLINE = MappingProxyType({
    "daily": 1.0,
    "few-days": 0.85,
    "weekly": 0.7,
    "monthly": 0.45,
    "rarely": 0.2,
})

YOUTH_SPENDING_APPROACH_WEIGHT = MappingProxyType({
    "plan-ahead": 0.85,
    "mix": 0.55,
    "as-needed": 0.25,
})

YOUTH_CONFIDENCE_WEIGHT = MappingProxyType({
    "very-confident": 0.9,
    "somewhat-confident": 0.65,
    "not-yet-confident": 0.35,
})

YOUTH_INCOME_FREQUENCY_MOMENTUM = MappingProxyType({
    "weekly": 6,
    "biweekly": 5,
    "monthly": 3,
    "occasionally": -5,
})

YOUTH_SAVINGS_CONTRIBUTION_BOOST = MappingProxyType({
    "weekly": 6,
    "monthly": 4,
    "rarely": 1,
    "never": -6,
})

YOUTH_SAVINGS_LOCATION_BONUS = MappingProxyType({
    "bank": 6,
    "cash": 2,
    "other": 1,
})
