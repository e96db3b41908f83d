"""Domain models - pure Python dataclasses representing income scoring entities"""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

STREAM_FIELDS = {
    "primary": "primary_income",
    "additional": "additional_income",
    "bonus": "bonus_income",
    "commission": "commission_income",
    "passive": "passive_income",
    "rental": "rental_income",
    "side": "side_income",
    "other": "other_income",
}


@dataclass
class IncomeStream:
    """One categorized monthly income source"""

    type: str  # one of STREAM_FIELDS keys
    category: str
    amount: float


@dataclass
class IncomeHistoryPoint:
    """Monthly income observation anchored to the first day of its month"""

    month: date
    amount: float


@dataclass
class YouthProfile:
    """Answers from the minor (age <= 17) money questionnaire"""

    has_income: bool = False
    primary_income_source: Optional[str] = None
    income_frequency: Optional[str] = None
    typical_monthly_income: float = 0.0
    held_part_time_job: bool = False
    has_checking_account: bool = False
    has_savings_account: bool = False
    has_debit_card: bool = False
    uses_money_apps: bool = False
    balance_check_frequency: Optional[str] = None
    has_current_savings: bool = False
    savings_amount: float = 0.0
    savings_location: Optional[str] = None
    savings_contribution_frequency: Optional[str] = None
    has_savings_goal: bool = False
    primary_spending_category: Optional[str] = None
    weekly_spending_amount: float = 0.0
    pays_recurring_expenses: bool = False
    ran_out_of_money: bool = False
    spending_approach: Optional[str] = None
    tracks_spending: bool = False
    has_emergency_buffer: bool = False
    gets_guardian_help: bool = False
    shares_money_with_others: bool = False
    money_confidence: Optional[str] = None


@dataclass
class NormalizedIncomeData:
    """
    Canonical income record produced by the normalizer.

    Stream amounts are monthly and never negative. Percent-like fields are
    unit fractions (0-1). Optional scalars stay None when the profile did not
    supply them so data-quality scoring can tell "absent" from "zero".
    """

    primary_income: float = 0.0
    additional_income: float = 0.0
    bonus_income: float = 0.0
    commission_income: float = 0.0
    passive_income: float = 0.0
    rental_income: float = 0.0
    side_income: float = 0.0
    other_income: float = 0.0
    income_streams: List[IncomeStream] = field(default_factory=list)

    average_monthly_expenses: Optional[float] = None
    essential_expenses: Optional[float] = None
    savings_rate: Optional[float] = None
    monthly_savings_rate: Optional[float] = None
    emergency_fund_months: Optional[float] = None
    debt_to_income: Optional[float] = None

    employment_type: Optional[str] = None
    industry_risk: Optional[str] = None
    bonus_reliability: Optional[str] = None
    pay_frequency: Optional[str] = None
    industry_hiring_trend: Optional[str] = None
    skill_demand: Optional[str] = None
    promotion_pipeline: Optional[float] = None
    upskilling_progress: Optional[float] = None
    role_satisfaction: Optional[float] = None
    employer_benefit_coverage: Optional[float] = None
    income_protection_coverage: Optional[float] = None

    region_cost_index: Optional[float] = None
    regional_unemployment_rate: Optional[float] = None
    tenure_months: Optional[float] = None
    layoff_history: float = 0.0
    upcoming_contract_renewal: bool = False
    planned_major_expense: bool = False

    income_history: List[IncomeHistoryPoint] = field(default_factory=list)

    age_years: Optional[int] = None
    age_source: Optional[str] = None
    age_birthday: Optional[str] = None

    is_youth: bool = False
    youth: Optional[YouthProfile] = None

    def stream_amounts(self) -> Dict[str, float]:
        """Canonical stream key -> monthly amount, in canonical order"""
        return {key: getattr(self, attr) for key, attr in STREAM_FIELDS.items()}

    @property
    def total_income(self) -> float:
        return sum(max(0.0, amount) for amount in self.stream_amounts().values())


@dataclass
class HistoryAnalysis:
    """Least-squares trend summary of the income history"""

    count: int = 0
    mean: float = 0.0
    slope: float = 0.0
    intercept: float = 0.0
    slope_percent: float = 0.0
    r_squared: float = 0.0
    volatility: float = 0.0
    last_amount: float = 0.0
    recent_change_pct: float = 0.0
    coverage_months: int = 0


@dataclass
class DataQuality:
    """Weighted share of important fields that were supplied"""

    score: float
    missing: List[str]


@dataclass
class AgeExpectation:
    """Income expectation for one age bracket (annual and monthly)"""

    label: str
    min_age: int
    max_age: Optional[int]
    annual_min: float
    annual_max: float
    annual_mid: float
    monthly_min: float
    monthly_max: float
    monthly_mid: float


@dataclass
class AgeDetails:
    """Resolved age and where it came from"""

    age: int
    source: str  # "explicit" or "birthday"
    birthday: Optional[str] = None


@dataclass
class AgeTargets:
    """Earning-power reference points after age resolution"""

    baseline_monthly_income: float
    strong_income_cap: float
    expectation: Optional[AgeExpectation] = None


@dataclass(frozen=True)
class ScoreOptions:
    """Tunable engine options (see config.Settings for defaults)"""

    baseline_monthly_income: float
    strong_income_cap: float
    essential_expense_fallback_ratio: float
    expense_fallback_ratio: float
    desired_savings_rate: float
    ideal_emergency_months: float
    max_streams_considered: int


@dataclass
class ScoringContext:
    """Shared, read-only inputs handed to every factor computator"""

    total_income: float
    adjusted_income: float
    region_cost_index: float
    history: HistoryAnalysis
    quality: DataQuality
    options: ScoreOptions
    age_targets: AgeTargets
    age_years: Optional[int] = None

    @property
    def data_gaps(self) -> List[str]:
        return self.quality.missing


@dataclass
class FactorResult:
    """Score for one dimension of income quality; details are for auditing only"""

    id: str
    label: str
    score: float
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WeightedFactor:
    """Factor result with its aggregate weight and weighted contribution"""

    id: str
    label: str
    score: float
    details: Dict[str, Any]
    weight: float
    contribution: float


@dataclass
class PenaltyItem:
    """Named additive deduction applied after the weighted factor sum"""

    id: str
    label: str
    amount: float


@dataclass
class Penalty:
    """Capped penalty total and the items that fired"""

    total: float
    items: List[PenaltyItem]


@dataclass
class Demographics:
    age_years: Optional[int]
    age_bracket: Optional[str]
    age_expectation: Optional[AgeExpectation]
    segment: str  # "youth" or "adult"


@dataclass
class Diagnostics:
    data_gaps: List[str]
    has_sufficient_history: bool
    months_measured: int


@dataclass
class ScoreResult:
    """Output of the income scoring engine"""

    score: float
    base_score: float
    total_income: float
    adjusted_income: float
    region_cost_index: float
    penalty: Penalty
    breakdown: Dict[str, WeightedFactor]
    quality: DataQuality
    history: HistoryAnalysis
    demographics: Demographics
    diagnostics: Diagnostics

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation with camelCase keys"""
        return _camelize(asdict(self))


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(str(k)): _camelize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_camelize(v) for v in value]
    if isinstance(value, date):
        return value.isoformat()
    return value
