"""Numeric primitives and statistical helpers for income scoring"""

import math
import statistics
from typing import Any, Iterable, List, Mapping, Sequence

from vibescore_income.domain.models import DataQuality, HistoryAnalysis, IncomeHistoryPoint

DAYS_PER_INDEX_MONTH = 30


def clamp_score(value: Any, minimum: float = 0.0, maximum: float = 100.0) -> float:
    """Clamp to [minimum, maximum]; non-finite input collapses to minimum"""
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return minimum
    return max(minimum, min(maximum, float(value)))


def safe_number(value: Any, fallback: Any = 0.0) -> Any:
    """Coerce to a finite float, or return fallback"""
    if value is None:
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    return number if math.isfinite(number) else fallback


def percent_to_unit(value: Any, fallback: Any = 0.0) -> Any:
    """
    Disambiguate percent-like input.

    Magnitudes above 1.5 are read as 0-100 percentages and divided by 100;
    anything else is assumed to already be a unit fraction.
    """
    number = safe_number(value, fallback)
    if number is None:
        return None
    if abs(number) > 1.5:
        return number / 100
    return number


def saturate(value: Any, pivot: Any) -> float:
    """Diminishing-returns curve: 1 - e^(-v / pivot), v floored at 0, pivot floored at 1"""
    pivot_safe = max(1.0, safe_number(pivot, 1.0) or 1.0)
    numerator = max(0.0, safe_number(value, 0.0))
    return 1 - math.exp(-numerator / pivot_safe)


def logistic(value: Any, midpoint: float, steepness: float = 1.0) -> float:
    """Standard logistic curve centered at midpoint"""
    v = safe_number(value, 0.0)
    k = max(0.0001, abs(steepness))
    exponent = -k * (v - midpoint)
    # math.exp overflows past ~709
    if exponent > 700:
        return 0.0
    return 1 / (1 + math.exp(exponent))


def ratio_score(ratio: Any, sweet_spot: float = 1.25, tolerance: float = 0.35) -> float:
    """
    Reward proximity to a target ratio on a 0-100 scale.

    Inside [sweet_spot - tolerance, sweet_spot + tolerance] the score rises
    linearly from 65 at the band edges to 100 at the sweet spot. Outside the
    band it decays along logistic tails that top out at 60.
    """
    normalized = safe_number(ratio, 0.0)
    if normalized <= 0:
        return 0.0
    lower_bound = max(0.01, sweet_spot - tolerance)
    upper_bound = sweet_spot + tolerance
    if normalized <= lower_bound:
        return logistic(normalized, lower_bound, 6) * 60
    if normalized >= upper_bound:
        return logistic(upper_bound - normalized, 0, 6) * 60
    proximity = 1 - abs(normalized - sweet_spot) / tolerance
    return clamp_score(65 + proximity * 35)


def herfindahl_index(amounts: Iterable[Any]) -> float:
    """Sum of squared shares over positive amounts; 1.0 means fully concentrated"""
    positive = [a for a in (safe_number(x, 0.0) for x in amounts) if a > 0]
    total = sum(positive)
    if total <= 0:
        return 1.0
    return sum((a / total) ** 2 for a in positive)


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation over |mean|; 0 when undefined"""
    if not values:
        return 0.0
    mean = statistics.fmean(values)
    if mean == 0:
        return 0.0
    return statistics.pstdev(values) / abs(mean)


def _mean_or_zero(values: Sequence[float]) -> float:
    return statistics.fmean(values) if values else 0.0


def analyze_income_history(history: Iterable[IncomeHistoryPoint]) -> HistoryAnalysis:
    """
    Fit an ordinary least-squares trend over monthly income.

    Points are deduplicated by month (first occurrence wins) and sorted
    ascending. x is days since the first point divided by 30.

    Returns a zeroed HistoryAnalysis when no usable points remain.
    """
    points: List[IncomeHistoryPoint] = []
    seen = set()
    for point in sorted(
        (p for p in history or [] if isinstance(p, IncomeHistoryPoint)),
        key=lambda p: p.month,
    ):
        amount = safe_number(point.amount, None)
        if amount is None or point.month in seen:
            continue
        seen.add(point.month)
        points.append(IncomeHistoryPoint(month=point.month, amount=amount))

    count = len(points)
    if count == 0:
        return HistoryAnalysis()

    baseline = points[0].month
    xs = [(p.month - baseline).days / DAYS_PER_INDEX_MONTH for p in points]
    ys = [p.amount for p in points]

    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_xx = sum(x * x for x in xs)
    mean_y = sum_y / count

    denominator = count * sum_xx - sum_x * sum_x
    slope = 0.0 if denominator == 0 else (count * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / count

    residual_ss = sum((y - (intercept + slope * x)) ** 2 for x, y in zip(xs, ys))
    total_ss = sum((y - mean_y) ** 2 for y in ys)
    r_squared = 0.0 if total_ss == 0 else clamp_score(1 - residual_ss / total_ss, 0, 1)

    recent_change_pct = 0.0
    if count >= 6:
        recent = _mean_or_zero(ys[-3:])
        prior = _mean_or_zero(ys[-6:-3])
        if prior > 0:
            recent_change_pct = (recent - prior) / prior

    return HistoryAnalysis(
        count=count,
        mean=mean_y,
        slope=slope,
        intercept=intercept,
        slope_percent=0.0 if mean_y == 0 else slope / mean_y,
        r_squared=r_squared,
        volatility=coefficient_of_variation(ys),
        last_amount=ys[-1],
        recent_change_pct=recent_change_pct,
        coverage_months=max(1, round(xs[-1] - xs[0] + 1)),
    )


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return False
    return True


def data_presence_score(data: Mapping[str, Any], weights: Mapping[str, float]) -> DataQuality:
    """Weighted share (0-100) of keys in weights that carry a value in data"""
    if not weights:
        return DataQuality(score=0.0, missing=[])
    total = 0.0
    available = 0.0
    missing: List[str] = []
    for key, weight in weights.items():
        total += weight
        if _has_value(data.get(key)):
            available += weight
        else:
            missing.append(key)
    if total == 0:
        return DataQuality(score=0.0, missing=missing)
    return DataQuality(score=clamp_score(available / total * 100), missing=missing)
