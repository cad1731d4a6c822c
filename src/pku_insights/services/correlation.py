"""Lagged correlation between dietary Phe intake and blood Phe levels."""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo

from pku_insights.domain.blood import BloodLevelRecord
from pku_insights.domain.nutrition import MealRecord
from pku_insights.domain.units import round_half_up
from pku_insights.services.nutrition import local_date

DEFAULT_LOOKBACK_DAYS = 3
MIN_SAMPLE_SIZE = 5
MAX_LOOKBACK_DAYS = 365

STRONG_THRESHOLD = 0.7
MODERATE_THRESHOLD = 0.4
WEAK_THRESHOLD = 0.2

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationDataPoint:
    """Average dietary Phe before a blood draw paired with the draw."""

    date: date
    dietary_phe: float
    blood_phe: float


@dataclass(frozen=True)
class RegressionLine:
    """Least-squares fit of blood Phe on dietary Phe."""

    slope: float
    intercept: float


@dataclass
class CorrelationResult:
    """Outcome of a correlation analysis."""

    data_points: list[CorrelationDataPoint] = field(default_factory=list)
    sample_size: int = 0
    is_insufficient: bool = True
    pearson_r: float | None = None
    regression_line: RegressionLine | None = None
    interpretation_key: str = "insufficient"


def analyze_correlation(
    blood_records: Sequence[BloodLevelRecord],
    meal_records: Sequence[MealRecord],
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    tz: tzinfo | None = None,
) -> CorrelationResult:
    """Correlate each blood draw with the average daily Phe before it.

    Every blood record looks back over `lookback_days` calendar days before
    its collection day (the collection day itself excluded). Records without
    any meal in that window do not produce a data point. Fewer than
    MIN_SAMPLE_SIZE points yields an insufficient result that still carries
    the points.
    """
    check_lookback_days(lookback_days)

    meal_days = [(local_date(meal.timestamp, tz), meal) for meal in meal_records]
    data_points = []
    for record in blood_records:
        point = _data_point(record, meal_days, lookback_days, tz)
        if point is not None:
            data_points.append(point)

    sample_size = len(data_points)
    if sample_size < MIN_SAMPLE_SIZE:
        _logger.debug(
            "Correlation sample too small: points=%s required=%s",
            sample_size,
            MIN_SAMPLE_SIZE,
        )
        return CorrelationResult(data_points=data_points, sample_size=sample_size)

    xs = [point.dietary_phe for point in data_points]
    ys = [point.blood_phe for point in data_points]
    pearson_r = _pearson(xs, ys)
    return CorrelationResult(
        data_points=data_points,
        sample_size=sample_size,
        is_insufficient=False,
        pearson_r=pearson_r,
        regression_line=_regression(xs, ys),
        interpretation_key=interpret_correlation(pearson_r),
    )


def check_lookback_days(lookback_days: int) -> None:
    """Raise ValueError unless the lookback fits within 1..MAX_LOOKBACK_DAYS."""
    if not 1 <= lookback_days <= MAX_LOOKBACK_DAYS:
        raise ValueError(
            f"lookback_days must be within 1..{MAX_LOOKBACK_DAYS}, got {lookback_days}"
        )


def interpret_correlation(pearson_r: float) -> str:
    """Map a correlation coefficient to a strength key."""
    strength = abs(pearson_r)
    if strength >= STRONG_THRESHOLD:
        return "strong_positive" if pearson_r >= 0 else "strong_negative"
    if strength >= MODERATE_THRESHOLD:
        return "moderate"
    if strength >= WEAK_THRESHOLD:
        return "weak"
    return "none"


def _data_point(
    record: BloodLevelRecord,
    meal_days: list[tuple[date, MealRecord]],
    lookback_days: int,
    tz: tzinfo | None,
) -> CorrelationDataPoint | None:
    collected_on = local_date(record.collected_at, tz)
    window_start = collected_on - timedelta(days=lookback_days)
    in_window = [
        (day, meal) for day, meal in meal_days if window_start <= day < collected_on
    ]
    if not in_window:
        return None

    total_phe = sum(meal.total_nutrition.phenylalanine_mg or 0 for _, meal in in_window)
    distinct_days = len({day for day, _ in in_window})
    return CorrelationDataPoint(
        date=collected_on,
        dietary_phe=round_half_up(total_phe / distinct_days),
        blood_phe=record.normalized_umol,
    )


def _sums(xs: list[float], ys: list[float]) -> tuple[float, float, float, float]:
    n = len(xs)
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys, strict=True))
    sum_x2 = sum(x * x for x in xs)
    return n * sum_xy - sum_x * sum_y, n * sum_x2 - sum_x * sum_x, sum_x, sum_y


def _pearson(xs: list[float], ys: list[float]) -> float:
    n = len(xs)
    numerator, x_spread, _, sum_y = _sums(xs, ys)
    y_spread = n * sum(y * y for y in ys) - sum_y * sum_y
    denominator = math.sqrt(max(x_spread * y_spread, 0.0))
    if denominator == 0:
        return 0.0
    return round_half_up(numerator / denominator, 3)


def _regression(xs: list[float], ys: list[float]) -> RegressionLine:
    n = len(xs)
    numerator, slope_denominator, sum_x, sum_y = _sums(xs, ys)
    if slope_denominator == 0:
        return RegressionLine(slope=0.0, intercept=0.0)
    slope = round_half_up(numerator / slope_denominator, 3)
    intercept = round_half_up((sum_y - slope * sum_x) / n, 3)
    return RegressionLine(slope=slope, intercept=intercept)
