"""Per-day report aggregation for clinician exports."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo

from pku_insights.domain.blood import BloodLevelRecord
from pku_insights.domain.constants import EXCHANGE_STANDARD_MG
from pku_insights.domain.formula import FormulaDaySummary
from pku_insights.domain.nutrition import DailyGoals, MealRecord, NutritionVector
from pku_insights.services.nutrition import calendar_window, local_date

FormulaSummaryFetcher = Callable[[list[date]], Awaitable[list[FormulaDaySummary]]]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyMealSummary:
    """Meal totals for one reported day."""

    date: date
    nutrition: NutritionVector
    confirmed_phe: float


@dataclass
class ExportData:
    """Everything the CSV and report views render."""

    period_days: int
    period_start: date
    period_end: date
    daily_goals: DailyGoals
    daily_summaries: list[DailyMealSummary] = field(default_factory=list)
    formula_days: list[FormulaDaySummary] = field(default_factory=list)
    blood_records: list[BloodLevelRecord] = field(default_factory=list)
    phe_per_exchange: float = EXCHANGE_STANDARD_MG
    tz: tzinfo | None = None


@dataclass
class _DayBucket:
    nutrition: NutritionVector = field(default_factory=NutritionVector)
    confirmed_phe: float = 0.0


async def build_report_data(  # noqa: PLR0913
    days: int,
    meal_records: Sequence[MealRecord],
    fetch_formula_summary: FormulaSummaryFetcher,
    blood_records: Sequence[BloodLevelRecord],
    daily_goals: DailyGoals,
    phe_per_exchange: float | None = None,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> ExportData:
    """Reshape raw records into per-day summaries for the last `days` days.

    Only days with a meal or at least one completed formula slot are kept in
    the daily tables; the period bounds always span all `days` dates.
    """
    if days < 1:
        raise ValueError(f"days must be positive, got {days}")
    end = today or datetime.now(tz=tz).date()
    dates = calendar_window(end, days)
    period = set(dates)

    buckets: dict[date, _DayBucket] = {}
    for meal in meal_records:
        day = local_date(meal.timestamp, tz)
        if day not in period:
            continue
        bucket = buckets.setdefault(day, _DayBucket())
        bucket.nutrition = bucket.nutrition + meal.total_nutrition
        for item in meal.items:
            if item.is_confirmed:
                bucket.confirmed_phe += item.nutrition.phenylalanine_mg or 0

    fetched = await fetch_formula_summary(dates)
    completed = {entry.date: entry for entry in fetched if entry.completed_slots > 0}
    default_total_slots = fetched[0].total_slots if fetched else 0

    recorded_dates = [day for day in dates if day in buckets or day in completed]
    daily_summaries = [
        DailyMealSummary(
            date=day,
            nutrition=buckets[day].nutrition if day in buckets else NutritionVector(),
            confirmed_phe=buckets[day].confirmed_phe if day in buckets else 0.0,
        )
        for day in recorded_dates
    ]
    formula_days = [
        completed.get(day)
        or FormulaDaySummary(
            date=day, completed_slots=0, total_slots=default_total_slots
        )
        for day in recorded_dates
    ]
    period_blood = [
        record
        for record in blood_records
        if local_date(record.collected_at, tz) in period
    ]
    _logger.debug(
        "Report built: days=%s recorded=%s blood=%s",
        days,
        len(recorded_dates),
        len(period_blood),
    )
    return ExportData(
        period_days=days,
        period_start=dates[0],
        period_end=dates[-1],
        daily_goals=daily_goals,
        daily_summaries=daily_summaries,
        formula_days=formula_days,
        blood_records=period_blood,
        phe_per_exchange=phe_per_exchange or EXCHANGE_STANDARD_MG,
        tz=tz,
    )
