"""Analytics service wiring repositories into the analysis engines."""

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Any, Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from pku_insights.domain.blood import BloodLevelRecord
from pku_insights.domain.constants import EXCHANGE_STANDARD_MG
from pku_insights.domain.formula import FormulaDaySummary
from pku_insights.domain.nutrition import DailyGoals, MealRecord
from pku_insights.services.correlation import (
    DEFAULT_LOOKBACK_DAYS,
    CorrelationResult,
    analyze_correlation,
    check_lookback_days,
)
from pku_insights.services.csv_export import generate_csv
from pku_insights.services.insights import WeeklyInsightResult, analyze_weekly_insight
from pku_insights.services.nutrition import calendar_window, daily_nutrition_series
from pku_insights.services.reports import ExportData, build_report_data

WEEK_DAYS = 7

_logger = logging.getLogger(__name__)


class MealRecordRepository(Protocol):
    """Persistence interface for meal records."""

    def list_meal_records(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meal records within a time range."""


class BloodLevelRepository(Protocol):
    """Persistence interface for blood Phe measurements."""

    def list_blood_levels(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[BloodLevelRecord]:
        """Return blood levels, optionally limited to a time range."""


class FormulaRepository(Protocol):
    """Persistence interface for formula intake."""

    def fetch_formula_summary(
        self, user_id: UUID, dates: list[date]
    ) -> list[FormulaDaySummary]:
        """Return formula completion for each requested date."""


class GoalsRepository(Protocol):
    """Persistence interface for daily goals."""

    def get_daily_goals(self, user_id: UUID) -> DailyGoals:
        """Return the user's daily goals."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AnalyticsService:
    """Loads a user's records and runs the analyses over them."""

    meal_repository: MealRecordRepository
    blood_repository: BloodLevelRepository
    formula_repository: FormulaRepository
    goals_repository: GoalsRepository
    default_lookback_days: int = DEFAULT_LOOKBACK_DAYS
    default_phe_per_exchange: float = EXCHANGE_STANDARD_MG
    default_timezone: str = "UTC"
    clock: Callable[[], datetime] = _utc_now

    def get_correlation(
        self,
        user_id: UUID,
        lookback_days: int | None = None,
        timezone_name: str | None = None,
    ) -> CorrelationResult:
        """Correlate all of a user's blood draws with preceding intake."""
        lookback = (
            self.default_lookback_days if lookback_days is None else lookback_days
        )
        check_lookback_days(lookback)
        tz = ZoneInfo(timezone_name or self.default_timezone)
        blood_records = self.blood_repository.list_blood_levels(user_id)
        meals: list[MealRecord] = []
        if blood_records:
            collected = [record.collected_at for record in blood_records]
            # one extra day on each side absorbs the timezone shift
            start = min(collected) - timedelta(days=lookback + 1)
            end = max(collected) + timedelta(days=1)
            meals = self.meal_repository.list_meal_records(user_id, start, end)
        result = analyze_correlation(blood_records, meals, lookback, tz)
        _logger.info(
            "Correlation analyzed: user_id=%s blood=%s meals=%s points=%s",
            user_id,
            len(blood_records),
            len(meals),
            result.sample_size,
        )
        return result

    def get_weekly_insight(
        self, user_id: UUID, timezone_name: str | None = None
    ) -> WeeklyInsightResult:
        """Analyze the last seven days for the user."""
        tz = ZoneInfo(timezone_name or self.default_timezone)
        today = self.clock().astimezone(tz).date()
        dates = calendar_window(today, WEEK_DAYS)
        start, end = _day_bounds(dates, tz)
        meals = self.meal_repository.list_meal_records(user_id, start, end)
        weekly = daily_nutrition_series(meals, today, WEEK_DAYS, tz)
        formula = self.formula_repository.fetch_formula_summary(user_id, dates)
        goals = self.goals_repository.get_daily_goals(user_id)
        blood_records = self.blood_repository.list_blood_levels(user_id, start, end)
        result = analyze_weekly_insight(weekly, formula, goals, blood_records)
        _logger.info(
            "Weekly insight analyzed: user_id=%s status=%s anomalies=%s",
            user_id,
            result.data_status,
            len(result.anomalies),
        )
        return result

    async def build_report(
        self, user_id: UUID, days: int, timezone_name: str | None = None
    ) -> ExportData:
        """Build report data for the last `days` days."""
        if days < 1:
            raise ValueError(f"days must be positive, got {days}")
        tz = ZoneInfo(timezone_name or self.default_timezone)
        today = self.clock().astimezone(tz).date()
        start, end = _day_bounds(calendar_window(today, days), tz)
        meals = self.meal_repository.list_meal_records(user_id, start, end)
        blood_records = self.blood_repository.list_blood_levels(user_id, start, end)

        async def fetch_formula_summary(dates: list[date]) -> list[FormulaDaySummary]:
            return self.formula_repository.fetch_formula_summary(user_id, dates)

        return await build_report_data(
            days=days,
            meal_records=meals,
            fetch_formula_summary=fetch_formula_summary,
            blood_records=blood_records,
            daily_goals=self.goals_repository.get_daily_goals(user_id),
            phe_per_exchange=self.default_phe_per_exchange,
            today=today,
            tz=tz,
        )

    async def export_csv(
        self, user_id: UUID, days: int, timezone_name: str | None = None
    ) -> str:
        """Render the report for the last `days` days as CSV text."""
        data = await self.build_report(user_id, days, timezone_name)
        return generate_csv(data, generated_on=data.period_end)


def _day_bounds(dates: list[date], tz: ZoneInfo) -> tuple[datetime, datetime]:
    start = datetime.combine(dates[0], time.min, tzinfo=tz)
    end = datetime.combine(dates[-1] + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)


def to_jsonable(result: object) -> Any:
    """Convert an analysis result dataclass into JSON-ready data."""
    if dataclasses.is_dataclass(result) and not isinstance(result, type):
        return {
            item.name: to_jsonable(getattr(result, item.name))
            for item in dataclasses.fields(result)
        }
    if isinstance(result, list | tuple):
        return [to_jsonable(value) for value in result]
    if isinstance(result, dict):
        return {str(key): to_jsonable(value) for key, value in result.items()}
    if isinstance(result, date):
        return result.isoformat()
    if isinstance(result, tzinfo):
        return str(result)
    return result
