"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from uuid import UUID

import pytest

from pku_insights.config import Settings, parse_report_periods
from pku_insights.containers import AppContainer
from pku_insights.domain.blood import BloodLevelRecord
from pku_insights.domain.formula import FormulaDaySummary
from pku_insights.domain.nutrition import (
    DEFAULT_DAILY_GOALS,
    DailyGoals,
    DailyNutrition,
    FoodItem,
    MealRecord,
    NutritionVector,
)
from pku_insights.services.analytics import (
    AnalyticsService,
    BloodLevelRepository,
    FormulaRepository,
    GoalsRepository,
    MealRecordRepository,
)

FIXED_NOW = datetime(2025, 1, 14, 15, 0, tzinfo=UTC)


def make_meal(
    when: datetime | str,
    phe: float,
    calories: float = 0,
    items: tuple[FoodItem, ...] = (),
) -> MealRecord:
    timestamp = datetime.fromisoformat(when) if isinstance(when, str) else when
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return MealRecord(
        timestamp=timestamp,
        total_nutrition=NutritionVector(calories=calories, phenylalanine_mg=phe),
        items=items,
    )


def make_blood(
    when: datetime | str,
    umol: float,
    record_id: str = "blood",
    notes: str = "",
) -> BloodLevelRecord:
    collected_at = datetime.fromisoformat(when) if isinstance(when, str) else when
    if collected_at.tzinfo is None:
        collected_at = collected_at.replace(tzinfo=UTC)
    return BloodLevelRecord(
        id=record_id,
        collected_at=collected_at,
        normalized_umol=umol,
        notes=notes,
    )


def make_day(day: str, phe: float) -> DailyNutrition:
    return DailyNutrition(
        date=date.fromisoformat(day),
        nutrition=NutritionVector(phenylalanine_mg=phe),
    )


def make_formula(day: str, completed: int, total: int) -> FormulaDaySummary:
    return FormulaDaySummary(
        date=date.fromisoformat(day), completed_slots=completed, total_slots=total
    )


def week_of(values: list[float], start: str = "2025-01-08") -> list[DailyNutrition]:
    first = date.fromisoformat(start)
    return [
        DailyNutrition(
            date=first + timedelta(days=offset),
            nutrition=NutritionVector(phenylalanine_mg=value),
        )
        for offset, value in enumerate(values)
    ]


@dataclass
class InMemoryMealRecordRepository(MealRecordRepository):
    """In-memory meal record repository for tests."""

    meals: list[MealRecord] = field(default_factory=list)
    queries: list[tuple[datetime, datetime]] = field(default_factory=list)

    def list_meal_records(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        self.queries.append((start, end))
        return [meal for meal in self.meals if start <= meal.timestamp < end]


@dataclass
class InMemoryBloodLevelRepository(BloodLevelRepository):
    """In-memory blood level repository for tests."""

    records: list[BloodLevelRecord] = field(default_factory=list)

    def list_blood_levels(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[BloodLevelRecord]:
        return [
            record
            for record in self.records
            if (start is None or record.collected_at >= start)
            and (end is None or record.collected_at < end)
        ]


@dataclass
class InMemoryFormulaRepository(FormulaRepository):
    """In-memory formula repository for tests."""

    completed: dict[date, int] = field(default_factory=dict)
    total_slots: int = 0
    requested: list[list[date]] = field(default_factory=list)

    def fetch_formula_summary(
        self, user_id: UUID, dates: list[date]
    ) -> list[FormulaDaySummary]:
        self.requested.append(list(dates))
        return [
            FormulaDaySummary(
                date=day,
                completed_slots=self.completed.get(day, 0),
                total_slots=self.total_slots,
            )
            for day in dates
        ]


@dataclass
class InMemoryGoalsRepository(GoalsRepository):
    """In-memory goals repository for tests."""

    goals: DailyGoals = DEFAULT_DAILY_GOALS

    def get_daily_goals(self, user_id: UUID) -> DailyGoals:
        return self.goals


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def analytics_service() -> AnalyticsService:
    return AnalyticsService(
        meal_repository=InMemoryMealRecordRepository(),
        blood_repository=InMemoryBloodLevelRepository(),
        formula_repository=InMemoryFormulaRepository(),
        goals_repository=InMemoryGoalsRepository(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def container(settings: Settings, analytics_service: AnalyticsService) -> AppContainer:
    return AppContainer(
        settings=settings,
        analytics_service=analytics_service,
        report_periods=parse_report_periods(settings.report_periods),
    )
