"""Pydantic models for analysis request payloads."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from pku_insights.domain.blood import BloodLevelRecord
from pku_insights.domain.constants import (
    BLOOD_TARGET_MAX_UMOL,
    BLOOD_TARGET_MIN_UMOL,
)
from pku_insights.domain.formula import FormulaDaySummary
from pku_insights.domain.nutrition import (
    DEFAULT_DAILY_GOALS,
    DailyGoals,
    DailyNutrition,
    FoodItem,
    MealRecord,
    NutritionVector,
)
from pku_insights.services.correlation import DEFAULT_LOOKBACK_DAYS, MAX_LOOKBACK_DAYS


class NutritionPayload(BaseModel):
    """Nutrient totals payload."""

    calories: float = Field(default=0.0, ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    phenylalanine_mg: float | None = Field(default=0.0, ge=0)

    def to_domain(self) -> NutritionVector:
        return NutritionVector(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
            phenylalanine_mg=self.phenylalanine_mg or 0.0,
        )


class FoodItemPayload(BaseModel):
    """Food item payload."""

    name: str = ""
    nutrition: NutritionPayload = Field(default_factory=NutritionPayload)
    is_confirmed: bool = False

    def to_domain(self) -> FoodItem:
        return FoodItem(
            name=self.name,
            nutrition=self.nutrition.to_domain(),
            is_confirmed=self.is_confirmed,
        )


class MealRecordPayload(BaseModel):
    """Meal record payload."""

    timestamp: datetime
    total_nutrition: NutritionPayload = Field(default_factory=NutritionPayload)
    items: list[FoodItemPayload] = Field(default_factory=list)

    def to_domain(self) -> MealRecord:
        return MealRecord(
            timestamp=self.timestamp,
            total_nutrition=self.total_nutrition.to_domain(),
            items=tuple(item.to_domain() for item in self.items),
        )


class BloodLevelPayload(BaseModel):
    """Blood level payload, already normalized to µmol/L."""

    id: str
    collected_at: datetime
    normalized_umol: float = Field(ge=0)
    target_min: float = BLOOD_TARGET_MIN_UMOL
    target_max: float = BLOOD_TARGET_MAX_UMOL
    notes: str = ""

    def to_domain(self) -> BloodLevelRecord:
        return BloodLevelRecord(
            id=self.id,
            collected_at=self.collected_at,
            normalized_umol=self.normalized_umol,
            target_min=self.target_min,
            target_max=self.target_max,
            notes=self.notes,
        )


class FormulaDayPayload(BaseModel):
    """Formula completion payload for one day."""

    day: date = Field(alias="date")
    completed_slots: int = Field(ge=0)
    total_slots: int = Field(ge=0)

    def to_domain(self) -> FormulaDaySummary:
        return FormulaDaySummary(
            date=self.day,
            completed_slots=self.completed_slots,
            total_slots=self.total_slots,
        )


class DailyNutritionPayload(BaseModel):
    """Nutrition totals for one day."""

    day: date = Field(alias="date")
    nutrition: NutritionPayload

    def to_domain(self) -> DailyNutrition:
        return DailyNutrition(date=self.day, nutrition=self.nutrition.to_domain())


class DailyGoalsPayload(BaseModel):
    """Daily goals payload."""

    calories: float = DEFAULT_DAILY_GOALS.calories
    protein_g: float = DEFAULT_DAILY_GOALS.protein_g
    carbs_g: float = DEFAULT_DAILY_GOALS.carbs_g
    fat_g: float = DEFAULT_DAILY_GOALS.fat_g
    phenylalanine_mg: float = DEFAULT_DAILY_GOALS.phenylalanine_mg

    def to_domain(self) -> DailyGoals:
        return DailyGoals(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
            phenylalanine_mg=self.phenylalanine_mg,
        )


class CorrelationRequest(BaseModel):
    """Records to correlate."""

    blood_records: list[BloodLevelPayload] = Field(default_factory=list)
    meal_records: list[MealRecordPayload] = Field(default_factory=list)
    lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS, ge=1, le=MAX_LOOKBACK_DAYS
    )


class WeeklyInsightRequest(BaseModel):
    """A week of daily totals and formula completion."""

    weekly_phe_data: list[DailyNutritionPayload] = Field(default_factory=list)
    formula_summary: list[FormulaDayPayload] = Field(default_factory=list)
    daily_goals: DailyGoalsPayload = Field(default_factory=DailyGoalsPayload)
    blood_records: list[BloodLevelPayload] = Field(default_factory=list)
