"""Nutrition domain models."""

from dataclasses import dataclass
from datetime import date, datetime

from pku_insights.domain.constants import DEFAULT_PHE_LIMIT_MG


@dataclass(frozen=True)
class NutritionVector:
    """Nutrient totals for a food item, meal or day."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    phenylalanine_mg: float = 0.0

    def __add__(self, other: "NutritionVector") -> "NutritionVector":
        return NutritionVector(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
            phenylalanine_mg=self.phenylalanine_mg + other.phenylalanine_mg,
        )


@dataclass(frozen=True)
class FoodItem:
    """A single food entry inside a meal."""

    name: str
    nutrition: NutritionVector
    is_confirmed: bool = False
    estimated_weight_g: float = 0.0


@dataclass(frozen=True)
class MealRecord:
    """A logged meal with its precomputed totals."""

    timestamp: datetime
    total_nutrition: NutritionVector
    items: tuple[FoodItem, ...] = ()
    id: str | None = None
    meal_type: str | None = None


@dataclass(frozen=True)
class DailyGoals:
    """User-configured daily targets."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    phenylalanine_mg: float


DEFAULT_DAILY_GOALS = DailyGoals(
    calories=2000,
    protein_g=50,
    carbs_g=250,
    fat_g=65,
    phenylalanine_mg=DEFAULT_PHE_LIMIT_MG,
)


@dataclass(frozen=True)
class DailyNutrition:
    """Summed nutrition for one calendar day."""

    date: date
    nutrition: NutritionVector
