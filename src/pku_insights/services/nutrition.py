"""Nutrition aggregation helpers."""

from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime, timedelta, tzinfo

from pku_insights.domain.nutrition import (
    DailyNutrition,
    FoodItem,
    MealRecord,
    NutritionVector,
)
from pku_insights.domain.units import round_half_up


def calculate_total_nutrition(items: Iterable[FoodItem]) -> NutritionVector:
    """Sum the nutrient vectors of food items."""
    total = NutritionVector()
    for item in items:
        nutrition = item.nutrition
        if nutrition.phenylalanine_mg is None:
            nutrition = replace(nutrition, phenylalanine_mg=0.0)
        total = total + nutrition
    return total


def sum_meal_nutrition(meals: Iterable[MealRecord]) -> NutritionVector:
    """Sum the precomputed totals of meals."""
    total = NutritionVector()
    for meal in meals:
        total = total + meal.total_nutrition
    return total


def format_phe(phe_mg: float | None) -> int:
    """Return a Phe amount rounded for display, treating None as 0."""
    return int(round_half_up(phe_mg or 0))


def local_date(timestamp: datetime, tz: tzinfo | None = None) -> date:
    """Return the calendar day of a timestamp in the given zone."""
    if tz is not None and timestamp.tzinfo is not None:
        return timestamp.astimezone(tz).date()
    return timestamp.date()


def calendar_window(end: date, days: int) -> list[date]:
    """Return the `days` calendar dates ending at `end`, oldest first."""
    return [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def daily_nutrition_series(
    meals: Iterable[MealRecord],
    end: date,
    days: int = 7,
    tz: tzinfo | None = None,
) -> list[DailyNutrition]:
    """Return per-day meal totals for the window ending at `end`.

    Days without meals carry the zero vector, which the weekly engine
    reads as "nothing logged".
    """
    by_date: dict[date, NutritionVector] = {}
    for meal in meals:
        day = local_date(meal.timestamp, tz)
        by_date[day] = by_date.get(day, NutritionVector()) + meal.total_nutrition
    return [
        DailyNutrition(date=day, nutrition=by_date.get(day, NutritionVector()))
        for day in calendar_window(end, days)
    ]
