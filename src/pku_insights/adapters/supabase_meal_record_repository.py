"""Supabase repository for meal records."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from pku_insights.adapters.supabase_rows import parse_nutrition, parse_timestamp
from pku_insights.domain.nutrition import FoodItem, MealRecord
from pku_insights.services.analytics import MealRecordRepository


@dataclass
class SupabaseMealRecordRepository(MealRecordRepository):
    """Supabase implementation for meal record queries."""

    client: Client

    def list_meal_records(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meal records with their food items in the time range."""
        response = (
            self.client.table("meal_records")
            .select("id, timestamp, meal_type, total_nutrition")
            .eq("user_id", str(user_id))
            .gte("timestamp", start.isoformat())
            .lt("timestamp", end.isoformat())
            .order("timestamp", desc=False)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return []
        items_by_meal = self._list_food_items([str(row["id"]) for row in rows])
        return [
            _parse_meal(row, items_by_meal.get(str(row["id"]), [])) for row in rows
        ]

    def _list_food_items(self, meal_ids: list[str]) -> dict[str, list[FoodItem]]:
        response = (
            self.client.table("food_items")
            .select("meal_record_id, name, weight_g, nutrition, user_verified")
            .in_("meal_record_id", meal_ids)
            .execute()
        )
        items: dict[str, list[FoodItem]] = {}
        for row in response.data or []:
            items.setdefault(str(row.get("meal_record_id")), []).append(
                FoodItem(
                    name=str(row.get("name", "")),
                    nutrition=parse_nutrition(row.get("nutrition")),
                    is_confirmed=bool(row.get("user_verified")),
                    estimated_weight_g=float(row.get("weight_g") or 0.0),
                )
            )
        return items


def _parse_meal(row: dict[str, object], items: list[FoodItem]) -> MealRecord:
    return MealRecord(
        id=str(row["id"]),
        timestamp=parse_timestamp(row.get("timestamp")),
        total_nutrition=parse_nutrition(row.get("total_nutrition")),
        items=tuple(items),
        meal_type=row.get("meal_type"),
    )
