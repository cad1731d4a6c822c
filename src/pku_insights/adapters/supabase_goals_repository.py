"""Supabase repository for daily goals."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from pku_insights.domain.nutrition import DEFAULT_DAILY_GOALS, DailyGoals
from pku_insights.services.analytics import GoalsRepository


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for daily goals."""

    client: Client

    def get_daily_goals(self, user_id: UUID) -> DailyGoals:
        """Return stored goals, filling gaps with the defaults."""
        response = (
            self.client.table("daily_goals")
            .select("calories, protein_g, carbs_g, fat_g, phenylalanine_mg")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return DEFAULT_DAILY_GOALS
        row = response.data[0]
        return DailyGoals(
            calories=_value_or(row, "calories", DEFAULT_DAILY_GOALS.calories),
            protein_g=_value_or(row, "protein_g", DEFAULT_DAILY_GOALS.protein_g),
            carbs_g=_value_or(row, "carbs_g", DEFAULT_DAILY_GOALS.carbs_g),
            fat_g=_value_or(row, "fat_g", DEFAULT_DAILY_GOALS.fat_g),
            phenylalanine_mg=_value_or(
                row, "phenylalanine_mg", DEFAULT_DAILY_GOALS.phenylalanine_mg
            ),
        )


def _value_or(row: dict[str, object], key: str, default: float) -> float:
    value = row.get(key)
    return float(value) if value is not None else float(default)
