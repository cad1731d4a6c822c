"""Supabase repository for formula intake summaries."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from pku_insights.adapters.supabase_rows import parse_date
from pku_insights.domain.formula import FormulaDaySummary
from pku_insights.services.analytics import FormulaRepository


@dataclass
class SupabaseFormulaRepository(FormulaRepository):
    """Supabase implementation for formula intake queries."""

    client: Client

    def fetch_formula_summary(
        self, user_id: UUID, dates: list[date]
    ) -> list[FormulaDaySummary]:
        """Return completed and configured slots for each date."""
        slots = self._active_time_slots(user_id)
        if not slots or not dates:
            return [
                FormulaDaySummary(date=day, completed_slots=0, total_slots=len(slots))
                for day in dates
            ]
        response = (
            self.client.table("formula_intakes")
            .select("date, time_slot, completed")
            .eq("user_id", str(user_id))
            .in_("date", [day.isoformat() for day in dates])
            .eq("completed", True)
            .execute()
        )
        completed: dict[date, set[str]] = {}
        for row in response.data or []:
            slot = str(row.get("time_slot", ""))
            if slot in slots:
                completed.setdefault(parse_date(row.get("date")), set()).add(slot)
        return [
            FormulaDaySummary(
                date=day,
                completed_slots=len(completed.get(day, set())),
                total_slots=len(slots),
            )
            for day in dates
        ]

    def _active_time_slots(self, user_id: UUID) -> set[str]:
        response = (
            self.client.table("formula_settings")
            .select("time_slots, is_active")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return set()
        row = response.data[0]
        if row.get("is_active") is False:
            return set()
        return {str(slot) for slot in row.get("time_slots") or []}
