"""Supabase repository for blood Phe levels."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from pku_insights.adapters.supabase_rows import parse_timestamp
from pku_insights.domain.blood import BloodLevelRecord
from pku_insights.domain.constants import (
    BLOOD_TARGET_MAX_UMOL,
    BLOOD_TARGET_MIN_UMOL,
)
from pku_insights.services.analytics import BloodLevelRepository


@dataclass
class SupabaseBloodLevelRepository(BloodLevelRepository):
    """Supabase implementation for blood level queries."""

    client: Client

    def list_blood_levels(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[BloodLevelRecord]:
        """Return blood levels, newest first."""
        query = (
            self.client.table("blood_levels")
            .select(
                "id, collected_at, raw_value, raw_unit, normalized_umol, "
                "target_min, target_max, notes"
            )
            .eq("user_id", str(user_id))
        )
        if start is not None:
            query = query.gte("collected_at", start.isoformat())
        if end is not None:
            query = query.lt("collected_at", end.isoformat())
        response = query.order("collected_at", desc=True).execute()
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> BloodLevelRecord:
    raw_value = row.get("raw_value")
    return BloodLevelRecord(
        id=str(row["id"]),
        collected_at=parse_timestamp(row.get("collected_at")),
        normalized_umol=float(row.get("normalized_umol", 0.0)),
        target_min=float(row.get("target_min") or BLOOD_TARGET_MIN_UMOL),
        target_max=float(row.get("target_max") or BLOOD_TARGET_MAX_UMOL),
        notes=str(row.get("notes") or ""),
        raw_value=float(raw_value) if raw_value is not None else None,
        raw_unit=str(row.get("raw_unit") or "umol"),
    )
