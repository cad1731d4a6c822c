"""Parsing helpers shared by the Supabase repositories."""

from datetime import UTC, date, datetime

from pku_insights.domain.nutrition import NutritionVector


def parse_timestamp(raw: object) -> datetime:
    """Parse an ISO timestamp column into an aware datetime.

    Raises ValueError for missing or malformed values so that bad rows never
    reach the analysis engines.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError(f"Expected an ISO timestamp, got {raw!r}")
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def parse_date(raw: object) -> date:
    """Parse a YYYY-MM-DD column."""
    if not isinstance(raw, str) or not raw:
        raise ValueError(f"Expected an ISO date, got {raw!r}")
    return date.fromisoformat(raw[:10])


def parse_nutrition(raw: object) -> NutritionVector:
    """Parse a nutrition JSON column, treating missing values as zero."""
    if not isinstance(raw, dict):
        return NutritionVector()
    return NutritionVector(
        calories=float(raw.get("calories") or 0.0),
        protein_g=float(raw.get("protein_g") or 0.0),
        carbs_g=float(raw.get("carbs_g") or 0.0),
        fat_g=float(raw.get("fat_g") or 0.0),
        phenylalanine_mg=float(raw.get("phenylalanine_mg") or 0.0),
    )
