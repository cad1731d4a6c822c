"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import uuid4

import pytest

from pku_insights.adapters.supabase_blood_level_repository import (
    SupabaseBloodLevelRepository,
)
from pku_insights.adapters.supabase_formula_repository import SupabaseFormulaRepository
from pku_insights.adapters.supabase_goals_repository import SupabaseGoalsRepository
from pku_insights.adapters.supabase_meal_record_repository import (
    SupabaseMealRecordRepository,
)
from pku_insights.adapters.supabase_rows import parse_date, parse_timestamp
from pku_insights.domain.nutrition import DEFAULT_DAILY_GOALS


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    responses: list[list[dict[str, object]]] = field(default_factory=list)
    filters: list[tuple[str, str, object]] = field(default_factory=list)
    ordering: list[tuple[str, bool]] = field(default_factory=list)

    def queue(self, data: list[dict[str, object]]) -> None:
        self.responses.append(data)

    def select(self, *_args) -> "FakeTable":
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("in", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("gte", column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("lt", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.ordering.append((column, desc))
        return self

    def execute(self) -> FakeResponse:
        data = self.responses.pop(0) if self.responses else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_meal_record_repository_attaches_food_items() -> None:
    client = FakeSupabaseClient()
    client.table("meal_records").queue(
        [
            {
                "id": "m1",
                "timestamp": "2025-01-10T08:00:00+00:00",
                "meal_type": "breakfast",
                "total_nutrition": {"calories": 350, "phenylalanine_mg": 120},
            },
            {
                "id": "m2",
                "timestamp": "2025-01-10T12:30:00Z",
                "meal_type": "lunch",
                "total_nutrition": None,
            },
        ]
    )
    client.table("food_items").queue(
        [
            {
                "meal_record_id": "m1",
                "name": "Rice",
                "weight_g": 150,
                "nutrition": {"phenylalanine_mg": 80},
                "user_verified": True,
            },
            {
                "meal_record_id": "m1",
                "name": "Egg",
                "weight_g": None,
                "nutrition": {"phenylalanine_mg": 40},
                "user_verified": False,
            },
        ]
    )
    start = datetime(2025, 1, 10, tzinfo=UTC)
    end = datetime(2025, 1, 11, tzinfo=UTC)

    meals = SupabaseMealRecordRepository(client).list_meal_records(
        uuid4(), start, end
    )

    assert [meal.id for meal in meals] == ["m1", "m2"]
    first, second = meals
    assert first.total_nutrition.phenylalanine_mg == 120
    assert first.total_nutrition.protein_g == 0
    assert [item.is_confirmed for item in first.items] == [True, False]
    assert first.items[0].estimated_weight_g == 150
    assert second.items == ()
    assert second.total_nutrition.calories == 0
    assert second.timestamp == datetime(2025, 1, 10, 12, 30, tzinfo=UTC)
    meal_filters = client.table("meal_records").filters
    assert ("gte", "timestamp", start.isoformat()) in meal_filters
    assert ("lt", "timestamp", end.isoformat()) in meal_filters
    assert client.table("food_items").filters == [
        ("in", "meal_record_id", ["m1", "m2"])
    ]


def test_meal_record_repository_skips_items_when_empty() -> None:
    client = FakeSupabaseClient()

    meals = SupabaseMealRecordRepository(client).list_meal_records(
        uuid4(), datetime(2025, 1, 10, tzinfo=UTC), datetime(2025, 1, 11, tzinfo=UTC)
    )

    assert meals == []
    assert "food_items" not in client.tables


def test_malformed_timestamp_is_rejected() -> None:
    client = FakeSupabaseClient()
    client.table("meal_records").queue(
        [{"id": "m1", "timestamp": "yesterday", "total_nutrition": {}}]
    )

    with pytest.raises(ValueError):
        SupabaseMealRecordRepository(client).list_meal_records(
            uuid4(),
            datetime(2025, 1, 10, tzinfo=UTC),
            datetime(2025, 1, 11, tzinfo=UTC),
        )


def test_blood_level_repository_defaults_targets() -> None:
    client = FakeSupabaseClient()
    client.table("blood_levels").queue(
        [
            {
                "id": 7,
                "collected_at": "2025-01-12T09:00:00+00:00",
                "raw_value": 4,
                "raw_unit": "mg_dl",
                "normalized_umol": 242.2,
                "target_min": None,
                "target_max": 480,
                "notes": None,
            }
        ]
    )

    [record] = SupabaseBloodLevelRepository(client).list_blood_levels(uuid4())

    assert record.id == "7"
    assert record.normalized_umol == 242.2
    assert record.target_min == 120
    assert record.target_max == 480
    assert record.notes == ""
    assert record.raw_value == 4
    assert record.raw_unit == "mg_dl"
    table = client.table("blood_levels")
    assert table.ordering == [("collected_at", True)]
    assert not any(kind in {"gte", "lt"} for kind, _, _ in table.filters)


def test_blood_level_repository_applies_range() -> None:
    client = FakeSupabaseClient()
    start = datetime(2025, 1, 8, tzinfo=UTC)
    end = datetime(2025, 1, 15, tzinfo=UTC)

    SupabaseBloodLevelRepository(client).list_blood_levels(uuid4(), start, end)

    filters = client.table("blood_levels").filters
    assert ("gte", "collected_at", start.isoformat()) in filters
    assert ("lt", "collected_at", end.isoformat()) in filters


def test_formula_repository_counts_distinct_active_slots() -> None:
    client = FakeSupabaseClient()
    client.table("formula_settings").queue(
        [{"time_slots": ["morning", "noon", "evening"], "is_active": True}]
    )
    client.table("formula_intakes").queue(
        [
            {"date": "2025-01-10", "time_slot": "morning", "completed": True},
            {"date": "2025-01-10", "time_slot": "morning", "completed": True},
            {"date": "2025-01-10", "time_slot": "noon", "completed": True},
            {"date": "2025-01-10", "time_slot": "bedtime", "completed": True},
            {"date": "2025-01-11", "time_slot": "evening", "completed": True},
        ]
    )
    dates = [date(2025, 1, 10), date(2025, 1, 11), date(2025, 1, 12)]

    summary = SupabaseFormulaRepository(client).fetch_formula_summary(uuid4(), dates)

    assert [(entry.date, entry.completed_slots) for entry in summary] == [
        (date(2025, 1, 10), 2),
        (date(2025, 1, 11), 1),
        (date(2025, 1, 12), 0),
    ]
    assert all(entry.total_slots == 3 for entry in summary)
    assert (
        "in",
        "date",
        ["2025-01-10", "2025-01-11", "2025-01-12"],
    ) in client.table("formula_intakes").filters


def test_formula_repository_without_settings_has_no_slots() -> None:
    client = FakeSupabaseClient()
    client.table("formula_settings").queue(
        [{"time_slots": ["morning"], "is_active": False}]
    )

    summary = SupabaseFormulaRepository(client).fetch_formula_summary(
        uuid4(), [date(2025, 1, 10)]
    )

    assert [(entry.completed_slots, entry.total_slots) for entry in summary] == [
        (0, 0)
    ]
    assert "formula_intakes" not in client.tables


def test_goals_repository_fills_missing_columns() -> None:
    client = FakeSupabaseClient()
    client.table("daily_goals").queue(
        [
            {
                "calories": 1800,
                "protein_g": None,
                "carbs_g": 220,
                "fat_g": 60,
                "phenylalanine_mg": 250,
            }
        ]
    )

    goals = SupabaseGoalsRepository(client).get_daily_goals(uuid4())

    assert goals.calories == 1800
    assert goals.protein_g == DEFAULT_DAILY_GOALS.protein_g
    assert goals.phenylalanine_mg == 250


def test_goals_repository_defaults_without_row() -> None:
    client = FakeSupabaseClient()

    assert SupabaseGoalsRepository(client).get_daily_goals(uuid4()) == (
        DEFAULT_DAILY_GOALS
    )


def test_parse_helpers() -> None:
    assert parse_timestamp("2025-01-10T08:00:00") == datetime(
        2025, 1, 10, 8, tzinfo=UTC
    )
    assert parse_date("2025-01-10T00:00:00") == date(2025, 1, 10)
    with pytest.raises(ValueError):
        parse_timestamp(None)
    with pytest.raises(ValueError):
        parse_date("")
