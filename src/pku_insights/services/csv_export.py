"""CSV rendering for exported reports."""

import csv
import io
from datetime import UTC, date, datetime

from pku_insights.domain.constants import EXCHANGE_STANDARD_MG
from pku_insights.domain.units import blood_status, round_half_up
from pku_insights.services.nutrition import local_date
from pku_insights.services.reports import ExportData

CRLF = "\r\n"
BLOOD_SECTION_TITLE = "Blood Phe Levels"
DISCLAIMER = (
    "Disclaimer: This data is for informational purposes only and should not "
    "replace professional medical advice."
)

_WEEK_DAYS = 7
_MONTH_DAYS = 30
_QUARTER_DAYS = 90
_HALF_YEAR_DAYS = 180

_STATUS_LABELS = {"low": "Low", "normal": "Normal", "high": "High"}


def period_label(period_days: int) -> str:
    """Return the report title label for a period length."""
    if period_days <= _WEEK_DAYS:
        return f"{period_days} Day"
    if period_days <= _MONTH_DAYS:
        return "1 Month"
    if period_days <= _QUARTER_DAYS:
        return "3 Month"
    if period_days <= _HALF_YEAR_DAYS:
        return "6 Month"
    return "1 Year"


def generate_csv(data: ExportData, generated_on: date | None = None) -> str:
    """Render export data as CRLF-delimited CSV text."""
    exchange_unit = data.phe_per_exchange or EXCHANGE_STANDARD_MG
    generated = generated_on or datetime.now(tz=UTC).date()
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator=CRLF)

    writer.writerow([f"MyPKU - {period_label(data.period_days)} Summary Report"])
    writer.writerow(["Generated", generated.isoformat()])
    writer.writerow(
        ["Period", f"{data.period_start.isoformat()} ~ {data.period_end.isoformat()}"]
    )
    writer.writerow([])

    goals = data.daily_goals
    writer.writerow(["Daily Allowance Settings"])
    writer.writerow(
        [
            "Phe Limit (mg)",
            "Exchange Limit",
            "Calories",
            "Protein (g)",
            "Carbs (g)",
            "Fat (g)",
        ]
    )
    writer.writerow(
        [
            _plain(goals.phenylalanine_mg),
            _round1(goals.phenylalanine_mg / exchange_unit),
            _plain(goals.calories),
            _plain(goals.protein_g),
            _plain(goals.carbs_g),
            _plain(goals.fat_g),
        ]
    )
    writer.writerow([])

    writer.writerow(["Daily Nutrition Summary"])
    writer.writerow(
        [
            "Date",
            "Phe (mg)",
            "Phe - Confirmed Only (mg)",
            "Exchanges Used",
            "Calories",
            "Protein (g)",
            "Carbs (g)",
            "Fat (g)",
            "Formula Completed",
            "Formula Total",
        ]
    )
    formula_by_date = {entry.date: entry for entry in data.formula_days}
    for day in data.daily_summaries:
        formula = formula_by_date.get(day.date)
        nutrition = day.nutrition
        writer.writerow(
            [
                day.date.isoformat(),
                _round1(nutrition.phenylalanine_mg),
                _round1(day.confirmed_phe),
                _round1(nutrition.phenylalanine_mg / exchange_unit),
                _round1(nutrition.calories),
                _round1(nutrition.protein_g),
                _round1(nutrition.carbs_g),
                _round1(nutrition.fat_g),
                formula.completed_slots if formula else "-",
                formula.total_slots if formula else "-",
            ]
        )
    writer.writerow([])

    if data.blood_records:
        writer.writerow([BLOOD_SECTION_TITLE])
        writer.writerow(
            [
                "Collection Date",
                "Value (umol/L)",
                "Target Min (umol/L)",
                "Target Max (umol/L)",
                "Status",
                "Notes",
            ]
        )
        for record in data.blood_records:
            writer.writerow(
                [
                    local_date(record.collected_at, data.tz).isoformat(),
                    _round1(record.normalized_umol),
                    _round1(record.target_min),
                    _round1(record.target_max),
                    _STATUS_LABELS[blood_status(record)],
                    record.notes or "",
                ]
            )
        writer.writerow([])

    writer.writerow([DISCLAIMER])
    return buffer.getvalue().removesuffix(CRLF)


def _round1(value: float) -> str:
    return _plain(round_half_up(value, 1))


def _plain(value: float) -> str:
    """Format a number without a trailing .0 for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
