"""Weekly statistics and anomaly detection over daily Phe intake."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
import datetime as dt
from typing import Literal

from pku_insights.domain.blood import BloodLevelRecord
from pku_insights.domain.constants import DEFAULT_PHE_LIMIT_MG
from pku_insights.domain.formula import FormulaDaySummary
from pku_insights.domain.nutrition import DailyGoals, DailyNutrition
from pku_insights.domain.units import round_half_up

DataStatus = Literal["cold_start", "partial", "full"]
AnomalyType = Literal["phe_spike", "formula_missed_streak", "phe_over_limit"]
Severity = Literal["info", "warning"]

COLD_START_MAX_DAYS = 2
PARTIAL_MAX_DAYS = 5
SPIKE_RATIO = 1.5
MIN_MISSED_STREAK = 2

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnomalyItem:
    """A flagged pattern in the weekly data."""

    type: AnomalyType
    severity: Severity
    date: dt.date | None = None
    value: float | None = None
    message_key: str = ""
    message_params: dict[str, object] = field(default_factory=dict)


@dataclass
class WeeklyStats:
    """Descriptive statistics over the active days of a week."""

    avg_phe: float = 0
    max_phe: float = 0
    min_phe: float = 0
    max_phe_date: dt.date | None = None
    goal_hit_days: int = 0
    total_days: int = 0
    formula_completion_rate: float = 0


@dataclass
class WeeklyInsightResult:
    """Weekly stats plus the anomalies found in them."""

    data_status: DataStatus
    stats: WeeklyStats
    anomalies: list[AnomalyItem] = field(default_factory=list)


def analyze_weekly_insight(
    weekly_phe_data: Sequence[DailyNutrition],
    formula_summary: Sequence[FormulaDaySummary],
    daily_goals: DailyGoals,
    blood_records: Sequence[BloodLevelRecord] = (),
) -> WeeklyInsightResult:
    """Summarize a week of intake and flag spikes, missed formula and overages.

    Days with zero Phe count as "not logged" and are left out entirely.
    Fewer than three logged days is a cold start: stats stay zeroed and no
    anomaly rules run. Blood records are accepted but not yet used.
    """
    active_days = [day for day in weekly_phe_data if day.nutrition.phenylalanine_mg]
    total_days = len(active_days)
    data_status = _data_status(total_days)
    if data_status == "cold_start":
        _logger.debug("Weekly insight cold start: active_days=%s", total_days)
        return WeeklyInsightResult(
            data_status=data_status, stats=WeeklyStats(total_days=total_days)
        )

    phe_limit = phe_limit_for(daily_goals)
    phe_values = [day.nutrition.phenylalanine_mg for day in active_days]
    max_phe = max(phe_values)
    stats = WeeklyStats(
        avg_phe=round_half_up(sum(phe_values) / total_days),
        max_phe=max_phe,
        min_phe=min(phe_values),
        max_phe_date=next(
            day.date
            for day in active_days
            if day.nutrition.phenylalanine_mg == max_phe
        ),
        goal_hit_days=sum(1 for value in phe_values if value <= phe_limit),
        total_days=total_days,
        formula_completion_rate=formula_completion_rate(formula_summary),
    )
    anomalies = [
        *_detect_spikes(active_days),
        *_detect_missed_streaks(formula_summary),
        *_detect_over_limit(active_days, phe_limit),
    ]
    return WeeklyInsightResult(
        data_status=data_status, stats=stats, anomalies=anomalies
    )


def phe_limit_for(daily_goals: DailyGoals) -> float:
    """Return the daily Phe limit, falling back to the default when unset."""
    return daily_goals.phenylalanine_mg or DEFAULT_PHE_LIMIT_MG


def formula_completion_rate(formula_summary: Sequence[FormulaDaySummary]) -> float:
    """Return completed/total slots over days that have slots configured."""
    configured = [entry for entry in formula_summary if entry.total_slots > 0]
    total_slots = sum(entry.total_slots for entry in configured)
    if total_slots == 0:
        return 0
    completed = sum(entry.completed_slots for entry in configured)
    return round_half_up(completed / total_slots, 2)


def _data_status(total_days: int) -> DataStatus:
    if total_days <= COLD_START_MAX_DAYS:
        return "cold_start"
    if total_days <= PARTIAL_MAX_DAYS:
        return "partial"
    return "full"


def _detect_spikes(active_days: list[DailyNutrition]) -> list[AnomalyItem]:
    anomalies = []
    for previous, current in zip(active_days, active_days[1:]):
        prev_phe = previous.nutrition.phenylalanine_mg
        curr_phe = current.nutrition.phenylalanine_mg
        if prev_phe > 0 and curr_phe > prev_phe * SPIKE_RATIO:
            anomalies.append(
                AnomalyItem(
                    type="phe_spike",
                    severity="warning",
                    date=current.date,
                    value=curr_phe,
                    message_key="pheSpike",
                    message_params={
                        "date": current.date.isoformat(),
                        "value": curr_phe,
                        "increase": round_half_up(
                            (curr_phe - prev_phe) / prev_phe * 100
                        ),
                    },
                )
            )
    return anomalies


def _detect_missed_streaks(
    formula_summary: Sequence[FormulaDaySummary],
) -> list[AnomalyItem]:
    anomalies = []
    streak: list[FormulaDaySummary] = []
    for entry in formula_summary:
        # days without configured slots neither extend nor end a streak
        if entry.total_slots == 0:
            continue
        if entry.is_missed:
            streak.append(entry)
            continue
        if len(streak) >= MIN_MISSED_STREAK:
            anomalies.append(_missed_streak_item(streak))
        streak = []
    if len(streak) >= MIN_MISSED_STREAK:
        anomalies.append(_missed_streak_item(streak))
    return anomalies


def _missed_streak_item(streak: list[FormulaDaySummary]) -> AnomalyItem:
    start = streak[0].date
    return AnomalyItem(
        type="formula_missed_streak",
        severity="warning",
        date=start,
        value=len(streak),
        message_key="formulaMissedStreak",
        message_params={"days": len(streak), "startDate": start.isoformat()},
    )


def _detect_over_limit(
    active_days: list[DailyNutrition], phe_limit: float
) -> list[AnomalyItem]:
    return [
        AnomalyItem(
            type="phe_over_limit",
            severity="info",
            date=day.date,
            value=day.nutrition.phenylalanine_mg,
            message_key="pheOverLimit",
            message_params={
                "date": day.date.isoformat(),
                "value": day.nutrition.phenylalanine_mg,
                "limit": phe_limit,
            },
        )
        for day in active_days
        if day.nutrition.phenylalanine_mg > phe_limit
    ]
