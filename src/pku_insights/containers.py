"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from pku_insights.adapters.supabase_blood_level_repository import (
    SupabaseBloodLevelRepository,
)
from pku_insights.adapters.supabase_formula_repository import (
    SupabaseFormulaRepository,
)
from pku_insights.adapters.supabase_goals_repository import SupabaseGoalsRepository
from pku_insights.adapters.supabase_meal_record_repository import (
    SupabaseMealRecordRepository,
)
from pku_insights.config import Settings, parse_report_periods
from pku_insights.services.analytics import AnalyticsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analytics_service: AnalyticsService
    report_periods: tuple[int, ...]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    analytics_service = AnalyticsService(
        meal_repository=SupabaseMealRecordRepository(supabase_client),
        blood_repository=SupabaseBloodLevelRepository(supabase_client),
        formula_repository=SupabaseFormulaRepository(supabase_client),
        goals_repository=SupabaseGoalsRepository(supabase_client),
        default_lookback_days=resolved_settings.default_lookback_days,
        default_phe_per_exchange=resolved_settings.default_phe_per_exchange,
        default_timezone=resolved_settings.default_timezone,
    )
    return AppContainer(
        settings=resolved_settings,
        analytics_service=analytics_service,
        report_periods=parse_report_periods(resolved_settings.report_periods),
    )
