"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_REPORT_PERIODS = (7, 30, 90, 180, 365)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    default_lookback_days: int = 3
    default_phe_per_exchange: float = 50
    default_timezone: str = "UTC"
    report_periods: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_report_periods(raw: str | None) -> tuple[int, ...]:
    """Parse the allowed report periods (in days) from env."""
    if raw is None:
        return DEFAULT_REPORT_PERIODS
    periods: list[int] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value.isdigit() and int(value) > 0:
            periods.append(int(value))
    return tuple(sorted(set(periods))) or DEFAULT_REPORT_PERIODS
