"""FastAPI application factory."""

import logging
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from pku_insights.api.models import CorrelationRequest, WeeklyInsightRequest
from pku_insights.app_logging import configure_logging
from pku_insights.containers import AppContainer
from pku_insights.services.analytics import to_jsonable
from pku_insights.services.correlation import analyze_correlation
from pku_insights.services.insights import analyze_weekly_insight

DEFAULT_REPORT_DAYS = 30


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/users/{user_id}/correlation")
    async def user_correlation(
        user_id: UUID,
        request: Request,
        lookback_days: int | None = None,
        timezone: str | None = None,
    ) -> dict[str, Any]:
        """Correlate the user's blood draws with preceding dietary Phe."""
        state_container: AppContainer = request.app.state.container
        _require_timezone(timezone)
        try:
            result = state_container.analytics_service.get_correlation(
                user_id, lookback_days, timezone
            )
        except ValueError as exc:
            raise _bad_request(logger, exc) from exc
        return to_jsonable(result)

    @app.get("/users/{user_id}/weekly-insight")
    async def user_weekly_insight(
        user_id: UUID, request: Request, timezone: str | None = None
    ) -> dict[str, Any]:
        """Return weekly stats and anomalies for the user."""
        state_container: AppContainer = request.app.state.container
        _require_timezone(timezone)
        try:
            result = state_container.analytics_service.get_weekly_insight(
                user_id, timezone
            )
        except ValueError as exc:
            raise _bad_request(logger, exc) from exc
        return to_jsonable(result)

    @app.get("/users/{user_id}/report")
    async def user_report(
        user_id: UUID,
        request: Request,
        days: int = DEFAULT_REPORT_DAYS,
        timezone: str | None = None,
    ) -> dict[str, Any]:
        """Return per-day report data for the user."""
        state_container: AppContainer = request.app.state.container
        _require_report_period(state_container, days)
        _require_timezone(timezone)
        try:
            data = await state_container.analytics_service.build_report(
                user_id, days, timezone
            )
        except ValueError as exc:
            raise _bad_request(logger, exc) from exc
        return to_jsonable(data)

    @app.get("/users/{user_id}/report.csv", response_class=PlainTextResponse)
    async def user_report_csv(
        user_id: UUID,
        request: Request,
        days: int = DEFAULT_REPORT_DAYS,
        timezone: str | None = None,
    ) -> PlainTextResponse:
        """Return the user's report rendered as CSV text."""
        state_container: AppContainer = request.app.state.container
        _require_report_period(state_container, days)
        _require_timezone(timezone)
        try:
            csv_text = await state_container.analytics_service.export_csv(
                user_id, days, timezone
            )
        except ValueError as exc:
            raise _bad_request(logger, exc) from exc
        return PlainTextResponse(csv_text, media_type="text/csv")

    @app.post("/analysis/correlation")
    async def correlation(payload: CorrelationRequest) -> dict[str, Any]:
        """Correlate records supplied in the request body."""
        try:
            result = analyze_correlation(
                [record.to_domain() for record in payload.blood_records],
                [meal.to_domain() for meal in payload.meal_records],
                payload.lookback_days,
            )
        except ValueError as exc:
            raise _bad_request(logger, exc) from exc
        return to_jsonable(result)

    @app.post("/analysis/weekly-insight")
    async def weekly_insight(payload: WeeklyInsightRequest) -> dict[str, Any]:
        """Analyze a week of daily totals supplied in the request body."""
        try:
            result = analyze_weekly_insight(
                [day.to_domain() for day in payload.weekly_phe_data],
                [entry.to_domain() for entry in payload.formula_summary],
                payload.daily_goals.to_domain(),
                [record.to_domain() for record in payload.blood_records],
            )
        except ValueError as exc:
            raise _bad_request(logger, exc) from exc
        return to_jsonable(result)

    return app


def _bad_request(logger: logging.Logger, exc: ValueError) -> HTTPException:
    logger.warning("Rejected analysis input: %s", exc)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _require_report_period(container: AppContainer, days: int) -> None:
    if days not in container.report_periods:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"days must be one of {list(container.report_periods)}",
        )


def _require_timezone(value: str | None) -> None:
    if value is not None and not _is_valid_timezone(value):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {value}",
        )


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True
