"""POST /v1/* - stateless analytics over events supplied in the request body"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from ledgerlens.api.dependencies import get_clock, get_request_id
from ledgerlens.api.v1.schemas import (
    AlertSchema,
    AlertsResponse,
    AnomaliesRequest,
    AnomaliesResponse,
    AnomalySchema,
    CashflowRequest,
    CashflowSchema,
    DashboardRequest,
    DashboardResponse,
    ForecastRequest,
    ForecastSchema,
    PatternSchema,
    PatternsRequest,
)
from ledgerlens.config import settings
from ledgerlens.domain.anomaly import flagged, scan_groups
from ledgerlens.domain.cashflow import analyze_cashflow
from ledgerlens.domain.dashboard import build_dashboard
from ledgerlens.domain.exceptions import DomainException
from ledgerlens.domain.forecasting import forecast
from ledgerlens.domain.patterns import extract_patterns
from ledgerlens.domain.ports import Clock
from ledgerlens.infrastructure.observability.logging import log_analysis
from ledgerlens.infrastructure.observability.metrics import (
    anomalies_counter,
    record_alerts,
    record_analysis,
)

router = APIRouter()


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


def _rejected(e: DomainException, request_id: str) -> HTTPException:
    logging.warning(f"Rejected input: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=422, detail=str(e))


@router.post("/patterns", response_model=list[PatternSchema])
def get_patterns(body: PatternsRequest, request: Request):
    """Classify every group of events into a recurrence pattern."""
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        patterns = extract_patterns(body.domain_events(), direction=body.direction)
    except DomainException as e:
        raise _rejected(e, request_id)

    record_analysis("patterns")
    log_analysis(request_id, "patterns", len(body.events), _elapsed_ms(start_time), pattern_count=len(patterns))
    return [PatternSchema.from_domain(p) for p in patterns]


@router.post("/forecast", response_model=ForecastSchema)
def get_forecast(body: ForecastRequest, request: Request):
    """
    Project the total of one direction (income by default) over a horizon.

    Irregular groups contribute nothing; the interval is a 95% band.
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        patterns = extract_patterns(body.domain_events(), direction=body.direction)
        result = forecast(patterns, body.horizon_days)
    except DomainException as e:
        raise _rejected(e, request_id)

    record_analysis("forecast")
    log_analysis(request_id, "forecast", len(body.events), _elapsed_ms(start_time), pattern_count=len(patterns))
    return ForecastSchema.from_domain(result)


@router.post("/anomalies", response_model=AnomaliesResponse)
def get_anomalies(body: AnomaliesRequest, request: Request):
    """Score the newest event of every group against its own history."""
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        results = scan_groups(body.domain_events(), threshold=body.threshold)
    except DomainException as e:
        raise _rejected(e, request_id)

    flagged_count = len(flagged(results))
    anomalies_counter.inc(flagged_count)
    record_analysis("anomalies")
    log_analysis(request_id, "anomalies", len(body.events), _elapsed_ms(start_time), flagged_count=flagged_count)

    return AnomaliesResponse(
        results=[AnomalySchema.from_domain(r) for r in results],
        flagged_count=flagged_count,
    )


@router.post("/cashflow", response_model=CashflowSchema)
def get_cashflow(body: CashflowRequest, request: Request, clock: Clock = Depends(get_clock)):
    """Burn rate, safe-to-spend and runway at the current instant."""
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        snapshot = analyze_cashflow(
            body.balance,
            body.domain_events(),
            clock.now(),
            obligations=body.domain_obligations(),
            safety_buffer_days=settings.safety_buffer_days if body.safety_buffer_days is None else body.safety_buffer_days,
            window_days=body.window_days or settings.burn_window_days,
            trend_window_days=settings.trend_window_days,
        )
    except DomainException as e:
        raise _rejected(e, request_id)

    record_analysis("cashflow")
    log_analysis(request_id, "cashflow", len(body.events), _elapsed_ms(start_time))
    return CashflowSchema.from_domain(snapshot)


def _dashboard(body: DashboardRequest, clock: Clock):
    return build_dashboard(
        body.domain_events(),
        body.balance,
        clock.now(),
        obligations=body.domain_obligations(),
        goals=body.domain_goals(),
        daily_limit=body.daily_limit if body.daily_limit is not None else settings.daily_spend_limit,
        horizons=settings.forecast_horizons,
        safety_buffer_days=settings.safety_buffer_days if body.safety_buffer_days is None else body.safety_buffer_days,
        window_days=body.window_days or settings.burn_window_days,
        trend_window_days=settings.trend_window_days,
    )


@router.post("/alerts", response_model=AlertsResponse)
def get_alerts(body: DashboardRequest, request: Request, clock: Clock = Depends(get_clock)):
    """Evaluate every alert rule and return them critical-first."""
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        dashboard = _dashboard(body, clock)
    except DomainException as e:
        raise _rejected(e, request_id)

    record_alerts(dashboard.alerts)
    record_analysis("alerts")
    log_analysis(request_id, "alerts", len(body.events), _elapsed_ms(start_time), alert_count=len(dashboard.alerts))
    return AlertsResponse(alerts=[AlertSchema.from_domain(a) for a in dashboard.alerts])


@router.post("/dashboard", response_model=DashboardResponse)
def get_dashboard(body: DashboardRequest, request: Request, clock: Clock = Depends(get_clock)):
    """Everything the dashboard shows, in one call."""
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        dashboard = _dashboard(body, clock)
    except DomainException as e:
        raise _rejected(e, request_id)

    record_alerts(dashboard.alerts)
    record_analysis("dashboard")
    log_analysis(request_id, "dashboard", len(body.events), _elapsed_ms(start_time), alert_count=len(dashboard.alerts))
    return DashboardResponse.from_domain(dashboard)
