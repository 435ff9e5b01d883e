"""GET /v1/users/{user_id}/overview - dashboard over data loaded from the event source"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from ledgerlens.api.dependencies import (
    get_clock,
    get_event_source_client,
    get_obligation_source,
    get_request_id,
)
from ledgerlens.api.v1.schemas import DashboardResponse
from ledgerlens.config import settings
from ledgerlens.domain.dashboard import build_dashboard
from ledgerlens.domain.exceptions import EventSourceError, InvalidEventDataError
from ledgerlens.domain.ports import Clock, EventSource, ObligationSource
from ledgerlens.infrastructure.observability.logging import log_analysis
from ledgerlens.infrastructure.observability.metrics import (
    event_source_failures_counter,
    record_alerts,
    record_analysis,
)

router = APIRouter()


@router.get("/users/{user_id}/overview", response_model=DashboardResponse)
async def get_overview(
    user_id: str,
    request: Request,
    clock: Clock = Depends(get_clock),
    event_source: EventSource = Depends(get_event_source_client),
    obligation_source: ObligationSource = Depends(get_obligation_source),
):
    """
    Build the dashboard for a stored user.

    Flow:
    1. Fetch balance, trend-window events and obligations from the event source
    2. Run the full analytics pipeline at the injected "now"
    3. Record metrics and return the dashboard
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        balance = await event_source.get_balance(user_id)
        events = await event_source.get_events(user_id, settings.trend_window_days)
        obligations = await obligation_source.get_obligations(user_id)

        dashboard = build_dashboard(
            events,
            balance,
            clock.now(),
            obligations=obligations,
            daily_limit=settings.daily_spend_limit,
            horizons=settings.forecast_horizons,
            safety_buffer_days=settings.safety_buffer_days,
            window_days=settings.burn_window_days,
            trend_window_days=settings.trend_window_days,
        )

    except EventSourceError as e:
        event_source_failures_counter.inc()
        logging.error(f"Event source error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=503, detail="Event source unavailable")

    except InvalidEventDataError as e:
        logging.warning(f"Invalid stored events: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_alerts(dashboard.alerts)
    record_analysis("overview")
    log_analysis(
        request_id,
        "overview",
        len(events),
        (time.perf_counter() - start_time) * 1000,
        alert_count=len(dashboard.alerts),
    )
    return DashboardResponse.from_domain(dashboard)
