"""Dashboard orchestration - one pass from raw events to prioritized alerts"""

import logging
from datetime import datetime, timedelta
from typing import Collection, List, Optional, Sequence

from ledgerlens.domain.alerts import (
    cash_runout_alert,
    goal_milestone_alert,
    income_dip_alert,
    overspending_alert,
    prioritize_alerts,
    rent_risk_alert,
    spending_spike_alert,
    subscription_alerts,
)
from ledgerlens.domain.cashflow import (
    DEFAULT_SAFETY_BUFFER_DAYS,
    DEFAULT_TREND_WINDOW_DAYS,
    DEFAULT_WINDOW_DAYS,
    analyze_cashflow,
)
from ledgerlens.domain.forecasting import STANDARD_HORIZONS, forecast, forecast_horizons, occurrences_within
from ledgerlens.domain.models import (
    Alert,
    CashflowSnapshot,
    Dashboard,
    Direction,
    Goal,
    GroupKey,
    MonetaryEvent,
    Obligation,
    Pattern,
    SpendingAnalysis,
)
from ledgerlens.domain.patterns import extract_patterns, validate_events
from ledgerlens.domain.spending import (
    analyze_spending,
    consecutive_days_over,
    daily_spend_series,
    rolling_average,
)
from ledgerlens.domain.stats import mean

logger = logging.getLogger(__name__)

INCOME_CHECK_DAYS = 30


def expected_income(
    events: Sequence[MonetaryEvent],
    now: datetime,
    history_days: int,
    period_days: int,
    groups: Optional[Collection[GroupKey]] = None,
) -> float:
    """
    Income actually received per `period_days`, averaged over the trailing history.

    Pass `groups` to count only those income sources.
    """
    start = now - timedelta(days=history_days)
    received = sum(
        e.amount
        for e in events
        if e.direction == Direction.INCOME
        and start <= e.timestamp <= now
        and (groups is None or e.group_key in groups)
    )
    return received / max(1, history_days) * period_days


def collect_alerts(
    events: Sequence[MonetaryEvent],
    now: datetime,
    income_patterns: Sequence[Pattern],
    cashflow: CashflowSnapshot,
    spending: SpendingAnalysis,
    obligations: Sequence[Obligation] = (),
    goals: Sequence[Goal] = (),
    daily_limit: Optional[float] = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
    trend_window_days: int = DEFAULT_TREND_WINDOW_DAYS,
) -> List[Alert]:
    """Run every rule against the computed analytics and rank the result"""
    candidates: List[Optional[Alert]] = []

    for obligation in obligations:
        candidates.append(
            rent_risk_alert(obligation.amount, obligation.days_until_due, cashflow.balance, cashflow.daily_burn_rate, now)
        )

    series = daily_spend_series(events, now, window_days)
    if daily_limit is not None and series:
        streak = consecutive_days_over(series, daily_limit)
        if streak:
            candidates.append(overspending_alert(mean(series[-streak:]), daily_limit, streak, now))

    candidates.append(cash_runout_alert(cashflow.runway, cashflow.daily_burn_rate, now))

    # Only sources that recur at least once inside the check window can be compared
    projectable = [p for p in income_patterns if occurrences_within(p, INCOME_CHECK_DAYS) > 0]
    if projectable:
        projected = forecast(projectable, INCOME_CHECK_DAYS).predicted_amount
        groups = {p.group_key for p in projectable}
        expected = expected_income(events, now, trend_window_days, INCOME_CHECK_DAYS, groups)
        candidates.append(income_dip_alert(expected, projected, INCOME_CHECK_DAYS, now))

    if len(series) > 1:
        candidates.append(spending_spike_alert(series[-1], rolling_average(series), now))

    for goal in goals:
        candidates.append(goal_milestone_alert(goal, now))

    candidates.extend(subscription_alerts(spending.subscriptions, now))

    return prioritize_alerts(candidates)


def build_dashboard(
    events: Sequence[MonetaryEvent],
    balance: float,
    now: datetime,
    obligations: Sequence[Obligation] = (),
    goals: Sequence[Goal] = (),
    daily_limit: Optional[float] = None,
    horizons: Sequence[int] = STANDARD_HORIZONS,
    safety_buffer_days: int = DEFAULT_SAFETY_BUFFER_DAYS,
    window_days: int = DEFAULT_WINDOW_DAYS,
    trend_window_days: int = DEFAULT_TREND_WINDOW_DAYS,
) -> Dashboard:
    """
    Main entry point: everything the dashboard shows, computed at `now`.

    Flow:
    1. Validate events and extract patterns for every group
    2. Forecast income over each horizon from the income patterns
    3. Snapshot cashflow and analyze recent spending
    4. Evaluate alert rules and rank them
    """
    valid = validate_events(events)
    patterns = extract_patterns(valid)
    income_patterns = [p for p in patterns if p.direction == Direction.INCOME]

    cashflow = analyze_cashflow(
        balance,
        valid,
        now,
        obligations=obligations,
        safety_buffer_days=safety_buffer_days,
        window_days=window_days,
        trend_window_days=trend_window_days,
    )
    spending = analyze_spending(valid, now, window_days)

    alerts = collect_alerts(
        valid,
        now,
        income_patterns,
        cashflow,
        spending,
        obligations=obligations,
        goals=goals,
        daily_limit=daily_limit,
        window_days=window_days,
        trend_window_days=trend_window_days,
    )

    logger.debug(
        "Dashboard built",
        extra={"event_count": len(valid), "pattern_count": len(patterns), "alert_count": len(alerts)},
    )

    return Dashboard(
        generated_at=now,
        patterns=patterns,
        income_forecasts=forecast_horizons(income_patterns, horizons),
        cashflow=cashflow,
        spending=spending,
        alerts=alerts,
    )
