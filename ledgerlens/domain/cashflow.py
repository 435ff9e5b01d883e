"""Cashflow projection - burn rate, safe-to-spend, runway and micro-actions"""

import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Sequence

from ledgerlens.domain.exceptions import InvalidInputError
from ledgerlens.domain.models import (
    CashflowSnapshot,
    CashflowTrend,
    Direction,
    Finite,
    Indefinite,
    MicroAction,
    MicroActionKind,
    MonetaryEvent,
    Obligation,
    Runway,
)
from ledgerlens.domain.patterns import validate_events

DEFAULT_WINDOW_DAYS = 30
DEFAULT_TREND_WINDOW_DAYS = 90
DEFAULT_SAFETY_BUFFER_DAYS = 7
OBLIGATION_HORIZON_DAYS = 30
TREND_THRESHOLD = 0.15
MIN_RUNWAY_DAYS = 14
SUBSCRIPTION_CATEGORY = "subscriptions"


def expenses_in_window(events: Iterable[MonetaryEvent], now: datetime, window_days: int) -> List[MonetaryEvent]:
    start = now - timedelta(days=window_days)
    return [e for e in events if e.direction == Direction.EXPENSE and start <= e.timestamp <= now]


def burn_rate(events: Iterable[MonetaryEvent], now: datetime, window_days: int = DEFAULT_WINDOW_DAYS) -> float:
    """Average expense per day over the trailing window ending at `now`"""
    if window_days < 0:
        raise InvalidInputError(f"window_days must be >= 0, got {window_days}")
    total = sum(e.amount for e in expenses_in_window(events, now, window_days))
    return total / max(1, window_days)


def obligation_reserve(obligations: Iterable[Obligation], horizon_days: int = OBLIGATION_HORIZON_DAYS) -> float:
    return sum(o.amount for o in obligations if o.days_until_due <= horizon_days)


def safe_to_spend(
    balance: float,
    daily_burn_rate: float,
    obligations: Iterable[Obligation] = (),
    safety_buffer_days: int = DEFAULT_SAFETY_BUFFER_DAYS,
) -> float:
    """
    Balance left after reserving near-term obligations and a burn-rate buffer.

    Never negative; an overdrawn balance has nothing safe to spend.
    """
    buffer_reserve = daily_burn_rate * safety_buffer_days
    return max(0.0, balance - obligation_reserve(obligations) - buffer_reserve)


def project_runway(balance: float, daily_burn_rate: float, now: datetime) -> Runway:
    if daily_burn_rate <= 0:
        return Indefinite()

    days = max(0, math.floor(balance / daily_burn_rate))
    return Finite(days=days, date=(now + timedelta(days=days)).date())


def classify_trend(recent_burn: float, historical_burn: float, threshold: float = TREND_THRESHOLD) -> CashflowTrend:
    """
    Recent burn materially above the historical burn is declining cashflow,
    materially below is improving.
    """
    if historical_burn <= 0:
        return CashflowTrend.DECLINING if recent_burn > 0 else CashflowTrend.STABLE

    change = (recent_burn - historical_burn) / historical_burn
    if change > threshold:
        return CashflowTrend.DECLINING
    if change < -threshold:
        return CashflowTrend.IMPROVING
    return CashflowTrend.STABLE


def spending_by_category(events: Iterable[MonetaryEvent]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for event in events:
        if event.direction != Direction.EXPENSE:
            continue
        category = event.category or "uncategorized"
        totals[category] = totals.get(category, 0.0) + event.amount
    return totals


def generate_micro_actions(
    daily_burn_rate: float,
    runway: Runway,
    expenses: Sequence[MonetaryEvent],
) -> List[MicroAction]:
    actions: List[MicroAction] = []
    per_day = max(1.0, daily_burn_rate)

    if isinstance(runway, Finite) and runway.days < MIN_RUNWAY_DAYS:
        days_needed = MIN_RUNWAY_DAYS - runway.days
        actions.append(
            MicroAction(
                kind=MicroActionKind.CRITICAL,
                title="Cash Runout Risk",
                description=(
                    f"Running out in {runway.days} days. "
                    f"Need {round(daily_burn_rate * days_needed)} more to reach {MIN_RUNWAY_DAYS} days."
                ),
                impact_days=float(days_needed),
                actions=[
                    "Pause non-essential subscriptions",
                    "Delay discretionary purchases",
                    "Accelerate income collection",
                ],
            )
        )

    top_categories = sorted(spending_by_category(expenses).items(), key=lambda kv: kv[1], reverse=True)[:3]
    if top_categories:
        savings = sum(amount * 0.1 for _, amount in top_categories)
        actions.append(
            MicroAction(
                kind=MicroActionKind.OPTIMIZATION,
                title="Spending Reduction",
                description=f"Cut 10% from top categories to save {round(savings)} per month.",
                impact_days=savings / per_day,
                actions=[f"Reduce {category} spending by 10%" for category, _ in top_categories],
            )
        )

    subscriptions = [e for e in expenses if e.category == SUBSCRIPTION_CATEGORY]
    if subscriptions:
        monthly = sum(e.amount for e in subscriptions)
        actions.append(
            MicroAction(
                kind=MicroActionKind.OPPORTUNITY,
                title="Subscription Audit",
                description=f"Review {len(subscriptions)} subscriptions costing {round(monthly)} per month.",
                impact_days=monthly / per_day,
                actions=[
                    "Cancel unused subscriptions",
                    "Downgrade premium plans",
                    "Share family plans",
                ],
            )
        )

    return actions


def analyze_cashflow(
    balance: float,
    events: Iterable[MonetaryEvent],
    now: datetime,
    obligations: Sequence[Obligation] = (),
    safety_buffer_days: int = DEFAULT_SAFETY_BUFFER_DAYS,
    window_days: int = DEFAULT_WINDOW_DAYS,
    trend_window_days: int = DEFAULT_TREND_WINDOW_DAYS,
) -> CashflowSnapshot:
    """
    Main entry point: snapshot of cash health at `now`.

    The recent window drives burn rate, safe-to-spend and runway; the longer
    trend window is the baseline the recent burn is compared against.
    """
    valid = validate_events(events)

    recent_burn = burn_rate(valid, now, window_days)
    historical_burn = burn_rate(valid, now, trend_window_days)
    runway = project_runway(balance, recent_burn, now)

    return CashflowSnapshot(
        balance=balance,
        daily_burn_rate=recent_burn,
        safe_to_spend_today=safe_to_spend(balance, recent_burn, obligations, safety_buffer_days),
        runway=runway,
        trend=classify_trend(recent_burn, historical_burn),
        confidence=min(100.0, 50.0 + len(valid) * 2),
        micro_actions=generate_micro_actions(recent_burn, runway, expenses_in_window(valid, now, window_days)),
    )
