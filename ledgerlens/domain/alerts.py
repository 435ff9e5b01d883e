"""Alert rules and priority aggregation"""

import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ledgerlens.domain.models import (
    Alert,
    AlertKind,
    Direction,
    Finite,
    Goal,
    Pattern,
    Priority,
    Runway,
)

PRIORITY_RANK: Dict[Priority, int] = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}

ALERT_HORIZON_DAYS = 30
MIN_STREAK_DAYS = 3
LONG_STREAK_DAYS = 7
INCOME_DIP_PERCENT = 20.0
SEVERE_DIP_PERCENT = 50.0
SPIKE_PERCENT = 50.0
SEVERE_SPIKE_PERCENT = 100.0
MIN_SPIKE_AMOUNT = 1.0
GOAL_MILESTONE_PERCENT = 50.0
GOAL_NEAR_PERCENT = 90.0


def priority_for_days(days: int) -> Priority:
    """Sooner deadlines are more urgent: <=3 critical, <=7 high, <=14 medium, else low"""
    if days <= 3:
        return Priority.CRITICAL
    if days <= 7:
        return Priority.HIGH
    if days <= 14:
        return Priority.MEDIUM
    return Priority.LOW


def _expires(now: datetime, days: float) -> datetime:
    return now + timedelta(days=max(1.0, days))


def rent_risk_alert(
    rent_amount: float,
    days_until_due: int,
    balance: float,
    daily_burn_rate: float,
    now: datetime,
) -> Optional[Alert]:
    """Balance projected to the due date cannot cover the obligation"""
    if days_until_due > ALERT_HORIZON_DAYS or rent_amount <= 0:
        return None

    projected_balance = balance - daily_burn_rate * max(0, days_until_due)
    shortfall = rent_amount - projected_balance
    if shortfall <= 0:
        return None

    per_day = math.ceil(shortfall / max(1, days_until_due))
    return Alert(
        kind=AlertKind.RENT_RISK,
        priority=priority_for_days(days_until_due),
        title=f"Rent Shortfall: {round(shortfall)}",
        description=(
            f"Your rent of {round(rent_amount)} is due in {days_until_due} days. "
            f"You'll be short by {round(shortfall)}."
        ),
        actions=[
            f"Add {per_day}/day to Rent Jar",
            "Reduce discretionary spending",
            "Accelerate income collection",
        ],
        impact=f"Rent payment at risk in {days_until_due} days",
        confidence=85.0,
        created_at=now,
        expires_at=_expires(now, days_until_due),
    )


def overspending_alert(
    daily_spend: float,
    daily_limit: float,
    days_over_limit: int,
    now: datetime,
) -> Optional[Alert]:
    if daily_spend <= daily_limit or days_over_limit < MIN_STREAK_DAYS:
        return None

    excess = daily_spend - daily_limit
    return Alert(
        kind=AlertKind.OVERSPENDING,
        priority=Priority.HIGH if days_over_limit >= LONG_STREAK_DAYS else Priority.MEDIUM,
        title="Overspending Detected",
        description=f"You've been spending {round(excess)}/day above your limit for {days_over_limit} days.",
        actions=[
            "Review recent transactions",
            "Adjust daily limit",
            "Pause subscriptions",
        ],
        impact=f"{round(excess * 30)}/month excess spending",
        confidence=90.0,
        created_at=now,
        expires_at=_expires(now, 7),
    )


def cash_runout_alert(runway: Runway, daily_burn_rate: float, now: datetime) -> Optional[Alert]:
    """Only finite runways of 30 days or less are worth an alert"""
    if not isinstance(runway, Finite) or runway.days > ALERT_HORIZON_DAYS:
        return None

    return Alert(
        kind=AlertKind.CASH_RUNOUT,
        priority=priority_for_days(runway.days),
        title=f"Cash Runout in {runway.days} Days",
        description=f"At current spending, you'll run out of money in {runway.days} days ({runway.date.isoformat()}).",
        actions=[
            f"Reduce daily spending by {round(daily_burn_rate * 0.2)}",
            "Accelerate income",
            "Pause non-essential expenses",
        ],
        impact=f"Zero balance projected in {runway.days} days",
        confidence=88.0,
        created_at=now,
        expires_at=_expires(now, runway.days),
    )


def income_dip_alert(
    expected_income: float,
    projected_income: float,
    days_until_expected: int,
    now: datetime,
) -> Optional[Alert]:
    if expected_income <= 0:
        return None

    dip = expected_income - projected_income
    dip_percent = dip / expected_income * 100
    if dip_percent < INCOME_DIP_PERCENT:
        return None

    return Alert(
        kind=AlertKind.INCOME_DIP,
        priority=Priority.HIGH if dip_percent >= SEVERE_DIP_PERCENT else Priority.MEDIUM,
        title=f"Income Dip Alert: -{round(dip)}",
        description=(
            f"Your income is projected to dip by {round(dip_percent)}% "
            f"in the next {days_until_expected} days."
        ),
        actions=[
            "Review income sources",
            "Reduce spending",
            "Explore additional income",
        ],
        impact=f"{round(dip)} less income expected",
        confidence=75.0,
        created_at=now,
        expires_at=_expires(now, days_until_expected),
    )


def spending_spike_alert(current_day_spend: float, average_day_spend: float, now: datetime) -> Optional[Alert]:
    above = current_day_spend - average_day_spend
    spike_percent = above / max(1.0, average_day_spend) * 100
    if spike_percent < SPIKE_PERCENT or above < MIN_SPIKE_AMOUNT:
        return None

    return Alert(
        kind=AlertKind.SPENDING_SPIKE,
        priority=Priority.HIGH if spike_percent >= SEVERE_SPIKE_PERCENT else Priority.MEDIUM,
        title=f"Spending Spike: +{round(above)}",
        description=f"Today's spending is {round(spike_percent)}% above your average.",
        actions=[
            "Review today's transactions",
            "Check for unusual charges",
            "Adjust tomorrow's budget",
        ],
        impact=f"{round(above)} above average",
        confidence=85.0,
        created_at=now,
        expires_at=_expires(now, 1),
    )


def goal_milestone_alert(goal: Goal, now: datetime) -> Optional[Alert]:
    if goal.target <= 0:
        return None

    percentage = goal.saved / goal.target * 100
    if percentage < GOAL_MILESTONE_PERCENT:
        return None

    return Alert(
        kind=AlertKind.GOAL_MILESTONE,
        priority=Priority.HIGH if percentage >= GOAL_NEAR_PERCENT else Priority.MEDIUM,
        title=f"{goal.name}: {round(percentage)}% Complete",
        description=f"You're {round(percentage)}% towards your goal of {round(goal.target)}.",
        actions=[
            "View goal details",
            "Increase monthly savings",
            "Celebrate progress",
        ],
        impact=f"{round(percentage)}% progress on {goal.name}",
        confidence=95.0,
        created_at=now,
        expires_at=_expires(now, goal.days_remaining),
    )


def subscription_alert(name: str, amount: float, frequency: str, now: datetime) -> Alert:
    return Alert(
        kind=AlertKind.SUBSCRIPTION,
        priority=Priority.LOW,
        title=f"Subscription: {name}",
        description=f"Your {frequency} subscription to {name} costs {round(amount)}.",
        actions=[
            "Review subscription",
            "Cancel if unused",
            "Downgrade plan",
        ],
        impact=f"{round(amount)} {frequency} expense",
        confidence=90.0,
        created_at=now,
        expires_at=_expires(now, 30),
    )


def subscription_alerts(patterns: Iterable[Pattern], now: datetime) -> List[Alert]:
    """One notice per recurring expense pattern"""
    return [
        subscription_alert(p.group_key.name, p.average_amount, p.frequency_class.value, now)
        for p in patterns
        if p.direction == Direction.EXPENSE and p.is_recurring
    ]


def opportunity_alert(title: str, description: str, potential_savings: float, now: datetime) -> Alert:
    return Alert(
        kind=AlertKind.OPPORTUNITY,
        priority=Priority.LOW,
        title=title,
        description=description,
        actions=["Learn more", "Take action"],
        impact=f"Potential savings: {round(potential_savings)}",
        confidence=80.0,
        created_at=now,
        expires_at=_expires(now, 30),
    )


def prioritize_alerts(alerts: Iterable[Optional[Alert]]) -> List[Alert]:
    """
    Aggregate rule output into the list shown to the user.

    - None results are dropped
    - repeated (kind, title) pairs keep only their first occurrence
    - ordered critical, high, medium, low; equal priorities keep input order
    """
    seen: Set[Tuple[AlertKind, str]] = set()
    unique: List[Alert] = []
    for alert in alerts:
        if alert is None:
            continue
        key = (alert.kind, alert.title)
        if key in seen:
            continue
        seen.add(key)
        unique.append(alert)

    # sorted() is stable
    return sorted(unique, key=lambda a: PRIORITY_RANK[a.priority])
