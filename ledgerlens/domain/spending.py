"""Spending analysis by merchant, category and weekday"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Sequence

from ledgerlens.domain.anomaly import flagged, scan_groups
from ledgerlens.domain.cashflow import expenses_in_window, spending_by_category
from ledgerlens.domain.models import Direction, MonetaryEvent, PeakDay, SpendingAnalysis
from ledgerlens.domain.patterns import extract_patterns, validate_events
from ledgerlens.domain.stats import mean
from ledgerlens.utils.date_utils import generate_date_range

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def peak_days(events: Iterable[MonetaryEvent]) -> List[PeakDay]:
    """Spend per weekday, largest first"""
    by_day: Dict[str, float] = {}
    for event in events:
        name = DAY_NAMES[event.timestamp.weekday()]
        by_day[name] = by_day.get(name, 0.0) + event.amount

    return sorted(
        (PeakDay(day=day, total_spent=total) for day, total in by_day.items()),
        key=lambda p: p.total_spent,
        reverse=True,
    )


def daily_spend_series(events: Iterable[MonetaryEvent], now: datetime, days: int) -> List[float]:
    """Expense totals per calendar day for the `days` days ending today, oldest first"""
    if days <= 0:
        return []
    end = now.date()
    totals = {day: 0.0 for day in generate_date_range(end - timedelta(days=days - 1), end)}
    for event in events:
        day = event.timestamp.date()
        if event.direction == Direction.EXPENSE and day in totals:
            totals[day] += event.amount
    return list(totals.values())


def consecutive_days_over(series: Sequence[float], limit: float) -> int:
    """Length of the run of days above `limit` ending at the last day of the series"""
    streak = 0
    for amount in reversed(series):
        if amount <= limit:
            break
        streak += 1
    return streak


def analyze_spending(
    events: Iterable[MonetaryEvent],
    now: datetime,
    window_days: int = 30,
) -> SpendingAnalysis:
    """Comprehensive view of expenses in the trailing window ending at `now`"""
    recent = expenses_in_window(validate_events(events), now, window_days)
    patterns = extract_patterns(recent, direction=Direction.EXPENSE)
    total = sum(e.amount for e in recent)

    return SpendingAnalysis(
        patterns=patterns,
        anomalies=flagged(scan_groups(recent)),
        subscriptions=[p for p in patterns if p.is_recurring],
        category_breakdown=spending_by_category(recent),
        peak_days=peak_days(recent),
        total_spent=total,
        average_daily_spend=total / max(1, window_days),
    )


def spending_insights(analysis: SpendingAnalysis) -> List[str]:
    insights: List[str] = []

    if analysis.category_breakdown:
        category, amount = max(analysis.category_breakdown.items(), key=lambda kv: kv[1])
        insights.append(f"Top spending: {category} ({round(amount)})")

    if analysis.peak_days:
        peak = analysis.peak_days[0]
        insights.append(f"Peak spending day: {peak.day} ({round(peak.total_spent)})")

    if analysis.subscriptions:
        recurring = sum(p.average_amount for p in analysis.subscriptions)
        insights.append(f"Recurring payments: {round(recurring)} per cycle")

    if analysis.anomalies:
        insights.append(f"{len(analysis.anomalies)} unusual transactions detected")

    return insights


def rolling_average(series: Sequence[float]) -> float:
    """Average of all days except the last, which is the day under test"""
    return mean(series[:-1])
