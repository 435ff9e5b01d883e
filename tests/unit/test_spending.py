"""Unit tests for spending analysis"""

import pytest
from ledgerlens.domain.models import Direction
from ledgerlens.domain.spending import (
    analyze_spending,
    consecutive_days_over,
    daily_spend_series,
    peak_days,
    rolling_average,
    spending_insights,
)


def test_daily_series_places_spend_on_calendar_days(make_event, now):
    events = [
        make_event(days_ago=0, amount=100, name="Cafe", direction=Direction.EXPENSE),
        make_event(days_ago=2, amount=50, name="Cafe", direction=Direction.EXPENSE),
        make_event(days_ago=1, amount=9999, name="Employer"),  # income ignored
        make_event(days_ago=10, amount=70, name="Cafe", direction=Direction.EXPENSE),  # before range
    ]

    assert daily_spend_series(events, now, 3) == [50, 0, 100]
    assert daily_spend_series(events, now, 0) == []


@pytest.mark.parametrize(
    "series, limit, expected",
    [
        ([10, 200, 150, 120], 100, 3),
        ([200, 50], 100, 0),
        ([200, 300], 100, 2),
        ([], 100, 0),
        ([100, 100], 100, 0),
    ],
)
def test_consecutive_days_over(series, limit, expected):
    assert consecutive_days_over(series, limit) == expected


def test_rolling_average_excludes_last_day():
    assert rolling_average([100, 200, 900]) == 150
    assert rolling_average([900]) == 0


def test_peak_days_sorted_by_total(make_event):
    # NOW is a Tuesday
    events = [
        make_event(days_ago=0, amount=10, name="A", direction=Direction.EXPENSE),
        make_event(days_ago=7, amount=15, name="A", direction=Direction.EXPENSE),
        make_event(days_ago=1, amount=40, name="A", direction=Direction.EXPENSE),
    ]

    days = peak_days(events)

    assert [(d.day, d.total_spent) for d in days] == [("Monday", 40), ("Tuesday", 25)]


def test_analyze_spending(sample_events, now):
    """Only the trailing 30 days count: 5 grocery runs and one streaming charge"""
    analysis = analyze_spending(sample_events, now)

    assert analysis.total_spent == 5 * 2500 + 499
    assert analysis.average_daily_spend == pytest.approx((5 * 2500 + 499) / 30)
    assert analysis.category_breakdown == {"groceries": 12500, "subscriptions": 499}
    assert all(p.direction == Direction.EXPENSE for p in analysis.patterns)
    assert [p.group_key.name for p in analysis.subscriptions] == ["Supermarket"]
    assert analysis.anomalies == []


def test_analyze_spending_empty(now):
    analysis = analyze_spending([], now)

    assert analysis.total_spent == 0
    assert analysis.average_daily_spend == 0
    assert analysis.patterns == []
    assert spending_insights(analysis) == []


def test_spending_insights(sample_events, now):
    insights = spending_insights(analyze_spending(sample_events, now))

    assert insights[0] == "Top spending: groceries (12500)"
    assert any(line.startswith("Peak spending day:") for line in insights)
    assert "Recurring payments: 2500 per cycle" in insights
