"""Unit tests for date utilities and clocks"""

from datetime import date, datetime, timezone
from ledgerlens.infrastructure.clock import FixedClock, SystemClock
from ledgerlens.utils.date_utils import days_between, generate_date_range, step_forward


def test_generate_date_range_inclusive():
    days = generate_date_range(date(2026, 2, 27), date(2026, 3, 2))

    assert days == [date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1), date(2026, 3, 2)]
    assert generate_date_range(date(2026, 3, 2), date(2026, 3, 1)) == []


def test_days_between_is_fractional():
    assert days_between(datetime(2026, 1, 1), datetime(2026, 1, 2, 12)) == 1.5


def test_step_forward_clamps_month_end():
    assert step_forward(datetime(2026, 1, 31), months=1) == datetime(2026, 2, 28)
    assert step_forward(datetime(2024, 2, 29), years=1) == datetime(2025, 2, 28)
    assert step_forward(datetime(2026, 1, 31), days=7) == datetime(2026, 2, 7)


def test_clocks():
    instant = datetime(2026, 3, 31, tzinfo=timezone.utc)

    assert FixedClock(instant).now() == instant
    assert SystemClock().now().tzinfo is not None
