"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import List

from dateutil.relativedelta import relativedelta

SECONDS_PER_DAY = 86_400


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_between(earlier: datetime, later: datetime) -> float:
    """Fractional days from `earlier` to `later`"""
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


def step_forward(moment: datetime, days: int = 0, months: int = 0, years: int = 0) -> datetime:
    """
    Advance by a calendar step.

    Month and year steps clamp to the last valid day (Jan 31 + 1 month = Feb 28/29).
    """
    if months or years:
        return moment + relativedelta(months=months, years=years, days=days)
    return moment + timedelta(days=days)
