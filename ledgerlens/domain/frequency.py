"""Frequency classification of irregular event streams"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from ledgerlens.domain.models import FrequencyClass
from ledgerlens.domain.stats import coefficient_of_variation, mean, std_dev
from ledgerlens.utils.date_utils import days_between, step_forward

# Upper bound (inclusive) of average interval in days for each class, checked in order
INTERVAL_THRESHOLDS: List[Tuple[float, FrequencyClass]] = [
    (1.5, FrequencyClass.DAILY),
    (8.0, FrequencyClass.WEEKLY),
    (15.0, FrequencyClass.BIWEEKLY),
    (35.0, FrequencyClass.MONTHLY),
    (120.0, FrequencyClass.QUARTERLY),
]

# Intervals vary too much beyond this to call the stream periodic
IRREGULAR_CV_THRESHOLD = 0.5

# Fixed day counts used when projecting occurrences over a horizon
STEP_DAYS: Dict[FrequencyClass, int] = {
    FrequencyClass.DAILY: 1,
    FrequencyClass.WEEKLY: 7,
    FrequencyClass.BIWEEKLY: 14,
    FrequencyClass.MONTHLY: 30,
    FrequencyClass.QUARTERLY: 90,
    FrequencyClass.ANNUAL: 365,
}

# Calendar steps used for next-expected dates
_CALENDAR_STEPS: Dict[FrequencyClass, Dict[str, int]] = {
    FrequencyClass.DAILY: {"days": 1},
    FrequencyClass.WEEKLY: {"days": 7},
    FrequencyClass.BIWEEKLY: {"days": 14},
    FrequencyClass.MONTHLY: {"months": 1},
    FrequencyClass.QUARTERLY: {"months": 3},
    FrequencyClass.ANNUAL: {"years": 1},
}


def intervals_in_days(timestamps: Sequence[datetime]) -> List[float]:
    """Gaps between consecutive timestamps, in fractional days"""
    ordered = sorted(timestamps)
    return [days_between(a, b) for a, b in zip(ordered, ordered[1:])]


def classify_interval(avg_interval: float) -> FrequencyClass:
    for upper, frequency in INTERVAL_THRESHOLDS:
        if avg_interval <= upper:
            return frequency
    return FrequencyClass.ANNUAL


def classify_frequency(timestamps: Sequence[datetime]) -> FrequencyClass:
    """
    Label how regularly a group of events recurs.

    - fewer than 2 timestamps: irregular (no interval to measure)
    - average interval of zero (all at the same instant): irregular
    - interval coefficient of variation > 0.5: irregular, whatever the average
    - otherwise bucket the average interval via INTERVAL_THRESHOLDS
    """
    intervals = intervals_in_days(timestamps)
    if not intervals:
        return FrequencyClass.IRREGULAR

    avg_interval = mean(intervals)
    if avg_interval <= 0:
        return FrequencyClass.IRREGULAR
    if coefficient_of_variation(avg_interval, std_dev(intervals)) > IRREGULAR_CV_THRESHOLD:
        return FrequencyClass.IRREGULAR

    return classify_interval(avg_interval)


def step_days_for(frequency: FrequencyClass) -> Optional[int]:
    """Projection step in days; None for irregular"""
    return STEP_DAYS.get(frequency)


def next_expected(last_occurrence: datetime, frequency: FrequencyClass) -> Optional[datetime]:
    """Advance by one canonical calendar step; irregular streams have no next date"""
    step = _CALENDAR_STEPS.get(frequency)
    if step is None:
        return None
    return step_forward(last_occurrence, **step)
