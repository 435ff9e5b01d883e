"""Forecast projection from recurring patterns"""

import math
from datetime import datetime
from typing import List, Sequence

from ledgerlens.domain.exceptions import InvalidInputError
from ledgerlens.domain.frequency import step_days_for
from ledgerlens.domain.models import Forecast, Pattern, Trend
from ledgerlens.domain.stats import mean
from ledgerlens.utils.date_utils import days_between

Z_95 = 1.96
LOW_CONFIDENCE = 50.0
TREND_WINDOW = 3
TREND_UP = 1.10
TREND_DOWN = 0.90
DIP_GAP_DAYS = 30
STANDARD_HORIZONS = (7, 30, 90)


def occurrences_within(pattern: Pattern, horizon_days: int) -> int:
    """Whole occurrences of the pattern inside the horizon; irregular patterns contribute none"""
    step = step_days_for(pattern.frequency_class)
    if step is None:
        return 0
    return horizon_days // step


def classify_trend(patterns: Sequence[Pattern]) -> Trend:
    """
    Compare the average amount of the most recent patterns with all patterns.

    Patterns are expected oldest-first (as returned by extract_patterns).
    """
    if not patterns:
        return Trend.STABLE

    avg_recent = mean([p.average_amount for p in patterns[-TREND_WINDOW:]])
    avg_all = mean([p.average_amount for p in patterns])

    if avg_recent > avg_all * TREND_UP:
        return Trend.INCREASING
    if avg_recent < avg_all * TREND_DOWN:
        return Trend.DECREASING
    return Trend.STABLE


def forecast(patterns: Sequence[Pattern], horizon_days: int) -> Forecast:
    """
    Project the aggregate amount the patterns produce over `horizon_days`.

    Each pattern adds average_amount per occurrence and std_dev**2 per occurrence
    to the running variance; the interval is +/- 1.96 standard deviations of that
    sum, floored at zero.
    """
    if horizon_days < 0:
        raise InvalidInputError(f"horizon_days must be >= 0, got {horizon_days}")

    predicted = 0.0
    variance_accum = 0.0
    warnings: List[str] = []

    for pattern in patterns:
        occurrences = occurrences_within(pattern, horizon_days)
        predicted += pattern.average_amount * occurrences
        variance_accum += pattern.std_dev ** 2 * occurrences

        if occurrences > 0 and pattern.confidence < LOW_CONFIDENCE:
            warnings.append(
                f"Low confidence {pattern.frequency_class.value} amounts from {pattern.group_key.label()}"
            )

    margin = Z_95 * math.sqrt(variance_accum)

    return Forecast(
        horizon_days=horizon_days,
        predicted_amount=predicted,
        lower_bound=max(0.0, predicted - margin),
        upper_bound=predicted + margin,
        confidence=mean([p.confidence for p in patterns]),
        trend=classify_trend(patterns),
        pattern_count=len(patterns),
        warnings=warnings,
    )


def forecast_horizons(patterns: Sequence[Pattern], horizons: Sequence[int] = STANDARD_HORIZONS) -> List[Forecast]:
    return [forecast(patterns, horizon) for horizon in horizons]


def detect_income_dips(patterns: Sequence[Pattern], now: datetime) -> List[str]:
    """Warning lines for income streams that are unreliable or far from their next payment"""
    dips: List[str] = []
    for pattern in patterns:
        if pattern.confidence < LOW_CONFIDENCE:
            dips.append(
                f"Uncertain income from {pattern.group_key.label()} "
                f"({pattern.frequency_class.value}) - may dip"
            )

        if pattern.next_expected is None:
            continue
        days_until_next = days_between(now, pattern.next_expected)
        if days_until_next > DIP_GAP_DAYS:
            dips.append(f"No income expected from {pattern.group_key.label()} for {round(days_until_next)} days")

    return dips
