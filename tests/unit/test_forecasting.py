"""Unit tests for forecast projection"""

import pytest
from datetime import datetime, timedelta
from ledgerlens.domain.exceptions import InvalidInputError
from ledgerlens.domain.forecasting import detect_income_dips, forecast, forecast_horizons
from ledgerlens.domain.frequency import next_expected
from ledgerlens.domain.models import Direction, FrequencyClass, GroupKey, Pattern, Trend


NOW = datetime(2026, 3, 31, 12, 0)


def _pattern(
    frequency: FrequencyClass,
    average: float,
    std: float = 0.0,
    confidence: float = 100.0,
    name: str = "Employer",
    last: datetime = NOW,
) -> Pattern:
    return Pattern(
        group_key=GroupKey(name),
        direction=Direction.INCOME,
        frequency_class=frequency,
        average_amount=average,
        std_dev=std,
        confidence=confidence,
        last_occurrence=last,
        next_expected=next_expected(last, frequency),
        sample_count=4,
        total_amount=average * 4,
    )


@pytest.mark.parametrize("horizon", [0, 7, 30, 365])
def test_no_patterns_zero_forecast(horizon):
    result = forecast([], horizon)

    assert result.predicted_amount == 0
    assert result.confidence == 0
    assert result.lower_bound == 0
    assert result.upper_bound == 0
    assert result.trend == Trend.STABLE


def test_weekly_income_over_thirty_days():
    """floor(30 / 7) = 4 occurrences of 5000"""
    result = forecast([_pattern(FrequencyClass.WEEKLY, 5000)], 30)

    assert result.predicted_amount == 20000
    assert result.lower_bound == 20000
    assert result.upper_bound == 20000
    assert result.confidence == 100


def test_margin_from_accumulated_variance():
    """4 occurrences with std 100: margin = 1.96 * sqrt(4 * 100**2) = 392"""
    result = forecast([_pattern(FrequencyClass.WEEKLY, 5000, std=100)], 30)

    assert result.lower_bound == pytest.approx(20000 - 392)
    assert result.upper_bound == pytest.approx(20000 + 392)


def test_lower_bound_floors_at_zero():
    result = forecast([_pattern(FrequencyClass.DAILY, 10, std=100)], 7)

    assert result.lower_bound == 0
    assert result.upper_bound > result.predicted_amount


@pytest.mark.parametrize("frequency", [f for f in FrequencyClass if f != FrequencyClass.IRREGULAR])
def test_prediction_non_decreasing_with_horizon(frequency):
    pattern = _pattern(frequency, 1200, std=300)
    previous = forecast([pattern], 0)

    for horizon in range(1, 400, 3):
        current = forecast([pattern], horizon)
        assert current.predicted_amount >= previous.predicted_amount
        assert current.upper_bound >= previous.upper_bound
        previous = current


def test_bounds_bracket_prediction():
    patterns = [
        _pattern(FrequencyClass.WEEKLY, 800, std=250, confidence=60),
        _pattern(FrequencyClass.MONTHLY, 30000, std=4000, confidence=85),
        _pattern(FrequencyClass.IRREGULAR, 5000, std=5000, confidence=0),
    ]

    for horizon in (0, 1, 7, 14, 30, 90, 365):
        result = forecast(patterns, horizon)
        assert result.lower_bound <= result.predicted_amount <= result.upper_bound


def test_irregular_patterns_contribute_nothing():
    result = forecast([_pattern(FrequencyClass.IRREGULAR, 9000, std=10)], 365)

    assert result.predicted_amount == 0
    assert result.upper_bound == 0
    assert result.confidence == 100  # still counted in the confidence average


def test_confidence_is_mean_of_patterns():
    patterns = [
        _pattern(FrequencyClass.WEEKLY, 100, confidence=80),
        _pattern(FrequencyClass.MONTHLY, 100, confidence=40),
    ]

    assert forecast(patterns, 30).confidence == 60


def test_trend_increasing():
    patterns = [_pattern(FrequencyClass.MONTHLY, 100)] * 4 + [_pattern(FrequencyClass.MONTHLY, 400)] * 3

    assert forecast(patterns, 30).trend == Trend.INCREASING


def test_trend_decreasing():
    patterns = [_pattern(FrequencyClass.MONTHLY, 400)] * 3 + [_pattern(FrequencyClass.MONTHLY, 100)] * 3

    assert forecast(patterns, 30).trend == Trend.DECREASING


def test_trend_stable_within_ten_percent():
    patterns = [_pattern(FrequencyClass.MONTHLY, 100)] * 3 + [_pattern(FrequencyClass.MONTHLY, 105)] * 3

    assert forecast(patterns, 30).trend == Trend.STABLE


def test_negative_horizon_rejected():
    with pytest.raises(InvalidInputError):
        forecast([], -1)


def test_low_confidence_warning():
    result = forecast([_pattern(FrequencyClass.WEEKLY, 100, confidence=30, name="Gig app")], 30)

    assert len(result.warnings) == 1
    assert "Gig app" in result.warnings[0]


def test_standard_horizons():
    results = forecast_horizons([_pattern(FrequencyClass.MONTHLY, 50000)])

    assert [r.horizon_days for r in results] == [7, 30, 90]
    assert [r.predicted_amount for r in results] == [0, 50000, 150000]


def test_income_dips_flag_uncertain_and_distant_income():
    uncertain = _pattern(FrequencyClass.WEEKLY, 100, confidence=30, name="Gig app")
    distant = _pattern(FrequencyClass.QUARTERLY, 9000, name="Dividends", last=NOW - timedelta(days=30))
    healthy = _pattern(FrequencyClass.MONTHLY, 50000, name="Employer")

    dips = detect_income_dips([uncertain, distant, healthy], NOW)

    assert len(dips) == 2
    assert any("Gig app" in d and "may dip" in d for d in dips)
    assert any("Dividends" in d for d in dips)


def test_warnings_only_for_contributing_patterns():
    irregular = _pattern(FrequencyClass.IRREGULAR, 100, confidence=10, name="Odd jobs")
    quarterly = _pattern(FrequencyClass.QUARTERLY, 100, confidence=10, name="Royalties")

    assert forecast([irregular, quarterly], 30).warnings == []
    assert len(forecast([irregular, quarterly], 90).warnings) == 1
