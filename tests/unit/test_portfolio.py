"""Unit tests for portfolio health metrics"""

import pytest
from ledgerlens.domain.portfolio import calculate_health_metrics, health_insights, period_returns, volatility


def test_period_returns_skip_zero_start():
    assert period_returns([0, 100, 150]) == [0.5]
    assert period_returns([100]) == []


def test_volatility_from_returns():
    """Returns of +10% then -10% have a population std of 10%"""
    assert volatility([100, 110, 99]) == pytest.approx(10)
    assert volatility([100, 100, 100]) == 0
    assert volatility([]) == 0


def test_health_metrics():
    metrics = calculate_health_metrics(
        income=100000,
        expenses=60000,
        savings=30000,
        debt=20000,
        assets=55000,
        invested=50000,
        value_history=[100, 110, 99],
    )

    assert metrics.savings_rate == pytest.approx(30)
    assert metrics.debt_to_income_ratio == 0.2
    assert metrics.emergency_fund_months == 6
    assert metrics.investment_return == pytest.approx(10)
    assert metrics.portfolio_volatility == pytest.approx(10)
    assert metrics.risk_score == pytest.approx(20)
    assert metrics.opportunity_score == pytest.approx(55)
    assert health_insights(metrics) == []


def test_health_metrics_zero_inputs_do_not_divide_by_zero():
    metrics = calculate_health_metrics(0, 0, 0, 0, 0, 0)

    assert metrics.savings_rate == 0
    assert metrics.investment_return == 0
    assert metrics.portfolio_volatility == 0


def test_struggling_household_insights():
    metrics = calculate_health_metrics(
        income=50000,
        expenses=48000,
        savings=2000,
        debt=60000,
        assets=10000,
        invested=10000,
    )

    insights = health_insights(metrics)

    assert any("savings rate" in line for line in insights)
    assert any("debt-to-income" in line for line in insights)
    assert any("emergency fund" in line for line in insights)
