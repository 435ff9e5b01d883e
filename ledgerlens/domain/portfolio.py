"""Portfolio volatility and household health metrics"""

from typing import List, Sequence

from ledgerlens.domain.models import HealthMetrics
from ledgerlens.domain.stats import std_dev


def period_returns(values: Sequence[float]) -> List[float]:
    """Fractional change between consecutive values; periods starting at zero are skipped"""
    return [(b - a) / a for a, b in zip(values, values[1:]) if a != 0]


def volatility(values: Sequence[float]) -> float:
    """Population standard deviation of period-over-period returns, in percent"""
    return std_dev(period_returns(values)) * 100


def _risk_score(debt_ratio: float, volatility_percent: float) -> float:
    debt_score = min(debt_ratio * 50, 50.0)
    return min(debt_score + volatility_percent, 100.0)


def _opportunity_score(savings_rate: float, investment_return: float) -> float:
    savings_score = min(max(savings_rate, 0.0) * 2, 50.0)
    investment_score = min(max(investment_return, 0.0) / 2, 50.0)
    return savings_score + investment_score


def calculate_health_metrics(
    income: float,
    expenses: float,
    savings: float,
    debt: float,
    assets: float,
    invested: float,
    value_history: Sequence[float] = (),
) -> HealthMetrics:
    """
    Ratios over one year of totals.

    `value_history` is the portfolio value at regular intervals, oldest first;
    its returns drive the volatility and, through it, the risk score.
    """
    income_base = max(1.0, income)
    monthly_expenses = max(1.0, expenses / 12)
    invested_base = max(1.0, invested)

    savings_rate = savings / income_base * 100
    debt_ratio = debt / income_base
    investment_return = (assets - invested) / invested_base * 100
    vol = volatility(value_history)

    return HealthMetrics(
        savings_rate=savings_rate,
        debt_to_income_ratio=debt_ratio,
        emergency_fund_months=savings / monthly_expenses,
        investment_return=investment_return,
        portfolio_volatility=vol,
        risk_score=_risk_score(debt_ratio, vol),
        opportunity_score=_opportunity_score(savings_rate, investment_return),
    )


def health_insights(metrics: HealthMetrics) -> List[str]:
    insights: List[str] = []

    if metrics.savings_rate < 10:
        insights.append("Your savings rate is below 10%. Consider increasing your savings.")
    if metrics.debt_to_income_ratio > 0.5:
        insights.append("Your debt-to-income ratio is high. Focus on debt reduction.")
    if metrics.emergency_fund_months < 3:
        insights.append("Build your emergency fund to cover at least 3-6 months of expenses.")
    if metrics.risk_score > 70:
        insights.append("Your financial risk score is high. Consider diversifying your portfolio.")
    if metrics.opportunity_score > 70:
        insights.append("You have good opportunities for investment and wealth building.")

    return insights
