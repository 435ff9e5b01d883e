"""Domain models - pure Python dataclasses representing analytics inputs and outputs"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class Direction(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class FrequencyClass(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"
    IRREGULAR = "irregular"


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class CashflowTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AlertKind(str, Enum):
    RENT_RISK = "rent_risk"
    OVERSPENDING = "overspending"
    CASH_RUNOUT = "cash_runout"
    GOAL_MILESTONE = "goal_milestone"
    INCOME_DIP = "income_dip"
    SPENDING_SPIKE = "spending_spike"
    SUBSCRIPTION = "subscription"
    OPPORTUNITY = "opportunity"


class MicroActionKind(str, Enum):
    CRITICAL = "critical"
    OPTIMIZATION = "optimization"
    OPPORTUNITY = "opportunity"


@dataclass(frozen=True)
class GroupKey:
    """Composite grouping key: income source, or merchant + category for spending"""

    name: str
    category: Optional[str] = None

    def label(self) -> str:
        return f"{self.name} ({self.category})" if self.category else self.name


@dataclass(frozen=True)
class MonetaryEvent:
    """Normalized money movement handed to the core by the ingestion layer"""

    timestamp: datetime
    amount: float  # positive magnitude
    direction: Direction
    group_key: GroupKey
    tags: Tuple[str, ...] = ()

    @property
    def category(self) -> Optional[str]:
        return self.group_key.category


@dataclass
class Pattern:
    """Recurrence and amount statistics for one group of events"""

    group_key: GroupKey
    direction: Direction
    frequency_class: FrequencyClass
    average_amount: float
    std_dev: float
    confidence: float  # 0-100
    last_occurrence: datetime
    next_expected: Optional[datetime]  # None for irregular groups
    sample_count: int
    total_amount: float

    @property
    def is_recurring(self) -> bool:
        return self.frequency_class != FrequencyClass.IRREGULAR and self.sample_count >= 3


@dataclass
class Forecast:
    """Aggregate projection over a horizon with a 95% interval"""

    horizon_days: int
    predicted_amount: float
    lower_bound: float
    upper_bound: float
    confidence: float
    trend: Trend
    pattern_count: int = 0
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Finite:
    """Balance reaches zero after `days`, on `date`"""

    days: int
    date: date


@dataclass(frozen=True)
class Indefinite:
    """No projected runout (burn rate is zero or negative)"""


Runway = Union[Finite, Indefinite]


@dataclass
class Obligation:
    """Known upcoming payment (rent, EMI, bill)"""

    amount: float
    days_until_due: int
    name: str = ""


@dataclass
class MicroAction:
    """Small concrete step that extends runway"""

    kind: MicroActionKind
    title: str
    description: str
    impact_days: float
    actions: List[str]


@dataclass
class CashflowSnapshot:
    balance: float
    daily_burn_rate: float
    safe_to_spend_today: float
    runway: Runway
    trend: CashflowTrend
    confidence: float = 0.0
    micro_actions: List[MicroAction] = field(default_factory=list)


@dataclass
class AnomalyResult:
    is_anomaly: bool
    z_score: float
    anomaly_score: float  # 0-100
    sample_count: int


@dataclass
class GroupAnomaly:
    """Anomaly verdict for the newest event of a group"""

    group_key: GroupKey
    direction: Direction
    latest_amount: float
    occurred_at: datetime
    result: AnomalyResult


@dataclass
class Alert:
    kind: AlertKind
    priority: Priority
    title: str
    description: str
    actions: List[str]
    impact: str
    confidence: float
    created_at: datetime
    expires_at: datetime


@dataclass
class Goal:
    """Savings goal progress supplied by the calling layer"""

    name: str
    saved: float
    target: float
    days_remaining: int


@dataclass
class PeakDay:
    day: str
    total_spent: float


@dataclass
class SpendingAnalysis:
    patterns: List[Pattern]
    anomalies: List[GroupAnomaly]
    subscriptions: List[Pattern]
    category_breakdown: Dict[str, float]
    peak_days: List[PeakDay]
    total_spent: float
    average_daily_spend: float


@dataclass
class HealthMetrics:
    """Household-level ratios derived from period totals and a value history"""

    savings_rate: float
    debt_to_income_ratio: float
    emergency_fund_months: float
    investment_return: float
    portfolio_volatility: float
    risk_score: float
    opportunity_score: float


@dataclass
class Dashboard:
    generated_at: datetime
    patterns: List[Pattern]
    income_forecasts: List[Forecast]
    cashflow: CashflowSnapshot
    spending: SpendingAnalysis
    alerts: List[Alert]
