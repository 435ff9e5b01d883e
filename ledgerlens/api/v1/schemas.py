"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime, timezone
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ledgerlens.domain.models import (
    Alert,
    AlertKind,
    CashflowSnapshot,
    CashflowTrend,
    Dashboard,
    Direction,
    Finite,
    Forecast,
    FrequencyClass,
    Goal,
    GroupAnomaly,
    GroupKey,
    MicroActionKind,
    MonetaryEvent,
    Obligation,
    Pattern,
    Priority,
    SpendingAnalysis,
    Trend,
)
from ledgerlens.domain.spending import spending_insights


# --- requests ---------------------------------------------------------------


class EventSchema(BaseModel):
    """Normalized money movement"""

    timestamp: datetime
    amount: float = Field(..., ge=0, allow_inf_nan=False, description="Positive magnitude")
    direction: Direction
    group: str = Field(..., min_length=1, description="Income source or merchant")
    category: Optional[str] = None
    tags: List[str] = []

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    def to_domain(self) -> MonetaryEvent:
        return MonetaryEvent(
            timestamp=self.timestamp,
            amount=self.amount,
            direction=self.direction,
            group_key=GroupKey(name=self.group, category=self.category),
            tags=tuple(self.tags),
        )


class ObligationSchema(BaseModel):
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    days_until_due: int
    name: str = ""

    def to_domain(self) -> Obligation:
        return Obligation(amount=self.amount, days_until_due=self.days_until_due, name=self.name)


class GoalSchema(BaseModel):
    name: str = Field(..., min_length=1)
    saved: float = Field(..., ge=0, allow_inf_nan=False)
    target: float = Field(..., gt=0, allow_inf_nan=False)
    days_remaining: int = Field(30, ge=0)

    def to_domain(self) -> Goal:
        return Goal(name=self.name, saved=self.saved, target=self.target, days_remaining=self.days_remaining)


class EventsRequest(BaseModel):
    events: List[EventSchema] = []

    def domain_events(self) -> List[MonetaryEvent]:
        return [e.to_domain() for e in self.events]


class PatternsRequest(EventsRequest):
    """Request body for POST /v1/patterns"""

    direction: Optional[Direction] = None


class ForecastRequest(EventsRequest):
    """Request body for POST /v1/forecast"""

    horizon_days: int = Field(30, ge=0)
    direction: Direction = Direction.INCOME


class AnomaliesRequest(EventsRequest):
    """Request body for POST /v1/anomalies"""

    threshold: float = Field(2.0, gt=0)


class CashflowRequest(EventsRequest):
    """Request body for POST /v1/cashflow"""

    balance: float = Field(..., allow_inf_nan=False)
    obligations: List[ObligationSchema] = []
    safety_buffer_days: Optional[int] = Field(None, ge=0)
    window_days: Optional[int] = Field(None, ge=1)

    def domain_obligations(self) -> List[Obligation]:
        return [o.to_domain() for o in self.obligations]


class DashboardRequest(CashflowRequest):
    """Request body for POST /v1/alerts and POST /v1/dashboard"""

    goals: List[GoalSchema] = []
    daily_limit: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

    def domain_goals(self) -> List[Goal]:
        return [g.to_domain() for g in self.goals]


# --- responses --------------------------------------------------------------


class PatternSchema(BaseModel):
    group_key: str
    category: Optional[str] = None
    direction: Direction
    frequency_class: FrequencyClass
    average_amount: float
    std_dev: float
    confidence: float
    last_occurrence: datetime
    next_expected: Optional[datetime] = None
    sample_count: int
    is_recurring: bool

    @classmethod
    def from_domain(cls, pattern: Pattern) -> "PatternSchema":
        return cls(
            group_key=pattern.group_key.name,
            category=pattern.group_key.category,
            direction=pattern.direction,
            frequency_class=pattern.frequency_class,
            average_amount=pattern.average_amount,
            std_dev=pattern.std_dev,
            confidence=pattern.confidence,
            last_occurrence=pattern.last_occurrence,
            next_expected=pattern.next_expected,
            sample_count=pattern.sample_count,
            is_recurring=pattern.is_recurring,
        )


class ForecastSchema(BaseModel):
    horizon_days: int
    predicted_amount: float
    lower_bound: float
    upper_bound: float
    confidence: float
    trend: Trend
    warnings: List[str] = []

    @classmethod
    def from_domain(cls, forecast: Forecast) -> "ForecastSchema":
        return cls(
            horizon_days=forecast.horizon_days,
            predicted_amount=forecast.predicted_amount,
            lower_bound=forecast.lower_bound,
            upper_bound=forecast.upper_bound,
            confidence=forecast.confidence,
            trend=forecast.trend,
            warnings=forecast.warnings,
        )


class AnomalySchema(BaseModel):
    group_key: str
    category: Optional[str] = None
    direction: Direction
    latest_amount: float
    occurred_at: datetime
    is_anomaly: bool
    z_score: float
    anomaly_score: float

    @classmethod
    def from_domain(cls, anomaly: GroupAnomaly) -> "AnomalySchema":
        return cls(
            group_key=anomaly.group_key.name,
            category=anomaly.group_key.category,
            direction=anomaly.direction,
            latest_amount=anomaly.latest_amount,
            occurred_at=anomaly.occurred_at,
            is_anomaly=anomaly.result.is_anomaly,
            z_score=anomaly.result.z_score,
            anomaly_score=anomaly.result.anomaly_score,
        )


class AnomaliesResponse(BaseModel):
    """Response for POST /v1/anomalies"""

    results: List[AnomalySchema]
    flagged_count: int


class RunwaySchema(BaseModel):
    days: int
    date: date


class MicroActionSchema(BaseModel):
    kind: MicroActionKind
    title: str
    description: str
    impact_days: float
    actions: List[str]


class CashflowSchema(BaseModel):
    balance: float
    daily_burn_rate: float
    safe_to_spend_today: float
    runway: Union[RunwaySchema, Literal["indefinite"]]
    trend: CashflowTrend
    confidence: float
    micro_actions: List[MicroActionSchema] = []

    @classmethod
    def from_domain(cls, snapshot: CashflowSnapshot) -> "CashflowSchema":
        runway: Union[RunwaySchema, Literal["indefinite"]] = "indefinite"
        if isinstance(snapshot.runway, Finite):
            runway = RunwaySchema(days=snapshot.runway.days, date=snapshot.runway.date)

        return cls(
            balance=snapshot.balance,
            daily_burn_rate=snapshot.daily_burn_rate,
            safe_to_spend_today=snapshot.safe_to_spend_today,
            runway=runway,
            trend=snapshot.trend,
            confidence=snapshot.confidence,
            micro_actions=[
                MicroActionSchema(
                    kind=a.kind,
                    title=a.title,
                    description=a.description,
                    impact_days=a.impact_days,
                    actions=a.actions,
                )
                for a in snapshot.micro_actions
            ],
        )


class AlertSchema(BaseModel):
    kind: AlertKind
    priority: Priority
    title: str
    description: str
    actions: List[str]
    impact: str
    confidence: float
    created_at: datetime
    expires_at: datetime

    @classmethod
    def from_domain(cls, alert: Alert) -> "AlertSchema":
        return cls(
            kind=alert.kind,
            priority=alert.priority,
            title=alert.title,
            description=alert.description,
            actions=alert.actions,
            impact=alert.impact,
            confidence=alert.confidence,
            created_at=alert.created_at,
            expires_at=alert.expires_at,
        )


class AlertsResponse(BaseModel):
    """Response for POST /v1/alerts"""

    alerts: List[AlertSchema]


class PeakDaySchema(BaseModel):
    day: str
    total_spent: float


class SpendingSchema(BaseModel):
    total_spent: float
    average_daily_spend: float
    category_breakdown: Dict[str, float]
    peak_days: List[PeakDaySchema]
    subscriptions: List[PatternSchema]
    anomalies: List[AnomalySchema]
    insights: List[str]

    @classmethod
    def from_domain(cls, analysis: SpendingAnalysis, insights: List[str]) -> "SpendingSchema":
        return cls(
            total_spent=analysis.total_spent,
            average_daily_spend=analysis.average_daily_spend,
            category_breakdown=analysis.category_breakdown,
            peak_days=[PeakDaySchema(day=p.day, total_spent=p.total_spent) for p in analysis.peak_days],
            subscriptions=[PatternSchema.from_domain(p) for p in analysis.subscriptions],
            anomalies=[AnomalySchema.from_domain(a) for a in analysis.anomalies],
            insights=insights,
        )


class DashboardResponse(BaseModel):
    """Response for POST /v1/dashboard and GET /v1/users/{user_id}/overview"""

    generated_at: datetime
    patterns: List[PatternSchema]
    income_forecasts: List[ForecastSchema]
    cashflow: CashflowSchema
    spending: SpendingSchema
    alerts: List[AlertSchema]

    @classmethod
    def from_domain(cls, dashboard: Dashboard) -> "DashboardResponse":
        return cls(
            generated_at=dashboard.generated_at,
            patterns=[PatternSchema.from_domain(p) for p in dashboard.patterns],
            income_forecasts=[ForecastSchema.from_domain(f) for f in dashboard.income_forecasts],
            cashflow=CashflowSchema.from_domain(dashboard.cashflow),
            spending=SpendingSchema.from_domain(dashboard.spending, spending_insights(dashboard.spending)),
            alerts=[AlertSchema.from_domain(a) for a in dashboard.alerts],
        )
