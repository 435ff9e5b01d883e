"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional
from fastapi.testclient import TestClient
from ledgerlens.api.main import create_app
from ledgerlens.api.dependencies import get_clock
from ledgerlens.domain.models import Direction, GroupKey, MonetaryEvent
from ledgerlens.infrastructure.clock import FixedClock


NOW = datetime(2026, 3, 31, 12, 0, tzinfo=timezone.utc)

EventFactory = Callable[..., MonetaryEvent]


@pytest.fixture
def now() -> datetime:
    """Fixed instant every test treats as "now" """
    return NOW


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with a frozen clock"""
    app = create_app()
    app.dependency_overrides[get_clock] = lambda: FixedClock(NOW)
    return TestClient(app)


@pytest.fixture
def make_event() -> EventFactory:
    """Build an event `days_ago` days before NOW"""

    def _make(
        days_ago: float,
        amount: float,
        name: str = "Employer",
        direction: Direction = Direction.INCOME,
        category: Optional[str] = None,
    ) -> MonetaryEvent:
        return MonetaryEvent(
            timestamp=NOW - timedelta(days=days_ago),
            amount=amount,
            direction=direction,
            group_key=GroupKey(name=name, category=category),
        )

    return _make


@pytest.fixture
def sample_events(make_event: EventFactory) -> List[MonetaryEvent]:
    """Three months of history: monthly salary, weekly groceries, monthly streaming"""
    events = []

    # Monthly salary
    for month in range(3):
        events.append(make_event(days_ago=5 + month * 30, amount=50000))

    # Weekly groceries
    for week in range(12):
        events.append(
            make_event(
                days_ago=1 + week * 7,
                amount=2500,
                name="Supermarket",
                direction=Direction.EXPENSE,
                category="groceries",
            )
        )

    # Monthly streaming subscription
    for month in range(3):
        events.append(
            make_event(
                days_ago=10 + month * 30,
                amount=499,
                name="Netflix",
                direction=Direction.EXPENSE,
                category="subscriptions",
            )
        )

    return events


def event_payload(event: MonetaryEvent) -> dict:
    return {
        "timestamp": event.timestamp.isoformat(),
        "amount": event.amount,
        "direction": event.direction.value,
        "group": event.group_key.name,
        "category": event.group_key.category,
    }


@pytest.fixture
def to_payload() -> Callable[[MonetaryEvent], dict]:
    """Serialize a domain event the way API callers send it"""
    return event_payload
