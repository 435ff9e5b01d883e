"""Collaborator interfaces the analytics core consumes but never implements"""

from datetime import datetime
from typing import List, Optional, Protocol

from ledgerlens.domain.models import MonetaryEvent, Obligation


class Clock(Protocol):
    def now(self) -> datetime: ...


class EventSource(Protocol):
    async def get_events(self, user_id: str, window_days: int) -> List[MonetaryEvent]: ...

    async def get_balance(self, user_id: str) -> float: ...


class ObligationSource(Protocol):
    async def get_obligations(self, user_id: str) -> List[Obligation]: ...


class EventAdapter(Protocol):
    """
    Boundary between free text (SMS, voice notes) and the core.

    parse -> validate -> enrich run in that order; only events that pass
    validate are handed to the core.
    """

    def parse(self, raw_text: str) -> Optional[MonetaryEvent]: ...

    def validate(self, event: MonetaryEvent) -> bool: ...

    def enrich(self, event: MonetaryEvent) -> MonetaryEvent: ...
