"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from ledgerlens.domain.ports import Clock, EventSource, ObligationSource
from ledgerlens.infrastructure.clients.events import EventSourceClient
from ledgerlens.infrastructure.clock import SystemClock


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> Clock:
    """Provide the clock every analysis reads "now" from"""
    return SystemClock()


def get_event_source_client() -> EventSource:
    """Provide event source client instance"""
    return EventSourceClient()


def get_obligation_source() -> ObligationSource:
    """Obligations are served by the same persistence service as events"""
    return EventSourceClient()
