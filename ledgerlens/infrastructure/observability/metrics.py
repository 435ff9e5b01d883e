"""Prometheus metrics for monitoring analysis volume, alert mix and event-source health"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from ledgerlens.domain.models import Alert

# Analysis metrics
analysis_counter = Counter(
    "ledgerlens_analysis_total",
    "Total analyses computed",
    ["operation"],  # patterns | forecast | anomalies | cashflow | alerts | dashboard | overview
)

alerts_counter = Counter(
    "ledgerlens_alerts_total",
    "Alerts emitted after prioritization",
    ["kind", "priority"],
)

anomalies_counter = Counter(
    "ledgerlens_anomalies_total",
    "Groups whose newest event was flagged as anomalous",
)

# Event source metrics
event_source_failures_counter = Counter(
    "event_source_failures_total",
    "Failed event source calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(operation: str) -> None:
    analysis_counter.labels(operation=operation).inc()


def record_alerts(alerts: Iterable[Alert]) -> None:
    """Record alert metrics for monitoring which rules fire and how urgently"""
    for alert in alerts:
        alerts_counter.labels(kind=alert.kind.value, priority=alert.priority.value).inc()
