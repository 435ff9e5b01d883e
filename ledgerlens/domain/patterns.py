"""Pattern extraction - group monetary events and describe each group's recurrence"""

import math
from typing import Dict, Iterable, List, Optional, Tuple

from ledgerlens.domain.exceptions import InvalidEventDataError
from ledgerlens.domain.frequency import classify_frequency, next_expected
from ledgerlens.domain.models import Direction, GroupKey, MonetaryEvent, Pattern
from ledgerlens.domain.ports import EventAdapter
from ledgerlens.domain.stats import coefficient_of_variation, mean, std_dev

GroupId = Tuple[Direction, GroupKey]


def validate_event(event: MonetaryEvent) -> MonetaryEvent:
    """
    Reject events that break the ingestion contract.

    Raises:
        InvalidEventDataError: amount is NaN, infinite or negative, or direction is unknown
    """
    if not isinstance(event.direction, Direction):
        raise InvalidEventDataError(f"Unknown direction {event.direction!r} for {event.group_key.label()}")
    if math.isnan(event.amount) or math.isinf(event.amount):
        raise InvalidEventDataError(f"Non-finite amount for {event.group_key.label()}")
    if event.amount < 0:
        raise InvalidEventDataError(
            f"Negative amount {event.amount} for {event.group_key.label()}; amounts are magnitudes"
        )
    return event


def validate_events(events: Iterable[MonetaryEvent]) -> List[MonetaryEvent]:
    return [validate_event(e) for e in events]


def adapt_events(raw_texts: Iterable[str], adapter: EventAdapter) -> List[MonetaryEvent]:
    """
    Run free-text inputs through an adapter's parse -> validate -> enrich steps.

    Texts the adapter cannot parse, or whose event it rejects, are skipped.
    Enriched events still pass validate_event before they are returned.
    """
    events: List[MonetaryEvent] = []
    for text in raw_texts:
        event = adapter.parse(text)
        if event is None or not adapter.validate(event):
            continue
        events.append(validate_event(adapter.enrich(event)))
    return events


def group_events(events: Iterable[MonetaryEvent]) -> Dict[GroupId, List[MonetaryEvent]]:
    """Bucket events by (direction, key), each bucket sorted by timestamp"""
    groups: Dict[GroupId, List[MonetaryEvent]] = {}
    for event in events:
        groups.setdefault((event.direction, event.group_key), []).append(event)

    for bucket in groups.values():
        bucket.sort(key=lambda e: e.timestamp)
    return groups


def confidence_from_amounts(amounts: List[float]) -> float:
    """100 for perfectly consistent amounts, falling linearly with the coefficient of variation"""
    cv = coefficient_of_variation(mean(amounts), std_dev(amounts))
    return max(0.0, min(100.0, 100.0 - cv * 100.0))


def build_pattern(direction: Direction, group_key: GroupKey, events: List[MonetaryEvent]) -> Pattern:
    """Describe one non-empty, time-sorted group"""
    amounts = [e.amount for e in events]
    frequency = classify_frequency([e.timestamp for e in events])
    last_occurrence = events[-1].timestamp

    return Pattern(
        group_key=group_key,
        direction=direction,
        frequency_class=frequency,
        average_amount=mean(amounts),
        std_dev=std_dev(amounts),
        confidence=confidence_from_amounts(amounts),
        last_occurrence=last_occurrence,
        next_expected=next_expected(last_occurrence, frequency),
        sample_count=len(events),
        total_amount=sum(amounts),
    )


def extract_patterns(
    events: Iterable[MonetaryEvent],
    direction: Optional[Direction] = None,
) -> List[Pattern]:
    """
    Produce one Pattern per (direction, group key).

    Patterns are ordered by last occurrence (oldest first), so the tail of the
    list holds the most recently active groups. Pass `direction` to restrict
    the analysis to income or expense events.
    """
    valid = validate_events(events)
    if direction is not None:
        valid = [e for e in valid if e.direction == direction]

    patterns = [
        build_pattern(group_direction, group_key, bucket)
        for (group_direction, group_key), bucket in group_events(valid).items()
    ]
    patterns.sort(key=lambda p: p.last_occurrence)
    return patterns
