"""Z-score anomaly detection against a group's own history"""

from typing import Iterable, List, Sequence

from ledgerlens.domain.models import AnomalyResult, GroupAnomaly, MonetaryEvent
from ledgerlens.domain.patterns import group_events, validate_events
from ledgerlens.domain.stats import mean, std_dev, z_score

MIN_HISTORY = 3
Z_THRESHOLD = 2.0
SCORE_PER_SIGMA = 50.0


def detect_anomaly(history: Sequence[float], newest: float, threshold: float = Z_THRESHOLD) -> AnomalyResult:
    """
    Score `newest` against the distribution of `history` (which excludes it).

    Fewer than MIN_HISTORY samples is not enough evidence: never flagged.
    A flat history (std dev 0) flags any differing value via ZSCORE_SENTINEL.
    """
    if len(history) < MIN_HISTORY:
        return AnomalyResult(is_anomaly=False, z_score=0.0, anomaly_score=0.0, sample_count=len(history))

    z = z_score(newest, mean(history), std_dev(history))

    return AnomalyResult(
        is_anomaly=abs(z) > threshold,
        z_score=z,
        anomaly_score=min(100.0, abs(z) * SCORE_PER_SIGMA),
        sample_count=len(history),
    )


def scan_groups(events: Iterable[MonetaryEvent], threshold: float = Z_THRESHOLD) -> List[GroupAnomaly]:
    """Test the newest event of every group against that group's earlier events"""
    results: List[GroupAnomaly] = []

    for (direction, group_key), bucket in group_events(validate_events(events)).items():
        latest = bucket[-1]
        history = [e.amount for e in bucket[:-1]]
        results.append(
            GroupAnomaly(
                group_key=group_key,
                direction=direction,
                latest_amount=latest.amount,
                occurred_at=latest.timestamp,
                result=detect_anomaly(history, latest.amount, threshold),
            )
        )

    return results


def flagged(results: Iterable[GroupAnomaly]) -> List[GroupAnomaly]:
    return [r for r in results if r.result.is_anomaly]
