"""Unit tests for z-score anomaly detection"""

import pytest
from ledgerlens.domain.anomaly import detect_anomaly, flagged, scan_groups
from ledgerlens.domain.models import Direction


def test_insufficient_history_never_flags():
    result = detect_anomaly([100, 100], 1_000_000)

    assert result.is_anomaly is False
    assert result.anomaly_score == 0
    assert result.sample_count == 2


@pytest.mark.parametrize("size", [3, 5, 12])
def test_uniform_series_never_flags(size):
    result = detect_anomaly([250.0] * size, 250.0)

    assert result.is_anomaly is False
    assert result.z_score == 0


@pytest.mark.parametrize("size", [5, 6, 10, 30])
@pytest.mark.parametrize("jump", [0.01, 1, 500])
def test_value_off_a_flat_series_always_flags(size, jump):
    """Flat history has std 0, so anything above mean + 3 * 0 is flagged"""
    result = detect_anomaly([100.0] * size, 100.0 + jump)

    assert result.is_anomaly is True
    assert result.anomaly_score == 100


def test_spread_history():
    """History mean 100, std sqrt(50)"""
    history = [100, 110, 90, 105, 95]

    spike = detect_anomaly(history, 130)
    assert spike.is_anomaly is True
    assert spike.z_score == pytest.approx(30 / 50 ** 0.5)
    assert spike.anomaly_score == 100

    normal = detect_anomaly(history, 105)
    assert normal.is_anomaly is False
    assert normal.anomaly_score == pytest.approx(5 / 50 ** 0.5 * 50)

    drop = detect_anomaly(history, 70)
    assert drop.is_anomaly is True
    assert drop.z_score < 0


def test_threshold_is_strict():
    """|z| must exceed the threshold, not merely reach it"""
    history = [90, 110, 90, 110]  # mean 100, std 10

    assert detect_anomaly(history, 120).is_anomaly is False
    assert detect_anomaly(history, 120.5).is_anomaly is True
    assert detect_anomaly(history, 120, threshold=1.5).is_anomaly is True


def test_scan_groups_checks_newest_event(make_event):
    events = [
        make_event(days_ago=d, amount=40, name="Cafe", direction=Direction.EXPENSE, category="food")
        for d in (20, 15, 10, 5)
    ]
    events.append(make_event(days_ago=1, amount=400, name="Cafe", direction=Direction.EXPENSE, category="food"))
    events += [make_event(days_ago=d, amount=50000, name="Employer") for d in (65, 35, 5)]

    results = scan_groups(events)

    assert len(results) == 2
    cafe = next(r for r in results if r.group_key.name == "Cafe")
    assert cafe.latest_amount == 400
    assert cafe.result.is_anomaly is True
    assert cafe.result.sample_count == 4

    employer = next(r for r in results if r.group_key.name == "Employer")
    assert employer.result.is_anomaly is False  # only two earlier samples

    assert [r.group_key.name for r in flagged(results)] == ["Cafe"]
