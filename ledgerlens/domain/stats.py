"""Descriptive statistics shared by every analytics component"""

import math
from typing import Sequence

# Returned by z_score when the distribution has no spread but x differs from it.
# Large enough to clear every anomaly threshold and to saturate anomaly scores.
ZSCORE_SENTINEL = 1_000_000.0


def mean(xs: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for empty input"""
    return sum(xs) / max(1, len(xs))


def variance(xs: Sequence[float]) -> float:
    """Population variance; 0.0 for empty input"""
    if not xs:
        return 0.0
    mu = mean(xs)
    return sum((x - mu) ** 2 for x in xs) / max(1, len(xs))


def std_dev(xs: Sequence[float]) -> float:
    return math.sqrt(variance(xs))


def z_score(x: float, mu: float, sigma: float) -> float:
    """
    Standard score of x.

    With sigma == 0 there is no spread to measure against:
    - x == mu        -> 0.0
    - x above / below -> +/- ZSCORE_SENTINEL
    """
    if sigma == 0:
        if x == mu:
            return 0.0
        return ZSCORE_SENTINEL if x > mu else -ZSCORE_SENTINEL
    return (x - mu) / sigma


def coefficient_of_variation(mu: float, sigma: float) -> float:
    """sigma / |mu|; 0.0 when the mean is zero (all-zero samples have no relative spread)"""
    if mu == 0:
        return 0.0
    return sigma / abs(mu)
