"""Monte Carlo checks that the thresholds control the false-positive rate.

Each path is a running sum of zero-mean bounded increments, compared against
the threshold after every observation; a path is a false positive when it
ever crosses. The crossing rate must stay below `exp(log_eps)`.
"""

from __future__ import annotations

import math

import numpy as np
import pytest
from scipy.stats import binomtest

from martingale_cs import quantile_slop_hi, quantile_slop_lo, threshold, threshold_range

PATHS = 2000
STEPS = 1000
ALPHA = 0.05
MIN_COUNT = 10


def _crossing_count(increments: np.ndarray, widths: np.ndarray) -> int:
    sums = np.cumsum(increments, axis=1)
    return int((sums > widths).any(axis=1).sum())


def _assert_rate_below_alpha(crossings: int) -> None:
    assert crossings / PATHS <= ALPHA
    result = binomtest(crossings, PATHS, ALPHA, alternative="less")
    assert result.pvalue < 1e-3


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20240601)


def test_rademacher_walk_stays_below_threshold(rng: np.random.Generator) -> None:
    increments = rng.integers(0, 2, size=(PATHS, STEPS), dtype=np.int8) * 2 - 1
    widths = np.array(
        [threshold(n, MIN_COUNT, math.log(ALPHA)) for n in range(1, STEPS + 1)]
    )
    _assert_rate_below_alpha(_crossing_count(increments.astype(np.int32), widths))


def test_skewed_walk_stays_below_tight_range_threshold(
    rng: np.random.Generator,
) -> None:
    # 0.1 with probability 0.9, -0.9 with probability 0.1: zero mean.
    rare = rng.random(size=(PATHS, STEPS)) < 0.1
    increments = np.where(rare, -0.9, 0.1)
    widths = np.array(
        [
            threshold_range(n, MIN_COUNT, -0.9, 0.1, math.log(ALPHA))
            for n in range(1, STEPS + 1)
        ]
    )
    _assert_rate_below_alpha(_crossing_count(increments, widths))


def test_quantile_brackets_cover_true_quantile(rng: np.random.Generator) -> None:
    # Uniform(0, 1) samples: the true 0.9 quantile is 0.9, and the number of
    # observations at or below it must stay within the slops for every n.
    q = 0.9
    below = np.cumsum(rng.random(size=(PATHS, STEPS)) <= q, axis=1)
    ns = np.arange(1, STEPS + 1)
    hi = np.array([quantile_slop_hi(q, n, MIN_COUNT, math.log(ALPHA)) for n in ns])
    lo = np.array([quantile_slop_lo(q, n, MIN_COUNT, math.log(ALPHA)) for n in ns])
    center = q * ns
    # Both tails share the two-sided budget.
    misses = ((below > center + hi) | (below < center + lo)).any(axis=1)
    _assert_rate_below_alpha(int(misses.sum()))
