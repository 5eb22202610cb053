"""
martingale_cs.stats.common.quantile
===================================

Confidence sequences on the rank of a quantile in a growing sample.

Let q be the unknown 90th percentile of some variable X, and map each
observation to W_i = -(0.1/0.9) if X_i < q, 0 if X_i == q, 1 if X_i > q.
W has zero mean and lies in [-1, 1], so the running sum of W_i stays within
the martingale threshold `delta` for every n, with probability
`1 - exp(log_eps)`. Solving the edge cases of that sum for the number of
observations at or below q yields an interval on the rank of q in the
sorted sample: the "slop" around `quantile * n`.

The tie case contributes 0 to the sum, so the interval is widened by one
observation; that is the `1 +` in every slop below.

Usage: the true quantile lies between the observations at sorted indices
`floor(quantile * n + slop_lo)` and `ceil(quantile * n + slop_hi)`. Either
index may fall outside `[0, n)`; then there are too few observations to
bound the quantile in that direction.

Examples
--------
>>> import math
>>> quantile_slop(0.0, 1000, 32, math.log(0.05))
1.0
>>> quantile_slop_hi(1.0, 1000, 32, math.log(0.05))
inf
>>> quantile_slop_lo(0.0, 1000, 32, math.log(0.05))
-inf
>>> quantile_slop(0.25, 1000, 32, -3.0) == quantile_slop(0.75, 1000, 32, -3.0)
True
"""

from __future__ import annotations
import math

from martingale_cs.core.constants import EQ
from martingale_cs.core.rounding import sub_down, sub_up
from martingale_cs.errors import ContractViolationError
from martingale_cs.stats.common.threshold import (
    _require_log_eps,
    threshold_range,
    threshold_span,
)


def _require_quantile(quantile: float) -> None:
    if not 0.0 <= quantile <= 1.0:
        raise ContractViolationError(
            f"quantile must be a fraction in [0, 1], got {quantile}. "
            "Was a percentile passed in without dividing by 100?"
        )


def _larger_side(quantile: float) -> float:
    """`max(quantile, 1 - quantile)`, rounded up."""
    return max(quantile, sub_up(1.0, quantile))


def quantile_slop(quantile: float, n: int, min_count: int, log_eps: float) -> float:
    """
    Symmetric slop on the index of `quantile` among `n` observations.

    Args:
        quantile: Target quantile in [0, 1]
        n: Number of observations so far
        min_count: First `n` at which the interval is used
        log_eps: Natural log of the false-positive rate; the two-sided
            `EQ` adjustment is applied here

    Returns:
        `1 + max(quantile, 1 - quantile) * threshold(n, min_count, log_eps + EQ)`,
        or 1 when the quantile is an endpoint of [0, 1].
    """
    _require_quantile(quantile)
    _require_log_eps(log_eps)

    if quantile <= 0.0 or quantile >= 1.0:
        return 1.0

    # Each observation on the far side of the quantile moves the sum by at
    # most max(q, 1 - q). When 1 - q is inexact, the rounded-up side keeps
    # the slop for q at least as wide as the one for 1 - q.
    scale = _larger_side(quantile)
    return 1 + threshold_span(n, min_count, 2 * scale, log_eps + EQ)


def quantile_slop_hi(
    quantile: float, n: int, min_count: int, log_eps: float
) -> float:
    """
    Upper half-interval: with probability `1 - exp(log_eps)`, the quantile
    is always at or below index `quantile * n + slop_hi`.

    Equal to `quantile_slop` at the median, tighter elsewhere.
    """
    _require_quantile(quantile)
    _require_log_eps(log_eps)

    if quantile <= 0.0:
        return 1.0

    if quantile >= 1.0:
        return math.inf

    # The count at or below the quantile, minus quantile * n, gains
    # 1 - quantile per observation below and loses quantile per observation
    # above. For quantile = 0.9, overshooting takes many small steps.
    hi = sub_up(1.0, quantile)
    return 1 + threshold_range(n, min_count, -quantile, hi, log_eps + EQ)


def quantile_slop_lo(
    quantile: float, n: int, min_count: int, log_eps: float
) -> float:
    """
    Lower half-interval: with probability `1 - exp(log_eps)`, the quantile
    is always at or above index `quantile * n + slop_lo` (`slop_lo <= -1`).
    """
    _require_quantile(quantile)
    _require_log_eps(log_eps)

    if quantile <= 0.0:
        return -math.inf

    if quantile >= 1.0:
        return -1.0

    # Mirror image: quantile * n minus the count moves by -(1 - quantile)
    # and +quantile.
    lo = sub_down(quantile, 1.0)
    return -1 - threshold_range(n, min_count, lo, quantile, log_eps + EQ)
