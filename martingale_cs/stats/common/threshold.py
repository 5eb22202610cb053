"""
martingale_cs.stats.common.threshold
====================================

Darling-Robbins confidence-sequence thresholds for bounded martingales.

Let X have zero mean and a moment generating function bounded by
`E[exp(tX)] <= exp(t^2 / 2)` for all `t >= 0` (any zero-mean variable in
`[-1, 1]` qualifies). `threshold` returns a width such that the running sum
of `n` i.i.d. draws from X stays below it for *every* `n >= min_count`
simultaneously, except with probability at most `exp(log_eps)`. The running
sum may therefore be compared against the threshold after each new
observation without inflating the false-positive rate.

The default is a one-sided test on `Sum X_i <= threshold`; add `EQ` to
`log_eps` for the half-width of a two-sided interval.

Reference: Darling and Robbins (1967), "Confidence sequences for mean,
variance, and median", PNAS 58(1).

Examples
--------
>>> import math
>>> from martingale_cs.core.constants import EQ
>>> threshold(10, 32, -3.0)
inf
>>> threshold(1000, 32, 0.0)
-inf
>>> width = threshold(1000, 32, math.log(0.05) + EQ)
>>> 120 < width < 130
True
>>> threshold_range(1000, 32, -1.0, 1.0, -3.0) == threshold_span(1000, 32, 2.0, -3.0)
True
"""

from __future__ import annotations
import math

from martingale_cs.core.constants import MINUS_HALF_LOG_LOG_2_UP
from martingale_cs.core.rounding import (
    add_up,
    div_down,
    div_up,
    log2_down,
    log_up,
    mul_up,
    sqrt_up,
    sub_down,
    sub_up,
)
from martingale_cs.errors import ContractViolationError

# C and alpha = 2, like Darling and Robbins.
C = 2


def _require_log_eps(log_eps: float) -> None:
    if not log_eps <= 0:
        raise ContractViolationError(
            f"log_eps must be <= 0, got {log_eps}: a positive log_eps means "
            "a false-positive rate above 100%. Should it be negated?"
        )


def log_a_up(min_count: int, log_eps: float) -> float:
    """
    Upper bound on log(A), the main factor in how far the martingale may
    stray from 0.

    Grows linearly with `-log_eps` and shrinks with `log log min_count`.
    With `Q_m = 1 / (lg m - 1/2)`, we need `Q_m / A <= eps`, i.e.
    `log(A) >= log(Q_m) - log(eps)`.

    Args:
        min_count: First sample count at which the sum is tested (>= 2)
        log_eps: Natural log of the false-positive rate

    Returns:
        log(A), rounded up
    """
    # Round 1/Q_m down so that Q_m, and thus log(A), round up.
    inv_q_m = sub_down(log2_down(min_count), 0.5)
    return sub_up(log_up(div_up(1.0, inv_q_m)), log_eps)


def threshold(n: int, min_count: int, log_eps: float) -> float:
    """
    Width of an anytime-valid `1 - exp(log_eps)` confidence sequence.

    Args:
        n: Number of values observed so far
        min_count: Smallest `n` at which the sum is compared (clamped to >= 2)
        log_eps: Natural log of the false-positive rate (<= 0)

    Returns:
        `+inf` while `n < min_count`, `-inf` when `log_eps == 0` (always
        reject), and otherwise a conservative upper bound on the threshold
        for a zero-mean martingale with increments in `[-1, 1]`.

    Raises:
        ContractViolationError: if `log_eps > 0` or is NaN.

    Mathematical foundation:
        n f_n(A) = sqrt(n) (3 / 2sqrt(2)) sqrt(4 ln ln n - 4 ln ln 2 + 2 ln A)
                 = 3 sqrt[n (1/2 ln ln n - 1/2 ln ln 2 + 1/4 ln A)]
    """
    _require_log_eps(log_eps)

    if min_count < C:
        min_count = C

    if n < min_count:
        return math.inf

    if log_eps >= 0:
        # >= 100% false positive rate: always reject.
        return -math.inf

    log_a = log_a_up(min_count, log_eps)

    inner = add_up(
        add_up(mul_up(0.5, log_up(log_up(n))), MINUS_HALF_LOG_LOG_2_UP),
        mul_up(0.25, log_a),
    )
    return mul_up(3.0, sqrt_up(mul_up(n, inner)))


def threshold_span(n: int, min_count: int, span: float, log_eps: float) -> float:
    """
    Threshold for a zero-mean variable whose range has width `span`.

    Hoeffding's lemma guarantees that any zero-mean distribution with a
    range of width 2 satisfies `mgf(t) <= exp(t^2 / 2)`, so the width from
    `threshold` is rescaled by `span / 2`.

    Args:
        n, min_count, log_eps: As in `threshold`
        span: Width of the range `[lo, lo + span]` containing the variable

    Returns:
        Conservative threshold on the running sum
    """
    scale = mul_up(span, 0.5)
    return mul_up(scale, threshold(n, min_count, log_eps))


def threshold_range(
    n: int, min_count: int, lo: float, hi: float, log_eps: float
) -> float:
    """
    One-sided threshold for a zero-mean variable in `[lo, hi]`.

    Bounds `Sum X_i <= threshold` for all `n >= min_count`. Tighter than
    `threshold_span` when `|lo| > |hi|`: a positive sum then requires many
    small increments, which is less likely than one unlucky large one. The
    opposite half-interval follows from negating the variate, i.e. calling
    with `(-hi, -lo)`.

    Args:
        n, min_count, log_eps: As in `threshold`
        lo: Lower end of the range (`lo <= 0`)
        hi: Upper end of the range (`hi >= 0`)

    Returns:
        Conservative threshold; 0 when the range forces every value to be 0.

    Raises:
        ContractViolationError: if `log_eps > 0`.

    Mathematical foundation:
        The proof of Hoeffding's lemma upper bounds `t (1 - t)` with
        `t = rho e^v / (1 - rho + rho e^v)`, `rho = -lo / (hi - lo)` and
        `v >= 0`. `t (1 - t)` peaks at `t = 1/2`, reachable for some `v`
        when `rho <= 1/2`. When `rho > 1/2` the maximum is at `v = 0`, so
        `mgf <= exp[1/2 rho (1 - rho) (hi - lo)^2 lambda^2]`, and the
        width scales by `sqrt[rho (1 - rho)] (hi - lo)` instead of
        `(hi - lo) / 2`.
    """
    # A zero mean in such a range requires every value to be exactly 0.
    if lo >= 0 or hi <= 0:
        return 0.0

    span = sub_up(hi, lo)
    rho = div_down(-lo, span)
    if rho <= 0.5:
        scale = mul_up(span, 0.5)
    else:
        # Ideal span is 1 / sqrt[rho (1 - rho)]; scale by span / ideal span.
        scale = mul_up(sqrt_up(mul_up(rho, sub_up(1.0, rho))), span)

    return mul_up(scale, threshold(n, min_count, log_eps))
