"""
martingale_cs.api.confidence_sequence
=====================================

A configuration object bundling the parameters of one anytime-valid test.

`ConfidenceSequence` holds no running state: the caller keeps its own
running sum (or sample) and asks for the bound after each observation.
Every method is a pure call into `martingale_cs.stats.common`.

Examples
--------
>>> cs = ConfidenceSequence.from_alpha(0.05, min_count=32, two_sided=True)
>>> cs.threshold(10)
inf
>>> cs.rejects(total=500.0, n=1000)
True
>>> cs.rejects(total=-20.0, n=1000)
False
>>> lo_rank, hi_rank = cs.quantile_ranks(0.5, 1000)
>>> lo_rank < 500 < hi_rank
True
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Tuple

from martingale_cs.core.constants import EQ, LE
from martingale_cs.core.rounding import sub_up
from martingale_cs.errors import ContractViolationError
from martingale_cs.stats.common import quantile as _quantile
from martingale_cs.stats.common import threshold as _threshold


@dataclass(frozen=True)
class ConfidenceSequence:
    """
    Parameters of an anytime-valid test on a running sum.

    Attributes:
        min_count: First sample count at which the sum is compared
            (values below 2 behave like 2)
        log_eps: Natural log of the tolerated false-positive rate (<= 0)
        two_sided: Whether `threshold*` return the half-width of a
            two-sided interval (adds `EQ` to `log_eps`)
    """

    min_count: int = 2
    log_eps: float = math.log(0.05)
    two_sided: bool = False

    def __post_init__(self) -> None:
        if self.min_count < 0:
            raise ContractViolationError(
                f"min_count must be non-negative, got {self.min_count}"
            )
        if not self.log_eps <= 0:
            raise ContractViolationError(
                f"log_eps must be <= 0, got {self.log_eps}"
            )

    @classmethod
    def from_alpha(
        cls, alpha: float, min_count: int = 2, two_sided: bool = False
    ) -> "ConfidenceSequence":
        """Build from a false-positive rate `alpha` in (0, 1]."""
        if not 0 < alpha <= 1:
            raise ContractViolationError(f"alpha must be in (0, 1], got {alpha}")
        return cls(min_count=min_count, log_eps=math.log(alpha), two_sided=two_sided)

    @property
    def alpha(self) -> float:
        return math.exp(self.log_eps)

    @property
    def adjusted_log_eps(self) -> float:
        """`log_eps` plus the sidedness adjustment (`EQ` or `LE`)."""
        return self.log_eps + (EQ if self.two_sided else LE)

    # ---- thresholds ----

    def threshold(self, n: int) -> float:
        """Threshold for increments in `[-1, 1]`."""
        return _threshold.threshold(n, self.min_count, self.adjusted_log_eps)

    def threshold_span(self, n: int, span: float) -> float:
        return _threshold.threshold_span(
            n, self.min_count, span, self.adjusted_log_eps
        )

    def threshold_range(self, n: int, lo: float, hi: float) -> float:
        return _threshold.threshold_range(
            n, self.min_count, lo, hi, self.adjusted_log_eps
        )

    def rejects(
        self, total: float, n: int, lo: float = -1.0, hi: float = 1.0
    ) -> bool:
        """
        Whether a running sum of `n` zero-mean increments in `[lo, hi]`
        crosses the bound, rejecting the null hypothesis of mean 0.

        Two-sided tests compare `|total|` against the symmetric width; one-
        sided tests compare `total` against the tighter `threshold_range`.
        """
        if self.two_sided:
            return abs(total) > self.threshold_span(n, sub_up(hi, lo))
        return total > self.threshold_range(n, lo, hi)

    # ---- quantiles ----

    def quantile_slop(self, quantile: float, n: int) -> float:
        return _quantile.quantile_slop(quantile, n, self.min_count, self.log_eps)

    def quantile_slop_hi(self, quantile: float, n: int) -> float:
        return _quantile.quantile_slop_hi(quantile, n, self.min_count, self.log_eps)

    def quantile_slop_lo(self, quantile: float, n: int) -> float:
        return _quantile.quantile_slop_lo(quantile, n, self.min_count, self.log_eps)

    def quantile_ranks(
        self, quantile: float, n: int
    ) -> Tuple[Optional[int], Optional[int]]:
        """
        Sorted-sample indices bracketing `quantile` after `n` observations.

        Returns:
            `(floor(quantile * n + slop_lo), ceil(quantile * n + slop_hi))`,
            with `None` for an unbounded side. Indices outside `[0, n)`
            mean the quantile is not yet determinable in that direction.
        """
        # Exact sums, so that floor and ceil never round toward the center.
        center = Fraction(quantile) * n
        slop_lo = self.quantile_slop_lo(quantile, n)
        slop_hi = self.quantile_slop_hi(quantile, n)
        lo_rank: Optional[int] = None
        hi_rank: Optional[int] = None
        if math.isfinite(slop_lo):
            lo_rank = math.floor(center + Fraction(slop_lo))
        if math.isfinite(slop_hi):
            hi_rank = math.ceil(center + Fraction(slop_hi))
        return lo_rank, hi_rank
