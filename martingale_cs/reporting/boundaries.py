"""
martingale_cs.reporting.boundaries
==================================

Tabulate confidence-sequence boundaries as Polars DataFrames.

Useful for plotting a monitoring schedule up front, or for comparing the
anytime-valid width against the single-look width a fixed-horizon test
would use at the same `n`.

Examples
--------
>>> from martingale_cs.api.confidence_sequence import ConfidenceSequence
>>> cs = ConfidenceSequence.from_alpha(0.05, min_count=32, two_sided=True)
>>> df = threshold_table([16, 32, 1000], cs)
>>> df.columns
['n', 'threshold', 'fixed_horizon', 'ratio']
>>> df.height
3
>>> q = quantile_table([1000], [0.5, 0.9], cs)
>>> q.height
2
"""

from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Sequence

import polars as pl
from scipy.stats import norm

from martingale_cs.api.confidence_sequence import ConfidenceSequence
from martingale_cs.core.rounding import sub_up
from martingale_cs.errors import ContractViolationError

logger = logging.getLogger(__name__)


def _require_counts(ns: Sequence[int]) -> List[int]:
    counts = [int(n) for n in ns]
    if not counts:
        raise ContractViolationError("ns must contain at least one sample count")
    if any(n < 0 for n in counts):
        raise ContractViolationError("sample counts must be non-negative")
    return counts


def fixed_horizon_width(n: int, alpha: float, lo: float = -1.0, hi: float = 1.0) -> float:
    """
    Normal-approximation width of a single-look test at sample size `n`.

    Uses the worst-case standard deviation `(hi - lo) / 2` of a variable in
    `[lo, hi]`, so that the width is comparable to `threshold_span`.

    >>> round(fixed_horizon_width(100, 0.05), 3)
    16.449
    """
    sigma = (hi - lo) / 2
    return math.sqrt(n) * sigma * float(norm.isf(alpha))


def threshold_table(
    ns: Sequence[int],
    cs: ConfidenceSequence,
    lo: float = -1.0,
    hi: float = 1.0,
) -> pl.DataFrame:
    """
    Anytime-valid thresholds for each sample count in `ns`.

    Args:
        ns: Sample counts to tabulate
        cs: Test parameters
        lo, hi: Range of the zero-mean increments

    Returns:
        DataFrame with columns `n`, `threshold`, `fixed_horizon` and
        `ratio` (threshold / fixed_horizon). Two-sided sequences use the
        symmetric width, one-sided ones the tighter range width.
    """
    counts = _require_counts(ns)
    alpha = math.exp(cs.adjusted_log_eps)

    rows: Dict[str, List[Any]] = {
        "n": [],
        "threshold": [],
        "fixed_horizon": [],
        "ratio": [],
    }
    for n in counts:
        if cs.two_sided:
            width = cs.threshold_span(n, sub_up(hi, lo))
        else:
            width = cs.threshold_range(n, lo, hi)
        single = fixed_horizon_width(n, alpha, lo, hi)
        rows["n"].append(n)
        rows["threshold"].append(width)
        rows["fixed_horizon"].append(single)
        rows["ratio"].append(width / single if single > 0 else math.nan)

    logger.debug("tabulated %d thresholds", len(counts))
    return pl.DataFrame(
        rows,
        schema={
            "n": pl.Int64,
            "threshold": pl.Float64,
            "fixed_horizon": pl.Float64,
            "ratio": pl.Float64,
        },
    )


def quantile_table(
    ns: Sequence[int],
    quantiles: Sequence[float],
    cs: ConfidenceSequence,
) -> pl.DataFrame:
    """
    Quantile slops and rank brackets, one row per `(n, quantile)` pair.

    Columns: `n`, `quantile`, `slop`, `slop_lo`, `slop_hi`, `lo_rank`,
    `hi_rank`. Ranks are null where the bracket is unbounded.
    """
    counts = _require_counts(ns)
    if not quantiles:
        raise ContractViolationError("quantiles must not be empty")

    records = []
    for n in counts:
        for q in quantiles:
            lo_rank, hi_rank = cs.quantile_ranks(q, n)
            records.append(
                {
                    "n": n,
                    "quantile": float(q),
                    "slop": cs.quantile_slop(q, n),
                    "slop_lo": cs.quantile_slop_lo(q, n),
                    "slop_hi": cs.quantile_slop_hi(q, n),
                    "lo_rank": lo_rank,
                    "hi_rank": hi_rank,
                }
            )

    logger.debug("tabulated %d quantile brackets", len(records))
    return pl.DataFrame(
        records,
        schema={
            "n": pl.Int64,
            "quantile": pl.Float64,
            "slop": pl.Float64,
            "slop_lo": pl.Float64,
            "slop_hi": pl.Float64,
            "lo_rank": pl.Int64,
            "hi_rank": pl.Int64,
        },
    )
