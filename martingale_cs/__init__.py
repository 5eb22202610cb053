"""
martingale_cs: conservative confidence sequences for bounded martingales.

A fixed-horizon confidence interval is valid for one pre-chosen sample size.
A confidence sequence is valid for *every* sample size at once: a running sum
may be compared against its threshold after each observation (online A/B
monitoring, anytime-valid tests, streaming quantile estimation) without
inflating the false-positive rate. martingale_cs implements the closed-form
Darling-Robbins bound for sums of bounded zero-mean increments.

The value of these bounds lies in being provably conservative, so every
arithmetic step is rounded in the safe direction (`martingale_cs.core`).
Built on top of that:

- `threshold`, `threshold_span`, `threshold_range`: widths for running sums.
- `quantile_slop`, `quantile_slop_hi`, `quantile_slop_lo`: index brackets
  for a quantile of a growing, unsorted sample.
- `LE` / `EQ`: adjustments added to `log_eps` for one- or two-sided tests.

Call `check_constants()` (or `require_constants()`) once at start-up.

Example
-------
>>> import math
>>> import martingale_cs as mcs
>>> mcs.check_constants()
0
>>> mcs.threshold(1_000_000, 1, -2.0) == mcs.threshold(1_000_000, 2, -2.0)
True
>>> mcs.threshold(5, 10, math.log(0.05))
inf
"""

from martingale_cs.core.constants import (
    EQ,
    LE,
    check_constants,
    require_constants,
)
from martingale_cs.errors import (
    ConstantIntegrityError,
    ContractViolationError,
    MartingaleCSError,
)
from martingale_cs.stats.common.quantile import (
    quantile_slop,
    quantile_slop_hi,
    quantile_slop_lo,
)
from martingale_cs.stats.common.threshold import (
    threshold,
    threshold_range,
    threshold_span,
)
from martingale_cs.api.confidence_sequence import ConfidenceSequence

__all__ = [
    "EQ",
    "LE",
    "check_constants",
    "require_constants",
    "threshold",
    "threshold_span",
    "threshold_range",
    "quantile_slop",
    "quantile_slop_hi",
    "quantile_slop_lo",
    "ConfidenceSequence",
    "MartingaleCSError",
    "ContractViolationError",
    "ConstantIntegrityError",
]
