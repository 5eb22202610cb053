"""
Statistical methods for anytime-valid testing.

`martingale_cs.stats.common` holds the scheme-agnostic bounds: thresholds on
running sums of bounded zero-mean increments, and their application to
quantile ranks.

Example:
--------
>>> from martingale_cs.stats.common.threshold import threshold_span
>>> from martingale_cs.stats.common.quantile import quantile_slop_hi
"""
