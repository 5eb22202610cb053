"""
martingale_cs.api
=================

Caller-facing configuration objects.

>>> from martingale_cs.api import ConfidenceSequence
>>> ConfidenceSequence().two_sided
False
"""

from martingale_cs.api.confidence_sequence import ConfidenceSequence

__all__ = ["ConfidenceSequence"]
