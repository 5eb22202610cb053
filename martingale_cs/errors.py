"""
martingale_cs.errors
====================

Exception hierarchy for the package.

Domain edge cases (too few observations, a 100% false-positive rate, a range
collapsed to a point) are not errors: they return closed-form values. The
exceptions below are reserved for caller bugs and for a build that cannot be
trusted to produce valid bounds.
"""

from __future__ import annotations
from typing import Sequence


class MartingaleCSError(Exception):
    """Base class for all martingale_cs errors."""


class ContractViolationError(MartingaleCSError, AssertionError, ValueError):
    """An argument broke the calling contract (e.g. `log_eps > 0`).

    Catchable as `AssertionError` or `ValueError`.
    """


class ConstantIntegrityError(MartingaleCSError, RuntimeError):
    """Compiled-in constants do not have their expected bit patterns."""

    def __init__(self, mask: int, names: Sequence[str]):
        self.mask = mask
        self.names = tuple(names)
        super().__init__(
            f"constant integrity check failed (mask={mask:#x}): "
            f"{', '.join(self.names)}"
        )
