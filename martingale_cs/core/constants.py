"""
martingale_cs.core.constants
============================

Literal constants shared by every bound, and their integrity check.

`LE` and `EQ` are adjustments callers add to `log_eps`:

- `LE`: one-sided test on `Sum X_i <= threshold` (no adjustment).
- `EQ`: `-ln 2` rounded away from zero; turns the one-sided width into the
  half-width of a two-sided test `|Sum X_i| <= threshold`.

Literal rounding is historically fragile, so `check_constants` compares
the exact bit patterns. Call `require_constants` once at start-up.

Examples
--------
>>> check_constants()
0
>>> LE
0.0
>>> EQ < -0.69
True
"""

from __future__ import annotations
import logging
import struct
from typing import List, Tuple

from martingale_cs.errors import ConstantIntegrityError

logger = logging.getLogger(__name__)

LE = 0.0

EQ = -0.6931471805599454

# -1/2 ln ln 2, rounded up.
MINUS_HALF_LOG_LOG_2_UP = 0.1832564602908322

# Expected sign-magnitude bit patterns, read as signed 64-bit integers.
# Order matters: bit i of the check result refers to entry i.
_EXPECTED_BITS: Tuple[Tuple[str, int], ...] = (
    ("LE", 0),
    ("EQ", -4618953502541334032),
    ("MINUS_HALF_LOG_LOG_2_UP", 4595770530100767648),
)


def _raw_bits(x: float) -> int:
    # Raw sign-magnitude pattern, not the ordered encoding of `float_bits`.
    return struct.unpack("=q", struct.pack("=d", x))[0]


def _current_values() -> List[float]:
    return [LE, EQ, MINUS_HALF_LOG_LOG_2_UP]


def check_constants() -> int:
    """Return a bitmask of constants whose bit pattern is wrong.

    Bit 0 is `LE`, bit 1 is `EQ`, bit 2 is an internal constant
    (`-1/2 ln ln 2`). Zero means every constant is as expected.
    """
    mask = 0
    for index, ((name, expected), value) in enumerate(
        zip(_EXPECTED_BITS, _current_values())
    ):
        actual = _raw_bits(value)
        if actual != expected:
            logger.error(
                "constant %s has bits %#018x, expected %#018x",
                name,
                actual & 0xFFFFFFFFFFFFFFFF,
                expected & 0xFFFFFFFFFFFFFFFF,
            )
            mask |= 1 << index
    return mask


def mismatched_names(mask: int) -> List[str]:
    """Decode a `check_constants` bitmask into constant names.

    >>> mismatched_names(0b101)
    ['LE', 'MINUS_HALF_LOG_LOG_2_UP']
    """
    return [name for i, (name, _) in enumerate(_EXPECTED_BITS) if mask & (1 << i)]


def require_constants() -> None:
    """Raise `ConstantIntegrityError` unless `check_constants()` is zero."""
    mask = check_constants()
    if mask:
        raise ConstantIntegrityError(mask, mismatched_names(mask))
    logger.debug("constant integrity check passed")
