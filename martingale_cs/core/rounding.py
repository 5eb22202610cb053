"""
martingale_cs.core.rounding
===========================

Directed-rounding arithmetic.

Every bound in this package must stay a bound after floating-point error,
so each step is rounded in the conservative direction: up when computing an
upper bound, down for a lower bound.

Floats are mapped to integers whose ordering matches float ordering, which
turns "the next representable value" into integer increment. On top of that
sit directed wrappers for libm (`log_up`, `log2_down`, `sqrt_up`) and for
binary arithmetic (`add_up`, `mul_up`, `div_down`, ...).

Examples
--------
>>> next(1.0)
1.0000000000000002
>>> prev(1.0)
0.9999999999999999
>>> next(-0.0)
0.0
>>> float_bits(-0.0), float_bits(0.0)
(-1, 0)
>>> add_up(0.1, 0.2) >= 0.1 + 0.2
True
>>> mul_up(0.5, 3.0)
1.5
"""

from __future__ import annotations
import math
import struct
import sys
from fractions import Fraction
from typing import Optional, Union

Real = Union[int, float]

# Assume libm is off by less than 4 ULPs.
LIBM_ERROR_LIMIT = 4

_SIGNIFICAND_MASK = (1 << 63) - 1


def float_bits(x: float) -> int:
    """Map a float to an integer with the same ordering.

    The raw sign-magnitude bit pattern is read as a signed 64-bit integer;
    for negative values, the bits below the sign are complemented to move
    from sign-magnitude to two's complement. Adding 1 to the result then
    always yields the next larger float.

    >>> float_bits(1.0)
    4607182418800017408
    >>> float_bits(-1.0) < float_bits(-0.0) < float_bits(0.0) < float_bits(1.0)
    True
    """
    bits = struct.unpack("=q", struct.pack("=d", x))[0]
    return bits if bits >= 0 else bits ^ _SIGNIFICAND_MASK


def bits_float(bits: int) -> float:
    """Inverse of `float_bits`.

    >>> bits_float(float_bits(-2.5))
    -2.5
    >>> bits_float(-1)
    -0.0
    """
    if bits < 0:
        bits ^= _SIGNIFICAND_MASK
    return struct.unpack("=d", struct.pack("=q", bits))[0]


def next_k(x: float, k: int) -> float:
    """Return the float `k` representable steps above `x`."""
    return bits_float(float_bits(x) + k)


def prev_k(x: float, k: int) -> float:
    """Return the float `k` representable steps below `x`."""
    return bits_float(float_bits(x) - k)


def next(x: float) -> float:
    return next_k(x, 1)


def prev(x: float) -> float:
    return prev_k(x, 1)


# ---- libm wrappers ----


def log_up(x: Real) -> float:
    """Upper bound on the natural log of `x`.

    >>> 0.0 < log_up(1.0) < 1e-300
    True
    """
    return next_k(math.log(x), LIBM_ERROR_LIMIT)


def log2_down(x: Real) -> float:
    """Lower bound on the base-2 log of `x`.

    >>> 4.0 - 1e-12 < log2_down(16) < 4.0
    True
    """
    return prev_k(math.log2(x), LIBM_ERROR_LIMIT)


def sqrt_up(x: Real) -> float:
    """Upper bound on the square root of `x`.

    `math.sqrt` is correctly rounded, so one step suffices.

    >>> sqrt_up(4.0)
    2.0000000000000004
    """
    return next(math.sqrt(x))


# ---- directed binary arithmetic ----


def _exact(x: Real) -> Optional[Fraction]:
    if isinstance(x, float) and not math.isfinite(x):
        return None
    return Fraction(x)


def _round_up(approx: float, exact: Optional[Fraction]) -> float:
    if exact is None or math.isnan(approx):
        return approx
    if math.isinf(approx):
        # A finite value overflowed; only -inf is on the wrong side.
        return -sys.float_info.max if approx < 0 else approx
    while Fraction(approx) < exact:
        approx = next(approx)
    return approx


def _round_down(approx: float, exact: Optional[Fraction]) -> float:
    if exact is None or math.isnan(approx):
        return approx
    if math.isinf(approx):
        return sys.float_info.max if approx > 0 else approx
    while Fraction(approx) > exact:
        approx = prev(approx)
    return approx


def _operands(a: Real, b: Real):
    fa, fb = _exact(a), _exact(b)
    if fa is None or fb is None:
        return None
    return fa, fb


def add_up(a: Real, b: Real) -> float:
    """Upper bound on `a + b`."""
    approx = float(a) + float(b)
    ops = _operands(a, b)
    return _round_up(approx, None if ops is None else ops[0] + ops[1])


def sub_up(a: Real, b: Real) -> float:
    """Upper bound on `a - b`."""
    approx = float(a) - float(b)
    ops = _operands(a, b)
    return _round_up(approx, None if ops is None else ops[0] - ops[1])


def sub_down(a: Real, b: Real) -> float:
    """Lower bound on `a - b`."""
    approx = float(a) - float(b)
    ops = _operands(a, b)
    return _round_down(approx, None if ops is None else ops[0] - ops[1])


def mul_up(a: Real, b: Real) -> float:
    """Upper bound on `a * b`.

    >>> mul_up(0.1, 3.0) >= 0.1 * 3
    True
    >>> mul_up(2.0, float("inf"))
    inf
    """
    approx = float(a) * float(b)
    ops = _operands(a, b)
    return _round_up(approx, None if ops is None else ops[0] * ops[1])


def div_up(a: Real, b: Real) -> float:
    """Upper bound on `a / b`; `b` must be non-zero."""
    approx = float(a) / float(b)
    ops = _operands(a, b)
    return _round_up(approx, None if ops is None else ops[0] / ops[1])


def div_down(a: Real, b: Real) -> float:
    """Lower bound on `a / b`; `b` must be non-zero."""
    approx = float(a) / float(b)
    ops = _operands(a, b)
    return _round_down(approx, None if ops is None else ops[0] / ops[1])
