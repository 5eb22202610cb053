"""Unit tests for the directed-rounding layer."""

from __future__ import annotations

import math
import sys
from fractions import Fraction

import pytest

from martingale_cs.core.rounding import (
    add_up,
    bits_float,
    div_down,
    div_up,
    float_bits,
    log2_down,
    log_up,
    mul_up,
    next,
    next_k,
    prev,
    prev_k,
    sqrt_up,
    sub_down,
    sub_up,
)

ORDERED = [
    -math.inf,
    -sys.float_info.max,
    -2.5,
    -1.0,
    -sys.float_info.min,
    -5e-324,
    -0.0,
    0.0,
    5e-324,
    sys.float_info.min,
    1.0,
    2.5,
    sys.float_info.max,
    math.inf,
]


# ---------------------------------------------------------------------------
# Total-order encoding


def test_float_bits_preserves_ordering() -> None:
    encoded = [float_bits(x) for x in ORDERED]
    assert encoded == sorted(encoded)
    assert len(set(encoded)) == len(encoded)


def test_float_bits_signed_zeros_are_adjacent() -> None:
    assert float_bits(-0.0) == -1
    assert float_bits(0.0) == 0


@pytest.mark.parametrize("x", ORDERED)
def test_bits_float_inverts_float_bits(x: float) -> None:
    result = bits_float(float_bits(x))
    assert result == x
    assert math.copysign(1.0, result) == math.copysign(1.0, x)


# ---------------------------------------------------------------------------
# Step nudging


@pytest.mark.parametrize(
    "x", [x for x in ORDERED if x != 0.0 and math.isfinite(x)] + [0.0]
)
def test_next_matches_nextafter(x: float) -> None:
    if x == sys.float_info.max:
        assert next(x) == math.inf
    else:
        assert next(x) == math.nextafter(x, math.inf)


@pytest.mark.parametrize("x", [x for x in ORDERED if x != 0.0 and math.isfinite(x)])
def test_prev_matches_nextafter(x: float) -> None:
    if x == -sys.float_info.max:
        assert prev(x) == -math.inf
    else:
        assert prev(x) == math.nextafter(x, -math.inf)


def test_steps_cross_zero_through_both_signed_zeros() -> None:
    negative_zero = next(-5e-324)
    assert negative_zero == 0.0
    assert math.copysign(1.0, negative_zero) == -1.0
    assert math.copysign(1.0, next(negative_zero)) == 1.0
    assert next(next(negative_zero)) == 5e-324
    assert prev(0.0) == 0.0
    assert math.copysign(1.0, prev(0.0)) == -1.0


def test_steps_cross_exponent_boundaries() -> None:
    assert prev(2.0) == 2.0 - 2.0**-52
    assert next(prev(2.0)) == 2.0
    assert next(1.0) == 1.0 + 2.0**-52
    assert prev(-1.0) == -(1.0 + 2.0**-52)


@pytest.mark.parametrize("x", [-3.75, -1e-300, 0.0, 1e-300, math.pi])
def test_next_k_and_prev_k_compose(x: float) -> None:
    stepped = x
    for _ in range(4):
        stepped = next(stepped)
    assert next_k(x, 4) == stepped
    assert prev_k(next_k(x, 4), 4) == x
    assert next_k(x, 0) == x


# ---------------------------------------------------------------------------
# libm wrappers


@pytest.mark.parametrize("x", [2, 3.0, 10, 0.5, 1e-10, 1e6, 2**40])
def test_log_up_is_above_log(x: float) -> None:
    assert log_up(x) > math.log(x)
    assert log_up(x) == pytest.approx(math.log(x), rel=1e-14, abs=1e-300)


@pytest.mark.parametrize("x", [2, 3.0, 10, 32, 0.5, 1e6, 2**40])
def test_log2_down_is_below_log2(x: float) -> None:
    assert log2_down(x) < math.log2(x)
    assert log2_down(x) == pytest.approx(math.log2(x), rel=1e-14)


@pytest.mark.parametrize("x", [0.0, 2.0, 4.0, 1e-10, 1e10])
def test_sqrt_up_is_one_step_above_sqrt(x: float) -> None:
    assert sqrt_up(x) == next(math.sqrt(x))
    assert sqrt_up(x) > math.sqrt(x)


# ---------------------------------------------------------------------------
# Directed binary arithmetic


def test_exact_results_are_not_nudged() -> None:
    assert add_up(1.0, 2.0) == 3.0
    assert sub_up(1.0, -1.0) == 2.0
    assert sub_down(0.75, 0.25) == 0.5
    assert mul_up(0.5, 3.0) == 1.5
    assert div_up(1.0, 4.0) == 0.25
    assert div_down(-1.0, 2.0) == -0.5


@pytest.mark.parametrize("a, b", [(0.1, 0.2), (1e16, 1.0), (-0.3, 0.1), (3, 0.1)])
def test_add_up_bounds_exact_sum(a: float, b: float) -> None:
    result = add_up(a, b)
    assert Fraction(result) >= Fraction(a) + Fraction(b)
    assert result <= next(float(a) + float(b))


def test_sub_directions_straddle_inexact_difference() -> None:
    assert sub_up(1.0, 1e-20) == 1.0
    assert sub_down(1.0, 1e-20) == prev(1.0)


@pytest.mark.parametrize("a, b", [(1.0, 3.0), (2.0, 7.0), (-1.0, 3.0), (10, 0.3)])
def test_division_directions_are_adjacent(a: float, b: float) -> None:
    up, down = div_up(a, b), div_down(a, b)
    exact = Fraction(a) / Fraction(b)
    assert Fraction(down) < exact < Fraction(up)
    assert next(down) == up


@pytest.mark.parametrize("a, b", [(0.1, 3.0), (3, 0.1), (1e200, 1.1), (-0.7, 0.3)])
def test_mul_up_bounds_exact_product(a: float, b: float) -> None:
    result = mul_up(a, b)
    assert Fraction(result) >= Fraction(a) * Fraction(b)


def test_mul_up_handles_large_integers_exactly() -> None:
    n = 2**60 + 1
    result = mul_up(n, 1.5)
    assert Fraction(result) >= Fraction(n) * Fraction(1.5)


def test_non_finite_values_pass_through() -> None:
    assert mul_up(0.5, math.inf) == math.inf
    assert mul_up(0.5, -math.inf) == -math.inf
    assert add_up(1.0, -math.inf) == -math.inf
    assert math.isnan(add_up(math.nan, 1.0))


def test_overflow_is_clamped_on_the_safe_side() -> None:
    assert mul_up(1e308, 10.0) == math.inf
    assert mul_up(-1e308, 10.0) == -sys.float_info.max
    assert sub_down(1.7e308, -1.7e308) == sys.float_info.max
