"""WAD (18-decimal) fixed-point helpers.

All values are integers scaled by 10^18. Rounding mirrors the protocol's
WadRayMath library: wad_mul and wad_div round half up, the *_down/*_up
variants are used by venue math where the rounding direction matters.
"""

from __future__ import annotations

from math import gcd

from bestdex.constants import WAD
from bestdex.safe_int import S

HALF_WAD = WAD // 2

# Largest numerator/denominator accepted for a rational exponent.
# Weighted pools use small ratios (50/50 -> 1/1, 80/20 -> 4/1).
MAX_EXPONENT_TERM = 64


class FixedPointError(ArithmeticError):
    """Fixed-point operation outside its supported domain."""

    pass


def wad_mul(a: int, b: int) -> int:
    """Multiply two WAD values, rounding half up."""
    return ((S(a) * S(b) + S(HALF_WAD)) // S(WAD)).value


def wad_div(a: int, b: int) -> int:
    """Divide two WAD values, rounding half up.

    Raises:
        DivisionByZero: If b is zero
    """
    return ((S(a) * S(WAD) + S(b // 2)) // S(b)).value


def mul_down(a: int, b: int) -> int:
    return ((S(a) * S(b)) // S(WAD)).value


def mul_up(a: int, b: int) -> int:
    return (S(a) * S(b)).ceiling_div(WAD).value


def div_down(a: int, b: int) -> int:
    return ((S(a) * S(WAD)) // S(b)).value


def div_up(a: int, b: int) -> int:
    return (S(a) * S(WAD)).ceiling_div(b).value


def complement(x: int) -> int:
    """Return 1 - x for x in [0, 1], clamped at zero."""
    return WAD - x if x < WAD else 0


def integer_root(n: int, k: int) -> int:
    """Floor of the k-th root of a non-negative integer (Newton iteration)."""
    if n < 0:
        raise FixedPointError(f"Root of negative value: {n}")
    if k == 1 or n < 2:
        return n
    x = 1 << ((n.bit_length() + k - 1) // k)
    while True:
        y = ((k - 1) * x + n // x ** (k - 1)) // k
        if y >= x:
            return x
        x = y


def reduce_ratio(numerator: int, denominator: int) -> tuple[int, int]:
    """Reduce a positive ratio to lowest terms."""
    divisor = gcd(numerator, denominator)
    return numerator // divisor, denominator // divisor


def pow_ratio_up(base: int, numerator: int, denominator: int) -> int:
    """Raise a WAD base to numerator/denominator, rounding up.

    Computed exactly as the denominator-th root of base^numerator, so the
    result is an upper bound on the real power.

    Raises:
        FixedPointError: If the reduced exponent terms exceed MAX_EXPONENT_TERM
    """
    p, q = reduce_ratio(numerator, denominator)
    if p > MAX_EXPONENT_TERM or q > MAX_EXPONENT_TERM:
        raise FixedPointError(f"Unsupported exponent {numerator}/{denominator}")

    powered = WAD
    for _ in range(p):
        powered = mul_up(powered, base)

    if q == 1:
        return powered
    scaled = powered * WAD ** (q - 1)
    root = integer_root(scaled, q)
    if root**q < scaled:
        root += 1
    return root


__all__ = [
    "FixedPointError",
    "HALF_WAD",
    "wad_mul",
    "wad_div",
    "mul_down",
    "mul_up",
    "div_down",
    "div_up",
    "complement",
    "integer_root",
    "reduce_ratio",
    "pow_ratio_up",
]
