"""Weighted-pool venue math (Balancer weighted pools).

    amount_out = balance_out * (1 - (balance_in / (balance_in + amount_in))^(w_in / w_out))
    amount_in  = balance_in * ((balance_out / (balance_out - amount_out))^(w_out / w_in) - 1)

The weight ratio is used as an exact rational exponent, so the power is
computed with integer roots instead of a log/exp approximation. Trades are
limited to 30% of the relevant balance, as on-chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bestdex.constants import WAD
from bestdex.math.wad import (
    FixedPointError,
    complement,
    div_up,
    mul_down,
    mul_up,
    pow_ratio_up,
)
from bestdex.models.types import normalize_address
from bestdex.safe_int import S
from bestdex.venues.base import InsufficientLiquidity, MaxRatioExceeded, TokenNotInPool

MAX_IN_RATIO = 3 * 10**17
MAX_OUT_RATIO = 3 * 10**17


@dataclass(frozen=True)
class WeightedPool:
    """A weighted product pool.

    Attributes:
        tokens: Pool tokens
        balances: Raw token balances, aligned with tokens
        weights: Normalized WAD weights (summing to 1e18)
        fee: Swap fee as a WAD fraction
        scaling_factors: 10**(18 - decimals) per token; all ones when omitted
    """

    tokens: tuple[str, ...]
    balances: tuple[int, ...]
    weights: tuple[int, ...]
    fee: int = 0
    scaling_factors: tuple[int, ...] = field(default=())

    def factors(self) -> tuple[int, ...]:
        return self.scaling_factors or tuple(1 for _ in self.tokens)

    def index_of(self, token: str) -> int:
        token_norm = normalize_address(token)
        for i, candidate in enumerate(self.tokens):
            if normalize_address(candidate) == token_norm:
                return i
        raise TokenNotInPool(f"Token {token} not in pool")


def _power(base: int, numerator: int, denominator: int) -> int:
    try:
        return pow_ratio_up(base, numerator, denominator)
    except FixedPointError as err:
        raise MaxRatioExceeded(str(err)) from err


class WeightedPoolMath:
    """Exact-input and exact-output quoting for weighted pools."""

    def amount_out(self, pool: WeightedPool, token_in: str, token_out: str, amount_in: int) -> int:
        i, j = pool.index_of(token_in), pool.index_of(token_out)
        if amount_in <= 0:
            return 0
        factors = pool.factors()
        balance_in = pool.balances[i] * factors[i]
        balance_out = pool.balances[j] * factors[j]
        if balance_in <= 0 or balance_out <= 0:
            raise InsufficientLiquidity("Weighted pool has an empty balance")

        scaled_in = (amount_in - mul_up(amount_in, pool.fee)) * factors[i]
        if scaled_in > mul_down(balance_in, MAX_IN_RATIO):
            raise MaxRatioExceeded(f"Input {amount_in} exceeds 30% of balance")

        base = div_up(balance_in, balance_in + scaled_in)
        power = _power(base, pool.weights[i], pool.weights[j])
        scaled_out = mul_down(balance_out, complement(power))
        return scaled_out // factors[j]

    def amount_in(self, pool: WeightedPool, token_in: str, token_out: str, amount_out: int) -> int:
        i, j = pool.index_of(token_in), pool.index_of(token_out)
        if amount_out <= 0:
            return 0
        factors = pool.factors()
        balance_in = pool.balances[i] * factors[i]
        balance_out = pool.balances[j] * factors[j]
        if balance_in <= 0 or balance_out <= 0:
            raise InsufficientLiquidity("Weighted pool has an empty balance")

        scaled_out = amount_out * factors[j]
        if scaled_out > mul_down(balance_out, MAX_OUT_RATIO):
            raise MaxRatioExceeded(f"Output {amount_out} exceeds 30% of balance")

        base = div_up(balance_out, balance_out - scaled_out)
        power = _power(base, pool.weights[j], pool.weights[i])
        scaled_in = mul_up(balance_in, power - WAD)
        amount_in = S(scaled_in).ceiling_div(factors[i]).value
        return div_up(amount_in, complement(pool.fee))


weighted_pool_math = WeightedPoolMath()
