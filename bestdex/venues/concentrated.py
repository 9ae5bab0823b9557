"""Concentrated-liquidity venue math (UniswapV3-style).

Quotes are computed within the pool's single active liquidity range using
Q64.96 sqrt-price math; a trade that would push the price past the range
boundary cannot be quoted. Price is token1 per token0.
"""

from __future__ import annotations

from dataclasses import dataclass

from bestdex.models.types import normalize_address
from bestdex.safe_int import S
from bestdex.venues.base import InsufficientLiquidity, TokenNotInPool

Q96 = 2**96

# Fees are in hundredths of a basis point (3000 = 0.3%)
FEE_PIPS_DENOMINATOR = 1_000_000


@dataclass(frozen=True)
class ConcentratedLiquidityPool:
    """The active range of a concentrated-liquidity pool."""

    token0: str
    token1: str
    fee: int
    liquidity: int
    sqrt_price_x96: int
    sqrt_price_lower_x96: int
    sqrt_price_upper_x96: int

    @property
    def tokens(self) -> tuple[str, str]:
        return (self.token0, self.token1)

    def is_zero_for_one(self, token_in: str, token_out: str) -> bool:
        """True when selling token0 for token1 (price moves down)."""
        token_in_norm = normalize_address(token_in)
        token_out_norm = normalize_address(token_out)
        token0 = normalize_address(self.token0)
        token1 = normalize_address(self.token1)
        if (token_in_norm, token_out_norm) == (token0, token1):
            return True
        if (token_in_norm, token_out_norm) == (token1, token0):
            return False
        raise TokenNotInPool(f"Pair {token_in}/{token_out} not in pool")


def _amount_less_fee(amount_in: int, fee: int) -> int:
    return ((S(amount_in) * S(FEE_PIPS_DENOMINATOR - fee)) // S(FEE_PIPS_DENOMINATOR)).value


def _amount_with_fee(net_amount_in: int, fee: int) -> int:
    return (S(net_amount_in) * S(FEE_PIPS_DENOMINATOR)).ceiling_div(FEE_PIPS_DENOMINATOR - fee).value


class ConcentratedLiquidityMath:
    """Single-range swap math matching SqrtPriceMath rounding."""

    def amount_out(
        self, pool: ConcentratedLiquidityPool, token_in: str, token_out: str, amount_in: int
    ) -> int:
        zero_for_one = pool.is_zero_for_one(token_in, token_out)
        if amount_in <= 0:
            return 0
        if pool.liquidity <= 0:
            raise InsufficientLiquidity("Range has no liquidity")

        liquidity = S(pool.liquidity)
        sqrt_price = S(pool.sqrt_price_x96)
        net_in = S(_amount_less_fee(amount_in, pool.fee))

        if zero_for_one:
            # Next sqrt price from token0 input, rounded up
            numerator = liquidity * Q96
            next_price = (numerator * sqrt_price).ceiling_div(numerator + net_in * sqrt_price)
            if next_price < pool.sqrt_price_lower_x96:
                raise InsufficientLiquidity("Swap crosses the lower range boundary")
            # token1 delta, rounded down
            return ((liquidity * (sqrt_price - next_price)) // Q96).value

        next_price = sqrt_price + (net_in * Q96) // liquidity
        if next_price > pool.sqrt_price_upper_x96:
            raise InsufficientLiquidity("Swap crosses the upper range boundary")
        # token0 delta, rounded down
        return (
            (liquidity * Q96 * (next_price - sqrt_price)) // next_price // sqrt_price
        ).value

    def amount_in(
        self, pool: ConcentratedLiquidityPool, token_in: str, token_out: str, amount_out: int
    ) -> int:
        zero_for_one = pool.is_zero_for_one(token_in, token_out)
        if amount_out <= 0:
            return 0
        if pool.liquidity <= 0:
            raise InsufficientLiquidity("Range has no liquidity")

        liquidity = S(pool.liquidity)
        sqrt_price = S(pool.sqrt_price_x96)
        out = S(amount_out)

        if zero_for_one:
            # token1 out: price moves down by out / L
            step = (out * Q96).ceiling_div(liquidity)
            if step >= sqrt_price:
                raise InsufficientLiquidity("Output exceeds range liquidity")
            next_price = sqrt_price - step
            if next_price < pool.sqrt_price_lower_x96:
                raise InsufficientLiquidity("Swap crosses the lower range boundary")
            # token0 delta, rounded up
            net_in = (liquidity * Q96 * (sqrt_price - next_price)).ceiling_div(next_price).ceiling_div(
                sqrt_price
            )
            return _amount_with_fee(net_in.value, pool.fee)

        # token0 out: price moves up
        numerator = liquidity * Q96
        product = out * sqrt_price
        if product >= numerator:
            raise InsufficientLiquidity("Output exceeds range liquidity")
        next_price = (numerator * sqrt_price).ceiling_div(numerator - product)
        if next_price > pool.sqrt_price_upper_x96:
            raise InsufficientLiquidity("Swap crosses the upper range boundary")
        # token1 delta, rounded up
        net_in = (liquidity * (next_price - sqrt_price)).ceiling_div(Q96)
        return _amount_with_fee(net_in.value, pool.fee)


concentrated_liquidity_math = ConcentratedLiquidityMath()
