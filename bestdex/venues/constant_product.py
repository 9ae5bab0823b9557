"""Constant-product venue math (UniswapV2 and forks).

Formula: x * y = k, with the fee taken from the input amount.
"""

from __future__ import annotations

from dataclasses import dataclass

from bestdex.models.types import normalize_address
from bestdex.safe_int import S
from bestdex.venues.base import InsufficientLiquidity, TokenNotInPool

FEE_DENOMINATOR = 10_000


@dataclass(frozen=True)
class ConstantProductPool:
    """A UniswapV2-style pool."""

    token0: str
    token1: str
    reserve0: int
    reserve1: int
    # Fee in basis points (30 = 0.3%); some forks charge 25
    fee_bps: int = 30

    @property
    def tokens(self) -> tuple[str, str]:
        return (self.token0, self.token1)

    @property
    def fee_multiplier(self) -> int:
        """10000 - fee_bps, e.g. 9970 for a 0.3% pool."""
        return FEE_DENOMINATOR - self.fee_bps

    def get_reserves(self, token_in: str, token_out: str) -> tuple[int, int]:
        """Reserves ordered as (reserve_in, reserve_out)."""
        token_in_norm = normalize_address(token_in)
        token_out_norm = normalize_address(token_out)
        token0 = normalize_address(self.token0)
        token1 = normalize_address(self.token1)
        if (token_in_norm, token_out_norm) == (token0, token1):
            return self.reserve0, self.reserve1
        if (token_in_norm, token_out_norm) == (token1, token0):
            return self.reserve1, self.reserve0
        raise TokenNotInPool(f"Pair {token_in}/{token_out} not in pool")


class ConstantProductMath:
    """UniswapV2 quoting.

    amount_out = (in * fee * res_out) / (res_in * 10000 + in * fee)
    amount_in  = (res_in * out * 10000) / ((res_out - out) * fee) + 1
    """

    def amount_out(
        self, pool: ConstantProductPool, token_in: str, token_out: str, amount_in: int
    ) -> int:
        reserve_in, reserve_out = pool.get_reserves(token_in, token_out)
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity("Pool has an empty reserve")

        amount_in_with_fee = S(amount_in) * S(pool.fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(FEE_DENOMINATOR) + amount_in_with_fee
        return (numerator // denominator).value

    def amount_in(
        self, pool: ConstantProductPool, token_in: str, token_out: str, amount_out: int
    ) -> int:
        reserve_in, reserve_out = pool.get_reserves(token_in, token_out)
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity("Pool has an empty reserve")
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(f"Cannot extract {amount_out} from reserve {reserve_out}")

        numerator = S(reserve_in) * S(amount_out) * S(FEE_DENOMINATOR)
        denominator = (S(reserve_out) - S(amount_out)) * S(pool.fee_multiplier)
        return ((numerator // denominator) + S(1)).value


constant_product_math = ConstantProductMath()
