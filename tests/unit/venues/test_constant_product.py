"""Tests for constant-product venue math."""

import pytest

from bestdex.venues.base import InsufficientLiquidity, TokenNotInPool
from bestdex.venues.constant_product import ConstantProductPool, constant_product_math
from tests.helpers import DAI, USDC, WETH


@pytest.fixture
def pool() -> ConstantProductPool:
    return ConstantProductPool(token0=WETH, token1=USDC, reserve0=1_000_000, reserve1=2_000_000)


class TestConstantProductAmountOut:
    """Tests for exact-input quotes."""

    def test_amount_out_exact(self, pool):
        """(1000 * 9970 * 2e6) / (1e6 * 10000 + 1000 * 9970) = 1992.01 -> 1992."""
        assert constant_product_math.amount_out(pool, WETH, USDC, 1000) == 1992

    def test_direction_uses_matching_reserves(self, pool):
        """Selling token1 reads reserves in the opposite order."""
        forward = constant_product_math.amount_out(pool, WETH, USDC, 1000)
        backward = constant_product_math.amount_out(pool, USDC, WETH, 1000)
        assert backward < forward
        assert backward == 498

    def test_zero_input(self, pool):
        assert constant_product_math.amount_out(pool, WETH, USDC, 0) == 0

    def test_lower_fee_gives_more(self, pool):
        """A 25 bps fork pays more than the 30 bps default."""
        cheaper = ConstantProductPool(
            token0=WETH, token1=USDC, reserve0=1_000_000, reserve1=2_000_000, fee_bps=25
        )
        assert constant_product_math.amount_out(cheaper, WETH, USDC, 1000) > 1992

    def test_unknown_token(self, pool):
        with pytest.raises(TokenNotInPool):
            constant_product_math.amount_out(pool, WETH, DAI, 1000)

    def test_addresses_are_case_insensitive(self, pool):
        assert constant_product_math.amount_out(pool, WETH.upper().replace("0X", "0x"), USDC, 1000) == 1992

    def test_empty_reserve(self):
        empty = ConstantProductPool(token0=WETH, token1=USDC, reserve0=0, reserve1=100)
        with pytest.raises(InsufficientLiquidity):
            constant_product_math.amount_out(empty, WETH, USDC, 10)


class TestConstantProductAmountIn:
    """Tests for exact-output quotes."""

    def test_amount_in_exact(self, pool):
        """Buying the output of a 1000 input costs exactly 1000 again."""
        assert constant_product_math.amount_in(pool, WETH, USDC, 1992) == 1000

    def test_amount_in_is_monotonic(self, pool):
        small = constant_product_math.amount_in(pool, WETH, USDC, 1000)
        large = constant_product_math.amount_in(pool, WETH, USDC, 100_000)
        assert large > small * 100

    def test_output_at_reserve_fails(self, pool):
        with pytest.raises(InsufficientLiquidity):
            constant_product_math.amount_in(pool, WETH, USDC, 2_000_000)

    def test_zero_output(self, pool):
        assert constant_product_math.amount_in(pool, WETH, USDC, 0) == 0
