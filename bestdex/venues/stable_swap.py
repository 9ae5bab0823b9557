"""Stable-swap venue math (Curve / Balancer stable pools).

Uses the StableSwap invariant in Balancer's parameterization (A*n, amp scaled
by AMP_PRECISION) solved with Newton-Raphson iteration.

All balances are upscaled to 18 decimals with per-token scaling factors
before the invariant math and downscaled on the way out, rounding in the
pool's favour.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bestdex.constants import AMP_PRECISION
from bestdex.math.wad import complement, div_up, mul_up
from bestdex.models.types import normalize_address
from bestdex.safe_int import S
from bestdex.venues.base import DidNotConverge, InsufficientLiquidity, TokenNotInPool

_MAX_ITERATIONS = 255


@dataclass(frozen=True)
class StableSwapPool:
    """A stable-swap pool.

    Attributes:
        tokens: Pool tokens
        balances: Raw token balances, aligned with tokens
        amp: Amplification parameter multiplied by AMP_PRECISION
        fee: Swap fee as a WAD fraction (4 * 10**14 = 0.04%)
        scaling_factors: 10**(18 - decimals) per token; all ones when omitted
    """

    tokens: tuple[str, ...]
    balances: tuple[int, ...]
    amp: int
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


def calculate_invariant(amp: int, balances: list[int]) -> int:
    """Invariant D for the given (upscaled) balances.

    Raises:
        InsufficientLiquidity: If any balance is zero
        DidNotConverge: If Newton iteration does not settle within 255 rounds
    """
    n_coins = len(balances)
    if any(balance <= 0 for balance in balances):
        raise InsufficientLiquidity("Stable pool has an empty balance")

    total = S(sum(balances))
    amp_times_n = S(amp) * n_coins
    invariant = total

    for _ in range(_MAX_ITERATIONS):
        d_p = invariant
        for balance in balances:
            d_p = (d_p * invariant) // (S(balance) * n_coins)

        previous = invariant
        numerator = ((amp_times_n * total) // AMP_PRECISION + d_p * n_coins) * invariant
        denominator = ((amp_times_n - AMP_PRECISION) * invariant) // AMP_PRECISION + d_p * (
            n_coins + 1
        )
        invariant = numerator // denominator

        if abs(invariant.value - previous.value) <= 1:
            return invariant.value

    raise DidNotConverge("Stable invariant did not converge")


def balance_given_invariant(amp: int, balances: list[int], invariant: int, index: int) -> int:
    """Solve for balances[index] keeping the invariant, the others fixed.

    Raises:
        DidNotConverge: If Newton iteration does not settle within 255 rounds
    """
    n_coins = len(balances)
    d = S(invariant)
    amp_times_total = S(amp) * n_coins

    total = S(balances[0])
    p_d = S(balances[0]) * n_coins
    for j in range(1, n_coins):
        p_d = (p_d * balances[j] * n_coins) // d
        total = total + balances[j]
    total = total - balances[index]

    inv2 = d * d
    c = (inv2.ceiling_div(amp_times_total * p_d)) * AMP_PRECISION * balances[index]
    b = total + (d // amp_times_total) * AMP_PRECISION

    balance = (inv2 + c).ceiling_div(d + b)
    for _ in range(_MAX_ITERATIONS):
        previous = balance
        denominator = S(2) * balance + b
        if denominator <= d:
            raise DidNotConverge("Stable balance denominator became non-positive")
        balance = (balance * balance + c).ceiling_div(denominator - d)
        if abs(balance.value - previous.value) <= 1:
            return balance.value

    raise DidNotConverge("Stable balance did not converge")


class StableSwapMath:
    """Exact-input and exact-output quoting for stable pools."""

    def amount_out(self, pool: StableSwapPool, token_in: str, token_out: str, amount_in: int) -> int:
        i, j = pool.index_of(token_in), pool.index_of(token_out)
        if amount_in <= 0:
            return 0
        factors = pool.factors()
        balances = [balance * factor for balance, factor in zip(pool.balances, factors)]

        amount_in_less_fee = amount_in - mul_up(amount_in, pool.fee)
        invariant = calculate_invariant(pool.amp, balances)
        balances[i] += amount_in_less_fee * factors[i]
        final_out = balance_given_invariant(pool.amp, balances, invariant, j)
        if final_out + 1 >= balances[j]:
            # Input too small to move the balance after rounding
            return 0
        scaled_out = balances[j] - final_out - 1
        return scaled_out // factors[j]

    def amount_in(self, pool: StableSwapPool, token_in: str, token_out: str, amount_out: int) -> int:
        i, j = pool.index_of(token_in), pool.index_of(token_out)
        if amount_out <= 0:
            return 0
        factors = pool.factors()
        balances = [balance * factor for balance, factor in zip(pool.balances, factors)]

        scaled_out = amount_out * factors[j]
        if scaled_out >= balances[j]:
            raise InsufficientLiquidity(f"Cannot extract {amount_out} from stable pool")
        invariant = calculate_invariant(pool.amp, balances)
        balances[j] -= scaled_out
        final_in = balance_given_invariant(pool.amp, balances, invariant, i)
        scaled_in = final_in - balances[i] + 1
        amount_in = S(scaled_in).ceiling_div(factors[i]).value
        return div_up(amount_in, complement(pool.fee))


stable_swap_math = StableSwapMath()
