"""Base types and protocols for venue quoting.

The router only ever talks to venues through VenueQuoter and GasModel.
Each venue kind supplies one PoolCalculator; dispatch is by VenueKind tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bestdex.models.routing import VenueRef


class VenueKind(str, Enum):
    """Pricing-curve family of a venue."""

    CONSTANT_PRODUCT = "constant_product"
    CONCENTRATED_LIQUIDITY = "concentrated_liquidity"
    STABLE_SWAP = "stable_swap"
    WEIGHTED_POOL = "weighted_pool"
    AGGREGATOR = "aggregator"


@dataclass(frozen=True)
class Quote:
    """A point quote from one venue.

    For sells `amount` is output received; for buys it is input required.
    """

    amount: int
    gas_units: int


class VenueMathError(ArithmeticError):
    """Base error for venue curve math (the venue cannot quote this size)."""

    pass


class InsufficientLiquidity(VenueMathError):
    """Requested size exceeds what the pool can provide."""

    pass


class MaxRatioExceeded(VenueMathError):
    """Trade exceeds the pool's in/out ratio limit."""

    pass


class DidNotConverge(VenueMathError):
    """Newton iteration did not converge."""

    pass


class TokenNotInPool(VenueMathError):
    """The pool does not hold one of the requested tokens."""

    pass


class PoolCalculator(Protocol):
    """Curve math for one venue kind.

    Both methods return the non-incremental total for the whole amount and
    raise VenueMathError when the pool cannot fill it.
    """

    def amount_out(self, pool: Any, token_in: str, token_out: str, amount_in: int) -> int:
        """Output received for an exact input."""
        ...

    def amount_in(self, pool: Any, token_in: str, token_out: str, amount_out: int) -> int:
        """Input required for an exact output."""
        ...


@runtime_checkable
class VenueQuoter(Protocol):
    """Read-only quoting against one consistent snapshot of venue state."""

    def quote(
        self,
        venue: VenueRef,
        asset_in: str,
        asset_out: str,
        cumulative: int,
        increment: int,
        is_amount_to_buy: bool,
    ) -> Quote | None:
        """Marginal quote for routing `increment` more, given `cumulative` already routed.

        Returns None when the venue cannot quote that size.
        """
        ...

    def total_quote(
        self,
        venue: VenueRef,
        asset_in: str,
        asset_out: str,
        amount: int,
        is_amount_to_buy: bool,
    ) -> Quote | None:
        """Non-incremental quote for the whole amount."""
        ...

    def encode_path(self, venue: VenueRef, asset_in: str, asset_out: str) -> str:
        """Hex-encoded single-hop path the venue adapter executes."""
        ...

    def clear_cache(self) -> None:
        """Drop quotes memoized by earlier calls."""
        ...


@runtime_checkable
class GasModel(Protocol):
    """Fixed gas-unit cost per venue."""

    def gas_units(self, venue_id: str) -> int:
        ...


__all__ = [
    "VenueKind",
    "Quote",
    "VenueMathError",
    "InsufficientLiquidity",
    "MaxRatioExceeded",
    "DidNotConverge",
    "TokenNotInPool",
    "PoolCalculator",
    "VenueQuoter",
    "GasModel",
]
