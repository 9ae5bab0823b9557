"""Profit and current price of open positions, from a closing route.

Closing a position sells its whole position amount for the sold (borrowed)
asset. With R the route's return amount:

    profit        = (R - debt) - deposit_in_sold_asset
    current_price = wad_div(R, position_amount)

Profit is signed; a losing position has a negative profit.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from bestdex.errors import DataShapeMismatch, ErrorCode, InvalidShareCount
from bestdex.lens.collaborators import Oracle, PositionBook
from bestdex.math import wad_div, wad_mul
from bestdex.models.position import PositionBatchResult, PositionSnapshot, PriceAndProfit
from bestdex.models.routing import RoutingResult, SwapIntent, VenueRef
from bestdex.routing.allocator import RouteAllocator

logger = structlog.get_logger()


class PositionProfitEvaluator:
    """Evaluates open positions against best closing routes.

    Args:
        allocator: Allocator used to route position closes
        positions: Source of position snapshots
        oracle: Converts deposits made in another asset into the sold asset
    """

    def __init__(self, allocator: RouteAllocator, positions: PositionBook, oracle: Oracle) -> None:
        self.allocator = allocator
        self.positions = positions
        self.oracle = oracle

    def deposit_in_sold_asset(self, position: PositionSnapshot) -> int:
        if position.deposit_asset == position.sold_asset:
            return position.deposit_amount
        rate = self.oracle.rate(position.deposit_asset, position.sold_asset)
        return wad_mul(position.deposit_amount, rate)

    def position_profit(self, position: PositionSnapshot, route: RoutingResult) -> int:
        return route.return_amount - position.debt - self.deposit_in_sold_asset(position)

    def current_price(self, position: PositionSnapshot, route: RoutingResult) -> int:
        """Sold asset received per position asset, WAD."""
        if position.position_amount == 0:
            return 0
        return wad_div(route.return_amount, position.position_amount)

    def best_route_by_position(
        self, position_id: int, shares: int, venues: Sequence[VenueRef]
    ) -> RoutingResult:
        """Best route selling the whole position for its sold asset.

        Raises:
            UnknownPosition: POSITION_DOES_NOT_EXIST
            InvalidShareCount: ZERO_SHARES
        """
        if shares == 0:
            raise InvalidShareCount(ErrorCode.ZERO_SHARES)
        position = self.positions.get(position_id)
        intent = SwapIntent(
            asset_to_sell=position.position_asset,
            asset_to_buy=position.sold_asset,
            amount=position.position_amount,
            is_amount_to_buy=False,
            shares=shares,
            gas_price_in_checked_asset=0,
            venues=list(venues),
        )
        return self.allocator.allocate(intent)

    def price_and_profit(
        self, position_id: int, shares: int, venues: Sequence[VenueRef]
    ) -> PriceAndProfit:
        route = self.best_route_by_position(position_id, shares, venues)
        position = self.positions.get(position_id)
        result = PriceAndProfit(
            current_price=self.current_price(position, route),
            profit=self.position_profit(position, route),
        )
        logger.debug(
            "position_evaluated",
            position_id=position_id,
            current_price=result.current_price,
            profit=result.profit,
        )
        return result

    def batch_position_profit_and_price(
        self,
        position_ids: Sequence[int],
        shares: Sequence[int],
        venues: Sequence[Sequence[VenueRef]],
    ) -> PositionBatchResult:
        """Price and profit for each position, in input order.

        Raises:
            DataShapeMismatch: DIFFERENT_DATA_LENGTH, before any position is routed
        """
        if not len(position_ids) == len(shares) == len(venues):
            raise DataShapeMismatch(
                ErrorCode.DIFFERENT_DATA_LENGTH,
                f"{len(position_ids)} ids, {len(shares)} shares, {len(venues)} venue lists",
            )
        prices: list[int] = []
        profits: list[int] = []
        for position_id, position_shares, position_venues in zip(
            position_ids, shares, venues, strict=True
        ):
            evaluated = self.price_and_profit(position_id, position_shares, position_venues)
            prices.append(evaluated.current_price)
            profits.append(evaluated.profit)

        logger.info("position_batch_evaluated", position_count=len(position_ids))
        return PositionBatchResult(prices=prices, profits=profits)


__all__ = ["PositionProfitEvaluator"]
