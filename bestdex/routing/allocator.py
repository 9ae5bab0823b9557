"""Greedy share-by-share allocation of a swap across venues.

The amount is cut into `shares` equal increments (floor division). Each
increment goes to the venue with the best marginal quote given what that
venue has already been assigned:

- sells (exact input): highest marginal output wins
- buys (exact output): lowest marginal input wins

A venue's gas cost (gas units * gas price in the checked asset) is netted
into its quote only while the venue is still unused, so gas is paid once
per venue. Ties keep the first-listed venue.

After the last increment every used venue is quoted once more for its whole
slice; those totals, not the per-increment deltas, make up returnAmount.
"""

from __future__ import annotations

import structlog

from bestdex.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from bestdex.errors import ErrorCode, InvalidAmount, InvalidAsset, InvalidShareCount, RouteNotFound
from bestdex.models.routing import RoutingResult, SwapIntent
from bestdex.models.types import is_zero_address
from bestdex.routing.aggregator import RouteAggregator
from bestdex.routing.types import VenueAllocation
from bestdex.venues.base import VenueQuoter

logger = structlog.get_logger()


class RouteAllocator:
    """Splits a SwapIntent across its venues.

    Args:
        quoter: Marginal and total quotes, all from one snapshot
        config: Share limit (gas units come from the quoter's quotes)
        aggregator: Packs allocations into a RoutingResult. Defaults to a
            RouteAggregator over the same quoter.
    """

    def __init__(
        self,
        quoter: VenueQuoter,
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
        aggregator: RouteAggregator | None = None,
    ) -> None:
        self.quoter = quoter
        self.config = config
        self.aggregator = aggregator if aggregator is not None else RouteAggregator(quoter)

    def validate(self, intent: SwapIntent) -> None:
        """Fail fast on an intent that cannot be allocated.

        Raises:
            InvalidAsset: ZERO_ASSET_ADDRESS or ASSETS_SHOULD_BE_DIFFERENT
            InvalidShareCount: ZERO_SHARES, SHARES_AMOUNT_IS_GREATER_THAN_AMOUNT_TO_SELL
                or SHARES_LIMIT_EXCEEDED (only when max_shares is set)
            InvalidAmount: EMPTY_VENUES
        """
        if is_zero_address(intent.asset_to_buy) or is_zero_address(intent.asset_to_sell):
            raise InvalidAsset(ErrorCode.ZERO_ASSET_ADDRESS)
        if intent.asset_to_buy == intent.asset_to_sell:
            raise InvalidAsset(ErrorCode.ASSETS_SHOULD_BE_DIFFERENT)
        if intent.shares == 0:
            raise InvalidShareCount(ErrorCode.ZERO_SHARES)
        if intent.shares > intent.amount:
            raise InvalidShareCount(ErrorCode.SHARES_AMOUNT_IS_GREATER_THAN_AMOUNT_TO_SELL)
        max_shares = self.config.max_shares
        if max_shares is not None and intent.shares > max_shares:
            raise InvalidShareCount(
                ErrorCode.SHARES_LIMIT_EXCEEDED, f"{intent.shares} shares, limit is {max_shares}"
            )
        if not intent.venues:
            raise InvalidAmount(ErrorCode.EMPTY_VENUES)

    def allocate(self, intent: SwapIntent) -> RoutingResult:
        """Best-execution route for the intent.

        Raises:
            RouterError: On invalid input, or RouteNotFound when some
                increment cannot be placed on any venue
        """
        self.validate(intent)
        self.quoter.clear_cache()
        weights = self.assign_shares(intent)
        allocations = self._final_quotes(intent, weights)
        result = self.aggregator.build(intent, allocations)
        logger.info(
            "allocation_complete",
            asset_to_sell=intent.asset_to_sell[-8:],
            asset_to_buy=intent.asset_to_buy[-8:],
            amount=intent.amount,
            shares=intent.shares,
            is_amount_to_buy=intent.is_amount_to_buy,
            venues_used=result.venue_ids,
            return_amount=result.return_amount,
        )
        return result

    def assign_shares(self, intent: SwapIntent) -> list[int]:
        """Run the greedy loop; returns the share count per venue, in venue order."""
        increment = intent.increment
        is_buy = intent.is_amount_to_buy
        venue_count = len(intent.venues)
        cumulative = [0] * venue_count
        weights = [0] * venue_count

        for step in range(intent.shares):
            best_index: int | None = None
            best_net = 0
            for index, venue in enumerate(intent.venues):
                quote = self.quoter.quote(
                    venue,
                    intent.asset_to_sell,
                    intent.asset_to_buy,
                    cumulative[index],
                    increment,
                    is_buy,
                )
                if quote is None:
                    continue
                net = quote.amount
                if weights[index] == 0:
                    gas_cost = quote.gas_units * intent.gas_price_in_checked_asset
                    net = net + gas_cost if is_buy else net - gas_cost
                if best_index is None or (net < best_net if is_buy else net > best_net):
                    best_index = index
                    best_net = net

            if best_index is None:
                logger.warning(
                    "no_venue_can_quote",
                    step=step,
                    increment=increment,
                    venue_count=venue_count,
                )
                raise RouteNotFound(
                    ErrorCode.NO_ROUTE_FOUND, f"No venue can quote increment {step + 1}"
                )

            cumulative[best_index] += increment
            weights[best_index] += 1
            logger.debug(
                "increment_assigned",
                step=step,
                venue_id=intent.venues[best_index].venue_id,
                net_quote=best_net,
            )

        return weights

    def _final_quotes(self, intent: SwapIntent, weights: list[int]) -> list[VenueAllocation]:
        allocations = []
        for venue, weight in zip(intent.venues, weights, strict=True):
            if weight == 0:
                continue
            amount = intent.amount * weight // intent.shares
            quote = self.quoter.total_quote(
                venue,
                intent.asset_to_sell,
                intent.asset_to_buy,
                amount,
                intent.is_amount_to_buy,
            )
            if quote is None:
                raise RouteNotFound(
                    ErrorCode.NO_ROUTE_FOUND, f"{venue.venue_id} cannot quote {amount}"
                )
            allocations.append(
                VenueAllocation(
                    venue=venue,
                    share_weight=weight,
                    amount=amount,
                    quoted_amount=quote.amount,
                    gas_units=quote.gas_units,
                )
            )
        return allocations


__all__ = ["RouteAllocator"]
