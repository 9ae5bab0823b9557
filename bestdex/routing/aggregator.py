"""Packaging of per-venue allocations into a RoutingResult."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from bestdex.models.routing import Route, RoutePath, RoutingResult, SwapIntent
from bestdex.routing.types import VenueAllocation
from bestdex.venues.base import VenueQuoter

logger = structlog.get_logger()


class RouteAggregator:
    """Builds the compact route list and totals of one allocation.

    Args:
        quoter: Supplies the single-hop path encoding of each venue
    """

    def __init__(self, quoter: VenueQuoter) -> None:
        self.quoter = quoter

    def build(self, intent: SwapIntent, allocations: Sequence[VenueAllocation]) -> RoutingResult:
        """One Route per used venue, in the order allocations are given.

        Venues with a zero share weight are dropped, so the result never
        carries a dead route.
        """
        routes: list[Route] = []
        return_amount = 0
        estimate_gas_amount = 0
        for allocation in allocations:
            if allocation.share_weight == 0:
                continue
            encoded_path = self.quoter.encode_path(
                allocation.venue, intent.asset_to_sell, intent.asset_to_buy
            )
            path = RoutePath(
                venue_id=allocation.venue.venue_id,
                share_weight=allocation.share_weight,
                encoded_path=encoded_path,
            )
            routes.append(Route(share_weight=allocation.share_weight, paths=[path]))
            return_amount += allocation.quoted_amount
            estimate_gas_amount += allocation.gas_units

        logger.debug(
            "routes_built",
            route_count=len(routes),
            return_amount=return_amount,
            estimate_gas_amount=estimate_gas_amount,
        )
        return RoutingResult(
            return_amount=return_amount,
            estimate_gas_amount=estimate_gas_amount,
            routes=routes,
        )


__all__ = ["RouteAggregator"]
