"""Pydantic models for router requests, results and positions."""

from bestdex.models.position import (
    PositionBatchRequest,
    PositionBatchResult,
    PositionRouteRequest,
    PositionSnapshot,
    PriceAndProfit,
)
from bestdex.models.routing import (
    LegShares,
    OpenablePositionParams,
    OpenablePositionRoutes,
    Route,
    RoutePath,
    RoutingResult,
    SwapIntent,
    VenueRef,
)

__all__ = [
    "LegShares",
    "OpenablePositionParams",
    "OpenablePositionRoutes",
    "PositionBatchRequest",
    "PositionBatchResult",
    "PositionRouteRequest",
    "PositionSnapshot",
    "PriceAndProfit",
    "Route",
    "RoutePath",
    "RoutingResult",
    "SwapIntent",
    "VenueRef",
]
