"""API endpoints for the best-execution router."""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from bestdex.errors import RouterError
from bestdex.lens.facade import BestDexLens, get_default_lens
from bestdex.models.position import (
    PositionBatchRequest,
    PositionBatchResult,
    PositionRouteRequest,
)
from bestdex.models.routing import (
    OpenablePositionParams,
    OpenablePositionRoutes,
    RoutingResult,
    SwapIntent,
)

logger = structlog.get_logger()

router = APIRouter()


def get_lens() -> BestDexLens:
    """Dependency provider for the lens instance.

    Override this in tests to inject a lens over a fixture snapshot:
        app.dependency_overrides[get_lens] = lambda: lens
    """
    return get_default_lens()


async def router_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map RouterError to 400 with the protocol error name."""
    assert isinstance(exc, RouterError)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=exc.code.value,
        detail=exc.detail,
    )
    return JSONResponse(status_code=400, content={"error": exc.code.value, "detail": exc.detail})


@router.post("/routes/best")
def best_route(intent: SwapIntent, lens: BestDexLens = Depends(get_lens)) -> RoutingResult:
    """Split a swap across the given venues."""
    logger.info(
        "received_route_request",
        shares=intent.shares,
        venue_count=len(intent.venues),
        is_amount_to_buy=intent.is_amount_to_buy,
    )
    return lens.allocate(intent)


@router.post("/routes/openable-position")
def openable_position_routes(
    params: OpenablePositionParams, lens: BestDexLens = Depends(get_lens)
) -> OpenablePositionRoutes:
    """Routes for the three legs of a prospective position."""
    return lens.evaluate_openable_position(params)


@router.post("/positions/best-route")
def position_best_route(
    request: PositionRouteRequest, lens: BestDexLens = Depends(get_lens)
) -> RoutingResult:
    """Best route closing an open position."""
    return lens.best_route_by_position(request.position_id, request.shares, request.venues)


@router.post("/positions/price-and-profit")
def positions_price_and_profit(
    request: PositionBatchRequest, lens: BestDexLens = Depends(get_lens)
) -> PositionBatchResult:
    """Current price and profit for a batch of positions, in request order."""
    return lens.batch_position_profit_and_price(
        request.position_ids, request.shares, request.venues
    )
