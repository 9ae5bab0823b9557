"""BestDexLens: the router's read-only query surface.

Wires one quoter (one snapshot) into the allocator, the openable-position
composer and the profit evaluator, so every query of a lens instance sees
the same venue state.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

import structlog

from bestdex.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from bestdex.lens.collaborators import AddressCapabilityCheck, Oracle, PositionBook
from bestdex.lens.openable_position import OpenablePositionRouteComposer
from bestdex.lens.profit import PositionProfitEvaluator
from bestdex.lens.state import LensDocument, LensState, build_state, load_state
from bestdex.models.position import PositionBatchResult, PositionSnapshot, PriceAndProfit
from bestdex.models.routing import (
    OpenablePositionParams,
    OpenablePositionRoutes,
    RoutingResult,
    SwapIntent,
    VenueRef,
)
from bestdex.routing.allocator import RouteAllocator
from bestdex.venues.base import VenueQuoter
from bestdex.venues.gas import StaticGasModel
from bestdex.venues.quoter import SnapshotQuoter

logger = structlog.get_logger()


class BestDexLens:
    """Facade over routing and position evaluation.

    Args:
        quoter: Quotes every venue against one snapshot
        is_position_manager: Capability check for openable positions
        positions: Position book for position queries
        oracle: Rate source for deposits not made in the sold asset
        config: Router configuration
    """

    def __init__(
        self,
        quoter: VenueQuoter,
        is_position_manager: AddressCapabilityCheck,
        positions: PositionBook,
        oracle: Oracle,
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
    ) -> None:
        self.quoter = quoter
        self.config = config
        self.allocator = RouteAllocator(quoter, config)
        self.composer = OpenablePositionRouteComposer(self.allocator, is_position_manager)
        self.evaluator = PositionProfitEvaluator(self.allocator, positions, oracle)

    @classmethod
    def from_state(cls, state: LensState, config: RouterConfig = DEFAULT_ROUTER_CONFIG) -> BestDexLens:
        gas_model = StaticGasModel(
            venue_kinds=state.snapshot.kinds(),
            overrides=state.gas_overrides,
            defaults=config.gas_units_by_kind,
        )
        quoter = SnapshotQuoter(state.snapshot, gas_model)
        logger.info(
            "lens_created",
            block_number=state.snapshot.block_number,
            venue_ids=state.snapshot.venue_ids,
            position_count=len(state.positions),
        )
        return cls(
            quoter=quoter,
            is_position_manager=state.position_managers,
            positions=state.positions,
            oracle=state.oracle,
            config=config,
        )

    @classmethod
    def from_file(cls, path: str | Path, config: RouterConfig = DEFAULT_ROUTER_CONFIG) -> BestDexLens:
        return cls.from_state(load_state(path), config)

    def allocate(self, intent: SwapIntent) -> RoutingResult:
        return self.allocator.allocate(intent)

    def evaluate_openable_position(self, params: OpenablePositionParams) -> OpenablePositionRoutes:
        return self.composer.evaluate_openable_position(params)

    def position_profit(self, position: PositionSnapshot, route: RoutingResult) -> int:
        return self.evaluator.position_profit(position, route)

    def best_route_by_position(
        self, position_id: int, shares: int, venues: Sequence[VenueRef]
    ) -> RoutingResult:
        return self.evaluator.best_route_by_position(position_id, shares, venues)

    def price_and_profit(
        self, position_id: int, shares: int, venues: Sequence[VenueRef]
    ) -> PriceAndProfit:
        return self.evaluator.price_and_profit(position_id, shares, venues)

    def batch_position_profit_and_price(
        self,
        position_ids: Sequence[int],
        shares: Sequence[int],
        venues: Sequence[Sequence[VenueRef]],
    ) -> PositionBatchResult:
        return self.evaluator.batch_position_profit_and_price(position_ids, shares, venues)


def _env_addresses(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [address.strip() for address in raw.split(",") if address.strip()]


def create_default_lens() -> BestDexLens:
    """Build the lens the service runs with.

    Configuration via environment variables:
    - BESTDEX_SNAPSHOT_PATH: JSON lens state document (default: empty state)
    - BESTDEX_POSITION_MANAGERS: Comma-separated position manager addresses,
      added to those listed in the document
    - BESTDEX_MAX_SHARES: Optional cap on the share count of one allocation
    """
    path = os.environ.get("BESTDEX_SNAPSHOT_PATH")
    extra_managers = _env_addresses("BESTDEX_POSITION_MANAGERS")
    if path:
        document = LensDocument.model_validate(json.loads(Path(path).read_text()))
        logger.info("lens_state_file", path=path)
    else:
        document = LensDocument()
        logger.warning("lens_state_empty", reason="BESTDEX_SNAPSHOT_PATH not set")
    if extra_managers:
        document = document.model_copy(
            update={"position_managers": [*document.position_managers, *extra_managers]}
        )
    max_shares = os.environ.get("BESTDEX_MAX_SHARES")
    config = RouterConfig(max_shares=int(max_shares)) if max_shares else DEFAULT_ROUTER_CONFIG
    return BestDexLens.from_state(build_state(document), config)


@lru_cache(maxsize=1)
def get_default_lens() -> BestDexLens:
    """Process-wide lens, built on first use."""
    return create_default_lens()


__all__ = ["BestDexLens", "create_default_lens", "get_default_lens"]
