"""Snapshot-backed VenueQuoter.

Dispatches each venue to the curve math of its kind (a VenueKind ->
PoolCalculator table, so adding a kind never touches routing code) and
derives marginal quotes from non-incremental totals:

    marginal(cumulative, increment) = total(cumulative + increment) - total(cumulative)

Totals are memoized while one allocation runs (the allocator clears the
memo before each call), so the memo never outgrows a single request.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

import structlog

from bestdex.models.routing import VenueRef
from bestdex.venues.aggregator import AggregatorMath
from bestdex.venues.base import GasModel, PoolCalculator, Quote, VenueKind, VenueMathError
from bestdex.venues.concentrated import ConcentratedLiquidityPool, concentrated_liquidity_math
from bestdex.venues.constant_product import constant_product_math
from bestdex.venues.encoding import encode_path
from bestdex.venues.snapshot import VenueSnapshot
from bestdex.venues.stable_swap import stable_swap_math
from bestdex.venues.weighted import weighted_pool_math

logger = structlog.get_logger()

_BASE_CALCULATORS: dict[VenueKind, PoolCalculator] = {
    VenueKind.CONSTANT_PRODUCT: constant_product_math,
    VenueKind.CONCENTRATED_LIQUIDITY: concentrated_liquidity_math,
    VenueKind.STABLE_SWAP: stable_swap_math,
    VenueKind.WEIGHTED_POOL: weighted_pool_math,
}

DEFAULT_CALCULATORS: Mapping[VenueKind, PoolCalculator] = MappingProxyType(
    {**_BASE_CALCULATORS, VenueKind.AGGREGATOR: AggregatorMath(_BASE_CALCULATORS)}
)

_CacheKey = tuple[str, str, str, str, int, bool]
_MISSING = object()


class SnapshotQuoter:
    """Quotes venues of one VenueSnapshot.

    Args:
        snapshot: Venue state all quotes are taken against
        gas_model: Gas units reported with each quote
        calculators: Curve math per venue kind (defaults to all built-in kinds)
    """

    def __init__(
        self,
        snapshot: VenueSnapshot,
        gas_model: GasModel,
        calculators: Mapping[VenueKind, PoolCalculator] = DEFAULT_CALCULATORS,
    ) -> None:
        self.snapshot = snapshot
        self.gas_model = gas_model
        self._calculators = dict(calculators)
        self._totals: dict[_CacheKey, int | None] = {}

    @property
    def cached_totals(self) -> int:
        return len(self._totals)

    def clear_cache(self) -> None:
        self._totals.clear()

    def _total(
        self, venue: VenueRef, asset_in: str, asset_out: str, amount: int, is_amount_to_buy: bool
    ) -> int | None:
        if amount == 0:
            return 0
        key = (
            venue.venue_id,
            venue.ancillary_data,
            asset_in.lower(),
            asset_out.lower(),
            amount,
            is_amount_to_buy,
        )
        cached = self._totals.get(key, _MISSING)
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]
        total = self._compute_total(venue, asset_in, asset_out, amount, is_amount_to_buy)
        self._totals[key] = total
        return total

    def _compute_total(
        self, venue: VenueRef, asset_in: str, asset_out: str, amount: int, is_amount_to_buy: bool
    ) -> int | None:
        entry = self.snapshot.get(venue.venue_id)
        if entry is None:
            logger.debug("venue_not_in_snapshot", venue_id=venue.venue_id)
            return None
        pool = entry.find_pool(venue.ancillary_data, asset_in, asset_out)
        if pool is None:
            logger.debug("venue_has_no_pool", venue_id=venue.venue_id, asset_in=asset_in[-8:])
            return None
        calculator = self._calculators.get(entry.kind)
        if calculator is None:
            logger.warning("venue_kind_not_supported", venue_id=venue.venue_id, kind=entry.kind.value)
            return None
        try:
            if is_amount_to_buy:
                return calculator.amount_in(pool, asset_in, asset_out, amount)
            return calculator.amount_out(pool, asset_in, asset_out, amount)
        except VenueMathError as err:
            logger.debug(
                "venue_cannot_quote",
                venue_id=venue.venue_id,
                amount=amount,
                is_amount_to_buy=is_amount_to_buy,
                reason=str(err),
            )
            return None

    def total_quote(
        self,
        venue: VenueRef,
        asset_in: str,
        asset_out: str,
        amount: int,
        is_amount_to_buy: bool,
    ) -> Quote | None:
        total = self._total(venue, asset_in, asset_out, amount, is_amount_to_buy)
        if total is None:
            return None
        return Quote(amount=total, gas_units=self.gas_model.gas_units(venue.venue_id))

    def quote(
        self,
        venue: VenueRef,
        asset_in: str,
        asset_out: str,
        cumulative: int,
        increment: int,
        is_amount_to_buy: bool,
    ) -> Quote | None:
        before = self._total(venue, asset_in, asset_out, cumulative, is_amount_to_buy)
        after = self._total(venue, asset_in, asset_out, cumulative + increment, is_amount_to_buy)
        if before is None or after is None:
            return None
        return Quote(amount=after - before, gas_units=self.gas_model.gas_units(venue.venue_id))

    def encode_path(self, venue: VenueRef, asset_in: str, asset_out: str) -> str:
        entry = self.snapshot.get(venue.venue_id)
        if entry is None:
            raise KeyError(f"Venue {venue.venue_id} not in snapshot")
        fee = 0
        if entry.kind == VenueKind.CONCENTRATED_LIQUIDITY:
            pool = entry.find_pool(venue.ancillary_data, asset_in, asset_out)
            if isinstance(pool, ConcentratedLiquidityPool):
                fee = pool.fee
        return encode_path(
            entry.kind, asset_in, asset_out, fee=fee, pool_selector=venue.ancillary_data
        )


__all__ = ["DEFAULT_CALCULATORS", "SnapshotQuoter"]
