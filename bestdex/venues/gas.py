"""Gas model: fixed gas units per venue."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from bestdex.constants import (
    AGGREGATOR_SWAP_GAS,
    CONCENTRATED_LIQUIDITY_SWAP_GAS,
    CONSTANT_PRODUCT_SWAP_GAS,
    STABLE_SWAP_GAS,
    WEIGHTED_POOL_SWAP_GAS,
)
from bestdex.venues.base import VenueKind

DEFAULT_GAS_UNITS: Mapping[VenueKind, int] = MappingProxyType(
    {
        VenueKind.CONSTANT_PRODUCT: CONSTANT_PRODUCT_SWAP_GAS,
        VenueKind.CONCENTRATED_LIQUIDITY: CONCENTRATED_LIQUIDITY_SWAP_GAS,
        VenueKind.STABLE_SWAP: STABLE_SWAP_GAS,
        VenueKind.WEIGHTED_POOL: WEIGHTED_POOL_SWAP_GAS,
        VenueKind.AGGREGATOR: AGGREGATOR_SWAP_GAS,
    }
)


class StaticGasModel:
    """Gas units per venue: explicit overrides first, then the kind default.

    Unknown venues cost 0 gas units; they can never be selected anyway
    because the quoter has nothing to quote for them.
    """

    def __init__(
        self,
        venue_kinds: Mapping[str, VenueKind] | None = None,
        overrides: Mapping[str, int] | None = None,
        defaults: Mapping[VenueKind, int] = DEFAULT_GAS_UNITS,
    ) -> None:
        self._venue_kinds = dict(venue_kinds or {})
        self._overrides = dict(overrides or {})
        self._defaults = dict(defaults)
        for venue_id, units in self._overrides.items():
            if units < 0:
                raise ValueError(f"Negative gas units for {venue_id}: {units}")

    def gas_units(self, venue_id: str) -> int:
        if venue_id in self._overrides:
            return self._overrides[venue_id]
        kind = self._venue_kinds.get(venue_id)
        if kind is None:
            return 0
        return self._defaults.get(kind, 0)


__all__ = ["DEFAULT_GAS_UNITS", "StaticGasModel"]
