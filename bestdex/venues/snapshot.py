"""Immutable snapshot of venue state.

A snapshot is the router's view of every venue at one instant (one block).
All quotes of a router call, including the three legs of an openable
position, are taken against the same snapshot so cross-venue comparisons
are meaningful.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from bestdex.constants import ZERO_BYTES32
from bestdex.models.types import normalize_address
from bestdex.venues.base import VenueKind


@dataclass(frozen=True, eq=False)
class VenueEntry:
    """One venue (a DEX) and the pools it can quote.

    Attributes:
        venue_id: Venue name callers refer to (e.g. "uniswapv3")
        kind: Pricing-curve family shared by all pools of the venue
        pools: Pools in lookup order
        selectors: Ancillary data -> index into pools, for venues where the
            caller picks the pool explicitly (fee tier, pool id)
    """

    venue_id: str
    kind: VenueKind
    pools: tuple[Any, ...]
    selectors: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized = {key.lower(): index for key, index in self.selectors.items()}
        for key, index in normalized.items():
            if not 0 <= index < len(self.pools):
                raise ValueError(f"Selector {key} of {self.venue_id} points past its pools")
        object.__setattr__(self, "selectors", MappingProxyType(normalized))

    def find_pool(self, ancillary_data: str, asset_in: str, asset_out: str) -> Any | None:
        """Pool for a pair, honouring an explicit selector when one is given.

        A selector that names a pool without the pair yields None rather
        than silently falling back to another pool.
        """
        wanted = {normalize_address(asset_in), normalize_address(asset_out)}
        selector = ancillary_data.lower()
        if selector != ZERO_BYTES32 and selector in self.selectors:
            pool = self.pools[self.selectors[selector]]
            return pool if wanted <= _pool_tokens(pool) else None
        for pool in self.pools:
            if wanted <= _pool_tokens(pool):
                return pool
        return None


def _pool_tokens(pool: Any) -> set[str]:
    return {normalize_address(token) for token in pool.tokens}


class VenueSnapshot:
    """Read-only mapping of venue id -> VenueEntry, pinned to one block.

    Args:
        entries: Venue entries; ids must be unique
        block_number: Block the state was read at (informational)
    """

    def __init__(self, entries: Iterable[VenueEntry], block_number: int | None = None) -> None:
        venues: dict[str, VenueEntry] = {}
        for entry in entries:
            if entry.venue_id in venues:
                raise ValueError(f"Duplicate venue id: {entry.venue_id}")
            venues[entry.venue_id] = entry
        self._venues: Mapping[str, VenueEntry] = MappingProxyType(venues)
        self.block_number = block_number

    def get(self, venue_id: str) -> VenueEntry | None:
        return self._venues.get(venue_id)

    def __contains__(self, venue_id: object) -> bool:
        return venue_id in self._venues

    def __len__(self) -> int:
        return len(self._venues)

    @property
    def venue_ids(self) -> list[str]:
        return list(self._venues)

    def kinds(self) -> dict[str, VenueKind]:
        return {venue_id: entry.kind for venue_id, entry in self._venues.items()}


__all__ = ["VenueEntry", "VenueSnapshot"]
