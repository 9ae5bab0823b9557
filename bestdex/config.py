"""Router configuration."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from bestdex.venues.base import VenueKind
from bestdex.venues.gas import DEFAULT_GAS_UNITS


@dataclass(frozen=True)
class RouterConfig:
    """Centralized configuration for routing.

    Attributes:
        max_shares: Optional cap on the share count of one allocation
            (SHARES_LIMIT_EXCEEDED above it). None means no cap; the
            allocator issues O(shares * venues) quotes per call.
        gas_units_by_kind: Gas units charged for a venue with no explicit
            override, by venue kind.
    """

    max_shares: int | None = None
    gas_units_by_kind: Mapping[VenueKind, int] = field(default_factory=lambda: DEFAULT_GAS_UNITS)


# Default configuration instance
DEFAULT_ROUTER_CONFIG = RouterConfig()
