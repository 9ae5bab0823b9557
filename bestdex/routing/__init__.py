"""Order routing across venues.

Module structure:
- allocator.py: RouteAllocator (validation and the greedy share loop)
- aggregator.py: RouteAggregator (allocations -> RoutingResult)
- types.py: VenueAllocation
"""

from bestdex.routing.aggregator import RouteAggregator
from bestdex.routing.allocator import RouteAllocator
from bestdex.routing.types import VenueAllocation

__all__ = ["RouteAggregator", "RouteAllocator", "VenueAllocation"]
