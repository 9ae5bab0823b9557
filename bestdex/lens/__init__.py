"""Lens queries built on the router.

Module structure:
- facade.py: BestDexLens, one entry point per query
- openable_position.py: three-leg evaluation of a prospective position
- profit.py: profit and current price of open positions
- collaborators.py: oracle, position book and capability check interfaces
- state.py: lens state documents (venues, positions, oracle rates)
"""

from bestdex.lens.collaborators import (
    AddressCapabilityCheck,
    InMemoryPositionBook,
    Oracle,
    PositionBook,
    StaticPriceOracle,
    SupportedAddressSet,
)
from bestdex.lens.facade import BestDexLens
from bestdex.lens.openable_position import OpenablePositionRouteComposer
from bestdex.lens.profit import PositionProfitEvaluator
from bestdex.lens.state import LensState, load_state, parse_state

__all__ = [
    "AddressCapabilityCheck",
    "BestDexLens",
    "InMemoryPositionBook",
    "LensState",
    "OpenablePositionRouteComposer",
    "Oracle",
    "PositionBook",
    "PositionProfitEvaluator",
    "StaticPriceOracle",
    "SupportedAddressSet",
    "load_state",
    "parse_state",
]
