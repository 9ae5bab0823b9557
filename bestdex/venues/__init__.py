"""Venue quoting: pool math per venue kind, snapshots and the reference quoter.

Module structure:
- base.py: VenueKind, Quote and the VenueQuoter / GasModel protocols
- constant_product.py, concentrated.py, stable_swap.py, weighted.py,
  aggregator.py: curve math per venue kind
- snapshot.py: immutable VenueSnapshot the quoter reads
- quoter.py: SnapshotQuoter (marginal quotes from memoized totals)
- gas.py: StaticGasModel
- encoding.py: single-hop path encoding per venue kind
- parsing.py: JSON venue documents -> VenueSnapshot
"""

from bestdex.venues.aggregator import AggregatedPool, AggregatorMath, AggregatorSource
from bestdex.venues.base import (
    GasModel,
    InsufficientLiquidity,
    PoolCalculator,
    Quote,
    VenueKind,
    VenueMathError,
    VenueQuoter,
)
from bestdex.venues.concentrated import ConcentratedLiquidityPool
from bestdex.venues.constant_product import ConstantProductPool
from bestdex.venues.encoding import encode_path
from bestdex.venues.gas import DEFAULT_GAS_UNITS, StaticGasModel
from bestdex.venues.parsing import VenueDocument, parse_snapshot
from bestdex.venues.quoter import DEFAULT_CALCULATORS, SnapshotQuoter
from bestdex.venues.snapshot import VenueEntry, VenueSnapshot
from bestdex.venues.stable_swap import StableSwapPool
from bestdex.venues.weighted import WeightedPool

__all__ = [
    "AggregatedPool",
    "AggregatorMath",
    "AggregatorSource",
    "ConcentratedLiquidityPool",
    "ConstantProductPool",
    "DEFAULT_CALCULATORS",
    "DEFAULT_GAS_UNITS",
    "GasModel",
    "InsufficientLiquidity",
    "PoolCalculator",
    "Quote",
    "SnapshotQuoter",
    "StableSwapPool",
    "StaticGasModel",
    "VenueDocument",
    "VenueEntry",
    "VenueKind",
    "VenueMathError",
    "VenueQuoter",
    "VenueSnapshot",
    "WeightedPool",
    "encode_path",
    "parse_snapshot",
]
