"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token and collaborator addresses
- factories: Intent, venue, position and quoter factory functions
- quoters: Deterministic VenueQuoter doubles
"""

from tests.helpers.constants import (
    DAI,
    POSITION_MANAGER,
    UNKNOWN_MANAGER,
    USDC,
    WBTC,
    WETH,
    ZERO_ADDRESS,
)
from tests.helpers.factories import (
    make_cp_entry,
    make_intent,
    make_openable_params,
    make_position,
    make_snapshot_quoter,
    venues,
)
from tests.helpers.quoters import ScriptedQuoter, capped, linear, unavailable

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "WBTC",
    "POSITION_MANAGER",
    "UNKNOWN_MANAGER",
    "ZERO_ADDRESS",
    # Factories
    "make_cp_entry",
    "make_intent",
    "make_openable_params",
    "make_position",
    "make_snapshot_quoter",
    "venues",
    # Quoters
    "ScriptedQuoter",
    "capped",
    "linear",
    "unavailable",
]
