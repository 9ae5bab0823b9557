"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass

from bestdex.models.routing import VenueRef


@dataclass
class VenueAllocation:
    """One used venue after allocation.

    share_weight counts increments assigned to the venue; amount is the
    slice of the request it was given and quoted_amount the venue's total
    quote for that slice (output for sells, input for buys).
    """

    venue: VenueRef
    share_weight: int
    amount: int
    quoted_amount: int
    gas_units: int


__all__ = ["VenueAllocation"]
