"""Pydantic models for routing requests and results.

Field names are snake_case in Python; camelCase aliases match the lens
contract's parameter names so requests can be sent verbatim.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from bestdex.constants import ZERO_BYTES32
from bestdex.models.types import Address, Bytes, Bytes32, Uint256

_MODEL_CONFIG = ConfigDict(populate_by_name=True, frozen=True)


class VenueRef(BaseModel):
    """A venue the router may quote against, plus its pool selector."""

    venue_id: str = Field(alias="dex", min_length=1, description="Venue name, e.g. 'uniswap'.")
    ancillary_data: Bytes32 = Field(
        default=ZERO_BYTES32,
        alias="ancillaryData",
        description="Opaque per-venue routing data (pool selector).",
    )

    model_config = _MODEL_CONFIG


class SwapIntent(BaseModel):
    """A request to split a swap across venues.

    `amount` is the offered input when `is_amount_to_buy` is False and the
    desired output when it is True.
    """

    asset_to_sell: Address = Field(alias="assetToSell")
    asset_to_buy: Address = Field(alias="assetToBuy")
    amount: Uint256
    is_amount_to_buy: bool = Field(default=False, alias="isAmountToBuy")
    shares: int = Field(ge=0, description="Number of increments the amount is split into.")
    gas_price_in_checked_asset: Uint256 = Field(default=0, alias="gasPriceInCheckedAsset")
    venues: list[VenueRef] = Field(alias="dexes")

    model_config = _MODEL_CONFIG

    @property
    def increment(self) -> int:
        """Size of one share (floor division; the remainder is not tracked)."""
        return self.amount // self.shares if self.shares else 0


class RoutePath(BaseModel):
    """A single-hop swap through one venue."""

    venue_id: str = Field(alias="dexName")
    share_weight: int = Field(alias="shares", ge=1)
    encoded_path: Bytes = Field(alias="payload")

    model_config = _MODEL_CONFIG


class Route(BaseModel):
    """One venue's slice of the allocation."""

    share_weight: int = Field(alias="shares", ge=1)
    paths: list[RoutePath]

    model_config = _MODEL_CONFIG


class RoutingResult(BaseModel):
    """Outcome of one allocation.

    `estimate_gas_amount` is in gas units (not converted to the checked asset).
    """

    return_amount: Uint256 = Field(alias="returnAmount")
    estimate_gas_amount: Uint256 = Field(alias="estimateGasAmount")
    routes: list[Route] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    @classmethod
    def empty(cls) -> RoutingResult:
        """Result for a leg with nothing to swap."""
        return cls(return_amount=0, estimate_gas_amount=0, routes=[])

    @property
    def total_shares(self) -> int:
        return sum(route.share_weight for route in self.routes)

    @property
    def venue_ids(self) -> list[str]:
        return [path.venue_id for route in self.routes for path in route.paths]


class LegShares(BaseModel):
    """Share counts for the three legs of an openable position."""

    first_asset_shares: int = Field(alias="firstAssetShares", ge=0)
    deposit_in_third_asset_shares: int = Field(alias="depositInThirdAssetShares", ge=0)
    deposit_to_borrowed_shares: int = Field(alias="depositToBorrowedShares", ge=0)

    model_config = _MODEL_CONFIG


class OpenablePositionParams(BaseModel):
    """A prospective leveraged position to evaluate."""

    position_manager: Address = Field(alias="positionManager")
    borrowed_asset: Address = Field(alias="borrowedAsset")
    borrowed_amount: Uint256 = Field(alias="borrowedAmount")
    deposit_asset: Address = Field(alias="depositAsset")
    deposit_amount: Uint256 = Field(alias="depositAmount")
    position_asset: Address = Field(alias="positionAsset")
    shares: LegShares
    venues: list[VenueRef] = Field(alias="dexes")
    gas_price_in_checked_asset: Uint256 = Field(default=0, alias="gasPriceInCheckedAsset")

    model_config = _MODEL_CONFIG


class OpenablePositionRoutes(BaseModel):
    """Three sibling routing results; never merged into one allocation."""

    first_asset_route: RoutingResult = Field(alias="firstAssetReturnParams")
    deposit_in_third_asset_route: RoutingResult = Field(alias="depositInThirdAssetReturnParams")
    deposit_to_borrowed_route: RoutingResult = Field(alias="depositToBorrowedReturnParams")

    model_config = _MODEL_CONFIG


__all__ = [
    "VenueRef",
    "SwapIntent",
    "RoutePath",
    "Route",
    "RoutingResult",
    "LegShares",
    "OpenablePositionParams",
    "OpenablePositionRoutes",
]
