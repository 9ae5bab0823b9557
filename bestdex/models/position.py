"""Pydantic models for open positions and their evaluation."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from bestdex.models.routing import VenueRef
from bestdex.models.types import Address, SignedAmount, Uint256


class PositionSnapshot(BaseModel):
    """Read-only view of an open position, as the position book reports it.

    `debt` and the profit are denominated in the sold (borrowed) asset.
    """

    position_id: int = Field(alias="id", ge=0)
    sold_asset: Address = Field(alias="soldAsset")
    position_asset: Address = Field(alias="positionAsset")
    position_amount: Uint256 = Field(alias="positionAmount")
    debt: Uint256 = Field(default=0)
    deposit_asset: Address = Field(alias="depositAsset")
    deposit_amount: Uint256 = Field(alias="depositAmount")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PriceAndProfit(BaseModel):
    """Current closing price (WAD, sold asset per position asset) and profit."""

    current_price: Uint256 = Field(alias="currentPrice")
    profit: SignedAmount

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PositionBatchRequest(BaseModel):
    """Parallel arrays for batch price-and-profit evaluation.

    Lengths are checked by the evaluator, not here, so a mismatch surfaces
    as DIFFERENT_DATA_LENGTH instead of a schema error.
    """

    position_ids: list[Annotated[int, Field(ge=0)]] = Field(alias="positionIds")
    shares: list[Annotated[int, Field(ge=0)]]
    venues: list[list[VenueRef]] = Field(alias="dexes")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PositionBatchResult(BaseModel):
    prices: list[Uint256]
    profits: list[SignedAmount]

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PositionRouteRequest(BaseModel):
    """Route query for closing one open position."""

    position_id: int = Field(alias="positionId", ge=0)
    shares: int = Field(ge=0)
    venues: list[VenueRef] = Field(alias="dexes")

    model_config = ConfigDict(populate_by_name=True, frozen=True)
