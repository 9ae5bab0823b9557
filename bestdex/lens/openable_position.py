"""Three-leg route evaluation for a prospective leveraged position.

Legs, all quoted against the same venue snapshot:

1. borrowed asset -> position asset (plus the deposit when it is made in
   the borrowed asset)
2. deposit (third asset) -> position asset
3. deposit (third asset) -> borrowed asset

Legs 2 and 3 only exist when the deposit is in a third asset. A leg with
nothing to swap is an empty RoutingResult, never an error.
"""

from __future__ import annotations

import structlog

from bestdex.errors import ErrorCode, InvalidAmount, InvalidShareCount, UnsupportedCollaborator
from bestdex.lens.collaborators import AddressCapabilityCheck
from bestdex.models.routing import (
    OpenablePositionParams,
    OpenablePositionRoutes,
    RoutingResult,
    SwapIntent,
)
from bestdex.models.types import is_zero_address
from bestdex.routing.allocator import RouteAllocator

logger = structlog.get_logger()


class OpenablePositionRouteComposer:
    """Runs the allocator once per leg of an openable position.

    Args:
        allocator: Allocator shared by all legs (one quoter, one snapshot)
        is_position_manager: Capability check for params.position_manager
    """

    def __init__(
        self, allocator: RouteAllocator, is_position_manager: AddressCapabilityCheck
    ) -> None:
        self.allocator = allocator
        self.is_position_manager = is_position_manager

    def validate(self, params: OpenablePositionParams) -> None:
        """Checks run before any leg is quoted.

        Raises:
            UnsupportedCollaborator: ADDRESS_NOT_SUPPORTED
            InvalidAmount: DEPOSITED_AMOUNT_IS_0
            InvalidShareCount: ZERO_SHARES
        """
        if not self.is_position_manager(params.position_manager):
            raise UnsupportedCollaborator(
                ErrorCode.ADDRESS_NOT_SUPPORTED, f"position manager {params.position_manager}"
            )
        for asset in (params.borrowed_asset, params.deposit_asset, params.position_asset):
            if is_zero_address(asset):
                raise UnsupportedCollaborator(ErrorCode.ADDRESS_NOT_SUPPORTED, "zero asset address")
        if params.deposit_amount == 0:
            raise InvalidAmount(ErrorCode.DEPOSITED_AMOUNT_IS_0)

        shares = params.shares
        if shares.first_asset_shares == 0:
            raise InvalidShareCount(ErrorCode.ZERO_SHARES, "firstAssetShares")
        if _deposit_in_third_asset(params) and (
            shares.deposit_in_third_asset_shares == 0 or shares.deposit_to_borrowed_shares == 0
        ):
            raise InvalidShareCount(ErrorCode.ZERO_SHARES, "third asset leg shares")

    def evaluate_openable_position(self, params: OpenablePositionParams) -> OpenablePositionRoutes:
        """Best routes for the three legs of the position."""
        self.validate(params)

        first_amount = params.borrowed_amount
        if params.deposit_asset == params.borrowed_asset:
            first_amount += params.deposit_amount
        first = self._leg(
            params,
            params.borrowed_asset,
            params.position_asset,
            first_amount,
            params.shares.first_asset_shares,
        )

        if _deposit_in_third_asset(params):
            third_to_position = self._leg(
                params,
                params.deposit_asset,
                params.position_asset,
                params.deposit_amount,
                params.shares.deposit_in_third_asset_shares,
            )
            third_to_borrowed = self._leg(
                params,
                params.deposit_asset,
                params.borrowed_asset,
                params.deposit_amount,
                params.shares.deposit_to_borrowed_shares,
            )
        else:
            third_to_position = RoutingResult.empty()
            third_to_borrowed = RoutingResult.empty()

        logger.info(
            "openable_position_evaluated",
            position_manager=params.position_manager[-8:],
            deposit_in_third_asset=_deposit_in_third_asset(params),
            first_return=first.return_amount,
        )
        return OpenablePositionRoutes(
            first_asset_route=first,
            deposit_in_third_asset_route=third_to_position,
            deposit_to_borrowed_route=third_to_borrowed,
        )

    def _leg(
        self,
        params: OpenablePositionParams,
        asset_to_sell: str,
        asset_to_buy: str,
        amount: int,
        shares: int,
    ) -> RoutingResult:
        if amount == 0:
            return RoutingResult.empty()
        intent = SwapIntent(
            asset_to_sell=asset_to_sell,
            asset_to_buy=asset_to_buy,
            amount=amount,
            is_amount_to_buy=False,
            shares=shares,
            gas_price_in_checked_asset=params.gas_price_in_checked_asset,
            venues=params.venues,
        )
        return self.allocator.allocate(intent)


def _deposit_in_third_asset(params: OpenablePositionParams) -> bool:
    return params.deposit_asset not in (params.borrowed_asset, params.position_asset)


__all__ = ["OpenablePositionRouteComposer"]
