"""Tests for the three-leg openable position composer."""

import pytest

from bestdex.errors import (
    ErrorCode,
    InvalidAmount,
    InvalidShareCount,
    RouteNotFound,
    UnsupportedCollaborator,
)
from bestdex.lens.collaborators import SupportedAddressSet
from bestdex.lens.openable_position import OpenablePositionRouteComposer
from bestdex.routing.allocator import RouteAllocator
from tests.helpers import (
    DAI,
    POSITION_MANAGER,
    UNKNOWN_MANAGER,
    USDC,
    WETH,
    ZERO_ADDRESS,
    ScriptedQuoter,
    linear,
    make_openable_params,
)


@pytest.fixture
def quoter() -> ScriptedQuoter:
    """Venue a prices every pair the legs need; venue b quotes nothing."""
    return ScriptedQuoter(
        {
            ("a", USDC, WETH): linear(1, 2),
            ("a", DAI, WETH): linear(1, 4),
            ("a", DAI, USDC): linear(1),
            ("a", WETH, USDC): linear(2),
        }
    )


@pytest.fixture
def composer(quoter) -> OpenablePositionRouteComposer:
    return OpenablePositionRouteComposer(
        RouteAllocator(quoter), SupportedAddressSet([POSITION_MANAGER])
    )


def totals(quoter: ScriptedQuoter) -> list[tuple[str, str, int]]:
    """(asset_in, asset_out, amount) of every final total quote."""
    return [(call[2], call[3], call[4]) for call in quoter.calls if call[0] == "total"]


class TestLegs:
    """Tests for which legs are routed, and with what amounts."""

    def test_deposit_in_borrowed_asset(self, composer, quoter):
        """The deposit is sold together with the borrowed amount."""
        params = make_openable_params(borrowed_amount=5000, deposit_asset=USDC, deposit_amount=1000)

        routes = composer.evaluate_openable_position(params)

        assert routes.first_asset_route.return_amount == 3000
        assert routes.deposit_in_third_asset_route.routes == []
        assert routes.deposit_to_borrowed_route.routes == []
        assert totals(quoter) == [(USDC, WETH, 6000)]

    def test_deposit_in_position_asset(self, composer, quoter):
        """The deposit already is the position asset; only the borrowed amount is sold."""
        params = make_openable_params(borrowed_amount=5000, deposit_asset=WETH, deposit_amount=1000)

        routes = composer.evaluate_openable_position(params)

        assert routes.first_asset_route.return_amount == 2500
        assert routes.first_asset_route.venue_ids == ["a"]
        assert routes.deposit_in_third_asset_route.return_amount == 0
        assert routes.deposit_to_borrowed_route.return_amount == 0
        assert totals(quoter) == [(USDC, WETH, 5000)]

    def test_deposit_in_third_asset(self, composer, quoter):
        params = make_openable_params(borrowed_amount=5000, deposit_asset=DAI, deposit_amount=1000)

        routes = composer.evaluate_openable_position(params)

        assert routes.first_asset_route.return_amount == 2500
        assert routes.deposit_in_third_asset_route.return_amount == 250
        assert routes.deposit_to_borrowed_route.return_amount == 1000
        assert totals(quoter) == [(USDC, WETH, 5000), (DAI, WETH, 1000), (DAI, USDC, 1000)]

    def test_legs_are_separate_results(self, composer):
        params = make_openable_params(deposit_asset=DAI)
        routes = composer.evaluate_openable_position(params)
        for leg in (
            routes.first_asset_route,
            routes.deposit_in_third_asset_route,
            routes.deposit_to_borrowed_route,
        ):
            assert leg.total_shares == 1

    def test_zero_borrowed_amount_gives_empty_first_leg(self, composer, quoter):
        params = make_openable_params(borrowed_amount=0, deposit_asset=DAI, deposit_amount=1000)

        routes = composer.evaluate_openable_position(params)

        assert routes.first_asset_route.routes == []
        assert routes.first_asset_route.return_amount == 0
        assert (USDC, WETH, 0) not in totals(quoter)
        assert routes.deposit_in_third_asset_route.return_amount == 250

    def test_zero_borrowed_amount_with_borrowed_deposit(self, composer):
        params = make_openable_params(borrowed_amount=0, deposit_asset=USDC, deposit_amount=1000)
        routes = composer.evaluate_openable_position(params)
        assert routes.first_asset_route.return_amount == 500

    def test_third_asset_shares_ignored_without_third_asset(self, composer):
        params = make_openable_params(deposit_asset=USDC, third_shares=0, borrowed_shares=0)
        routes = composer.evaluate_openable_position(params)
        assert routes.first_asset_route.total_shares == 1

    def test_gas_price_used_for_every_leg(self):
        quoter = ScriptedQuoter(
            {
                ("a", USDC, WETH): linear(1, 2),
                ("b", USDC, WETH): linear(1, 2),
                ("a", DAI, WETH): linear(1, 4),
                ("b", DAI, WETH): linear(1, 4),
                ("a", DAI, USDC): linear(1),
                ("b", DAI, USDC): linear(1),
            },
            gas_units={"a": 10},
        )
        composer = OpenablePositionRouteComposer(
            RouteAllocator(quoter), SupportedAddressSet([POSITION_MANAGER])
        )
        params = make_openable_params(deposit_asset=DAI).model_copy(
            update={"gas_price_in_checked_asset": 1}
        )

        routes = composer.evaluate_openable_position(params)

        assert routes.first_asset_route.venue_ids == ["b"]
        assert routes.deposit_in_third_asset_route.venue_ids == ["b"]
        assert routes.deposit_to_borrowed_route.venue_ids == ["b"]

    def test_leg_failure_propagates(self):
        quoter = ScriptedQuoter({("a", USDC, WETH): linear(1, 2)})
        composer = OpenablePositionRouteComposer(
            RouteAllocator(quoter), SupportedAddressSet([POSITION_MANAGER])
        )
        with pytest.raises(RouteNotFound):
            composer.evaluate_openable_position(make_openable_params(deposit_asset=DAI))


class TestValidation:
    """Tests for the checks run before any leg is quoted."""

    def assert_rejected(self, composer, quoter, params, error_type, code):
        with pytest.raises(error_type) as exc_info:
            composer.evaluate_openable_position(params)
        assert exc_info.value.code == code
        assert quoter.calls == []

    def test_unknown_position_manager(self, composer, quoter):
        params = make_openable_params(position_manager=UNKNOWN_MANAGER)
        self.assert_rejected(
            composer, quoter, params, UnsupportedCollaborator, ErrorCode.ADDRESS_NOT_SUPPORTED
        )

    def test_zero_position_manager(self, composer, quoter):
        params = make_openable_params(position_manager=ZERO_ADDRESS)
        self.assert_rejected(
            composer, quoter, params, UnsupportedCollaborator, ErrorCode.ADDRESS_NOT_SUPPORTED
        )

    @pytest.mark.parametrize("field", ["borrowed_asset", "deposit_asset", "position_asset"])
    def test_zero_asset(self, composer, quoter, field):
        params = make_openable_params(**{field: ZERO_ADDRESS})
        self.assert_rejected(
            composer, quoter, params, UnsupportedCollaborator, ErrorCode.ADDRESS_NOT_SUPPORTED
        )

    def test_zero_deposit(self, composer, quoter):
        params = make_openable_params(deposit_amount=0)
        self.assert_rejected(
            composer, quoter, params, InvalidAmount, ErrorCode.DEPOSITED_AMOUNT_IS_0
        )

    def test_zero_first_shares(self, composer, quoter):
        params = make_openable_params(first_shares=0)
        self.assert_rejected(composer, quoter, params, InvalidShareCount, ErrorCode.ZERO_SHARES)

    @pytest.mark.parametrize(
        "shares", [{"third_shares": 0}, {"borrowed_shares": 0}], ids=["to_position", "to_borrowed"]
    )
    def test_zero_third_asset_leg_shares(self, composer, quoter, shares):
        params = make_openable_params(deposit_asset=DAI, **shares)
        self.assert_rejected(composer, quoter, params, InvalidShareCount, ErrorCode.ZERO_SHARES)

    def test_manager_checked_before_deposit(self, composer, quoter):
        params = make_openable_params(position_manager=UNKNOWN_MANAGER, deposit_amount=0)
        self.assert_rejected(
            composer, quoter, params, UnsupportedCollaborator, ErrorCode.ADDRESS_NOT_SUPPORTED
        )
