"""Tests for the greedy route allocator."""

import pytest
from pydantic import ValidationError

from bestdex.config import RouterConfig
from bestdex.errors import (
    ErrorCode,
    InvalidAmount,
    InvalidAsset,
    InvalidShareCount,
    RouteNotFound,
    RouterError,
)
from bestdex.routing.allocator import RouteAllocator
from tests.helpers import (
    USDC,
    WETH,
    ZERO_ADDRESS,
    ScriptedQuoter,
    capped,
    linear,
    make_cp_entry,
    make_intent,
    make_snapshot_quoter,
    unavailable,
    venues,
)


def table(values: dict[int, int]):
    """Curve defined point by point."""
    return values.get


class TestValidation:
    """Tests for fail-fast input validation."""

    @pytest.fixture
    def quoter(self) -> ScriptedQuoter:
        return ScriptedQuoter({"a": linear(1), "b": linear(2)})

    def assert_rejected(self, quoter, intent, error_type, code, config=None):
        allocator = RouteAllocator(quoter, config) if config else RouteAllocator(quoter)
        with pytest.raises(error_type) as exc_info:
            allocator.allocate(intent)
        assert exc_info.value.code == code
        assert quoter.calls == []

    def test_zero_asset_to_buy(self, quoter):
        intent = make_intent(asset_to_buy=ZERO_ADDRESS)
        self.assert_rejected(quoter, intent, InvalidAsset, ErrorCode.ZERO_ASSET_ADDRESS)

    def test_zero_asset_to_sell(self, quoter):
        intent = make_intent(asset_to_sell=ZERO_ADDRESS)
        self.assert_rejected(quoter, intent, InvalidAsset, ErrorCode.ZERO_ASSET_ADDRESS)

    def test_same_assets(self, quoter):
        intent = make_intent(asset_to_sell=WETH, asset_to_buy=WETH.upper().replace("0X", "0x"))
        self.assert_rejected(quoter, intent, InvalidAsset, ErrorCode.ASSETS_SHOULD_BE_DIFFERENT)

    def test_zero_shares(self, quoter):
        intent = make_intent(shares=0)
        self.assert_rejected(quoter, intent, InvalidShareCount, ErrorCode.ZERO_SHARES)

    def test_shares_greater_than_amount(self, quoter):
        intent = make_intent(amount=3, shares=4)
        self.assert_rejected(
            quoter,
            intent,
            InvalidShareCount,
            ErrorCode.SHARES_AMOUNT_IS_GREATER_THAN_AMOUNT_TO_SELL,
        )

    def test_shares_equal_to_amount_is_valid(self, quoter):
        result = RouteAllocator(quoter).allocate(make_intent(amount=4, shares=4))
        assert result.total_shares == 4

    def test_shares_limit(self, quoter):
        intent = make_intent(amount=100, shares=11)
        self.assert_rejected(
            quoter,
            intent,
            InvalidShareCount,
            ErrorCode.SHARES_LIMIT_EXCEEDED,
            config=RouterConfig(max_shares=10),
        )

    def test_amount_checked_before_share_limit(self, quoter):
        """Too many shares for the amount wins over a configured cap."""
        intent = make_intent(amount=10, shares=11, venue_refs=venues("a"))
        self.assert_rejected(
            quoter,
            intent,
            InvalidShareCount,
            ErrorCode.SHARES_AMOUNT_IS_GREATER_THAN_AMOUNT_TO_SELL,
            config=RouterConfig(max_shares=5),
        )

    def test_default_config_has_no_share_limit(self, quoter):
        intent = make_intent(amount=10**18, shares=5000, venue_refs=venues("a"))
        result = RouteAllocator(quoter).allocate(intent)
        assert result.total_shares == 5000
        assert result.return_amount == 10**18

    def test_empty_venues(self, quoter):
        intent = make_intent(venue_refs=[])
        self.assert_rejected(quoter, intent, InvalidAmount, ErrorCode.EMPTY_VENUES)

    def test_zero_address_checked_before_shares(self, quoter):
        """Several problems at once report the first check in order."""
        intent = make_intent(asset_to_sell=ZERO_ADDRESS, shares=0)
        self.assert_rejected(quoter, intent, InvalidAsset, ErrorCode.ZERO_ASSET_ADDRESS)

    def test_errors_share_a_base_class(self, quoter):
        with pytest.raises(RouterError):
            RouteAllocator(quoter).allocate(make_intent(shares=0))

    def test_negative_shares_rejected_by_schema(self):
        with pytest.raises(ValidationError):
            make_intent(shares=-1)


class TestScenarios:
    """End-to-end allocation scenarios."""

    def test_dominant_venue_takes_all_shares(self):
        """amount=100, shares=2, venue b uniformly better -> [(2, [b])]."""
        quoter = ScriptedQuoter({"a": linear(1), "b": linear(2)})
        result = RouteAllocator(quoter).allocate(make_intent(amount=100, shares=2))

        assert [route.share_weight for route in result.routes] == [2]
        assert result.venue_ids == ["b"]
        assert result.return_amount == 200

    def test_balanced_venues_split(self):
        """Two equal pools: the first increment ties (a wins), the second goes to b."""
        reserve = 100 * 10**18
        quoter = make_snapshot_quoter(
            make_cp_entry("a", reserve, reserve, fee_bps=0),
            make_cp_entry("b", reserve, reserve, fee_bps=0),
        )
        intent = make_intent(amount=10 * 10**18, shares=2)

        result = RouteAllocator(quoter).allocate(intent)

        a, b = venues("a", "b")
        expected = (
            quoter.total_quote(a, WETH, USDC, 5 * 10**18, False).amount
            + quoter.total_quote(b, WETH, USDC, 5 * 10**18, False).amount
        )
        assert [(route.share_weight, route.paths[0].venue_id) for route in result.routes] == [
            (1, "a"),
            (1, "b"),
        ]
        assert result.return_amount == expected

    def test_gas_price_changes_selection(self):
        """Equal raw quotes: c wins the tie at gas price 0, d wins once c's gas costs more."""
        quoter = ScriptedQuoter({"c": linear(1), "d": linear(1)}, gas_units={"c": 100_000})
        venue_refs = venues("c", "d")
        allocator = RouteAllocator(quoter)

        free = allocator.allocate(make_intent(amount=100, shares=2, venue_refs=venue_refs))
        priced = allocator.allocate(
            make_intent(amount=100, shares=2, gas_price=1, venue_refs=venue_refs)
        )

        assert free.venue_ids == ["c"]
        assert free.estimate_gas_amount == 100_000
        assert priced.venue_ids == ["d"]
        assert priced.estimate_gas_amount == 0
        assert free.return_amount == priced.return_amount == 100

    def test_gas_charged_only_on_first_increment(self):
        """Once c has paid its gas, its later increments compete on raw output."""
        c_curve = table({0: 0, 25: 90, 50: 150, 75: 170, 100: 190})
        quoter = ScriptedQuoter({"c": c_curve, "e": linear(2)}, gas_units={"c": 30})
        intent = make_intent(amount=100, shares=4, gas_price=1, venue_refs=venues("c", "e"))

        result = RouteAllocator(quoter).allocate(intent)

        # step 1: c 90-30=60 > e 50; step 2: c 60 > e 50 (no gas now); steps 3-4: e 50 > c 20
        assert [(route.share_weight, route.paths[0].venue_id) for route in result.routes] == [
            (2, "c"),
            (2, "e"),
        ]
        assert result.return_amount == 150 + 100
        assert result.estimate_gas_amount == 30

    def test_ties_keep_first_listed_venue(self):
        quoter = ScriptedQuoter({"a": linear(1), "b": linear(1)})
        result = RouteAllocator(quoter).allocate(
            make_intent(amount=100, shares=4, venue_refs=venues("b", "a"))
        )
        assert result.venue_ids == ["b"]

    def test_buy_minimizes_input(self):
        quoter = ScriptedQuoter({"a": linear(2), "b": linear(3)})
        result = RouteAllocator(quoter).allocate(
            make_intent(amount=100, shares=2, is_amount_to_buy=True)
        )
        assert result.venue_ids == ["a"]
        assert result.return_amount == 200

    def test_buy_adds_gas_cost(self):
        """For buys gas makes a venue more expensive: a costs 100+100 > b 150."""
        quoter = ScriptedQuoter({"a": linear(2), "b": linear(3)}, gas_units={"a": 100})
        result = RouteAllocator(quoter).allocate(
            make_intent(amount=100, shares=2, is_amount_to_buy=True, gas_price=1)
        )
        assert result.venue_ids == ["b"]
        assert result.return_amount == 300

    def test_venue_that_cannot_quote_is_skipped(self):
        quoter = ScriptedQuoter({"a": unavailable, "b": linear(1)})
        result = RouteAllocator(quoter).allocate(make_intent(amount=100, shares=2))
        assert result.venue_ids == ["b"]

    def test_capacity_limit_spills_to_next_venue(self):
        quoter = ScriptedQuoter({"a": capped(linear(2), 50), "b": linear(1)})
        result = RouteAllocator(quoter).allocate(make_intent(amount=100, shares=2))
        assert [(route.share_weight, route.paths[0].venue_id) for route in result.routes] == [
            (1, "a"),
            (1, "b"),
        ]
        assert result.return_amount == 100 + 50


class TestFinalQuote:
    """Tests for the final per-venue total quote."""

    def test_single_venue_quotes_full_amount(self):
        """The floor-division remainder is included in a single-venue route."""
        quoter = ScriptedQuoter({"a": linear(1)})
        result = RouteAllocator(quoter).allocate(
            make_intent(amount=101, shares=2, venue_refs=venues("a"))
        )
        assert result.return_amount == 101
        assert ("total", "a", WETH, USDC, 101) in quoter.calls

    def test_final_quote_failure(self):
        """Marginal quotes succeed but the remainder-inclusive total does not."""
        quoter = ScriptedQuoter({"a": capped(linear(1), 100)})
        with pytest.raises(RouteNotFound) as exc_info:
            RouteAllocator(quoter).allocate(
                make_intent(amount=101, shares=2, venue_refs=venues("a"))
            )
        assert exc_info.value.code == ErrorCode.NO_ROUTE_FOUND


class TestNoRoute:
    """Tests for steps no venue can fill."""

    def test_no_venue_can_quote(self):
        quoter = ScriptedQuoter({"a": unavailable, "b": unavailable})
        with pytest.raises(RouteNotFound) as exc_info:
            RouteAllocator(quoter).allocate(make_intent())
        assert exc_info.value.code == ErrorCode.NO_ROUTE_FOUND

    def test_liquidity_runs_out_midway(self):
        quoter = ScriptedQuoter({"a": capped(linear(1), 50), "b": unavailable})
        with pytest.raises(RouteNotFound):
            RouteAllocator(quoter).allocate(make_intent(amount=100, shares=2))

    def test_venue_missing_from_snapshot(self):
        quoter = make_snapshot_quoter(make_cp_entry("a", 10**9, 10**9))
        with pytest.raises(RouteNotFound):
            RouteAllocator(quoter).allocate(make_intent(venue_refs=venues("nowhere")))


class TestQuoteCache:
    """Memoized totals never outlive one allocation."""

    def test_cache_cleared_per_allocation(self):
        quoter = ScriptedQuoter({"a": linear(1)})
        allocator = RouteAllocator(quoter)
        allocator.allocate(make_intent(venue_refs=venues("a")))
        allocator.allocate(make_intent(venue_refs=venues("a")))
        assert quoter.cache_clears == 2

    def test_cache_size_bounded_across_requests(self):
        quoter = make_snapshot_quoter(
            make_cp_entry("a", 10**24, 10**24), make_cp_entry("b", 10**23, 10**23)
        )
        allocator = RouteAllocator(quoter)

        for step in range(50):
            allocator.allocate(make_intent(amount=10**18 + step, shares=4))
            # (shares totals per venue) + (final totals per venue)
            assert quoter.cached_totals <= 2 * 4 * 2
