"""
Price Limit Unit Tests
"""

import pytest

from clmm_swap.math.tick import (
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_PRICE,
    MAX_SQRT_PRICE,
    tick_to_sqrt_price_x96,
)
from clmm_swap.routing import (
    NO_PRICE_LIMIT,
    compute_price_limit,
    is_zero_for_one,
    build_route,
)


TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x2222222222222222222222222222222222222222"
TOKEN_C = "0x3333333333333333333333333333333333333333"

Q96 = 2 ** 96


class TestComputePriceLimit:
    """Tests for compute_price_limit"""

    def test_range_bounds_used_when_valid(self, make_pool):
        pool = make_pool(tick_lower=-600, tick_upper=600)

        assert compute_price_limit(pool, zero_for_one=True) == tick_to_sqrt_price_x96(-600)
        assert compute_price_limit(pool, zero_for_one=False) == tick_to_sqrt_price_x96(600)

    def test_full_range_falls_back_to_one_percent(self, make_pool):
        pool = make_pool(tick_lower=MIN_TICK, tick_upper=MAX_TICK)

        assert compute_price_limit(pool, zero_for_one=True) == Q96 * 99 // 100
        assert compute_price_limit(pool, zero_for_one=False) == Q96 * 101 // 100

    def test_bound_on_wrong_side_falls_back(self, make_pool):
        # Current price below tick_lower: the lower bound would move the price up
        current = tick_to_sqrt_price_x96(-1000)
        pool = make_pool(sqrt_price_x96=current, tick=-1000, tick_lower=-600, tick_upper=600)

        assert compute_price_limit(pool, zero_for_one=True) == current * 99 // 100

        # Current price above tick_upper
        current = tick_to_sqrt_price_x96(1000)
        pool = make_pool(sqrt_price_x96=current, tick=1000, tick_lower=-600, tick_upper=600)

        assert compute_price_limit(pool, zero_for_one=False) == current * 101 // 100

    def test_out_of_domain_bounds_fall_back(self, make_pool):
        pool = make_pool(tick_lower=MIN_TICK - 10, tick_upper=MAX_TICK + 10)

        assert compute_price_limit(pool, zero_for_one=True) == Q96 * 99 // 100
        assert compute_price_limit(pool, zero_for_one=False) == Q96 * 101 // 100

    def test_fallback_clamped_inside_domain(self, make_pool):
        low = make_pool(sqrt_price_x96=MIN_SQRT_PRICE + 10, tick=MIN_TICK, tick_lower=MIN_TICK)
        high = make_pool(sqrt_price_x96=MAX_SQRT_PRICE - 10, tick=MAX_TICK - 1, tick_upper=MAX_TICK)

        assert compute_price_limit(low, zero_for_one=True) == MIN_SQRT_PRICE + 1
        assert compute_price_limit(high, zero_for_one=False) == MAX_SQRT_PRICE - 1

    def test_unusable_pool_returns_sentinel(self, make_pool):
        assert compute_price_limit(make_pool(liquidity=0), zero_for_one=True) == NO_PRICE_LIMIT
        assert compute_price_limit(make_pool(sqrt_price_x96=0), zero_for_one=False) == NO_PRICE_LIMIT
        assert compute_price_limit(None, zero_for_one=True) == NO_PRICE_LIMIT

    @pytest.mark.parametrize("tick", [MIN_TICK + 1, -300000, -1, 0, 1, 300000, MAX_TICK - 1])
    @pytest.mark.parametrize("zero_for_one", [True, False])
    def test_limit_strictly_inside_domain(self, make_pool, tick, zero_for_one):
        pool = make_pool(
            sqrt_price_x96=tick_to_sqrt_price_x96(tick),
            tick=tick,
            tick_lower=MIN_TICK,
            tick_upper=MAX_TICK,
        )
        limit = compute_price_limit(pool, zero_for_one)
        assert MIN_SQRT_PRICE < limit < MAX_SQRT_PRICE

    @pytest.mark.parametrize("sqrt_price", [MIN_SQRT_PRICE, MIN_SQRT_PRICE + 1])
    def test_pool_at_floor_cannot_sell_token0(self, make_pool, sqrt_price):
        pool = make_pool(sqrt_price_x96=sqrt_price, tick=MIN_TICK, tick_lower=MIN_TICK, tick_upper=MAX_TICK)

        assert compute_price_limit(pool, True) == NO_PRICE_LIMIT
        assert build_route([pool], TOKEN_A, TOKEN_B) is None
        assert pool.sqrt_price_x96 < compute_price_limit(pool, False) < MAX_SQRT_PRICE

    @pytest.mark.parametrize("sqrt_price", [MAX_SQRT_PRICE, MAX_SQRT_PRICE - 1])
    def test_pool_at_ceiling_cannot_sell_token1(self, make_pool, sqrt_price):
        pool = make_pool(sqrt_price_x96=sqrt_price, tick=MAX_TICK - 1, tick_lower=MIN_TICK, tick_upper=MAX_TICK)

        assert compute_price_limit(pool, False) == NO_PRICE_LIMIT
        assert build_route([pool], TOKEN_B, TOKEN_A) is None
        assert MIN_SQRT_PRICE < compute_price_limit(pool, True) < pool.sqrt_price_x96


class TestBuildRoute:
    """Tests for build_route"""

    def test_selling_token0(self, make_pool):
        pool = make_pool(index=4)
        route = build_route([pool], TOKEN_A, TOKEN_B)

        assert route is not None
        assert route.pool_index == 4
        assert route.index_path == [4]
        assert route.zero_for_one is True
        assert route.price_limit == tick_to_sqrt_price_x96(-600)
        assert route.is_routable

    def test_selling_token1(self, make_pool):
        route = build_route([make_pool()], TOKEN_B, TOKEN_A)

        assert route.zero_for_one is False
        assert route.price_limit == tick_to_sqrt_price_x96(600)

    def test_routes_through_deepest_pool(self, make_pool):
        pools = [make_pool(index=0, liquidity=100), make_pool(index=1, liquidity=200)]
        assert build_route(pools, TOKEN_A, TOKEN_B).pool_index == 1

    def test_no_usable_pool(self, make_pool):
        assert build_route([make_pool(liquidity=0)], TOKEN_A, TOKEN_B) is None
        assert build_route([make_pool()], TOKEN_A, TOKEN_C) is None
        assert build_route([], TOKEN_A, TOKEN_B) is None

    def test_direction(self, make_pool):
        pool = make_pool()
        assert is_zero_for_one(pool, TOKEN_A) is True
        assert is_zero_for_one(pool, TOKEN_B) is False
