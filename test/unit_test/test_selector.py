"""
Pool Selector Unit Tests
"""

from clmm_swap.routing import select_best_pool, pools_for_pair, pools_key


TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x2222222222222222222222222222222222222222"
TOKEN_C = "0x3333333333333333333333333333333333333333"
TOKEN_A_UPPER = "0x" + TOKEN_A[2:].upper()


class TestSelectBestPool:
    """Tests for select_best_pool"""

    def test_highest_liquidity_wins(self, make_pool):
        shallow = make_pool(index=0, liquidity=100)
        deep = make_pool(index=1, liquidity=200)

        assert select_best_pool([shallow, deep], TOKEN_A, TOKEN_B) is deep
        assert select_best_pool([deep, shallow], TOKEN_A, TOKEN_B) is deep

    def test_equal_liquidity_prefers_lower_fee(self, make_pool):
        expensive = make_pool(index=0, liquidity=500, fee=30)
        cheap = make_pool(index=1, liquidity=500, fee=5)

        assert select_best_pool([expensive, cheap], TOKEN_A, TOKEN_B) is cheap
        assert select_best_pool([cheap, expensive], TOKEN_A, TOKEN_B) is cheap

    def test_full_tie_prefers_lower_index(self, make_pool):
        later = make_pool(index=3, liquidity=500, fee=30)
        earlier = make_pool(index=2, liquidity=500, fee=30)

        assert select_best_pool([later, earlier], TOKEN_A, TOKEN_B) is earlier
        assert select_best_pool([earlier, later], TOKEN_A, TOKEN_B) is earlier

    def test_pair_order_does_not_matter(self, make_pool):
        pool = make_pool()
        assert select_best_pool([pool], TOKEN_B, TOKEN_A) is pool

    def test_case_insensitive_match(self, make_pool):
        pool = make_pool()
        assert select_best_pool([pool], TOKEN_A_UPPER, TOKEN_B) is pool

    def test_zero_liquidity_excluded(self, make_pool):
        empty = make_pool(index=0, liquidity=0)
        funded = make_pool(index=1, liquidity=1)

        assert select_best_pool([empty, funded], TOKEN_A, TOKEN_B) is funded
        assert select_best_pool([empty], TOKEN_A, TOKEN_B) is None

    def test_uninitialized_price_excluded(self, make_pool):
        uninitialized = make_pool(index=0, liquidity=10 ** 30, sqrt_price_x96=0)
        assert select_best_pool([uninitialized], TOKEN_A, TOKEN_B) is None

    def test_other_pairs_ignored(self, make_pool):
        other = make_pool(index=0, liquidity=10 ** 30, token1=TOKEN_C)
        pool = make_pool(index=1, liquidity=1)

        assert select_best_pool([other, pool], TOKEN_A, TOKEN_B) is pool
        assert select_best_pool([other, pool], TOKEN_B, TOKEN_C) is None

    def test_empty_and_missing_tokens(self, make_pool):
        assert select_best_pool([], TOKEN_A, TOKEN_B) is None
        assert select_best_pool([make_pool()], None, TOKEN_B) is None


class TestPoolsForPair:

    def test_includes_unusable_pools(self, make_pool):
        pools = [make_pool(index=0, liquidity=0), make_pool(index=1), make_pool(index=2, token1=TOKEN_C)]
        assert [p.index for p in pools_for_pair(pools, TOKEN_B, TOKEN_A)] == [0, 1]


class TestPoolsKey:

    def test_stable_for_identical_pools(self, make_pool):
        assert pools_key([make_pool(index=0), make_pool(index=1)]) == pools_key([make_pool(index=0), make_pool(index=1)])

    def test_changes_with_route_inputs(self, make_pool):
        base = pools_key([make_pool()])
        assert pools_key([make_pool(liquidity=1)]) != base
        assert pools_key([make_pool(sqrt_price_x96=2 ** 97)]) != base
        assert pools_key([make_pool(tick_lower=-1200)]) != base

    def test_empty(self):
        assert pools_key([]) == ""
