"""
sqrtPriceLimitX96 computation

The limit keeps a swap inside the chosen pool's active range
[tick_lower, tick_upper]. When the range boundary is unavailable or on the
wrong side of the current price, a 1% band around the current price is used
instead, clamped strictly inside the global sqrt price bounds.
"""

import logging
from typing import Iterable, Optional

from ..errors import TickOutOfRange
from ..math.tick import (
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_PRICE,
    MAX_SQRT_PRICE,
    tick_to_sqrt_price_x96,
)
from ..types import Pool, RouteSelection
from .selector import select_best_pool

logger = logging.getLogger(__name__)

# Returned for pools that cannot be routed through
NO_PRICE_LIMIT = 0


def _boundary_sqrt(tick: int) -> Optional[int]:
    try:
        return tick_to_sqrt_price_x96(tick)
    except TickOutOfRange:
        return None


def _limit_zero_for_one(pool: Pool) -> int:
    current = pool.sqrt_price_x96
    if pool.tick_lower > MIN_TICK:
        limit = _boundary_sqrt(pool.tick_lower)
        if limit is not None and MIN_SQRT_PRICE < limit < current:
            return limit

    limit = max(current * 99 // 100, MIN_SQRT_PRICE + 1)
    # Pool sits on the curve floor: no price left to move down to
    if limit >= current:
        return NO_PRICE_LIMIT
    return limit


def _limit_one_for_zero(pool: Pool) -> int:
    current = pool.sqrt_price_x96
    if pool.tick_upper < MAX_TICK:
        limit = _boundary_sqrt(pool.tick_upper)
        if limit is not None and current < limit < MAX_SQRT_PRICE:
            return limit

    limit = min(current * 101 // 100, MAX_SQRT_PRICE - 1)
    if limit <= current:
        return NO_PRICE_LIMIT
    return limit


def compute_price_limit(pool: Optional[Pool], zero_for_one: bool) -> int:
    """
    Compute sqrtPriceLimitX96 for a swap through pool.

    Args:
        pool: Selected pool
        zero_for_one: True when selling token0 for token1 (price moves down)

    Returns:
        Price limit strictly inside (MIN_SQRT_PRICE, MAX_SQRT_PRICE), or
        NO_PRICE_LIMIT when the pool is missing, unusable, or already at the
        global bound in the swap direction
    """
    if pool is None or not pool.is_usable:
        return NO_PRICE_LIMIT

    if zero_for_one:
        limit = _limit_zero_for_one(pool)
    else:
        limit = _limit_one_for_zero(pool)

    logger.debug(
        f"Price limit for pool #{pool.index} (zero_for_one={zero_for_one}): "
        f"current={pool.sqrt_price_x96}, limit={limit}"
    )
    return limit


def is_zero_for_one(pool: Pool, token_in: str) -> bool:
    """Swap direction: selling the pool's token0"""
    return pool.has_token0(token_in)


def build_route(pools: Iterable[Pool], token_in: str, token_out: str) -> Optional[RouteSelection]:
    """
    Select a pool and price limit for token_in -> token_out.

    Returns:
        RouteSelection, or None when routing is unavailable
    """
    pool = select_best_pool(pools, token_in, token_out)
    if pool is None:
        return None

    zero_for_one = is_zero_for_one(pool, token_in)
    limit = compute_price_limit(pool, zero_for_one)
    if limit == NO_PRICE_LIMIT:
        return None

    return RouteSelection(
        pool_index=pool.index,
        price_limit=limit,
        pool=pool,
        zero_for_one=zero_for_one,
    )
