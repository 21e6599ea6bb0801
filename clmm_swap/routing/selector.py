"""
Pool selection for a token pair

Only single-pool routes exist: for a pair the deepest usable pool wins.
"""

import logging
from typing import Iterable, List, Optional

from ..types import Pool

logger = logging.getLogger(__name__)


def pools_for_pair(pools: Iterable[Pool], token_a: str, token_b: str) -> List[Pool]:
    """All pools (usable or not) trading token_a/token_b in either order"""
    if not token_a or not token_b:
        return []
    return [p for p in pools if p.matches_pair(token_a, token_b)]


def _rank(pool: Pool):
    # Highest liquidity first, then cheaper fee, then lower index
    return (-pool.liquidity, pool.fee, pool.index)


def select_best_pool(pools: Iterable[Pool], token_a: str, token_b: str) -> Optional[Pool]:
    """
    Select the pool to route token_a <-> token_b through.

    Args:
        pools: Every pool known to the pool manager
        token_a: One side of the pair
        token_b: Other side of the pair

    Returns:
        Usable pool with maximum liquidity (ties: lowest fee, then lowest
        index), or None when the pair has no usable pool
    """
    candidates = [p for p in pools_for_pair(pools, token_a, token_b) if p.is_usable]
    if not candidates:
        logger.debug(f"No usable pool for {token_a}/{token_b}")
        return None

    best = min(candidates, key=_rank)
    logger.debug(
        f"Selected pool #{best.index} for {token_a}/{token_b}: "
        f"liquidity={best.liquidity}, fee={best.fee} ({len(candidates)} candidates)"
    )
    return best


def pools_key(pools: Iterable[Pool]) -> str:
    """
    Stable serialization of a pool list for memoization.

    Includes every field that can change the route or its price limit.
    """
    return "|".join(
        f"{p.address.lower()}:{p.index}:{p.fee}:{p.tick_lower}:{p.tick_upper}:"
        f"{p.sqrt_price_x96}:{p.liquidity}"
        for p in pools
    )
