"""
Single-pool routing: pool selection and swap price limits
"""

from .selector import select_best_pool, pools_for_pair, pools_key
from .price_limit import (
    NO_PRICE_LIMIT,
    compute_price_limit,
    is_zero_for_one,
    build_route,
)

__all__ = [
    "select_best_pool",
    "pools_for_pair",
    "pools_key",
    "NO_PRICE_LIMIT",
    "compute_price_limit",
    "is_zero_for_one",
    "build_route",
]
