"""
Numeric helpers: tick/price conversion and exact amount codec
"""

from .tick import (
    MIN_TICK,
    MAX_TICK,
    Q96,
    MIN_SQRT_PRICE,
    MAX_SQRT_PRICE,
    tick_to_sqrt_price_x96,
    sqrt_price_x96_to_tick,
    human_price_to_tick,
    tick_to_human_price,
    human_price_to_sqrt_price_x96,
    sqrt_price_x96_to_human_price,
)
from .amounts import (
    parse_amount,
    parse_amount_or_zero,
    format_amount,
    is_positive_amount,
)

__all__ = [
    "MIN_TICK",
    "MAX_TICK",
    "Q96",
    "MIN_SQRT_PRICE",
    "MAX_SQRT_PRICE",
    "tick_to_sqrt_price_x96",
    "sqrt_price_x96_to_tick",
    "human_price_to_tick",
    "tick_to_human_price",
    "human_price_to_sqrt_price_x96",
    "sqrt_price_x96_to_human_price",
    "parse_amount",
    "parse_amount_or_zero",
    "format_amount",
    "is_positive_amount",
]
