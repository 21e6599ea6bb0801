"""
Tick / sqrt price conversion

Key concepts:
- sqrtPriceX96: square root of price in Q96 fixed-point format
- Tick: logarithmic price index where price = 1.0001^tick
- Valid ticks are the closed interval [MIN_TICK, MAX_TICK]; anything outside
  is a usage error and raises TickOutOfRange instead of clamping
"""

import math
from decimal import Decimal, localcontext, ROUND_FLOOR

from ..errors import TickOutOfRange

MIN_TICK = -887272
MAX_TICK = 887272

Q96 = 2 ** 96

# sqrt prices at MIN_TICK / MAX_TICK (TickMath.sol)
MIN_SQRT_PRICE = 4295128739
MAX_SQRT_PRICE = 1461446703485210103287273052203988822378723970342

TICK_BASE = 1.0001

# 2^128 / sqrt(1.0001)^(2^i), Q128
_RATIOS = (
    0xfffcb933bd6fad37aa2d162d1a594001,
    0xfff97272373d413259a46990580e213a,
    0xfff2e50f5f656932ef12357cf3c7fdcc,
    0xffe5caca7e10e4e61c3624eaa0941cd0,
    0xffcb9843d60f6159c9db58835c926644,
    0xff973b41fa98c081472e6896dfb254c0,
    0xff2ea16466c96a3843ec78b326b52861,
    0xfe5dee046a99a2a811c461f1969c3053,
    0xfcbe86c7900a88aedcffc83b479aa3a4,
    0xf987a7253ac413176f2b074cf7815e54,
    0xf3392b0822b70005940c7a398e4b70f3,
    0xe7159475a2c29b7443b29c7fa6e889d9,
    0xd097f3bdfd2022b8845ad8f792aa5825,
    0xa9f746462d870fdf8a65dc1f90e061e5,
    0x70d869a156d2a1b890bb3df62baf32f7,
    0x31be135f97d08fd981231505542fcfa6,
    0x9aa508b5b7a84e1c677de54f3e99bc9,
    0x5d6af8dedb81196699c329225ee604,
    0x2216e584f5fa1ea926041bedfe98,
    0x48a170391f7dc42444e8fa2,
)


def _check_tick(tick) -> int:
    if isinstance(tick, bool) or not isinstance(tick, int):
        raise TickOutOfRange(f"Tick must be an integer, got {tick!r}", value=tick)
    if tick < MIN_TICK or tick > MAX_TICK:
        raise TickOutOfRange.tick(tick, MIN_TICK, MAX_TICK)
    return tick


def tick_to_sqrt_price_x96(tick: int) -> int:
    """
    Exact integer sqrtPriceX96 at a tick (TickMath.getSqrtRatioAtTick).

    Raises:
        TickOutOfRange: tick outside [MIN_TICK, MAX_TICK]
    """
    _check_tick(tick)
    abs_tick = -tick if tick < 0 else tick

    ratio = 1 << 128
    for i, factor in enumerate(_RATIOS):
        if (abs_tick >> i) & 1:
            ratio = (ratio * factor) >> 128

    if tick > 0:
        ratio = ((1 << 256) - 1) // ratio

    # Q128 -> Q96, rounding up
    return (ratio >> 32) + (1 if ratio % (1 << 32) else 0)


def sqrt_price_x96_to_tick(sqrt_price_x96: int) -> int:
    """
    Greatest tick whose sqrt price is <= sqrt_price_x96.

    Binary search over tick_to_sqrt_price_x96, so
    sqrt_price_x96_to_tick(tick_to_sqrt_price_x96(t)) == t for every valid t.

    Raises:
        TickOutOfRange: sqrt price outside [MIN_SQRT_PRICE, MAX_SQRT_PRICE]
    """
    if isinstance(sqrt_price_x96, bool) or not isinstance(sqrt_price_x96, int):
        raise TickOutOfRange.sqrt_price(sqrt_price_x96, MIN_SQRT_PRICE, MAX_SQRT_PRICE)
    if sqrt_price_x96 < MIN_SQRT_PRICE or sqrt_price_x96 > MAX_SQRT_PRICE:
        raise TickOutOfRange.sqrt_price(sqrt_price_x96, MIN_SQRT_PRICE, MAX_SQRT_PRICE)

    lo, hi = MIN_TICK, MAX_TICK
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if tick_to_sqrt_price_x96(mid) <= sqrt_price_x96:
            lo = mid
        else:
            hi = mid - 1
    return lo


def human_price_to_sqrt_price_x96(price) -> int:
    """Snap a human price to its tick and return that tick's sqrtPriceX96"""
    return tick_to_sqrt_price_x96(human_price_to_tick(price))


def human_price_to_tick(price) -> int:
    """
    Convert a human price (token1 per token0, raw units) to its tick.

    Raises:
        TickOutOfRange: non-positive, non-finite or unrepresentable price
    """
    try:
        value = Decimal(str(price))
    except ArithmeticError:
        raise TickOutOfRange.price(price, "not a number")

    if not value.is_finite() or value <= 0:
        raise TickOutOfRange.price(price, "must be positive and finite")

    with localcontext() as ctx:
        ctx.prec = 80
        sqrt_price_x96 = int((value.sqrt() * Q96).to_integral_value(rounding=ROUND_FLOOR))

    if sqrt_price_x96 < MIN_SQRT_PRICE or sqrt_price_x96 > MAX_SQRT_PRICE:
        raise TickOutOfRange.price(price, "outside the curve price domain")

    return sqrt_price_x96_to_tick(sqrt_price_x96)


def tick_to_human_price(tick: int) -> float:
    """price = 1.0001^tick"""
    _check_tick(tick)
    return math.pow(TICK_BASE, tick)


def sqrt_price_x96_to_human_price(sqrt_price_x96: int, decimals0: int = 18, decimals1: int = 18) -> Decimal:
    """Convert sqrtPriceX96 to a decimal-adjusted display price (token1 per token0)"""
    with localcontext() as ctx:
        ctx.prec = 80
        price = (Decimal(sqrt_price_x96) / Decimal(Q96)) ** 2
        return price * (Decimal(10) ** (decimals0 - decimals1))
