"""
Trade intent, route and allowance type definitions
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional

from .pool import Pool


class TradeMode(Enum):
    """Which side of the trade the user fixed"""
    EXACT_IN = "exact_in"    # input amount fixed, output quoted
    EXACT_OUT = "exact_out"  # output amount fixed, input quoted


@dataclass(frozen=True)
class TradeIntent:
    """
    What the user wants to trade

    Attributes:
        token_in: Input token address
        token_out: Output token address
        mode: Which amount drives the trade
        human_amount: Driving amount as entered (decimal string)
    """
    token_in: Optional[str]
    token_out: Optional[str]
    mode: TradeMode = TradeMode.EXACT_IN
    human_amount: str = ""

    @property
    def has_distinct_tokens(self) -> bool:
        if not self.token_in or not self.token_out:
            return False
        return self.token_in.lower() != self.token_out.lower()


@dataclass(frozen=True)
class RouteSelection:
    """
    Single-pool route chosen for a pair

    Attributes:
        pool_index: Index of the chosen pool
        price_limit: sqrtPriceLimitX96 for the swap (0 = no usable limit)
        pool: The chosen pool snapshot
        zero_for_one: Swap direction (token0 -> token1)
    """
    pool_index: int
    price_limit: int
    pool: Optional[Pool] = None
    zero_for_one: bool = True

    @property
    def index_path(self) -> List[int]:
        return [self.pool_index]

    @property
    def is_routable(self) -> bool:
        return self.price_limit > 0


@dataclass(frozen=True)
class AllowanceState:
    """
    ERC-20 allowance for (owner, spender, token)

    stale=True means an approval was submitted and the value must be
    re-read before it is trusted.
    """
    owner: str
    spender: str
    token: str
    allowance: int = 0
    stale: bool = False

    def covers(self, amount: int) -> bool:
        return not self.stale and self.allowance >= amount

    def mark_stale(self) -> "AllowanceState":
        return replace(self, stale=True)
