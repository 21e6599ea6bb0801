"""
Pool and pair type definitions
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from .common import same_address


@dataclass(frozen=True)
class Pair:
    """Token pair registered in the pool manager (token0 < token1)"""
    token0: str
    token1: str

    @classmethod
    def from_chain(cls, raw: Sequence) -> "Pair":
        return cls(token0=raw[0], token1=raw[1])


@dataclass(frozen=True)
class Pool:
    """
    Concentrated-liquidity pool state as returned by the pool manager

    A pool with sqrt_price_x96 == 0 or liquidity == 0 is uninitialized
    and must never be routed through.

    Attributes:
        address: Pool contract address
        token0: Lower-address token
        token1: Higher-address token
        index: Disambiguates pools sharing pair/fee/range
        fee: Fee in hundredths of a bip (3000 = 0.3%)
        fee_protocol: Protocol fee share
        tick_lower: Lower bound of the pool's active price range
        tick_upper: Upper bound of the pool's active price range
        tick: Current tick
        sqrt_price_x96: Current sqrt price, Q96
        liquidity: Current in-range liquidity
    """
    address: str
    token0: str
    token1: str
    index: int
    fee: int
    tick_lower: int
    tick_upper: int
    tick: int
    sqrt_price_x96: int
    liquidity: int
    fee_protocol: int = 0

    @property
    def is_usable(self) -> bool:
        """Initialized (non-zero price) and holding liquidity"""
        return self.sqrt_price_x96 > 0 and self.liquidity > 0

    @property
    def fee_percent(self) -> Decimal:
        """Fee as percentage (3000 -> 0.3)"""
        return Decimal(self.fee) / Decimal(10000)

    def matches_pair(self, token_a: str, token_b: str) -> bool:
        """Order-independent, case-insensitive pair match"""
        return (
            (same_address(self.token0, token_a) and same_address(self.token1, token_b))
            or (same_address(self.token0, token_b) and same_address(self.token1, token_a))
        )

    def has_token0(self, token: str) -> bool:
        return same_address(self.token0, token)

    @classmethod
    def from_chain(cls, raw: Sequence) -> "Pool":
        """
        Build from a PoolManager.getAllPools() tuple:
        (pool, token0, token1, index, fee, feeProtocol, tickLower, tickUpper,
         tick, sqrtPriceX96, liquidity)
        """
        return cls(
            address=raw[0],
            token0=raw[1],
            token1=raw[2],
            index=int(raw[3]),
            fee=int(raw[4]),
            fee_protocol=int(raw[5]),
            tick_lower=int(raw[6]),
            tick_upper=int(raw[7]),
            tick=int(raw[8]),
            sqrt_price_x96=int(raw[9]),
            liquidity=int(raw[10]),
        )

    def __str__(self) -> str:
        return f"Pool(#{self.index}, fee={self.fee_percent}%, liquidity={self.liquidity})"
