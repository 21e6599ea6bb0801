"""
Position type definitions
"""

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Position:
    """
    LP position held by the position manager

    Attributes:
        id: Position NFT id
        owner: Position owner address
        token0: Pool token0
        token1: Pool token1
        index: Pool index within the pair
        fee: Pool fee (hundredths of a bip)
        liquidity: Position liquidity
        tick_lower: Lower tick of the range
        tick_upper: Upper tick of the range
        tokens_owed0: Collectable token0
        tokens_owed1: Collectable token1
    """
    id: int
    owner: str
    token0: str
    token1: str
    index: int
    fee: int
    liquidity: int
    tick_lower: int
    tick_upper: int
    tokens_owed0: int = 0
    tokens_owed1: int = 0
    fee_growth_inside0_last_x128: int = 0
    fee_growth_inside1_last_x128: int = 0

    @property
    def has_fees(self) -> bool:
        return self.tokens_owed0 > 0 or self.tokens_owed1 > 0

    @classmethod
    def from_chain(cls, raw: Sequence) -> "Position":
        """Build from a PositionManager.getAllPositions() tuple"""
        return cls(
            id=int(raw[0]),
            owner=raw[1],
            token0=raw[2],
            token1=raw[3],
            index=int(raw[4]),
            fee=int(raw[5]),
            liquidity=int(raw[6]),
            tick_lower=int(raw[7]),
            tick_upper=int(raw[8]),
            tokens_owed0=int(raw[9]),
            tokens_owed1=int(raw[10]),
            fee_growth_inside0_last_x128=int(raw[11]),
            fee_growth_inside1_last_x128=int(raw[12]),
        )

    def __repr__(self) -> str:
        return f"Position(id={self.id}, owner={self.owner[:10]}..., liquidity={self.liquidity})"
