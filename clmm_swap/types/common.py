"""
Common type definitions
"""

from dataclasses import dataclass

from ..math.amounts import parse_amount, parse_amount_or_zero, format_amount


def same_address(a: str, b: str) -> bool:
    """Case-insensitive address comparison (None never matches)"""
    if not a or not b:
        return False
    return a.lower() == b.lower()


@dataclass(frozen=True)
class TokenInfo:
    """
    ERC-20 token information

    Immutable once fetched; decimals governs all amount conversions
    for the token.

    Attributes:
        address: Token contract address
        name: Full token name
        symbol: Token symbol
        decimals: Number of decimal places (0..255)
    """
    address: str
    name: str
    symbol: str
    decimals: int = 18

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"TokenInfo({self.symbol}, {self.address[:10]}...)"

    def parse(self, human: str) -> int:
        """Human amount -> base units (raises InvalidAmount)"""
        return parse_amount(human, self.decimals)

    def parse_or_zero(self, human: str) -> int:
        """Human amount -> base units, 0 for malformed input"""
        return parse_amount_or_zero(human, self.decimals)

    def format(self, raw: int) -> str:
        """Base units -> human amount"""
        return format_amount(raw, self.decimals)
