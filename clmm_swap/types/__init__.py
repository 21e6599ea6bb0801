"""
Type definitions for the CLMM swap client
"""

from .common import TokenInfo, same_address
from .pool import Pool, Pair
from .position import Position
from .trade import TradeMode, TradeIntent, RouteSelection, AllowanceState
from .result import (
    TxResult,
    TxStatus,
    TxKind,
    ConfirmationStatus,
    PendingTransaction,
    QuoteResult,
)

__all__ = [
    "TokenInfo",
    "same_address",
    "Pool",
    "Pair",
    "Position",
    "TradeMode",
    "TradeIntent",
    "RouteSelection",
    "AllowanceState",
    "TxResult",
    "TxStatus",
    "TxKind",
    "ConfirmationStatus",
    "PendingTransaction",
    "QuoteResult",
]
