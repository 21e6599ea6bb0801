"""
Functional modules: market reads, quoting, approval/swap orchestration, liquidity
"""

from .market import MarketModule
from .quote import QuoteRequest, QuoteState, QuoteSynchronizer
from .orchestrator import (
    SLIPPAGE_PERCENT,
    SwapState,
    SwapPlan,
    SwapOrchestrator,
    build_swap_plan,
    min_amount_out,
    max_amount_in,
)
from .liquidity import LiquidityModule, fee_percent_to_units
from .swap import SwapModule

__all__ = [
    "MarketModule",
    "QuoteRequest",
    "QuoteState",
    "QuoteSynchronizer",
    "SLIPPAGE_PERCENT",
    "SwapState",
    "SwapPlan",
    "SwapOrchestrator",
    "build_swap_plan",
    "min_amount_out",
    "max_amount_in",
    "LiquidityModule",
    "fee_percent_to_units",
    "SwapModule",
]
