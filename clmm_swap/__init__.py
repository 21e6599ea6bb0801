"""
CLMM Swap Client - Python client for a concentrated-liquidity DEX

Provides:
- Tick/sqrtPriceX96 conversion and exact amount codec
- Single-pool routing with price limits
- Quote synchronization against the router's simulations
- Approval/swap orchestration with fixed 5% slippage bounds
- Pool creation and LP position management
"""

from .client import SwapClient
from .types import (
    TokenInfo,
    Pool,
    Pair,
    Position,
    TradeMode,
    TradeIntent,
    RouteSelection,
    AllowanceState,
    TxResult,
    TxStatus,
    TxKind,
    PendingTransaction,
    QuoteResult,
)
from .errors import (
    SwapClientError,
    RpcError,
    InvalidAmount,
    TickOutOfRange,
    RoutingUnavailable,
    QuoteFailed,
    TransactionError,
    TradeInProgress,
    ErrorCode,
    FailureCategory,
    classify_failure,
)
from .math import (
    parse_amount,
    format_amount,
    tick_to_sqrt_price_x96,
    sqrt_price_x96_to_tick,
)
from .routing import select_best_pool, compute_price_limit, build_route
from .modules import (
    MarketModule,
    SwapModule,
    LiquidityModule,
    QuoteSynchronizer,
    SwapOrchestrator,
    SwapState,
    build_swap_plan,
)
from .contracts import ContractClient, MAX_UINT256
from .infra.evm_signer import EVMSigner, create_web3, create_evm_signer

__all__ = [
    # Client
    "SwapClient",
    # Types
    "TokenInfo",
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
    "PendingTransaction",
    "QuoteResult",
    # Errors
    "SwapClientError",
    "RpcError",
    "InvalidAmount",
    "TickOutOfRange",
    "RoutingUnavailable",
    "QuoteFailed",
    "TransactionError",
    "TradeInProgress",
    "ErrorCode",
    "FailureCategory",
    "classify_failure",
    # Math
    "parse_amount",
    "format_amount",
    "tick_to_sqrt_price_x96",
    "sqrt_price_x96_to_tick",
    # Routing
    "select_best_pool",
    "compute_price_limit",
    "build_route",
    # Modules
    "MarketModule",
    "SwapModule",
    "LiquidityModule",
    "QuoteSynchronizer",
    "SwapOrchestrator",
    "SwapState",
    "build_swap_plan",
    # Contracts / infrastructure
    "ContractClient",
    "MAX_UINT256",
    "EVMSigner",
    "create_web3",
    "create_evm_signer",
]

__version__ = "0.1.0"
