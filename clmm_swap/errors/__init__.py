"""
Error definitions for the CLMM swap client
"""

from .exceptions import (
    ErrorCode,
    SwapClientError,
    RpcError,
    InvalidAmount,
    TickOutOfRange,
    RoutingUnavailable,
    QuoteFailed,
    TransactionError,
    SignerError,
    ConfigurationError,
    TradeInProgress,
    OperationNotSupported,
)
from .classify import (
    FailureCategory,
    FailureReason,
    classify_failure,
    is_user_rejection,
)

__all__ = [
    "ErrorCode",
    "SwapClientError",
    "RpcError",
    "InvalidAmount",
    "TickOutOfRange",
    "RoutingUnavailable",
    "QuoteFailed",
    "TransactionError",
    "SignerError",
    "ConfigurationError",
    "TradeInProgress",
    "OperationNotSupported",
    "FailureCategory",
    "FailureReason",
    "classify_failure",
    "is_user_rejection",
]
