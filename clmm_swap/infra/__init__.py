"""
Infrastructure layer for the CLMM swap client

Provides:
- EVMSigner: EVM transaction signing using web3.py
- NonceManager: thread-safe nonce tracking
- call_with_retry / CorrelationContext: read retries and trace logging
"""

from .evm_signer import (
    EVMSigner,
    Broadcast,
    NonceManager,
    create_web3,
    create_evm_signer,
)
from .retry import (
    CorrelationContext,
    get_correlation_id,
    log_with_correlation,
    classify_error,
    call_with_retry,
)

__all__ = [
    "EVMSigner",
    "Broadcast",
    "NonceManager",
    "create_web3",
    "create_evm_signer",
    "CorrelationContext",
    "get_correlation_id",
    "log_with_correlation",
    "classify_error",
    "call_with_retry",
]
