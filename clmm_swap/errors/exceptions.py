"""
Typed errors raised by the CLMM swap client

Every error carries an ErrorCode whose thousands digit names the layer that
failed. recoverable=True only for RPC trouble that a later read may not hit.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    1xxx RPC, 2xxx transaction, 3xxx quote, 4xxx routing, 5xxx amount,
    6xxx signer, 7xxx trade flow, 8xxx tick domain, 9xxx configuration
    """
    # RPC (recoverable)
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"

    # Transaction errors
    TX_SEND_FAILED = "2001"
    TX_REVERTED = "2002"
    TX_USER_REJECTED = "2003"
    TX_INSUFFICIENT_FUNDS = "2004"

    # Quote/Slippage errors
    QUOTE_FAILED = "3001"
    SLIPPAGE_EXCEEDED = "3002"

    # Routing/Pool errors
    ROUTING_UNAVAILABLE = "4001"
    POOL_NOT_FOUND = "4002"

    # Amount errors
    INVALID_AMOUNT = "5001"

    # Signer errors
    SIGNER_NOT_CONFIGURED = "6001"
    SIGNER_FAILED = "6002"

    # Operation errors
    OPERATION_NOT_SUPPORTED = "7001"
    OPERATION_FAILED = "7002"
    TRADE_IN_PROGRESS = "7003"

    # Tick domain errors
    TICK_OUT_OF_RANGE = "8001"
    SQRT_PRICE_OUT_OF_RANGE = "8002"
    PRICE_OUT_OF_RANGE = "8003"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class SwapClientError(Exception):
    """
    Root of the client's error tree; str() renders "[code] message".

    original_error keeps the web3 / wallet exception that caused it.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class RpcError(SwapClientError):
    """Node unreachable, slow, rate limiting, or a view call that kept failing"""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def read_failed(cls, operation: str, error: Exception, code: Optional[ErrorCode] = None) -> "RpcError":
        return cls(
            f"Read call '{operation}' failed: {error}",
            code or ErrorCode.RPC_INVALID_RESPONSE,
            original_error=error,
        )


class InvalidAmount(SwapClientError):
    """
    Malformed human amount on a transaction-building path

    Raised when:
    - Amount string is empty, non-numeric or negative
    - Amount has more fractional digits than the token supports
    - Token decimals are outside 0..255
    """

    def __init__(self, message: str, value: Optional[str] = None, decimals: Optional[int] = None):
        super().__init__(
            message,
            ErrorCode.INVALID_AMOUNT,
            recoverable=False,
            details={"value": value, "decimals": decimals},
        )
        self.value = value
        self.decimals = decimals

    @classmethod
    def not_numeric(cls, value: str) -> "InvalidAmount":
        return cls(f"Amount is not a valid decimal number: {value!r}", value=value)

    @classmethod
    def negative(cls, value: str) -> "InvalidAmount":
        return cls(f"Amount must not be negative: {value!r}", value=value)

    @classmethod
    def too_precise(cls, value: str, decimals: int) -> "InvalidAmount":
        return cls(
            f"Amount {value!r} has more than {decimals} fractional digits",
            value=value,
            decimals=decimals,
        )

    @classmethod
    def bad_decimals(cls, decimals) -> "InvalidAmount":
        return cls(f"Token decimals must be an integer in 0..255, got {decimals!r}", decimals=None)


class TickOutOfRange(SwapClientError):
    """
    Usage error: tick, sqrt price or human price outside the curve domain
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.TICK_OUT_OF_RANGE, value=None):
        super().__init__(message, code, recoverable=False, details={"value": str(value)})
        self.value = value

    @classmethod
    def tick(cls, tick, min_tick: int, max_tick: int) -> "TickOutOfRange":
        return cls(f"Tick {tick} outside [{min_tick}, {max_tick}]", value=tick)

    @classmethod
    def sqrt_price(cls, sqrt_price, min_sqrt: int, max_sqrt: int) -> "TickOutOfRange":
        return cls(
            f"sqrtPriceX96 {sqrt_price} outside [{min_sqrt}, {max_sqrt}]",
            code=ErrorCode.SQRT_PRICE_OUT_OF_RANGE,
            value=sqrt_price,
        )

    @classmethod
    def price(cls, price, reason: str) -> "TickOutOfRange":
        return cls(f"Price {price} is not representable: {reason}", code=ErrorCode.PRICE_OUT_OF_RANGE, value=price)


class RoutingUnavailable(SwapClientError):
    """
    No usable liquidity path exists for the requested pair - not recoverable

    Raised when:
    - No pool with non-zero price and liquidity matches the pair
    - The price-limit calculator returned the sentinel
    """

    def __init__(self, message: str, token_in: Optional[str] = None, token_out: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.ROUTING_UNAVAILABLE,
            recoverable=False,
            details={"token_in": token_in, "token_out": token_out},
        )
        self.token_in = token_in
        self.token_out = token_out

    @classmethod
    def no_pool(cls, token_in: str, token_out: str) -> "RoutingUnavailable":
        return cls(
            f"No liquidity path between {token_in} and {token_out}",
            token_in=token_in,
            token_out=token_out,
        )


class QuoteFailed(SwapClientError):
    """
    Router simulation reverted (insufficient liquidity, price limit hit, ...)
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorCode.QUOTE_FAILED, recoverable=False, original_error=original_error)

    @classmethod
    def simulation_reverted(cls, error: Exception) -> "QuoteFailed":
        return cls(f"Quote simulation failed: {error}", original_error=error)


class TransactionError(SwapClientError):
    """
    Transaction execution errors

    Raised when:
    - The signer refuses or the node rejects the transaction
    - The transaction reverts on-chain
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        tx_hash: Optional[str] = None,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            original_error=original_error,
            details={"tx_hash": tx_hash},
        )
        self.tx_hash = tx_hash

    @classmethod
    def send_failed(cls, operation: str, error: str) -> "TransactionError":
        return cls(f"Failed to send {operation} transaction: {error}", ErrorCode.TX_SEND_FAILED)

    @classmethod
    def reverted(cls, operation: str, tx_hash: str) -> "TransactionError":
        return cls(
            f"{operation} transaction reverted on-chain",
            ErrorCode.TX_REVERTED,
            tx_hash=tx_hash,
        )


class SignerError(SwapClientError):
    """
    Signing-related errors
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SIGNER_FAILED,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code, recoverable=False, original_error=original_error)

    @classmethod
    def invalid_key(cls, error: Exception) -> "SignerError":
        # Never echo key material
        return cls(f"Invalid private key ({type(error).__name__})", original_error=error)

    @classmethod
    def not_configured(cls) -> "SignerError":
        return cls(
            "No signer configured. Provide a private key or set EVM_PRIVATE_KEY.",
            ErrorCode.SIGNER_NOT_CONFIGURED,
        )


class ConfigurationError(SwapClientError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.CONFIG_INVALID):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)


class TradeInProgress(SwapClientError):
    """
    A new trade was attempted while approval or swap is still outstanding
    """

    def __init__(self, state: str):
        super().__init__(
            f"A trade is already in flight (state={state})",
            ErrorCode.TRADE_IN_PROGRESS,
            recoverable=False,
            details={"state": state},
        )
        self.state = state


class OperationNotSupported(SwapClientError):
    """
    Operation not allowed in the current context
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.OPERATION_NOT_SUPPORTED,
            recoverable=False,
            details={"operation": operation},
        )
        self.operation = operation

    @classmethod
    def illegal_transition(cls, current: str, target: str) -> "OperationNotSupported":
        return cls(f"Illegal swap state transition {current} -> {target}", operation="transition")
