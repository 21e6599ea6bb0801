"""
Outcomes of writes and quote simulations
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .trade import TradeMode, RouteSelection


class TxStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"
    # Broadcast but not yet mined
    PENDING = "pending"


@dataclass
class TxResult:
    """
    What a write (approve, swap, create pool, mint, burn, collect) ended as

    error is the user-facing message for failures; error_code is the
    ErrorCode value (e.g. "2001" cancelled by the user, "2002" reverted).
    """
    status: TxStatus
    tx_hash: Optional[str] = None
    error: Optional[str] = None
    recoverable: bool = False
    error_code: Optional[str] = None
    gas_used: Optional[int] = None
    block_number: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == TxStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status == TxStatus.FAILED

    @classmethod
    def success(cls, tx_hash: str, **kwargs) -> "TxResult":
        return cls(status=TxStatus.SUCCESS, tx_hash=tx_hash, **kwargs)

    @classmethod
    def failed(cls, error: str, tx_hash: str = None, **kwargs) -> "TxResult":
        return cls(status=TxStatus.FAILED, tx_hash=tx_hash, error=error, **kwargs)

    def __str__(self) -> str:
        if self.is_success:
            hash_display = f"{self.tx_hash[:18]}..." if self.tx_hash else "no hash"
            return f"TxResult(SUCCESS, {hash_display})"
        return f"TxResult({self.status.value}, error={self.error})"


class TxKind(Enum):
    """What a tracked transaction does"""
    APPROVE = "approve"
    SWAP = "swap"
    CREATE_POOL = "create_pool"
    MINT = "mint"
    BURN = "burn"
    COLLECT = "collect"


class ConfirmationStatus(Enum):
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class PendingTransaction:
    """
    A submitted transaction being tracked to confirmation

    Attributes:
        kind: Approval, swap or LP operation
        tx_hash: Transaction hash
        status: Submitted until a receipt exists
        block_number: Block of the receipt
        gas_used: Gas used per receipt
        error: Failure text when status is FAILED
    """
    kind: TxKind
    tx_hash: str
    status: ConfirmationStatus = ConfirmationStatus.SUBMITTED
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == ConfirmationStatus.CONFIRMED

    @property
    def is_failed(self) -> bool:
        return self.status == ConfirmationStatus.FAILED

    def to_tx_result(self) -> TxResult:
        if self.is_confirmed:
            return TxResult.success(
                self.tx_hash,
                gas_used=self.gas_used,
                block_number=self.block_number,
            )
        if self.is_failed:
            return TxResult.failed(
                self.error or "Transaction reverted",
                tx_hash=self.tx_hash,
                block_number=self.block_number,
            )
        return TxResult(status=TxStatus.PENDING, tx_hash=self.tx_hash)


@dataclass
class QuoteResult:
    """
    Simulated swap quote

    Attributes:
        token_in: Input token address
        token_out: Output token address
        mode: Trade mode the quote was made for
        amount: Driving amount (raw): input for EXACT_IN, output for EXACT_OUT
        quoted_amount: Counter amount (raw) returned by the simulation
        route: Route the simulation ran against
    """
    token_in: str
    token_out: str
    mode: TradeMode
    amount: int
    quoted_amount: int
    route: Optional[RouteSelection] = None

    @property
    def amount_in(self) -> int:
        return self.amount if self.mode == TradeMode.EXACT_IN else self.quoted_amount

    @property
    def amount_out(self) -> int:
        return self.quoted_amount if self.mode == TradeMode.EXACT_IN else self.amount

    def __str__(self) -> str:
        return f"Quote({self.amount_in} -> {self.amount_out}, {self.mode.value})"
