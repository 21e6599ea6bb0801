"""
Approval/Swap Orchestrator

Explicit state machine for the two-step trade:

    IDLE -> NEEDS_APPROVAL -> APPROVING -> APPROVAL_CONFIRMED -> SWAPPING -> SWAP_CONFIRMED
                                  |                                 |
                                  +------------> FAILED <-----------+
                                                   |
                                                   v
                                                  IDLE

The swap is built and submitted only after the approval receipt is observed.
Only one trade may be in flight; a second execute() is rejected, not queued.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..contracts import ContractClient

from ..contracts.abis import MAX_UINT256
from ..config import config as global_config
from ..errors import (
    FailureReason,
    OperationNotSupported,
    RoutingUnavailable,
    SwapClientError,
    TradeInProgress,
    TransactionError,
    classify_failure,
)
from ..infra.retry import CorrelationContext, log_with_correlation
from ..types import (
    TradeMode,
    RouteSelection,
    TxKind,
    TxResult,
    PendingTransaction,
)

logger = logging.getLogger(__name__)

# Fixed slippage policy: 5% of the quoted amount
SLIPPAGE_PERCENT = 5


class SwapState(Enum):
    IDLE = "idle"
    NEEDS_APPROVAL = "needs_approval"
    APPROVING = "approving"
    APPROVAL_CONFIRMED = "approval_confirmed"
    SWAPPING = "swapping"
    SWAP_CONFIRMED = "swap_confirmed"
    FAILED = "failed"


_TRANSITIONS = {
    SwapState.IDLE: {SwapState.NEEDS_APPROVAL, SwapState.SWAPPING},
    SwapState.NEEDS_APPROVAL: {SwapState.IDLE, SwapState.APPROVING},
    SwapState.APPROVING: {SwapState.APPROVAL_CONFIRMED, SwapState.FAILED},
    SwapState.APPROVAL_CONFIRMED: {SwapState.SWAPPING, SwapState.FAILED},
    SwapState.SWAPPING: {SwapState.SWAP_CONFIRMED, SwapState.FAILED},
    SwapState.SWAP_CONFIRMED: {SwapState.IDLE, SwapState.NEEDS_APPROVAL},
    SwapState.FAILED: {SwapState.IDLE},
}

IN_FLIGHT_STATES = frozenset({
    SwapState.APPROVING,
    SwapState.APPROVAL_CONFIRMED,
    SwapState.SWAPPING,
})


def min_amount_out(quoted: int) -> int:
    """ExactIn bound: quoted - 5%"""
    return quoted - quoted * SLIPPAGE_PERCENT // 100


def max_amount_in(quoted: int) -> int:
    """ExactOut bound: quoted + 5%"""
    return quoted + quoted * SLIPPAGE_PERCENT // 100


@dataclass(frozen=True)
class SwapPlan:
    """
    Everything needed to submit one swap

    Attributes:
        token_in: Token being sold
        token_out: Token being bought
        mode: Trade mode
        amount: Driving amount (raw): amountIn for EXACT_IN, amountOut for EXACT_OUT
        quoted_amount: Simulated counter amount (raw), None if no quote exists
        amount_limit: amountOutMinimum (EXACT_IN) or amountInMaximum (EXACT_OUT)
        slippage_protected: False when no quote was available for the bound
        recipient: Receiver of the output tokens
        deadline: Unix seconds after which the router rejects the swap
        price_limit: sqrtPriceLimitX96
        index_path: Pool indices the swap routes through
    """
    token_in: str
    token_out: str
    mode: TradeMode
    amount: int
    quoted_amount: Optional[int]
    amount_limit: int
    slippage_protected: bool
    recipient: str
    deadline: int
    price_limit: int
    index_path: Tuple[int, ...]

    @property
    def max_input(self) -> int:
        """Most of token_in the swap can spend"""
        if self.mode == TradeMode.EXACT_IN:
            return self.amount
        return self.amount_limit

    def to_params(self) -> tuple:
        """Router struct for exactInput / exactOutput"""
        return (
            self.token_in,
            self.token_out,
            list(self.index_path),
            self.recipient,
            self.deadline,
            self.amount,
            self.amount_limit,
            self.price_limit,
        )


def build_swap_plan(
    token_in: str,
    token_out: str,
    mode: TradeMode,
    amount: int,
    quoted_amount: Optional[int],
    route: Optional[RouteSelection],
    recipient: str,
    deadline_seconds: Optional[int] = None,
    now: Optional[float] = None,
) -> SwapPlan:
    """
    Build a slippage-bounded swap plan.

    Args:
        token_in: Token being sold
        token_out: Token being bought
        mode: Trade mode
        amount: Driving amount (raw)
        quoted_amount: Simulated counter amount (raw), None/0 if unavailable
        route: Selected route
        recipient: Output receiver
        deadline_seconds: Deadline offset (defaults to config.tx.deadline_seconds)
        now: Current Unix time (defaults to time.time())

    Returns:
        SwapPlan

    Raises:
        RoutingUnavailable: No route or sentinel price limit
    """
    if route is None or not route.is_routable:
        raise RoutingUnavailable.no_pool(token_in, token_out)

    if deadline_seconds is None:
        deadline_seconds = global_config.tx.deadline_seconds
    if now is None:
        now = time.time()

    quoted = quoted_amount if quoted_amount and quoted_amount > 0 else None

    if mode == TradeMode.EXACT_IN:
        limit = min_amount_out(quoted) if quoted is not None else 0
    else:
        limit = max_amount_in(quoted) if quoted is not None else MAX_UINT256

    if quoted is None:
        logger.warning(
            f"No quote for {mode.value} {token_in} -> {token_out}: swap is not slippage protected"
        )

    return SwapPlan(
        token_in=token_in,
        token_out=token_out,
        mode=mode,
        amount=amount,
        quoted_amount=quoted,
        amount_limit=limit,
        slippage_protected=quoted is not None,
        recipient=recipient,
        deadline=int(now) + deadline_seconds,
        price_limit=route.price_limit,
        index_path=tuple(route.index_path),
    )


@dataclass
class Transition:
    source: SwapState
    target: SwapState
    at: float = field(default_factory=time.time)


class SwapOrchestrator:
    """
    Runs approval (when needed) and swap as one sequential trade

    Usage:
        orchestrator = SwapOrchestrator(contracts, on_swap_confirmed=market.invalidate)

        plan = build_swap_plan(...)
        orchestrator.check_approval(plan)   # IDLE <-> NEEDS_APPROVAL
        result = orchestrator.execute(plan) # approval (if needed) then swap
        if not result.is_success:
            print(orchestrator.last_failure.message)
    """

    def __init__(
        self,
        contracts: "ContractClient",
        router: Optional[str] = None,
        owner: Optional[str] = None,
        on_swap_confirmed: Optional[Callable[[], None]] = None,
        on_allowance_stale: Optional[Callable[[str], None]] = None,
        approve_exact_amount: Optional[bool] = None,
    ):
        """
        Args:
            contracts: Contract client used for allowance, approve and swap
            router: Spender to approve (defaults to the configured swap router)
            owner: Trading wallet (defaults to the signer address)
            on_swap_confirmed: Called after the swap receipt is observed
            on_allowance_stale: Called with the token address once an approval is submitted
            approve_exact_amount: Approve only what the trade needs instead of MAX_UINT256
        """
        self._contracts = contracts
        self._router = router
        self._owner = owner
        self._on_swap_confirmed = on_swap_confirmed
        self._on_allowance_stale = on_allowance_stale
        if approve_exact_amount is None:
            approve_exact_amount = global_config.trading.approve_exact_amount
        self._approve_exact_amount = approve_exact_amount

        self._lock = threading.Lock()
        self._state = SwapState.IDLE
        self._running = False
        self._allowance: Optional[int] = None
        self._allowance_stale = True
        self.transitions: List[Transition] = []
        self.pending: Optional[PendingTransaction] = None
        self.last_failure: Optional[FailureReason] = None

    @property
    def state(self) -> SwapState:
        return self._state

    @property
    def router(self) -> str:
        return self._router or self._contracts.swap_router_address

    @property
    def owner(self) -> str:
        return self._owner or self._contracts.address

    @property
    def busy(self) -> bool:
        """A trade is in flight"""
        return self._running or self._state in IN_FLIGHT_STATES

    @property
    def allowance(self) -> Optional[int]:
        """Last allowance read, None when stale"""
        return None if self._allowance_stale else self._allowance

    def can_submit(self, plan: Optional[SwapPlan] = None) -> bool:
        """True when a new trade could be started now"""
        if self.busy:
            return False
        if plan is None:
            return True
        return plan.price_limit > 0 and plan.amount > 0

    def _transition(self, target: SwapState) -> None:
        source = self._state
        if source == target:
            return
        if target not in _TRANSITIONS[source]:
            raise OperationNotSupported.illegal_transition(source.value, target.value)
        self._state = target
        self.transitions.append(Transition(source, target))
        log_with_correlation(logging.INFO, f"{source.value} -> {target.value}", "swap_state", log=logger)

    # =========================================================================
    # Allowance
    # =========================================================================

    def required_allowance(self, plan: SwapPlan) -> Optional[int]:
        """
        Allowance the router needs for plan.

        EXACT_IN: the input amount. EXACT_OUT: the quoted input amount, or
        None while no quote exists (the check waits for one).
        """
        if plan.mode == TradeMode.EXACT_IN:
            return plan.amount
        return plan.quoted_amount

    def refresh_allowance(self, token: str) -> int:
        self._allowance = self._contracts.allowance(token, self.owner, self.router)
        self._allowance_stale = False
        return self._allowance

    def mark_allowance_stale(self) -> None:
        self._allowance_stale = True

    def check_approval(self, plan: SwapPlan) -> bool:
        """
        Read the allowance and move between IDLE and NEEDS_APPROVAL.

        Returns:
            True when an approval is required. An EXACT_OUT plan without a
            quote returns False and leaves the state alone.

        Raises:
            TradeInProgress: A trade is in flight
        """
        with self._lock:
            if self.busy:
                raise TradeInProgress(self._state.value)
            required = self.required_allowance(plan)
            if required is None:
                return False
            allowance = self.refresh_allowance(plan.token_in)
            needs = allowance < required
            if self._state == SwapState.SWAP_CONFIRMED:
                self._transition(SwapState.IDLE)
            self._transition(SwapState.NEEDS_APPROVAL if needs else SwapState.IDLE)
            return needs

    # =========================================================================
    # Execution
    # =========================================================================

    def execute(self, plan: SwapPlan) -> TxResult:
        """
        Run the trade: approve if needed, wait for confirmation, then swap.

        Returns:
            TxResult of the swap (failed result carries the classified reason)

        Raises:
            TradeInProgress: Another trade is in flight
            RoutingUnavailable: plan has a sentinel price limit
        """
        with self._lock:
            if self.busy:
                raise TradeInProgress(self._state.value)
            if plan.price_limit <= 0:
                raise RoutingUnavailable.no_pool(plan.token_in, plan.token_out)
            if self._state == SwapState.SWAP_CONFIRMED:
                self._transition(SwapState.IDLE)
            self.last_failure = None
            self.pending = None
            self._running = True

        try:
            with CorrelationContext("swap"):
                return self._run(plan)
        finally:
            with self._lock:
                self._running = False

    def _run(self, plan: SwapPlan) -> TxResult:
        operation = f"swap({plan.mode.value})"
        try:
            required = self.required_allowance(plan)
            if required is None:
                log_with_correlation(logging.WARNING, "No quoted input: approval step skipped", operation, log=logger)
            elif self.refresh_allowance(plan.token_in) < required:
                self._transition(SwapState.NEEDS_APPROVAL)
                self._approve(plan.token_in, required)
            if self._state == SwapState.NEEDS_APPROVAL:
                self._transition(SwapState.IDLE)

            self._transition(SwapState.SWAPPING)
            if plan.mode == TradeMode.EXACT_IN:
                tx_hash = self._contracts.exact_input(plan.to_params())
            else:
                tx_hash = self._contracts.exact_output(plan.to_params())
            self.pending = PendingTransaction(kind=TxKind.SWAP, tx_hash=tx_hash)
            log_with_correlation(logging.INFO, f"Swap submitted: {tx_hash}", operation, log=logger)

            self.pending = self._contracts.wait_for_confirmation(tx_hash, TxKind.SWAP)
            if not self.pending.is_confirmed:
                raise TransactionError.reverted("swap", tx_hash)

            self._transition(SwapState.SWAP_CONFIRMED)
            # Swap spent allowance
            self.mark_allowance_stale()

        except Exception as e:
            return self._fail(e, operation)

        if self._on_swap_confirmed is not None:
            self._on_swap_confirmed()
        return self.pending.to_tx_result()

    def _approve(self, token: str, required: int) -> None:
        amount = required if self._approve_exact_amount else MAX_UINT256
        self._transition(SwapState.APPROVING)

        tx_hash = self._contracts.approve(token, self.router, amount)
        self.pending = PendingTransaction(kind=TxKind.APPROVE, tx_hash=tx_hash)
        # Allowance is untrusted from submission until re-read after confirmation
        self.mark_allowance_stale()
        if self._on_allowance_stale is not None:
            self._on_allowance_stale(token)
        log_with_correlation(
            logging.INFO,
            f"Approval submitted ({'exact' if self._approve_exact_amount else 'max'}): {tx_hash}",
            "approve",
            log=logger,
        )

        self.pending = self._contracts.wait_for_confirmation(tx_hash, TxKind.APPROVE)
        if not self.pending.is_confirmed:
            raise TransactionError.reverted("approve", tx_hash)

        self._transition(SwapState.APPROVAL_CONFIRMED)
        allowance = self.refresh_allowance(token)
        if allowance < required:
            raise TransactionError(
                f"Allowance {allowance} still below required {required} after approval",
                tx_hash=tx_hash,
            )

    def _fail(self, error: Exception, operation: str) -> TxResult:
        reason = classify_failure(error)
        self.last_failure = reason
        tx_hash = getattr(error, "tx_hash", None) or (self.pending.tx_hash if self.pending else None)

        log_with_correlation(
            logging.ERROR,
            f"Failed in state {self._state.value}: {reason.raw}",
            operation,
            log=logger,
            category=reason.category.value,
        )

        if self._state in (SwapState.APPROVING, SwapState.APPROVAL_CONFIRMED, SwapState.SWAPPING):
            self._transition(SwapState.FAILED)
            self._transition(SwapState.IDLE)
        elif self._state == SwapState.NEEDS_APPROVAL:
            self._transition(SwapState.IDLE)

        return TxResult.failed(
            reason.message,
            tx_hash=tx_hash,
            error_code=error.code.value if isinstance(error, SwapClientError) else None,
        )

    def reset(self) -> None:
        """Return to IDLE from a settled state"""
        with self._lock:
            if self.busy:
                raise TradeInProgress(self._state.value)
            if self._state != SwapState.IDLE:
                self._transition(SwapState.IDLE)
