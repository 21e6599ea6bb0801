"""
Quote Synchronizer

Keeps the non-driving amount consistent with the driving amount by
simulating the swap against the router.

Rules:
- A simulation runs only when both tokens are set and distinct, a route
  with a non-zero price limit exists, and the driving amount is positive.
  Otherwise the counter amount is cleared and nothing is called.
- A result that formats to "0" is treated as no quote.
- A failed simulation clears the counter amount and records a message.
  It is never retried; the next input change triggers a new attempt.
- Requests are memoized by key. Identical inputs never simulate twice, and
  only the latest key may write state (last writer wins by input identity).
"""

import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from ..errors import classify_failure
from ..math.amounts import parse_amount_or_zero, format_amount, is_positive_amount
from ..types import TradeMode, RouteSelection, QuoteResult

logger = logging.getLogger(__name__)


class Quoter(Protocol):
    """Read-only swap simulation (implemented by ContractClient)"""

    def quote_exact_input(
        self, token_in: str, token_out: str, index_path: Sequence[int], amount_in: int, price_limit: int
    ) -> int: ...

    def quote_exact_output(
        self, token_in: str, token_out: str, index_path: Sequence[int], amount_out: int, price_limit: int
    ) -> int: ...


@dataclass(frozen=True)
class QuoteRequest:
    """
    Inputs of one quote computation

    Attributes:
        token_in: Input token address
        token_out: Output token address
        mode: EXACT_IN quotes the output, EXACT_OUT quotes the input
        amount: Driving amount as entered (human string)
        token_in_decimals: Decimals of token_in (None if not loaded yet)
        token_out_decimals: Decimals of token_out (None if not loaded yet)
        route: Selected route, None when routing is unavailable
    """
    token_in: Optional[str]
    token_out: Optional[str]
    mode: TradeMode
    amount: str
    token_in_decimals: Optional[int] = None
    token_out_decimals: Optional[int] = None
    route: Optional[RouteSelection] = None

    @property
    def driving_decimals(self) -> Optional[int]:
        return self.token_in_decimals if self.mode == TradeMode.EXACT_IN else self.token_out_decimals

    @property
    def counter_decimals(self) -> Optional[int]:
        return self.token_out_decimals if self.mode == TradeMode.EXACT_IN else self.token_in_decimals

    @property
    def driving_raw(self) -> int:
        """Driving amount in base units, 0 when missing or malformed"""
        if self.driving_decimals is None:
            return 0
        return parse_amount_or_zero(self.amount or "", self.driving_decimals)

    @property
    def key(self) -> str:
        """Stable serialization of every input that affects the quote"""
        route = "none"
        if self.route is not None:
            route = f"{self.route.pool_index}:{self.route.price_limit}"
            pool = self.route.pool
            # A range-boundary limit stays put when price or liquidity moves
            if pool is not None:
                route += f":{pool.address.lower()}:{pool.sqrt_price_x96}:{pool.liquidity}"
        return "|".join([
            (self.token_in or "").lower(),
            (self.token_out or "").lower(),
            self.mode.value,
            str(self.driving_raw),
            str(self.token_in_decimals),
            str(self.token_out_decimals),
            route,
        ])


@dataclass(frozen=True)
class QuoteState:
    """
    Result of the latest applied quote computation

    Attributes:
        counter_amount: Derived amount for display ("" when cleared)
        quoted_raw: Derived amount in base units (None when cleared)
        error: User-facing simulation failure message
        routing_unavailable: No usable pool / price limit for the pair
        key: Key of the request that produced this state
        quote: Full quote when one is available
    """
    counter_amount: str = ""
    quoted_raw: Optional[int] = None
    error: Optional[str] = None
    routing_unavailable: bool = False
    key: Optional[str] = None
    quote: Optional[QuoteResult] = None

    @property
    def has_quote(self) -> bool:
        return self.quoted_raw is not None and self.quoted_raw > 0


def _cleared(key: Optional[str], error: Optional[str] = None, routing_unavailable: bool = False) -> QuoteState:
    return QuoteState(key=key, error=error, routing_unavailable=routing_unavailable)


class QuoteSynchronizer:
    """
    Memoized, last-writer-wins quote computation

    Usage:
        sync = QuoteSynchronizer(contracts)
        state = sync.sync(QuoteRequest(a, b, TradeMode.EXACT_IN, "10", 18, 18, route))
        state.counter_amount  # "9.85"

        future = sync.sync_async(request, executor)
    """

    def __init__(
        self,
        quoter: Quoter,
        on_change: Optional[Callable[[QuoteState], None]] = None,
    ):
        self._quoter = quoter
        self._on_change = on_change
        self._lock = threading.Lock()
        self._state = QuoteState()
        self._latest_key: Optional[str] = None
        self._inflight: Optional[Future] = None
        self.simulations = 0

    @property
    def state(self) -> QuoteState:
        return self._state

    @property
    def latest_key(self) -> Optional[str]:
        return self._latest_key

    def clear(self) -> None:
        """Reset state and forget the memo key"""
        with self._lock:
            self._state = QuoteState()
            self._latest_key = None
            self._inflight = None
        self._notify(self._state)

    def _precondition_failure(self, request: QuoteRequest, key: str) -> Optional[QuoteState]:
        if not request.token_in or not request.token_out:
            return _cleared(key)
        if request.token_in.lower() == request.token_out.lower():
            return _cleared(key)
        if request.token_in_decimals is None or request.token_out_decimals is None:
            return _cleared(key)
        if request.route is None or not request.route.is_routable:
            return _cleared(key, routing_unavailable=True)
        if request.driving_raw <= 0:
            return _cleared(key)
        return None

    def _simulate(self, request: QuoteRequest, key: str) -> QuoteState:
        route = request.route
        amount = request.driving_raw
        self.simulations += 1

        try:
            if request.mode == TradeMode.EXACT_IN:
                quoted = self._quoter.quote_exact_input(
                    request.token_in, request.token_out, route.index_path, amount, route.price_limit
                )
            else:
                quoted = self._quoter.quote_exact_output(
                    request.token_in, request.token_out, route.index_path, amount, route.price_limit
                )
        except Exception as e:
            reason = classify_failure(e)
            logger.warning(f"Quote failed ({request.mode.value}, pool #{route.pool_index}): {reason.raw}")
            return _cleared(key, error=reason.message)

        formatted = format_amount(quoted, request.counter_decimals)
        if not is_positive_amount(formatted):
            logger.debug(f"Quote returned no usable amount ({quoted!r}), clearing")
            return _cleared(key)

        logger.debug(f"Quote {request.mode.value}: {amount} -> {quoted} via pool #{route.pool_index}")
        return QuoteState(
            counter_amount=formatted,
            quoted_raw=int(quoted),
            key=key,
            quote=QuoteResult(
                token_in=request.token_in,
                token_out=request.token_out,
                mode=request.mode,
                amount=amount,
                quoted_amount=int(quoted),
                route=route,
            ),
        )

    def _apply(self, key: str, state: QuoteState) -> bool:
        with self._lock:
            if key != self._latest_key:
                logger.debug("Discarding superseded quote result")
                return False
            self._state = state
        self._notify(state)
        return True

    def _notify(self, state: QuoteState) -> None:
        if self._on_change is not None:
            self._on_change(state)

    def sync(self, request: QuoteRequest) -> QuoteState:
        """
        Bring the counter amount up to date for request (blocking).

        Returns:
            Current state; unchanged (no simulation) when the key is memoized
        """
        key = request.key
        with self._lock:
            if key == self._latest_key:
                return self._state
            self._latest_key = key
            self._inflight = None

        state = self._precondition_failure(request, key)
        if state is None:
            state = self._simulate(request, key)

        self._apply(key, state)
        return self._state

    def sync_async(self, request: QuoteRequest, executor: Executor) -> Future:
        """
        Submit the quote computation to executor.

        The returned future resolves to the state computed for this request.
        That state is applied only if no newer request was made in between.
        """
        key = request.key
        with self._lock:
            if key == self._latest_key:
                if self._inflight is not None:
                    return self._inflight
                done: Future = Future()
                done.set_result(self._state)
                return done
            self._latest_key = key

        state = self._precondition_failure(request, key)
        if state is not None:
            with self._lock:
                self._inflight = None
            self._apply(key, state)
            done = Future()
            done.set_result(state)
            return done

        def run() -> QuoteState:
            result = self._simulate(request, key)
            self._apply(key, result)
            return result

        future = executor.submit(run)
        with self._lock:
            if self._latest_key == key:
                self._inflight = future
        return future
