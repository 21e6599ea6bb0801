"""
Swap Module

Holds the inputs of a single-pool swap (token pair, amounts, trade mode) and
keeps the derived values in sync with them:

    pools + pair -> route (pool, price limit) -> quote -> counter amount

Each step is memoized by a key of its inputs, so refresh() only does chain
work when something it depends on changed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..contracts import ContractClient
    from .market import MarketModule

from ..config import config as global_config
from ..errors import RoutingUnavailable, SignerError
from ..math.amounts import parse_amount_or_zero
from ..routing import build_route, pools_key
from ..types import TradeMode, TradeIntent, RouteSelection, TxResult
from .orchestrator import SwapOrchestrator, SwapPlan, SwapState, build_swap_plan
from .quote import QuoteRequest, QuoteState, QuoteSynchronizer

logger = logging.getLogger(__name__)


class SwapModule:
    """
    Swap module for the DEX's single-pool routes

    Usage:
        swap = SwapModule(contracts, market)

        swap.set_token_in(token_a)
        swap.set_token_out(token_b)
        swap.set_amount_in("10")
        print(swap.amount_out)          # "9.85"

        if swap.can_swap():
            result = swap.swap()        # approves first when needed
    """

    def __init__(
        self,
        contracts: "ContractClient",
        market: "MarketModule",
        quotes: Optional[QuoteSynchronizer] = None,
        orchestrator: Optional[SwapOrchestrator] = None,
        approve_exact_amount: Optional[bool] = None,
        deadline_seconds: Optional[int] = None,
    ):
        self._contracts = contracts
        self._market = market
        if deadline_seconds is None:
            deadline_seconds = global_config.tx.deadline_seconds
        self._deadline_seconds = deadline_seconds
        self._quotes = quotes or QuoteSynchronizer(contracts)
        self._orchestrator = orchestrator or SwapOrchestrator(
            contracts,
            on_swap_confirmed=self._on_swap_confirmed,
            on_allowance_stale=market.invalidate_allowance,
            approve_exact_amount=approve_exact_amount,
        )

        self._token_in: Optional[str] = None
        self._token_out: Optional[str] = None
        self._amount_in = ""
        self._amount_out = ""
        self._mode = TradeMode.EXACT_IN

        self._route: Optional[RouteSelection] = None
        self._route_key: Optional[str] = None

    # =========================================================================
    # Inputs
    # =========================================================================

    @property
    def token_in(self) -> Optional[str]:
        return self._token_in

    @property
    def token_out(self) -> Optional[str]:
        return self._token_out

    @property
    def amount_in(self) -> str:
        return self._amount_in

    @property
    def amount_out(self) -> str:
        return self._amount_out

    @property
    def mode(self) -> TradeMode:
        return self._mode

    @property
    def orchestrator(self) -> SwapOrchestrator:
        return self._orchestrator

    @property
    def state(self) -> SwapState:
        return self._orchestrator.state

    @property
    def intent(self) -> TradeIntent:
        driving = self._amount_in if self._mode == TradeMode.EXACT_IN else self._amount_out
        return TradeIntent(self._token_in, self._token_out, self._mode, driving)

    def set_token_in(self, token: Optional[str]) -> QuoteState:
        self._token_in = token
        return self.refresh()

    def set_token_out(self, token: Optional[str]) -> QuoteState:
        self._token_out = token
        return self.refresh()

    def set_amount_in(self, amount: str) -> QuoteState:
        """User edited the input amount: EXACT_IN, output is derived"""
        self._amount_in = amount
        self._mode = TradeMode.EXACT_IN
        return self.refresh()

    def set_amount_out(self, amount: str) -> QuoteState:
        """User edited the output amount: EXACT_OUT, input is derived"""
        self._amount_out = amount
        self._mode = TradeMode.EXACT_OUT
        return self.refresh()

    def switch_tokens(self) -> QuoteState:
        """Swap sides: tokens and amounts trade places and the mode flips"""
        self._token_in, self._token_out = self._token_out, self._token_in
        self._amount_in, self._amount_out = self._amount_out, self._amount_in
        self._mode = TradeMode.EXACT_OUT if self._mode == TradeMode.EXACT_IN else TradeMode.EXACT_IN
        return self.refresh()

    def clear_amounts(self) -> None:
        self._amount_in = ""
        self._amount_out = ""
        self._quotes.clear()

    # =========================================================================
    # Derived values
    # =========================================================================

    def route(self) -> Optional[RouteSelection]:
        """Route for the current pair; None when routing is unavailable"""
        if not self._token_in or not self._token_out:
            return None
        if self._token_in.lower() == self._token_out.lower():
            return None

        pools = self._market.pools()
        key = f"{self._token_in.lower()}>{self._token_out.lower()}#{pools_key(pools)}"
        if key != self._route_key:
            self._route = build_route(pools, self._token_in, self._token_out)
            self._route_key = key
            if self._route is None:
                logger.info(f"Routing unavailable for {self._token_in} -> {self._token_out}")
        return self._route

    def quote(self) -> QuoteState:
        return self._quotes.state

    def _decimals(self, token: Optional[str]) -> Optional[int]:
        if not token:
            return None
        return self._market.token(token).decimals

    def _request(self) -> QuoteRequest:
        driving = self._amount_in if self._mode == TradeMode.EXACT_IN else self._amount_out
        return QuoteRequest(
            token_in=self._token_in,
            token_out=self._token_out,
            mode=self._mode,
            amount=driving,
            token_in_decimals=self._decimals(self._token_in),
            token_out_decimals=self._decimals(self._token_out),
            route=self.route(),
        )

    def refresh(self) -> QuoteState:
        """Recompute route and quote from the current inputs and write the counter amount"""
        state = self._quotes.sync(self._request())
        if self._mode == TradeMode.EXACT_IN:
            self._amount_out = state.counter_amount
        else:
            self._amount_in = state.counter_amount
        return state

    def _driving_raw(self) -> int:
        if self._mode == TradeMode.EXACT_IN:
            decimals = self._decimals(self._token_in)
            return parse_amount_or_zero(self._amount_in, decimals) if decimals is not None else 0
        decimals = self._decimals(self._token_out)
        return parse_amount_or_zero(self._amount_out, decimals) if decimals is not None else 0

    def can_swap(self) -> bool:
        """Signer present, pair routable, driving amount positive, nothing in flight"""
        if not self._contracts.address:
            return False
        if self._orchestrator.busy:
            return False
        route = self.route()
        if route is None or not route.is_routable:
            return False
        return self._driving_raw() > 0

    def plan(self) -> SwapPlan:
        """
        Build the swap plan from the current inputs

        Raises:
            SignerError: No signer configured
            RoutingUnavailable: No usable pool / price limit
            InvalidAmount: Driving amount malformed or too precise
        """
        owner = self._contracts.address
        if not owner:
            raise SignerError.not_configured()

        route = self.route()
        if route is None:
            raise RoutingUnavailable.no_pool(self._token_in, self._token_out)

        if self._mode == TradeMode.EXACT_IN:
            amount = self._market.token(self._token_in).parse(self._amount_in)
        else:
            amount = self._market.token(self._token_out).parse(self._amount_out)

        state = self._quotes.state
        quoted = state.quoted_raw if state.key == self._request().key else None

        return build_swap_plan(
            token_in=self._token_in,
            token_out=self._token_out,
            mode=self._mode,
            amount=amount,
            quoted_amount=quoted,
            route=route,
            recipient=owner,
            deadline_seconds=self._deadline_seconds,
        )

    def needs_approval(self) -> bool:
        """Allowance for the router is below what the current trade needs"""
        if not self.can_swap():
            return False
        return self._orchestrator.check_approval(self.plan())

    def swap(self) -> TxResult:
        """
        Execute the current trade (approval first when required).

        On confirmation both amounts are cleared and market reads invalidated.
        """
        plan = self.plan()
        if not plan.slippage_protected:
            logger.warning("Submitting swap without a quote: slippage protection disabled")
        return self._orchestrator.execute(plan)

    def _on_swap_confirmed(self) -> None:
        self.clear_amounts()
        self._market.invalidate()
        self._route_key = None
