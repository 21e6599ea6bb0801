"""
Liquidity Module

Pool creation and LP position operations against the PoolManager and
PositionManager. Every write waits for its receipt and invalidates the
market reads it affects.
"""

import logging
import time
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import List, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..contracts import ContractClient
    from .market import MarketModule

from ..contracts.abis import MAX_UINT256
from ..config import config as global_config
from ..errors import (
    ConfigurationError,
    SignerError,
    SwapClientError,
    TickOutOfRange,
    TransactionError,
    classify_failure,
)
from ..math.tick import MIN_TICK, MAX_TICK, human_price_to_sqrt_price_x96
from ..types import Position, TxKind, TxResult

logger = logging.getLogger(__name__)

# Fee percent -> fee units (0.3 -> 3000)
FEE_UNITS_PER_PERCENT = 10000
MAX_FEE = 2**24 - 1


def fee_percent_to_units(fee_percent: Union[str, float, Decimal]) -> int:
    """Convert a fee percentage to the pool's fee units (floor)"""
    try:
        value = Decimal(str(fee_percent))
    except InvalidOperation:
        raise ConfigurationError.invalid("fee", f"not a number: {fee_percent!r}")
    if not value.is_finite() or value < 0:
        raise ConfigurationError.invalid("fee", f"must be a non-negative percentage: {fee_percent!r}")
    units = int((value * FEE_UNITS_PER_PERCENT).to_integral_value(rounding=ROUND_FLOOR))
    if units > MAX_FEE:
        raise ConfigurationError.invalid("fee", f"{fee_percent}% exceeds uint24 fee units")
    return units


class LiquidityModule:
    """
    Liquidity operations module

    Usage:
        liquidity = LiquidityModule(contracts, market)

        liquidity.create_pool(token_a, token_b, "0.3", -600, 600, "1.0")
        liquidity.mint(0, token0, token1, "1.5", "2000")
        for position in liquidity.positions():
            liquidity.collect(position.id)
    """

    def __init__(
        self,
        contracts: "ContractClient",
        market: "MarketModule",
        approve_exact_amount: Optional[bool] = None,
        deadline_seconds: Optional[int] = None,
    ):
        self._contracts = contracts
        self._market = market
        if approve_exact_amount is None:
            approve_exact_amount = global_config.trading.approve_exact_amount
        self._approve_exact_amount = approve_exact_amount
        if deadline_seconds is None:
            deadline_seconds = global_config.tx.deadline_seconds
        self._deadline_seconds = deadline_seconds

    @property
    def owner(self) -> str:
        """Owner wallet address"""
        owner = self._contracts.address
        if not owner:
            raise SignerError.not_configured()
        return owner

    def positions(self, owner: Optional[str] = None) -> List[Position]:
        """Positions of owner (defaults to the signer)"""
        return self._market.positions(owner)

    def _confirm(self, tx_hash: str, kind: TxKind) -> TxResult:
        pending = self._contracts.wait_for_confirmation(tx_hash, kind)
        if not pending.is_confirmed:
            raise TransactionError.reverted(kind.value, tx_hash)
        return pending.to_tx_result()

    def _failed(self, operation: str, error: SwapClientError) -> TxResult:
        reason = classify_failure(error)
        logger.error(f"{operation} failed: {reason.raw}")
        return TxResult.failed(
            reason.message,
            tx_hash=getattr(error, "tx_hash", None),
            recoverable=error.recoverable,
            error_code=error.code.value,
        )

    def _ensure_approval(self, token: str, amount: int) -> None:
        """
        Approve the position manager for token when the allowance is short

        Raises:
            TransactionError: The approval reverted
        """
        spender = self._contracts.position_manager_address
        state = self._market.allowance(token, spender)
        if state.covers(amount):
            return

        logger.info(f"Approving token {token} for position manager...")
        approve_amount = amount if self._approve_exact_amount else MAX_UINT256
        tx_hash = self._contracts.approve(token, spender, approve_amount)
        self._market.mark_allowance_stale(token, spender)
        self._confirm(tx_hash, TxKind.APPROVE)

    def create_pool(
        self,
        token0: str,
        token1: str,
        fee_percent: Union[str, float, Decimal],
        tick_lower: int,
        tick_upper: int,
        initial_price: Union[str, float, Decimal],
    ) -> TxResult:
        """
        Create and initialize a pool if it doesn't exist

        Tokens are sorted by address; when they are swapped the price is
        inverted and the tick range mirrored so it describes the same range.

        Args:
            token0: One token of the pair
            token1: Other token of the pair
            fee_percent: Fee as percentage ("0.3" = 3000 units)
            tick_lower: Lower tick of the pool's range
            tick_upper: Upper tick of the pool's range
            initial_price: Initial price, token1 per token0 in raw units

        Returns:
            TxResult of the creation transaction
        """
        if token0.lower() == token1.lower():
            raise ConfigurationError.invalid("token1", "must differ from token0")
        for tick in (tick_lower, tick_upper):
            if isinstance(tick, bool) or not isinstance(tick, int) or not MIN_TICK <= tick <= MAX_TICK:
                raise TickOutOfRange.tick(tick, MIN_TICK, MAX_TICK)
        if tick_lower >= tick_upper:
            raise ConfigurationError.invalid("tick_lower", "must be below tick_upper")

        fee = fee_percent_to_units(fee_percent)
        try:
            price = Decimal(str(initial_price))
        except InvalidOperation:
            raise TickOutOfRange.price(initial_price, "not a number")

        if token0.lower() > token1.lower():
            token0, token1 = token1, token0
            tick_lower, tick_upper = -tick_upper, -tick_lower
            if price.is_finite() and price > 0:
                price = Decimal(1) / price

        sqrt_price_x96 = human_price_to_sqrt_price_x96(price)

        logger.info(
            f"Creating pool {token0}/{token1}: fee={fee}, ticks=[{tick_lower}, {tick_upper}], "
            f"sqrtPriceX96={sqrt_price_x96}"
        )

        try:
            tx_hash = self._contracts.create_pool(token0, token1, fee, tick_lower, tick_upper, sqrt_price_x96)
            result = self._confirm(tx_hash, TxKind.CREATE_POOL)
        except SwapClientError as e:
            return self._failed("create_pool", e)

        self._market.invalidate()
        return result

    def mint(
        self,
        pool_index: int,
        token0: str,
        token1: str,
        amount0: str,
        amount1: str,
        recipient: Optional[str] = None,
    ) -> TxResult:
        """
        Add liquidity to a pool, minting a new position

        Args:
            pool_index: Index of the pool within the pair
            token0: Pool token0
            token1: Pool token1
            amount0: Desired token0 amount (human string)
            amount1: Desired token1 amount (human string)
            recipient: Position owner (defaults to the signer)

        Returns:
            TxResult of the mint transaction
        """
        raw0 = self._market.token(token0).parse(amount0)
        raw1 = self._market.token(token1).parse(amount1)
        recipient = recipient or self.owner
        deadline = int(time.time()) + self._deadline_seconds

        try:
            for token, raw in ((token0, raw0), (token1, raw1)):
                if raw > 0:
                    self._ensure_approval(token, raw)

            tx_hash = self._contracts.mint(token0, token1, pool_index, raw0, raw1, recipient, deadline)
            result = self._confirm(tx_hash, TxKind.MINT)
        except SwapClientError as e:
            return self._failed("mint", e)

        logger.info(f"Minted position in pool #{pool_index}: {raw0} token0, {raw1} token1")
        self._market.invalidate()
        return result

    def burn(self, position_id: int) -> TxResult:
        """Remove all liquidity of a position"""
        try:
            tx_hash = self._contracts.burn(position_id)
            result = self._confirm(tx_hash, TxKind.BURN)
        except SwapClientError as e:
            return self._failed("burn", e)

        self._market.invalidate()
        return result

    def collect(self, position_id: int, recipient: Optional[str] = None) -> TxResult:
        """Collect owed tokens and fees of a position"""
        recipient = recipient or self.owner
        try:
            tx_hash = self._contracts.collect(position_id, recipient)
            result = self._confirm(tx_hash, TxKind.COLLECT)
        except SwapClientError as e:
            return self._failed("collect", e)

        self._market.invalidate()
        return result
