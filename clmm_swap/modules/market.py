"""
Market Module

Cached chain reads: pools, pairs, token metadata, balances, allowances and
positions. Everything except token metadata is invalidated after a trade
or liquidity operation confirms.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..contracts import ContractClient

from ..types import TokenInfo, Pool, Pair, Position, AllowanceState
from ..routing import pools_for_pair, select_best_pool
from ..errors import SignerError

logger = logging.getLogger(__name__)


class MarketModule:
    """
    Market data module

    Usage:
        market = MarketModule(contracts)

        pools = market.pools()
        token = market.token("0x...")
        allowance = market.allowance("0x...", spender)

        market.invalidate()          # after a confirmed trade
        market.invalidate_allowance("0x...")
    """

    def __init__(self, contracts: "ContractClient"):
        self._contracts = contracts
        self._lock = threading.RLock()

        self._pools: Optional[List[Pool]] = None
        self._pairs: Optional[List[Pair]] = None
        self._positions: Dict[str, List[Position]] = {}
        self._balances: Dict[Tuple[str, str], int] = {}
        self._allowances: Dict[Tuple[str, str, str], AllowanceState] = {}
        # Token metadata is immutable once fetched
        self._tokens: Dict[str, TokenInfo] = {}

    @property
    def owner(self) -> Optional[str]:
        """Owner wallet address"""
        return self._contracts.address

    def _require_owner(self, owner: Optional[str]) -> str:
        owner = owner or self.owner
        if not owner:
            raise SignerError.not_configured()
        return owner

    # =========================================================================
    # Pools and pairs
    # =========================================================================

    def pools(self, refresh: bool = False) -> List[Pool]:
        """All pools known to the pool manager"""
        with self._lock:
            if self._pools is None or refresh:
                self._pools = self._contracts.get_all_pools()
                logger.debug(f"Loaded {len(self._pools)} pools")
            return list(self._pools)

    def pairs(self, refresh: bool = False) -> List[Pair]:
        with self._lock:
            if self._pairs is None or refresh:
                self._pairs = self._contracts.get_pairs()
            return list(self._pairs)

    def pools_for_pair(self, token_a: str, token_b: str) -> List[Pool]:
        return pools_for_pair(self.pools(), token_a, token_b)

    def best_pool(self, token_a: str, token_b: str) -> Optional[Pool]:
        return select_best_pool(self.pools(), token_a, token_b)

    # =========================================================================
    # Tokens
    # =========================================================================

    def token(self, address: str) -> TokenInfo:
        """ERC-20 metadata (cached for the lifetime of the module)"""
        key = address.lower()
        with self._lock:
            info = self._tokens.get(key)
            if info is None:
                info = self._contracts.token_info(address)
                self._tokens[key] = info
            return info

    def balance(self, token: str, owner: Optional[str] = None) -> int:
        owner = self._require_owner(owner)
        key = (token.lower(), owner.lower())
        with self._lock:
            if key not in self._balances:
                self._balances[key] = self._contracts.balance_of(token, owner)
            return self._balances[key]

    def allowance(self, token: str, spender: str, owner: Optional[str] = None) -> AllowanceState:
        """Allowance of owner -> spender; re-read when stale or not cached"""
        owner = self._require_owner(owner)
        key = (token.lower(), owner.lower(), spender.lower())
        with self._lock:
            state = self._allowances.get(key)
            if state is None or state.stale:
                value = self._contracts.allowance(token, owner, spender)
                state = AllowanceState(owner=owner, spender=spender, token=token, allowance=value)
                self._allowances[key] = state
            return state

    def mark_allowance_stale(self, token: str, spender: Optional[str] = None) -> None:
        """Mark cached allowances for token (optionally one spender) as needing a re-read"""
        token_key = token.lower()
        with self._lock:
            for key, state in list(self._allowances.items()):
                if key[0] != token_key:
                    continue
                if spender is not None and key[2] != spender.lower():
                    continue
                self._allowances[key] = state.mark_stale()

    # =========================================================================
    # Positions
    # =========================================================================

    def positions(self, owner: Optional[str] = None) -> List[Position]:
        owner = self._require_owner(owner)
        key = owner.lower()
        with self._lock:
            if key not in self._positions:
                self._positions[key] = self._contracts.get_positions(owner)
            return list(self._positions[key])

    # =========================================================================
    # Invalidation
    # =========================================================================

    def invalidate(self) -> None:
        """Drop every cached read except token metadata"""
        with self._lock:
            self._pools = None
            self._pairs = None
            self._positions.clear()
            self._balances.clear()
            self._allowances.clear()
        logger.debug("Market reads invalidated")

    def invalidate_allowance(self, token: str) -> None:
        """Drop cached allowances for a token"""
        token_key = token.lower()
        with self._lock:
            for key in [k for k in self._allowances if k[0] == token_key]:
                del self._allowances[key]
