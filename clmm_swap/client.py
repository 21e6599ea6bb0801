"""
SwapClient - Unified entry point for the CLMM DEX

Provides high-level access to the DEX through functional modules
(market, swap, lp).
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from web3 import Web3
    from .modules.market import MarketModule
    from .modules.swap import SwapModule
    from .modules.liquidity import LiquidityModule

from .config import Config, config as global_config
from .contracts import ContractClient
from .errors import ErrorCode, SignerError
from .infra.evm_signer import EVMSigner, create_web3, create_evm_signer

logger = logging.getLogger(__name__)


class SwapClient:
    """
    Unified DEX client

    Provides access to DEX operations through functional modules:
    - market: Pools, pairs, token metadata, balances, allowances, positions
    - swap: Single-pool swaps with quoting and approval handling
    - lp: Pool creation, mint, burn, collect

    Usage:
        client = SwapClient.from_config()

        client.swap.set_token_in(token_a)
        client.swap.set_token_out(token_b)
        client.swap.set_amount_in("10")
        result = client.swap.swap()

        positions = client.lp.positions()
    """

    def __init__(
        self,
        web3: "Web3",
        signer: Optional[EVMSigner] = None,
        cfg: Optional[Config] = None,
    ):
        """
        Initialize SwapClient

        Args:
            web3: Web3 instance connected to the DEX chain
            signer: Optional signer; without one only reads and quotes work
            cfg: Configuration (uses global config if None)
        """
        self._config = cfg or global_config
        self._web3 = web3
        self._signer = signer
        self._contracts = ContractClient(
            web3,
            self._config.contracts,
            signer,
            self._config.tx,
        )

        # Lazy-loaded modules
        self._market: Optional["MarketModule"] = None
        self._swap: Optional["SwapModule"] = None
        self._lp: Optional["LiquidityModule"] = None

    @classmethod
    def from_config(
        cls,
        cfg: Optional[Config] = None,
        private_key: Optional[str] = None,
        require_signer: bool = False,
    ) -> "SwapClient":
        """
        Build web3, signer and client from configuration.

        Args:
            cfg: Configuration (uses global config if None)
            private_key: Explicit key; otherwise read from the configured env var
            require_signer: Raise instead of running read-only without a key
        """
        cfg = cfg or global_config
        web3 = create_web3(cfg.rpc.url, timeout=cfg.rpc.timeout_seconds)

        try:
            signer = create_evm_signer(
                private_key=private_key,
                env_var=cfg.signer.private_key_env,
                chain_id=cfg.rpc.chain_id,
            )
        except SignerError as e:
            # Only a missing key falls back to read-only
            if require_signer or e.code != ErrorCode.SIGNER_NOT_CONFIGURED:
                raise
            logger.info("No signer configured, client is read-only")
            signer = None

        return cls(web3, signer, cfg)

    @property
    def web3(self) -> "Web3":
        return self._web3

    @property
    def contracts(self) -> ContractClient:
        return self._contracts

    @property
    def signer(self) -> Optional[EVMSigner]:
        return self._signer

    @property
    def address(self) -> Optional[str]:
        return self._signer.address if self._signer else None

    @property
    def market(self) -> "MarketModule":
        """
        Market module for chain reads

        Provides:
        - pools(), pairs(), best_pool(a, b)
        - token(address), balance(token), allowance(token, spender)
        - positions(owner)
        - invalidate(), invalidate_allowance(token)
        """
        if self._market is None:
            from .modules.market import MarketModule
            self._market = MarketModule(self._contracts)
        return self._market

    @property
    def swap(self) -> "SwapModule":
        """
        Swap module

        Provides:
        - set_token_in/out, set_amount_in/out, switch_tokens, refresh
        - route(), quote(), can_swap(), needs_approval()
        - swap(): approve (if needed) and swap
        """
        if self._swap is None:
            from .modules.swap import SwapModule
            self._swap = SwapModule(
                self._contracts,
                self.market,
                approve_exact_amount=self._config.trading.approve_exact_amount,
                deadline_seconds=self._config.tx.deadline_seconds,
            )
        return self._swap

    @property
    def lp(self) -> "LiquidityModule":
        """
        Liquidity module

        Provides:
        - create_pool(token0, token1, fee_percent, tick_lower, tick_upper, initial_price)
        - mint(pool_index, token0, token1, amount0, amount1)
        - burn(position_id), collect(position_id)
        - positions(owner)
        """
        if self._lp is None:
            from .modules.liquidity import LiquidityModule
            self._lp = LiquidityModule(
                self._contracts,
                self.market,
                approve_exact_amount=self._config.trading.approve_exact_amount,
                deadline_seconds=self._config.tx.deadline_seconds,
            )
        return self._lp

    def close(self):
        """Release resources"""
        self._contracts.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        addr = self.address[:10] + "..." if self.address else "None"
        return f"SwapClient(address={addr})"
