"""
Contract client for the DEX

Wraps the three DEX contracts and ERC-20 tokens behind plain Python calls:
- reads go through call_with_retry and return typed values
- quote simulations are single eth_calls, never retried
- writes are signed locally, broadcast, and return the transaction hash;
  confirmation is awaited separately with wait_for_confirmation()
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from web3 import Web3
from web3.exceptions import TimeExhausted

from ..config import config as global_config, ContractsConfig, TxConfig
from ..errors import (
    ConfigurationError,
    QuoteFailed,
    SignerError,
    TransactionError,
)
from ..infra.evm_signer import EVMSigner
from ..infra.retry import call_with_retry
from ..types import (
    TokenInfo,
    Pool,
    Pair,
    Position,
    TxKind,
    ConfirmationStatus,
    PendingTransaction,
    same_address,
)
from .abis import (
    ERC20_ABI,
    POOL_MANAGER_ABI,
    POSITION_MANAGER_ABI,
    SWAP_ROUTER_ABI,
)

logger = logging.getLogger(__name__)


class ContractClient:
    """
    Chain boundary for pools, positions, tokens and the swap router

    Usage:
        web3 = create_web3(config.rpc.url)
        client = ContractClient(web3, config.contracts, EVMSigner.from_env())

        pools = client.get_all_pools()
        amount_out = client.quote_exact_input(token_in, token_out, [0], amount_in, limit)
        tx_hash = client.approve(token_in, client.swap_router_address, MAX_UINT256)
        pending = client.wait_for_confirmation(tx_hash, TxKind.APPROVE)
    """

    def __init__(
        self,
        web3: "Web3",
        contracts: Optional[ContractsConfig] = None,
        signer: Optional[EVMSigner] = None,
        tx_config: Optional[TxConfig] = None,
    ):
        self._web3 = web3
        self._contracts = contracts or global_config.contracts
        self._signer = signer
        self._tx = tx_config or global_config.tx

    @property
    def web3(self) -> "Web3":
        return self._web3

    @property
    def address(self) -> Optional[str]:
        return self._signer.address if self._signer else None

    @property
    def pool_manager_address(self) -> str:
        return self._require_address("pool_manager", self._contracts.pool_manager)

    @property
    def position_manager_address(self) -> str:
        return self._require_address("position_manager", self._contracts.position_manager)

    @property
    def swap_router_address(self) -> str:
        return self._require_address("swap_router", self._contracts.swap_router)

    @staticmethod
    def _require_address(name: str, address: str) -> str:
        if not address:
            raise ConfigurationError.missing(f"contracts.{name}")
        return Web3.to_checksum_address(address)

    # =========================================================================
    # Contract Instances
    # =========================================================================

    def _pool_manager(self):
        return self._web3.eth.contract(address=self.pool_manager_address, abi=POOL_MANAGER_ABI)

    def _position_manager(self):
        return self._web3.eth.contract(address=self.position_manager_address, abi=POSITION_MANAGER_ABI)

    def _swap_router(self):
        return self._web3.eth.contract(address=self.swap_router_address, abi=SWAP_ROUTER_ABI)

    def _token(self, token_address: str):
        return self._web3.eth.contract(
            address=Web3.to_checksum_address(token_address),
            abi=ERC20_ABI,
        )

    # =========================================================================
    # Reads
    # =========================================================================

    def get_all_pools(self) -> List[Pool]:
        raw = call_with_retry(
            lambda: self._pool_manager().functions.getAllPools().call(),
            "getAllPools",
        )
        return [Pool.from_chain(item) for item in raw]

    def get_pairs(self) -> List[Pair]:
        raw = call_with_retry(
            lambda: self._pool_manager().functions.getPairs().call(),
            "getPairs",
        )
        return [Pair.from_chain(item) for item in raw]

    def get_all_positions(self) -> List[Position]:
        raw = call_with_retry(
            lambda: self._position_manager().functions.getAllPositions().call(),
            "getAllPositions",
        )
        return [Position.from_chain(item) for item in raw]

    def get_positions(self, owner: Optional[str] = None) -> List[Position]:
        """Positions owned by owner (defaults to the signer); filtered client-side"""
        owner = owner or self.address
        if not owner:
            raise SignerError.not_configured()
        return [p for p in self.get_all_positions() if same_address(p.owner, owner)]

    def balance_of(self, token: str, owner: Optional[str] = None) -> int:
        owner = owner or self.address
        if not owner:
            raise SignerError.not_configured()
        return call_with_retry(
            lambda: self._token(token).functions.balanceOf(Web3.to_checksum_address(owner)).call(),
            f"balanceOf({token[:10]})",
        )

    def allowance(self, token: str, owner: str, spender: str) -> int:
        return call_with_retry(
            lambda: self._token(token).functions.allowance(
                Web3.to_checksum_address(owner),
                Web3.to_checksum_address(spender),
            ).call(),
            f"allowance({token[:10]})",
        )

    def token_info(self, token: str) -> TokenInfo:
        """
        Read ERC-20 metadata.

        decimals is required; a token without readable decimals raises RpcError.
        Missing name/symbol fall back to placeholders.
        """
        contract = self._token(token)
        decimals = call_with_retry(lambda: contract.functions.decimals().call(), f"decimals({token[:10]})")

        try:
            symbol = contract.functions.symbol().call()
        except Exception as e:
            logger.debug(f"symbol() unavailable for {token}: {e}")
            symbol = "UNKNOWN"

        try:
            name = contract.functions.name().call()
        except Exception as e:
            logger.debug(f"name() unavailable for {token}: {e}")
            name = ""

        return TokenInfo(address=token, name=name, symbol=symbol, decimals=int(decimals))

    # =========================================================================
    # Quote simulations
    # =========================================================================

    def _simulate(self, fn, operation: str) -> int:
        call_params = {"from": self.address} if self.address else {}
        try:
            return int(fn.call(call_params))
        except Exception as e:
            logger.warning(f"{operation} simulation failed: {e}")
            raise QuoteFailed.simulation_reverted(e) from e

    def quote_exact_input(
        self,
        token_in: str,
        token_out: str,
        index_path: Sequence[int],
        amount_in: int,
        price_limit: int,
    ) -> int:
        """Simulate exactInput; returns amountOut (raw)"""
        params = (
            Web3.to_checksum_address(token_in),
            Web3.to_checksum_address(token_out),
            list(index_path),
            amount_in,
            price_limit,
        )
        return self._simulate(self._swap_router().functions.quoteExactInput(params), "quoteExactInput")

    def quote_exact_output(
        self,
        token_in: str,
        token_out: str,
        index_path: Sequence[int],
        amount_out: int,
        price_limit: int,
    ) -> int:
        """Simulate exactOutput; returns amountIn (raw)"""
        params = (
            Web3.to_checksum_address(token_in),
            Web3.to_checksum_address(token_out),
            list(index_path),
            amount_out,
            price_limit,
        )
        return self._simulate(self._swap_router().functions.quoteExactOutput(params), "quoteExactOutput")

    # =========================================================================
    # Writes
    # =========================================================================

    def _add_gas_price(self, tx: Dict[str, Any]):
        """Set EIP-1559 fees from the latest base fee and configured tip"""
        latest_block = self._web3.eth.get_block("latest")
        base_fee = latest_block.get("baseFeePerGas", 0)
        max_priority_fee = self._web3.to_wei(self._tx.priority_fee_gwei, "gwei")
        tx["maxFeePerGas"] = int(base_fee * self._tx.base_fee_multiplier) + max_priority_fee
        tx["maxPriorityFeePerGas"] = max_priority_fee
        # web3 may have filled a legacy gasPrice
        tx.pop("gasPrice", None)

    def _send(self, operation: str, fn, gas: int) -> str:
        if not self._signer:
            raise SignerError.not_configured()

        try:
            tx = fn.build_transaction({
                "from": self._signer.address,
                "value": 0,
                "gas": gas,
            })
            self._add_gas_price(tx)
        except Exception as e:
            raise TransactionError(
                f"Failed to build {operation} transaction: {e}",
                original_error=e,
            ) from e

        sent = self._signer.sign_and_send(self._web3, tx)
        if not sent.accepted:
            raise TransactionError.send_failed(operation, sent.error or "unknown error")

        logger.info(f"{operation} submitted: {sent.tx_hash}")
        return sent.tx_hash

    def approve(self, token: str, spender: str, amount: int) -> str:
        fn = self._token(token).functions.approve(Web3.to_checksum_address(spender), amount)
        return self._send("approve", fn, self._tx.approve_gas_limit)

    def exact_input(self, params: tuple) -> str:
        """params: (tokenIn, tokenOut, indexPath, recipient, deadline, amountIn, amountOutMinimum, sqrtPriceLimitX96)"""
        return self._send("exactInput", self._swap_router().functions.exactInput(params), self._tx.swap_gas_limit)

    def exact_output(self, params: tuple) -> str:
        """params: (tokenIn, tokenOut, indexPath, recipient, deadline, amountOut, amountInMaximum, sqrtPriceLimitX96)"""
        return self._send("exactOutput", self._swap_router().functions.exactOutput(params), self._tx.swap_gas_limit)

    def create_pool(
        self,
        token0: str,
        token1: str,
        fee: int,
        tick_lower: int,
        tick_upper: int,
        sqrt_price_x96: int,
    ) -> str:
        params = (
            Web3.to_checksum_address(token0),
            Web3.to_checksum_address(token1),
            fee,
            tick_lower,
            tick_upper,
            sqrt_price_x96,
        )
        fn = self._pool_manager().functions.createAndInitializePoolIfNecessary(params)
        return self._send("createPool", fn, self._tx.lp_gas_limit)

    def mint(
        self,
        token0: str,
        token1: str,
        index: int,
        amount0_desired: int,
        amount1_desired: int,
        recipient: str,
        deadline: int,
    ) -> str:
        params = (
            Web3.to_checksum_address(token0),
            Web3.to_checksum_address(token1),
            index,
            amount0_desired,
            amount1_desired,
            Web3.to_checksum_address(recipient),
            deadline,
        )
        return self._send("mint", self._position_manager().functions.mint(params), self._tx.lp_gas_limit)

    def burn(self, position_id: int) -> str:
        return self._send("burn", self._position_manager().functions.burn(position_id), self._tx.lp_gas_limit)

    def collect(self, position_id: int, recipient: str) -> str:
        fn = self._position_manager().functions.collect(position_id, Web3.to_checksum_address(recipient))
        return self._send("collect", fn, self._tx.lp_gas_limit)

    # =========================================================================
    # Confirmation
    # =========================================================================

    def wait_for_confirmation(self, tx_hash: str, kind: TxKind) -> PendingTransaction:
        """
        Block until the transaction has a receipt.

        Waits in receipt_wait_slice windows and keeps waiting across windows;
        there is no client-side give-up.
        """
        pending = PendingTransaction(kind=kind, tx_hash=tx_hash)

        while True:
            try:
                receipt = self._web3.eth.wait_for_transaction_receipt(
                    tx_hash,
                    timeout=self._tx.receipt_wait_slice,
                    poll_latency=self._tx.receipt_poll_interval,
                )
                break
            except TimeExhausted:
                logger.info(f"{kind.value} {tx_hash} still pending, waiting")

        pending.block_number = receipt.get("blockNumber")
        pending.gas_used = receipt.get("gasUsed")
        if receipt.get("status") == 1:
            pending.status = ConfirmationStatus.CONFIRMED
            logger.info(f"{kind.value} confirmed in block {pending.block_number}: {tx_hash}")
        else:
            pending.status = ConfirmationStatus.FAILED
            pending.error = f"{kind.value} transaction reverted on-chain"
            logger.error(f"{kind.value} reverted in block {pending.block_number}: {tx_hash}")

        return pending

    def close(self):
        """Cleanup"""
        pass

    def __enter__(self) -> "ContractClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        addr = self.address[:10] + "..." if self.address else "None"
        return f"ContractClient(router={self._contracts.swap_router[:10]}..., address={addr})"
