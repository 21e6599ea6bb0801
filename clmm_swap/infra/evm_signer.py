"""
Local-key transaction signing for the DEX chain

The signer owns nonce assignment for its account and hands signed
transactions to the node. It never waits for receipts; the contract client
tracks the returned hash until it is mined.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Set

from web3 import Web3, HTTPProvider
from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..errors import SignerError, RpcError

logger = logging.getLogger(__name__)

# Node rejections that happen before the mempool accepts the transaction
REJECTED_BEFORE_POOL = (
    "nonce too low",
    "replacement transaction",
    "insufficient funds",
    "gas too low",
    "invalid sender",
)


@dataclass(frozen=True)
class Broadcast:
    """Outcome of handing one signed transaction to the node"""
    tx_hash: Optional[str] = None
    error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.tx_hash is not None and self.error is None


@dataclass
class _AccountNonces:
    next_nonce: Optional[int] = None
    in_flight: Set[int] = field(default_factory=set)


class NonceManager:
    """
    Hands out nonces per account so an approval and the swap that follows it
    never collide, even when the node's pending count lags behind.

    reserve() -> broadcast -> commit() on success, release() when the node
    rejected the transaction before it entered the pool.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._accounts: Dict[str, _AccountNonces] = {}

    def reserve(self, web3: "Web3", address: str) -> int:
        key = address.lower()
        with self._lock:
            slot = self._accounts.setdefault(key, _AccountNonces())
            on_chain = web3.eth.get_transaction_count(Web3.to_checksum_address(address), "pending")
            # Someone else may have sent from this account
            nonce = on_chain if slot.next_nonce is None else max(on_chain, slot.next_nonce)
            slot.next_nonce = nonce + 1
            slot.in_flight.add(nonce)
            logger.debug(f"nonce {nonce} reserved for {address[:10]}... (node pending={on_chain})")
            return nonce

    def commit(self, address: str, nonce: int) -> None:
        with self._lock:
            slot = self._accounts.get(address.lower())
            if slot:
                slot.in_flight.discard(nonce)

    def release(self, address: str, nonce: int) -> None:
        """Give back a nonce the node never accepted; only the newest one can be reused"""
        with self._lock:
            slot = self._accounts.get(address.lower())
            if not slot:
                return
            slot.in_flight.discard(nonce)
            if slot.next_nonce == nonce + 1:
                slot.next_nonce = nonce
                logger.debug(f"nonce {nonce} released for {address[:10]}...")

    def forget(self, address: Optional[str] = None) -> None:
        """Drop local tracking so the next reserve() trusts the node again"""
        with self._lock:
            if address:
                self._accounts.pop(address.lower(), None)
            else:
                self._accounts.clear()


_shared_nonces = NonceManager()


class EVMSigner:
    """
    Signs with a local private key

    Usage:
        signer = EVMSigner.from_env()
        sent = signer.sign_and_send(web3, tx)
        if sent.accepted:
            print(sent.tx_hash)
    """

    def __init__(
        self,
        account: LocalAccount,
        nonce_manager: Optional[NonceManager] = None,
        chain_id: Optional[int] = None,
    ):
        self._account = account
        self._nonces = nonce_manager or _shared_nonces
        # None/0 = ask the node
        self._chain_id = chain_id or None

    @property
    def address(self) -> str:
        return self._account.address

    def sign_and_send(self, web3: "Web3", tx: Dict[str, Any]) -> Broadcast:
        """
        Fill nonce and chain id when missing, sign, and broadcast.

        Failures are returned, not raised, so the caller decides how to
        surface them.
        """
        reserved = None
        try:
            if "nonce" not in tx:
                reserved = self._nonces.reserve(web3, self.address)
                tx["nonce"] = reserved
            tx.setdefault("chainId", self._chain_id or web3.eth.chain_id)

            signed = self._account.sign_transaction(tx)
            tx_hash = Web3.to_hex(web3.eth.send_raw_transaction(signed.raw_transaction))
        except Exception as e:
            message = str(e)
            if reserved is not None and any(k in message.lower() for k in REJECTED_BEFORE_POOL):
                self._nonces.release(self.address, reserved)
            logger.error(f"Broadcast from {self.address[:10]}... failed: {message}")
            return Broadcast(error=message)

        if reserved is not None:
            self._nonces.commit(self.address, reserved)
        return Broadcast(tx_hash=tx_hash)

    @classmethod
    def from_private_key(cls, private_key: str, chain_id: Optional[int] = None) -> "EVMSigner":
        """Hex key, with or without 0x"""
        key = private_key.strip()
        if not key.startswith("0x"):
            key = "0x" + key
        try:
            account = Account.from_key(key)
        except Exception as e:
            raise SignerError.invalid_key(e) from e
        return cls(account, chain_id=chain_id)

    @classmethod
    def from_env(cls, env_var: str = "EVM_PRIVATE_KEY", chain_id: Optional[int] = None) -> "EVMSigner":
        """
        Raises:
            SignerError: env_var is unset or empty
        """
        private_key = os.getenv(env_var, "")
        if not private_key:
            raise SignerError.not_configured()
        return cls.from_private_key(private_key, chain_id=chain_id)

    def __repr__(self) -> str:
        return f"EVMSigner(address={self.address})"


def create_web3(rpc_url: str, timeout: float = 30) -> "Web3":
    """
    HTTP web3 connection to the DEX chain

    Raises:
        RpcError: rpc_url is empty
    """
    if not rpc_url:
        raise RpcError.connection_failed("<not configured>")
    return Web3(HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


def create_evm_signer(
    private_key: Optional[str] = None,
    env_var: str = "EVM_PRIVATE_KEY",
    chain_id: Optional[int] = None,
) -> EVMSigner:
    """An explicit key wins over env_var"""
    if private_key is not None:
        return EVMSigner.from_private_key(private_key, chain_id=chain_id)
    return EVMSigner.from_env(env_var, chain_id=chain_id)
