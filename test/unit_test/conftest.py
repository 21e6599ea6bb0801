"""
Shared fixtures for unit tests.

No network access: chain I/O is mocked at the ContractClient boundary.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from clmm_swap.types import Pool, PendingTransaction, ConfirmationStatus


TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x2222222222222222222222222222222222222222"
TOKEN_C = "0x3333333333333333333333333333333333333333"
OWNER = "0x00000000000000000000000000000000000000aa"
ROUTER = "0x00000000000000000000000000000000000000bb"
POSITION_MANAGER = "0x00000000000000000000000000000000000000cc"

Q96 = 2 ** 96


@pytest.fixture
def make_pool():
    """Factory for Pool snapshots (TOKEN_A/TOKEN_B, price 1.0 by default)"""

    def _make(
        index: int = 0,
        liquidity: int = 10 ** 18,
        fee: int = 3000,
        token0: str = TOKEN_A,
        token1: str = TOKEN_B,
        sqrt_price_x96: int = Q96,
        tick: int = 0,
        tick_lower: int = -600,
        tick_upper: int = 600,
    ) -> Pool:
        return Pool(
            address=f"0x{index + 1:040x}",
            token0=token0,
            token1=token1,
            index=index,
            fee=fee,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            tick=tick,
            sqrt_price_x96=sqrt_price_x96,
            liquidity=liquidity,
        )

    return _make


def _receipt(status: ConfirmationStatus):
    def _wait(tx_hash, kind):
        return PendingTransaction(
            kind=kind,
            tx_hash=tx_hash,
            status=status,
            block_number=100,
            gas_used=120_000,
            error=None if status == ConfirmationStatus.CONFIRMED else f"{kind.value} transaction reverted on-chain",
        )
    return _wait


@pytest.fixture
def confirmed():
    """wait_for_confirmation side effect: every transaction confirms"""
    return _receipt(ConfirmationStatus.CONFIRMED)


@pytest.fixture
def reverted():
    """wait_for_confirmation side effect: every transaction reverts"""
    return _receipt(ConfirmationStatus.FAILED)


@pytest.fixture
def contracts(confirmed):
    """ContractClient mock with a signer, router and confirming receipts"""
    client = MagicMock()
    client.address = OWNER
    client.swap_router_address = ROUTER
    client.position_manager_address = POSITION_MANAGER
    client.approve.return_value = "0xapprove"
    client.exact_input.return_value = "0xswapin"
    client.exact_output.return_value = "0xswapout"
    client.wait_for_confirmation.side_effect = confirmed
    return client
