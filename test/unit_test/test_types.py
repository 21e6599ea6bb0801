"""
Test Types Module

Tests for clmm_swap.types package.
"""

import sys
from dataclasses import FrozenInstanceError
from decimal import Decimal
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x2222222222222222222222222222222222222222"
OWNER = "0x00000000000000000000000000000000000000aa"


def test_token_info():
    """Test TokenInfo dataclass"""
    from clmm_swap.types import TokenInfo

    print("Testing TokenInfo...")

    usdc = TokenInfo(address=TOKEN_B, name="USD Coin", symbol="USDC", decimals=6)
    assert usdc.decimals == 6
    assert str(usdc) == "USDC"

    # TokenInfo is frozen (immutable)
    try:
        usdc.decimals = 18
    except FrozenInstanceError:
        pass  # Expected
    else:
        assert False, "Should not be able to modify frozen dataclass"

    print("  TokenInfo: PASSED")


def test_pool_from_chain():
    """Test Pool built from a PoolManager tuple"""
    from clmm_swap.types import Pool

    print("Testing Pool...")

    raw = ("0x" + "ab" * 20, TOKEN_A, TOKEN_B, 2, 3000, 0, -600, 600, 12, 2 ** 96, 10 ** 18)
    pool = Pool.from_chain(raw)

    assert pool.index == 2
    assert pool.fee == 3000
    assert pool.fee_percent == Decimal("0.3")
    assert (pool.tick_lower, pool.tick_upper, pool.tick) == (-600, 600, 12)
    assert pool.sqrt_price_x96 == 2 ** 96
    assert pool.is_usable is True
    assert pool.matches_pair(TOKEN_B.upper().replace("0X", "0x"), TOKEN_A)
    assert pool.has_token0(TOKEN_A)

    empty = Pool.from_chain(raw[:9] + (0, 10 ** 18))
    assert empty.is_usable is False

    print("  Pool: PASSED")


def test_position_from_chain():
    """Test Position built from a PositionManager tuple"""
    from clmm_swap.types import Position

    print("Testing Position...")

    raw = (7, OWNER, TOKEN_A, TOKEN_B, 0, 3000, 5000, -600, 600, 0, 12, 1, 2)
    position = Position.from_chain(raw)

    assert position.id == 7
    assert position.owner == OWNER
    assert position.liquidity == 5000
    assert position.tokens_owed1 == 12
    assert position.has_fees is True
    assert position.fee_growth_inside1_last_x128 == 2

    print("  Position: PASSED")


def test_trade_types():
    """Test TradeIntent, RouteSelection, AllowanceState"""
    from clmm_swap.types import TradeIntent, TradeMode, RouteSelection, AllowanceState, same_address

    print("Testing trade types...")

    assert TradeIntent(TOKEN_A, TOKEN_B).has_distinct_tokens is True
    assert TradeIntent(TOKEN_A, TOKEN_A.upper().replace("0X", "0x")).has_distinct_tokens is False
    assert TradeIntent(None, TOKEN_B, TradeMode.EXACT_OUT).has_distinct_tokens is False

    route = RouteSelection(pool_index=3, price_limit=123)
    assert route.index_path == [3]
    assert route.is_routable is True
    assert RouteSelection(pool_index=3, price_limit=0).is_routable is False

    state = AllowanceState(OWNER, TOKEN_B, TOKEN_A, allowance=100)
    assert state.covers(100) is True
    assert state.covers(101) is False
    stale = state.mark_stale()
    assert stale.covers(1) is False
    assert state.stale is False  # original untouched

    assert same_address(TOKEN_A, TOKEN_A.upper().replace("0X", "0x"))
    assert not same_address(None, None)

    print("  Trade types: PASSED")


def test_tx_result():
    """Test TxResult dataclass"""
    from clmm_swap.types import TxResult, TxStatus

    print("Testing TxResult...")

    result1 = TxResult.success("0xhash")
    assert result1.status == TxStatus.SUCCESS
    assert result1.tx_hash == "0xhash"
    assert result1.is_success == True

    result2 = TxResult.failed("Transaction failed", error_code="2002")
    assert result2.status == TxStatus.FAILED
    assert result2.error == "Transaction failed"
    assert result2.is_success == False

    print("  TxResult: PASSED")


def test_pending_transaction():
    """Test PendingTransaction -> TxResult"""
    from clmm_swap.types import PendingTransaction, ConfirmationStatus, TxKind, TxStatus

    print("Testing PendingTransaction...")

    pending = PendingTransaction(TxKind.SWAP, "0xhash")
    assert pending.to_tx_result().status == TxStatus.PENDING

    pending.status = ConfirmationStatus.CONFIRMED
    pending.block_number = 10
    result = pending.to_tx_result()
    assert result.is_success
    assert result.block_number == 10

    reverted = PendingTransaction(TxKind.APPROVE, "0xhash", ConfirmationStatus.FAILED, error="approve reverted")
    assert reverted.to_tx_result().error == "approve reverted"

    print("  PendingTransaction: PASSED")


def test_quote_result():
    """Test QuoteResult dataclass"""
    from clmm_swap.types import QuoteResult, TradeMode

    print("Testing QuoteResult...")

    exact_in = QuoteResult(TOKEN_A, TOKEN_B, TradeMode.EXACT_IN, amount=100, quoted_amount=98)
    assert (exact_in.amount_in, exact_in.amount_out) == (100, 98)

    exact_out = QuoteResult(TOKEN_A, TOKEN_B, TradeMode.EXACT_OUT, amount=100, quoted_amount=103)
    assert (exact_out.amount_in, exact_out.amount_out) == (103, 100)

    print("  QuoteResult: PASSED")


def main():
    """Run all type tests"""
    print("=" * 60)
    print("CLMM Swap Types Tests")
    print("=" * 60)

    tests = [
        test_token_info,
        test_pool_from_chain,
        test_position_from_chain,
        test_trade_types,
        test_tx_result,
        test_pending_transaction,
        test_quote_result,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"  FAILED: {e}")
            failed += 1

    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
