"""
Swap Module Integration Tests

WARNING: These tests execute REAL swaps and spend REAL tokens!

Round trip on the configured pair:
    CLMM_TEST_TOKEN_IN -> CLMM_TEST_TOKEN_OUT (exact in)
    CLMM_TEST_TOKEN_OUT -> CLMM_TEST_TOKEN_IN (exact in, the amount received)
"""

import pytest

from clmm_swap.modules.orchestrator import SwapState


def run_swap(client, token_in: str, token_out: str, amount: str):
    swap = client.swap
    swap.clear_amounts()
    swap.set_token_in(token_in)
    swap.set_token_out(token_out)
    state = swap.set_amount_in(amount)

    if state.routing_unavailable:
        pytest.skip(f"No usable pool for {token_in} -> {token_out}")
    assert state.error is None, state.error
    assert state.has_quote
    print(f"  Quote: {amount} -> {swap.amount_out}")

    balance_before = client.market.balance(token_out)
    result = swap.swap()
    print(f"  Result: {result.status.value} {result.tx_hash}")

    assert result.is_success, f"{result.error_code}: {result.error}"
    assert swap.state == SwapState.SWAP_CONFIRMED
    assert swap.amount_in == ""

    received = client.market.balance(token_out) - balance_before
    print(f"  Received: {client.market.token(token_out).format(received)}")
    assert received > 0
    return received


def test_round_trip(signed_client, trade_pair):
    token_in, token_out, amount = trade_pair
    print(f"\nSwapping {amount} {token_in} -> {token_out}")

    received = run_swap(signed_client, token_in, token_out, amount)
    back = signed_client.market.token(token_out).format(received)

    print(f"\nSwapping back {back} {token_out} -> {token_in}")
    run_swap(signed_client, token_out, token_in, back)


def test_quote_without_signer(client, trade_pair):
    token_in, token_out, amount = trade_pair
    swap = client.swap
    swap.clear_amounts()
    swap.set_token_in(token_in)
    swap.set_token_out(token_out)
    swap.set_amount_out(amount)

    state = swap.quote()
    if state.routing_unavailable:
        pytest.skip(f"No usable pool for {token_in} -> {token_out}")
    print(f"\n  ExactOut quote: {swap.amount_in} -> {amount}")
    assert state.error is None or swap.amount_in == ""
