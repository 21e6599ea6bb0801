"""
Shared configuration and fixtures for module integration tests.

WARNING: The swap tests execute real transactions and spend real tokens!

Environment Variables:
    CLMM_RPC_URL: RPC endpoint URL (required)
    CLMM_POOL_MANAGER / CLMM_POSITION_MANAGER / CLMM_SWAP_ROUTER: contract addresses (required)
    EVM_PRIVATE_KEY: hex private key (required for write tests)
    CLMM_TEST_TOKEN_IN / CLMM_TEST_TOKEN_OUT: token pair to trade (required for swap tests)
    CLMM_TEST_AMOUNT: human amount of CLMM_TEST_TOKEN_IN to swap (default: 0.001)
"""

import os
import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


REQUIRED_READ_VARS = ["CLMM_RPC_URL", "CLMM_POOL_MANAGER", "CLMM_POSITION_MANAGER", "CLMM_SWAP_ROUTER"]


def skip_if_no_config(require_signer: bool = False):
    """Return a skip message if the live configuration is incomplete"""
    missing = [key for key in REQUIRED_READ_VARS if not os.getenv(key)]
    if require_signer and not os.getenv("EVM_PRIVATE_KEY"):
        missing.append("EVM_PRIVATE_KEY")
    if missing:
        return f"Missing required environment variables: {', '.join(missing)}"
    return None


def create_client(require_signer: bool = False):
    """Create SwapClient with live RPC"""
    from clmm_swap import SwapClient
    from clmm_swap.config import reload_config

    return SwapClient.from_config(reload_config(), require_signer=require_signer)


@pytest.fixture(scope="module")
def client():
    """Read-only client (uses the signer when one is configured)"""
    skip_msg = skip_if_no_config()
    if skip_msg:
        pytest.skip(skip_msg)
    with create_client() as c:
        yield c


@pytest.fixture(scope="module")
def signed_client():
    """Client that can send transactions"""
    skip_msg = skip_if_no_config(require_signer=True)
    if skip_msg:
        pytest.skip(skip_msg)
    with create_client(require_signer=True) as c:
        yield c


@pytest.fixture(scope="module")
def trade_pair():
    """(token_in, token_out, amount) from the environment"""
    token_in = os.getenv("CLMM_TEST_TOKEN_IN")
    token_out = os.getenv("CLMM_TEST_TOKEN_OUT")
    if not token_in or not token_out:
        pytest.skip("Set CLMM_TEST_TOKEN_IN and CLMM_TEST_TOKEN_OUT to run swap tests")
    return token_in, token_out, os.getenv("CLMM_TEST_AMOUNT", "0.001")
