"""
DEX contract ABIs and client
"""

from .abis import (
    MAX_UINT256,
    ERC20_ABI,
    POOL_MANAGER_ABI,
    POSITION_MANAGER_ABI,
    SWAP_ROUTER_ABI,
)
from .client import ContractClient

__all__ = [
    "MAX_UINT256",
    "ERC20_ABI",
    "POOL_MANAGER_ABI",
    "POSITION_MANAGER_ABI",
    "SWAP_ROUTER_ABI",
    "ContractClient",
]
