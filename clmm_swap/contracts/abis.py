"""
Contract ABIs for the DEX: PoolManager, PositionManager, SwapRouter and ERC-20
"""

MAX_UINT256 = 2**256 - 1


def _tuple(name: str, components: list) -> dict:
    return {"name": name, "type": "tuple", "components": components}


def _tuple_array(name: str, components: list) -> dict:
    return {"name": name, "type": "tuple[]", "components": components}


ERC20_ABI = [
    {
        "constant": False,
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"}
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"}
        ],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function"
    },
]

POOL_INFO_COMPONENTS = [
    {"name": "pool", "type": "address"},
    {"name": "token0", "type": "address"},
    {"name": "token1", "type": "address"},
    {"name": "index", "type": "uint32"},
    {"name": "fee", "type": "uint24"},
    {"name": "feeProtocol", "type": "uint8"},
    {"name": "tickLower", "type": "int24"},
    {"name": "tickUpper", "type": "int24"},
    {"name": "tick", "type": "int24"},
    {"name": "sqrtPriceX96", "type": "uint160"},
    {"name": "liquidity", "type": "uint128"},
]

PAIR_COMPONENTS = [
    {"name": "token0", "type": "address"},
    {"name": "token1", "type": "address"},
]

POOL_MANAGER_ABI = [
    {
        "inputs": [],
        "name": "getAllPools",
        "outputs": [_tuple_array("poolsInfo", POOL_INFO_COMPONENTS)],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "getPairs",
        "outputs": [_tuple_array("", PAIR_COMPONENTS)],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [
            _tuple("params", [
                {"name": "token0", "type": "address"},
                {"name": "token1", "type": "address"},
                {"name": "fee", "type": "uint24"},
                {"name": "tickLower", "type": "int24"},
                {"name": "tickUpper", "type": "int24"},
                {"name": "sqrtPriceX96", "type": "uint160"},
            ]),
        ],
        "name": "createAndInitializePoolIfNecessary",
        "outputs": [{"name": "poolAddress", "type": "address"}],
        "stateMutability": "payable",
        "type": "function"
    },
]

POSITION_INFO_COMPONENTS = [
    {"name": "id", "type": "uint256"},
    {"name": "owner", "type": "address"},
    {"name": "token0", "type": "address"},
    {"name": "token1", "type": "address"},
    {"name": "index", "type": "uint32"},
    {"name": "fee", "type": "uint24"},
    {"name": "liquidity", "type": "uint128"},
    {"name": "tickLower", "type": "int24"},
    {"name": "tickUpper", "type": "int24"},
    {"name": "tokensOwed0", "type": "uint128"},
    {"name": "tokensOwed1", "type": "uint128"},
    {"name": "feeGrowthInside0LastX128", "type": "uint256"},
    {"name": "feeGrowthInside1LastX128", "type": "uint256"},
]

POSITION_MANAGER_ABI = [
    {
        "inputs": [],
        "name": "getAllPositions",
        "outputs": [_tuple_array("positionInfo", POSITION_INFO_COMPONENTS)],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [
            _tuple("params", [
                {"name": "token0", "type": "address"},
                {"name": "token1", "type": "address"},
                {"name": "index", "type": "uint32"},
                {"name": "amount0Desired", "type": "uint256"},
                {"name": "amount1Desired", "type": "uint256"},
                {"name": "recipient", "type": "address"},
                {"name": "deadline", "type": "uint256"},
            ]),
        ],
        "name": "mint",
        "outputs": [
            {"name": "positionId", "type": "uint256"},
            {"name": "liquidity", "type": "uint128"},
            {"name": "amount0", "type": "uint256"},
            {"name": "amount1", "type": "uint256"},
        ],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [{"name": "positionId", "type": "uint256"}],
        "name": "burn",
        "outputs": [
            {"name": "amount0", "type": "uint256"},
            {"name": "amount1", "type": "uint256"},
        ],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"name": "positionId", "type": "uint256"},
            {"name": "recipient", "type": "address"},
        ],
        "name": "collect",
        "outputs": [
            {"name": "amount0", "type": "uint256"},
            {"name": "amount1", "type": "uint256"},
        ],
        "stateMutability": "nonpayable",
        "type": "function"
    },
]

SWAP_ROUTER_ABI = [
    {
        "inputs": [
            _tuple("params", [
                {"name": "tokenIn", "type": "address"},
                {"name": "tokenOut", "type": "address"},
                {"name": "indexPath", "type": "uint32[]"},
                {"name": "recipient", "type": "address"},
                {"name": "deadline", "type": "uint256"},
                {"name": "amountIn", "type": "uint256"},
                {"name": "amountOutMinimum", "type": "uint256"},
                {"name": "sqrtPriceLimitX96", "type": "uint160"},
            ]),
        ],
        "name": "exactInput",
        "outputs": [{"name": "amountOut", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [
            _tuple("params", [
                {"name": "tokenIn", "type": "address"},
                {"name": "tokenOut", "type": "address"},
                {"name": "indexPath", "type": "uint32[]"},
                {"name": "recipient", "type": "address"},
                {"name": "deadline", "type": "uint256"},
                {"name": "amountOut", "type": "uint256"},
                {"name": "amountInMaximum", "type": "uint256"},
                {"name": "sqrtPriceLimitX96", "type": "uint160"},
            ]),
        ],
        "name": "exactOutput",
        "outputs": [{"name": "amountIn", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [
            _tuple("params", [
                {"name": "tokenIn", "type": "address"},
                {"name": "tokenOut", "type": "address"},
                {"name": "indexPath", "type": "uint32[]"},
                {"name": "amountIn", "type": "uint256"},
                {"name": "sqrtPriceLimitX96", "type": "uint160"},
            ]),
        ],
        "name": "quoteExactInput",
        "outputs": [{"name": "amountOut", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            _tuple("params", [
                {"name": "tokenIn", "type": "address"},
                {"name": "tokenOut", "type": "address"},
                {"name": "indexPath", "type": "uint32[]"},
                {"name": "amountOut", "type": "uint256"},
                {"name": "sqrtPriceLimitX96", "type": "uint160"},
            ]),
        ],
        "name": "quoteExactOutput",
        "outputs": [{"name": "amountIn", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    },
]
