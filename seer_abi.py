"""
SeerOps - Contract ABIs (minimal)
Only the function signatures the scripts call.
"""


def _fn(name, inputs, outputs=(), mutability="nonpayable"):
    return {"inputs": list(inputs), "name": name, "outputs": list(outputs), "stateMutability": mutability, "type": "function"}


def _p(name, typ, components=None):
    arg = {"name": name, "type": typ}
    if components is not None:
        arg["components"] = components
    return arg


# ERC20 standard functions
ERC20_ABI = [
    {"inputs": [{"name": "account", "type": "address"}], "name": "balanceOf", "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}], "name": "approve", "outputs": [{"name": "", "type": "bool"}], "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}], "name": "allowance", "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "decimals", "outputs": [{"name": "", "type": "uint8"}], "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "symbol", "outputs": [{"name": "", "type": "string"}], "stateMutability": "view", "type": "function"},
]

# ERC4626 vault (sDAI / sUSDS)
ERC4626_ABI = [
    _fn("convertToAssets", [_p("shares", "uint256")], [_p("", "uint256")], "view"),
    _fn("deposit", [_p("assets", "uint256"), _p("receiver", "address")], [_p("shares", "uint256")]),
    _fn("redeem", [_p("shares", "uint256"), _p("receiver", "address"), _p("owner", "address")], [_p("assets", "uint256")]),
    _fn("asset", [], [_p("", "address")], "view"),
] + ERC20_ABI

# Gnosis xDAI <-> sDAI adapter
SDAI_ADAPTER_ABI = [
    _fn("depositXDAI", [_p("receiver", "address")], [_p("", "uint256")], "payable"),
    _fn("redeemXDAI", [_p("shares", "uint256"), _p("receiver", "address")], [_p("", "uint256")]),
]

# ─── Concentrated-liquidity DEX ───

_MINT_OUTPUTS = [_p("tokenId", "uint256"), _p("liquidity", "uint128"), _p("amount0", "uint256"), _p("amount1", "uint256")]

_DECREASE = _fn(
    "decreaseLiquidity",
    [_p("params", "tuple", [_p("tokenId", "uint256"), _p("liquidity", "uint128"), _p("amount0Min", "uint256"), _p("amount1Min", "uint256"), _p("deadline", "uint256")])],
    [_p("amount0", "uint256"), _p("amount1", "uint256")],
    "payable",
)
_COLLECT = _fn(
    "collect",
    [_p("params", "tuple", [_p("tokenId", "uint256"), _p("recipient", "address"), _p("amount0Max", "uint128"), _p("amount1Max", "uint128")])],
    [_p("amount0", "uint256"), _p("amount1", "uint256")],
    "payable",
)
_NFT_COMMON = [
    _DECREASE,
    _COLLECT,
    _fn("burn", [_p("tokenId", "uint256")], [], "payable"),
    _fn("balanceOf", [_p("owner", "address")], [_p("", "uint256")], "view"),
    _fn("tokenOfOwnerByIndex", [_p("owner", "address"), _p("index", "uint256")], [_p("", "uint256")], "view"),
    _fn("safeTransferFrom", [_p("from", "address"), _p("to", "address"), _p("tokenId", "uint256")]),
]

# Algebra (SwaprV3) NonfungiblePositionManager - no fee anywhere
ALGEBRA_NFT_MANAGER_ABI = [
    _fn(
        "mint",
        [_p("params", "tuple", [
            _p("token0", "address"), _p("token1", "address"),
            _p("tickLower", "int24"), _p("tickUpper", "int24"),
            _p("amount0Desired", "uint256"), _p("amount1Desired", "uint256"),
            _p("amount0Min", "uint256"), _p("amount1Min", "uint256"),
            _p("recipient", "address"), _p("deadline", "uint256"),
        ])],
        _MINT_OUTPUTS,
        "payable",
    ),
    _fn(
        "createAndInitializePoolIfNecessary",
        [_p("token0", "address"), _p("token1", "address"), _p("sqrtPriceX96", "uint160")],
        [_p("pool", "address")],
        "payable",
    ),
    # (nonce, operator, token0, token1, tickLower, tickUpper, liquidity, ...)
    _fn(
        "positions",
        [_p("tokenId", "uint256")],
        [
            _p("nonce", "uint96"), _p("operator", "address"), _p("token0", "address"), _p("token1", "address"),
            _p("tickLower", "int24"), _p("tickUpper", "int24"), _p("liquidity", "uint128"),
            _p("feeGrowthInside0LastX128", "uint256"), _p("feeGrowthInside1LastX128", "uint256"),
            _p("tokensOwed0", "uint128"), _p("tokensOwed1", "uint128"),
        ],
        "view",
    ),
] + _NFT_COMMON

# Uniswap V3 NonfungiblePositionManager - fee tier in pool identity
UNISWAP_V3_NFT_MANAGER_ABI = [
    _fn(
        "mint",
        [_p("params", "tuple", [
            _p("token0", "address"), _p("token1", "address"), _p("fee", "uint24"),
            _p("tickLower", "int24"), _p("tickUpper", "int24"),
            _p("amount0Desired", "uint256"), _p("amount1Desired", "uint256"),
            _p("amount0Min", "uint256"), _p("amount1Min", "uint256"),
            _p("recipient", "address"), _p("deadline", "uint256"),
        ])],
        _MINT_OUTPUTS,
        "payable",
    ),
    _fn(
        "createAndInitializePoolIfNecessary",
        [_p("token0", "address"), _p("token1", "address"), _p("fee", "uint24"), _p("sqrtPriceX96", "uint160")],
        [_p("pool", "address")],
        "payable",
    ),
    # (nonce, operator, token0, token1, fee, tickLower, tickUpper, liquidity, ...)
    _fn(
        "positions",
        [_p("tokenId", "uint256")],
        [
            _p("nonce", "uint96"), _p("operator", "address"), _p("token0", "address"), _p("token1", "address"),
            _p("fee", "uint24"), _p("tickLower", "int24"), _p("tickUpper", "int24"), _p("liquidity", "uint128"),
            _p("feeGrowthInside0LastX128", "uint256"), _p("feeGrowthInside1LastX128", "uint256"),
            _p("tokensOwed0", "uint128"), _p("tokensOwed1", "uint128"),
        ],
        "view",
    ),
] + _NFT_COMMON

# Pool state
ALGEBRA_POOL_ABI = [
    _fn("globalState", [], [
        _p("price", "uint160"), _p("tick", "int24"), _p("fee", "uint16"), _p("timepointIndex", "uint16"),
        _p("communityFeeToken0", "uint8"), _p("communityFeeToken1", "uint8"), _p("unlocked", "bool"),
    ], "view"),
]

UNISWAP_V3_POOL_ABI = [
    {"inputs": [], "name": "slot0", "outputs": [{"name": "sqrtPriceX96", "type": "uint160"}, {"name": "tick", "type": "int24"}, {"name": "observationIndex", "type": "uint16"}, {"name": "observationCardinality", "type": "uint16"}, {"name": "observationCardinalityNext", "type": "uint16"}, {"name": "feeProtocol", "type": "uint8"}, {"name": "unlocked", "type": "bool"}], "stateMutability": "view", "type": "function"},
]

# Factories
ALGEBRA_FACTORY_ABI = [
    _fn("poolByPair", [_p("tokenA", "address"), _p("tokenB", "address")], [_p("pool", "address")], "view"),
]

UNISWAP_V3_FACTORY_ABI = [
    {"inputs": [{"name": "tokenA", "type": "address"}, {"name": "tokenB", "type": "address"}, {"name": "fee", "type": "uint24"}], "name": "getPool", "outputs": [{"name": "pool", "type": "address"}], "stateMutability": "view", "type": "function"},
]

# Swap routers
ALGEBRA_SWAP_ROUTER_ABI = [
    _fn(
        "exactInputSingle",
        [_p("params", "tuple", [
            _p("tokenIn", "address"), _p("tokenOut", "address"), _p("recipient", "address"),
            _p("deadline", "uint256"), _p("amountIn", "uint256"), _p("amountOutMinimum", "uint256"),
            _p("limitSqrtPrice", "uint160"),
        ])],
        [_p("amountOut", "uint256")],
        "payable",
    ),
]

UNISWAP_V3_SWAP_ROUTER_ABI = [
    {"inputs": [{"components": [{"name": "tokenIn", "type": "address"}, {"name": "tokenOut", "type": "address"}, {"name": "fee", "type": "uint24"}, {"name": "recipient", "type": "address"}, {"name": "deadline", "type": "uint256"}, {"name": "amountIn", "type": "uint256"}, {"name": "amountOutMinimum", "type": "uint256"}, {"name": "sqrtPriceLimitX96", "type": "uint160"}], "name": "params", "type": "tuple"}], "name": "exactInputSingle", "outputs": [{"name": "amountOut", "type": "uint256"}], "stateMutability": "payable", "type": "function"},
]

# SwapRouter02 (optimism / base) drops the deadline field
UNISWAP_V3_SWAP_ROUTER02_ABI = [
    _fn(
        "exactInputSingle",
        [_p("params", "tuple", [
            _p("tokenIn", "address"), _p("tokenOut", "address"), _p("fee", "uint24"), _p("recipient", "address"),
            _p("amountIn", "uint256"), _p("amountOutMinimum", "uint256"), _p("sqrtPriceLimitX96", "uint160"),
        ])],
        [_p("amountOut", "uint256")],
        "payable",
    ),
]

# ─── Seer markets ───

CREATE_MARKET_PARAMS = [
    _p("marketName", "string"), _p("outcomes", "string[]"),
    _p("questionStart", "string"), _p("questionEnd", "string"),
    _p("outcomeType", "string"), _p("parentOutcome", "uint256"),
    _p("parentMarket", "address"), _p("category", "string"),
    _p("lang", "string"), _p("lowerBound", "uint256"),
    _p("upperBound", "uint256"), _p("minBond", "uint256"),
    _p("openingTime", "uint32"), _p("tokenNames", "string[]"),
]

MARKET_FACTORY_ABI = [
    _fn(name, [_p("params", "tuple", CREATE_MARKET_PARAMS)], [_p("", "address")])
    for name in ("createCategoricalMarket", "createScalarMarket", "createMultiScalarMarket")
] + [
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "market", "type": "address"},
            {"indexed": False, "name": "marketName", "type": "string"},
            {"indexed": False, "name": "parentMarket", "type": "address"},
            {"indexed": False, "name": "conditionId", "type": "bytes32"},
            {"indexed": False, "name": "questionId", "type": "bytes32"},
            {"indexed": False, "name": "questionsIds", "type": "bytes32[]"},
        ],
        "name": "NewMarket",
        "type": "event",
    },
]

ROUTER_ABI = [
    _fn("splitPosition", [_p("collateralToken", "address"), _p("market", "address"), _p("amount", "uint256")]),
    _fn("mergePositions", [_p("collateralToken", "address"), _p("market", "address"), _p("amount", "uint256")]),
    _fn("redeemPositions", [_p("collateralToken", "address"), _p("market", "address"), _p("outcomeIndexes", "uint256[]"), _p("amounts", "uint256[]")]),
]

REALITY_ETH_ABI = [
    _fn("submitAnswer", [_p("question_id", "bytes32"), _p("answer", "bytes32"), _p("max_previous", "uint256")], [], "payable"),
]

REALITY_PROXY_ABI = [
    _fn("resolve", [_p("market", "address")]),
]

QUESTION_COMPONENTS = [
    _p("content_hash", "bytes32"), _p("arbitrator", "address"),
    _p("opening_ts", "uint32"), _p("timeout", "uint32"),
    _p("finalize_ts", "uint32"), _p("is_pending_arbitration", "bool"),
    _p("bounty", "uint256"), _p("best_answer", "bytes32"),
    _p("history_hash", "bytes32"), _p("bond", "uint256"),
    _p("min_bond", "uint256"),
]

PARENT_MARKET_COMPONENTS = [
    _p("id", "address"), _p("marketName", "string"),
    _p("outcomes", "string[]"), _p("wrappedTokens", "address[]"),
    _p("conditionId", "bytes32"), _p("payoutReported", "bool"),
    _p("payoutNumerators", "uint256[]"),
]

MARKET_COMPONENTS = [
    _p("id", "address"), _p("marketName", "string"),
    _p("outcomes", "string[]"),
    _p("parentMarket", "tuple", PARENT_MARKET_COMPONENTS),
    _p("parentOutcome", "uint256"),
    _p("collateralToken", "address"),
    _p("wrappedTokens", "address[]"),
    _p("outcomesSupply", "uint256"),
    _p("lowerBound", "uint256"), _p("upperBound", "uint256"),
    _p("parentCollectionId", "bytes32"),
    _p("collateralToken1", "address"), _p("collateralToken2", "address"),
    _p("conditionId", "bytes32"), _p("questionId", "bytes32"),
    _p("templateId", "uint256"),
    _p("questions", "tuple[]", QUESTION_COMPONENTS),
    _p("questionsIds", "bytes32[]"), _p("encodedQuestions", "string[]"),
    _p("payoutReported", "bool"), _p("payoutNumerators", "uint256[]"),
]

MARKET_VIEW_ABI = [
    _fn("getMarket", [_p("marketFactory", "address"), _p("market", "address")], [_p("", "tuple", MARKET_COMPONENTS)], "view"),
]

# ─── Algebra eternal farming (gnosis) ───

INCENTIVE_KEY = [
    _p("rewardToken", "address"), _p("bonusRewardToken", "address"),
    _p("pool", "address"), _p("startTime", "uint256"), _p("endTime", "uint256"),
]

FARMING_CENTER_ABI = [
    _fn("enterFarming", [_p("key", "tuple", INCENTIVE_KEY), _p("tokenId", "uint256"), _p("tokensLocked", "uint256"), _p("isLimit", "bool")]),
    _fn("exitFarming", [_p("key", "tuple", INCENTIVE_KEY), _p("tokenId", "uint256"), _p("isLimit", "bool")]),
    _fn("withdrawToken", [_p("tokenId", "uint256"), _p("to", "address"), _p("data", "bytes")]),
    _fn("multicall", [_p("data", "bytes[]")], [_p("results", "bytes[]")], "payable"),
    _fn(
        "claimReward",
        [_p("rewardToken", "address"), _p("to", "address"), _p("amountRequestedIncentive", "uint256"), _p("amountRequestedEternal", "uint256")],
        [_p("reward", "uint256")],
    ),
]
