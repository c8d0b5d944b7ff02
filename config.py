"""
SeerOps - Configuration
All secrets come from environment variables. ~/.openclaw/.env is loaded first
(without overriding variables that are already set), so an agent restart picks
up a key written by setup_wallet.py.
"""

import os

from dotenv import load_dotenv

# === Wallet env file ===
ENV_DIR = os.path.join(os.path.expanduser("~"), ".openclaw")
ENV_FILE = os.environ.get("SEER_ENV_FILE", os.path.join(ENV_DIR, ".env"))
load_dotenv(ENV_FILE, override=False)

# === Credentials ===
PRIVATE_KEY = os.environ.get("PRIVATE_KEY", "")

# === Network ===
DEFAULT_CHAIN = "gnosis"
CHAIN = os.environ.get("CHAIN", "")               # Empty = DEFAULT_CHAIN
RPC_URL = os.environ.get("RPC_URL", "")           # Overrides the chain's RPC when set
RPC_TIMEOUT = int(os.environ.get("RPC_TIMEOUT", "15"))
TX_RECEIPT_TIMEOUT = int(os.environ.get("TX_RECEIPT_TIMEOUT", "600"))
TX_DEADLINE_SECONDS = 600                         # Deadline for mint / swap / decreaseLiquidity
DEFAULT_GAS_LIMIT = 1_000_000                     # Used when gas estimation fails
GAS_ESTIMATE_MULTIPLIER = 1.3

# === Seer API ===
SEER_API_URL = os.environ.get("SEER_API_URL", "https://app.seer.pm/.netlify/functions")
SEER_APP_URL = "https://app.seer.pm"
SUBGRAPH_PROXY_URL = os.environ.get("SUBGRAPH_PROXY_URL", "https://app.seer.pm/subgraph")
API_TIMEOUT = 15

# === LP Tracker ===
LP_TRACKER_FILE = os.environ.get(
    "LP_TRACKER_FILE",
    os.path.join(ENV_DIR, "workspace", "memory", "lp-positions.json"),
)

# === Trading Parameters ===
DEFAULT_TICK_SPACING = 60
OUTCOME_DECIMALS = 18                                               # Seer outcome tokens (wrapped ERC1155)
SWAP_SLIPPAGE_BPS = int(os.environ.get("SWAP_SLIPPAGE_BPS", "100"))   # 1% default
APPROVAL_THRESHOLD = 1_000_000 * 10 ** 18                           # Re-approve below 1M tokens
MAX_UINT256 = 2 ** 256 - 1
MAX_UINT128 = 2 ** 128 - 1
