#!/usr/bin/env python3
"""
SeerOps - Enter Farming
Deposits an LP NFT into the Algebra FarmingCenter and enters the pool's active
eternal farming incentive. Gnosis (SwaprV3) only.

Usage:
    python enter_farming.py --token-id 12345
    python enter_farming.py --token-id 12345 --pool 0x...
"""

from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script, warn
from dex_adapter import get_dex_adapter
from errors import ValidationError
from farming import build_incentive_key, get_active_incentives, require_farming, reward_per_day
from seer_abi import FARMING_CENTER_ABI
from seer_api import SeerAPI

TAG = "FARM-ENTER"


def parse_args(argv=None):
    parser = new_parser("Deposit an LP NFT into the FarmingCenter and enter eternal farming.")
    parser.add_argument("--token-id", required=True, type=int, help="LP NFT token id")
    parser.add_argument("--pool", type=address_type, help="Pool address (default: from the position)")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def pool_for_position(adapter, token_id: int) -> str:
    """Pool of a live position. Zero liquidity has nothing to farm."""
    print(f"[{TAG}] Reading LP position #{token_id} on-chain...")
    position = adapter.read_position(token_id)
    if position.liquidity == 0:
        raise ValidationError("Position has zero liquidity. Nothing to farm.")
    pool = adapter.compute_pool_address(position.token0, position.token1)
    print(f"[{TAG}] Pool: {pool}")
    return pool


def pick_incentive(incentives: list) -> dict:
    if not incentives:
        raise ValidationError("No active farming incentives found for this pool.")
    if len(incentives) > 1:
        warn(TAG, f"{len(incentives)} active incentives found, using first one.")
    return incentives[0]


def enter_farming(args, api: SeerAPI = None) -> int:
    chain = resolve_chain(args.chain)
    farming_cfg = require_farming(chain)
    client = make_client(chain, need_key=True)
    adapter = get_dex_adapter(client)

    pool = args.pool or pool_for_position(adapter, args.token_id)

    print(f"[{TAG}] Looking up active farming incentives...")
    incentive = pick_incentive(get_active_incentives(api or SeerAPI(), pool))
    per_day = reward_per_day(incentive)
    print(f"[{TAG}] Incentive: {per_day:.1f} SEER/day")

    print(f"\n[{TAG}] Depositing LP NFT #{args.token_id} to FarmingCenter...")
    center = client.contract(farming_cfg.farming_center, FARMING_CENTER_ABI)
    tx_func = adapter.position_manager.functions.safeTransferFrom(client.address, center.address, args.token_id)
    _, receipt = client.transact(tx_func, label="safeTransferFrom")
    print(f"[{TAG}] Deposited (block {receipt['blockNumber']})")

    print(f"[{TAG}] Entering farming...")
    tx_func = center.functions.enterFarming(build_incentive_key(incentive), args.token_id, 0, False)
    _, receipt = client.transact(tx_func, label="enterFarming")
    print(f"[{TAG}] Entered farming! (block {receipt['blockNumber']})")

    print(f"\n[{TAG}] LP NFT #{args.token_id} is now farming {per_day:.1f} SEER/day.")
    print(f"[{TAG}] To exit: python exit_farming.py --token-id {args.token_id}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: enter_farming(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
