#!/usr/bin/env python3
"""
SeerOps - Exit Farming
Exits eternal farming, claims the SEER rewards and withdraws the LP NFT back
to the wallet. Gnosis (SwaprV3) only.

Usage:
    python exit_farming.py --token-id 12345
    python exit_farming.py --token-id 12345 --no-withdraw
    python exit_farming.py --token-id 12345 --pool 0x...
"""

import config
from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script, warn
from dex_adapter import get_dex_adapter
from errors import ValidationError
from farming import build_incentive_key, get_active_incentives, get_deposit_info, latest_incentive, require_farming
from seer_abi import FARMING_CENTER_ABI
from seer_api import SeerAPI

TAG = "FARM-EXIT"


def parse_args(argv=None):
    parser = new_parser("Exit eternal farming, claim rewards and withdraw the LP NFT.")
    parser.add_argument("--token-id", required=True, type=int, help="LP NFT token id")
    parser.add_argument("--pool", type=address_type, help="Pool address (default: auto-detected)")
    parser.add_argument("--no-withdraw", action="store_true", help="Leave the NFT in the FarmingCenter")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def resolve_pool(api: SeerAPI, adapter, token_id: int) -> str:
    """Pool from the subgraph deposit, else from the on-chain position."""
    # The NFT sits in the FarmingCenter, so the subgraph is the first stop.
    print(f"[{TAG}] Looking up deposit info from subgraph...")
    deposit = get_deposit_info(api, token_id)
    if deposit and deposit.get("pool"):
        if not deposit.get("onFarmingCenter"):
            raise ValidationError("This NFT is not deposited in the FarmingCenter.")
        if not deposit.get("eternalFarming"):
            warn(TAG, "NFT is in FarmingCenter but not in eternal farming.")
        pool = deposit["pool"]
    else:
        print(f"[{TAG}] Reading LP position on-chain...")
        position = adapter.read_position(token_id)
        pool = adapter.compute_pool_address(position.token0, position.token1)
    print(f"[{TAG}] Pool: {pool}")
    return pool


def find_incentive(api: SeerAPI, pool: str) -> dict:
    """First active incentive, else the most recent one (it may have ended)."""
    print(f"[{TAG}] Looking up farming incentives...")
    incentives = get_active_incentives(api, pool)
    if incentives:
        return incentives[0]
    print(f"[{TAG}] No active incentives. Checking all incentives (may be ended)...")
    incentive = latest_incentive(api, pool)
    if incentive is None:
        raise ValidationError("No farming incentives found for this pool at all.")
    return incentive


def exit_calls(center, incentive: dict, token_id: int, recipient: str) -> list:
    """exitFarming + claimReward, encoded for the FarmingCenter multicall."""
    key = build_incentive_key(incentive)
    return [
        center.encode_abi("exitFarming", args=[key, token_id, False]),
        center.encode_abi("claimReward", args=[key[0], recipient, 0, config.MAX_UINT128]),
    ]


def exit_farming(args, api: SeerAPI = None) -> int:
    api = api or SeerAPI()
    chain = resolve_chain(args.chain)
    farming_cfg = require_farming(chain)
    client = make_client(chain, need_key=True)
    adapter = get_dex_adapter(client)
    center = client.contract(farming_cfg.farming_center, FARMING_CENTER_ABI)
    me = client.address

    pool = args.pool or resolve_pool(api, adapter, args.token_id)
    incentive = find_incentive(api, pool)

    print(f"\n[{TAG}] Exiting farming and claiming rewards...")
    calls = exit_calls(center, incentive, args.token_id, me)
    _, receipt = client.transact(center.functions.multicall(calls), label="multicall(exitFarming, claimReward)")
    print(f"[{TAG}] Exited farming and claimed rewards (block {receipt['blockNumber']})")

    if args.no_withdraw:
        print(f"\n[{TAG}] NFT remains in FarmingCenter (--no-withdraw).")
        print(f"  Re-enter farming: python enter_farming.py --token-id {args.token_id}")
        print(f"  Withdraw NFT later: python exit_farming.py --token-id {args.token_id}")
        return 0

    print(f"\n[{TAG}] Withdrawing NFT back to wallet...")
    _, receipt = client.transact(center.functions.withdrawToken(args.token_id, me, b""), label="withdrawToken")
    print(f"[{TAG}] NFT #{args.token_id} withdrawn to {me} (block {receipt['blockNumber']})")
    print("\nNext steps:")
    print(f"  Remove liquidity: python withdraw_liquidity.py --token-id {args.token_id}")
    print(f"  Re-enter farming: python enter_farming.py --token-id {args.token_id}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: exit_farming(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
