#!/usr/bin/env python3
"""
SeerOps - Withdraw Liquidity
Pulls 100% of the liquidity out of a position, collects both tokens and burns
the empty NFT.

Usage:
    python withdraw_liquidity.py --token-id 12345 [--chain base]
    python withdraw_liquidity.py --list [--chain base]
"""

from tabulate import tabulate

from cli_common import add_chain_arg, make_client, new_parser, resolve_chain, run_script, warn
from dex_adapter import get_dex_adapter
from errors import ValidationError
from lp_store import LpStore

TAG = "WITHDRAW"


def parse_args(argv=None):
    parser = new_parser("Withdraw all liquidity from a DEX position and burn the NFT.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--token-id", type=int, help="Position NFT id")
    group.add_argument("--list", action="store_true", help="List every position the wallet owns")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def list_positions(adapter, owner: str) -> int:
    positions = adapter.list_positions(owner)
    print(f"[{TAG}] Positions owned: {len(positions)}")
    if not positions:
        return 0
    rows = [
        [f"#{p.token_id}", p.token0, p.token1, p.liquidity, f"[{p.tick_lower},{p.tick_upper}]"]
        for p in positions
    ]
    print(tabulate(rows, headers=["ID", "token0", "token1", "Liquidity", "Ticks"], tablefmt="grid"))
    return 0


def mark_tracker(store: LpStore, token_id: int, chain_name: str):
    try:
        if store.mark_withdrawn(token_id, chain_name):
            print(f"[{TAG}] LP tracker updated.")
    except (OSError, ValueError) as e:
        warn(TAG, f"failed to update LP tracker: {e}")


def withdraw(args, store: LpStore = None) -> int:
    if not args.list and args.token_id is None:
        raise ValidationError("Pass --token-id <id> or --list")
    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    adapter = get_dex_adapter(client)

    if args.list:
        return list_positions(adapter, client.address)

    position = adapter.read_position(args.token_id)
    if position.liquidity == 0:
        print(f"[{TAG}] Position has zero liquidity, nothing to withdraw.")
        return 0

    print(f"[{TAG}] Withdrawing all liquidity ({position.liquidity}) from position #{args.token_id}...")
    adapter.decrease_liquidity(args.token_id, position.liquidity)

    print(f"[{TAG}] Collecting tokens...")
    amount0, amount1 = adapter.collect(args.token_id, client.address)
    print(f"[{TAG}] Collected token0={amount0} token1={amount1}")

    print(f"[{TAG}] Burning empty position NFT...")
    adapter.burn(args.token_id)
    print(f"[{TAG}] Position #{args.token_id} fully withdrawn and burned.")

    mark_tracker(store or LpStore(), args.token_id, chain.name)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: withdraw(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
