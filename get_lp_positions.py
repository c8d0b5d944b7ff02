#!/usr/bin/env python3
"""
SeerOps - Tracked LP Positions
Shows what add_liquidity.py recorded in the LP tracker. Read-only, no key needed.

Usage:
    python get_lp_positions.py                  # active positions only
    python get_lp_positions.py --all            # include withdrawn
    python get_lp_positions.py --chain gnosis   # filter by chain
    python get_lp_positions.py --raw            # full JSON
    python get_lp_positions.py --live           # on-chain liquidity and current value
"""

import json
from concurrent.futures import ThreadPoolExecutor, as_completed

from chain_client import ChainClient
from chains import get_registry
from cli_common import add_chain_arg, new_parser, run_script
from dex_adapter import get_dex_adapter
from errors import ValidationError
from lp_store import LpStore, is_active
from position_valuation import value_live_position

TAG = "LP-POSITIONS"


def parse_args(argv=None):
    parser = new_parser("Show LP positions recorded in the local tracker.")
    parser.add_argument("--all", action="store_true", help="Include withdrawn positions")
    parser.add_argument("--raw", action="store_true", help="Dump the records as JSON")
    parser.add_argument("--live", action="store_true", help="Read liquidity and value on-chain")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def read_chain_live(chain_name: str, records: list, client_factory=ChainClient) -> dict:
    """{tokenId: {"liquidity", "outcome", "collateral"} or {"error"}} for one chain."""
    results = {}
    try:
        chain = get_registry().get(chain_name)
        adapter = get_dex_adapter(client_factory(chain))
    except Exception as e:
        return {r["tokenId"]: {"error": str(e)} for r in records}

    for record in records:
        token_id = record["tokenId"]
        try:
            position = adapter.read_position(int(token_id))
            entry = {"liquidity": position.liquidity}
            try:
                value = value_live_position(
                    adapter, position, chain.collateral.address, chain.collateral.decimals
                )
                entry["outcome"] = value.outcome_amount
                entry["collateral"] = value.collateral_amount
            except Exception as e:
                entry["value_error"] = str(e)
            results[token_id] = entry
        except Exception as e:
            results[token_id] = {"error": str(e)}
    return results


def read_live(positions: list, client_factory=ChainClient) -> dict:
    """Live data keyed by (chain, tokenId). Chains are read in parallel."""
    by_chain = {}
    for p in positions:
        if is_active(p):
            by_chain.setdefault(p["chain"], []).append(p)

    live = {}
    if not by_chain:
        return live
    with ThreadPoolExecutor(max_workers=len(by_chain)) as ex:
        futs = {ex.submit(read_chain_live, name, recs, client_factory): name for name, recs in by_chain.items()}
        for fut in as_completed(futs):
            chain_name = futs[fut]
            for token_id, entry in fut.result().items():
                live[(chain_name, token_id)] = entry
    return live


def _date(ts: str) -> str:
    return ts.split("T")[0] if ts else "unknown"


def format_position(p: dict, live: dict = None, collateral_symbol: str = "collateral") -> list:
    withdrawn = not is_active(p)
    lines = [f"  #{p['tokenId']} [{p['chain']}/{p.get('dexType')}]" + (" (withdrawn)" if withdrawn else "")]
    if p.get("outcomeName") and p.get("marketName"):
        lines.append(f"  {p['outcomeName']} - {p['marketName']}")
    elif p.get("marketName"):
        lines.append(f"  {p['marketName']}")
    if p.get("market"):
        lines.append(f"  Market: {p['market']}")
    lines.append(f"  Range: {p['probLow'] * 100:.1f}% - {p['probHigh'] * 100:.1f}%")
    lines.append(f"  Tokens: {p['token0']} / {p['token1']}")

    if live is not None:
        if "error" in live:
            lines.append(f"  On-chain: error ({live['error']})")
        else:
            lines.append(f"  On-chain liquidity: {live['liquidity']}")
            if "value_error" in live:
                lines.append(f"  Value: unavailable ({live['value_error']})")
            elif live["liquidity"]:
                lines.append(f"  Value: {live['outcome']:.6f} outcome + {live['collateral']:.6f} {collateral_symbol}")

    if withdrawn:
        lines.append(f"  Added: {_date(p.get('createdAt'))} | Withdrawn: {_date(p['withdrawnAt'])}")
    else:
        lines.append(f"  Added: {_date(p.get('createdAt'))}")
    return lines


def show_positions(args, store: LpStore = None, client_factory=ChainClient) -> int:
    store = store or LpStore()
    try:
        all_positions = store.positions(include_withdrawn=True)
    except ValueError as e:
        raise ValidationError(f"Could not read LP tracker: {e}") from e
    positions = store.positions(chain=args.chain, include_withdrawn=args.all)

    if args.raw:
        print(json.dumps(positions, indent=2))
        return 0

    if not positions:
        total = len(all_positions)
        if total > 0 and not args.all:
            print(f"No active LP positions. ({total} withdrawn - use --all to show)")
        else:
            print("No LP positions tracked.")
            print(f"File: {store.path}")
        return 0

    live = read_live(positions, client_factory) if args.live else {}

    active = sum(1 for p in positions if is_active(p))
    header = f"{active} active LP position(s)"
    if len(positions) > active:
        header += f" + {len(positions) - active} withdrawn"
    print(header + "\n")

    registry = get_registry()
    for p in positions:
        symbol = registry.get(p["chain"]).collateral.symbol if p["chain"] in registry else "collateral"
        entry = live.get((p["chain"], p["tokenId"])) if args.live and is_active(p) else None
        for line in format_position(p, entry, symbol):
            print(line)
        print()
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: show_positions(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
