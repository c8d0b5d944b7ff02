#!/usr/bin/env python3
"""
SeerOps - Outcome Token Positions
Outcome token holdings of the configured wallet across Seer markets, from the
portfolio API.

Usage:
    python get_positions.py                   # all chains
    python get_positions.py --chain gnosis    # one chain
    python get_positions.py --raw             # full JSON
"""

import json

import config
from chains import get_registry
from cli_common import add_chain_arg, new_parser, run_script, wallet_address, warn
from errors import ApiError, ValidationError
from seer_api import SeerAPI

TAG = "POSITIONS"


def parse_args(argv=None):
    parser = new_parser("Show your outcome token positions across Seer markets.")
    parser.add_argument("--raw", action="store_true", help="Print the full JSON")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def fetch_positions(api: SeerAPI, account: str, chains: list) -> list:
    """Portfolio entries for every chain, each tagged with its chain name.

    A chain whose API call fails is skipped with a warning.
    """
    positions = []
    for chain in chains:
        try:
            entries = api.get_portfolio(account, chain.chain_id)
        except ApiError as e:
            warn(TAG, f"error fetching {chain.name} portfolio: {e}")
            continue
        positions.extend(dict(p, chain=chain.name) for p in entries)
    return positions


def group_by_market(positions: list) -> list:
    """Holdings grouped per market, invalid outcomes dropped, first-seen order."""
    by_market = {}
    for p in positions:
        if p.get("isInvalidOutcome"):
            continue
        market = by_market.setdefault(p["marketId"], dict(p, holdings=[]))
        market["holdings"].append({
            "outcome": p.get("outcome"),
            "balance": p.get("tokenBalance") or 0,
            "tokenId": p.get("tokenId"),
        })
    return list(by_market.values())


def format_market(market: dict) -> list:
    holdings = "  |  ".join(f"{h['outcome']}: {float(h['balance']):.4f}" for h in market["holdings"])
    lines = [
        f"  {market.get('marketName')}",
        f"  {market['chain']} | {market['marketId']}",
        f"  Status: {market.get('marketStatus')} | Holdings: {holdings}",
    ]
    if float(market.get("redeemedPrice") or 0) > 0:
        lines.append(f"  Redeemable at: {market['redeemedPrice']}")
    return lines


def show_positions(args, api: SeerAPI = None) -> int:
    if not config.PRIVATE_KEY:
        raise ValidationError("PRIVATE_KEY env var required")
    account = wallet_address()
    registry = get_registry()
    chains = [registry.get(args.chain)] if args.chain else list(registry)

    positions = fetch_positions(api or SeerAPI(), account, chains)
    if args.raw:
        print(json.dumps(positions, indent=2))
        return 0

    markets = group_by_market(positions)
    print(f"{account}\n{len(markets)} market(s) with positions\n")
    for market in markets:
        for line in format_market(market):
            print(line)
        print()
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: show_positions(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
