#!/usr/bin/env python3
"""
SeerOps - Market Search
Searches Seer markets through the public API. Read-only; only --mine needs
PRIVATE_KEY.

Usage:
    python search_markets.py --query "bitcoin"
    python search_markets.py --query "election" --status open
    python search_markets.py --status open --sort liquidity --order desc --limit 10
    python search_markets.py --category politics --status open
    python search_markets.py --id 0x...
"""

import json
import time
from datetime import datetime, timezone

import config
from chains import get_registry
from cli_common import add_chain_arg, address_type, new_parser, run_script, wallet_address
from errors import ValidationError
from seer_api import SORT_FIELDS, SeerAPI

TAG = "SEARCH"

STATUSES = ["open", "closed", "not_open", "answer_not_final", "in_dispute", "pending_execution"]


def parse_args(argv=None):
    parser = new_parser(
        "Search Seer prediction markets.",
        epilog="Examples:\n"
               "  search_markets.py --query bitcoin --chain gnosis --limit 5\n"
               "  search_markets.py --mine",
    )
    parser.add_argument("--query", help="Case-insensitive substring of the market name")
    parser.add_argument("--status", choices=STATUSES)
    parser.add_argument("--category", help="e.g. politics, sports, crypto, misc")
    creator = parser.add_mutually_exclusive_group()
    creator.add_argument("--creator", type=address_type)
    creator.add_argument("--mine", action="store_true", help="Markets created by your wallet")
    parser.add_argument("--verified", action="store_true", help="Only verified markets")
    parser.add_argument("--rewards", action="store_true", help="Only markets with SEER farming incentives")
    parser.add_argument("--sort", help=f"One of {', '.join(SORT_FIELDS)} (default: API order)")
    parser.add_argument("--order", choices=["desc", "asc"], default="desc")
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--id", type=address_type, help="Look up one market by address")
    parser.add_argument("--raw", action="store_true", help="Print the full JSON response")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def build_search_body(args, chain_id=None, creator: str = None) -> dict:
    body = {}
    if args.query:
        body["marketName"] = args.query
    if chain_id is not None:
        body["chainsList"] = [str(chain_id)]
    if args.status:
        body["marketStatusList"] = [args.status]
    if args.category:
        body["categoryList"] = [args.category]
    if creator:
        body["creator"] = creator
    if args.verified:
        body["verificationStatusList"] = ["verified"]
    if args.rewards:
        body["showMarketsWithRewards"] = True
    if args.sort:
        body["orderBy"] = SORT_FIELDS.get(args.sort, args.sort)
    body["orderDirection"] = args.order
    body["limit"] = args.limit
    body["page"] = args.page
    if args.id:
        body["marketName"] = ""
        body["marketIds"] = [args.id.lower()]
        body["limit"] = 1
    return body


def _pct(value) -> str:
    if value is None:
        return "N/A"
    try:
        return f"{float(value):.1f}%"
    except (TypeError, ValueError):
        return "N/A"


def _chain_name(chain_id) -> str:
    chain = get_registry().by_chain_id(chain_id)
    return chain.name if chain else f"chain-{chain_id}"


def market_status_label(market: dict, now: float = None) -> str:
    now = time.time() if now is None else now
    if market.get("payoutReported"):
        return "resolved"
    if (market.get("openingTs") or 0) > now:
        return "not_open"
    return "open"


def format_market(market: dict, now: float = None) -> list:
    outcomes = [o for o in market.get("outcomes") or [] if o != "Invalid"]
    odds = (market.get("odds") or [])[:len(outcomes)]
    odds_str = "  |  ".join(
        f"{o}: {_pct(odds[i] if i < len(odds) else None)}" for i, o in enumerate(outcomes)
    )
    chain_id = market.get("chainId")
    lines = [
        f"  {market.get('marketName')}",
        f"  {_chain_name(chain_id)} | {market.get('id')}",
        f"  {config.SEER_APP_URL}/markets/{chain_id}/{market.get('id')}",
        f"  Odds: {odds_str}",
    ]
    liquidity = f"  Liquidity: ${float(market.get('liquidityUSD') or 0):.2f} | Status: {market_status_label(market, now)}"
    incentive = float(market.get("incentive") or 0)
    if incentive > 0:
        liquidity += f" | Rewards: {incentive:.1f} SEER/day"
    lines.append(liquidity)
    verification = (market.get("verification") or {}).get("status")
    if verification:
        lines.append(f"  Verification: {verification}")
    if market.get("openingTs"):
        opens = datetime.fromtimestamp(int(market["openingTs"]), tz=timezone.utc).strftime("%Y-%m-%d")
        lines.append(f"  Opens: {opens}")
    return lines


def search(args, api: SeerAPI = None) -> int:
    if args.limit <= 0 or args.page <= 0:
        raise ValidationError("--limit and --page must be positive")
    if args.mine and not config.PRIVATE_KEY:
        raise ValidationError("--mine requires PRIVATE_KEY env var")
    chain_id = get_registry().get(args.chain).chain_id if args.chain else None
    creator = wallet_address() if args.mine else args.creator
    body = build_search_body(args, chain_id, creator)

    data = (api or SeerAPI()).search_markets(body)
    if args.raw:
        print(json.dumps(data, indent=2))
        return 0

    markets = data["markets"]
    print(f"Found {data.get('count', len(markets))} market(s) "
          f"(showing {len(markets)}, page {body['page']}/{data.get('pages') or 1})\n")
    now = time.time()
    for market in markets:
        for line in format_market(market, now):
            print(line)
        print()
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: search(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
