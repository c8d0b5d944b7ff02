#!/usr/bin/env python3
"""
SeerOps - Portfolio Check
Status of every market listed in a portfolio file, with outcome balances, LP
positions valued at the pool's current tick, and overdue review flags.

Portfolio format:
    {
      "markets": [
        {"address": "0x...", "question": "...", "positionIds": [123, 124],
         "reviewTriggers": ["..."], "nextReview": "2026-02-01"}
      ]
    }

Usage:
    python check_portfolio.py [--chain base]
    python check_portfolio.py --file path/to.json
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from chain_client import fmt_amount
from cli_common import add_chain_arg, make_client, new_parser, resolve_chain, run_script
from dex_adapter import get_dex_adapter
from errors import ValidationError
from markets import market_status, opening_date, outcome_index, payout_summary, read_market
from position_valuation import value_live_position

TAG = "PORTFOLIO"
MAX_WORKERS = 8


def parse_args(argv=None):
    parser = new_parser("Check markets and LP positions listed in a portfolio file.")
    parser.add_argument("--file", default="portfolio.json", help="Portfolio JSON (default: portfolio.json)")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def load_portfolio(path: str) -> dict:
    try:
        with open(path, "r") as f:
            portfolio = json.load(f)
    except (OSError, ValueError) as e:
        raise ValidationError(f"Could not read {path}: {e}") from e
    if not isinstance(portfolio, dict) or not isinstance(portfolio.get("markets"), list):
        raise ValidationError("Portfolio must have a 'markets' array")
    return portfolio


def is_overdue(next_review: str, now: datetime = None) -> bool:
    now = now or datetime.now(timezone.utc)
    try:
        review = datetime.fromisoformat(str(next_review).replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Invalid nextReview date: {next_review!r}") from e
    if review.tzinfo is None:
        review = review.replace(tzinfo=timezone.utc)
    return review <= now


def read_balances(client, tokens: list, owner: str) -> list:
    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, max(1, len(tokens)))) as ex:
        return list(ex.map(lambda t: client.token_balance(t, owner), tokens))


def describe_position(adapter, token_id, info: dict, collateral) -> str:
    try:
        position = adapter.read_position(int(token_id))
    except Exception as e:
        return f"  #{token_id}: (error reading position: {e})"
    if position.liquidity == 0:
        return f"  #{token_id}: (empty, liquidity=0)"

    idx = outcome_index(info, position.token0)
    if idx is None:
        idx = outcome_index(info, position.token1)
    outcomes = info.get("outcomes") or []
    name = outcomes[idx] if idx is not None and idx < len(outcomes) else "?"
    line = (f"  #{token_id}: {name}/{collateral.symbol}, liquidity={position.liquidity}, "
            f"ticks=[{position.tick_lower},{position.tick_upper}]")
    try:
        value = value_live_position(adapter, position, collateral.address, collateral.decimals)
    except Exception as e:
        return line + f"\n    Value: unavailable ({e})"
    return line + f"\n    Value: {value.outcome_amount:.6f} {name} + {value.collateral_amount:.6f} {collateral.symbol}"


def report_market(client, adapter, entry: dict, owner: str, now: int = None) -> list:
    chain = client.chain
    lines = ["---", f"Question: {entry.get('question')}", f"Market: {entry.get('address')}"]
    info = read_market(client, entry["address"])

    lines.append(f"Status: {market_status(info, now)}")
    opens = opening_date(info)
    if opens:
        lines.append(f"Opens: {opens}")
    if info.get("payoutReported"):
        lines.append(f"Payout: {payout_summary(info)}")

    lines.append("Outcome tokens held:")
    wrapped = info.get("wrappedTokens") or []
    outcomes = info.get("outcomes") or []
    for i, balance in enumerate(read_balances(client, wrapped, owner)):
        if balance > 0:
            lines.append(f"  {outcomes[i] if i < len(outcomes) else i}: {fmt_amount(balance)}")

    position_ids = entry.get("positionIds") or []
    if position_ids:
        lines.append("LP positions:")
        for token_id in position_ids:
            lines.append(describe_position(adapter, token_id, info, chain.collateral))

    if entry.get("nextReview"):
        overdue = " (OVERDUE)" if is_overdue(entry["nextReview"]) else ""
        lines.append(f"Next review: {entry['nextReview']}{overdue}")
    if entry.get("reviewTriggers"):
        lines.append(f"Review triggers: {', '.join(entry['reviewTriggers'])}")
    return lines


def check_portfolio(args) -> int:
    portfolio = load_portfolio(args.file)
    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    adapter = get_dex_adapter(client)
    owner = client.address
    collateral = chain.collateral

    held = client.token_balance(collateral.address, owner)
    print("\n=== Portfolio Status ===")
    print(f"Wallet: {owner}")
    print(f"{collateral.symbol} held: {fmt_amount(held, collateral.decimals)}\n")

    now = int(time.time())
    for entry in portfolio["markets"]:
        for line in report_market(client, adapter, entry, owner, now):
            print(line)
        print()
    print("=== End of Portfolio ===\n")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: check_portfolio(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
