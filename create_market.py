#!/usr/bin/env python3
"""
SeerOps - Create Market
Creates a categorical, scalar or multi-scalar Seer market through the market
factory and prints the new market's address from the NewMarket event.

Usage:
    python create_market.py --type categorical --name "Will ETH hit 10k?" --outcomes "Yes,No" --tokens "YES,NO" \\
        --category cryptocurrency --opening-time 2026-06-01 --min-bond 5
    python create_market.py --type multi-scalar --outcomes "Labour,Conservative" --tokens "LAB,CON" \\
        --question-start "How many seats will " --question-end " win in 2028?" --outcome-type party \\
        --category politics --opening-time 2028-07-01 --min-bond 5 --upper-bound 650
"""

import time
from datetime import datetime, timezone

from web3 import Web3
from web3.logs import DISCARD

from chain_client import ZERO_ADDRESS, to_raw
from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script
from errors import ValidationError
from seer_abi import MARKET_FACTORY_ABI

TAG = "CREATE-MARKET"

FACTORY_FUNCTIONS = {
    "categorical": "createCategoricalMarket",
    "scalar": "createScalarMarket",
    "multi-scalar": "createMultiScalarMarket",
}


def parse_args(argv=None):
    parser = new_parser(
        "Create a Seer prediction market.",
        epilog="Use --parent-market / --parent-outcome for conditional markets.",
    )
    parser.add_argument("--type", required=True, choices=list(FACTORY_FUNCTIONS))
    parser.add_argument("--name", help="Market question (required unless multi-scalar)")
    parser.add_argument("--outcomes", required=True, help="Comma-separated outcome names")
    parser.add_argument("--tokens", required=True, help="Comma-separated token symbols")
    parser.add_argument("--category", required=True)
    parser.add_argument("--min-bond", required=True, help="Minimum oracle bond in native units")
    parser.add_argument("--opening-time", help="Date (YYYY-MM-DD) the question opens (default: now)")
    parser.add_argument("--question-start", default="")
    parser.add_argument("--question-end", default="")
    parser.add_argument("--outcome-type", default="")
    parser.add_argument("--parent-market", type=address_type, default=ZERO_ADDRESS)
    parser.add_argument("--parent-outcome", type=int, default=0)
    parser.add_argument("--lang", default="en")
    parser.add_argument("--lower-bound", type=int, default=0)
    parser.add_argument("--upper-bound", type=int, default=0)
    add_chain_arg(parser)
    return parser.parse_args(argv)


def parse_opening_time(value: str = None) -> int:
    if not value:
        return int(time.time())
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Invalid --opening-time: {value}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def split_list(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


def build_market_params(args) -> tuple:
    """Factory parameter struct, in ABI order."""
    if args.type not in FACTORY_FUNCTIONS:
        raise ValidationError("--type must be categorical, scalar, or multi-scalar")
    if args.type != "multi-scalar" and not args.name:
        raise ValidationError("--name is required for categorical and scalar markets")
    outcomes = split_list(args.outcomes)
    token_names = split_list(args.tokens)
    if not outcomes:
        raise ValidationError("--outcomes must list at least one outcome")
    if len(token_names) != len(outcomes):
        raise ValidationError(f"--tokens has {len(token_names)} names for {len(outcomes)} outcomes")

    return (
        args.name or "",
        outcomes,
        args.question_start,
        args.question_end,
        args.outcome_type,
        args.parent_outcome,
        Web3.to_checksum_address(args.parent_market),
        args.category,
        args.lang,
        args.lower_bound,
        args.upper_bound,
        to_raw(args.min_bond, 18),
        parse_opening_time(args.opening_time),
        token_names,
    )


def create_market(args) -> int:
    params = build_market_params(args)
    fn_name = FACTORY_FUNCTIONS[args.type]
    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    factory = client.contract(chain.contracts["MARKET_FACTORY"], MARKET_FACTORY_ABI)

    print(f"[{TAG}] Creating {args.type} market via {fn_name}...")
    _, receipt = client.transact(getattr(factory.functions, fn_name)(params), label=fn_name)

    events = factory.events.NewMarket().process_receipt(receipt, errors=DISCARD)
    if events:
        event = events[0]["args"]
        print(f"[{TAG}] Market address: {event['market']}")
        print(f"[{TAG}] Condition ID: {Web3.to_hex(event['conditionId'])}")
        print(f"[{TAG}] Question IDs: {', '.join(Web3.to_hex(q) for q in event['questionsIds'])}")
    else:
        print(f"[{TAG}] Warning: no NewMarket event found in the receipt")
    print(f"[{TAG}] Confirmed in block {receipt['blockNumber']}.")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: create_market(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
