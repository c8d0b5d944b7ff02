#!/usr/bin/env python3
"""
SeerOps - Read Market
Dumps a market's on-chain data as JSON. Read-only, no key needed.

Usage:
    python read_market.py --market 0x... [--chain base]
"""

import json

from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script
from markets import read_market

TAG = "READ-MARKET"


def parse_args(argv=None):
    parser = new_parser("Read a Seer market's on-chain data.")
    parser.add_argument("--market", required=True, type=address_type)
    add_chain_arg(parser)
    return parser.parse_args(argv)


def _s(value):
    return str(value) if value is not None else None


def market_to_json(info: dict) -> dict:
    """Selected market fields; uint256 values as strings so JSON keeps them exact."""
    return {
        "id": info["id"],
        "marketName": info["marketName"],
        "outcomes": info["outcomes"],
        "wrappedTokens": info["wrappedTokens"],
        "collateralToken": info["collateralToken"],
        "collateralToken1": info["collateralToken1"],
        "collateralToken2": info["collateralToken2"],
        "lowerBound": _s(info["lowerBound"]),
        "upperBound": _s(info["upperBound"]),
        "conditionId": info["conditionId"],
        "questionId": info["questionId"],
        "questionsIds": info["questionsIds"],
        "encodedQuestions": info["encodedQuestions"],
        "payoutReported": info["payoutReported"],
        "payoutNumerators": [_s(n) for n in info.get("payoutNumerators") or []],
        "outcomesSupply": _s(info["outcomesSupply"]),
        "parentMarket": info["parentMarket"],
        "parentOutcome": _s(info["parentOutcome"]),
        "parentCollectionId": info["parentCollectionId"],
        "questions": [
            {
                "arbitrator": q["arbitrator"],
                "opening_ts": q["opening_ts"],
                "timeout": q["timeout"],
                "finalize_ts": q["finalize_ts"],
                "is_pending_arbitration": q["is_pending_arbitration"],
                "best_answer": q["best_answer"],
                "bond": _s(q["bond"]),
                "min_bond": _s(q["min_bond"]),
            }
            for q in info.get("questions") or []
        ],
    }


def show_market(args) -> int:
    chain = resolve_chain(args.chain)
    client = make_client(chain)
    info = read_market(client, args.market)
    print(json.dumps(market_to_json(info), indent=2, default=str))
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: show_market(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
