#!/usr/bin/env python3
"""
SeerOps - Merge / Redeem
Merge complete sets of outcome tokens back into collateral, or redeem winning
tokens once the market has resolved. Both go through the Seer router, which
needs the outcome tokens approved to it.

Usage:
    python merge_redeem.py --mode merge --market 0x... --amount 50
    python merge_redeem.py --mode merge --market 0x... --amount max
    python merge_redeem.py --mode redeem --market 0x... --outcome-index 0 --amount 50
"""

from concurrent.futures import ThreadPoolExecutor

from web3 import Web3

from chain_client import fmt_amount, to_raw
from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script
from errors import ValidationError
from markets import read_market
from seer_abi import ROUTER_ABI

TAG = "MERGE-REDEEM"


def parse_args(argv=None):
    parser = new_parser("Merge outcome tokens into collateral, or redeem winning tokens.")
    parser.add_argument("--mode", required=True, choices=["merge", "redeem"])
    parser.add_argument("--market", required=True, type=address_type)
    parser.add_argument("--amount", help="Amount in tokens, or 'max' (merge only)")
    parser.add_argument("--outcome-index", type=int, help="Outcome to redeem (redeem only)")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def max_mergeable(balances: list) -> int:
    """Complete sets held: the smallest balance across all outcome tokens."""
    return min(balances) if balances else 0


def read_outcome_balances(client, tokens: list) -> list:
    owner = client.address
    with ThreadPoolExecutor(max_workers=max(1, len(tokens))) as ex:
        return list(ex.map(lambda t: client.token_balance(t, owner), tokens))


def merge(client, router, market: str, amount_arg: str) -> int:
    collateral = client.chain.collateral
    if amount_arg == "max":
        print(f"[{TAG}] Fetching market outcome tokens...")
        tokens = read_market(client, market)["wrappedTokens"]
        print(f"[{TAG}] Querying balances of {len(tokens)} outcome tokens...")
        balances = read_outcome_balances(client, tokens)
        amount = max_mergeable(balances)
        print(f"[{TAG}] Balances: [{', '.join(fmt_amount(b) for b in balances)}]")
        print(f"[{TAG}] Min balance (max mergeable): {fmt_amount(amount)}")
        if amount == 0:
            print(f"[{TAG}] No complete sets to merge (at least one outcome has 0 balance).")
            return 0
    else:
        amount = to_raw(amount_arg, 18)

    print(f"[{TAG}] Merging {fmt_amount(amount)} complete sets back to {collateral.symbol}...")
    tx_func = router.functions.mergePositions(Web3.to_checksum_address(collateral.address), market, amount)
    client.transact(tx_func, label="mergePositions")
    print(f"[{TAG}] Done.")
    return 0


def redeem(client, router, market: str, outcome_index: int, amount_arg: str) -> int:
    collateral = client.chain.collateral
    amount = to_raw(amount_arg, 18)
    print(f"[{TAG}] Redeeming {amount_arg} of outcome {outcome_index} for {collateral.symbol}...")
    tx_func = router.functions.redeemPositions(
        Web3.to_checksum_address(collateral.address), market, [outcome_index], [amount]
    )
    client.transact(tx_func, label="redeemPositions")
    print(f"[{TAG}] Done.")
    return 0


def merge_redeem(args) -> int:
    if not args.amount:
        raise ValidationError("--amount is required")
    if args.mode == "redeem":
        if args.outcome_index is None:
            raise ValidationError("--outcome-index is required for redeem")
        if args.outcome_index < 0:
            raise ValidationError("--outcome-index must be non-negative")
        if args.amount == "max":
            raise ValidationError("--amount max is only supported for merge")

    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    router = client.contract(chain.contracts["GNOSIS_ROUTER"], ROUTER_ABI)
    if args.mode == "merge":
        return merge(client, router, args.market, args.amount)
    return redeem(client, router, args.market, args.outcome_index, args.amount)


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: merge_redeem(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
