#!/usr/bin/env python3
"""
SeerOps - Split Collateral
Splits collateral into an equal amount of every outcome token of a market.
The collateral must already be approved to the router (approve_router.py).

Usage:
    python split_collateral.py --market 0x... --amount 100 [--chain base]
"""

from web3 import Web3

from chain_client import to_raw
from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script
from errors import ValidationError
from seer_abi import ROUTER_ABI

TAG = "SPLIT"


def parse_args(argv=None):
    parser = new_parser(
        "Split collateral into outcome tokens for a Seer market.",
        epilog="--amount is in the collateral token (sDAI on gnosis/mainnet, sUSDS on base/optimism).",
    )
    parser.add_argument("--market", required=True, type=address_type)
    parser.add_argument("--amount", required=True)
    add_chain_arg(parser)
    return parser.parse_args(argv)


def split(args) -> int:
    amount = to_raw(args.amount, 18)
    if amount == 0:
        raise ValidationError("--amount must be positive")
    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    router = client.contract(chain.contracts["GNOSIS_ROUTER"], ROUTER_ABI)

    print(f"[{TAG}] Splitting {args.amount} {chain.collateral.symbol} into outcome tokens for market {args.market}...")
    tx_func = router.functions.splitPosition(Web3.to_checksum_address(chain.collateral.address), args.market, amount)
    _, receipt = client.transact(tx_func, label="splitPosition")
    print(f"[{TAG}] Done. Block {receipt['blockNumber']}. You now hold equal amounts of all outcome tokens.")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: split(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
