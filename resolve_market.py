#!/usr/bin/env python3
"""
SeerOps - Resolve Market
Reports a finalized Reality.eth answer to the conditional tokens through the
Reality proxy, so winning outcome tokens become redeemable.

Usage:
    python resolve_market.py --market 0x... [--chain base]
"""

from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script
from seer_abi import REALITY_PROXY_ABI

TAG = "RESOLVE"


def parse_args(argv=None):
    parser = new_parser("Resolve a Seer market once its question is finalized.")
    parser.add_argument("--market", required=True, type=address_type)
    add_chain_arg(parser)
    return parser.parse_args(argv)


def resolve(args) -> int:
    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    proxy = client.contract(chain.contracts["REALITY_PROXY"], REALITY_PROXY_ABI)

    print(f"[{TAG}] Resolving market {args.market}...")
    _, receipt = client.transact(proxy.functions.resolve(args.market), label="resolve")
    print(f"[{TAG}] Market resolved in block {receipt['blockNumber']}.")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: resolve(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
