#!/usr/bin/env python3
"""
SeerOps - Balance Check
Native coin and collateral balances, or a single token balance.

Usage:
    python check_balance.py [--chain base]
    python check_balance.py --address 0x...            # any address, no key needed
    python check_balance.py --token 0x... [--address 0x...]
"""

from concurrent.futures import ThreadPoolExecutor

from chain_client import fmt_amount
from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script, wallet_address

TAG = "BALANCE"


def parse_args(argv=None):
    parser = new_parser("Check wallet balances (native coin and collateral).")
    parser.add_argument("--address", type=address_type, help="Address to check (default: your wallet)")
    parser.add_argument("--token", type=address_type, help="Show only this ERC-20 balance")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def check_balance(args) -> int:
    address = wallet_address(args.address)
    chain = resolve_chain(args.chain)
    client = make_client(chain)

    if args.token:
        balance = client.token_balance(args.token, address)
        print(f"Address: {address}")
        print(f"Token:   {args.token}")
        print(f"Balance: {fmt_amount(balance)}")
        return 0

    collateral = chain.collateral
    with ThreadPoolExecutor(max_workers=2) as ex:
        native_fut = ex.submit(client.native_balance, address)
        collateral_fut = ex.submit(client.token_balance, collateral.address, address)
        native, held = native_fut.result(), collateral_fut.result()

    print(f"Address:    {address}")
    print(f"Chain:      {chain.name}")
    print(f"{chain.native_symbol + ':':<12}{fmt_amount(native)}")
    print(f"{collateral.symbol + ':':<12}{fmt_amount(held, collateral.decimals)}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: check_balance(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
