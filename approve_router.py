#!/usr/bin/env python3
"""
SeerOps - Approve Router
Tops up the collateral allowance to the Seer router (split / merge / redeem)
and to the DEX position manager (LP). An allowance below 1M tokens is
replaced by an unlimited one.

Usage:
    python approve_router.py [--chain base]
"""

from web3 import Web3

import config
from chain_client import fmt_amount
from cli_common import add_chain_arg, make_client, new_parser, resolve_chain, run_script
from seer_abi import ERC20_ABI

TAG = "APPROVE"


def parse_args(argv=None):
    parser = new_parser("Approve collateral to the Seer router and the DEX position manager.")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def needs_approval(allowance: int, threshold: int = None) -> bool:
    return allowance < (config.APPROVAL_THRESHOLD if threshold is None else threshold)


def top_up(client, label: str, spender: str) -> bool:
    """Approve max to spender when the allowance is low. True if a tx was sent."""
    collateral = client.chain.collateral
    allowance = client.allowance(collateral.address, spender)
    print(f"[{TAG}] {label} approval: {fmt_amount(allowance, collateral.decimals)} {collateral.symbol}")
    if not needs_approval(allowance):
        print(f"[{TAG}] {label} approval sufficient.")
        return False

    print(f"[{TAG}] Below 1M, approving max to {label}...")
    erc20 = client.contract(collateral.address, ERC20_ABI)
    tx_func = erc20.functions.approve(Web3.to_checksum_address(spender), config.MAX_UINT256)
    _, receipt = client.transact(tx_func, label=f"approve {label}")
    print(f"[{TAG}] Done. Tx: {Web3.to_hex(receipt['transactionHash'])}")
    return True


def approve_router(args) -> int:
    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    top_up(client, "Router", chain.contracts["GNOSIS_ROUTER"])
    top_up(client, "Position Manager", chain.dex.position_manager)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: approve_router(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
