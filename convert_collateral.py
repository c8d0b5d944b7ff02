#!/usr/bin/env python3
"""
SeerOps - Convert Collateral
Wraps the underlying asset into the chain's collateral vault share, or unwraps it.

    gnosis            xDAI <-> sDAI through the xDAI adapter (xDAI is the native coin)
    mainnet           DAI  <-> sDAI through the ERC-4626 vault
    base / optimism   USDS <-> sUSDS through the ERC-4626 vault

Usage:
    python convert_collateral.py --direction deposit --amount 100 [--chain base]
    python convert_collateral.py --direction redeem --amount 100
"""

from web3 import Web3

from chain_client import to_raw
from cli_common import add_chain_arg, make_client, new_parser, resolve_chain, run_script
from errors import ValidationError
from seer_abi import ERC20_ABI, ERC4626_ABI, SDAI_ADAPTER_ABI

TAG = "CONVERT"


def parse_args(argv=None):
    parser = new_parser(
        "Convert between the underlying asset and the collateral vault share.",
        epilog="Outside gnosis the underlying token (DAI/USDS) must be in the wallet; "
               "the native coin only pays gas.",
    )
    parser.add_argument("--direction", required=True, choices=["deposit", "redeem"])
    parser.add_argument("--amount", required=True)
    add_chain_arg(parser)
    return parser.parse_args(argv)


def underlying_info(client, vault_address: str) -> tuple:
    """(address, symbol) of the vault's underlying asset."""
    vault = client.contract(vault_address, ERC4626_ABI)
    underlying = vault.functions.asset().call()
    symbol = client.contract(underlying, ERC20_ABI).functions.symbol().call()
    return underlying, symbol


def convert_with_adapter(client, direction: str, amount: int, amount_text: str):
    collateral = client.chain.collateral
    native = client.chain.native_symbol
    adapter = client.contract(collateral.adapter, SDAI_ADAPTER_ABI)
    if direction == "deposit":
        print(f"[{TAG}] Converting {amount_text} {native} -> {collateral.symbol}...")
        client.transact(adapter.functions.depositXDAI(client.address), value=amount, label="depositXDAI")
        print(f"[{TAG}] Done. {collateral.symbol} received.")
        return
    print(f"[{TAG}] Converting {amount_text} {collateral.symbol} -> {native}...")
    print(f"[{TAG}] Approving {collateral.symbol} to adapter...")
    client.approve(collateral.address, collateral.adapter, amount, label=f"approve {collateral.symbol}")
    client.transact(adapter.functions.redeemXDAI(amount, client.address), label="redeemXDAI")
    print(f"[{TAG}] Done. {native} received.")


def convert_with_vault(client, direction: str, amount: int, amount_text: str):
    collateral = client.chain.collateral
    vault = client.contract(collateral.address, ERC4626_ABI)
    underlying, symbol = underlying_info(client, collateral.address)
    me = client.address
    if direction == "deposit":
        print(f"[{TAG}] Converting {amount_text} {symbol} -> {collateral.symbol}...")
        print(f"[{TAG}] Underlying token: {underlying}")
        print(f"[{TAG}] Approving {symbol} to vault...")
        client.approve(underlying, collateral.address, amount, label=f"approve {symbol}")
        print(f"[{TAG}] Depositing to {collateral.symbol} vault...")
        client.transact(vault.functions.deposit(amount, me), label="deposit")
        print(f"[{TAG}] Done. {collateral.symbol} received.")
        return
    print(f"[{TAG}] Converting {amount_text} {collateral.symbol} -> {symbol}...")
    print(f"[{TAG}] Underlying token: {underlying}")
    print(f"[{TAG}] Redeeming {collateral.symbol} from vault...")
    client.transact(vault.functions.redeem(amount, me, me), label="redeem")
    print(f"[{TAG}] Done. {symbol} received.")


def convert(args) -> int:
    amount = to_raw(args.amount, 18)
    if amount == 0:
        raise ValidationError("--amount must be positive")
    chain = resolve_chain(args.chain)
    client = make_client(chain, need_key=True)
    if chain.collateral.adapter:
        convert_with_adapter(client, args.direction, amount, args.amount)
    else:
        convert_with_vault(client, args.direction, amount, args.amount)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: convert(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
