#!/usr/bin/env python3
"""
SeerOps - Wallet Setup
Checks that a wallet is configured and shows its balances on every chain, or
generates a fresh key straight into the env file. The private key is never
printed.

Usage:
    python setup_wallet.py              # address + balances on every chain
    python setup_wallet.py --generate   # new random wallet, saved to ~/.openclaw/.env
"""

import os
import re
from concurrent.futures import ThreadPoolExecutor

from eth_account import Account
from web3 import Web3

import config
from chain_client import ChainClient, from_raw
from chains import get_registry
from cli_common import new_parser, run_script

TAG = "SETUP"

KEY_LINE = re.compile(r"^PRIVATE_KEY=(0x[0-9a-fA-F]+)", re.MULTILINE)


def parse_args(argv=None):
    parser = new_parser("Check or create the wallet used by the SeerOps scripts.")
    parser.add_argument("--generate", action="store_true", help="Generate a new wallet into the env file")
    return parser.parse_args(argv)


def _read_env_file(path: str) -> str:
    if not os.path.exists(path):
        return ""
    with open(path, "r") as f:
        return f.read()


def generate_wallet(env_file: str = None) -> int:
    env_file = env_file or config.ENV_FILE
    if os.environ.get("PRIVATE_KEY"):
        existing = Account.from_key(os.environ["PRIVATE_KEY"])
        print(f"[{TAG}] Wallet already configured: {existing.address}")
        print(f"[{TAG}] Not generating a new key. Remove PRIVATE_KEY from env first if you want a fresh wallet.")
        return 1
    if "PRIVATE_KEY=" in _read_env_file(env_file):
        print(f"[{TAG}] PRIVATE_KEY already exists in {env_file}")
        print(f"[{TAG}] Remove it manually first if you want to generate a new one.")
        return 1

    account = Account.create()
    os.makedirs(os.path.dirname(os.path.abspath(env_file)), exist_ok=True)
    with open(env_file, "a") as f:
        f.write(f"\nPRIVATE_KEY={Web3.to_hex(account.key)}\n")

    print(f"[{TAG}] New wallet generated and saved to {env_file}")
    print()
    print(f"  Address: {account.address}")
    print()
    print("Send funds to this address to get started:")
    for chain in get_registry():
        print(f"  {chain.name + ':':<10}{chain.native_symbol} (gas) + {chain.collateral.symbol} (collateral)")
    print()
    print("Then restart so the env var is loaded.")
    return 0


def find_key(env_file: str = None) -> tuple:
    """(key, from_file). The env var wins; the file is a fallback before restart."""
    if config.PRIVATE_KEY:
        return config.PRIVATE_KEY, False
    match = KEY_LINE.search(_read_env_file(env_file or config.ENV_FILE))
    if match:
        return match.group(1), True
    return None, False


def read_chain_balances(chain, address: str, client_factory=ChainClient) -> dict:
    try:
        client = client_factory(chain, private_key="")
        native = client.native_balance(address)
        held = client.token_balance(chain.collateral.address, address)
    except Exception as e:
        return {"error": str(e)[:60]}
    return {"native": native, "collateral": held}


def format_chain_balances(chain, balances: dict) -> list:
    if "error" in balances:
        return [f"  {chain.name}: RPC error ({balances['error']})"]
    native, held = balances["native"], balances["collateral"]
    gas_note = "" if native > 0 else "(needs gas!)"
    funds_note = "" if held > 0 else "(no funds)"
    return [
        f"  {chain.name}:",
        f"    Native:     {float(from_raw(native)):.4f} {chain.native_symbol} {gas_note}".rstrip(),
        f"    Collateral: {float(from_raw(held, chain.collateral.decimals)):.4f} {chain.collateral.symbol} {funds_note}".rstrip(),
    ]


def check_wallet(env_file: str = None, client_factory=ChainClient) -> int:
    env_file = env_file or config.ENV_FILE
    key, from_file = find_key(env_file)
    if from_file:
        print(f"(PRIVATE_KEY found in {env_file} but not in env - restart to load it)\n")
    if not key:
        print("No PRIVATE_KEY found.\n")
        print("Options:")
        print("  1. If the human has an existing key:")
        print(f"     They should add PRIVATE_KEY=0x... to {env_file}")
        print()
        print("  2. To generate a new wallet automatically:")
        print("     python setup_wallet.py --generate")
        print()
        print("Then restart so the env var is loaded.")
        return 1

    address = Account.from_key(key).address
    print(f"Wallet: {address}\n")
    chains = list(get_registry())
    with ThreadPoolExecutor(max_workers=len(chains)) as ex:
        results = list(ex.map(lambda c: read_chain_balances(c, address, client_factory), chains))
    for chain, balances in zip(chains, results):
        for line in format_chain_balances(chain, balances):
            print(line)
    print()
    print("If balances are zero, send funds to the address above.")
    print("Then run: python approve_router.py [--chain <name>]")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.generate:
        return run_script(generate_wallet, TAG)
    return run_script(check_wallet, TAG)


if __name__ == "__main__":
    raise SystemExit(main())
