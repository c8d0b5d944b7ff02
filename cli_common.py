"""
SeerOps - CLI Helpers
Shared argparse pieces, chain / client resolution and the failure wrapper every
script runs under.
"""

from __future__ import annotations

import argparse
import sys

import requests
from eth_account import Account
from web3 import Web3
from web3.exceptions import Web3Exception

import config
from chain_client import ChainClient
from chains import get_registry
from errors import ScriptError, ValidationError


def address_type(value: str) -> str:
    if not Web3.is_address(value):
        raise argparse.ArgumentTypeError(f"not an address: {value}")
    return Web3.to_checksum_address(value)


def add_chain_arg(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--chain",
        choices=get_registry().names(),
        help=f"Chain name (default: CHAIN env or {config.DEFAULT_CHAIN})",
    )


def new_parser(description: str, epilog: str = None) -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )


def resolve_chain(name: str = None):
    """--chain beats the CHAIN env var, which beats the default chain."""
    return get_registry().get(name or config.CHAIN or None)


def make_client(chain, need_key: bool = False) -> ChainClient:
    if need_key and not config.PRIVATE_KEY:
        raise ValidationError("PRIVATE_KEY env var required")
    return ChainClient(chain, rpc_url=config.RPC_URL or None)


def wallet_address(explicit: str = None) -> str:
    """--address if given, otherwise the configured wallet."""
    if explicit:
        return explicit
    if not config.PRIVATE_KEY:
        raise ValidationError("Provide --address or set PRIVATE_KEY env var")
    return Account.from_key(config.PRIVATE_KEY).address


def fail(tag: str, message: str):
    print(f"[{tag}] Error: {message}", file=sys.stderr)


def warn(tag: str, message: str):
    print(f"[{tag}] Warning: {message}", file=sys.stderr)


def run_script(fn, tag: str) -> int:
    """Run a script body. 0 on success, 1 on any reported failure."""
    try:
        result = fn()
    except ScriptError as e:
        fail(tag, str(e))
        return 1
    except (Web3Exception, requests.RequestException, OSError) as e:
        fail(tag, f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        fail(tag, "interrupted")
        return 130
    return result or 0
