#!/usr/bin/env python3
"""
SeerOps - SEER Airdrop
SEER airdrop allocation for an address. No key needed with --address.

Usage:
    python get_airdrop_data.py                    # uses PRIVATE_KEY
    python get_airdrop_data.py --address 0x...
    python get_airdrop_data.py --raw
"""

import json

from cli_common import address_type, new_parser, run_script, wallet_address
from seer_api import SeerAPI

TAG = "AIRDROP"


def parse_args(argv=None):
    parser = new_parser("Check a SEER airdrop allocation.")
    parser.add_argument("--address", type=address_type, help="Address to check (default: your wallet)")
    parser.add_argument("--raw", action="store_true", help="Print the full JSON")
    return parser.parse_args(argv)


def fmt(value) -> str:
    if value is None:
        return "N/A"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    return f"{number:,.2f}".rstrip("0").rstrip(".")


def format_airdrop(address: str, data: dict) -> list:
    return [
        f"SEER Airdrop Allocation for {address}",
        "",
        f"  Total allocation:        {fmt(data.get('totalAllocation'))} SEER",
        f"  This week:               {fmt(data.get('currentWeekAllocation'))} SEER",
        f"  Monthly estimate:        {fmt(data.get('monthlyEstimate'))} SEER",
        "",
        "  Breakdown:",
        f"    Outcome token holding: {fmt(data.get('outcomeTokenHoldingAllocation'))} SEER",
        f"    PoH bonus:             {fmt(data.get('pohUserAllocation'))} SEER",
        f"    Monthly PoH estimate:  {fmt(data.get('monthlyEstimatePoH'))} SEER",
        "",
        "  SER LP balances:",
        f"    Mainnet:               {fmt(data.get('serLppMainnet'))}",
        f"    Gnosis:                {fmt(data.get('serLppGnosis'))}",
    ]


def show_airdrop(args, api: SeerAPI = None) -> int:
    address = wallet_address(args.address)
    data = (api or SeerAPI()).get_airdrop_data(address)
    if args.raw:
        print(json.dumps(data, indent=2))
        return 0
    for line in format_airdrop(address, data):
        print(line)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: show_airdrop(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
