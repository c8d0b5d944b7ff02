#!/usr/bin/env python3
"""
SeerOps - Swap
Buy outcome tokens with collateral, or sell them back, through the chain's DEX
router with exactInputSingle.

Usage:
    python swap.py --mode buy --outcome-token 0x... --amount-in 10 [--chain base]
    python swap.py --mode sell --outcome-token 0x... --amount-in 5 --slippage-bps 200
"""

import config
from chain_client import fmt_amount, to_raw
from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script
from dex_adapter import get_dex_adapter
from errors import ValidationError

TAG = "SWAP"
BPS = 10_000


def min_amount_out(amount_in: int, slippage_bps: int) -> int:
    """Floor on the amount received, taken straight off amount_in (no price)."""
    if not 0 <= slippage_bps < BPS:
        raise ValidationError(f"--slippage-bps must be in [0, {BPS}), got {slippage_bps}")
    return amount_in * (BPS - slippage_bps) // BPS


def swap_legs(mode: str, outcome_token: str, collateral: str) -> tuple:
    """(token_in, token_out) for buy / sell."""
    if mode == "buy":
        return collateral, outcome_token
    if mode == "sell":
        return outcome_token, collateral
    raise ValidationError("--mode must be buy or sell")


def parse_args(argv=None):
    parser = new_parser(
        "Buy or sell outcome tokens through the chain's DEX router.",
        epilog="Slippage is applied to the input amount: minOut = amountIn * (10000 - bps) / 10000.",
    )
    parser.add_argument("--mode", required=True, choices=["buy", "sell"])
    parser.add_argument("--outcome-token", required=True, type=address_type)
    parser.add_argument("--amount-in", required=True, help="Human amount of the input token")
    parser.add_argument("--slippage-bps", type=int, default=config.SWAP_SLIPPAGE_BPS,
                        help=f"Default: {config.SWAP_SLIPPAGE_BPS}")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def swap(args) -> int:
    chain = resolve_chain(args.chain)
    collateral = chain.collateral
    amount_in = to_raw(args.amount_in, 18)
    if amount_in == 0:
        raise ValidationError("--amount-in must be positive")
    min_out = min_amount_out(amount_in, args.slippage_bps)
    token_in, token_out = swap_legs(args.mode, args.outcome_token, collateral.address)

    def is_collateral(token):
        return token.lower() == collateral.address.lower()

    def label(token):
        return collateral.symbol if is_collateral(token) else "outcome tokens"

    client = make_client(chain, need_key=True)
    adapter = get_dex_adapter(client)
    if args.mode == "buy":
        print(f"[{TAG}] Buying {args.outcome_token} with {args.amount_in} {collateral.symbol}...")
    else:
        print(f"[{TAG}] Selling {args.amount_in} {args.outcome_token} for {collateral.symbol}...")

    pool = adapter.compute_pool_address(args.outcome_token, collateral.address)
    fee_note = f" (fee tier: {chain.dex.fee})" if chain.dex.fee is not None else ""
    print(f"[{TAG}] Pool address: {pool}{fee_note}")
    state = adapter.read_pool_state(pool)
    print(f"[{TAG}] Current tick: {state.tick}, price: {state.sqrt_price_x96}")

    print(f"[{TAG}] Approving {fmt_amount(amount_in)} {label(token_in)} to router...")
    client.approve(token_in, chain.dex.router, amount_in, label="approve router")

    print(f"[{TAG}] Swapping...")
    amount_out = adapter.swap_exact_in(token_in, token_out, amount_in, min_out)
    print(f"[{TAG}] Swap completed. Simulated amount out: {fmt_amount(amount_out)} {label(token_out)}")
    print(f"[{TAG}] Minimum received: {fmt_amount(min_out)} {label(token_out)}")
    if min_out:
        execution_price = amount_in / min_out
        in_name = collateral.symbol if is_collateral(token_in) else "outcome"
        out_name = collateral.symbol if is_collateral(token_out) else "outcome"
        print(f"[{TAG}] Execution price: {execution_price:.6f} ({in_name} per {out_name})")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: swap(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
