#!/usr/bin/env python3
"""
SeerOps - Add Liquidity
Concentrated liquidity for an outcome token / collateral pair, sized from a
probability range and a budget. SwaprV3 (Algebra) on gnosis, Uniswap V3 on
the other chains.

Usage:
    python add_liquidity.py --outcome-token 0x... --budget-collateral 0.4 --prob-low 0.2 --prob-high 0.8
    python add_liquidity.py --outcome-token 0x... --budget-native 0.5 --prob-low 0.2 --prob-high 0.8 --dry-run
"""

import time

from web3 import Web3

import config
from chain_client import fmt_amount, to_raw
from cli_common import add_chain_arg, address_type, make_client, new_parser, resolve_chain, run_script, warn
from dex_adapter import MintParams, get_dex_adapter
from errors import ScriptError
from lp_sizing import budget_in_native, check_budget_inputs, fetch_collateral_rate, size_liquidity, validate_range
from lp_store import LpStore, new_lp_record
from seer_api import SeerAPI, outcome_name_for_token
from tick_math import is_token0, sort_tokens

TAG = "ADD-LP"


def parse_args(argv=None):
    parser = new_parser(
        "Add concentrated liquidity for an outcome token / collateral pair.",
        epilog="Exactly one of --budget-native / --budget-collateral is required.",
    )
    parser.add_argument("--outcome-token", required=True, type=address_type)
    parser.add_argument("--prob-low", required=True, type=float)
    parser.add_argument("--prob-high", required=True, type=float)
    parser.add_argument("--budget-native", type=float, help="Total value in the chain's native unit")
    parser.add_argument("--budget-collateral", type=float, help="Total value in collateral (recommended)")
    parser.add_argument("--init-prob", type=float, help="Initial pool probability (default: range midpoint)")
    parser.add_argument("--tick-spacing", type=int, help="Default: the chain's DEX tick spacing")
    parser.add_argument("--market", type=address_type, help="Market address, used to name the tracked position")
    parser.add_argument("--dry-run", action="store_true", help="Print the computed amounts and exit")
    add_chain_arg(parser)
    return parser.parse_args(argv)


def lookup_names(market: str, chain, outcome_token: str, api: SeerAPI = None) -> tuple:
    """(marketName, outcomeName) from the search API. Failures only warn."""
    if not market:
        print(f"[{TAG}] Tip: pass --market 0x... to track the market and outcome names.")
        return None, None
    try:
        record = (api or SeerAPI()).get_market(market, chain.chain_id)
    except ScriptError as e:
        warn(TAG, f"could not look up market details: {e}")
        return None, None
    if not record:
        return None, None
    return record.get("marketName"), outcome_name_for_token(record, outcome_token)


def save_position(store: LpStore, record: dict):
    try:
        store.append(record)
        print(f"[{TAG}] Position saved to LP tracker ({store.path})")
    except (OSError, ValueError) as e:
        warn(TAG, f"failed to save position to tracker: {e}")


def add_liquidity(args, store: LpStore = None, api: SeerAPI = None) -> int:
    chain = resolve_chain(args.chain)
    validate_range(args.prob_low, args.prob_high, args.init_prob)
    check_budget_inputs(args.budget_native, args.budget_collateral)
    tick_spacing = args.tick_spacing or chain.dex.tick_spacing
    client = make_client(chain, need_key=not args.dry_run)

    collateral = chain.collateral
    outcome_token = args.outcome_token
    outcome_is_token0 = is_token0(outcome_token, collateral.address)
    token0, token1 = sort_tokens(outcome_token, Web3.to_checksum_address(collateral.address))

    rate = fetch_collateral_rate(collateral, client.w3)
    budget = budget_in_native(args.budget_native, args.budget_collateral, rate)
    native = chain.native_symbol
    if args.budget_native is not None:
        print(f"[{TAG}] Budget: {budget} {native} (--budget-native)")
    else:
        print(f"[{TAG}] Budget: {args.budget_collateral} {collateral.symbol} = {budget:.6f} {native} "
              f"(--budget-collateral, rate {rate:.4f})")

    quote = size_liquidity(
        args.prob_low, args.prob_high, budget, rate, outcome_is_token0,
        tick_spacing=tick_spacing, init_prob=args.init_prob,
    )
    print(f"[{TAG}] {collateral.symbol} rate: {rate:.4f} {native} per {collateral.symbol}")
    print(f"[{TAG}] Ticks: [{quote.tick_lower}, {quote.tick_upper}] (spacing {tick_spacing}), "
          f"outcome is token{0 if outcome_is_token0 else 1}")
    print(f"[{TAG}] Need {quote.outcome_amount:.6f} outcome tokens + {quote.collateral_amount:.6f} {collateral.symbol} "
          f"(worth {quote.collateral_amount * rate:.6f} {native})")
    if args.dry_run:
        return 0

    decimals0 = config.OUTCOME_DECIMALS if outcome_is_token0 else collateral.decimals
    decimals1 = collateral.decimals if outcome_is_token0 else config.OUTCOME_DECIMALS
    amount0 = to_raw(quote.amount0, decimals0)
    amount1 = to_raw(quote.amount1, decimals1)

    adapter = get_dex_adapter(client)
    print(f"[{TAG}] Creating/initializing pool if needed...")
    pool = adapter.ensure_pool_initialized(token0, token1, quote.sqrt_price_x96)

    print(f"[{TAG}] Approving tokens to position manager...")
    client.approve(token0, chain.dex.position_manager, amount0, label="approve token0")
    client.approve(token1, chain.dex.position_manager, amount1, label="approve token1")

    print(f"[{TAG}] Minting LP position: token0={token0}, token1={token1}, "
          f"ticks=[{quote.tick_lower}, {quote.tick_upper}]...")
    result = adapter.mint_position(MintParams(
        token0=token0,
        token1=token1,
        tick_lower=quote.tick_lower,
        tick_upper=quote.tick_upper,
        amount0_desired=amount0,
        amount1_desired=amount1,
        recipient=client.address,
        deadline=int(time.time()) + config.TX_DEADLINE_SECONDS,
    ))

    label0, label1 = ("outcome token", collateral.symbol) if outcome_is_token0 else (collateral.symbol, "outcome token")
    print(f"[{TAG}] Position token ID: {result.token_id}")
    print(f"[{TAG}] Actual {label0} used: {fmt_amount(result.amount0, decimals0)}")
    print(f"[{TAG}] Actual {label1} used: {fmt_amount(result.amount1, decimals1)}")
    print(f"[{TAG}] LP position minted.")

    market_name, outcome_name = lookup_names(args.market, chain, outcome_token, api)
    record = new_lp_record(
        result.token_id, chain.name, chain.dex.family, pool, token0, token1,
        args.prob_low, args.prob_high, market=args.market,
        market_name=market_name, outcome_name=outcome_name,
    )
    save_position(store or LpStore(), record)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    return run_script(lambda: add_liquidity(args), TAG)


if __name__ == "__main__":
    raise SystemExit(main())
