"""
SeerOps - Liquidity Sizing
Turns a probability range and a budget into a tick range, a liquidity amount
and the exact outcome / collateral amounts to supply.

Budget is expressed in the chain's native unit. The outcome token counts 1:1
with native (a complete set redeems for one unit), collateral counts at the
vault's share-to-asset rate:

    budget = L * outcomePerL + L * collateralPerL * rate
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from web3 import Web3

from chain_client import connect
from chains import CollateralConfig, get_registry
from errors import RateReadError, ValidationError
from seer_abi import ERC4626_ABI
from tick_math import liquidity_amounts, price_to_tick, sqrt_price_to_x96, tick_to_sqrt_price

ONE_SHARE = 10 ** 18


@dataclass(frozen=True)
class LiquidityQuote:
    liquidity: float
    outcome_amount: float
    collateral_amount: float
    amount0: float
    amount1: float
    tick_lower: int
    tick_upper: int
    sqrt_price: float
    outcome_is_token0: bool

    @property
    def sqrt_price_x96(self) -> int:
        return sqrt_price_to_x96(self.sqrt_price)

    def native_value(self, collateral_rate: float) -> float:
        return self.outcome_amount + self.collateral_amount * collateral_rate


def _is_probability(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and 0 < value < 1


def validate_range(prob_low: float, prob_high: float, init_prob: float = None) -> float:
    """Check the range and return the initial probability (default: midpoint)."""
    if not _is_probability(prob_low) or not _is_probability(prob_high):
        raise ValidationError(f"Probabilities must be strictly between 0 and 1 (got {prob_low}, {prob_high})")
    if prob_low >= prob_high:
        raise ValidationError(f"--prob-low ({prob_low}) must be below --prob-high ({prob_high})")
    if init_prob is None:
        return (prob_low + prob_high) / 2
    if not _is_probability(init_prob) or not prob_low <= init_prob <= prob_high:
        raise ValidationError(f"--init-prob ({init_prob}) must lie within [{prob_low}, {prob_high}]")
    return init_prob


def check_budget_inputs(budget_native, budget_collateral) -> None:
    """Exactly one budget mode, and a positive amount."""
    if budget_native is None and budget_collateral is None:
        raise ValidationError("Must provide either --budget-native or --budget-collateral")
    if budget_native is not None and budget_collateral is not None:
        raise ValidationError("Cannot provide both --budget-native and --budget-collateral")
    amount = budget_native if budget_native is not None else budget_collateral
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(f"Budget must be a positive number (got {amount})")


def budget_in_native(budget_native, budget_collateral, collateral_rate: float) -> float:
    check_budget_inputs(budget_native, budget_collateral)
    if budget_native is not None:
        return float(budget_native)
    return float(budget_collateral) * collateral_rate


def fetch_collateral_rate(collateral: CollateralConfig, w3: Web3, rate_w3: Web3 = None, registry=None) -> float:
    """Native units per collateral share, read from ERC4626 convertToAssets(1e18).

    Bridged vault shares are priced on their rate-source chain; pass its web3 as
    rate_w3 or let this connect to it.
    """
    address = collateral.address
    if collateral.rate_source:
        address = collateral.rate_source.address
        if rate_w3 is None:
            rate_w3 = connect((registry or get_registry()).get(collateral.rate_source.chain))
        w3 = rate_w3

    try:
        vault = w3.eth.contract(address=Web3.to_checksum_address(address), abi=ERC4626_ABI)
        assets = vault.functions.convertToAssets(ONE_SHARE).call()
    except Exception as e:
        raise RateReadError(
            f"Failed to query collateral exchange rate for {collateral.symbol} at {address}. "
            f"Collateral must implement ERC4626 convertToAssets. Details: {e}"
        ) from e

    rate = assets / ONE_SHARE
    if rate <= 0:
        raise RateReadError(f"{collateral.symbol} convertToAssets returned {assets} at {address}")
    return rate


def tick_range(prob_low: float, prob_high: float, outcome_is_token0: bool, tick_spacing: int) -> tuple:
    """Tick bounds for a probability range.

    Ticks live on the token1/token0 price. When the outcome is token1 that
    price is 1/probability, so the range flips.
    """
    if outcome_is_token0:
        return price_to_tick(prob_low, tick_spacing), price_to_tick(prob_high, tick_spacing)
    return price_to_tick(1 / prob_high, tick_spacing), price_to_tick(1 / prob_low, tick_spacing)


def size_liquidity(prob_low: float, prob_high: float, budget: float, collateral_rate: float,
                   outcome_is_token0: bool, tick_spacing: int = 60, init_prob: float = None) -> LiquidityQuote:
    init_prob = validate_range(prob_low, prob_high, init_prob)
    if tick_spacing <= 0:
        raise ValidationError(f"Tick spacing must be positive (got {tick_spacing})")
    if not math.isfinite(budget) or budget <= 0:
        raise ValidationError(f"Budget must be a positive number (got {budget})")
    if not math.isfinite(collateral_rate) or collateral_rate <= 0:
        raise ValidationError(f"Collateral rate must be positive (got {collateral_rate})")

    tick_lower, tick_upper = tick_range(prob_low, prob_high, outcome_is_token0, tick_spacing)
    if tick_lower >= tick_upper:
        raise ValidationError(
            f"Range {prob_low}-{prob_high} collapses to tick {tick_lower} at spacing {tick_spacing}; "
            f"widen the range or use a smaller --tick-spacing"
        )

    sqrt_p = math.sqrt(init_prob if outcome_is_token0 else 1 / init_prob)
    a0_per_l, a1_per_l = liquidity_amounts(
        1.0, sqrt_p, tick_to_sqrt_price(tick_lower), tick_to_sqrt_price(tick_upper)
    )
    if outcome_is_token0:
        outcome_per_l, collateral_per_l = a0_per_l, a1_per_l
    else:
        outcome_per_l, collateral_per_l = a1_per_l, a0_per_l

    cost_per_l = outcome_per_l + collateral_per_l * collateral_rate
    if cost_per_l <= 0:
        raise ValidationError(f"Range {prob_low}-{prob_high} needs no tokens per unit of liquidity")

    liquidity = budget / cost_per_l
    outcome_needed = liquidity * outcome_per_l
    collateral_needed = liquidity * collateral_per_l
    amount0, amount1 = (outcome_needed, collateral_needed) if outcome_is_token0 else (collateral_needed, outcome_needed)

    return LiquidityQuote(
        liquidity=liquidity,
        outcome_amount=outcome_needed,
        collateral_amount=collateral_needed,
        amount0=amount0,
        amount1=amount1,
        tick_lower=tick_lower,
        tick_upper=tick_upper,
        sqrt_price=sqrt_p,
        outcome_is_token0=outcome_is_token0,
    )
