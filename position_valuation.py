"""
SeerOps - Position Valuation
Splits an LP position into outcome and collateral amounts at the pool's
current tick.
"""

from __future__ import annotations

from dataclasses import dataclass

import config
from errors import ValidationError
from tick_math import reserves_for_liquidity


@dataclass(frozen=True)
class PositionValue:
    outcome_amount: float
    collateral_amount: float


def value_position(tick_lower: int, tick_upper: int, liquidity: float, current_tick: int,
                   collateral_is_token0: bool, sqrt_price: float = None) -> PositionValue:
    """Amounts owned by a position, labelled by which leg is collateral."""
    if liquidity == 0:
        return PositionValue(0.0, 0.0)
    amount0, amount1 = reserves_for_liquidity(liquidity, tick_lower, tick_upper, current_tick, sqrt_price)
    if collateral_is_token0:
        return PositionValue(outcome_amount=amount1, collateral_amount=amount0)
    return PositionValue(outcome_amount=amount0, collateral_amount=amount1)


def value_live_position(adapter, position, collateral_address: str, decimals: int = 18,
                        outcome_decimals: int = None) -> PositionValue:
    """Value an on-chain position (a dex_adapter.PositionInfo) in human units.

    The pool is looked up in the position's own fee tier when it has one.
    `decimals` scales the collateral leg, `outcome_decimals` the outcome leg
    (default config.OUTCOME_DECIMALS).

    Zero liquidity returns zeros without touching the pool. A missing pool
    raises PoolNotFoundError: the position cannot be valued, which is not the
    same as being worth nothing.
    """
    if position.liquidity == 0:
        return PositionValue(0.0, 0.0)

    collateral = collateral_address.lower()
    if collateral not in (position.token0.lower(), position.token1.lower()):
        raise ValidationError(f"Position #{position.token_id} is not paired with collateral {collateral_address}")

    pool = adapter.compute_pool_address(position.token0, position.token1, fee=position.fee)
    state = adapter.read_pool_state(pool)
    raw = value_position(
        position.tick_lower,
        position.tick_upper,
        position.liquidity,
        state.tick,
        collateral_is_token0=position.token0.lower() == collateral,
        sqrt_price=state.sqrt_price,
    )
    if outcome_decimals is None:
        outcome_decimals = config.OUTCOME_DECIMALS
    return PositionValue(raw.outcome_amount / 10 ** outcome_decimals, raw.collateral_amount / 10 ** decimals)
