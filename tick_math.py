"""
SeerOps - Tick / Price Math
Conversions between probabilities, the base-1.0001 tick grid and sqrt prices,
plus the reserve formula shared by position sizing and position valuation.
No I/O.
"""

from __future__ import annotations

import math

TICK_BASE = 1.0001
Q96 = 2 ** 96
_LOG_BASE = math.log(TICK_BASE)


def nearest_tick(raw_tick: float, spacing: int) -> int:
    """Round a fractional tick to the nearest multiple of spacing. Halves go up."""
    return int(math.floor(raw_tick / spacing + 0.5)) * spacing


def price_to_tick(price: float, spacing: int = 1) -> int:
    """Nearest tick on the spacing grid for a token1/token0 price."""
    return nearest_tick(math.log(price) / _LOG_BASE, spacing)


def tick_to_price(tick: int) -> float:
    return TICK_BASE ** tick


def tick_to_sqrt_price(tick: int) -> float:
    return math.sqrt(TICK_BASE ** tick)


def sqrt_price_to_x96(sqrt_price: float) -> int:
    """On-chain Q64.96 encoding: floor(sqrtP * 2^96)."""
    return int(math.floor(sqrt_price * Q96))


def x96_to_sqrt_price(sqrt_price_x96: int) -> float:
    return sqrt_price_x96 / Q96


def x96_to_price(sqrt_price_x96: int) -> float:
    return (sqrt_price_x96 / Q96) ** 2


def liquidity_amounts(liquidity: float, sqrt_price: float, sqrt_pa: float, sqrt_pb: float) -> tuple:
    """(amount0, amount1) held by `liquidity` between sqrt_pa and sqrt_pb at sqrt_price."""
    if sqrt_price <= sqrt_pa:
        return liquidity * (1 / sqrt_pa - 1 / sqrt_pb), 0.0
    if sqrt_price >= sqrt_pb:
        return 0.0, liquidity * (sqrt_pb - sqrt_pa)
    return liquidity * (1 / sqrt_price - 1 / sqrt_pb), liquidity * (sqrt_price - sqrt_pa)


def reserves_for_liquidity(liquidity: float, tick_lower: int, tick_upper: int,
                           current_tick: int, sqrt_price: float = None) -> tuple:
    """Token amounts of a position, split on the pool's current tick.

    Below the range everything is token0, at or above tick_upper everything is
    token1. In range the pool's sqrt price is used when known, otherwise the
    sqrt price of current_tick.
    """
    sqrt_pa = tick_to_sqrt_price(tick_lower)
    sqrt_pb = tick_to_sqrt_price(tick_upper)

    if current_tick < tick_lower:
        return liquidity * (1 / sqrt_pa - 1 / sqrt_pb), 0.0
    if current_tick >= tick_upper:
        return 0.0, liquidity * (sqrt_pb - sqrt_pa)

    sqrt_p = sqrt_price if sqrt_price is not None else tick_to_sqrt_price(current_tick)
    # The pool price can sit a hair outside [sqrtPa, sqrtPb) while its tick is inside.
    sqrt_p = min(max(sqrt_p, sqrt_pa), sqrt_pb)
    return liquidity * (1 / sqrt_p - 1 / sqrt_pb), liquidity * (sqrt_p - sqrt_pa)


# ─── Token ordering ───

def sort_tokens(token_a: str, token_b: str) -> tuple:
    """Canonical (token0, token1): ascending by numeric address."""
    if int(token_a, 16) < int(token_b, 16):
        return token_a, token_b
    return token_b, token_a


def is_token0(token: str, other: str) -> bool:
    return int(token, 16) < int(other, 16)
