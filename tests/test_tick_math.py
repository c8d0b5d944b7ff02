"""Tick / price conversions and the reserve formula."""

import math

import pytest

from tick_math import (
    Q96,
    is_token0,
    liquidity_amounts,
    nearest_tick,
    price_to_tick,
    reserves_for_liquidity,
    sort_tokens,
    sqrt_price_to_x96,
    tick_to_price,
    tick_to_sqrt_price,
    x96_to_price,
)
from tests.fakes import OUTCOME_HIGH, OUTCOME_LOW


class TestPriceToTick:
    def test_price_one_is_tick_zero(self):
        assert price_to_tick(1.0) == 0
        assert price_to_tick(1.0, 60) == 0

    def test_snaps_to_spacing(self):
        for spacing in (1, 10, 60, 200):
            for p in (0.05, 0.2, 0.5, 0.8, 0.95, 3.0):
                assert price_to_tick(p, spacing) % spacing == 0

    def test_known_values(self):
        # ln(0.5) / ln(1.0001) = -6931.8 -> -6932 at spacing 1, -6960 at spacing 60
        assert price_to_tick(0.5) == -6932
        assert price_to_tick(0.5, 60) == -6960
        assert price_to_tick(2.0) == 6932

    def test_halves_round_up(self):
        assert nearest_tick(-0.5, 1) == 0
        assert nearest_tick(0.5, 1) == 1
        assert nearest_tick(30, 60) == 60
        assert nearest_tick(-30, 60) == 0

    def test_inverse_price_is_negated_tick(self):
        for p in (0.2, 0.37, 0.8):
            assert abs(price_to_tick(1 / p) + price_to_tick(p)) <= 1

    @pytest.mark.parametrize("prob", [0.01, 0.2, 0.5, 0.77, 0.99])
    def test_round_trip_within_one_step(self, prob):
        spacing = 60
        tick = price_to_tick(prob, spacing)
        assert abs(price_to_tick(tick_to_price(tick), spacing) - tick) <= spacing

    def test_rejects_non_positive_price(self):
        with pytest.raises(ValueError):
            price_to_tick(0.0)


class TestSqrtPriceEncoding:
    def test_tick_zero_is_q96(self):
        assert sqrt_price_to_x96(tick_to_sqrt_price(0)) == Q96

    def test_x96_round_trip(self):
        x96 = sqrt_price_to_x96(math.sqrt(0.25))
        assert x96 == Q96 // 2
        assert x96_to_price(x96) == pytest.approx(0.25)

    def test_encoding_floors(self):
        assert sqrt_price_to_x96(1.5) == int(1.5 * Q96)


class TestReserves:
    def test_below_range_is_all_token0(self):
        amount0, amount1 = reserves_for_liquidity(1000, -1000, 1000, -2000)
        assert amount1 == 0
        assert amount0 > 0

    def test_above_range_is_all_token1(self):
        amount0, amount1 = reserves_for_liquidity(1000, -1000, 1000, 1000)
        assert amount0 == 0
        assert amount1 > 0

    def test_in_range_holds_both(self):
        amount0, amount1 = reserves_for_liquidity(1000, -1000, 1000, 0)
        assert amount0 > 0 and amount1 > 0
        # symmetric range around tick 0 holds the same of each side
        assert amount0 == pytest.approx(amount1)

    def test_continuous_at_lower_bound(self):
        just_below = reserves_for_liquidity(1000, -1000, 1000, -1001)
        at_bound = reserves_for_liquidity(1000, -1000, 1000, -1000)
        assert at_bound[1] == pytest.approx(0.0, abs=1e-9)
        assert at_bound[0] == pytest.approx(just_below[0])

    def test_converges_at_upper_bound(self):
        inside = reserves_for_liquidity(1000, -1000, 1000, 999)
        above = reserves_for_liquidity(1000, -1000, 1000, 1000)
        assert inside[0] == pytest.approx(0.0, abs=0.1)
        assert inside[1] == pytest.approx(above[1], rel=1e-3)

    def test_pool_sqrt_price_is_clamped_to_range(self):
        sqrt_pa = tick_to_sqrt_price(-1000)
        clamped = reserves_for_liquidity(1000, -1000, 1000, -1000, sqrt_price=sqrt_pa * 0.999)
        assert clamped[1] == 0.0
        assert clamped[0] == pytest.approx(reserves_for_liquidity(1000, -1000, 1000, -2000)[0])

    def test_liquidity_amounts_matches_tick_form(self):
        sqrt_p = tick_to_sqrt_price(200)
        by_sqrt = liquidity_amounts(500, sqrt_p, tick_to_sqrt_price(-600), tick_to_sqrt_price(600))
        by_tick = reserves_for_liquidity(500, -600, 600, 200)
        assert by_sqrt == pytest.approx(by_tick)


class TestTokenOrdering:
    def test_sort_is_symmetric(self):
        assert sort_tokens(OUTCOME_LOW, OUTCOME_HIGH) == sort_tokens(OUTCOME_HIGH, OUTCOME_LOW)
        assert sort_tokens(OUTCOME_HIGH, OUTCOME_LOW) == (OUTCOME_LOW, OUTCOME_HIGH)

    def test_ordering_ignores_checksum_case(self):
        lower = "0xabcdef0000000000000000000000000000000000"
        upper = "0xABCDEF0000000000000000000000000000000000"
        other = "0x1000000000000000000000000000000000000000"
        assert is_token0(lower, other) == is_token0(upper, other)
        assert is_token0(other, lower)

    def test_is_token0(self):
        assert is_token0(OUTCOME_LOW, OUTCOME_HIGH)
        assert not is_token0(OUTCOME_HIGH, OUTCOME_LOW)
