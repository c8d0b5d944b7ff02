"""DEX adapters: pool lookup, position parsing, mint / swap call shapes."""

from dataclasses import replace

import pytest

from chains import ALGEBRA, UNISWAP_V3
from dex_adapter import (
    TRANSFER_TOPIC,
    AlgebraAdapter,
    MintParams,
    UniswapV3Adapter,
    get_dex_adapter,
)
from errors import PoolNotFoundError, ValidationError
from tests.fakes import OUTCOME_HIGH, OUTCOME_LOW, TEST_ADDRESS, make_fake_client

ZERO = "0x0000000000000000000000000000000000000000"
POOL = "0x00000000000000000000000000000000000000aa"


def _topic(value: int) -> str:
    return "0x" + format(value, "064x")


def _mint_params():
    return MintParams(
        token0=OUTCOME_LOW, token1=OUTCOME_HIGH, tick_lower=-600, tick_upper=600,
        amount0_desired=10, amount1_desired=20, recipient=TEST_ADDRESS, deadline=123,
    )


@pytest.fixture
def algebra(gnosis):
    return get_dex_adapter(make_fake_client(gnosis))


@pytest.fixture
def uniswap(mainnet):
    return get_dex_adapter(make_fake_client(mainnet))


@pytest.fixture
def uniswap02(base):
    return get_dex_adapter(make_fake_client(base))


class TestSelection:
    def test_family_picks_adapter(self, algebra, uniswap):
        assert isinstance(algebra, AlgebraAdapter) and algebra.family == ALGEBRA
        assert isinstance(uniswap, UniswapV3Adapter) and uniswap.family == UNISWAP_V3

    def test_unknown_family(self, gnosis):
        dex = replace(gnosis.dex, family="curve")
        with pytest.raises(ValidationError, match="Unsupported DEX"):
            get_dex_adapter(make_fake_client(gnosis), dex)

    def test_uniswap_requires_fee(self, mainnet):
        with pytest.raises(ValidationError, match="fee tier"):
            UniswapV3Adapter(make_fake_client(mainnet), replace(mainnet.dex, fee=None))


class TestPools:
    def test_algebra_lookup_sorted_without_fee(self, algebra):
        algebra.factory.functions.poolByPair.return_value.call.return_value = POOL
        assert algebra.find_pool(OUTCOME_HIGH, OUTCOME_LOW) == POOL
        args = algebra.factory.functions.poolByPair.call_args.args
        assert [a.lower() for a in args] == [OUTCOME_LOW, OUTCOME_HIGH]

    def test_uniswap_lookup_passes_fee(self, uniswap, mainnet):
        uniswap.factory.functions.getPool.return_value.call.return_value = POOL
        assert uniswap.find_pool(OUTCOME_LOW, OUTCOME_HIGH) == POOL
        assert uniswap.factory.functions.getPool.call_args.args[2] == mainnet.dex.fee

    def test_uniswap_lookup_in_other_fee_tier(self, uniswap):
        uniswap.factory.functions.getPool.return_value.call.return_value = POOL
        assert uniswap.find_pool(OUTCOME_LOW, OUTCOME_HIGH, fee=500) == POOL
        assert uniswap.factory.functions.getPool.call_args.args[2] == 500

    def test_missing_pool_names_requested_fee(self, uniswap):
        uniswap.factory.functions.getPool.return_value.call.return_value = ZERO
        with pytest.raises(PoolNotFoundError, match="fee 500"):
            uniswap.compute_pool_address(OUTCOME_LOW, OUTCOME_HIGH, fee=500)

    def test_algebra_ignores_fee(self, algebra):
        algebra.factory.functions.poolByPair.return_value.call.return_value = POOL
        assert algebra.find_pool(OUTCOME_LOW, OUTCOME_HIGH, fee=500) == POOL
        assert len(algebra.factory.functions.poolByPair.call_args.args) == 2

    def test_zero_address_is_no_pool(self, algebra):
        algebra.factory.functions.poolByPair.return_value.call.return_value = ZERO
        assert algebra.find_pool(OUTCOME_LOW, OUTCOME_HIGH) is None
        with pytest.raises(PoolNotFoundError) as exc:
            algebra.compute_pool_address(OUTCOME_HIGH, OUTCOME_LOW)
        assert exc.value.token0 == OUTCOME_LOW

    def test_read_pool_state_algebra(self, algebra):
        pool = algebra.client.contract(POOL, None)
        pool.functions.globalState.return_value.call.return_value = (2 ** 96, -120, 0, 0, 0, 0, True)
        state = algebra.read_pool_state(POOL)
        assert state.tick == -120
        assert state.price == pytest.approx(1.0)

    def test_read_pool_state_uniswap(self, uniswap):
        pool = uniswap.client.contract(POOL, None)
        pool.functions.slot0.return_value.call.return_value = (2 ** 95, 77, 0, 0, 0, 0, True)
        state = uniswap.read_pool_state(POOL)
        assert state.tick == 77
        assert state.price == pytest.approx(0.25)

    def test_ensure_pool_uses_sorted_tokens(self, uniswap, mainnet):
        uniswap.client.transact.return_value = (POOL, {})
        assert uniswap.ensure_pool_initialized(OUTCOME_HIGH, OUTCOME_LOW, 2 ** 96) == POOL
        args = uniswap.position_manager.functions.createAndInitializePoolIfNecessary.call_args.args
        assert args[0].lower() == OUTCOME_LOW
        assert args[2] == mainnet.dex.fee
        assert args[3] == 2 ** 96


class TestPositions:
    def test_parse_algebra_layout(self, algebra):
        raw = (0, ZERO, OUTCOME_LOW, OUTCOME_HIGH, -600, 600, 5000, 0, 0, 3, 4)
        algebra.position_manager.functions.positions.return_value.call.return_value = raw
        info = algebra.read_position(9)
        assert (info.token_id, info.tick_lower, info.tick_upper, info.liquidity) == (9, -600, 600, 5000)
        assert (info.tokens_owed0, info.tokens_owed1, info.fee) == (3, 4, None)

    def test_parse_uniswap_layout(self, uniswap):
        raw = (0, ZERO, OUTCOME_LOW, OUTCOME_HIGH, 3000, -600, 600, 5000, 0, 0, 3, 4)
        uniswap.position_manager.functions.positions.return_value.call.return_value = raw
        info = uniswap.read_position(9)
        assert (info.fee, info.tick_lower, info.tick_upper, info.liquidity) == (3000, -600, 600, 5000)

    def test_list_positions_enumerates_owner(self, algebra):
        nft = algebra.position_manager.functions
        nft.balanceOf.return_value.call.return_value = 2
        nft.tokenOfOwnerByIndex.return_value.call.side_effect = [11, 12]
        nft.positions.return_value.call.return_value = (0, ZERO, OUTCOME_LOW, OUTCOME_HIGH, -60, 60, 1, 0, 0, 0, 0)
        assert [p.token_id for p in algebra.list_positions(TEST_ADDRESS)] == [11, 12]

    def test_mint_tuple_lengths(self, algebra, uniswap):
        assert len(algebra._mint_tuple(_mint_params())) == 10
        assert len(uniswap._mint_tuple(_mint_params())) == 11

    def test_mint_takes_id_from_transfer_log(self, algebra):
        manager = algebra.position_manager.address
        receipt = {
            "transactionHash": b"\x12" * 32,
            "logs": [
                {"address": OUTCOME_LOW, "topics": [TRANSFER_TOPIC, _topic(0), _topic(int(TEST_ADDRESS, 16)), _topic(1)]},
                {"address": manager, "topics": [TRANSFER_TOPIC, _topic(0), _topic(int(TEST_ADDRESS, 16)), _topic(42)]},
            ],
        }
        algebra.client.transact.return_value = ((41, 1000, 10, 20), receipt)
        result = algebra.mint_position(_mint_params())
        assert result.token_id == 42
        assert (result.liquidity, result.amount0, result.amount1) == (1000, 10, 20)
        assert result.tx_hash == "0x" + "12" * 32

    def test_mint_falls_back_to_simulated_id(self, algebra):
        algebra.client.transact.return_value = ((41, 1000, 10, 20), {"logs": []})
        assert algebra.mint_position(_mint_params()).token_id == 41

    def test_decrease_collect_burn(self, algebra):
        algebra.client.transact.return_value = ((5, 6), {"status": 1})
        assert algebra.decrease_liquidity(3, 100) == (5, 6)
        params = algebra.position_manager.functions.decreaseLiquidity.call_args.args[0]
        assert params[:4] == (3, 100, 0, 0)

        assert algebra.collect(3) == (5, 6)
        collect = algebra.position_manager.functions.collect.call_args.args[0]
        assert collect[0] == 3 and collect[2] == collect[3] == 2 ** 128 - 1

        algebra.burn(3)
        algebra.position_manager.functions.burn.assert_called_once_with(3)


class TestSwaps:
    def test_algebra_swap_has_deadline_no_fee(self, algebra):
        algebra.client.transact.return_value = (99, {})
        assert algebra.swap_exact_in(OUTCOME_LOW, OUTCOME_HIGH, 10, 9) == 99
        params = algebra.router.functions.exactInputSingle.call_args.args[0]
        assert len(params) == 7
        assert params[4:] == (10, 9, 0)

    def test_uniswap_router_with_deadline(self, uniswap, mainnet):
        uniswap.client.transact.return_value = (99, {})
        uniswap.swap_exact_in(OUTCOME_LOW, OUTCOME_HIGH, 10, 9)
        params = uniswap.router.functions.exactInputSingle.call_args.args[0]
        assert len(params) == 8
        assert params[2] == mainnet.dex.fee

    def test_router02_has_no_deadline(self, uniswap02, base):
        assert base.dex.router_deadline is False
        uniswap02.client.transact.return_value = (99, {})
        uniswap02.swap_exact_in(OUTCOME_LOW, OUTCOME_HIGH, 10, 9)
        params = uniswap02.router.functions.exactInputSingle.call_args.args[0]
        assert len(params) == 7
        assert params[4:] == (10, 9, 0)
