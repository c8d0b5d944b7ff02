"""
SeerOps - DEX Adapter
One interface over the two concentrated-liquidity position managers Seer pools
live on:

  AlgebraAdapter    SwaprV3 on gnosis. Pools keyed by (token0, token1),
                    state from globalState(), no fee field anywhere.
  UniswapV3Adapter  Uniswap V3 elsewhere. Pools keyed by (token0, token1, fee),
                    state from slot0(), fee carried in create / mint / swap and
                    in the positions() tuple.

Callers pick the adapter with get_dex_adapter() and never look at the family.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from web3 import Web3

import config
from chain_client import ChainClient
from chains import ALGEBRA, UNISWAP_V3, DexConfig
from errors import PoolNotFoundError, ValidationError
from seer_abi import (
    ALGEBRA_FACTORY_ABI,
    ALGEBRA_NFT_MANAGER_ABI,
    ALGEBRA_POOL_ABI,
    ALGEBRA_SWAP_ROUTER_ABI,
    UNISWAP_V3_FACTORY_ABI,
    UNISWAP_V3_NFT_MANAGER_ABI,
    UNISWAP_V3_POOL_ABI,
    UNISWAP_V3_SWAP_ROUTER02_ABI,
    UNISWAP_V3_SWAP_ROUTER_ABI,
)
from tick_math import sort_tokens, x96_to_price

# keccak("Transfer(address,address,uint256)")
TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"


@dataclass(frozen=True)
class MintParams:
    token0: str
    token1: str
    tick_lower: int
    tick_upper: int
    amount0_desired: int
    amount1_desired: int
    recipient: str
    deadline: int
    amount0_min: int = 0
    amount1_min: int = 0


@dataclass(frozen=True)
class MintResult:
    token_id: int
    liquidity: int
    amount0: int
    amount1: int
    tx_hash: str = ""


@dataclass(frozen=True)
class PoolState:
    sqrt_price_x96: int
    tick: int

    @property
    def price(self) -> float:
        """token1 per token0."""
        return x96_to_price(self.sqrt_price_x96)

    @property
    def sqrt_price(self) -> float:
        return self.sqrt_price_x96 / 2 ** 96


@dataclass(frozen=True)
class PositionInfo:
    token_id: int
    token0: str
    token1: str
    tick_lower: int
    tick_upper: int
    liquidity: int
    tokens_owed0: int = 0
    tokens_owed1: int = 0
    fee: int | None = None


def _deadline() -> int:
    return int(time.time()) + config.TX_DEADLINE_SECONDS


def _topic_hex(topic) -> str:
    return (topic if isinstance(topic, str) else Web3.to_hex(topic)).lower()


class DexAdapter:
    """Shared flow. Subclasses only shape the family-specific calls."""

    family = None
    nft_abi = None
    factory_abi = None
    pool_abi = None

    def __init__(self, client: ChainClient, dex: DexConfig):
        self.client = client
        self.dex = dex
        self.tag = f"[DEX:{client.chain.name}]"
        self.position_manager = client.contract(dex.position_manager, self.nft_abi)
        self.factory = client.contract(dex.factory, self.factory_abi)
        self.router = client.contract(dex.router, self._router_abi())

    # ─── Family hooks ───

    def _router_abi(self) -> list:
        raise NotImplementedError

    def _pool_lookup(self, token0: str, token1: str, fee: int = None):
        raise NotImplementedError

    def _create_pool_call(self, token0: str, token1: str, sqrt_price_x96: int):
        raise NotImplementedError

    def _mint_tuple(self, p: MintParams) -> tuple:
        raise NotImplementedError

    def _read_slot(self, pool) -> tuple:
        raise NotImplementedError

    def _swap_tuple(self, token_in: str, token_out: str, amount_in: int, min_amount_out: int) -> tuple:
        raise NotImplementedError

    def _parse_position(self, token_id: int, raw) -> PositionInfo:
        raise NotImplementedError

    # ─── Pools ───

    def find_pool(self, token_a: str, token_b: str, fee: int = None) -> str | None:
        """Pool address for the pair, or None when the factory has none.

        `fee` picks a fee tier other than the configured one (fee-tiered family only).
        """
        token0, token1 = sort_tokens(token_a, token_b)
        pool = self._pool_lookup(Web3.to_checksum_address(token0), Web3.to_checksum_address(token1), fee).call()
        if not pool or int(pool, 16) == 0:
            return None
        return pool

    def compute_pool_address(self, token_a: str, token_b: str, fee: int = None) -> str:
        pool = self.find_pool(token_a, token_b, fee)
        if pool is None:
            token0, token1 = sort_tokens(token_a, token_b)
            fee = self.pool_fee(fee)
            detail = f"fee {fee}" if fee is not None else ""
            raise PoolNotFoundError(token0, token1, detail)
        return pool

    def pool_fee(self, fee: int = None) -> int | None:
        return None

    def ensure_pool_initialized(self, token0: str, token1: str, sqrt_price_x96: int) -> str:
        """Create and initialize the pool if absent. An existing pool keeps its price."""
        token0, token1 = sort_tokens(token0, token1)
        tx_func = self._create_pool_call(
            Web3.to_checksum_address(token0), Web3.to_checksum_address(token1), sqrt_price_x96
        )
        pool, _ = self.client.transact(tx_func, label="createAndInitializePoolIfNecessary")
        print(f"{self.tag} Pool: {pool}")
        return pool

    def read_pool_state(self, pool_address: str) -> PoolState:
        pool = self.client.contract(pool_address, self.pool_abi)
        sqrt_price_x96, tick = self._read_slot(pool)
        return PoolState(sqrt_price_x96=sqrt_price_x96, tick=tick)

    # ─── Positions ───

    def mint_position(self, params: MintParams) -> MintResult:
        tx_func = self.position_manager.functions.mint(self._mint_tuple(params))
        result, receipt = self.client.transact(tx_func, gas=config.DEFAULT_GAS_LIMIT, label="mint")
        token_id, liquidity, amount0, amount1 = result

        # The simulated id can go stale if another mint lands first; the receipt is authoritative.
        minted = self._minted_token_id(receipt, params.recipient)
        if minted is not None:
            token_id = minted
        return MintResult(
            token_id=token_id,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1,
            tx_hash=Web3.to_hex(receipt["transactionHash"]) if receipt.get("transactionHash") else "",
        )

    def _minted_token_id(self, receipt, recipient: str) -> int | None:
        manager = self.position_manager.address.lower()
        for log in receipt.get("logs", []):
            topics = log.get("topics", [])
            if len(topics) < 4 or str(log.get("address", "")).lower() != manager:
                continue
            if _topic_hex(topics[0]) != TRANSFER_TOPIC:
                continue
            # Transfer(from=0, to=recipient, tokenId)
            if int(_topic_hex(topics[1]), 16) != 0:
                continue
            if int(_topic_hex(topics[2]), 16) != int(recipient, 16):
                continue
            return int(_topic_hex(topics[3]), 16)
        return None

    def read_position(self, token_id: int) -> PositionInfo:
        raw = self.position_manager.functions.positions(int(token_id)).call()
        return self._parse_position(int(token_id), raw)

    def list_positions(self, owner: str) -> list:
        owner = Web3.to_checksum_address(owner)
        count = self.position_manager.functions.balanceOf(owner).call()
        positions = []
        for i in range(count):
            token_id = self.position_manager.functions.tokenOfOwnerByIndex(owner, i).call()
            positions.append(self.read_position(token_id))
        return positions

    def decrease_liquidity(self, token_id: int, liquidity: int) -> tuple:
        params = (int(token_id), int(liquidity), 0, 0, _deadline())
        tx_func = self.position_manager.functions.decreaseLiquidity(params)
        amounts, _ = self.client.transact(tx_func, label="decreaseLiquidity")
        return tuple(amounts)

    def collect(self, token_id: int, recipient: str = None) -> tuple:
        params = (
            int(token_id),
            Web3.to_checksum_address(recipient or self.client.address),
            config.MAX_UINT128,
            config.MAX_UINT128,
        )
        tx_func = self.position_manager.functions.collect(params)
        amounts, _ = self.client.transact(tx_func, label="collect")
        return tuple(amounts)

    def burn(self, token_id: int) -> dict:
        tx_func = self.position_manager.functions.burn(int(token_id))
        _, receipt = self.client.transact(tx_func, label="burn")
        return receipt

    # ─── Swaps ───

    def swap_exact_in(self, token_in: str, token_out: str, amount_in: int, min_amount_out: int) -> int:
        """exactInputSingle through the router. Returns the simulated amount out."""
        params = self._swap_tuple(
            Web3.to_checksum_address(token_in), Web3.to_checksum_address(token_out), amount_in, min_amount_out
        )
        tx_func = self.router.functions.exactInputSingle(params)
        amount_out, _ = self.client.transact(tx_func, label="exactInputSingle")
        return amount_out


class AlgebraAdapter(DexAdapter):
    family = ALGEBRA
    nft_abi = ALGEBRA_NFT_MANAGER_ABI
    factory_abi = ALGEBRA_FACTORY_ABI
    pool_abi = ALGEBRA_POOL_ABI

    def _router_abi(self) -> list:
        return ALGEBRA_SWAP_ROUTER_ABI

    def _pool_lookup(self, token0, token1, fee=None):
        return self.factory.functions.poolByPair(token0, token1)

    def _create_pool_call(self, token0, token1, sqrt_price_x96):
        return self.position_manager.functions.createAndInitializePoolIfNecessary(token0, token1, sqrt_price_x96)

    def _mint_tuple(self, p):
        return (
            Web3.to_checksum_address(p.token0),
            Web3.to_checksum_address(p.token1),
            p.tick_lower,
            p.tick_upper,
            p.amount0_desired,
            p.amount1_desired,
            p.amount0_min,
            p.amount1_min,
            Web3.to_checksum_address(p.recipient),
            p.deadline,
        )

    def _read_slot(self, pool):
        state = pool.functions.globalState().call()
        return state[0], state[1]

    def _swap_tuple(self, token_in, token_out, amount_in, min_amount_out):
        return (token_in, token_out, self.client.address, _deadline(), amount_in, min_amount_out, 0)

    def _parse_position(self, token_id, raw):
        # (nonce, operator, token0, token1, tickLower, tickUpper, liquidity, fg0, fg1, owed0, owed1)
        return PositionInfo(
            token_id=token_id,
            token0=raw[2],
            token1=raw[3],
            tick_lower=raw[4],
            tick_upper=raw[5],
            liquidity=raw[6],
            tokens_owed0=raw[9],
            tokens_owed1=raw[10],
        )


class UniswapV3Adapter(DexAdapter):
    family = UNISWAP_V3
    nft_abi = UNISWAP_V3_NFT_MANAGER_ABI
    factory_abi = UNISWAP_V3_FACTORY_ABI
    pool_abi = UNISWAP_V3_POOL_ABI

    def __init__(self, client: ChainClient, dex: DexConfig):
        if dex.fee is None:
            raise ValidationError(f"{client.chain.name}: Uniswap V3 needs a fee tier in the chain config")
        super().__init__(client, dex)

    def _router_abi(self) -> list:
        return UNISWAP_V3_SWAP_ROUTER_ABI if self.dex.router_deadline else UNISWAP_V3_SWAP_ROUTER02_ABI

    def pool_fee(self, fee=None):
        return self.dex.fee if fee is None else fee

    def _pool_lookup(self, token0, token1, fee=None):
        return self.factory.functions.getPool(token0, token1, self.pool_fee(fee))

    def _create_pool_call(self, token0, token1, sqrt_price_x96):
        return self.position_manager.functions.createAndInitializePoolIfNecessary(
            token0, token1, self.dex.fee, sqrt_price_x96
        )

    def _mint_tuple(self, p):
        return (
            Web3.to_checksum_address(p.token0),
            Web3.to_checksum_address(p.token1),
            self.dex.fee,
            p.tick_lower,
            p.tick_upper,
            p.amount0_desired,
            p.amount1_desired,
            p.amount0_min,
            p.amount1_min,
            Web3.to_checksum_address(p.recipient),
            p.deadline,
        )

    def _read_slot(self, pool):
        slot0 = pool.functions.slot0().call()
        return slot0[0], slot0[1]

    def _swap_tuple(self, token_in, token_out, amount_in, min_amount_out):
        if self.dex.router_deadline:
            return (token_in, token_out, self.dex.fee, self.client.address, _deadline(), amount_in, min_amount_out, 0)
        return (token_in, token_out, self.dex.fee, self.client.address, amount_in, min_amount_out, 0)

    def _parse_position(self, token_id, raw):
        # (nonce, operator, token0, token1, fee, tickLower, tickUpper, liquidity, fg0, fg1, owed0, owed1)
        return PositionInfo(
            token_id=token_id,
            token0=raw[2],
            token1=raw[3],
            fee=raw[4],
            tick_lower=raw[5],
            tick_upper=raw[6],
            liquidity=raw[7],
            tokens_owed0=raw[10],
            tokens_owed1=raw[11],
        )


ADAPTERS = {
    ALGEBRA: AlgebraAdapter,
    UNISWAP_V3: UniswapV3Adapter,
}


def get_dex_adapter(client: ChainClient, dex: DexConfig = None) -> DexAdapter:
    dex = dex or client.chain.dex
    adapter_cls = ADAPTERS.get(dex.family)
    if adapter_cls is None:
        raise ValidationError(f"Unsupported DEX type: {dex.family}")
    return adapter_cls(client, dex)
