"""
SeerOps - Chain Registry
Static per-chain table: native currency, collateral, Seer contracts and the
DEX descriptor. Built once into frozen configs and handed to the components
that need it.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

import config
from errors import ValidationError

# DEX families. The strings are persisted as `dexType` in the LP tracker.
ALGEBRA = "swaprv3"
UNISWAP_V3 = "uniswapv3"

CHAIN_CONFIGS = {
    "gnosis": {
        "chain_id": 100,
        "rpc_url": "https://rpc.gnosis.gateway.fm",
        "native_symbol": "xDAI",
        "contracts": {
            "MARKET_FACTORY": "0x83183DA839Ce8228E31Ae41222EaD9EDBb5cDcf1",
            "GNOSIS_ROUTER": "0xeC9048b59b3467415b1a38F63416407eA0c70fB8",
            "REALITY_PROXY": "0xc260ADfAC11f97c001dC143d2a4F45b98e0f2D6C",
            "MARKET_VIEW": "0x95493F3e3F151eD9ee9338a4Fc1f49c00890F59C",
            "CONDITIONAL_TOKENS": "0xCeAfDD6bc0bEF976fdCd1112955828E00543c0Ce",
            "REALITY_ETH": "0xE78996A233895bE74a66F451f1019cA9734205cc",
        },
        "collateral": {
            "name": "sDAI",
            "symbol": "sDAI",
            "address": "0xaf204776c7245bf4147c2612bf6e5972ee483701",
            "adapter": "0xD499b51fcFc66bd31248ef4b28d656d67E591A94",  # xDAI <-> sDAI
            "decimals": 18,
            "rate_source": None,
        },
        "dex": {
            "family": ALGEBRA,
            "router": "0x2d3F3f0C9fAeF4A8e2d900a3AAe2E7c8f36A98B9",
            "position_manager": "0x91fd594c46d8b01e62dbdebed2401dde01817834",
            "factory": "0xA0864cCA6E114013AB0e27cbd5B6f4c8947da766",
            "fee": None,  # Algebra has no fee tiers
            "tick_spacing": config.DEFAULT_TICK_SPACING,
        },
        "farming": {
            "farming_center": "0xde51ddf1ae7d5bbd7bf1a0e40aaa1f6c12579106",
            "eternal_farming": "0x607BbfD4CEbd869AaD04331F8a2AD0C3C396674b",
        },
    },
    "mainnet": {
        "chain_id": 1,
        "rpc_url": "https://eth.llamarpc.com",
        "native_symbol": "ETH",
        "contracts": {
            "MARKET_FACTORY": "0x1F728c2fD6a3008935c1446a965a313E657b7904",
            "GNOSIS_ROUTER": "0x886Ef0A78faBbAE942F1dA1791A8ed02a5aF8BC6",
            "REALITY_PROXY": "0xC72f738e331b6B7A5d77661277074BB60Ca0Ca9E",
            "MARKET_VIEW": "0xB2aB74afe47e6f9D8c392FA15b139Ac02684771a",
            "CONDITIONAL_TOKENS": "0xC59b0e4De5F1248C1140964E0fF287B192407E0C",
            "REALITY_ETH": "0x5b7dd1e86623548af054a4985f7fc8ccbb554e2c",
        },
        "collateral": {
            "name": "sDAI",
            "symbol": "sDAI",
            "address": "0x83F20F44975D03b1b09e64809B757c47f942BEeA",
            "adapter": None,  # sDAI is the ERC-4626 vault itself
            "decimals": 18,
            "rate_source": None,
        },
        "dex": {
            "family": UNISWAP_V3,
            "router": "0xE592427A0AEce92De3Edee1F18E0157C05861564",
            "position_manager": "0xC36442b4a4522E871399CD717aBDD847Ab11FE88",
            "factory": "0x1F98431c8aD98523631AE4a59f267346ea31F984",
            "fee": 3000,
            "tick_spacing": config.DEFAULT_TICK_SPACING,
        },
        "farming": None,
    },
    "optimism": {
        "chain_id": 10,
        "rpc_url": "https://mainnet.optimism.io",
        "native_symbol": "ETH",
        "contracts": {
            "MARKET_FACTORY": "0x886Ef0A78faBbAE942F1dA1791A8ed02a5aF8BC6",
            "GNOSIS_ROUTER": "0x179d8F8c811B8C759c33809dbc6c5ceDc62D05DD",
            "REALITY_PROXY": "0xfE8bF5140F00de6F75BAFa3Ca0f4ebf2084A46B2",
            "MARKET_VIEW": "0x44921b4c7510Fb306d8E58cF3894fA2bc8a79F00",
            "CONDITIONAL_TOKENS": "0x8bdC504dC3A05310059c1c67E0A2667309D27B93",
            "REALITY_ETH": "0x0eF940F7f053a2eF5D6578841072488aF0c7d89A",
        },
        "collateral": {
            "name": "sUSDS",
            "symbol": "sUSDS",
            "address": "0xb5b2dc7fd34c249f4be7fb1fcea07950784229e0",
            "adapter": None,
            "decimals": 18,
            "rate_source": {"chain": "mainnet", "address": "0xa3931d71877c0e7a3148cb7eb4463524fec27fbd"},
        },
        "dex": {
            "family": UNISWAP_V3,
            "router": "0x68b3465833fb72A70ecDF485E0e4C7bD8665Fc45",  # SwapRouter02
            "router_deadline": False,
            "position_manager": "0xC36442b4a4522E871399CD717aBDD847Ab11FE88",
            "factory": "0x1F98431c8aD98523631AE4a59f267346ea31F984",
            "fee": 100,
            "tick_spacing": config.DEFAULT_TICK_SPACING,
        },
        "farming": None,
    },
    "base": {
        "chain_id": 8453,
        "rpc_url": "https://mainnet.base.org",
        "native_symbol": "ETH",
        "contracts": {
            "MARKET_FACTORY": "0x886Ef0A78faBbAE942F1dA1791A8ed02a5aF8BC6",
            "GNOSIS_ROUTER": "0x3124e97ebF4c9592A17d40E54623953Ff3c77a73",
            "REALITY_PROXY": "0xfE8bF5140F00de6F75BAFa3Ca0f4ebf2084A46B2",
            "MARKET_VIEW": "0x179d8F8c811B8C759c33809dbc6c5ceDc62D05DD",
            "CONDITIONAL_TOKENS": "0xAb797C4C6022A401c31543E316D3cd04c67a87fC",
            "REALITY_ETH": "0x2F39f464d16402Ca3D8527dA89617b73DE2F60e8",
        },
        "collateral": {
            "name": "sUSDS",
            "symbol": "SUSDS",
            "address": "0x5875eee11cf8398102fdad704c9e96607675467a",
            "adapter": None,
            "decimals": 18,
            "rate_source": {"chain": "mainnet", "address": "0xa3931d71877c0e7a3148cb7eb4463524fec27fbd"},
        },
        "dex": {
            "family": UNISWAP_V3,
            "router": "0x2626664c2603336E57B271c5C0b26F421741e481",  # SwapRouter02
            "router_deadline": False,
            "position_manager": "0x03a520b32C04BF3bEEf7BEb72E919cf822Ed34f1",
            "factory": "0x33128a8fC17869897dcE68Ed026d694621f6FDfD",
            "fee": 3000,
            "tick_spacing": config.DEFAULT_TICK_SPACING,
        },
        "farming": None,
    },
}


@dataclass(frozen=True)
class RateSource:
    chain: str
    address: str


@dataclass(frozen=True)
class CollateralConfig:
    name: str
    symbol: str
    address: str
    decimals: int
    adapter: str | None = None
    rate_source: RateSource | None = None


@dataclass(frozen=True)
class DexConfig:
    family: str
    router: str
    position_manager: str
    factory: str
    fee: int | None
    tick_spacing: int
    router_deadline: bool = True  # SwapRouter02 params carry no deadline


@dataclass(frozen=True)
class FarmingConfig:
    farming_center: str
    eternal_farming: str


@dataclass(frozen=True)
class ChainConfig:
    name: str
    chain_id: int
    rpc_url: str
    native_symbol: str
    contracts: MappingProxyType
    collateral: CollateralConfig
    dex: DexConfig
    farming: FarmingConfig | None = None


def _build_chain(name: str, raw: dict) -> ChainConfig:
    col = dict(raw["collateral"])
    rate_source = col.pop("rate_source", None)
    farming = raw.get("farming")
    return ChainConfig(
        name=name,
        chain_id=raw["chain_id"],
        rpc_url=raw["rpc_url"],
        native_symbol=raw["native_symbol"],
        contracts=MappingProxyType(dict(raw["contracts"])),
        collateral=CollateralConfig(
            rate_source=RateSource(**rate_source) if rate_source else None, **col
        ),
        dex=DexConfig(**raw["dex"]),
        farming=FarmingConfig(**farming) if farming else None,
    )


class ChainRegistry:
    """Read-only lookup of chain configs by name."""

    def __init__(self, table: dict = None, default_chain: str = None):
        table = CHAIN_CONFIGS if table is None else table
        self._chains = MappingProxyType({name: _build_chain(name, raw) for name, raw in table.items()})
        self.default_chain = default_chain or config.CHAIN or config.DEFAULT_CHAIN

    def names(self) -> list:
        return list(self._chains)

    def get(self, name: str = None) -> ChainConfig:
        chain = name or self.default_chain
        if chain not in self._chains:
            raise ValidationError(f"Unknown chain: {chain}. Supported: {', '.join(self._chains)}")
        return self._chains[chain]

    def by_chain_id(self, chain_id) -> ChainConfig | None:
        for cfg in self._chains.values():
            if str(cfg.chain_id) == str(chain_id):
                return cfg
        return None

    def __contains__(self, name) -> bool:
        return name in self._chains

    def __iter__(self):
        return iter(self._chains.values())


_REGISTRY = None


def get_registry() -> ChainRegistry:
    """Process-wide registry, built on first use."""
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = ChainRegistry()
    return _REGISTRY
