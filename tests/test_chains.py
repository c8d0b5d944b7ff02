"""Chain registry lookups."""

import pytest

import config
from chains import ALGEBRA, UNISWAP_V3, ChainRegistry
from errors import ValidationError


class TestRegistry:
    def test_supported_chains(self, registry):
        assert set(registry.names()) == {"gnosis", "mainnet", "optimism", "base"}

    def test_default_chain(self, registry):
        assert registry.get().name == config.DEFAULT_CHAIN

    def test_unknown_chain(self, registry):
        with pytest.raises(ValidationError, match="Unknown chain: polygon"):
            registry.get("polygon")

    def test_by_chain_id_accepts_str_or_int(self, registry):
        assert registry.by_chain_id(8453).name == "base"
        assert registry.by_chain_id("100").name == "gnosis"
        assert registry.by_chain_id(137) is None

    def test_membership_and_iteration(self, registry):
        assert "optimism" in registry
        assert "polygon" not in registry
        assert {c.chain_id for c in registry} == {100, 1, 10, 8453}

    def test_env_default_chain(self, monkeypatch):
        monkeypatch.setattr(config, "CHAIN", "base")
        assert ChainRegistry().get().name == "base"


class TestChainTable:
    def test_only_gnosis_farms(self, registry):
        assert [c.name for c in registry if c.farming is not None] == ["gnosis"]

    def test_gnosis_is_algebra_without_fee(self, gnosis):
        assert gnosis.dex.family == ALGEBRA
        assert gnosis.dex.fee is None
        assert gnosis.collateral.adapter

    def test_uniswap_chains_carry_fee(self, registry):
        for chain in registry:
            if chain.dex.family == UNISWAP_V3:
                assert chain.dex.fee

    def test_bridged_collateral_priced_on_mainnet(self, base, registry):
        assert base.collateral.rate_source.chain == "mainnet"
        assert registry.get("optimism").collateral.rate_source is not None
        assert registry.get("mainnet").collateral.rate_source is None

    def test_configs_are_read_only(self, gnosis):
        with pytest.raises(TypeError):
            gnosis.contracts["MARKET_FACTORY"] = "0x0"
