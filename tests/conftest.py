"""Shared fixtures. Nothing here touches a network."""

import pytest

import config
from chains import get_registry
from lp_store import LpStore
from tests.fakes import make_fake_client


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No ambient key, chain override or tracker path leaks into a test."""
    monkeypatch.setattr(config, "PRIVATE_KEY", "")
    monkeypatch.setattr(config, "CHAIN", "")
    monkeypatch.setattr(config, "RPC_URL", "")
    monkeypatch.setattr(config, "LP_TRACKER_FILE", str(tmp_path / "lp-positions.json"))
    monkeypatch.delenv("PRIVATE_KEY", raising=False)


@pytest.fixture
def registry():
    return get_registry()


@pytest.fixture
def gnosis(registry):
    return registry.get("gnosis")


@pytest.fixture
def base(registry):
    return registry.get("base")


@pytest.fixture
def mainnet(registry):
    return registry.get("mainnet")


@pytest.fixture
def fake_client_factory():
    return make_fake_client


@pytest.fixture
def store(tmp_path):
    return LpStore(str(tmp_path / "tracker" / "lp-positions.json"))
