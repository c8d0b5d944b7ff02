"""Wallet and read-only API scripts."""

import json
from argparse import Namespace
from unittest.mock import MagicMock, patch

import pytest

import approve_router
import check_balance
import config
import get_airdrop_data
import get_positions
import search_markets
import setup_wallet
from errors import ApiError, ValidationError
from tests.fakes import TEST_ADDRESS, TEST_KEY, make_fake_client


class TestSetupWallet:
    def test_generate_writes_key_without_printing_it(self, tmp_path, capsys):
        env_file = tmp_path / "openclaw" / ".env"
        assert setup_wallet.generate_wallet(str(env_file)) == 0
        content = env_file.read_text()
        key = setup_wallet.KEY_LINE.search(content).group(1)
        assert len(key) == 66
        out = capsys.readouterr().out
        assert key not in out
        assert "Address: 0x" in out

    def test_generate_refuses_existing_key(self, tmp_path, capsys):
        env_file = tmp_path / ".env"
        env_file.write_text("OTHER=1\nPRIVATE_KEY=0xabc\n")
        assert setup_wallet.generate_wallet(str(env_file)) == 1
        assert env_file.read_text() == "OTHER=1\nPRIVATE_KEY=0xabc\n"

    def test_generate_refuses_when_env_var_set(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PRIVATE_KEY", TEST_KEY)
        env_file = tmp_path / ".env"
        assert setup_wallet.generate_wallet(str(env_file)) == 1
        assert not env_file.exists()

    def test_find_key_prefers_env(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text(f"PRIVATE_KEY={TEST_KEY}\n")
        assert setup_wallet.find_key(str(env_file)) == (TEST_KEY, True)
        monkeypatch.setattr(config, "PRIVATE_KEY", "0x" + "11" * 32)
        assert setup_wallet.find_key(str(env_file)) == ("0x" + "11" * 32, False)
        monkeypatch.setattr(config, "PRIVATE_KEY", "")
        assert setup_wallet.find_key(str(tmp_path / "none")) == (None, False)

    def test_check_without_key(self, tmp_path, capsys):
        assert setup_wallet.check_wallet(str(tmp_path / ".env")) == 1
        assert "No PRIVATE_KEY found." in capsys.readouterr().out

    def test_check_reads_every_chain(self, tmp_path, monkeypatch, capsys, registry):
        monkeypatch.setattr(config, "PRIVATE_KEY", TEST_KEY)
        factory = MagicMock()
        factory.return_value.native_balance.return_value = 0
        factory.return_value.token_balance.return_value = 10 ** 18
        assert setup_wallet.check_wallet(str(tmp_path / ".env"), client_factory=factory) == 0
        out = capsys.readouterr().out
        assert f"Wallet: {TEST_ADDRESS}" in out
        assert out.count("(needs gas!)") == len(registry.names())
        assert "(no funds)" not in out
        for call in factory.call_args_list:
            assert call.kwargs == {"private_key": ""}

    def test_rpc_error_is_reported_per_chain(self, gnosis):
        factory = MagicMock(side_effect=OSError("connection refused"))
        balances = setup_wallet.read_chain_balances(gnosis, TEST_ADDRESS, factory)
        assert balances == {"error": "connection refused"}
        assert setup_wallet.format_chain_balances(gnosis, balances) == ["  gnosis: RPC error (connection refused)"]


class TestCheckBalance:
    def test_native_and_collateral(self, gnosis, capsys):
        client = make_fake_client(gnosis)
        client.native_balance.return_value = 2 * 10 ** 18
        client.token_balance.return_value = 5 * 10 ** 17
        with patch("check_balance.make_client", return_value=client):
            check_balance.check_balance(Namespace(address=TEST_ADDRESS, token=None, chain=None))
        out = capsys.readouterr().out
        assert "xDAI:       2" in out
        assert "sDAI:       0.5" in out
        client.token_balance.assert_called_once_with(gnosis.collateral.address, TEST_ADDRESS)

    def test_single_token(self, gnosis, capsys):
        client = make_fake_client(gnosis)
        client.token_balance.return_value = 3 * 10 ** 18
        token = "0x0000000000000000000000000000000000000001"
        with patch("check_balance.make_client", return_value=client):
            check_balance.check_balance(Namespace(address=TEST_ADDRESS, token=token, chain=None))
        assert "Balance: 3" in capsys.readouterr().out
        client.native_balance.assert_not_called()

    def test_needs_address_or_key(self):
        with pytest.raises(ValidationError):
            check_balance.check_balance(Namespace(address=None, token=None, chain=None))


class TestApproveRouter:
    def test_threshold(self):
        assert approve_router.needs_approval(0)
        assert approve_router.needs_approval(config.APPROVAL_THRESHOLD - 1)
        assert not approve_router.needs_approval(config.APPROVAL_THRESHOLD)
        assert not approve_router.needs_approval(5, threshold=5)

    def test_top_up_approves_max(self, gnosis):
        client = make_fake_client(gnosis)
        client.allowance.return_value = 0
        client.transact.return_value = (True, {"transactionHash": b"\x01" * 32})
        assert approve_router.top_up(client, "Router", gnosis.contracts["GNOSIS_ROUTER"])
        erc20 = client.contract(gnosis.collateral.address, None)
        spender, amount = erc20.functions.approve.call_args.args
        assert spender.lower() == gnosis.contracts["GNOSIS_ROUTER"].lower()
        assert amount == config.MAX_UINT256

    def test_sufficient_allowance_sends_nothing(self, gnosis):
        client = make_fake_client(gnosis)
        client.allowance.return_value = config.MAX_UINT256
        with patch("approve_router.make_client", return_value=client):
            approve_router.approve_router(Namespace(chain=None))
        client.transact.assert_not_called()
        spenders = [c.args[1] for c in client.allowance.call_args_list]
        assert spenders == [gnosis.contracts["GNOSIS_ROUTER"], gnosis.dex.position_manager]


class TestAirdrop:
    def test_fmt(self):
        assert get_airdrop_data.fmt(1234.5) == "1,234.5"
        assert get_airdrop_data.fmt("1000") == "1,000"
        assert get_airdrop_data.fmt(0) == "0"
        assert get_airdrop_data.fmt(None) == "N/A"
        assert get_airdrop_data.fmt("soon") == "soon"

    def test_show_uses_explicit_address(self, capsys):
        api = MagicMock()
        api.get_airdrop_data.return_value = {"totalAllocation": 1500, "currentWeekAllocation": 12.25}
        get_airdrop_data.show_airdrop(Namespace(address=TEST_ADDRESS, raw=False), api=api)
        api.get_airdrop_data.assert_called_once_with(TEST_ADDRESS)
        out = capsys.readouterr().out
        assert "1,500 SEER" in out
        assert "12.25 SEER" in out
        assert "Monthly estimate:        N/A SEER" in out


class TestOutcomePositions:
    POSITIONS = [
        {"marketId": "0xm1", "marketName": "Rain?", "outcome": "Yes", "tokenBalance": 2.5, "tokenId": "0xa",
         "marketStatus": "open", "chain": "gnosis"},
        {"marketId": "0xm1", "marketName": "Rain?", "outcome": "No", "tokenBalance": 1, "tokenId": "0xb",
         "marketStatus": "open", "chain": "gnosis"},
        {"marketId": "0xm1", "outcome": "Invalid result", "isInvalidOutcome": True, "tokenBalance": 9,
         "chain": "gnosis"},
        {"marketId": "0xm2", "marketName": "Snow?", "outcome": "Yes", "tokenBalance": 4, "tokenId": "0xc",
         "marketStatus": "closed", "redeemedPrice": 1, "chain": "base"},
    ]

    def test_group_by_market(self):
        markets = get_positions.group_by_market(self.POSITIONS)
        assert [m["marketId"] for m in markets] == ["0xm1", "0xm2"]
        assert [h["outcome"] for h in markets[0]["holdings"]] == ["Yes", "No"]

    def test_format_market(self):
        first, second = get_positions.group_by_market(self.POSITIONS)
        assert "Holdings: Yes: 2.5000  |  No: 1.0000" in get_positions.format_market(first)[2]
        assert get_positions.format_market(second)[-1] == "  Redeemable at: 1"

    def test_fetch_skips_failing_chain(self, registry, capsys):
        api = MagicMock()
        api.get_portfolio.side_effect = lambda account, chain_id: (
            [{"marketId": "0xm"}] if chain_id == 100 else []
        )
        positions = get_positions.fetch_positions(api, TEST_ADDRESS, [registry.get("gnosis"), registry.get("base")])
        assert positions == [{"marketId": "0xm", "chain": "gnosis"}]

        api.get_portfolio.side_effect = ApiError("503")
        assert get_positions.fetch_positions(api, TEST_ADDRESS, [registry.get("gnosis")]) == []
        assert "error fetching gnosis portfolio" in capsys.readouterr().err

    def test_requires_key(self):
        with pytest.raises(ValidationError, match="PRIVATE_KEY"):
            get_positions.show_positions(Namespace(chain=None, raw=False), api=MagicMock())

    def test_show_one_chain(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "PRIVATE_KEY", TEST_KEY)
        api = MagicMock()
        api.get_portfolio.return_value = [p for p in self.POSITIONS if p["chain"] == "gnosis"]
        get_positions.show_positions(Namespace(chain="gnosis", raw=False), api=api)
        api.get_portfolio.assert_called_once_with(TEST_ADDRESS, 100)
        assert "1 market(s) with positions" in capsys.readouterr().out


class TestSearchMarkets:
    def test_body_from_filters(self):
        args = search_markets.parse_args(["--query", "bitcoin", "--status", "open", "--sort", "liquidity",
                                          "--verified", "--limit", "5"])
        body = search_markets.build_search_body(args, chain_id=100)
        assert body == {
            "marketName": "bitcoin",
            "chainsList": ["100"],
            "marketStatusList": ["open"],
            "verificationStatusList": ["verified"],
            "orderBy": "liquidityUSD",
            "orderDirection": "desc",
            "limit": 5,
            "page": 1,
        }

    def test_id_lookup_overrides_name(self):
        args = search_markets.parse_args(["--query", "x", "--id", "0x00000000000000000000000000000000000000cc"])
        body = search_markets.build_search_body(args)
        assert body["marketIds"] == ["0x00000000000000000000000000000000000000cc"]
        assert body["marketName"] == ""
        assert body["limit"] == 1

    def test_status_label(self):
        assert search_markets.market_status_label({"payoutReported": True, "openingTs": 10 ** 10}, now=0) == "resolved"
        assert search_markets.market_status_label({"openingTs": 200}, now=100) == "not_open"
        assert search_markets.market_status_label({"openingTs": 50}, now=100) == "open"

    def test_format_market(self):
        market = {
            "id": "0xm", "marketName": "Rain?", "chainId": 100, "outcomes": ["Yes", "No", "Invalid"],
            "odds": [61.25, 38.75, None], "liquidityUSD": "1234.5", "incentive": 12,
            "verification": {"status": "verified"}, "openingTs": 1_780_272_000,
        }
        lines = search_markets.format_market(market, now=0)
        assert lines[1] == "  gnosis | 0xm"
        assert lines[2] == f"  {config.SEER_APP_URL}/markets/100/0xm"
        assert lines[3] == "  Odds: Yes: 61.2%  |  No: 38.8%"
        assert lines[4] == "  Liquidity: $1234.50 | Status: not_open | Rewards: 12.0 SEER/day"
        assert "  Verification: verified" in lines
        assert lines[-1] == "  Opens: 2026-06-01"

    def test_unknown_chain_and_missing_odds(self):
        lines = search_markets.format_market({"id": "0xm", "chainId": 5, "outcomes": ["A"]}, now=0)
        assert lines[1] == "  chain-5 | 0xm"
        assert lines[3] == "  Odds: A: N/A"

    def test_mine_requires_key(self):
        with pytest.raises(ValidationError, match="--mine requires PRIVATE_KEY"):
            search_markets.search(search_markets.parse_args(["--mine"]), api=MagicMock())

    def test_mine_uses_wallet(self, monkeypatch):
        monkeypatch.setattr(config, "PRIVATE_KEY", TEST_KEY)
        api = MagicMock()
        api.search_markets.return_value = {"markets": [], "count": 0}
        search_markets.search(search_markets.parse_args(["--mine"]), api=api)
        assert api.search_markets.call_args.args[0]["creator"] == TEST_ADDRESS

    def test_bad_paging(self):
        with pytest.raises(ValidationError):
            search_markets.search(search_markets.parse_args(["--limit", "0"]), api=MagicMock())

    def test_header_and_raw(self, capsys):
        api = MagicMock()
        api.search_markets.return_value = {"markets": [{"id": "0xm", "chainId": 100, "outcomes": []}],
                                           "count": 31, "pages": 4}
        search_markets.search(search_markets.parse_args(["--page", "2"]), api=api)
        assert "Found 31 market(s) (showing 1, page 2/4)" in capsys.readouterr().out

        search_markets.search(search_markets.parse_args(["--raw"]), api=api)
        assert json.loads(capsys.readouterr().out)["count"] == 31
