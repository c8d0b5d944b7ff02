"""Seer API client, with requests patched out."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from errors import ApiError
from seer_api import SeerAPI, outcome_name_for_token


def _response(payload=None, status=200, reason="OK", text=""):
    resp = MagicMock()
    resp.ok = status < 400
    resp.status_code = status
    resp.reason = reason
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def api():
    return SeerAPI(base_url="https://api.test/fn/", subgraph_url="https://api.test/subgraph", timeout=3)


class TestMarketSearch:
    def test_posts_body(self, api):
        with patch("seer_api.requests.request", return_value=_response({"markets": [{"id": "0x1"}], "count": 1})) as req:
            data = api.search_markets({"limit": 5})
        assert data["markets"] == [{"id": "0x1"}]
        req.assert_called_once_with("POST", "https://api.test/fn/markets-search", timeout=3, json={"limit": 5})

    def test_missing_markets_defaults_empty(self, api):
        with patch("seer_api.requests.request", return_value=_response({"count": 0})):
            assert api.search_markets({})["markets"] == []

    def test_http_error(self, api):
        with patch("seer_api.requests.request", return_value=_response(status=502, reason="Bad Gateway", text="upstream")):
            with pytest.raises(ApiError, match="502 Bad Gateway - upstream"):
                api.search_markets({})

    def test_connection_error(self, api):
        with patch("seer_api.requests.request", side_effect=requests.ConnectionError("down")):
            with pytest.raises(ApiError, match="request failed"):
                api.search_markets({})

    def test_non_json(self, api):
        with patch("seer_api.requests.request", return_value=_response(ValueError("bad"))):
            with pytest.raises(ApiError, match="not JSON"):
                api.search_markets({})

    def test_get_market_filters_by_id(self, api):
        with patch("seer_api.requests.request", return_value=_response({"markets": []})) as req:
            assert api.get_market("0xABC", 100) is None
        body = req.call_args.kwargs["json"]
        assert body == {"marketIds": ["0xabc"], "chainsList": ["100"], "limit": 1}


class TestPortfolio:
    def test_get_portfolio(self, api):
        with patch("seer_api.requests.request", return_value=_response([{"tokenId": "0x1"}])) as req:
            assert api.get_portfolio("0xme", 100) == [{"tokenId": "0x1"}]
        assert req.call_args.kwargs["params"] == {"account": "0xme", "chainId": "100"}

    def test_portfolio_shape_checked(self, api):
        with patch("seer_api.requests.request", return_value=_response({"error": "x"})):
            with pytest.raises(ApiError, match="unexpected response shape"):
                api.get_portfolio("0xme", 100)


class TestSubgraph:
    def test_returns_data(self, api):
        with patch("seer_api.requests.post", return_value=_response({"data": {"deposit": None}})) as post:
            assert api.query_subgraph("algebrafarming", 100, "query {}") == {"deposit": None}
        assert post.call_args.kwargs["params"] == {"_subgraph": "algebrafarming", "_chainId": "100"}

    def test_graphql_errors(self, api):
        with patch("seer_api.requests.post", return_value=_response({"errors": [{"message": "boom"}]})):
            with pytest.raises(ApiError, match="query error"):
                api.query_subgraph("algebrafarming", 100, "query {}")


class TestOutcomeName:
    def test_matches_case_insensitively(self):
        market = {"outcomes": ["Yes", "No", "Invalid result"], "wrappedTokens": ["0xAA", "0xbb", "0xcc"]}
        assert outcome_name_for_token(market, "0xaa") == "Yes"
        assert outcome_name_for_token(market, "0xBB") == "No"
        assert outcome_name_for_token(market, "0xdd") is None
